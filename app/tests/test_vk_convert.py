# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tests/test_vk_convert.py

import copy

import pytest
from py_ecc.optimized_bn128 import G1, G2, Z1, eq, multiply

from zkattest.errors import InvalidInput, InvalidPoint, MalformedArtifact
from zkattest.files import save_json
from zkattest.vk_convert import (
    g1_point,
    g1_to_json,
    g2_point,
    g2_to_json,
    load_verification_key,
    vk_from_snarkjs,
    vk_to_snarkjs,
)


class TestPoints:
    """Test point decoding."""

    def test_generator_g1(self):
        assert g1_to_json(G1) == ["1", "2", "1"]
        assert eq(g1_point(["1", "2", "1"]), G1)

    def test_generator_g2(self):
        coords = g2_to_json(G2)
        assert coords[2] == ["1", "0"]
        assert eq(g2_point(coords), G2)

    def test_infinity(self):
        assert eq(g1_point(["0", "1", "0"]), Z1)
        assert g1_to_json(Z1) == ["0", "1", "0"]

    def test_off_curve_g1(self):
        with pytest.raises(InvalidPoint):
            g1_point(["1", "3"])

    def test_swapped_g2_is_off_twist(self):
        (x0, x1), (y0, y1), _ = g2_to_json(multiply(G2, 5))
        with pytest.raises(InvalidPoint):
            g2_point([[x1, x0], [y1, y0]])

    def test_coordinate_out_of_range(self):
        with pytest.raises(InvalidPoint):
            g1_point([str(2**256), "2"])


class TestVkFromSnarkjs:
    """Test snarkjs verification key decoding."""

    def test_decodes_synthetic_key(self, synthetic_hash_proof):
        key = vk_from_snarkjs(synthetic_hash_proof.vk)

        assert key.n_public == 3
        assert len(key.ic) == 4
        assert eq(key.ic[0], multiply(G1, 13))

    def test_round_trip(self, synthetic_hash_proof):
        vk = synthetic_hash_proof.vk
        assert vk_to_snarkjs(vk_from_snarkjs(vk)) == vk

    def test_ic_length_mismatch(self, synthetic_hash_proof):
        vk = copy.deepcopy(synthetic_hash_proof.vk)
        vk["nPublic"] = 4
        with pytest.raises(MalformedArtifact, match="IC length"):
            vk_from_snarkjs(vk)

    def test_wrong_protocol(self, synthetic_hash_proof):
        vk = dict(synthetic_hash_proof.vk, protocol="plonk")
        with pytest.raises(MalformedArtifact):
            vk_from_snarkjs(vk)

    def test_wrong_curve(self, synthetic_hash_proof):
        vk = dict(synthetic_hash_proof.vk, curve="bls12381")
        with pytest.raises(MalformedArtifact):
            vk_from_snarkjs(vk)

    def test_missing_field(self, synthetic_hash_proof):
        vk = dict(synthetic_hash_proof.vk)
        del vk["vk_delta_2"]
        with pytest.raises(MalformedArtifact, match="vk_delta_2"):
            vk_from_snarkjs(vk)

    def test_key_problems_are_not_input_problems(self, synthetic_hash_proof):
        """A bad key is a configuration fault, never "cannot be proven"."""
        vk = dict(synthetic_hash_proof.vk, protocol="plonk")
        with pytest.raises(MalformedArtifact) as info:
            vk_from_snarkjs(vk)
        assert not isinstance(info.value, InvalidInput)

    def test_off_curve_point_in_key(self, synthetic_hash_proof):
        vk = copy.deepcopy(synthetic_hash_proof.vk)
        vk["vk_alpha_1"] = ["1", "3", "1"]
        with pytest.raises(MalformedArtifact, match="not on the BN254 curve"):
            vk_from_snarkjs(vk)

    def test_non_integer_n_public(self, synthetic_hash_proof):
        vk = dict(synthetic_hash_proof.vk, nPublic="three")
        with pytest.raises(MalformedArtifact, match="nPublic"):
            vk_from_snarkjs(vk)

    def test_load_from_file(self, tmp_path, synthetic_hash_proof):
        path = tmp_path / "verification_key.json"
        save_json(path, synthetic_hash_proof.vk)
        assert load_verification_key(path).n_public == 3

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / "verification_key.json"
        save_json(path, ["groth16"])
        with pytest.raises(MalformedArtifact, match="JSON object"):
            load_verification_key(path)


if __name__ == "__main__":
    pytest.main()
