# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

import logging

import pytest

from zkattest.circuits import CircuitId
from zkattest.constants import BASE_FIELD_MODULUS, FIELD_MODULUS
from zkattest.errors import CalldataLengthMismatch, InvalidInput
from zkattest.logger_utils import setup_logging
from zkattest.models import Proof, VerifierCallData, parse_public_signals


def test_proof_accepts_base_field_coordinates():
    """Coordinates live in the base field, which is larger than the scalar field."""
    x = FIELD_MODULUS + 1
    proof = Proof.from_snarkjs({"pi_a": [str(x), "2", "1"], "pi_b": [["1", "2"], ["3", "4"]], "pi_c": ["5", "6"]})
    assert proof.pi_a == (x, 2)


def test_proof_rejects_out_of_range():
    with pytest.raises(InvalidInput):
        Proof.from_snarkjs(
            {"pi_a": [str(BASE_FIELD_MODULUS), "2"], "pi_b": [["1", "2"], ["3", "4"]], "pi_c": ["5", "6"]}
        )


def test_proof_missing_field():
    with pytest.raises(InvalidInput, match="pi_c"):
        Proof.from_snarkjs({"pi_a": ["1", "2"], "pi_b": [["1", "2"], ["3", "4"]]})


def test_to_snarkjs_restores_projective_layout():
    proof = Proof(pi_a=(1, 2), pi_b=((3, 4), (5, 6)), pi_c=(7, 8))
    assert proof.to_snarkjs()["pi_b"] == [["3", "4"], ["5", "6"], ["1", "0"]]
    assert Proof.from_snarkjs(proof.to_snarkjs()) == proof


def test_parse_public_signals_rejects_string():
    with pytest.raises(InvalidInput):
        parse_public_signals("123")


@pytest.mark.parametrize("circuit,n", [(CircuitId.HASH, 3), (CircuitId.AGE, 4), (CircuitId.FHIR, 21)])
def test_call_data_enforces_length(circuit, n):
    VerifierCallData(circuit, (1, 2), ((3, 4), (5, 6)), (7, 8), (0,) * n)
    with pytest.raises(CalldataLengthMismatch):
        VerifierCallData(circuit, (1, 2), ((3, 4), (5, 6)), (7, 8), (0,) * (n + 1))


def test_setup_logging_is_idempotent():
    name = "zkattest-test-logger"
    logger = setup_logging(logging.DEBUG, name=name)
    setup_logging(logging.INFO, name=name)

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False


if __name__ == "__main__":
    pytest.main()
