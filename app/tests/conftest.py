# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# tests/conftest.py

import shutil
from dataclasses import dataclass
from pathlib import Path

import pytest
from py_ecc.optimized_bn128 import G1, G2, curve_order, multiply

from zkattest.artifacts import ArtifactResolver
from zkattest.circuits import CircuitId
from zkattest.config import Settings, env_flag
from zkattest.errors import ArtifactNotFound
from zkattest.files import save_json
from zkattest.models import Proof
from zkattest.vk_convert import g1_to_json, g2_to_json

# fixed trapdoor for the synthetic instance; any non-zero scalars work
ALPHA, BETA, GAMMA, DELTA = 3, 5, 7, 11
PROOF_X, PROOF_Y = 17, 19
IC_BASE = 13


@dataclass(frozen=True)
class SyntheticGroth16:
    """A verification key and a proof that satisfy the Groth16 equation."""

    vk: dict
    proof: Proof
    public_signals: tuple[int, ...]


def make_groth16(public_signals) -> SyntheticGroth16:
    """
    Build a valid Groth16 instance over BN254 without a circuit.

    With alpha = a*G1, beta = b*G2, gamma = g*G2, delta = d*G2, IC[i] = k_i*G1,
    A = x*G1 and B = y*G2, choosing

        c = (x*y - a*b - vk_x*g) / d   (mod r),  vk_x = k_0 + sum(s_i * k_{i+1})

    makes e(A, B) == e(alpha, beta) * e(vk_x, gamma) * e(c*G1, delta).
    """
    r = curve_order
    signals = tuple(int(s) for s in public_signals)
    ks = [IC_BASE + i for i in range(len(signals) + 1)]

    vk_x = (ks[0] + sum(s * k for s, k in zip(signals, ks[1:]))) % r
    c = (PROOF_X * PROOF_Y - ALPHA * BETA - vk_x * GAMMA) * pow(DELTA, -1, r) % r

    vk = {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": len(signals),
        "vk_alpha_1": g1_to_json(multiply(G1, ALPHA)),
        "vk_beta_2": g2_to_json(multiply(G2, BETA)),
        "vk_gamma_2": g2_to_json(multiply(G2, GAMMA)),
        "vk_delta_2": g2_to_json(multiply(G2, DELTA)),
        "IC": [g1_to_json(multiply(G1, k)) for k in ks],
    }
    proof = Proof.from_snarkjs(
        {
            "pi_a": g1_to_json(multiply(G1, PROOF_X)),
            "pi_b": g2_to_json(multiply(G2, PROOF_Y)),
            "pi_c": g1_to_json(multiply(G1, c)),
        }
    )
    return SyntheticGroth16(vk=vk, proof=proof, public_signals=signals)


# hash circuit layout: [result, hash low, hash high]
HASH_SIGNALS = (1, 21663839004416932945382355908790599225266501822907887273280181166639835257320, 0)


@pytest.fixture(scope="session")
def synthetic_hash_proof() -> SyntheticGroth16:
    return make_groth16(HASH_SIGNALS)


@pytest.fixture
def circuits_dir(tmp_path, synthetic_hash_proof) -> Path:
    """A circuits directory holding the synthetic hash verification key."""
    root = tmp_path / "circuits"
    save_json(
        root / "hash-verifier" / "verification_key_HashVerifier.json", synthetic_hash_proof.vk
    )
    return root


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: needs compiled circuits and snarkjs (skipped when absent unless REQUIRE_ZKEY=1)",
    )


@pytest.fixture
def circuit_artifacts():
    """
    Resolve real compiled artifacts for a circuit.

    Missing artifacts or a missing snarkjs skip the test, or fail it when
    REQUIRE_ZKEY is set.
    """
    settings = Settings.from_env()
    resolver = ArtifactResolver.from_settings(settings)

    def missing(reason: str):
        if env_flag("REQUIRE_ZKEY"):
            pytest.fail(reason)
        pytest.skip(reason)

    def resolve(circuit: CircuitId):
        if shutil.which(settings.snarkjs[0]) is None:
            missing(f"snarkjs not found: {settings.snarkjs[0]}")
        try:
            artifacts = resolver.resolve(circuit)
            resolver.resolve_verification_key(circuit)
        except ArtifactNotFound as e:
            missing(str(e))
        return settings, artifacts

    return resolve
