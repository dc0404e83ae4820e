# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# verify.py

"""
Local Groth16 verification over BN254 with py_ecc.

A proof is accepted when

    e(A, B) == e(alpha, beta) * e(vk_x, gamma) * e(C, delta)

where vk_x = IC[0] + sum(s_i * IC[i + 1]) over the public signals. The check
says nothing about what the signals mean; a proof whose result code reports
a failed attestation still verifies.
"""

import logging
from typing import Sequence

from py_ecc.optimized_bn128 import add, final_exponentiate, multiply, pairing

from zkattest.artifacts import ArtifactResolver, parse_circuit_id
from zkattest.circuits import CircuitId
from zkattest.errors import InvalidPoint
from zkattest.models import Proof
from zkattest.vk_convert import VerificationKey, g1_point, g2_point, load_verification_key

logger = logging.getLogger(__name__)


def verify_with_key(key: VerificationKey, proof: Proof, public_signals: Sequence[int]) -> bool:
    """
    Check a proof against an already-loaded verification key.

    Returns:
        True if the pairing equation holds. False if it does not, if a proof
        point is not on its curve, or if the signal count does not match the
        key.
    """
    if len(public_signals) != key.n_public:
        logger.warning(
            "public signal count mismatch: len(signals)=%d vs nPublic=%d",
            len(public_signals),
            key.n_public,
        )
        return False

    try:
        A = g1_point(proof.pi_a)
        B = g2_point(proof.pi_b)
        C = g1_point(proof.pi_c)
    except InvalidPoint as e:
        logger.warning("malformed proof: %s", e)
        return False

    vk_x = key.ic[0]
    for i, s in enumerate(public_signals):
        vk_x = add(vk_x, multiply(key.ic[i + 1], int(s)))

    left = pairing(B, A, final_exponentiate=False)
    right = pairing(key.beta, key.alpha, final_exponentiate=False)
    right *= pairing(key.gamma, vk_x, final_exponentiate=False)
    right *= pairing(key.delta, C, final_exponentiate=False)

    return final_exponentiate(left) == final_exponentiate(right)


def verify_proof(
    circuit: CircuitId | str,
    proof: Proof,
    public_signals: Sequence[int],
    resolver: ArtifactResolver | None = None,
) -> bool:
    """
    Verify a proof against the circuit's resolved verification key.

    Args:
        circuit: Circuit the proof claims to be for.
        proof: Proof in the prover's ordering.
        public_signals: Signals exactly as the prover emitted them.
        resolver: Artifact resolver; built from the environment when omitted.

    Returns:
        True if the proof is valid for this circuit's key.

    Raises:
        VerificationKeyMissing: If no verification key resolves.
        MalformedArtifact: If the verification key file is malformed.
    """
    circuit = parse_circuit_id(circuit)
    resolver = resolver or ArtifactResolver.from_settings()
    key = load_verification_key(resolver.resolve_verification_key(circuit))

    ok = verify_with_key(key, proof, public_signals)
    logger.info("%s proof %s local verification", circuit, "passed" if ok else "failed")
    return ok
