# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# groth_convert.py

"""
Convert snarkjs Groth16 output to the argument tuple of an EVM verifier.

snarkjs outputs:
  - proof.json: {pi_a: [x, y, 1], pi_b: [[x0, x1], [y0, y1], [1, 0]], pi_c}
  - public.json: [s0, s1, ...] as decimal strings

The Solidity verifier expects:
  - verifyProof(uint256[2] a, uint256[2][2] b, uint256[2] c, uint256[N] input)
  - b with each G2 coordinate pair reversed: [[x1, x0], [y1, y0]]
  - input with exactly N entries (Hash 3, Age 4, FHIR 21)

The EVM pairing precompile reads an Fp2 element as (imaginary, real), while
snarkjs writes (real, imaginary); the swap is never optional.
"""

import logging
from typing import Any, Sequence

from zkattest.circuits import CircuitId
from zkattest.constants import BASE_FIELD_MODULUS
from zkattest.errors import CalldataLengthMismatch
from zkattest.models import G2, Proof, VerifierCallData, to_field

logger = logging.getLogger(__name__)

# a[2] + b[2][2] + c[2]
PROOF_SCALARS = 8


def swap_g2(pi_b: Sequence[Sequence[Any]]) -> G2:
    """
    Reverse each coordinate pair of a G2 point.

    Args:
        pi_b: `[[x0, x1], [y0, y1]]` as emitted by the prover. A trailing
            projective coordinate, if present, is ignored.

    Returns:
        `((x1, x0), (y1, y0))`
    """
    (x0, x1), (y0, y1) = pi_b[0][:2], pi_b[1][:2]
    return ((x1, x0), (y1, y0))


def normalize_inputs(
    values: Sequence[int], circuit: CircuitId, strict: bool = False
) -> tuple[int, ...]:
    """
    Fit public signals to the verifier's fixed input length.

    Shorter sequences are padded with 0 on the right, longer ones are
    truncated. Either adjustment is logged as a warning since it usually
    means the circuit and the deployed verifier disagree.

    Raises:
        CalldataLengthMismatch: If `strict` and the length differs.
    """
    expected = circuit.public_input_count
    values = tuple(values)
    if len(values) == expected:
        return values
    if strict:
        raise CalldataLengthMismatch(circuit, expected, len(values))
    if len(values) < expected:
        logger.warning(
            "%s: padding %d public signals with zeros to %d", circuit, len(values), expected
        )
        return values + (0,) * (expected - len(values))
    logger.warning(
        "%s: truncating %d public signals to %d", circuit, len(values), expected
    )
    return values[:expected]


def to_call_data(
    proof: Proof,
    public_signals: Sequence[int],
    circuit: CircuitId,
    strict: bool = False,
) -> VerifierCallData:
    """Build verifier call data from a structured proof and its signals."""
    return VerifierCallData(
        circuit=circuit,
        a=proof.pi_a,
        b=swap_g2(proof.pi_b),
        c=proof.pi_c,
        input=normalize_inputs(public_signals, circuit, strict),
    )


def _scalars(text: str) -> list[str]:
    cleaned = text
    for ch in "\"'[] \t\r\n":
        cleaned = cleaned.replace(ch, "")
    return [s for s in cleaned.split(",") if s]


def parse_calldata(
    text: str,
    circuit: CircuitId,
    prover_order: bool = False,
    strict: bool = False,
) -> VerifierCallData:
    """
    Parse a flattened calldata string into verifier call data.

    The string is what `snarkjs zkey export soliditycalldata` prints:

        ["0x..","0x.."],[["0x..","0x.."],["0x..","0x.."]],["0x..","0x.."],["0x..",...]

    Quotes, brackets and whitespace are stripped and the remainder split on
    commas; the first eight scalars are a, b and c, the tail is the input.
    snarkjs has already reversed the G2 pairs in this form, so `b` is taken
    as is unless `prover_order` says the text carries the prover's ordering.

    Args:
        text: Flattened calldata.
        circuit: Circuit whose verifier will receive the data.
        prover_order: Apply the G2 swap to the parsed `b`.
        strict: Reject an input tail of the wrong length instead of
            normalizing it.

    Raises:
        CalldataLengthMismatch: If fewer than eight scalars are present, or
            `strict` and the input length differs.
        InvalidInput: If a scalar is not a valid integer in range.
    """
    scalars = _scalars(text)
    if len(scalars) < PROOF_SCALARS:
        raise CalldataLengthMismatch(circuit, PROOF_SCALARS, len(scalars), what="proof")

    q = BASE_FIELD_MODULUS
    head = [to_field(s, q) for s in scalars[:PROOF_SCALARS]]
    a = (head[0], head[1])
    b = ((head[2], head[3]), (head[4], head[5]))
    c = (head[6], head[7])
    if prover_order:
        b = swap_g2(b)

    tail = [to_field(s) for s in scalars[PROOF_SCALARS:]]
    return VerifierCallData(
        circuit=circuit,
        a=a,
        b=b,
        c=c,
        input=normalize_inputs(tail, circuit, strict),
    )


def _p256(n: int) -> str:
    return f'"0x{n:064x}"'


def export_solidity_calldata(proof: Proof, public_signals: Sequence[int]) -> str:
    """
    Render a proof the way `snarkjs zkey export soliditycalldata` does.

    Signals are written as given, without normalization, so the output is
    byte-comparable with snarkjs for the same proof.
    """
    b = swap_g2(proof.pi_b)
    inputs = ",".join(_p256(s) for s in public_signals)
    return (
        f"[{_p256(proof.pi_a[0])}, {_p256(proof.pi_a[1])}],"
        f"[[{_p256(b[0][0])}, {_p256(b[0][1])}],[{_p256(b[1][0])}, {_p256(b[1][1])}]],"
        f"[{_p256(proof.pi_c[0])}, {_p256(proof.pi_c[1])}],"
        f"[{inputs}]"
    )
