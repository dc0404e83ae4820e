# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# models.py

"""
Value types shared by the prover, the converter and the verifiers.

Field elements are plain Python ints in [0, r). They are rendered as decimal
strings at JSON boundaries, which is what snarkjs reads and writes.
"""

from dataclasses import dataclass
from typing import Any, Sequence

from zkattest.circuits import CircuitId
from zkattest.constants import BASE_FIELD_MODULUS, FIELD_MODULUS
from zkattest.errors import CalldataLengthMismatch, InvalidInput

G1 = tuple[int, int]
G2 = tuple[tuple[int, int], tuple[int, int]]
PublicSignals = tuple[int, ...]


def to_field(value: Any, modulus: int = FIELD_MODULUS) -> int:
    """
    Parse a field element from an int or a decimal / 0x-hex string.

    Args:
        value: int, decimal string or 0x-prefixed hex string.
        modulus: Upper bound (exclusive), the scalar field order by default.

    Returns:
        The value as an int.

    Raises:
        InvalidInput: If the value is not an integer, is negative, or is not
            below `modulus`.
    """
    if isinstance(value, bool):
        raise InvalidInput(f"boolean is not a field element: {value!r}")
    if isinstance(value, int):
        n = value
    elif isinstance(value, str):
        s = value.strip().lower()
        try:
            n = int(s, 16) if s.startswith("0x") else int(s, 10)
        except ValueError:
            raise InvalidInput(f"not an integer: {value!r}") from None
    else:
        raise InvalidInput(f"unsupported field element type {type(value).__name__}")
    if n < 0 or n >= modulus:
        raise InvalidInput(f"value {n} is outside the field [0, {modulus})")
    return int(n)


def _pair(values: Sequence[Any], modulus: int) -> tuple[int, int]:
    if len(values) < 2:
        raise InvalidInput(f"expected a coordinate pair, got {list(values)!r}")
    return (to_field(values[0], modulus), to_field(values[1], modulus))


@dataclass(frozen=True)
class Proof:
    """A Groth16 proof with affine coordinates, in the prover's ordering."""

    pi_a: G1
    pi_b: G2
    pi_c: G1

    @classmethod
    def from_snarkjs(cls, proof: dict[str, Any]) -> "Proof":
        """
        Build a proof from snarkjs `proof.json`.

        snarkjs writes projective coordinates (`pi_a = [x, y, "1"]`,
        `pi_b = [[x0, x1], [y0, y1], ["1", "0"]]`); the trailing z coordinate
        is dropped.
        """
        q = BASE_FIELD_MODULUS
        try:
            pi_a, pi_b, pi_c = proof["pi_a"], proof["pi_b"], proof["pi_c"]
        except KeyError as e:
            raise InvalidInput(f"proof is missing {e.args[0]}") from None
        return cls(
            pi_a=_pair(pi_a, q),
            pi_b=(_pair(pi_b[0], q), _pair(pi_b[1], q)),
            pi_c=_pair(pi_c, q),
        )

    def to_snarkjs(self) -> dict[str, Any]:
        return {
            "pi_a": [str(self.pi_a[0]), str(self.pi_a[1]), "1"],
            "pi_b": [
                [str(self.pi_b[0][0]), str(self.pi_b[0][1])],
                [str(self.pi_b[1][0]), str(self.pi_b[1][1])],
                ["1", "0"],
            ],
            "pi_c": [str(self.pi_c[0]), str(self.pi_c[1]), "1"],
            "protocol": "groth16",
            "curve": "bn128",
        }


def parse_public_signals(signals: Sequence[Any]) -> PublicSignals:
    """Convert snarkjs `public.json` (a list of decimal strings) to ints."""
    if isinstance(signals, (str, bytes)) or not isinstance(signals, Sequence):
        raise InvalidInput("public signals must be a list")
    return tuple(to_field(s) for s in signals)


@dataclass(frozen=True)
class VerifierCallData:
    """
    The exact argument tuple of `verifyProof(a, b, c, input)`.

    `b` is already in EVM ordering (each G2 coordinate pair reversed relative
    to the prover's `pi_b`). `input` has exactly the verifier's fixed length.
    """

    circuit: CircuitId
    a: G1
    b: G2
    c: G1
    input: tuple[int, ...]

    def __post_init__(self):
        expected = self.circuit.public_input_count
        if len(self.input) != expected:
            raise CalldataLengthMismatch(self.circuit, expected, len(self.input))

    def as_args(self) -> tuple[list[int], list[list[int]], list[int], list[int]]:
        """Positional arguments for a contract call."""
        return (
            list(self.a),
            [list(self.b[0]), list(self.b[1])],
            list(self.c),
            list(self.input),
        )

    def to_json(self) -> dict[str, Any]:
        a, b, c, inputs = self.as_args()
        return {
            "circuit": self.circuit.value,
            "a": [str(v) for v in a],
            "b": [[str(v) for v in pair] for pair in b],
            "c": [str(v) for v in c],
            "input": [str(v) for v in inputs],
        }
