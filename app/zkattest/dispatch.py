# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# dispatch.py

"""
Route verifier call data to the matching on-chain verifier.

Each circuit has its own deployed verifier exposing

    verifyProof(uint256[2] a, uint256[2][2] b, uint256[2] c, uint256[N] input) -> bool

with N fixed per circuit. A `True` answer only means the proof is valid; the
attestation outcome is still in `input[0]`.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from eth_typing import ChecksumAddress
from web3 import Web3

from zkattest.artifacts import parse_circuit_id
from zkattest.circuits import CircuitId
from zkattest.errors import CalldataLengthMismatch
from zkattest.models import G1, G2

logger = logging.getLogger(__name__)


class VerifierDispatch(Protocol):
    def verify_age_proof(self, a: G1, b: G2, c: G1, input: tuple[int, ...]) -> bool: ...

    def verify_hash_proof(self, a: G1, b: G2, c: G1, input: tuple[int, ...]) -> bool: ...

    def verify_fhir_proof(self, a: G1, b: G2, c: G1, input: tuple[int, ...]) -> bool: ...


_METHODS = {
    CircuitId.AGE: "verify_age_proof",
    CircuitId.HASH: "verify_hash_proof",
    CircuitId.FHIR: "verify_fhir_proof",
}


def dispatch(verifier: VerifierDispatch, call_data) -> bool:
    """
    Send call data to the verifier method for its circuit.

    Raises:
        CalldataLengthMismatch: If `call_data.input` does not have the
            circuit's fixed length.
    """
    circuit = call_data.circuit
    expected = circuit.public_input_count
    if len(call_data.input) != expected:
        raise CalldataLengthMismatch(circuit, expected, len(call_data.input))

    method = getattr(verifier, _METHODS[circuit])
    ok = bool(method(call_data.a, call_data.b, call_data.c, tuple(call_data.input)))
    logger.info("%s verifier returned %s", circuit, ok)
    return ok


@dataclass
class StubVerifierDispatch:
    """
    In-process verifier that answers with configured booleans.

    Every call is recorded as `(circuit, a, b, c, input)` in `calls`.
    """

    age: bool = True
    hash: bool = True
    fhir: bool = True
    calls: list[tuple[CircuitId, G1, G2, G1, tuple[int, ...]]] = field(default_factory=list)

    def _record(self, circuit: CircuitId, a, b, c, input) -> None:
        self.calls.append((circuit, a, b, c, tuple(input)))

    def verify_age_proof(self, a, b, c, input) -> bool:
        self._record(CircuitId.AGE, a, b, c, input)
        return self.age

    def verify_hash_proof(self, a, b, c, input) -> bool:
        self._record(CircuitId.HASH, a, b, c, input)
        return self.hash

    def verify_fhir_proof(self, a, b, c, input) -> bool:
        self._record(CircuitId.FHIR, a, b, c, input)
        return self.fhir


def verifier_abi(n_inputs: int) -> list[dict[str, Any]]:
    """ABI of a snarkjs-generated Solidity verifier with `n_inputs` public inputs."""
    return [
        {
            "inputs": [
                {"internalType": "uint256[2]", "name": "_pA", "type": "uint256[2]"},
                {"internalType": "uint256[2][2]", "name": "_pB", "type": "uint256[2][2]"},
                {"internalType": "uint256[2]", "name": "_pC", "type": "uint256[2]"},
                {
                    "internalType": f"uint256[{n_inputs}]",
                    "name": "_pubSignals",
                    "type": f"uint256[{n_inputs}]",
                },
            ],
            "name": "verifyProof",
            "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
            "stateMutability": "view",
            "type": "function",
        }
    ]


class Web3VerifierDispatch:
    """
    Calls deployed verifier contracts through web3.py.

    Args:
        w3: Connected `Web3` instance.
        addresses: Verifier address per circuit; keys may be `CircuitId`s or
            any accepted circuit spelling. Circuits without an address raise
            `KeyError` when dispatched to.
    """

    def __init__(self, w3: Web3, addresses: Mapping[CircuitId | str, str]):
        self.w3 = w3
        self.addresses: dict[CircuitId, ChecksumAddress] = {
            parse_circuit_id(k): Web3.to_checksum_address(v) for k, v in addresses.items()
        }
        self._contracts: dict[CircuitId, Any] = {}

    def contract(self, circuit: CircuitId):
        if circuit not in self._contracts:
            self._contracts[circuit] = self.w3.eth.contract(
                address=self.addresses[circuit],
                abi=verifier_abi(circuit.public_input_count),
            )
        return self._contracts[circuit]

    def _call(self, circuit: CircuitId, a, b, c, input) -> bool:
        fn = self.contract(circuit).functions.verifyProof(
            list(a), [list(b[0]), list(b[1])], list(c), list(input)
        )
        return bool(fn.call())

    def verify_age_proof(self, a, b, c, input) -> bool:
        return self._call(CircuitId.AGE, a, b, c, input)

    def verify_hash_proof(self, a, b, c, input) -> bool:
        return self._call(CircuitId.HASH, a, b, c, input)

    def verify_fhir_proof(self, a, b, c, input) -> bool:
        return self._call(CircuitId.FHIR, a, b, c, input)
