# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# inputs.py

"""
Domain inputs for each circuit and their mapping to circuit signal names.

Every numeric value is rendered as a decimal string, which is what the
witness calculator reads from `input.json`.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar, Mapping, Sequence

from zkattest.circuits import CircuitId
from zkattest.constants import FHIR_RESOURCE_FIELDS, HASH_LIMBS, POSEIDON_INPUTS
from zkattest.errors import InvalidInput
from zkattest.models import to_field


class AgeVerificationType(IntEnum):
    SIMPLE_AGE = 1
    BIRTH_DATE = 2
    AGE_BRACKET = 3


class FhirResourceType(IntEnum):
    PATIENT = 1
    OBSERVATION = 2
    MEDICATION_REQUEST = 3
    CONDITION = 4
    PROCEDURE = 5
    ENCOUNTER = 6
    DIAGNOSTIC_REPORT = 7
    CARE_PLAN = 8


class FhirVerificationMode(IntEnum):
    RESOURCE_TYPE_ONLY = 1
    HASH_ONLY = 2
    FIELDS_ONLY = 3
    COMPLETE = 4


def _fields(values: Sequence[Any], length: int, name: str) -> tuple[int, ...]:
    if isinstance(values, (str, bytes)) or len(values) != length:
        raise InvalidInput(f"{name} must have exactly {length} values, got {values!r}")
    return tuple(to_field(v) for v in values)


def _decimal(values: Sequence[int]) -> list[str]:
    return [str(v) for v in values]


@dataclass(frozen=True)
class AgeInputs:
    """
    Age attestation.

    Dates are Unix timestamps in seconds, `threshold` is an age in seconds
    (18 years is `18 * SECONDS_PER_YEAR`).
    """

    circuit: ClassVar[CircuitId] = CircuitId.AGE

    birth_date: int
    current_date: int
    threshold: int
    verification_type: AgeVerificationType = AgeVerificationType.SIMPLE_AGE

    def __post_init__(self):
        object.__setattr__(self, "birth_date", to_field(self.birth_date))
        object.__setattr__(self, "current_date", to_field(self.current_date))
        object.__setattr__(self, "threshold", to_field(self.threshold))
        try:
            vt = AgeVerificationType(to_field(self.verification_type))
        except ValueError:
            raise InvalidInput(
                f"unsupported age verification type {self.verification_type!r}"
            ) from None
        object.__setattr__(self, "verification_type", vt)

    def to_circuit_input(self) -> dict[str, Any]:
        return {
            "birthDate": str(self.birth_date),
            "currentDate": str(self.current_date),
            "threshold": str(self.threshold),
            "verificationType": str(int(self.verification_type)),
        }


@dataclass(frozen=True)
class HashInputs:
    """Four data words and the expected Poseidon digest as (low, high)."""

    circuit: ClassVar[CircuitId] = CircuitId.HASH

    data: tuple[int, ...]
    expected_hash: tuple[int, int]

    def __post_init__(self):
        # zeros are allowed here: the circuit reports them as result code 2
        object.__setattr__(self, "data", _fields(self.data, POSEIDON_INPUTS, "data"))
        object.__setattr__(
            self, "expected_hash", _fields(self.expected_hash, HASH_LIMBS, "expectedHash")
        )

    def to_circuit_input(self) -> dict[str, Any]:
        return {
            "data": _decimal(self.data),
            "expectedHash": _decimal(self.expected_hash),
        }


@dataclass(frozen=True)
class FhirInputs:
    """A simplified FHIR resource flattened into eight field elements."""

    circuit: ClassVar[CircuitId] = CircuitId.FHIR

    resource_data: tuple[int, ...]
    resource_type: FhirResourceType | int
    expected_hash: tuple[int, int]
    verification_mode: FhirVerificationMode | int = FhirVerificationMode.RESOURCE_TYPE_ONLY

    def __post_init__(self):
        object.__setattr__(
            self,
            "resource_data",
            _fields(self.resource_data, FHIR_RESOURCE_FIELDS, "resourceData"),
        )
        object.__setattr__(self, "resource_type", to_field(self.resource_type))
        object.__setattr__(
            self, "expected_hash", _fields(self.expected_hash, HASH_LIMBS, "expectedHash")
        )
        # unsupported modes are the circuit's to report (result code 5)
        object.__setattr__(self, "verification_mode", to_field(self.verification_mode))

    def to_circuit_input(self) -> dict[str, Any]:
        return {
            "resourceData": _decimal(self.resource_data),
            "resourceType": str(self.resource_type),
            "expectedHash": _decimal(self.expected_hash),
            "verificationMode": str(self.verification_mode),
        }


DomainInputs = AgeInputs | HashInputs | FhirInputs


def _stringify(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_stringify(v) for v in value]
    return str(to_field(value))


def circuit_input(circuit: CircuitId, inputs: DomainInputs | Mapping[str, Any]) -> dict[str, Any]:
    """
    Produce the named-input map for `circuit`.

    Domain objects are checked against the circuit they are meant for. A raw
    mapping is passed through with every leaf rendered as a decimal string.

    Raises:
        InvalidInput: On a circuit/input mismatch or a non-field value.
    """
    if isinstance(inputs, (AgeInputs, HashInputs, FhirInputs)):
        if inputs.circuit is not circuit:
            raise InvalidInput(
                f"{type(inputs).__name__} cannot be proven with {circuit}"
            )
        return inputs.to_circuit_input()
    if not isinstance(inputs, Mapping):
        raise InvalidInput(f"unsupported input type {type(inputs).__name__}")
    return {str(k): _stringify(v) for k, v in inputs.items()}
