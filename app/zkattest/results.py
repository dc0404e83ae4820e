# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# results.py

"""
Decode the result code each circuit writes to publicSignals[0].

A valid proof only says the circuit ran honestly; whether the attestation
succeeded is in this code. The reference models below compute the code the
circuit should produce, so a proof's outcome can be checked before or after
proving.
"""

from enum import IntEnum
from typing import Callable, Sequence

from zkattest.circuits import CircuitId
from zkattest.constants import ADULT_AGE, SECONDS_PER_YEAR, SENIOR_AGE
from zkattest.errors import InvalidInput, UnknownResultCode
from zkattest.hashing import poseidon, split_hash
from zkattest.inputs import AgeInputs, AgeVerificationType, HashInputs


class AgeResult(IntEnum):
    BRACKET_INVALID = 10
    CHILD = 11
    ADULT = 12
    SENIOR = 13
    AGE_ABOVE_THRESHOLD = 14
    BIRTH_DATE_ABOVE_THRESHOLD = 19
    AGE_BELOW_THRESHOLD = 21
    BIRTH_DATE_BELOW_THRESHOLD = 22
    BIRTH_DATE_INVALID = 23

    @property
    def description(self) -> str:
        return _AGE_DESCRIPTIONS[self]


class HashResult(IntEnum):
    MATCH = 1
    ZERO_INPUT = 2
    MISMATCH = 3

    @property
    def description(self) -> str:
        return _HASH_DESCRIPTIONS[self]


class FhirResult(IntEnum):
    SUCCESS = 1
    RESOURCE_TYPE_MISMATCH = 2
    HASH_MISMATCH = 3
    FIELD_MISMATCH = 4
    INVALID_MODE = 5

    @property
    def description(self) -> str:
        return _FHIR_DESCRIPTIONS[self]


ResultCode = AgeResult | HashResult | FhirResult

_AGE_DESCRIPTIONS = {
    AgeResult.BRACKET_INVALID: "age bracket invalid or unset",
    AgeResult.CHILD: "age bracket: child",
    AgeResult.ADULT: "age bracket: adult",
    AgeResult.SENIOR: "age bracket: senior",
    AgeResult.AGE_ABOVE_THRESHOLD: "age is at or above the threshold",
    AgeResult.BIRTH_DATE_ABOVE_THRESHOLD: "birth date valid, age is at or above the threshold",
    AgeResult.AGE_BELOW_THRESHOLD: "age is below the threshold",
    AgeResult.BIRTH_DATE_BELOW_THRESHOLD: "birth date valid, age is below the threshold",
    AgeResult.BIRTH_DATE_INVALID: "birth date invalid",
}

_HASH_DESCRIPTIONS = {
    HashResult.MATCH: "inputs valid and hash matches",
    HashResult.ZERO_INPUT: "an input was zero",
    HashResult.MISMATCH: "inputs valid but hash does not match",
}

_FHIR_DESCRIPTIONS = {
    FhirResult.SUCCESS: "verification succeeded",
    FhirResult.RESOURCE_TYPE_MISMATCH: "resource type mismatch",
    FhirResult.HASH_MISMATCH: "hash mismatch",
    FhirResult.FIELD_MISMATCH: "field mismatch",
    FhirResult.INVALID_MODE: "unsupported verification mode",
}

_TABLES: dict[CircuitId, type[IntEnum]] = {
    CircuitId.AGE: AgeResult,
    CircuitId.HASH: HashResult,
    CircuitId.FHIR: FhirResult,
}

# codes that mean the attested claim holds
ACCEPTING = frozenset(
    {
        AgeResult.AGE_ABOVE_THRESHOLD,
        AgeResult.BIRTH_DATE_ABOVE_THRESHOLD,
        AgeResult.CHILD,
        AgeResult.ADULT,
        AgeResult.SENIOR,
        HashResult.MATCH,
        FhirResult.SUCCESS,
    }
)


def interpret(circuit: CircuitId, public_signals: Sequence[int]) -> ResultCode:
    """
    Decode publicSignals[0] for `circuit`.

    Raises:
        UnknownResultCode: If the signals are empty or the code is not in the
            circuit's table.
    """
    if not public_signals:
        raise UnknownResultCode(circuit, None)
    code = int(public_signals[0])
    try:
        return _TABLES[circuit](code)
    except ValueError:
        raise UnknownResultCode(circuit, code) from None


def is_accepting(result: ResultCode) -> bool:
    return result in ACCEPTING


def age_in_years(seconds: int) -> int:
    return seconds // SECONDS_PER_YEAR


def expected_age_result(inputs: AgeInputs) -> AgeResult:
    """
    The code the age circuit produces for `inputs`.

    Ages and the threshold are compared in whole years, each floored, so an
    elapsed time of exactly `threshold` seconds is at the threshold.

    Raises:
        InvalidInput: In simple-age mode with a birth date after the current
            date, which the circuit cannot prove.
    """
    future = inputs.birth_date > inputs.current_date
    vt = inputs.verification_type

    if vt is AgeVerificationType.AGE_BRACKET:
        if future:
            return AgeResult.BRACKET_INVALID
        years = age_in_years(inputs.current_date - inputs.birth_date)
        if years < ADULT_AGE:
            return AgeResult.CHILD
        if years < SENIOR_AGE:
            return AgeResult.ADULT
        return AgeResult.SENIOR

    if future:
        if vt is AgeVerificationType.BIRTH_DATE:
            return AgeResult.BIRTH_DATE_INVALID
        raise InvalidInput(
            f"birth date {inputs.birth_date} is after current date {inputs.current_date}"
        )

    above = age_in_years(inputs.current_date - inputs.birth_date) >= age_in_years(
        inputs.threshold
    )
    if vt is AgeVerificationType.BIRTH_DATE:
        return AgeResult.BIRTH_DATE_ABOVE_THRESHOLD if above else AgeResult.BIRTH_DATE_BELOW_THRESHOLD
    return AgeResult.AGE_ABOVE_THRESHOLD if above else AgeResult.AGE_BELOW_THRESHOLD


def expected_hash_result(
    inputs: HashInputs, hasher: Callable[[Sequence[int]], int] = poseidon
) -> HashResult:
    """
    The code the hash circuit produces for `inputs`.

    `hasher` is only called when every data word is non-zero.
    """
    if any(v == 0 for v in inputs.data):
        return HashResult.ZERO_INPUT
    if split_hash(hasher(inputs.data)) == tuple(inputs.expected_hash):
        return HashResult.MATCH
    return HashResult.MISMATCH
