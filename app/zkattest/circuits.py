# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

from enum import Enum


class CircuitId(Enum):
    """
    The closed set of attestation circuits.

    The value is the canonical base name used by the compiled artifacts
    (`AgeVerifier_js/AgeVerifier.wasm`, `AgeVerifier_0001.zkey`, ...).
    """

    AGE = "AgeVerifier"
    HASH = "HashVerifier"
    FHIR = "FhirVerifier"

    @property
    def base_name(self) -> str:
        return self.value

    @property
    def slug(self) -> str:
        """Kebab-case identifier, e.g. `age-verifier`."""
        return {
            CircuitId.AGE: "age-verifier",
            CircuitId.HASH: "hash-verifier",
            CircuitId.FHIR: "fhir-verifier",
        }[self]

    @property
    def public_input_count(self) -> int:
        """Fixed length of the `input` array the on-chain verifier takes."""
        return {
            CircuitId.AGE: 4,
            CircuitId.HASH: 3,
            CircuitId.FHIR: 21,
        }[self]

    def __str__(self) -> str:
        return self.value
