# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# artifacts.py

"""
Locate compiled circuit artifacts on disk.

Circuit output has been laid out under several naming conventions over time:

    circuits/out/age-verifier/AgeVerifier_js/AgeVerifier.wasm
    circuits/out/ageverifier/AgeVerifier_0001.zkey
    circuits/out/age_verifier/verification_key_AgeVerifier.json

The resolver walks a fixed, ordered list of candidates for each artifact kind
and returns the first that exists. The order never depends on directory
listing order, so a fixture can assert which variant was picked.

This module is also the only place that maps free-form circuit names to a
`CircuitId`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from zkattest.circuits import CircuitId
from zkattest.config import Settings
from zkattest.constants import ZKEY_SUFFIXES
from zkattest.errors import ArtifactNotFound, InvalidInput, VerificationKeyMissing

logger = logging.getLogger(__name__)


class ArtifactKind(Enum):
    WITNESS_PROGRAM = "witness program"
    PROVING_KEY = "proving key"
    VERIFICATION_KEY = "verification key"


@dataclass(frozen=True)
class ArtifactSet:
    circuit: CircuitId
    witness_program: Path
    proving_key: Path
    verification_key: Path | None = None


def parse_circuit_id(name: str | CircuitId) -> CircuitId:
    """
    Map a circuit name in any historical spelling to a `CircuitId`.

    Accepts `age-verifier`, `age_verifier`, `ageverifier`, `AgeVerifier` and
    the short form `age` (case-insensitive), likewise for hash and fhir.

    Raises:
        InvalidInput: If the name matches no circuit.
    """
    if isinstance(name, CircuitId):
        return name
    key = name.strip().lower().replace("-", "").replace("_", "")
    for circuit in CircuitId:
        base = circuit.base_name.lower()
        if key in (base, base.removesuffix("verifier")):
            return circuit
    raise InvalidInput(f"unknown circuit {name!r}")


def directory_variants(circuit: CircuitId) -> list[str]:
    """Directory names as given, without dash, and with underscore; deduplicated."""
    slug = circuit.slug
    names = [slug, slug.replace("-", ""), slug.replace("-", "_")]
    return list(dict.fromkeys(names))


class ArtifactResolver:
    def __init__(self, circuits_dir: str | Path):
        self.circuits_dir = Path(circuits_dir)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ArtifactResolver":
        settings = settings or Settings.from_env()
        return cls(settings.circuits_dir)

    def candidates(self, circuit: CircuitId, kind: ArtifactKind) -> list[Path]:
        base = circuit.base_name
        dirs = [self.circuits_dir / d for d in directory_variants(circuit)]

        if kind is ArtifactKind.WITNESS_PROGRAM:
            paths = [d / f"{base}_js" / f"{base}.wasm" for d in dirs]
            paths += [d / f"{base}.wasm" for d in dirs]
        elif kind is ArtifactKind.PROVING_KEY:
            # suffix-major: a second contribution in any directory beats
            # an initial contribution in an earlier one
            paths = [d / f"{base}{suffix}.zkey" for suffix in ZKEY_SUFFIXES for d in dirs]
        else:
            paths = []
            for d in dirs:
                paths.append(d / f"verification_key_{base}.json")
                paths.append(d / f"{d.name.replace('-', '').replace('_', '')}_verification_key.json")
                paths.append(d / "verification_key.json")
            paths.append(self.circuits_dir / f"verification_key_{base}.json")
        return list(dict.fromkeys(paths))

    def find(self, circuit: CircuitId, kind: ArtifactKind) -> Path | None:
        for index, path in enumerate(self.candidates(circuit, kind)):
            if path.is_file():
                logger.debug("%s for %s found at variant %d: %s", kind.value, circuit, index, path)
                return path
        return None

    def locate(self, circuit: CircuitId, kind: ArtifactKind) -> Path:
        path = self.find(circuit, kind)
        if path is None:
            attempted = self.candidates(circuit, kind)
            if kind is ArtifactKind.VERIFICATION_KEY:
                raise VerificationKeyMissing(circuit, attempted)
            raise ArtifactNotFound(circuit, kind.value, attempted)
        return path

    def resolve(self, circuit: CircuitId | str) -> ArtifactSet:
        """
        Resolve the proving artifacts for a circuit.

        The verification key is attached when one exists; it is not required
        for proving.

        Raises:
            ArtifactNotFound: If the witness program or proving key is missing.
        """
        circuit = parse_circuit_id(circuit)
        artifacts = ArtifactSet(
            circuit=circuit,
            witness_program=self.locate(circuit, ArtifactKind.WITNESS_PROGRAM),
            proving_key=self.locate(circuit, ArtifactKind.PROVING_KEY),
            verification_key=self.find(circuit, ArtifactKind.VERIFICATION_KEY),
        )
        logger.info(
            "resolved %s: wasm=%s zkey=%s vkey=%s",
            circuit,
            artifacts.witness_program,
            artifacts.proving_key,
            artifacts.verification_key,
        )
        return artifacts

    def resolve_verification_key(self, circuit: CircuitId | str) -> Path:
        """
        Raises:
            VerificationKeyMissing: If no verification key candidate exists.
        """
        return self.locate(parse_circuit_id(circuit), ArtifactKind.VERIFICATION_KEY)
