# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# errors.py

"""
Error taxonomy for the proof pipeline.

Every error carries enough context (circuit, attempted paths, expected vs
received values, prover diagnostics) to diagnose a failure without re-running
the pipeline. None of them are turned into default values by the pipeline.

Two families matter to callers:
  - "cannot be proven": `InvalidInput`, `ProvingFailed`
  - configuration / environment: everything else, including a verification
    key that does not decode (`MalformedArtifact`)
"""

from pathlib import Path
from typing import Sequence


class ZkAttestError(Exception):
    """Base class for all pipeline errors."""


class InvalidInput(ZkAttestError, ValueError):
    """A domain input violates a circuit precondition."""


class MalformedArtifact(ZkAttestError, ValueError):
    """A circuit artifact exists but is not in the layout the pipeline reads."""


class InvalidPoint(MalformedArtifact):
    """Coordinates that do not decode to a BN254 curve point."""


class ArtifactNotFound(ZkAttestError, FileNotFoundError):
    """Artifact resolution exhausted every naming variant."""

    def __init__(self, circuit, kind: str, attempted: Sequence[Path]):
        self.circuit = circuit
        self.kind = kind
        self.attempted = list(attempted)
        tried = ", ".join(str(p) for p in self.attempted) or "<none>"
        super().__init__(f"{kind} not found for {circuit}; tried: {tried}")

    def __str__(self) -> str:
        return self.args[0]


class VerificationKeyMissing(ArtifactNotFound):
    """No verification key resolved for a circuit."""

    def __init__(self, circuit, attempted: Sequence[Path]):
        super().__init__(circuit, "verification key", attempted)


class ProvingFailed(ZkAttestError, RuntimeError):
    """The constraint system rejected the witness."""

    def __init__(self, circuit, diagnostic: str, returncode: int | None = None):
        self.circuit = circuit
        self.diagnostic = diagnostic
        self.returncode = returncode
        super().__init__(
            f"proving failed for {circuit} (exit {returncode}): {diagnostic}"
        )


class ProverUnavailable(ZkAttestError, RuntimeError):
    """The prover executable could not be started."""

    def __init__(self, command: Sequence[str], reason: str):
        self.command = list(command)
        super().__init__(f"cannot run {' '.join(self.command)}: {reason}")


class HashingFailed(ZkAttestError, RuntimeError):
    """The Poseidon reference implementation failed."""


class CalldataLengthMismatch(ZkAttestError, ValueError):
    """Verifier input count does not match what the circuit's verifier expects."""

    def __init__(self, circuit, expected: int, received: int, what: str = "input"):
        self.circuit = circuit
        self.expected = expected
        self.received = received
        super().__init__(
            f"{what} length mismatch for {circuit}: expected {expected}, got {received}"
        )


class UnknownResultCode(ZkAttestError, ValueError):
    """publicSignals[0] is outside the decode table for the circuit."""

    def __init__(self, circuit, code: int | None):
        self.circuit = circuit
        self.code = code
        if code is None:
            msg = f"no public signals to decode for {circuit}"
        else:
            msg = f"unknown result code {code} for {circuit}"
        super().__init__(msg)


class LocalVerificationFailed(ZkAttestError, RuntimeError):
    """A freshly generated proof did not verify against its verification key."""

    def __init__(self, circuit):
        self.circuit = circuit
        super().__init__(
            f"proof for {circuit} failed local verification (malformed proof or key mismatch)"
        )
