# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# snark.py

"""
Groth16 proof generation through the snarkjs command line.

Each call writes `input.json` into its own temporary directory and runs

    snarkjs groth16 fullprove input.json <Circuit>.wasm <Circuit>.zkey proof.json public.json

so concurrent calls never share files and no lock is held around the
subprocess.
"""

import json
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Mapping, Sequence

from zkattest.artifacts import ArtifactResolver, ArtifactSet, parse_circuit_id
from zkattest.circuits import CircuitId
from zkattest.config import Settings
from zkattest.errors import InvalidInput, ProverUnavailable, ProvingFailed
from zkattest.files import INPUT_FILE, PROOF_FILE, PUBLIC_FILE, load_prover_outputs
from zkattest.inputs import AgeInputs, DomainInputs, FhirInputs, HashInputs, circuit_input
from zkattest.models import Proof, PublicSignals

logger = logging.getLogger(__name__)


def run_snarkjs(args: Sequence[str], settings: Settings, cwd: str | Path | None = None):
    """
    Run a snarkjs subcommand and return the completed process.

    A non-zero exit is returned, not raised, so the caller decides what it
    means.

    Raises:
        ProverUnavailable: If the snarkjs executable cannot be started.
    """
    cmd = [*settings.snarkjs, *args]
    logger.debug("running %s", " ".join(cmd))
    try:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
            cwd=cwd,
            env=settings.subprocess_env(),
            timeout=settings.prover_timeout,
        )
    except FileNotFoundError as e:
        raise ProverUnavailable(cmd, str(e)) from e


def generate_proof(
    circuit: CircuitId | str,
    inputs: DomainInputs | Mapping[str, Any],
    artifacts: ArtifactSet | None = None,
    settings: Settings | None = None,
) -> tuple[Proof, PublicSignals]:
    """
    Generate a Groth16 proof for `circuit` from domain inputs.

    Args:
        circuit: Target circuit (a `CircuitId` or any accepted spelling).
        inputs: `AgeInputs` / `HashInputs` / `FhirInputs`, or a raw mapping
            of circuit signal names to values.
        artifacts: Pre-resolved artifacts; resolved from `settings` when
            omitted.
        settings: Runtime settings; read from the environment when omitted.

    Returns:
        The proof and the public signals exactly as the prover emitted them.

    Raises:
        InvalidInput: If the inputs do not fit the circuit.
        ArtifactNotFound: If the witness program or proving key is missing.
        ProvingFailed: If the constraint system rejected the witness; carries
            the prover's diagnostic output.
        ProverUnavailable: If snarkjs cannot be started.
    """
    circuit = parse_circuit_id(circuit)
    settings = settings or Settings.from_env()
    signals = circuit_input(circuit, inputs)

    if artifacts is None:
        artifacts = ArtifactResolver.from_settings(settings).resolve(circuit)
    elif artifacts.circuit is not circuit:
        raise InvalidInput(f"artifacts for {artifacts.circuit} cannot prove {circuit}")

    logger.info("generating %s proof", circuit)
    with tempfile.TemporaryDirectory(prefix=f"{circuit.slug}-") as work:
        work_dir = Path(work)
        (work_dir / INPUT_FILE).write_text(json.dumps(signals), encoding="utf-8")

        result = run_snarkjs(
            [
                "groth16",
                "fullprove",
                str(work_dir / INPUT_FILE),
                str(Path(artifacts.witness_program).resolve()),
                str(Path(artifacts.proving_key).resolve()),
                str(work_dir / PROOF_FILE),
                str(work_dir / PUBLIC_FILE),
            ],
            settings,
            cwd=work_dir,
        )
        if result.returncode != 0 or not (work_dir / PROOF_FILE).is_file():
            diagnostic = "\n".join(
                s.strip() for s in (result.stderr, result.stdout) if s and s.strip()
            )
            logger.error("%s proving failed: %s", circuit, diagnostic)
            raise ProvingFailed(circuit, diagnostic or "prover produced no proof", result.returncode)

        proof, public_signals = load_prover_outputs(work_dir)

    logger.info("%s proof generated, %d public signals", circuit, len(public_signals))
    return proof, public_signals


def generate_age_proof(
    birth_date: int,
    current_date: int,
    threshold: int,
    verification_type: int,
    **kwargs,
) -> tuple[Proof, PublicSignals]:
    return generate_proof(
        CircuitId.AGE,
        AgeInputs(birth_date, current_date, threshold, verification_type),
        **kwargs,
    )


def generate_hash_proof(
    data: Sequence[int], expected_hash: Sequence[int], **kwargs
) -> tuple[Proof, PublicSignals]:
    return generate_proof(CircuitId.HASH, HashInputs(tuple(data), tuple(expected_hash)), **kwargs)


def generate_fhir_proof(
    resource_data: Sequence[int],
    resource_type: int,
    expected_hash: Sequence[int],
    verification_mode: int,
    **kwargs,
) -> tuple[Proof, PublicSignals]:
    return generate_proof(
        CircuitId.FHIR,
        FhirInputs(tuple(resource_data), resource_type, tuple(expected_hash), verification_mode),
        **kwargs,
    )
