# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# commands.py

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from zkattest.artifacts import ArtifactResolver, ArtifactSet, parse_circuit_id
from zkattest.circuits import CircuitId
from zkattest.config import Settings
from zkattest.dispatch import VerifierDispatch, dispatch
from zkattest.errors import LocalVerificationFailed
from zkattest.files import PROOF_FILE, PUBLIC_FILE, save_json, save_string
from zkattest.groth_convert import export_solidity_calldata, to_call_data
from zkattest.inputs import DomainInputs
from zkattest.models import Proof, PublicSignals, VerifierCallData
from zkattest.results import ResultCode, interpret, is_accepting
from zkattest.snark import generate_proof
from zkattest.verify import verify_with_key
from zkattest.vk_convert import load_verification_key

logger = logging.getLogger(__name__)

CALLDATA_JSON = "calldata.json"
CALLDATA_TXT = "calldata.txt"


@dataclass(frozen=True)
class Attestation:
    circuit: CircuitId
    artifacts: ArtifactSet
    proof: Proof
    public_signals: PublicSignals
    call_data: VerifierCallData
    result: ResultCode
    on_chain: bool | None = None

    @property
    def accepted(self) -> bool:
        """True when the circuit's result code says the claim holds."""
        return is_accepting(self.result)


def attest(
    circuit: CircuitId | str,
    inputs: DomainInputs | Mapping[str, Any],
    verifier: VerifierDispatch | None = None,
    settings: Settings | None = None,
) -> Attestation:
    """
    Run the full attestation pipeline for one set of inputs.

    High-level steps:
    1. Resolve the circuit's witness program, proving key and verification
       key.
    2. Generate a Groth16 proof with snarkjs.
    3. Verify the proof locally against the verification key. A proof that
       does not verify here means a broken prover or a key mismatch, never a
       failed attestation, so it is raised rather than returned.
    4. Convert the proof to verifier call data (G2 swap, fixed input length).
    5. When a verifier is given, send the call data to it.
    6. Decode the result code from publicSignals[0].

    Args:
        circuit: Target circuit.
        inputs: Domain inputs for the circuit.
        verifier: Optional on-chain (or stub) verifier.
        settings: Runtime settings; read from the environment when omitted.

    Returns:
        The proof, its call data, the decoded result and the verifier's
        answer (None when no verifier was given).

    Raises:
        ArtifactNotFound: If a proving artifact is missing.
        VerificationKeyMissing: If no verification key resolves.
        InvalidInput: If the inputs do not fit the circuit.
        ProvingFailed: If the circuit rejected the witness.
        LocalVerificationFailed: If the generated proof does not verify.
        UnknownResultCode: If the result code is outside the circuit's table.
    """
    circuit = parse_circuit_id(circuit)
    settings = settings or Settings.from_env()
    resolver = ArtifactResolver.from_settings(settings)

    artifacts = resolver.resolve(circuit)
    vk_path = artifacts.verification_key or resolver.resolve_verification_key(circuit)

    proof, public_signals = generate_proof(circuit, inputs, artifacts=artifacts, settings=settings)

    if not verify_with_key(load_verification_key(vk_path), proof, public_signals):
        raise LocalVerificationFailed(circuit)

    call_data = to_call_data(proof, public_signals, circuit)
    on_chain = dispatch(verifier, call_data) if verifier is not None else None
    result = interpret(circuit, public_signals)

    logger.info("%s attestation: %d (%s)", circuit, int(result), result.description)
    return Attestation(
        circuit=circuit,
        artifacts=artifacts,
        proof=proof,
        public_signals=public_signals,
        call_data=call_data,
        result=result,
        on_chain=on_chain,
    )


def write_bundle(out_dir: str | Path, attestation: Attestation) -> Path:
    """
    Write an attestation's artifacts to `out_dir`.

    Files:
    - proof.json: the proof in snarkjs layout
    - public.json: the public signals as decimal strings
    - calldata.json: verifier arguments as decimal strings
    - calldata.txt: the same arguments in snarkjs' flattened form

    Returns:
        `out_dir` as a Path.
    """
    out_dir = Path(out_dir)
    save_json(out_dir / PROOF_FILE, attestation.proof.to_snarkjs())
    save_json(out_dir / PUBLIC_FILE, [str(s) for s in attestation.public_signals])
    save_json(out_dir / CALLDATA_JSON, attestation.call_data.to_json())
    save_string(
        out_dir / CALLDATA_TXT,
        export_solidity_calldata(attestation.proof, attestation.call_data.input) + "\n",
    )
    return out_dir
