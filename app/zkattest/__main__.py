# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# __main__.py

"""
Command line entry point: `python -m zkattest <command> ...`

Exit status is 0 on success, 1 when the inputs cannot be proven (or a proof
does not verify), and 2 on configuration or environment errors.
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv
from web3 import Web3

from zkattest.artifacts import ArtifactKind, ArtifactResolver, parse_circuit_id
from zkattest.commands import attest, write_bundle
from zkattest.config import Settings
from zkattest.dispatch import Web3VerifierDispatch
from zkattest.errors import InvalidInput, ProvingFailed, ZkAttestError
from zkattest.files import load_json, load_proof, load_public_signals
from zkattest.groth_convert import export_solidity_calldata, to_call_data
from zkattest.hashing import poseidon
from zkattest.logger_utils import setup_logging
from zkattest.results import interpret
from zkattest.snark_verify_wrapper import verify_via_snarkjs
from zkattest.verify import verify_proof


def cmd_resolve(args, settings: Settings) -> int:
    circuit = parse_circuit_id(args.circuit)
    resolver = ArtifactResolver.from_settings(settings)
    artifacts = resolver.resolve(circuit)
    print(f"wasm: {artifacts.witness_program}")
    print(f"zkey: {artifacts.proving_key}")
    if artifacts.verification_key is None:
        print("vkey: <missing>")
        if settings.require_zkey:
            resolver.locate(circuit, ArtifactKind.VERIFICATION_KEY)
    else:
        print(f"vkey: {artifacts.verification_key}")
    return 0


def cmd_hash(args, settings: Settings) -> int:
    print(poseidon(args.values, settings))
    return 0


def _verifier(args, circuit):
    if not (args.rpc_url and args.verifier):
        return None
    return Web3VerifierDispatch(Web3(Web3.HTTPProvider(args.rpc_url)), {circuit: args.verifier})


def cmd_prove(args, settings: Settings) -> int:
    circuit = parse_circuit_id(args.circuit)
    inputs = load_json(args.input)
    if not isinstance(inputs, dict):
        raise InvalidInput(f"{args.input}: circuit input must be a JSON object")

    attestation = attest(circuit, inputs, verifier=_verifier(args, circuit), settings=settings)
    write_bundle(args.out, attestation)

    print(f"result: {int(attestation.result)} ({attestation.result.description})")
    if attestation.on_chain is not None:
        print(f"on-chain: {attestation.on_chain}")
    print(f"bundle: {args.out}")
    return 0


def cmd_verify(args, settings: Settings) -> int:
    circuit = parse_circuit_id(args.circuit)
    proof = load_proof(args.proof)
    signals = load_public_signals(args.public)

    if args.snarkjs:
        resolver = ArtifactResolver.from_settings(settings)
        ok = verify_via_snarkjs(resolver.resolve_verification_key(circuit), proof, signals, settings)
    else:
        ok = verify_proof(circuit, proof, signals, ArtifactResolver.from_settings(settings))
    print("valid" if ok else "invalid")
    return 0 if ok else 1


def cmd_calldata(args, settings: Settings) -> int:
    circuit = parse_circuit_id(args.circuit)
    proof = load_proof(args.proof)
    call_data = to_call_data(proof, load_public_signals(args.public), circuit, strict=args.strict)
    if args.json:
        print(json.dumps(call_data.to_json(), indent=2))
    else:
        print(export_solidity_calldata(proof, call_data.input))
    return 0


def cmd_interpret(args, settings: Settings) -> int:
    result = interpret(parse_circuit_id(args.circuit), load_public_signals(args.public))
    print(f"{int(result)} {result.name}: {result.description}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zkattest", description="Groth16 attestation proofs for age, hash and FHIR circuits"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("resolve", help="show which artifacts a circuit resolves to")
    p.add_argument("circuit")
    p.set_defaults(func=cmd_resolve)

    p = sub.add_parser("hash", help="Poseidon hash of four non-zero field elements")
    p.add_argument("values", nargs="+")
    p.set_defaults(func=cmd_hash)

    p = sub.add_parser("prove", help="prove, verify locally and write a bundle")
    p.add_argument("circuit")
    p.add_argument("--input", required=True, help="circuit input JSON")
    p.add_argument("--out", default="out", help="bundle directory")
    p.add_argument("--rpc-url", help="JSON-RPC endpoint for on-chain verification")
    p.add_argument("--verifier", help="deployed verifier contract address")
    p.set_defaults(func=cmd_prove)

    p = sub.add_parser("verify", help="verify a proof against the circuit's key")
    p.add_argument("circuit")
    p.add_argument("--proof", required=True)
    p.add_argument("--public", required=True)
    p.add_argument("--snarkjs", action="store_true", help="verify with snarkjs instead of py_ecc")
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("calldata", help="render verifier call data")
    p.add_argument("circuit")
    p.add_argument("--proof", required=True)
    p.add_argument("--public", required=True)
    p.add_argument("--strict", action="store_true", help="reject signal count mismatches")
    p.add_argument("--json", action="store_true", help="structured JSON output")
    p.set_defaults(func=cmd_calldata)

    p = sub.add_parser("interpret", help="decode the result code of public signals")
    p.add_argument("circuit")
    p.add_argument("--public", required=True)
    p.set_defaults(func=cmd_interpret)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return 2

    try:
        return args.func(args, settings)
    except (InvalidInput, ProvingFailed) as e:
        print(f"cannot be proven: {e}", file=sys.stderr)
        return 1
    except (ZkAttestError, OSError, json.JSONDecodeError) as e:
        # unreadable or missing files land here alongside resolution failures
        print(f"configuration error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
