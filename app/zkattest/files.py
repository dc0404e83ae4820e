# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import json

from pathlib import Path
from typing import Any

from zkattest.errors import InvalidInput
from zkattest.models import Proof, PublicSignals, parse_public_signals

PROOF_FILE = "proof.json"
PUBLIC_FILE = "public.json"
INPUT_FILE = "input.json"


def save_string(path: str | Path, string: str) -> None:
    """Write UTF-8 text, creating parent directories and overwriting."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(string)


def save_json(path: str | Path, data: Any) -> None:
    """
    Serialize data as JSON and write it to a file.

    Output uses `indent=2`, `sort_keys=True` and a trailing newline so two
    bundles written from the same proof are byte-identical.

    Raises:
        TypeError: If `data` contains non-JSON-serializable objects.
        OSError: If the file cannot be created or written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")


def load_json(path: str | Path) -> Any:
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_proof(path: str | Path) -> Proof:
    """
    Read a snarkjs `proof.json`.

    Accepts either the bare proof object or a wrapper `{"proof": {...}}`.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidInput: If the JSON is not a Groth16 proof.
    """
    data = load_json(path)
    if isinstance(data, dict) and "proof" in data:
        data = data["proof"]
    if not isinstance(data, dict):
        raise InvalidInput(f"{path}: proof must be a JSON object")
    return Proof.from_snarkjs(data)


def load_public_signals(path: str | Path) -> PublicSignals:
    """Read a snarkjs `public.json` (a JSON list of decimal strings)."""
    data = load_json(path)
    if not isinstance(data, list):
        raise InvalidInput(f"{path}: public signals must be a JSON list")
    return parse_public_signals(data)


def load_prover_outputs(out_dir: str | Path) -> tuple[Proof, PublicSignals]:
    out_dir = Path(out_dir)
    return load_proof(out_dir / PROOF_FILE), load_public_signals(out_dir / PUBLIC_FILE)
