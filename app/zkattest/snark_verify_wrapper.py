# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# snark_verify_wrapper.py

"""
Second-opinion verification through `snarkjs groth16 verify`.

Useful when a py_ecc result is surprising: snarkjs is the same code that
produced the proof, so a disagreement points at the conversion layer rather
than the proof.
"""

import logging
import tempfile
from pathlib import Path
from typing import Sequence

from zkattest.config import Settings
from zkattest.files import PROOF_FILE, PUBLIC_FILE, save_json
from zkattest.models import Proof
from zkattest.snark import run_snarkjs

logger = logging.getLogger(__name__)


def verify_via_snarkjs(
    verification_key: str | Path,
    proof: Proof,
    public_signals: Sequence[int],
    settings: Settings | None = None,
) -> bool:
    """
    Verify a proof using snarkjs.

    Args:
        verification_key: Path to verification_key.json
        proof: Proof in the prover's ordering.
        public_signals: Signals exactly as the prover emitted them.
        settings: Where to find snarkjs; read from the environment when
            omitted.

    Returns:
        True if snarkjs accepts the proof, False otherwise.

    Raises:
        ProverUnavailable: If snarkjs cannot be started.
    """
    settings = settings or Settings.from_env()
    with tempfile.TemporaryDirectory(prefix="verify-") as work:
        work_dir = Path(work)
        save_json(work_dir / PROOF_FILE, proof.to_snarkjs())
        save_json(work_dir / PUBLIC_FILE, [str(s) for s in public_signals])

        result = run_snarkjs(
            [
                "groth16",
                "verify",
                str(Path(verification_key).resolve()),
                str(work_dir / PUBLIC_FILE),
                str(work_dir / PROOF_FILE),
            ],
            settings,
            cwd=work_dir,
        )

    ok = result.returncode == 0
    if not ok:
        logger.info("snarkjs rejected proof: %s", (result.stderr or result.stdout).strip())
    return ok
