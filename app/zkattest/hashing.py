# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# hashing.py

"""
Poseidon hashing that matches the hash and FHIR circuits bit for bit.

The circuits use circomlib's Poseidon over four inputs, so the reference value
is computed by circomlibjs itself (through node) rather than by a second
implementation that could drift from the circuit's round constants.
"""

import logging
import subprocess
from typing import Any, Sequence

from zkattest.config import Settings
from zkattest.constants import POSEIDON_INPUTS
from zkattest.errors import HashingFailed, InvalidInput, ProverUnavailable
from zkattest.models import to_field

logger = logging.getLogger(__name__)

# values arrive through process.argv so nothing is interpolated into the script
POSEIDON_SCRIPT = """
(async () => {
  const { buildPoseidon } = require("circomlibjs");
  const poseidon = await buildPoseidon();
  const inputs = process.argv.slice(1).map((v) => poseidon.F.e(BigInt(v)));
  console.log(poseidon.F.toString(poseidon(inputs)));
})().catch((e) => { console.error(e && e.stack ? e.stack : String(e)); process.exit(1); });
"""


def check_poseidon_inputs(values: Sequence[Any]) -> list[int]:
    """
    Enforce the circuit's preconditions on Poseidon input.

    Exactly four values are required, each a field element, none zero. The
    circuit rejects zero inputs, so they are refused here rather than turned
    into a proof that fails for an unrelated reason.

    Raises:
        InvalidInput: On a wrong count, a zero, or a non-field value.
    """
    if len(values) != POSEIDON_INPUTS:
        raise InvalidInput(
            f"Poseidon hash requires exactly {POSEIDON_INPUTS} inputs, got {len(values)}"
        )
    fields = [to_field(v) for v in values]
    for i, v in enumerate(fields):
        if v == 0:
            raise InvalidInput(
                f"input at index {i} is zero, but the circuit requires all inputs to be non-zero"
            )
    return fields


def poseidon(values: Sequence[Any], settings: Settings | None = None) -> int:
    """
    Compute circomlib Poseidon over exactly four non-zero field elements.

    Args:
        values: Four ints or decimal/hex strings.
        settings: Where to find node and circomlibjs; read from the
            environment when omitted.

    Returns:
        The hash as an int.

    Raises:
        InvalidInput: If `values` breaks the circuit's preconditions.
        ProverUnavailable: If node cannot be started.
        HashingFailed: If circomlibjs fails or prints something unexpected.
    """
    fields = check_poseidon_inputs(values)
    settings = settings or Settings.from_env()

    cmd = [settings.node, "-e", POSEIDON_SCRIPT, *(str(v) for v in fields)]
    try:
        output = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            env=settings.subprocess_env(),
            timeout=settings.prover_timeout,
        )
    except FileNotFoundError as e:
        raise ProverUnavailable([settings.node], str(e)) from e
    except subprocess.CalledProcessError as e:
        raise HashingFailed(
            f"circomlibjs poseidon exited {e.returncode}: {(e.stderr or e.stdout).strip()}"
        ) from e

    text = output.stdout.strip()
    try:
        digest = to_field(text)
    except InvalidInput as e:
        raise HashingFailed(f"unexpected poseidon output {text!r}") from e
    logger.debug("poseidon(%s) = %d", fields, digest)
    return digest


def split_hash(digest: int) -> tuple[int, int]:
    """
    Split a Poseidon digest into the (low, high) limbs the circuits take.

    The digest already fits in one field element, so the convention is
    `(digest, 0)`. On-chain verifiers compare against exactly this layout.
    """
    return (to_field(digest), 0)


def expected_hash_for(values: Sequence[Any], settings: Settings | None = None) -> tuple[int, int]:
    return split_hash(poseidon(values, settings))
