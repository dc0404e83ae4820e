# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# config.py

"""
Runtime settings for the proof pipeline.

Values come from environment variables, falling back to defaults:

    ZK_CIRCUITS_DIR    root of the compiled circuit output (circuits/out)
    SNARKJS            snarkjs command, shell-split (snarkjs)
    NODE               node executable used for Poseidon (node)
    NODE_PATH          module path where circomlibjs is installed
    REQUIRE_ZKEY       turn missing keys into failures instead of skips
    ZK_PROVER_TIMEOUT  subprocess timeout in seconds, empty for none (300)
"""

import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from zkattest.constants import DEFAULT_CIRCUITS_DIR, DEFAULT_PROVER_TIMEOUT

TRUTHY = {"1", "true", "yes", "y", "on"}


def env_flag(name: str, environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    v = (env.get(name) or "").strip().lower()
    return v in TRUTHY


@dataclass(frozen=True)
class Settings:
    circuits_dir: Path = Path(DEFAULT_CIRCUITS_DIR)
    snarkjs: tuple[str, ...] = ("snarkjs",)
    node: str = "node"
    node_path: str | None = None
    require_zkey: bool = False
    prover_timeout: float | None = DEFAULT_PROVER_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        snarkjs = tuple(shlex.split(env.get("SNARKJS", ""))) or cls.snarkjs

        timeout_raw = env.get("ZK_PROVER_TIMEOUT")
        if timeout_raw is None:
            timeout: float | None = DEFAULT_PROVER_TIMEOUT
        elif timeout_raw.strip() == "":
            timeout = None
        else:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ValueError(f"ZK_PROVER_TIMEOUT must be a number, got {timeout_raw!r}") from None
            if timeout <= 0:
                raise ValueError(f"ZK_PROVER_TIMEOUT must be positive, got {timeout_raw}")

        return cls(
            circuits_dir=Path(env.get("ZK_CIRCUITS_DIR") or DEFAULT_CIRCUITS_DIR),
            snarkjs=snarkjs,
            node=env.get("NODE") or "node",
            node_path=env.get("NODE_PATH") or None,
            require_zkey=env_flag("REQUIRE_ZKEY", env),
            prover_timeout=timeout,
        )

    def subprocess_env(self) -> dict[str, str]:
        """Environment for node/snarkjs children, with NODE_PATH applied."""
        env = dict(os.environ)
        if self.node_path:
            env["NODE_PATH"] = self.node_path
        return env
