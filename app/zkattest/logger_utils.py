# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

import logging
import sys


def setup_logging(level=logging.INFO, name="zkattest"):
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # repeated calls (tests, re-entrant CLI) must not stack handlers
    if not any(getattr(h, "_zkattest", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s", "%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        handler._zkattest = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.propagate = False

    return logger
