# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

"""Groth16 attestation proofs: prove, verify locally, convert for EVM verifiers."""
