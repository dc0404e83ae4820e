# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# BN254 (alt_bn128) scalar field order, the modulus every public signal lives in
FIELD_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# BN254 base field order, coordinates of G1/G2 points live here
BASE_FIELD_MODULUS = 21888242871839275222246405745257275088696311157297823662689037894645226208583

# 365 days, the age circuit's notion of a year
SECONDS_PER_YEAR = 31536000

# age bracket boundaries in whole years
ADULT_AGE = 18
SENIOR_AGE = 65

# circuit input widths
POSEIDON_INPUTS = 4
HASH_LIMBS = 2
FHIR_RESOURCE_FIELDS = 8

# proving key contribution suffixes, most complete first
ZKEY_SUFFIXES = ("_0001", "_0000", "")

DEFAULT_CIRCUITS_DIR = "circuits/out"
DEFAULT_PROVER_TIMEOUT = 300.0
