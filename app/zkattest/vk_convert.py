# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# vk_convert.py

"""
Convert a snarkjs verification key between JSON and py_ecc BN254 points.

snarkjs outputs:
  - verification_key.json: {protocol, curve, nPublic, vk_alpha_1, vk_beta_2,
    vk_gamma_2, vk_delta_2, vk_alphabeta_12, IC}

G1 points are `[x, y, z]` and G2 points are `[[x0, x1], [y0, y1], [z0, z1]]`
with decimal string coordinates; an Fp2 element `c0 + c1 * i` is `[c0, c1]`.
Only `z = 0` (the point at infinity) and `z = 1` occur in practice. The
precomputed `vk_alphabeta_12` is ignored.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from py_ecc.optimized_bn128 import FQ, FQ2, Z1, Z2, b, b2, is_on_curve, normalize

from zkattest.constants import BASE_FIELD_MODULUS
from zkattest.errors import InvalidInput, InvalidPoint, MalformedArtifact
from zkattest.files import load_json
from zkattest.models import to_field

G1Point = tuple[FQ, FQ, FQ]
G2Point = tuple[FQ2, FQ2, FQ2]


@dataclass(frozen=True)
class VerificationKey:
    n_public: int
    alpha: G1Point
    beta: G2Point
    gamma: G2Point
    delta: G2Point
    ic: tuple[G1Point, ...]


def _coord(value: Any) -> int:
    try:
        return to_field(value, BASE_FIELD_MODULUS)
    except InvalidInput as e:
        raise InvalidPoint(f"bad coordinate: {e}") from None


def g1_point(coords: Sequence[Any]) -> G1Point:
    """
    Build a projective G1 point from `[x, y]` or `[x, y, z]`.

    Raises:
        InvalidPoint: If a coordinate is out of range or the point is not on
            the curve.
    """
    if len(coords) == 3 and _coord(coords[2]) == 0:
        return Z1
    x, y = _coord(coords[0]), _coord(coords[1])
    point = (FQ(x), FQ(y), FQ(1))
    if not is_on_curve(point, b):
        raise InvalidPoint(f"G1 point ({x}, {y}) is not on the BN254 curve")
    return point


def g2_point(coords: Sequence[Sequence[Any]]) -> G2Point:
    """
    Build a projective G2 point from `[[x0, x1], [y0, y1]]` with an optional
    third `[z0, z1]` pair.

    Raises:
        InvalidPoint: If a coordinate is out of range or the point is not on
            the twist.
    """
    if len(coords) == 3 and all(_coord(z) == 0 for z in coords[2]):
        return Z2
    x = FQ2([_coord(coords[0][0]), _coord(coords[0][1])])
    y = FQ2([_coord(coords[1][0]), _coord(coords[1][1])])
    point = (x, y, FQ2.one())
    if not is_on_curve(point, b2):
        raise InvalidPoint("G2 point is not on the BN254 twist")
    return point


def _fq_int(c: Any) -> int:
    return c.n if hasattr(c, "n") else int(c)


def g1_to_json(point: G1Point) -> list[str]:
    """Affine snarkjs rendering of a G1 point."""
    if point[2] == FQ.zero():
        return ["0", "1", "0"]
    x, y = normalize(point)
    return [str(_fq_int(x)), str(_fq_int(y)), "1"]


def g2_to_json(point: G2Point) -> list[list[str]]:
    """Affine snarkjs rendering of a G2 point."""
    if point[2] == FQ2.zero():
        return [["0", "0"], ["1", "0"], ["0", "0"]]
    x, y = normalize(point)
    return [
        [str(_fq_int(c)) for c in x.coeffs],
        [str(_fq_int(c)) for c in y.coeffs],
        ["1", "0"],
    ]


def vk_from_snarkjs(vk: dict[str, Any]) -> VerificationKey:
    """
    Convert snarkjs verification_key.json to py_ecc points.

    Args:
        vk: Dict from snarkjs' verification_key.json

    Returns:
        The decoded key with every point checked to be on its curve.

    Raises:
        MalformedArtifact: If the key is not a BN254 Groth16 key, a field is
            missing, or `IC` does not have `nPublic + 1` entries.
        InvalidPoint: If a point is malformed.
    """
    protocol = vk.get("protocol", "groth16")
    curve = vk.get("curve", "bn128")
    if protocol != "groth16":
        raise MalformedArtifact(f"unsupported proof system {protocol!r}")
    if curve not in ("bn128", "bn254", "alt_bn128"):
        raise MalformedArtifact(f"unsupported curve {curve!r}")

    try:
        ic = tuple(g1_point(p) for p in vk["IC"])
        n_public = vk.get("nPublic", len(ic) - 1)
        if isinstance(n_public, bool) or not isinstance(n_public, int):
            raise MalformedArtifact(f"nPublic must be an integer, got {n_public!r}")
        key = VerificationKey(
            n_public=n_public,
            alpha=g1_point(vk["vk_alpha_1"]),
            beta=g2_point(vk["vk_beta_2"]),
            gamma=g2_point(vk["vk_gamma_2"]),
            delta=g2_point(vk["vk_delta_2"]),
            ic=ic,
        )
    except KeyError as e:
        raise MalformedArtifact(f"verification key is missing {e.args[0]}") from None

    if len(key.ic) != key.n_public + 1:
        raise MalformedArtifact(
            f"IC length mismatch: len(IC)={len(key.ic)} vs nPublic+1={key.n_public + 1}"
        )
    return key


def vk_to_snarkjs(key: VerificationKey) -> dict[str, Any]:
    """Render a decoded key back to the snarkjs JSON layout."""
    return {
        "protocol": "groth16",
        "curve": "bn128",
        "nPublic": key.n_public,
        "vk_alpha_1": g1_to_json(key.alpha),
        "vk_beta_2": g2_to_json(key.beta),
        "vk_gamma_2": g2_to_json(key.gamma),
        "vk_delta_2": g2_to_json(key.delta),
        "IC": [g1_to_json(p) for p in key.ic],
    }


def load_verification_key(path: str | Path) -> VerificationKey:
    data = load_json(path)
    if not isinstance(data, dict):
        raise MalformedArtifact(f"{path}: verification key must be a JSON object")
    return vk_from_snarkjs(data)
