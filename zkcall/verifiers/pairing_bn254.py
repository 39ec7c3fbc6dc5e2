"""
zkcall.verifiers.pairing_bn254
==============================

Thin BN254 (altbn128) pairing wrapper over `py_ecc`.

Public API
----------
- check_pairing_product(pairs) -> bool
- is_on_curve_g1(P), is_on_curve_g2(Q)
- normalize_g1(P) / normalize_g2(Q)  (to affine ints)
- g1_point(x, y) / g2_point(x, y)    (affine ints -> backend points)
- g1_generator(), g2_generator(), curve_order(), field_modulus()

Notes
-----
- Point ordering follows e(P, Q) with P in G1, Q in G2. `py_ecc.pairing`
  takes (Q, P); this wrapper handles it.
- Affine (0, 0) is the usual on-chain encoding of the point at infinity.
- All coordinates handed in are plain ints in snarkjs/py_ecc limb order
  (Fq2 = c0 + c1 * i given as (c0, c1)).
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple

try:  # optimized backend first
    from py_ecc.optimized_bn128 import (  # type: ignore
        FQ, FQ2, FQ12, G1 as _G1, G2 as _G2, add, b as _B, b2 as _B2,
        curve_order as _Q, field_modulus as _P, is_on_curve as _is_on_curve,
        multiply, neg, normalize as _normalize, pairing as _pairing,
    )
    _BACKEND_NAME = "py_ecc.optimized_bn128"
except ImportError:  # pragma: no cover
    from py_ecc.bn128 import (  # type: ignore
        FQ, FQ2, FQ12, G1 as _G1, G2 as _G2, add, b as _B, b2 as _B2,
        curve_order as _Q, field_modulus as _P, is_on_curve as _is_on_curve,
        multiply, neg, normalize as _normalize, pairing as _pairing,
    )
    _BACKEND_NAME = "py_ecc.bn128"

# Opaque backend tuples
G1Point = Any
G2Point = Any

BACKEND_NAME: str = _BACKEND_NAME


def curve_order() -> int:
    """BN254 subgroup order r (the scalar field)."""
    return int(_Q)


def field_modulus() -> int:
    """Base field modulus p."""
    return int(_P)


def g1_generator() -> G1Point:
    return _G1


def g2_generator() -> G2Point:
    return _G2


def _limb(c: Any) -> int:
    # optimized FQP keeps ints, the reference backend keeps FQ objects
    return int(getattr(c, "n", c))


def _is_inf(P: Any) -> bool:
    if P is None:
        return True
    if isinstance(P, (tuple, list)) and len(P) == 3:
        z = P[2]
        return z == type(z).zero()
    return False


def g1_point(x: int, y: int) -> G1Point:
    if x == 0 and y == 0:
        return (FQ(1), FQ(1), FQ(0))
    return (FQ(x), FQ(y), FQ(1))


def g2_point(x: Tuple[int, int], y: Tuple[int, int]) -> G2Point:
    if x == (0, 0) and y == (0, 0):
        return (FQ2([1, 0]), FQ2([1, 0]), FQ2([0, 0]))
    return (FQ2([x[0], x[1]]), FQ2([y[0], y[1]]), FQ2([1, 0]))


def is_on_curve_g1(P: G1Point) -> bool:
    """True if P is on G1 or is the point at infinity."""
    return _is_inf(P) or bool(_is_on_curve(P, _B))


def is_on_curve_g2(Q: G2Point) -> bool:
    """True if Q is on the twist or is the point at infinity."""
    return _is_inf(Q) or bool(_is_on_curve(Q, _B2))


def normalize_g1(P: G1Point) -> Optional[Tuple[int, int]]:
    """Affine (x, y) ints, or None for infinity."""
    if _is_inf(P):
        return None
    ax, ay = _normalize(P)
    return _limb(ax), _limb(ay)


def normalize_g2(Q: G2Point) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    """Affine ((x_c0, x_c1), (y_c0, y_c1)) ints, or None for infinity."""
    if _is_inf(Q):
        return None
    ax, ay = _normalize(Q)
    return (_limb(ax.coeffs[0]), _limb(ax.coeffs[1])), (_limb(ay.coeffs[0]), _limb(ay.coeffs[1]))


def check_pairing_product(pairs: Iterable[Tuple[G1Point, G2Point]]) -> bool:
    """
    Return True iff prod e(P_i, Q_i) == 1 in GT.

    Raises ValueError if a point is off its curve.
    """
    acc = FQ12.one()
    for P, Q in pairs:
        if not is_on_curve_g1(P):
            raise ValueError("G1 point is not on curve")
        if not is_on_curve_g2(Q):
            raise ValueError("G2 point is not on curve")
        if _is_inf(P) or _is_inf(Q):
            continue
        acc *= _pairing(Q, P)
    return acc == FQ12.one()


__all__ = [
    "BACKEND_NAME",
    "G1Point",
    "G2Point",
    "add",
    "multiply",
    "neg",
    "curve_order",
    "field_modulus",
    "g1_generator",
    "g2_generator",
    "g1_point",
    "g2_point",
    "is_on_curve_g1",
    "is_on_curve_g2",
    "normalize_g1",
    "normalize_g2",
    "check_pairing_product",
]
