"""
zkcall.verifiers.groth16_bn254
==============================

In-process Groth16 verification endpoint for BN254 that behaves like the
Solidity verifier snarkjs generates, so calldata can be checked without a
node.

Verification equation
---------------------
    e(A, B) * e(-alpha1, beta2) * e(-VK_x, gamma2) * e(-C, delta2) == 1

    VK_x = IC[0] + sum_i input[i] * IC[i+1]

Argument layout
---------------
`verify_proof(a, b, c, inputs)` takes the arguments exactly as the contract's
`verifyProof` does: G2 coordinates list the imaginary limb first. They are
swapped back to py_ecc's (c0, c1) order here.

Where the contract would revert (input >= r, coordinate >= p, wrong number
of inputs) or the points are simply wrong, this endpoint returns False: the
arguments are well-typed, so the answer is a verdict, not an error.

Verifying key JSON (snarkjs `verification_key.json`)
----------------------------------------------------
    {
      "protocol": "groth16",
      "vk_alpha_1": [ax, ay, "1"],
      "vk_beta_2":  [[bx0, bx1], [by0, by1], ["1", "0"]],
      "vk_gamma_2": [...],
      "vk_delta_2": [...],
      "IC": [[x, y, "1"], ...]           # length = 1 + #public inputs
    }

Trailing projective coordinates are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple

from ..errors import DecodeError
from ..normalize import normalize
from ..proofs import Groth16Args, VerificationArgs
from .pairing_bn254 import (G1Point, G2Point, add, check_pairing_product,
                            curve_order, field_modulus, g1_point, g2_point,
                            is_on_curve_g1, is_on_curve_g2, multiply, neg)

log = logging.getLogger(__name__)

_R = curve_order()
_P = field_modulus()


@dataclass(frozen=True)
class VerifyingKey:
    alpha1: G1Point
    beta2: G2Point
    gamma2: G2Point
    delta2: G2Point
    IC: List[G1Point]  # [IC0, IC1, ..., ICn]

    @property
    def n_public(self) -> int:
        return len(self.IC) - 1


def _xy(pt: Any, what: str) -> Tuple[int, int]:
    if not isinstance(pt, (list, tuple)) or len(pt) < 2:
        raise DecodeError(f"{what} must be [x, y, ...]")
    x, y = pt[0], pt[1]
    if not isinstance(x, int) or not isinstance(y, int):
        raise DecodeError(f"{what} coordinates must be integers")
    return x, y


def _vk_g1(pt: Any, what: str) -> G1Point:
    P = g1_point(*_xy(pt, what))
    if not is_on_curve_g1(P):
        raise DecodeError(f"{what} is not on G1")
    return P


def _vk_g2(pt: Any, what: str) -> G2Point:
    if not isinstance(pt, (list, tuple)) or len(pt) < 2:
        raise DecodeError(f"{what} must be [[x0, x1], [y0, y1], ...]")
    Q = g2_point(_xy(pt[0], what), _xy(pt[1], what))
    if not is_on_curve_g2(Q):
        raise DecodeError(f"{what} is not on G2")
    return Q


def load_vk(vk_json: Mapping[str, Any]) -> VerifyingKey:
    """Parse a snarkjs Groth16 verification key (strings or ints)."""
    vk = normalize(vk_json)
    if not isinstance(vk, Mapping):
        raise DecodeError("verification key must be a JSON object")
    proto = vk.get("protocol")
    if proto is not None and str(proto).lower() != "groth16":
        raise DecodeError(f"not a Groth16 verification key (protocol={proto!r})")
    try:
        ic = vk["IC"]
        alpha, beta, gamma, delta = (
            vk["vk_alpha_1"], vk["vk_beta_2"], vk["vk_gamma_2"], vk["vk_delta_2"],
        )
    except KeyError as e:
        raise DecodeError(f"verification key missing {e.args[0]!r}") from None
    if not isinstance(ic, list) or not ic:
        raise DecodeError("vk.IC must be a non-empty list of G1 points")
    return VerifyingKey(
        alpha1=_vk_g1(alpha, "vk_alpha_1"),
        beta2=_vk_g2(beta, "vk_beta_2"),
        gamma2=_vk_g2(gamma, "vk_gamma_2"),
        delta2=_vk_g2(delta, "vk_delta_2"),
        IC=[_vk_g1(p, f"IC[{i}]") for i, p in enumerate(ic)],
    )


def _vk_x(IC: Sequence[G1Point], inputs: Sequence[int]) -> G1Point:
    acc = IC[0]
    for i, s in enumerate(inputs):
        if s != 0:
            acc = add(acc, multiply(IC[i + 1], s))
    return acc


class Groth16Verifier:
    """Verification endpoint backed by py_ecc; `verify(args)` -> bool."""

    def __init__(self, vk: VerifyingKey) -> None:
        self.vk = vk

    @classmethod
    def from_json(cls, vk_json: Mapping[str, Any]) -> "Groth16Verifier":
        return cls(load_vk(vk_json))

    def verify_proof(
        self,
        a: Sequence[int],
        b: Sequence[Sequence[int]],
        c: Sequence[int],
        inputs: Sequence[int],
    ) -> bool:
        vk = self.vk
        if len(inputs) != vk.n_public:
            log.debug("input count %d != %d", len(inputs), vk.n_public)
            return False
        if any(s >= _R for s in inputs):
            log.debug("public input outside the scalar field")
            return False
        coords = [*a, *c, *b[0], *b[1]]
        if any(v >= _P for v in coords):
            log.debug("proof coordinate outside the base field")
            return False

        A = g1_point(a[0], a[1])
        # contract order is (c1, c0) per Fq2 coordinate
        B = g2_point((b[0][1], b[0][0]), (b[1][1], b[1][0]))
        C = g1_point(c[0], c[1])
        if not (is_on_curve_g1(A) and is_on_curve_g2(B) and is_on_curve_g1(C)):
            log.debug("proof point not on curve")
            return False

        pairs = [
            (A, B),
            (neg(vk.alpha1), vk.beta2),
            (neg(_vk_x(vk.IC, inputs)), vk.gamma2),
            (neg(C), vk.delta2),
        ]
        return check_pairing_product(pairs)

    def verify(self, args: VerificationArgs) -> bool:
        if not isinstance(args, Groth16Args):
            raise DecodeError("Groth16Verifier only accepts Groth16 arguments")
        return self.verify_proof(*args.as_call())


__all__ = ["VerifyingKey", "load_vk", "Groth16Verifier"]
