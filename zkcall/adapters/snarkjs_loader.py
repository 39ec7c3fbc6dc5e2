"""
zkcall.adapters.snarkjs_loader
==============================

Helpers to **load and normalize** snarkjs JSON artifacts into zkcall's typed
proof records.

This module does **not** verify anything; it parses files/JSON, coerces
bigint-like strings into Python `int`s (via `zkcall.normalize`) and reshapes
snarkjs' layouts into `Groth16Proof` / `PlonkProof`.

Typical snarkjs shapes
----------------------
Groth16 proof.json (projective coordinates, z = 1):
{
  "protocol": "groth16",
  "curve": "bn128",
  "pi_a": [ "..", "..", "1" ],
  "pi_b": [[ "x0","x1" ], [ "y0","y1" ], [ "1","0" ]],
  "pi_c": [ "..", "..", "1" ]
}

PLONK proof.json:
{
  "protocol": "plonk",
  "A": [x, y, "1"], "B": [...], "C": [...], "Z": [...],
  "T1": [...], "T2": [...], "T3": [...], "Wxi": [...], "Wxiw": [...],
  "eval_a": "..", "eval_b": "..", "eval_c": "..",
  "eval_s1": "..", "eval_s2": "..", "eval_zw": "..", "eval_r": ".."   # eval_r: older snarkjs only
}

public.json is a bare array of decimal strings. Some tools wrap everything as
{ "proof": {...}, "publicSignals": [...] }; both forms are accepted.

Exports
-------
- load_json(source) -> dict | list
- load_public_signals(source) -> list[int]
- groth16_from_snarkjs(proof) -> Groth16Proof
- plonk_from_snarkjs(proof) -> PlonkProof
- load_proof(system, proof_source, public_source=None) -> (proof, publics)
- load_verification_key(source) -> dict (ints everywhere)
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..errors import DecodeError
from ..normalize import normalize
from ..proofs import (Groth16Proof, PlonkProof, Proof, ProofSystem,
                      field_element, public_signals)

JsonLike = Union[str, bytes, os.PathLike, Mapping[str, Any], list]

PLONK_COMMITMENTS = ("A", "B", "C", "Z", "T1", "T2", "T3", "Wxi", "Wxiw")
PLONK_EVALUATIONS = ("eval_a", "eval_b", "eval_c", "eval_s1", "eval_s2", "eval_zw")
PLONK_OPTIONAL_EVALUATIONS = ("eval_r",)


# -----------------------------------------------------------------------------
# I/O helpers
# -----------------------------------------------------------------------------

def load_json(source: JsonLike) -> Any:
    """
    Load JSON from:
      - dict/list: shallow-copied
      - bytes
      - path-like or string path
      - string containing JSON text

    Raises DecodeError on failure.
    """
    if isinstance(source, Mapping):
        return dict(source)
    if isinstance(source, list):
        return list(source)
    try:
        if isinstance(source, (bytes, bytearray, memoryview)):
            return json.loads(bytes(source).decode("utf-8"))
        s = os.fspath(source) if isinstance(source, os.PathLike) else str(source)
        if os.path.isfile(s):
            with open(s, "r", encoding="utf-8") as f:
                return json.load(f)
        return json.loads(s)
    except (OSError, ValueError) as e:
        raise DecodeError(f"Could not load JSON from provided source: {e}") from e


def _unwrap(obj: Any) -> Tuple[Mapping[str, Any], Optional[Any]]:
    """Split a {proof, publicSignals} bundle; flat proofs pass through."""
    if not isinstance(obj, Mapping):
        raise DecodeError("proof must be a JSON object")
    if isinstance(obj.get("proof"), Mapping):
        return obj["proof"], obj.get("publicSignals")
    return obj, obj.get("publicSignals")


def _check_protocol(proof: Mapping[str, Any], expected: ProofSystem) -> None:
    proto = proof.get("protocol")
    if proto is None:
        return
    if ProofSystem.parse(str(proto)) is not expected:
        raise DecodeError(f"expected a {expected.value} proof, got protocol={proto!r}")


def load_public_signals(source: JsonLike) -> List[int]:
    return public_signals(normalize(load_json(source)))


# -----------------------------------------------------------------------------
# Point reshaping
# -----------------------------------------------------------------------------

def _affine_g1(pt: Any, what: str) -> Tuple[int, int]:
    """[x, y] or projective [x, y, 1]; snarkjs' infinity [0, 1, 0] -> (0, 0)."""
    if not isinstance(pt, (list, tuple)) or len(pt) not in (2, 3):
        raise DecodeError(f"{what} must have 2 coordinates (or 3 with z = 1)")
    if len(pt) == 3:
        z = field_element(pt[2], f"{what}.z")
        if z == 0:
            return (0, 0)
        if z != 1:
            raise DecodeError(f"{what} is not affine (z = {z})")
    return (field_element(pt[0], f"{what}.x"), field_element(pt[1], f"{what}.y"))


def _affine_g2(pt: Any, what: str) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """[[x0, x1], [y0, y1]] optionally followed by z = [1, 0]."""
    if not isinstance(pt, (list, tuple)) or len(pt) not in (2, 3):
        raise DecodeError(f"{what} must have 2 coordinates (or 3 with z = [1, 0])")
    limbs = []
    for i, part in enumerate(pt):
        if not isinstance(part, (list, tuple)) or len(part) != 2:
            raise DecodeError(f"{what}[{i}] must be an Fq2 pair")
        limbs.append((field_element(part[0], f"{what}[{i}][0]"), field_element(part[1], f"{what}[{i}][1]")))
    if len(limbs) == 3:
        if limbs[2] == (0, 0):
            return ((0, 0), (0, 0))
        if limbs[2] != (1, 0):
            raise DecodeError(f"{what} is not affine (z = {limbs[2]})")
    return limbs[0], limbs[1]


# -----------------------------------------------------------------------------
# Groth16
# -----------------------------------------------------------------------------

def groth16_from_snarkjs(proof_json: Mapping[str, Any]) -> Groth16Proof:
    """
    Build a Groth16Proof from snarkjs JSON (strings or ints).

    pi_b limbs are reordered to the verifier contract's (c1, c0) order.
    """
    proof, _ = _unwrap(normalize(proof_json))
    _check_protocol(proof, ProofSystem.GROTH16)
    for k in ("pi_a", "pi_b", "pi_c"):
        if k not in proof:
            raise DecodeError(f"Groth16 proof missing '{k}'")
    (bx0, bx1), (by0, by1) = _affine_g2(proof["pi_b"], "pi_b")
    return Groth16Proof.create(
        a=_affine_g1(proof["pi_a"], "pi_a"),
        b=((bx1, bx0), (by1, by0)),
        c=_affine_g1(proof["pi_c"], "pi_c"),
    )


# -----------------------------------------------------------------------------
# PLONK
# -----------------------------------------------------------------------------

def plonk_from_snarkjs(proof_json: Mapping[str, Any]) -> PlonkProof:
    """Pack a snarkjs PLONK proof into the contract's opaque byte layout."""
    proof, _ = _unwrap(normalize(proof_json))
    _check_protocol(proof, ProofSystem.PLONK)
    words: List[int] = []
    for name in PLONK_COMMITMENTS:
        if name not in proof:
            raise DecodeError(f"PLONK proof missing commitment '{name}'")
        words.extend(_affine_g1(proof[name], name))
    for name in PLONK_EVALUATIONS:
        if name not in proof:
            raise DecodeError(f"PLONK proof missing evaluation '{name}'")
        words.append(field_element(proof[name], name))
    for name in PLONK_OPTIONAL_EVALUATIONS:
        if name in proof:
            words.append(field_element(proof[name], name))
    return PlonkProof.from_words(words)


# -----------------------------------------------------------------------------
# Entry points
# -----------------------------------------------------------------------------

_BUILDERS = {
    ProofSystem.GROTH16: groth16_from_snarkjs,
    ProofSystem.PLONK: plonk_from_snarkjs,
}


def from_snarkjs(system, proof_json: Mapping[str, Any]) -> Proof:
    return _BUILDERS[ProofSystem.parse(system)](proof_json)


def load_proof(
    system,
    proof_source: JsonLike,
    public_source: Optional[JsonLike] = None,
) -> Tuple[Proof, List[int]]:
    """
    Convenience loader:
        proof, publics = load_proof("groth16", "proof.json", "public.json")

    Public signals come from `public_source` when given, else from an
    embedded "publicSignals" field.
    """
    raw = normalize(load_json(proof_source))
    _, embedded = _unwrap(raw)
    if public_source is not None:
        publics = load_public_signals(public_source)
    elif embedded is not None:
        publics = public_signals(embedded)
    else:
        raise DecodeError("no public signals: pass public.json or embed 'publicSignals'")
    return from_snarkjs(system, raw), publics


def load_groth16_proof(
    proof_source: JsonLike, public_source: Optional[JsonLike] = None
) -> Tuple[Groth16Proof, List[int]]:
    return load_proof(ProofSystem.GROTH16, proof_source, public_source)  # type: ignore[return-value]


def load_plonk_proof(
    proof_source: JsonLike, public_source: Optional[JsonLike] = None
) -> Tuple[PlonkProof, List[int]]:
    return load_proof(ProofSystem.PLONK, proof_source, public_source)  # type: ignore[return-value]


def load_verification_key(source: JsonLike) -> Dict[str, Any]:
    vk = normalize(load_json(source))
    if not isinstance(vk, dict):
        raise DecodeError("verification key must be a JSON object")
    return vk


__all__ = [
    "load_json",
    "load_public_signals",
    "groth16_from_snarkjs",
    "plonk_from_snarkjs",
    "from_snarkjs",
    "load_proof",
    "load_groth16_proof",
    "load_plonk_proof",
    "load_verification_key",
    "PLONK_COMMITMENTS",
    "PLONK_EVALUATIONS",
]
