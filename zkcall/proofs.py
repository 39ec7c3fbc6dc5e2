"""
zkcall.proofs
=============

Typed proof records for the two supported proof systems, plus the argument
tuples handed to a verification endpoint.

Groth16
-------
A Groth16 proof is three BN254 points:

    a: G1 (x, y)
    b: G2 ((x_c1, x_c0), (y_c1, y_c0))
    c: G1 (x, y)

`b` is stored in the order the snarkjs Solidity verifier expects: each Fq2
coordinate lists its imaginary limb first. snarkjs' own JSON writes
`[c0, c1]`; `zkcall.adapters.snarkjs_loader` performs the swap.

PLONK
-----
A PLONK proof is treated as one opaque `0x`-hex blob: 32-byte big-endian words
of the commitment coordinates followed by the evaluations, as laid out by
snarkjs `exportSolidityCallData`.

Records are `msgspec.Struct`s (frozen); use the `create`/`from_*`
constructors, which coerce containers to tuples and enforce arity.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, List, Sequence, Tuple, Union

import msgspec

from .errors import DecodeError, ZKCallError
from .normalize import _HEX_RE

FieldElement = int
G1 = Tuple[int, int]
G2 = Tuple[Tuple[int, int], Tuple[int, int]]

WORD_BYTES = 32
_WORD_LIMIT = 1 << (8 * WORD_BYTES)


class ProofSystem(str, Enum):
    GROTH16 = "groth16"
    PLONK = "plonk"

    @classmethod
    def parse(cls, name: Union[str, "ProofSystem"]) -> "ProofSystem":
        """Accept common aliases and return the canonical member."""
        if isinstance(name, ProofSystem):
            return name
        if not isinstance(name, str):
            raise ZKCallError("proof system name must be a string")
        key = name.strip().lower().replace("-", "_")
        if key in ("groth16", "g16", "groth16_bn254"):
            return cls.GROTH16
        if key in ("plonk", "plonk_kzg", "plonk_kzg_bn254"):
            return cls.PLONK
        raise ZKCallError(
            f"unsupported proof system '{name}'; expected one of: "
            + ", ".join(m.value for m in cls)
        )


# -----------------------------------------------------------------------------
# Field element helpers
# -----------------------------------------------------------------------------


def field_element(v: Any, what: str = "value") -> int:
    """Return `v` if it is a non-negative int; raise DecodeError otherwise."""
    # bool is an int subclass; it is never a field element here
    if isinstance(v, bool) or not isinstance(v, int):
        raise DecodeError(f"{what} must be an integer, got {type(v).__name__}")
    if v < 0:
        raise DecodeError(f"{what} must be non-negative")
    return v


def public_signals(values: Any) -> List[int]:
    """Validate an ordered sequence of normalized public signals."""
    if not isinstance(values, (list, tuple)):
        raise DecodeError("public signals must be a sequence")
    return [field_element(v, f"public signal #{i}") for i, v in enumerate(values)]


def _pair(pt: Any, what: str) -> Tuple[int, int]:
    if not isinstance(pt, (list, tuple)) or len(pt) != 2:
        raise DecodeError(f"{what} must have exactly 2 components")
    return (field_element(pt[0], f"{what}[0]"), field_element(pt[1], f"{what}[1]"))


# -----------------------------------------------------------------------------
# Proof records
# -----------------------------------------------------------------------------


class Groth16Proof(msgspec.Struct, frozen=True):
    a: G1
    b: G2
    c: G1

    @classmethod
    def create(cls, a: Sequence[int], b: Sequence[Sequence[int]], c: Sequence[int]) -> "Groth16Proof":
        if not isinstance(b, (list, tuple)) or len(b) != 2:
            raise DecodeError("b must have exactly 2 components")
        return cls(
            a=_pair(a, "a"),
            b=(_pair(b[0], "b[0]"), _pair(b[1], "b[1]")),
            c=_pair(c, "c"),
        )


class PlonkProof(msgspec.Struct, frozen=True):
    blob: str

    @classmethod
    def from_hex(cls, token: str) -> "PlonkProof":
        token = token.strip() if isinstance(token, str) else token
        if not isinstance(token, str) or not _HEX_RE.fullmatch(token):
            raise DecodeError("PLONK proof blob must be a 0x-prefixed hex string")
        if len(token) % 2:
            raise DecodeError("PLONK proof blob must be whole bytes (even hex length)")
        return cls(blob=token)

    @classmethod
    def from_words(cls, words: Iterable[int]) -> "PlonkProof":
        """Pack field elements as consecutive 32-byte big-endian words."""
        parts = []
        for i, w in enumerate(words):
            field_element(w, f"proof word #{i}")
            if w >= _WORD_LIMIT:
                raise DecodeError(f"proof word #{i} does not fit in {WORD_BYTES} bytes")
            parts.append(w.to_bytes(WORD_BYTES, "big").hex())
        if not parts:
            raise DecodeError("PLONK proof has no words")
        return cls(blob="0x" + "".join(parts))

    def words(self) -> List[int]:
        """Split the blob back into 32-byte words (the last may be short)."""
        raw = self.blob[2:]
        step = 2 * WORD_BYTES
        return [int(raw[i:i + step], 16) for i in range(0, len(raw), step)]


Proof = Union[Groth16Proof, PlonkProof]


# -----------------------------------------------------------------------------
# Verification arguments
# -----------------------------------------------------------------------------


class Groth16Args(msgspec.Struct, frozen=True):
    a: G1
    b: G2
    c: G1
    public_inputs: Tuple[int, ...]

    def as_call(self) -> tuple:
        """Positional arguments for `verifyProof(a, b, c, input)`."""
        return (
            list(self.a),
            [list(self.b[0]), list(self.b[1])],
            list(self.c),
            list(self.public_inputs),
        )


class PlonkArgs(msgspec.Struct, frozen=True):
    proof: str
    public_inputs: Tuple[int, ...]

    def as_call(self) -> tuple:
        """Positional arguments for `verifyProof(proof, pubSignals)`."""
        return (self.proof, list(self.public_inputs))


VerificationArgs = Union[Groth16Args, PlonkArgs]


def system_of(args: VerificationArgs) -> ProofSystem:
    return ProofSystem.GROTH16 if isinstance(args, Groth16Args) else ProofSystem.PLONK


__all__ = [
    "FieldElement",
    "ProofSystem",
    "field_element",
    "public_signals",
    "Groth16Proof",
    "PlonkProof",
    "Proof",
    "Groth16Args",
    "PlonkArgs",
    "VerificationArgs",
    "system_of",
    "WORD_BYTES",
]
