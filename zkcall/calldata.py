"""
zkcall.calldata
===============

Encode `(proof, public_signals)` into the calldata a snarkjs Solidity verifier
expects, and decode calldata back into typed verification arguments.

One codec per proof system; callers pick it explicitly with `codec_for()`.

Groth16 text form (same as `snarkjs zkey export soliditycalldata`):

    ["a0","a1"],[["b00","b01"],["b10","b11"]],["c0","c1"],["s0",...]

PLONK text form (blob + public-input list):

    0x<proof words>,["s0",...]

Every numeric token is written as a quoted, zero-padded 32-byte hex word.
Decoding accepts decimal or hex tokens. Anything that does not parse raises
`DecodeError`; nothing is ever replaced by zero or skipped, since a shifted
element would only surface as a silent `false` from the verifier.
Bracket groups are checked against the layout above before any value is
read, so a value can never slide into a neighbouring slot.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence, Type, Union

from .errors import DecodeError
from .normalize import parse_field_element
from .proofs import (Groth16Args, Groth16Proof, PlonkArgs, PlonkProof, Proof,
                     ProofSystem, VerificationArgs, field_element,
                     public_signals)

log = logging.getLogger(__name__)

Calldata = str

# Number of positional proof tokens ahead of the public inputs (Groth16)
GROTH16_PROOF_TOKENS = 8

_STRIP_RE = re.compile(r'["\s]')

Group = List[Union[str, "Group"]]


def p256(v: int) -> str:
    """Render a field element as a quoted 32-byte hex word."""
    return '"0x' + format(v, "064x") + '"'


def groups(text: Calldata) -> Group:
    """
    Split calldata text into its comma-separated top-level items, keeping the
    bracket nesting:

        '["1","2"],[["3"]],[]'  ->  [["1", "2"], [["3"]], []]

    Quotes and whitespace are dropped. `[]` is an empty group; any other
    empty position (`[1,,2]`, `[1,]`) is kept as an empty token so the caller
    fails on it. Unbalanced or juxtaposed brackets raise DecodeError.
    """
    if not isinstance(text, str):
        raise DecodeError("calldata must be text")
    root: Group = []
    stack: List[Group] = [root]
    buf = ""
    closed = False  # last item was a bracket group
    for ch in _STRIP_RE.sub("", text):
        if ch == "[":
            if buf or closed:
                raise DecodeError("calldata group must follow a comma")
            group: Group = []
            stack[-1].append(group)
            stack.append(group)
        elif ch == ",":
            if not closed:
                stack[-1].append(buf)
            buf, closed = "", False
        elif ch == "]":
            if len(stack) == 1:
                raise DecodeError("unbalanced ']' in calldata")
            if not closed and (buf or stack[-1]):
                stack[-1].append(buf)
            stack.pop()
            buf, closed = "", True
        else:
            if closed:
                raise DecodeError("calldata token must follow a comma")
            buf += ch
    if len(stack) != 1:
        raise DecodeError("unbalanced '[' in calldata")
    if not closed and (buf or root):
        root.append(buf)
    return root


def _leaves(group: Union[str, Group], n: Optional[int], what: str) -> List[str]:
    """A flat bracket group of `n` tokens (any number when `n` is None)."""
    if not isinstance(group, list) or not all(isinstance(t, str) for t in group):
        raise DecodeError(f"{what} must be a flat bracket group")
    if n is not None and len(group) != n:
        raise DecodeError(f"{what} must hold {n} values, got {len(group)}")
    return group


def _parse_all(toks: Sequence[str], offset: int = 0) -> List[int]:
    out = []
    for i, tok in enumerate(toks):
        try:
            out.append(parse_field_element(tok))
        except DecodeError as e:
            raise DecodeError(f"calldata token #{offset + i}: {e}") from None
    return out


# -----------------------------------------------------------------------------
# Groth16
# -----------------------------------------------------------------------------


class Groth16Codec:
    system = ProofSystem.GROTH16

    @staticmethod
    def flatten(proof: Groth16Proof, signals: Sequence[int]) -> List[int]:
        """a0, a1, b00, b01, b10, b11, c0, c1, s0 .. s(n-1)"""
        if not isinstance(proof, Groth16Proof):
            raise DecodeError("expected a Groth16Proof")
        flat = [
            proof.a[0], proof.a[1],
            proof.b[0][0], proof.b[0][1],
            proof.b[1][0], proof.b[1][1],
            proof.c[0], proof.c[1],
        ]
        flat.extend(public_signals(signals))
        return flat

    @staticmethod
    def unflatten(flat: Sequence[int]) -> Groth16Args:
        if len(flat) < GROTH16_PROOF_TOKENS:
            raise DecodeError(
                f"Groth16 calldata needs at least {GROTH16_PROOF_TOKENS} tokens, got {len(flat)}"
            )
        t = [field_element(v, f"token #{i}") for i, v in enumerate(flat)]
        return Groth16Args(
            a=(t[0], t[1]),
            b=((t[2], t[3]), (t[4], t[5])),
            c=(t[6], t[7]),
            public_inputs=tuple(t[8:]),
        )

    def args(self, proof: Groth16Proof, signals: Sequence[int]) -> Groth16Args:
        return self.unflatten(self.flatten(proof, signals))

    def encode(self, proof: Groth16Proof, signals: Sequence[int]) -> Calldata:
        t = [p256(v) for v in self.flatten(proof, signals)]
        return (
            f"[{t[0]}, {t[1]}],"
            f"[[{t[2]}, {t[3]}],[{t[4]}, {t[5]}]],"
            f"[{t[6]}, {t[7]}],"
            f"[{','.join(t[8:])}]"
        )

    def decode(self, text: Calldata) -> Groth16Args:
        """Decode `[a0,a1],[[b00,b01],[b10,b11]],[c0,c1],[s...]`; every group is arity-checked."""
        top = groups(text)
        if len(top) != 4:
            raise DecodeError(f"Groth16 calldata must have 4 groups (a, b, c, inputs), got {len(top)}")
        a, b, c, inputs = top
        if not isinstance(b, list) or len(b) != 2:
            raise DecodeError("b must hold 2 Fq2 pairs")
        flat = [
            *_leaves(a, 2, "a"),
            *_leaves(b[0], 2, "b[0]"),
            *_leaves(b[1], 2, "b[1]"),
            *_leaves(c, 2, "c"),
            *_leaves(inputs, None, "public inputs"),
        ]
        return self.unflatten(_parse_all(flat))


# -----------------------------------------------------------------------------
# PLONK
# -----------------------------------------------------------------------------


class PlonkCodec:
    system = ProofSystem.PLONK

    def args(self, proof: PlonkProof, signals: Sequence[int]) -> PlonkArgs:
        if not isinstance(proof, PlonkProof):
            raise DecodeError("expected a PlonkProof")
        return PlonkArgs(proof=proof.blob, public_inputs=tuple(public_signals(signals)))

    def encode(self, proof: PlonkProof, signals: Sequence[int]) -> Calldata:
        a = self.args(proof, signals)
        return f"{a.proof},[{','.join(p256(v) for v in a.public_inputs)}]"

    def decode(self, text: Calldata) -> PlonkArgs:
        """
        Exactly two items: the proof blob, taken verbatim, and one bracket
        group of public inputs.
        """
        top = groups(text)
        if len(top) != 2 or not isinstance(top[0], str):
            raise DecodeError("PLONK calldata must be a 0x proof blob followed by one input group")
        head = text.split(",", 1)[0]
        PlonkProof.from_hex(head.strip().strip('"'))
        inputs = _leaves(top[1], None, "public inputs")
        return PlonkArgs(proof=head, public_inputs=tuple(_parse_all(inputs, offset=1)))


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------

CODECS: Dict[ProofSystem, Type] = {
    ProofSystem.GROTH16: Groth16Codec,
    ProofSystem.PLONK: PlonkCodec,
}


def codec_for(system) -> "Groth16Codec | PlonkCodec":
    return CODECS[ProofSystem.parse(system)]()


def encode_calldata(system, proof: Proof, signals: Sequence[int]) -> Calldata:
    text = codec_for(system).encode(proof, signals)
    log.debug("encoded %s calldata (%d chars)", ProofSystem.parse(system).value, len(text))
    return text


def decode_calldata(system, text: Calldata) -> VerificationArgs:
    return codec_for(system).decode(text)


def verification_args(system, proof: Proof, signals: Sequence[int]) -> VerificationArgs:
    """Structured path: build endpoint arguments without going through text."""
    return codec_for(system).args(proof, signals)


__all__ = [
    "Calldata",
    "GROTH16_PROOF_TOKENS",
    "p256",
    "groups",
    "Groth16Codec",
    "PlonkCodec",
    "CODECS",
    "codec_for",
    "encode_calldata",
    "decode_calldata",
    "verification_args",
]
