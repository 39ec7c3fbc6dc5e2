"""
zkcall.normalize
================

Loss-free conversion of snarkjs' string-encoded big integers into Python
`int`s.

snarkjs emits every field element as a string ("123", sometimes "0x7b") so
that JavaScript does not round it through a float. `normalize()` walks an
arbitrary JSON-like tree and turns every numeric-looking string into an `int`
while keeping the shape of the tree intact:

    >>> normalize({"pi_a": ["1", "0x2", "1"], "protocol": "groth16"})
    {'pi_a': [1, 2, 1], 'protocol': 'groth16'}

Internally the raw value is lifted once into a closed set of variants
(`Scalar`, `Sequence`, `Mapping`, `Unmatched`); each variant knows how to
normalize itself, so the descent never re-inspects Python types.

Rules
-----
- "[0-9]+"            -> int (base 10)
- "0x[0-9a-fA-F]+"    -> int (base 16)
- list / tuple        -> same container, elementwise
- mapping             -> dict with the same keys
- None                -> None
- anything else       -> returned unchanged (bools, floats, other strings)

Cyclic structures are not supported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping as _MappingABC, Tuple, Union

from .errors import DecodeError

_DEC_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"0x[0-9a-fA-F]+")


def is_numeric(s: str) -> bool:
    """True if `s` is a decimal or 0x-hex integer literal."""
    return bool(_DEC_RE.fullmatch(s) or _HEX_RE.fullmatch(s))


def _to_int(s: str) -> int:
    if s.startswith("0x"):
        return int(s, 16)
    return int(s, 10)


def parse_field_element(token: str) -> int:
    """
    Strictly parse a single calldata token (decimal or 0x-hex).

    Raises DecodeError for anything else, including the empty string.
    """
    if not isinstance(token, str) or not is_numeric(token):
        raise DecodeError(f"not a field element: {token!r}")
    return _to_int(token)


# -----------------------------------------------------------------------------
# Variants
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Scalar:
    """A numeric string literal."""

    text: str

    def normalize(self) -> int:
        return _to_int(self.text)


@dataclass(frozen=True)
class Sequence:
    items: Tuple["Node", ...]
    as_tuple: bool = False

    def normalize(self) -> Union[list, tuple]:
        out = [item.normalize() for item in self.items]
        return tuple(out) if self.as_tuple else out


@dataclass(frozen=True)
class Mapping:
    entries: Tuple[Tuple[Any, "Node"], ...]

    def normalize(self) -> dict:
        return {key: node.normalize() for key, node in self.entries}


@dataclass(frozen=True)
class Unmatched:
    """Any leaf that is not a numeric string; passed through as-is."""

    value: Any

    def normalize(self) -> Any:
        return self.value


Node = Union[Scalar, Sequence, Mapping, Unmatched]


def lift(value: Any) -> Node:
    """Classify a raw JSON-like value into the variant tree."""
    if isinstance(value, str):
        return Scalar(value) if is_numeric(value) else Unmatched(value)
    if isinstance(value, (list, tuple)):
        return Sequence(tuple(lift(v) for v in value), as_tuple=isinstance(value, tuple))
    if isinstance(value, _MappingABC):
        return Mapping(tuple((k, lift(v)) for k, v in value.items()))
    return Unmatched(value)


def normalize(value: Any) -> Any:
    """Recursively convert numeric strings in `value` into ints."""
    return lift(value).normalize()


def stringify(value: Any) -> Any:
    """Inverse direction for writing JSON back to snarkjs: ints -> decimal strings."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [stringify(v) for v in value]
    if isinstance(value, _MappingABC):
        return {k: stringify(v) for k, v in value.items()}
    return value


__all__ = [
    "stringify",
    "Scalar",
    "Sequence",
    "Mapping",
    "Unmatched",
    "Node",
    "lift",
    "normalize",
    "is_numeric",
    "parse_field_element",
]
