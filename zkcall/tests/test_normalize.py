import pytest
from hypothesis import given, strategies as st

from zkcall.errors import DecodeError
from zkcall.normalize import (Mapping, Scalar, Sequence, Unmatched, is_numeric,
                              lift, normalize, parse_field_element, stringify)
from zkcall.tests import configure_test_logging

configure_test_logging()

"""
Test: bigint normalization of snarkjs string-encoded values.
"""

FIELD = st.integers(min_value=0, max_value=2**256 - 1)


@given(st.from_regex(r"[0-9]+", fullmatch=True))
def test_decimal_roundtrip(s):
    v = normalize(s)
    assert isinstance(v, int)
    # leading zeros normalize away, as with a JS BigInt
    assert str(v) == (s.lstrip("0") or "0")


@given(FIELD)
def test_canonical_decimal_is_exact(n):
    assert str(normalize(str(n))) == str(n)


@given(FIELD)
def test_hex_equals_decimal(n):
    assert normalize(hex(n)) == normalize(str(n)) == n
    assert normalize("0x" + format(n, "X")) == n


@given(st.lists(FIELD, max_size=32))
def test_sequence_order_preserved(values):
    assert normalize([str(v) for v in values]) == values
    assert normalize(tuple(hex(v) for v in values)) == tuple(values)


def test_structure_is_preserved():
    raw = {
        "pi_a": ["1", "0x2", "1"],
        "pi_b": [["3", "4"], ["5", "6"], ["1", "0"]],
        "protocol": "groth16",
        "nested": {"t": ("7", "x"), "empty": [], "none": None, "flag": True},
    }
    out = normalize(raw)
    assert out == {
        "pi_a": [1, 2, 1],
        "pi_b": [[3, 4], [5, 6], [1, 0]],
        "protocol": "groth16",
        "nested": {"t": (7, "x"), "empty": [], "none": None, "flag": True},
    }
    assert set(out) == set(raw)
    assert isinstance(out["nested"]["t"], tuple)


@pytest.mark.parametrize(
    "leaf",
    ["", "0X1f", "-5", "12a", "0x", " 12", "12\n", "bn128", "١٢", 3.5, 17, False, None],
)
def test_non_numeric_leaves_pass_through(leaf):
    assert normalize(leaf) == leaf
    assert type(normalize(leaf)) is type(leaf)


def test_lift_variants():
    node = lift({"a": ["1", "x", None]})
    assert isinstance(node, Mapping)
    (key, seq), = node.entries
    assert key == "a"
    assert isinstance(seq, Sequence)
    assert [type(n) for n in seq.items] == [Scalar, Unmatched, Unmatched]


def test_is_numeric():
    assert is_numeric("123")
    assert is_numeric("0xdeadBEEF")
    assert not is_numeric("0xg")
    assert not is_numeric("")


def test_parse_field_element_strict():
    assert parse_field_element("0x10") == 16
    assert parse_field_element("10") == 10
    for bad in ["", "0xzz", "1.5", "abc", "12 "]:
        with pytest.raises(DecodeError):
            parse_field_element(bad)


def test_stringify_inverts_normalize():
    raw = {"a": ["1", "2"], "b": {"c": "3"}, "protocol": "plonk", "ok": True}
    assert stringify(normalize(raw)) == raw
