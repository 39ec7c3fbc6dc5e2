import json

import pytest

from zkcall.adapters.snarkjs_loader import (PLONK_COMMITMENTS,
                                            groth16_from_snarkjs,
                                            load_groth16_proof, load_json,
                                            load_plonk_proof, load_proof,
                                            load_public_signals,
                                            load_verification_key,
                                            plonk_from_snarkjs)
from zkcall.errors import DecodeError
from zkcall.tests import configure_test_logging, fake_plonk_proof

configure_test_logging()

"""
Test: snarkjs proof.json / public.json shapes -> zkcall proof records.
"""

SNARKJS_PROOF = {
    "pi_a": ["1", "2", "1"],
    "pi_b": [["3", "4"], ["5", "6"], ["1", "0"]],
    "pi_c": ["0x7", "8", "1"],
    "protocol": "groth16",
    "curve": "bn128",
}


def test_groth16_swaps_g2_limbs():
    p = groth16_from_snarkjs(SNARKJS_PROOF)
    assert p.a == (1, 2)
    # contract order: imaginary limb first
    assert p.b == ((4, 3), (6, 5))
    assert p.c == (7, 8)


def test_groth16_accepts_affine_and_bundles():
    flat = {"pi_a": [1, 2], "pi_b": [[3, 4], [5, 6]], "pi_c": [7, 8]}
    assert groth16_from_snarkjs({"proof": flat, "publicSignals": ["9"]}) == groth16_from_snarkjs(flat)


def test_groth16_infinity_maps_to_zero():
    proof = dict(SNARKJS_PROOF, pi_c=["0", "1", "0"])
    assert groth16_from_snarkjs(proof).c == (0, 0)


@pytest.mark.parametrize(
    "patch",
    [
        {"pi_a": ["1"]},
        {"pi_a": ["1", "2", "3"]},
        {"pi_b": [["3", "4"]]},
        {"pi_b": [["3", "4", "9"], ["5", "6"]]},
        {"pi_b": [["3", "4"], ["5", "6"], ["2", "0"]]},
        {"pi_c": ["x", "8"]},
        {"protocol": "plonk"},
    ],
)
def test_groth16_bad_shapes(patch):
    with pytest.raises(DecodeError):
        groth16_from_snarkjs(dict(SNARKJS_PROOF, **patch))


def test_groth16_missing_key():
    proof = dict(SNARKJS_PROOF)
    del proof["pi_b"]
    with pytest.raises(DecodeError):
        groth16_from_snarkjs(proof)


def test_plonk_blob_layout():
    raw = fake_plonk_proof(seed=3)
    blob = plonk_from_snarkjs(raw)
    words = blob.words()
    assert len(words) == 2 * len(PLONK_COMMITMENTS) + 6
    assert words[0] == int(raw["A"][0])
    assert words[1] == int(raw["A"][1])
    assert words[-1] == int(raw["eval_zw"])


def test_plonk_eval_r_appended_when_present():
    raw = fake_plonk_proof(seed=3, with_eval_r=True)
    words = plonk_from_snarkjs(raw).words()
    assert len(words) == 2 * len(PLONK_COMMITMENTS) + 7
    assert words[-1] == int(raw["eval_r"])


def test_plonk_missing_field():
    raw = fake_plonk_proof()
    del raw["Wxiw"]
    with pytest.raises(DecodeError):
        plonk_from_snarkjs(raw)


def test_load_from_files(tmp_path):
    (tmp_path / "proof.json").write_text(json.dumps(SNARKJS_PROOF), encoding="utf-8")
    (tmp_path / "public.json").write_text(json.dumps(["2", "0x3"]), encoding="utf-8")
    proof, publics = load_proof("groth16", tmp_path / "proof.json", tmp_path / "public.json")
    assert proof.a == (1, 2)
    assert publics == [2, 3]
    assert load_public_signals(str(tmp_path / "public.json")) == [2, 3]


def test_load_embedded_public_signals():
    proof, publics = load_proof("groth16", {"proof": SNARKJS_PROOF, "publicSignals": ["5"]})
    assert publics == [5]


def test_typed_loaders():
    proof, publics = load_groth16_proof(SNARKJS_PROOF, ["1"])
    assert proof.c == (7, 8)
    assert publics == [1]
    plonk, publics = load_plonk_proof({"proof": fake_plonk_proof(), "publicSignals": ["9"]})
    assert plonk.blob.startswith("0x")
    assert publics == [9]
    with pytest.raises(DecodeError):
        load_plonk_proof(SNARKJS_PROOF, ["1"])


def test_load_without_public_signals():
    with pytest.raises(DecodeError):
        load_proof("groth16", SNARKJS_PROOF)


def test_load_json_sources():
    assert load_json('{"a": "1"}') == {"a": "1"}
    assert load_json(b'["1"]') == ["1"]
    with pytest.raises(DecodeError):
        load_json("not json and not a file")


def test_load_verification_key_normalizes():
    vk = load_verification_key({"protocol": "groth16", "IC": [["1", "2", "1"]]})
    assert vk["IC"] == [[1, 2, 1]]
    with pytest.raises(DecodeError):
        load_verification_key(["1"])
