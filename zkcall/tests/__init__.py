"""
zkcall.tests helpers

Utilities and test doubles shared by zkcall/* tests.

Exports:
- TEST_ROOT
- env_flag(name, default=False) -> bool
- configure_test_logging() -> None
- TrapdoorGroth16     py_ecc Groth16 "setup" that knows its trapdoor, so it
                      can produce proofs that verify against its own key
- TrapdoorProver      ProvingBackend for product circuits (public = prod of inputs)
- fake_plonk_proof()  well-shaped snarkjs PLONK proof JSON
- FakePlonkProver     ProvingBackend returning fake_plonk_proof() for a witness
- PlonkRegistry       PLONK endpoint accepting only registered (proof, inputs)

Environment toggles:
- ZKCALL_TEST_LOG=1   → enable DEBUG logging for zkcall.*
"""

from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Set, Tuple

from zkcall.config import LOG_FORMAT
from zkcall.proofs import PlonkArgs, ProofSystem, VerificationArgs
from zkcall.verifiers.pairing_bn254 import (curve_order, g1_generator,
                                            g2_generator, multiply,
                                            normalize_g1, normalize_g2)

TEST_ROOT: Path = Path(__file__).resolve().parent

R = curve_order()


# --- Env & logging -------------------------------------------------------------


def env_flag(name: str, default: bool = False) -> bool:
    """
    Read an environment flag in a truthy/falsey way: "1", "true", "yes" → True.
    """
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


def configure_test_logging(level: int | None = None) -> None:
    """
    Configure basic logging for zkcall.* loggers when ZKCALL_TEST_LOG is set.
    """
    if level is None:
        level = logging.DEBUG
    if env_flag("ZKCALL_TEST_LOG", False):
        logging.basicConfig(level=level, format=LOG_FORMAT)
        logging.getLogger("zkcall").setLevel(level)


# --- Groth16 with a known trapdoor ---------------------------------------------


def _g1_json(s: int) -> List[str]:
    x, y = normalize_g1(multiply(g1_generator(), s))
    return [str(x), str(y), "1"]


def _g2_json(s: int) -> List[List[str]]:
    (x0, x1), (y0, y1) = normalize_g2(multiply(g2_generator(), s))
    return [[str(x0), str(x1)], [str(y0), str(y1)], ["1", "0"]]


class TrapdoorGroth16:
    """
    All key points are multiples of the generators by known scalars, so

        a*b == alpha*beta + vk_x*gamma + c*delta   (mod r)

    can be solved for c. The resulting proof passes the real pairing check.
    """

    def __init__(self, n_public: int, seed: int = 7) -> None:
        rnd = random.Random(seed)
        self.n_public = n_public
        self.alpha, self.beta, self.gamma, self.delta = (rnd.randrange(1, R) for _ in range(4))
        self.ic = [rnd.randrange(1, R) for _ in range(n_public + 1)]
        self._rnd = rnd

    def vk_json(self) -> Dict[str, Any]:
        return {
            "protocol": "groth16",
            "curve": "bn128",
            "nPublic": self.n_public,
            "vk_alpha_1": _g1_json(self.alpha),
            "vk_beta_2": _g2_json(self.beta),
            "vk_gamma_2": _g2_json(self.gamma),
            "vk_delta_2": _g2_json(self.delta),
            "IC": [_g1_json(s) for s in self.ic],
        }

    def prove(self, public: Iterable[int]) -> Dict[str, Any]:
        """snarkjs-shaped proof.json (strings, projective z = 1)."""
        public = [int(v) for v in public]
        if len(public) != self.n_public:
            raise ValueError("wrong number of public inputs")
        vk_x = (self.ic[0] + sum(s * k for s, k in zip(public, self.ic[1:]))) % R
        a = self._rnd.randrange(1, R)
        b = self._rnd.randrange(1, R)
        c = (a * b - self.alpha * self.beta - vk_x * self.gamma) * pow(self.delta, -1, R) % R
        return {
            "pi_a": _g1_json(a),
            "pi_b": _g2_json(b),
            "pi_c": _g1_json(c),
            "protocol": "groth16",
            "curve": "bn128",
        }


def _product(witness: Mapping[str, Any]) -> int:
    out = 1
    for v in witness.values():
        out = out * int(v) % R
    return out


class TrapdoorProver:
    """ProvingBackend for an n-input multiplier circuit with one public output."""

    def __init__(self, setup: TrapdoorGroth16) -> None:
        self.setup = setup
        self.calls: List[Tuple[ProofSystem, Dict[str, Any]]] = []

    def full_prove(self, system, witness, wasm, zkey):
        self.calls.append((system, dict(witness)))
        publics = [str(_product(witness))]
        return self.setup.prove([int(publics[0])]), publics


# --- PLONK doubles ---------------------------------------------------------------


def fake_plonk_proof(seed: int = 1, with_eval_r: bool = False) -> Dict[str, Any]:
    """A snarkjs-shaped PLONK proof; the values are arbitrary G1 points and scalars."""
    rnd = random.Random(seed)
    proof: Dict[str, Any] = {"protocol": "plonk", "curve": "bn128"}
    for name in ("A", "B", "C", "Z", "T1", "T2", "T3", "Wxi", "Wxiw"):
        proof[name] = _g1_json(rnd.randrange(1, R))
    for name in ("eval_a", "eval_b", "eval_c", "eval_s1", "eval_s2", "eval_zw"):
        proof[name] = str(rnd.randrange(1, R))
    if with_eval_r:
        proof["eval_r"] = str(rnd.randrange(1, R))
    return proof


class FakePlonkProver:
    def full_prove(self, system, witness, wasm, zkey):
        return fake_plonk_proof(seed=_product(witness)), [str(_product(witness))]


class PlonkRegistry:
    """Accepts exactly the (proof blob, public inputs) pairs registered with it."""

    def __init__(self) -> None:
        self.valid: Set[Tuple[str, Tuple[int, ...]]] = set()
        self.seen: List[VerificationArgs] = []

    def register(self, blob: str, public: Iterable[int]) -> None:
        self.valid.add((blob, tuple(public)))

    def verify(self, args: VerificationArgs) -> bool:
        self.seen.append(args)
        if not isinstance(args, PlonkArgs):
            return False
        return (args.proof, args.public_inputs) in self.valid


__all__ = [
    "TEST_ROOT",
    "env_flag",
    "configure_test_logging",
    "TrapdoorGroth16",
    "TrapdoorProver",
    "fake_plonk_proof",
    "FakePlonkProver",
    "PlonkRegistry",
]
