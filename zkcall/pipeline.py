"""
zkcall.pipeline
===============

normalize -> encode -> invoke -> verdict, for one proof system.

    NORMALIZE --> ENCODE --> INVOKE --> DONE
        |            |
        +----> FAIL <+          (DecodeError, endpoint never called)

A `Pipeline` holds only its collaborators (endpoint, exporter, proving
backend); every run works on its own values, so one instance can serve many
threads at once.

Usage
-----
>>> from zkcall.pipeline import Pipeline
>>> from zkcall.verifiers.groth16_bn254 import Groth16Verifier
>>> pipe = Pipeline(Groth16Verifier.from_json(vk), "groth16")
>>> pipe.run(proof_json, public_json).ok
True

A `False` verdict means the endpoint checked the arguments and rejected them.
Arguments that cannot even be built raise `DecodeError`; collaborator
failures raise `BoundaryError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union

from .adapters.snarkjs_cli import ProvingBackend, SnarkjsCli
from .adapters.snarkjs_loader import from_snarkjs
from .calldata import Calldata, decode_calldata, encode_calldata
from .config import ZkCallConfig
from .config import load as load_config
from .errors import DecodeError, VerificationFailure, ZKCallError
from .normalize import normalize
from .proofs import (Groth16Proof, PlonkProof, ProofSystem, VerificationArgs,
                     public_signals)
from .verifiers import VerificationEndpoint, invoke

log = logging.getLogger(__name__)


class Stage(str, Enum):
    NORMALIZE = "normalize"
    ENCODE = "encode"
    INVOKE = "invoke"
    DONE = "done"
    FAIL = "fail"


@dataclass(frozen=True)
class Verdict:
    ok: bool
    system: ProofSystem
    args: VerificationArgs

    def __bool__(self) -> bool:
        return self.ok


class CalldataExporter(Protocol):
    def export(self, system: ProofSystem, proof: Mapping[str, Any], signals: Sequence[int]) -> Calldata:
        ...


class BuiltinExporter:
    """Encode snarkjs proof JSON with zkcall's own codecs."""

    def export(self, system: ProofSystem, proof: Mapping[str, Any], signals: Sequence[int]) -> Calldata:
        return encode_calldata(system, from_snarkjs(system, proof), signals)


class Pipeline:
    def __init__(
        self,
        endpoint: VerificationEndpoint,
        system: Union[str, ProofSystem],
        exporter: Optional[CalldataExporter] = None,
        backend: Optional[ProvingBackend] = None,
    ) -> None:
        self.endpoint = endpoint
        self.system = ProofSystem.parse(system)
        self.exporter = exporter or BuiltinExporter()
        self.backend = backend

    @classmethod
    def from_config(
        cls,
        system: Union[str, ProofSystem],
        cfg: Optional[ZkCallConfig] = None,
    ) -> "Pipeline":
        """Contract-backed pipeline with snarkjs as proving backend."""
        # contract endpoint pulls in web3; keep it off the import path of the core
        from .verifiers.contract import ContractVerifier, load_abi

        cfg = cfg or load_config()
        abi = load_abi(cfg.verifier_abi) if cfg.verifier_abi else None
        endpoint = ContractVerifier.from_rpc(cfg.rpc_url, cfg.verifier_address(system), system, abi)
        return cls(endpoint, system, backend=SnarkjsCli(cfg.snarkjs))

    # ------------------------------------------------------------------

    def _fail(self, stage: Stage, err: DecodeError) -> None:
        log.warning("%s: %s during %s: %s", self.system.value, Stage.FAIL.value, stage.value, err)

    def _invoke(self, args: VerificationArgs) -> Verdict:
        log.debug("%s: %s", self.system.value, Stage.INVOKE.value)
        ok = invoke(self.endpoint, args)
        log.debug("%s: %s ok=%s", self.system.value, Stage.DONE.value, ok)
        return Verdict(ok=ok, system=self.system, args=args)

    def run(self, proof: Any, signals: Any) -> Verdict:
        """
        Verify a proof and its public signals.

        `proof` is snarkjs proof JSON (strings or ints, bare or bundled) or an
        already built `Groth16Proof` / `PlonkProof`.
        """
        stage = Stage.NORMALIZE
        try:
            log.debug("%s: %s", self.system.value, stage.value)
            pub: List[int] = public_signals(normalize(signals))

            stage = Stage.ENCODE
            log.debug("%s: %s", self.system.value, stage.value)
            if isinstance(proof, (Groth16Proof, PlonkProof)):
                text = encode_calldata(self.system, proof, pub)
            else:
                proof_n = normalize(proof)
                if not isinstance(proof_n, Mapping):
                    raise DecodeError("proof must be a JSON object")
                text = self.exporter.export(self.system, proof_n, pub)
            args = decode_calldata(self.system, text)
        except DecodeError as e:
            self._fail(stage, e)
            raise
        return self._invoke(args)

    def run_calldata(self, text: Calldata) -> Verdict:
        """Verify calldata produced elsewhere (e.g. by the snarkjs CLI)."""
        try:
            args = decode_calldata(self.system, text)
        except DecodeError as e:
            self._fail(Stage.ENCODE, e)
            raise
        return self._invoke(args)

    def prove_and_verify(
        self,
        witness: Mapping[str, Any],
        wasm: Union[str, Path],
        zkey: Union[str, Path],
    ) -> Verdict:
        if self.backend is None:
            raise ZKCallError("pipeline has no proving backend")
        proof, signals = self.backend.full_prove(self.system, witness, wasm, zkey)
        return self.run(proof, signals)

    def verify_or_raise(self, proof: Any, signals: Any) -> Verdict:
        verdict = self.run(proof, signals)
        if not verdict.ok:
            raise VerificationFailure(f"{self.system.value} proof rejected by the verifier")
        return verdict


def verify(
    system: Union[str, ProofSystem],
    proof: Any,
    signals: Any,
    endpoint: VerificationEndpoint,
) -> Verdict:
    """One-shot helper: `Pipeline(endpoint, system).run(proof, signals)`."""
    return Pipeline(endpoint, system).run(proof, signals)


__all__ = [
    "Stage",
    "Verdict",
    "CalldataExporter",
    "BuiltinExporter",
    "Pipeline",
    "verify",
]
