"""
zkcall
======

Turn snarkjs Groth16 / PLONK proofs into verifier-contract calldata and get a
verdict for them.

    from zkcall import Pipeline
    from zkcall.verifiers.groth16_bn254 import Groth16Verifier

    pipe = Pipeline(Groth16Verifier.from_json(vk), "groth16")
    verdict = pipe.run(proof_json, public_json)

Modules
-------
- zkcall.normalize   string-encoded bigints -> ints
- zkcall.proofs      proof records, proof-system enum, verifier arguments
- zkcall.calldata    per-system calldata encode/decode
- zkcall.verifiers   endpoints (contract via web3, in-process Groth16 via py_ecc)
- zkcall.adapters    snarkjs JSON loading and the snarkjs CLI
- zkcall.pipeline    the normalize -> encode -> invoke orchestration
- zkcall.config      env-driven configuration and logging setup
"""

from __future__ import annotations

from .calldata import (codec_for, decode_calldata, encode_calldata,
                       verification_args)
from .errors import (BoundaryError, DecodeError, VerificationFailure,
                     ZKCallError)
from .normalize import normalize
from .pipeline import Pipeline, Stage, Verdict, verify
from .proofs import (Groth16Args, Groth16Proof, PlonkArgs, PlonkProof,
                     ProofSystem)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "normalize",
    "ProofSystem",
    "Groth16Proof",
    "PlonkProof",
    "Groth16Args",
    "PlonkArgs",
    "codec_for",
    "encode_calldata",
    "decode_calldata",
    "verification_args",
    "Pipeline",
    "Stage",
    "Verdict",
    "verify",
    "ZKCallError",
    "DecodeError",
    "BoundaryError",
    "VerificationFailure",
]
