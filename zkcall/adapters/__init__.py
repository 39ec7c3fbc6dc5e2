"""
zkcall.adapters
===============

Boundary adapters for snarkjs:

- `snarkjs_loader`  snarkjs JSON (proof.json / public.json / verification_key.json)
                    -> zkcall proof records
- `snarkjs_cli`     the snarkjs command line as proving backend and calldata exporter
"""

from __future__ import annotations

from .snarkjs_cli import ProvingBackend, SnarkjsCli
from .snarkjs_loader import (from_snarkjs, groth16_from_snarkjs,
                             load_groth16_proof, load_json, load_plonk_proof,
                             load_proof, load_public_signals,
                             load_verification_key, plonk_from_snarkjs)

__all__ = [
    "ProvingBackend",
    "SnarkjsCli",
    "from_snarkjs",
    "groth16_from_snarkjs",
    "plonk_from_snarkjs",
    "load_json",
    "load_proof",
    "load_groth16_proof",
    "load_plonk_proof",
    "load_public_signals",
    "load_verification_key",
]
