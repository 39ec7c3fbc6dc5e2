# zkcall/verifiers/__init__.py
"""
zkcall verification endpoints
=============================

An endpoint is anything with

    def verify(self, args: Groth16Args | PlonkArgs) -> bool: ...

Shipped endpoints:

- `zkcall.verifiers.contract.ContractVerifier`      deployed snarkjs verifier via web3.py
- `zkcall.verifiers.groth16_bn254.Groth16Verifier`  in-process py_ecc equivalent (Groth16 only)

`invoke()` is the one place the pipeline crosses into an endpoint. It makes a
single call and hands back the boolean verdict. A `False` is a normal answer.
Failures of the endpoint itself become `BoundaryError`.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from ..errors import BoundaryError, ZKCallError
from ..proofs import VerificationArgs, system_of

log = logging.getLogger(__name__)


@runtime_checkable
class VerificationEndpoint(Protocol):
    def verify(self, args: VerificationArgs) -> bool:
        ...


def invoke(endpoint: VerificationEndpoint, args: VerificationArgs) -> bool:
    """Submit `args` to `endpoint` once and return its boolean verdict."""
    try:
        result = endpoint.verify(args)
    except ZKCallError:
        raise
    except Exception as e:  # noqa: BLE001
        raise BoundaryError(f"verification endpoint failed: {e}") from e
    if not isinstance(result, bool):
        raise BoundaryError(
            f"verification endpoint returned {type(result).__name__}, expected bool"
        )
    log.info("%s verification -> %s", system_of(args).value, result)
    return result


__all__ = ["VerificationEndpoint", "invoke"]
