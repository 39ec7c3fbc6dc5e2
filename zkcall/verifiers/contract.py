"""
zkcall.verifiers.contract
=========================

Verification endpoint backed by a deployed snarkjs verifier contract, called
read-only (`eth_call`) through web3.py.

Contract interfaces (as generated by snarkjs):

    Groth16:  verifyProof(uint[2] a, uint[2][2] b, uint[2] c, uint[N] input) -> bool
    PLONK:    verifyProof(bytes proof, uint[] pubSignals) -> bool

The Groth16 input array is fixed-size, so the default ABI is built from the
number of public inputs on each call. A hardhat/truffle artifact (or a bare
ABI list) can be supplied instead with `load_abi()`.

Transport failures, reverts and non-boolean answers surface as
`BoundaryError`; nothing is retried.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from web3 import Web3

from ..errors import BoundaryError, DecodeError, ZKCallError
from ..proofs import PlonkArgs, ProofSystem, VerificationArgs, system_of

log = logging.getLogger(__name__)

VERIFY_FN = "verifyProof"


def _arg(name: str, typ: str) -> Dict[str, str]:
    return {"internalType": typ, "name": name, "type": typ}


def default_abi(system: ProofSystem, n_public: int) -> List[Dict[str, Any]]:
    """Minimal ABI containing only `verifyProof` for the given system."""
    if ProofSystem.parse(system) is ProofSystem.GROTH16:
        inputs = [
            _arg("a", "uint256[2]"),
            _arg("b", "uint256[2][2]"),
            _arg("c", "uint256[2]"),
            _arg("input", f"uint256[{n_public}]"),
        ]
    else:
        inputs = [_arg("proof", "bytes"), _arg("pubSignals", "uint256[]")]
    return [
        {
            "inputs": inputs,
            "name": VERIFY_FN,
            "outputs": [{"internalType": "bool", "name": "r", "type": "bool"}],
            "stateMutability": "view",
            "type": "function",
        }
    ]


def load_abi(source: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read an ABI from a compiler artifact (`{"abi": [...]}`) or a bare list."""
    try:
        with Path(source).expanduser().open("r", encoding="utf-8") as fh:
            obj = json.load(fh)
    except (OSError, ValueError) as e:
        raise BoundaryError(f"could not read verifier ABI from {source}: {e}") from e
    abi = obj.get("abi") if isinstance(obj, dict) else obj
    if not isinstance(abi, list):
        raise BoundaryError(f"{source} does not contain an ABI list")
    return abi


class ContractVerifier:
    """`verify(args)` -> bool via `verifyProof(...).call()`."""

    def __init__(
        self,
        w3: Web3,
        address: str,
        system: Union[str, ProofSystem],
        abi: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.w3 = w3
        try:
            self.address = Web3.to_checksum_address(address)
        except (TypeError, ValueError) as e:
            raise ZKCallError(f"invalid verifier contract address {address!r}: {e}") from e
        self.system = ProofSystem.parse(system)
        self.abi = abi

    @classmethod
    def from_rpc(
        cls,
        rpc_url: str,
        address: str,
        system: Union[str, ProofSystem],
        abi: Optional[List[Dict[str, Any]]] = None,
    ) -> "ContractVerifier":
        return cls(Web3(Web3.HTTPProvider(rpc_url)), address, system, abi)

    def _call_args(self, args: VerificationArgs) -> tuple:
        if isinstance(args, PlonkArgs):
            proof = args.proof.strip().strip('"')
            return (Web3.to_bytes(hexstr=proof), list(args.public_inputs))
        return args.as_call()

    def verify(self, args: VerificationArgs) -> bool:
        if system_of(args) is not self.system:
            raise DecodeError(
                f"{system_of(args).value} arguments sent to a {self.system.value} verifier"
            )
        abi = self.abi or default_abi(self.system, len(args.public_inputs))
        try:
            contract = self.w3.eth.contract(address=self.address, abi=abi)
            result = getattr(contract.functions, VERIFY_FN)(*self._call_args(args)).call()
        except Exception as e:  # noqa: BLE001
            raise BoundaryError(f"{VERIFY_FN} call to {self.address} failed: {e}") from e
        if not isinstance(result, bool):
            raise BoundaryError(f"{VERIFY_FN} returned {type(result).__name__}, expected bool")
        log.debug("%s at %s -> %s", VERIFY_FN, self.address, result)
        return result


__all__ = ["VERIFY_FN", "default_abi", "load_abi", "ContractVerifier"]
