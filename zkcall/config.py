"""
zkcall configuration.

Tunables for wiring a pipeline to real collaborators:
- JSON-RPC endpoint of the node hosting the verifier contracts
- verifier contract addresses per proof system
- optional ABI artifact for the verifier contracts
- snarkjs command
- logging level

Environment variables (examples):
  ZKCALL_RPC_URL=http://127.0.0.1:8545
  ZKCALL_GROTH16_VERIFIER=0x5FbDB2315678afecb367f032d93F642f64180aa3
  ZKCALL_PLONK_VERIFIER=0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512
  ZKCALL_VERIFIER_ABI=~/project/artifacts/contracts/Verifier.sol/Verifier.json
  ZKCALL_SNARKJS="npx snarkjs"
  ZKCALL_LOG_LEVEL=DEBUG

Notes
- Paths beginning with ~ are expanded.
- No dotenv; inject env with your process manager.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import ZKCallError
from .proofs import ProofSystem

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return default
    return v.strip()


def _env_path(name: str) -> Optional[Path]:
    v = _env(name)
    return Path(v).expanduser() if v else None


@dataclass(frozen=True)
class ZkCallConfig:
    rpc_url: str = "http://127.0.0.1:8545"
    groth16_verifier: Optional[str] = None
    plonk_verifier: Optional[str] = None
    verifier_abi: Optional[Path] = None
    snarkjs: str = "snarkjs"
    log_level: str = "INFO"

    def verifier_address(self, system: Union[str, ProofSystem]) -> str:
        system = ProofSystem.parse(system)
        addr = self.groth16_verifier if system is ProofSystem.GROTH16 else self.plonk_verifier
        if not addr:
            raise ZKCallError(
                f"no {system.value} verifier address configured "
                f"(set ZKCALL_{system.name}_VERIFIER)"
            )
        return addr


def load() -> ZkCallConfig:
    """
    Build a ZkCallConfig from environment variables with sensible defaults.
    """
    return ZkCallConfig(
        rpc_url=_env("ZKCALL_RPC_URL", "http://127.0.0.1:8545") or "http://127.0.0.1:8545",
        groth16_verifier=_env("ZKCALL_GROTH16_VERIFIER"),
        plonk_verifier=_env("ZKCALL_PLONK_VERIFIER"),
        verifier_abi=_env_path("ZKCALL_VERIFIER_ABI"),
        snarkjs=_env("ZKCALL_SNARKJS", "snarkjs") or "snarkjs",
        log_level=(_env("ZKCALL_LOG_LEVEL", "INFO") or "INFO").upper(),
    )


def configure_logging(level: Union[int, str, None] = None) -> None:
    """basicConfig for the process plus the level of the `zkcall` logger tree."""
    if level is None:
        level = load().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("zkcall").setLevel(level)


__all__ = ["ZkCallConfig", "load", "configure_logging", "LOG_FORMAT"]
