"""
zkcall.adapters.snarkjs_cli
===========================

The snarkjs command line as zkcall's external proving backend and calldata
exporter.

    snarkjs <groth16|plonk> fullprove input.json circuit.wasm circuit.zkey proof.json public.json
    snarkjs zkey export soliditycalldata public.json proof.json

Each call runs in its own temporary directory, so concurrent calls share
nothing. No timeout or retry is applied; a failing command surfaces as
`BoundaryError` carrying snarkjs' output.

Prereqs: Node.js and `snarkjs` on PATH (or `ZKCALL_SNARKJS` pointing at it).
"""

from __future__ import annotations

import json
import logging
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Protocol, Sequence, Tuple, Union

from ..errors import BoundaryError
from ..normalize import stringify
from ..proofs import ProofSystem

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ProvingBackend(Protocol):
    def full_prove(
        self,
        system: ProofSystem,
        witness: Mapping[str, Any],
        wasm: PathLike,
        zkey: PathLike,
    ) -> Tuple[Dict[str, Any], List[Any]]:
        ...


class SnarkjsCli:
    def __init__(self, snarkjs: Union[str, Sequence[str]] = "snarkjs") -> None:
        # "npx snarkjs" style commands are split into argv
        self.cmd: List[str] = shlex.split(snarkjs) if isinstance(snarkjs, str) else list(snarkjs)

    def _run(self, args: Sequence[str], cwd: Path) -> str:
        argv = [*self.cmd, *args]
        log.debug("running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv, cwd=str(cwd), stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True
            )
        except OSError as e:
            raise BoundaryError(f"could not run {self.cmd[0]}: {e}") from e
        if proc.returncode != 0:
            raise BoundaryError(
                f"{' '.join(argv[:3])} exited with {proc.returncode}: "
                f"{(proc.stderr or proc.stdout).strip()}"
            )
        return proc.stdout

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as e:
            raise BoundaryError(f"snarkjs produced no readable {path.name}: {e}") from e

    def full_prove(
        self,
        system: ProofSystem,
        witness: Mapping[str, Any],
        wasm: PathLike,
        zkey: PathLike,
    ) -> Tuple[Dict[str, Any], List[Any]]:
        """Return snarkjs' (proof, publicSignals), still string-encoded."""
        system = ProofSystem.parse(system)
        with tempfile.TemporaryDirectory(prefix="zkcall-") as td:
            tmp = Path(td)
            (tmp / "input.json").write_text(json.dumps(stringify(dict(witness))), encoding="utf-8")
            self._run(
                [
                    system.value, "fullprove", "input.json",
                    str(Path(wasm).resolve()), str(Path(zkey).resolve()),
                    "proof.json", "public.json",
                ],
                tmp,
            )
            proof = self._read_json(tmp / "proof.json")
            publics = self._read_json(tmp / "public.json")
        if not isinstance(proof, dict) or not isinstance(publics, list):
            raise BoundaryError("snarkjs returned an unexpected proof/public shape")
        return proof, publics

    def export(
        self,
        system: ProofSystem,
        proof: Mapping[str, Any],
        signals: Sequence[int],
    ) -> str:
        """Calldata text as printed by `snarkjs zkey export soliditycalldata`."""
        body = dict(proof)
        # snarkjs picks the exporter from the proof's own protocol field
        body.setdefault("protocol", ProofSystem.parse(system).value)
        with tempfile.TemporaryDirectory(prefix="zkcall-") as td:
            tmp = Path(td)
            (tmp / "proof.json").write_text(json.dumps(stringify(body)), encoding="utf-8")
            (tmp / "public.json").write_text(json.dumps(stringify(list(signals))), encoding="utf-8")
            out = self._run(["zkey", "export", "soliditycalldata", "public.json", "proof.json"], tmp)
        text = out.strip()
        if not text:
            raise BoundaryError("snarkjs printed no calldata")
        return text


__all__ = ["ProvingBackend", "SnarkjsCli"]
