from __future__ import annotations
import logging
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from zkbp.config import DEFAULT_CONFIG
from zkbp.core.witness_io import load_witness_json

log = logging.getLogger(__name__)


class FrontendError(RuntimeError):
    pass


@dataclass
class CircuitPaths:
    circuit_id: str
    wasm: Path
    r1cs: Path
    input: Path

    @staticmethod
    def resolve(circuit_id: str, circuits_dir: str | Path | None = None,
                cfg: Optional[Dict[str, Any]] = None) -> "CircuitPaths":
        cfg = cfg or DEFAULT_CONFIG
        root = Path(circuits_dir if circuits_dir is not None else cfg["circuits_dir"])
        def at(key: str) -> Path:
            return root / cfg[key].format(id=circuit_id)
        return CircuitPaths(
            circuit_id=circuit_id,
            wasm=at("wasm_template"),
            r1cs=at("r1cs_template"),
            input=at("input_template"),
        )

    def missing(self, need_wasm: bool = True) -> List[Path]:
        paths = [self.r1cs, self.input] + ([self.wasm] if need_wasm else [])
        return [p for p in paths if not p.exists()]


def _run(cmd: List[str]) -> None:
    log.debug("running %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except FileNotFoundError:
        raise FrontendError(f"executable not found: {cmd[0]}") from None
    if proc.returncode != 0:
        raise FrontendError(f"{' '.join(cmd[:3])} failed ({proc.returncode}): {proc.stderr.strip()}")


def compute_witness(paths: CircuitPaths, p: int, snarkjs_bin: str = "snarkjs",
                    workdir: str | Path | None = None) -> List[int]:
    """
    Run the compiled circuit on its input assignment through snarkjs:
      snarkjs wtns calculate <wasm> <input> <out.wtns>
      snarkjs wtns export json <out.wtns> <out.json>
    and return the witness reduced mod p.
    """
    with tempfile.TemporaryDirectory(dir=workdir) as tmp:
        wtns = Path(tmp) / f"{paths.circuit_id}.wtns"
        wjson = Path(tmp) / f"{paths.circuit_id}.witness.json"
        _run([snarkjs_bin, "wtns", "calculate", str(paths.wasm), str(paths.input), str(wtns)])
        _run([snarkjs_bin, "wtns", "export", "json", str(wtns), str(wjson)])
        if not wjson.exists():
            raise FrontendError(f"snarkjs did not write {wjson.name}")
        return load_witness_json(wjson, p)
