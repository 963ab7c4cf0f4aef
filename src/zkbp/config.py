from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "circuits_dir": "circuits",
    # per-circuit file layout, {id} is the circuit identifier
    "wasm_template": "{id}_js/{id}.wasm",
    "r1cs_template": "{id}.r1cs.json",
    "input_template": "{id}.input.json",
    "snarkjs_bin": "snarkjs",
    "check_witness": True,
}


def load_config(path: str, base: Dict[str, Any] = None) -> Dict[str, Any]:
    """Shallow-merge a JSON config file over base (DEFAULT_CONFIG when None)."""
    base = base.copy() if base is not None else DEFAULT_CONFIG.copy()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")
    for k, v in data.items():
        base[k] = v
    return base
