from __future__ import annotations
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Tuple
import numpy as np

from zkbp.core.convert import ArithmeticCircuit, PaddedWitness

# ---- JSON in the snarkjs style: field elements as decimal strings ----
def _vec_to_json(v: np.ndarray) -> List[str]:
    return [str(int(x)) for x in v]

def _mat_to_json(M: np.ndarray) -> List[List[str]]:
    return [_vec_to_json(row) for row in M]

def _vec_from_json(lst, length: int, name: str) -> np.ndarray:
    if len(lst) != length:
        raise ValueError(f"{name} has length {len(lst)}, expected {length}")
    out = np.empty(len(lst), dtype=object)
    for i, x in enumerate(lst):
        out[i] = int(x)
    out.setflags(write=False)
    return out

def _mat_from_json(rows, n_rows: int, width: int, name: str) -> np.ndarray:
    if len(rows) != n_rows:
        raise ValueError(f"{name} has {len(rows)} rows, expected {n_rows}")
    out = np.empty((len(rows), width), dtype=object)
    for i, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"{name} row {i} has width {len(row)}, expected {width}")
        for j, x in enumerate(row):
            out[i, j] = int(x)
    out.setflags(write=False)
    return out

def circuit_to_json(circuit: ArithmeticCircuit, witness: PaddedWitness) -> Dict[str, Any]:
    return {
        "prime": str(circuit.prime),
        "nVars": circuit.n_vars,
        "paddedNVars": circuit.padded_n_vars,
        "nConstraints": circuit.n_constraints,
        "circuit": {
            "w_l": _mat_to_json(circuit.w_l),
            "w_r": _mat_to_json(circuit.w_r),
            "w_o": _mat_to_json(circuit.w_o),
            "w_v": _mat_to_json(circuit.w_v),
            "c": _vec_to_json(circuit.c),
        },
        "witness": {
            "a_l": _vec_to_json(witness.a_l),
            "a_r": _vec_to_json(witness.a_r),
            "a_o": _vec_to_json(witness.a_o),
            "v": _vec_to_json(witness.v),
            "gamma": _vec_to_json(witness.gamma),
        },
    }

def circuit_from_json(obj: Dict[str, Any]) -> Tuple[ArithmeticCircuit, PaddedWitness]:
    try:
        width = int(obj["paddedNVars"])
        c_obj, w_obj = obj["circuit"], obj["witness"]
        m = len(c_obj["w_l"])
        circuit = ArithmeticCircuit(
            w_l=_mat_from_json(c_obj["w_l"], m, width, "w_l"),
            w_r=_mat_from_json(c_obj["w_r"], m, width, "w_r"),
            w_o=_mat_from_json(c_obj["w_o"], m, width, "w_o"),
            w_v=_mat_from_json(c_obj["w_v"], m, width, "w_v"),
            c=_vec_from_json(c_obj["c"], m, "c"),
            prime=int(obj["prime"]),
            n_vars=int(obj["nVars"]),
            padded_n_vars=width,
        )
        witness = PaddedWitness(**{k: _vec_from_json(w_obj[k], width, k) for k in ("a_l", "a_r", "a_o", "v", "gamma")})
    except KeyError as e:
        raise ValueError(f"Circuit JSON missing {e.args[0]!r}") from None
    return circuit, witness

def write_circuit_json(path: str | Path, circuit: ArithmeticCircuit, witness: PaddedWitness) -> None:
    """
    Write JSON to a temp file and atomically move into place.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=p.name, dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(circuit_to_json(circuit, witness), fh)
        os.replace(tmp, str(p))
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)

def load_circuit_json(path: str | Path) -> Tuple[ArithmeticCircuit, PaddedWitness]:
    return circuit_from_json(json.loads(Path(path).read_text()))
