from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, List
import numpy as np

from zkbp.core.fieldla import parse_field_element

def load_witness_json(path, p: int) -> List[int]:
    """
    Accept:
      • snarkjs: ["1","..."]
      • zkbp:    {"values":[...]}
      • alt:     {"witness":[...]} / {"data":[...]}
    Return list[int] reduced mod p.
    """
    obj = json.loads(Path(path).read_text())
    if isinstance(obj, list):
        vals = obj
    elif isinstance(obj, dict):
        vals = obj.get("values") or obj.get("witness") or obj.get("data") or []
    else:
        raise ValueError("Witness JSON does not contain an array")
    if not isinstance(vals, list):
        raise ValueError("Witness JSON does not contain an array")
    return [parse_field_element(v, p) for v in vals]

def _flatten(v, name: str) -> List[int]:
    if isinstance(v, list):
        out: List[int] = []
        for x in v:
            out.extend(_flatten(x, name))
        return out
    if isinstance(v, bool) or not isinstance(v, (int, str)):
        raise ValueError(f"Input {name!r} has non-numeric value {v!r}")
    if isinstance(v, str):
        s = v.strip()
        try:
            return [int(s, 16) if s.startswith(("0x", "0X")) else int(s)]
        except ValueError:
            raise ValueError(f"Input {name!r} has non-numeric value {v!r}") from None
    return [v]

def load_inputs_json(path) -> Dict[str, List[int]]:
    """
    Named circuit inputs, circom style: {"a": 3, "b": ["11"], "m": [[1,2],[3,4]]}.
    Scalars become one-element lists, nested arrays are flattened row-major.
    """
    obj = json.loads(Path(path).read_text())
    if not isinstance(obj, dict):
        raise ValueError("Input JSON must be an object of named signals")
    return {str(k): _flatten(v, str(k)) for k, v in obj.items()}

def assemble_full_z(wit_vals: List[int], var_map: List[int] | None, n_vars: int, p: int) -> np.ndarray:
    """
    Build z (length n_vars) in logical variable order.
    With a var_map, z[j] = wit_vals[var_map[j]]; slots whose storage index is
    out of range, or that the map does not cover, stay zero.
    """
    z = np.zeros(n_vars, dtype=object)
    if var_map is not None:
        for j, widx in enumerate(var_map[:n_vars]):
            if 0 <= widx < len(wit_vals):
                z[j] = wit_vals[widx] % p
    else:
        # assume identity mapping
        lim = min(n_vars, len(wit_vals))
        for j in range(lim):
            z[j] = wit_vals[j] % p
    return z
