from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Any, Optional, Dict
import numpy as np
from scipy.sparse import csr_matrix

from zkbp.core.fieldla import BN254_PRIME, parse_field_element, next_power_of_two

@dataclass
class Term:
    coeff: int
    var: int

@dataclass
class R1CS:
    # coefficient rows as Python-int mod-p maps
    A_rows: List[Dict[int,int]]
    B_rows: List[Dict[int,int]]
    C_rows: List[Dict[int,int]]
    # 0/1 patterns over in-range columns, for summaries
    Apat: csr_matrix
    Bpat: csr_matrix
    Cpat: csr_matrix
    n_constraints: int
    n_vars: int
    n_inputs: int
    n_outputs: int
    prime: int
    var_map: Optional[List[int]]

def _normalize_constraint_entry(entry, p: int) -> List[Term]:
    if entry is None:
        return []
    if isinstance(entry, dict):
        return [Term(parse_field_element(v, p), int(k)) for k, v in entry.items()]
    if isinstance(entry, list):
        out = []
        for t in entry:
            if isinstance(t, dict) and "coeff" in t and "var" in t:
                out.append(Term(parse_field_element(t["coeff"], p), int(t["var"])))
            elif isinstance(t, (list, tuple)) and len(t) == 2:
                c, v = t
                out.append(Term(parse_field_element(c, p), int(v)))
            else:
                raise ValueError(f"Unrecognized term format element: {t!r}")
        return out
    raise ValueError(f"Unrecognized term container: {type(entry)}")

def _constraints_from_json(obj, p: int) -> List[Tuple[List[Term], List[Term], List[Term]]]:
    cons = obj.get("constraints")
    if cons is None:
        raise ValueError("R1CS JSON missing 'constraints'")
    out = []
    for i, c in enumerate(cons):
        if isinstance(c, list) and len(c) == 3:
            A_raw, B_raw, C_raw = c
        elif isinstance(c, dict) and all(k in c for k in ("A", "B", "C")):
            A_raw, B_raw, C_raw = c["A"], c["B"], c["C"]
        else:
            raise ValueError(f"Constraint {i} unexpected format: {type(c)}")
        out.append((
            _normalize_constraint_entry(A_raw, p),
            _normalize_constraint_entry(B_raw, p),
            _normalize_constraint_entry(C_raw, p),
        ))
    return out

def _build_rows_maps(constraints, p: int):
    # indices are kept as-is, range checks belong to the converter
    def to_map(terms: List[Term]) -> Dict[int,int]:
        d: Dict[int,int] = {}
        for t in terms:
            d[t.var] = (d.get(t.var, 0) + t.coeff) % p
        return {k:v for k,v in d.items() if v != 0}
    A_rows, B_rows, C_rows = [], [], []
    for (A_terms, B_terms, C_terms) in constraints:
        A_rows.append(to_map(A_terms))
        B_rows.append(to_map(B_terms))
        C_rows.append(to_map(C_terms))
    return A_rows, B_rows, C_rows

def _build_patterns(rows_by_side, n_rows, n_cols):
    def build_from(rows: List[Dict[int,int]]):
        rr, cc = [], []
        for i, row in enumerate(rows):
            for j in row:
                if 0 <= j < n_cols:
                    rr.append(i); cc.append(j)
        M = csr_matrix((np.ones(len(rr), dtype=np.int8),
                        (np.array(rr, dtype=int), np.array(cc, dtype=int))), shape=(n_rows, n_cols))
        M.data[:] = 1
        return M
    return tuple(build_from(rows) for rows in rows_by_side)

def r1cs_from_obj(obj: Dict[str, Any]) -> R1CS:
    prime = int(obj.get("prime") or BN254_PRIME)
    n_vars_raw = obj.get("nVars", obj.get("nWitness"))
    n_inputs = int(obj.get("nInputs") or obj.get("nPubInputs") or 0)
    n_outputs = int(obj.get("nOutputs") or obj.get("publicOutputs") or 0)
    var_map = obj.get("map")
    if var_map is not None:
        var_map = [int(x) for x in var_map]

    # nConstraints in the header is informational, the list is authoritative
    constraints = _constraints_from_json(obj, prime)
    if n_vars_raw is not None:
        n_vars = int(n_vars_raw)
    else:
        maxv = -1
        for A,B,C in constraints:
            for t in (A+B+C):
                maxv = max(maxv, t.var)
        n_vars = maxv + 1

    A_rows, B_rows, C_rows = _build_rows_maps(constraints, prime)
    return r1cs_from_rows(A_rows, B_rows, C_rows, n_vars, prime=prime, var_map=var_map,
                          n_inputs=n_inputs, n_outputs=n_outputs)

def r1cs_from_rows(
    A_rows: List[Dict[int,int]],
    B_rows: List[Dict[int,int]],
    C_rows: List[Dict[int,int]],
    n_vars: int,
    prime: int = BN254_PRIME,
    var_map: Optional[List[int]] = None,
    n_inputs: int = 0,
    n_outputs: int = 0,
) -> R1CS:
    """Build an R1CS from already-reduced {var: coeff} rows."""
    if not (len(A_rows) == len(B_rows) == len(C_rows)):
        raise ValueError("A/B/C row counts differ")
    n_constraints = len(A_rows)
    Apat, Bpat, Cpat = _build_patterns((A_rows, B_rows, C_rows), n_constraints, n_vars)
    return R1CS(
        A_rows=A_rows, B_rows=B_rows, C_rows=C_rows,
        Apat=Apat, Bpat=Bpat, Cpat=Cpat,
        n_constraints=n_constraints, n_vars=n_vars,
        n_inputs=n_inputs, n_outputs=n_outputs,
        prime=prime, var_map=var_map,
    )

def load_r1cs_json(path: str | Path) -> R1CS:
    obj = json.loads(Path(path).read_text())
    if not isinstance(obj, dict):
        raise ValueError("R1CS JSON must be an object")
    return r1cs_from_obj(obj)


def summarize_r1cs(r: R1CS):
    mult_rows = int(((r.Apat.getnnz(axis=1) > 0) & (r.Bpat.getnnz(axis=1) > 0)).sum()) if r.n_constraints else 0
    return {
        "n_constraints": int(r.n_constraints),
        "n_vars": int(r.n_vars),
        "padded_n_vars": next_power_of_two(r.n_vars) if r.n_vars else 0,
        "n_inputs": int(r.n_inputs),
        "n_outputs": int(r.n_outputs),
        "prime_bits": int(r.prime.bit_length()),
        "multiplicative_rows": mult_rows,
        "linear_rows": int(r.n_constraints - mult_rows),
        "has_wire_map": r.var_map is not None,
    }
