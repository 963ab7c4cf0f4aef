from __future__ import annotations
from typing import Dict, List
import numpy as np

BN254_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617

def neg_modp(x: int, p: int) -> int:
    """Additive inverse of x in F_p, as a canonical representative."""
    return (-x) % p

def parse_field_element(v, p: int) -> int:
    """Accept int or decimal/hex string, return value reduced mod p."""
    if isinstance(v, bool):
        raise ValueError(f"Unsupported field element type: {type(v)}")
    if isinstance(v, int):
        return v % p
    if isinstance(v, str):
        s = v.strip()
        neg = s.startswith("-")
        if neg:
            s = s[1:].strip()
        vv = int(s, 16) if s.startswith(("0x", "0X")) else int(s)
        return (-vv if neg else vv) % p
    raise ValueError(f"Unsupported field element type: {type(v)}")

def next_power_of_two(n: int) -> int:
    if n < 1:
        raise ValueError(f"next_power_of_two needs n >= 1, got {n}")
    return 1 << (n - 1).bit_length()

def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0

def matvec_rows_modp(rows: List[Dict[int,int]], z: np.ndarray, p: int) -> np.ndarray:
    """Compute (Rows @ z) mod p, where rows[i] is {col: coeff}."""
    m = len(rows)
    out = np.zeros(m, dtype=object)
    for i in range(m):
        acc = 0
        row = rows[i]
        for j, c in row.items():
            acc += c * z[j]
        out[i] = acc % p
    return out

def dense_matvec_modp(M: np.ndarray, x: np.ndarray, p: int) -> np.ndarray:
    """Exact (M @ x) mod p for object-dtype arrays."""
    m = M.shape[0]
    out = np.zeros(m, dtype=object)
    for i in range(m):
        acc = 0
        for a, b in zip(M[i], x):
            if a and b:
                acc += a * b
        out[i] = acc % p
    return out
