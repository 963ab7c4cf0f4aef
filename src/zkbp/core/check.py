from __future__ import annotations
from typing import List, Optional
import numpy as np

from zkbp.core.fieldla import matvec_rows_modp, dense_matvec_modp
from zkbp.core.r1cs_io import R1CS
from zkbp.core.witness_io import assemble_full_z
from zkbp.core.convert import ArithmeticCircuit, PaddedWitness, validate_indices

def r1cs_residual(r: R1CS, z: np.ndarray) -> np.ndarray:
    """Row-wise (A z) ⊙ (B z) - (C z) over F_p."""
    validate_indices(r)
    p = r.prime
    Az = matvec_rows_modp(r.A_rows, z, p)
    Bz = matvec_rows_modp(r.B_rows, z, p)
    Cz = matvec_rows_modp(r.C_rows, z, p)
    return (Az * Bz - Cz) % p

def first_unsatisfied_row(r: R1CS, wit_vals: List[int]) -> Optional[int]:
    """Index of the first constraint the witness violates, or None."""
    z = assemble_full_z(wit_vals, r.var_map, r.n_vars, r.prime)
    res = r1cs_residual(r, z)
    for i, x in enumerate(res):
        if x != 0:
            return i
    return None

def circuit_residual(circuit: ArithmeticCircuit, witness: PaddedWitness) -> np.ndarray:
    """Row-wise w_l·a_l + w_r·a_r + w_o·a_o - w_v·v - c over F_p."""
    p = circuit.prime
    lhs = (dense_matvec_modp(circuit.w_l, witness.a_l, p)
           + dense_matvec_modp(circuit.w_r, witness.a_r, p)
           + dense_matvec_modp(circuit.w_o, witness.a_o, p))
    rhs = dense_matvec_modp(circuit.w_v, witness.v, p) + circuit.c
    return (lhs - rhs) % p
