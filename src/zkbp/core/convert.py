from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np

from zkbp.core.fieldla import next_power_of_two, neg_modp
from zkbp.core.r1cs_io import R1CS
from zkbp.core.witness_io import assemble_full_z

log = logging.getLogger(__name__)


class ConversionError(ValueError):
    """Base class for everything convert() refuses."""


class MissingWitness(ConversionError):
    def __init__(self):
        super().__init__("Circuit witness is missing")


class EmptyCircuit(ConversionError):
    def __init__(self, n_vars: int, n_constraints: int):
        super().__init__(f"Circuit is empty (n_vars={n_vars}, n_constraints={n_constraints})")
        self.n_vars = n_vars
        self.n_constraints = n_constraints


class InvalidConstraint(ConversionError):
    def __init__(self, row: int, side: str, var: int, n_vars: int):
        super().__init__(
            f"Constraint {row} side {side} references variable {var}, valid range is [0, {n_vars})"
        )
        self.row = row
        self.side = side
        self.var = var


class InvalidWitness(ConversionError):
    def __init__(self, length: int, n_vars: int):
        super().__init__(f"Witness has {length} values, circuit needs {n_vars}")
        self.length = length
        self.n_vars = n_vars


@dataclass(frozen=True)
class ArithmeticCircuit:
    # rows satisfy w_l·a_l + w_r·a_r + w_o·a_o = w_v·v + c
    w_l: np.ndarray
    w_r: np.ndarray
    w_o: np.ndarray
    w_v: np.ndarray
    c: np.ndarray
    prime: int
    n_vars: int
    padded_n_vars: int

    @property
    def n_constraints(self) -> int:
        return int(self.w_l.shape[0])


@dataclass(frozen=True)
class PaddedWitness:
    a_l: np.ndarray
    a_r: np.ndarray
    a_o: np.ndarray
    v: np.ndarray
    gamma: np.ndarray


def _zeros(*shape) -> np.ndarray:
    out = np.empty(shape, dtype=object)
    out.fill(0)
    return out


def _freeze(*arrays: np.ndarray) -> None:
    for a in arrays:
        a.setflags(write=False)


def validate_indices(r: R1CS) -> None:
    n = r.n_vars
    for i in range(r.n_constraints):
        for side, rows in (("A", r.A_rows), ("B", r.B_rows), ("C", r.C_rows)):
            for j in rows[i]:
                if not (0 <= j < n):
                    raise InvalidConstraint(i, side, j, n)


def _place(dst: np.ndarray, rows: List[Dict[int,int]], negate: bool, p: int) -> None:
    for i, row in enumerate(rows):
        for j, coeff in row.items():
            dst[i, j] = neg_modp(coeff, p) if negate else coeff % p


def convert(r: R1CS, witness: Optional[Sequence[int]]) -> Tuple[ArithmeticCircuit, PaddedWitness]:
    """
    Translate an R1CS and its witness into a Bulletproofs arithmetic circuit.

    Row i of (A, B, C) becomes row i of (w_l, w_r, w_o) with C negated, so that
    the constraint reads as a left-hand side in
        w_l·a_l + w_r·a_r + w_o·a_o = w_v·v + c.
    The variable dimension is padded to the next power of two; padded columns
    and padded witness slots are zero.

    The witness travels only through v. a_l, a_r, a_o, w_v and gamma are zero:
    no Hadamard-consistent gate assignment is synthesized, and blinding is the
    proof engine's job at commitment time.

    Raises MissingWitness, EmptyCircuit, InvalidConstraint or InvalidWitness.
    Inputs are not modified; every returned array is fresh and read-only.
    """
    if witness is None:
        raise MissingWitness()
    n, m, p = r.n_vars, r.n_constraints, r.prime
    if n == 0 or m == 0:
        raise EmptyCircuit(n, m)
    validate_indices(r)
    if r.var_map is None and len(witness) < n:
        raise InvalidWitness(len(witness), n)

    padded = next_power_of_two(n)

    w_l = _zeros(m, padded)
    w_r = _zeros(m, padded)
    w_o = _zeros(m, padded)
    w_v = _zeros(m, padded)
    c = _zeros(m)
    _place(w_l, r.A_rows, False, p)
    _place(w_r, r.B_rows, False, p)
    _place(w_o, r.C_rows, True, p)

    v = _zeros(padded)
    v[:n] = assemble_full_z(list(witness), r.var_map, n, p)

    a_l, a_r, a_o, gamma = _zeros(padded), _zeros(padded), _zeros(padded), _zeros(padded)
    _freeze(w_l, w_r, w_o, w_v, c, v, a_l, a_r, a_o, gamma)

    log.debug("converted %d constraints, %d vars padded to %d", m, n, padded)
    circuit = ArithmeticCircuit(w_l, w_r, w_o, w_v, c, prime=p, n_vars=n, padded_n_vars=padded)
    return circuit, PaddedWitness(a_l=a_l, a_r=a_r, a_o=a_o, v=v, gamma=gamma)
