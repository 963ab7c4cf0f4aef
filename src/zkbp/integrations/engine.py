from __future__ import annotations
import importlib
from typing import Any, Callable

from zkbp.core.convert import ArithmeticCircuit, PaddedWitness

Engine = Callable[[ArithmeticCircuit, PaddedWitness], Any]


def load_engine(spec: str) -> Engine:
    """Resolve "package.module:function" to the proof-engine callable."""
    mod_name, sep, attr = spec.partition(":")
    if not sep or not mod_name or not attr:
        raise ValueError(f"Engine must be given as module:function, got {spec!r}")
    mod = importlib.import_module(mod_name)
    fn = getattr(mod, attr, None)
    if not callable(fn):
        raise ValueError(f"{spec!r} is not a callable")
    return fn
