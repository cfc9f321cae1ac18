"""Barrier and confidence propagation rules shared by every operation."""

from __future__ import annotations

from .types import Barrier

# Strongest first; Exact only survives when both operands are Exact.
_GAPPED_PRIORITY = (
    Barrier.QUANTUM,
    Barrier.ENERGY,
    Barrier.TEMPORAL,
    Barrier.COMPUTATIONAL,
    Barrier.STORAGE,
)


def combine_barriers(a: Barrier, b: Barrier) -> Barrier:
    """Barrier of a result computed from operands tagged a and b."""
    if Barrier.UNDEFINED in (a, b):
        return Barrier.UNDEFINED
    if Barrier.INFINITY in (a, b):
        return Barrier.INFINITY
    if a is Barrier.EXACT and b is Barrier.EXACT:
        return Barrier.EXACT
    for barrier in _GAPPED_PRIORITY:
        if barrier in (a, b):
            return barrier
    return a


def combine_confidence(a: int, b: int, op: str) -> int:
    """Per-mille confidence of a result.

    Addition and subtraction keep the weaker operand, multiplication scales,
    division scales harder but never drops below 100.
    """
    if op in ("+", "-"):
        return min(a, b)
    if op == "*":
        return a * b // 1000
    if op == "/":
        return max(100, a * b // 1200)
    return a
