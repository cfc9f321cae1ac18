"""Exact arithmetic on Exact Solid Numbers, backed by BigInt."""

from __future__ import annotations

from .bigint import add_decimal, divide_decimal_exact, multiply_decimal, subtract_decimal
from .config import DECIMAL_PATTERN, EXACT_PROMOTION_GAP_LIMIT
from .logging_config import get_logger
from .pool import inc_ref, init_exact, pool_of
from .types import Barrier, SolidNumber

logger = get_logger("exact")


def _finish(text: str | None, a: SolidNumber, b: SolidNumber, op: str) -> SolidNumber | None:
    if text is None:
        logger.debug("Exact %s rejected operands %r, %r", op, a.known, b.known)
        return None
    return init_exact(text, pool_of(a))


def exact_add(a: SolidNumber, b: SolidNumber) -> SolidNumber | None:
    logger.debug("Exact add %s + %s", a.known, b.known)
    return _finish(add_decimal(a.known, b.known), a, b, "add")


def exact_subtract(a: SolidNumber, b: SolidNumber) -> SolidNumber | None:
    logger.debug("Exact subtract %s - %s", a.known, b.known)
    return _finish(subtract_decimal(a.known, b.known), a, b, "subtract")


def exact_multiply(a: SolidNumber, b: SolidNumber) -> SolidNumber | None:
    logger.debug("Exact multiply %s * %s", a.known, b.known)
    return _finish(multiply_decimal(a.known, b.known), a, b, "multiply")


def exact_divide(a: SolidNumber, b: SolidNumber) -> SolidNumber | None:
    """Divide exactly, or return None (not exact) unless the quotient is an integer."""
    text = divide_decimal_exact(a.known, b.known)
    if text is None:
        logger.debug("Exact divide %s / %s is not exact", a.known, b.known)
        return None
    return init_exact(text, pool_of(a))


def can_be_exact(value: SolidNumber | None) -> bool:
    return value is not None and (
        value.barrier is Barrier.EXACT
        or (value.barrier is Barrier.COMPUTATIONAL and value.gap_magnitude == 0)
    )


def to_exact(value: SolidNumber | None) -> SolidNumber | None:
    """Promote to Exact where the gap is small enough.

    Exact inputs come back as a shared reference; Computational values with a
    gap under 1000 are copied into a new exact value; anything else is None.
    """
    if value is None:
        return None
    if value.barrier is Barrier.EXACT:
        return inc_ref(value)
    if (
        value.barrier is Barrier.COMPUTATIONAL
        and value.gap_magnitude < EXACT_PROMOTION_GAP_LIMIT
    ):
        return init_exact(value.known, pool_of(value))
    return None


def validate_exact(value: SolidNumber | None) -> bool:
    """True for an Exact value whose known digits form a well-formed decimal."""
    if value is None or value.barrier is not Barrier.EXACT:
        return False
    return DECIMAL_PATTERN.match(value.known) is not None
