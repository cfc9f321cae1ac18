"""Infinity algebra: the infinity-division algorithm, powers, comparison and named infinities.

Every infinity is expressed against the anchor sequence 12,345,678,910.
Terminal digits reduce the anchor to a multiple of their value, so two
infinities with different tails divide to a finite, digit-bearing result
instead of an indeterminate form.
"""

from __future__ import annotations

from dataclasses import dataclass

import sympy as sp

from .config import (
    CONTINUUM_CONFIDENCE,
    COUNTABLE_INFINITY_TERMINAL,
    INFINITE_GAP,
    INFINITY_ANCHOR,
    INFINITY_POWER_TERMINAL,
    INFINITY_TERMINAL_MODULUS,
)
from .logging_config import get_logger
from .pool import SolidPool, init_exact, init_with_gap, pool_of, to_double
from .propagation import combine_confidence
from .types import Barrier, SolidNumber, Terminal, UndefinedReason
from .undefined import undefined_with_reason

logger = get_logger("infinity")

DEFAULT_PATTERN = "1234567890"


@dataclass(frozen=True)
class InfinityExpression:
    """An infinity written as a reduced anchor plus its digit pattern."""

    quotient: int
    remainder: int
    cycle_length: int
    pattern: str


def _leading_digit_value(digits: str, limit: int) -> int:
    value = 0
    for ch in digits[:limit]:
        if ch.isdigit():
            value = value * 10 + int(ch)
    return value


def express_infinity(value: SolidNumber) -> InfinityExpression:
    """Reduce the anchor to a multiple of the value's leading terminal digits."""
    terminal = value.terminal
    if not terminal.is_digits or not terminal.digits:
        return InfinityExpression(INFINITY_ANCHOR, 0, 10, DEFAULT_PATTERN)
    reducer = _leading_digit_value(terminal.digits, 10)
    quotient = INFINITY_ANCHOR
    remainder = 0
    if reducer > 0:
        quotient = (INFINITY_ANCHOR // reducer) * reducer
        remainder = quotient % reducer
    return InfinityExpression(quotient, remainder, len(terminal.digits), terminal.digits)


def _raw_terminal_value(value: SolidNumber) -> int:
    """Leading terminal digits (at most five) appended to a leading 1.

    A tail of "2" reads as 12; a value without digit terminals reads as 1.
    """
    raw = 1
    if value.terminal.is_digits:
        for ch in value.terminal.digits[:5]:
            if ch.isdigit():
                raw = raw * 10 + int(ch)
    return raw


def modular_inverse(a: int, modulus: int) -> int:
    """Inverse of a modulo modulus, or 0 when none exists."""
    try:
        return int(sp.mod_inverse(a, modulus))
    except ValueError:
        return 0


def infinity_divide(a: SolidNumber, b: SolidNumber) -> SolidNumber | None:
    """Divide two infinities.

    The reduced anchors give the integer quotient and three fractional
    digits; the raw terminal values are combined through a modular inverse
    to give a five-digit terminal.
    """
    expr_a = express_infinity(a)
    expr_b = express_infinity(b)
    terminal_a = _raw_terminal_value(a)
    terminal_b = _raw_terminal_value(b)

    quotient, remainder = divmod(expr_a.quotient, expr_b.quotient)
    modulus = INFINITY_TERMINAL_MODULUS
    terminal_product = (terminal_a * modular_inverse(terminal_b, modulus)) % modulus

    known = str(quotient)
    if remainder > 0 or terminal_product > 0:
        fraction = remainder * 1000 // expr_b.quotient
        known += f".{fraction:03d}"
    terminal = str(terminal_product).zfill(5) if terminal_product > 0 else ""

    barrier = Barrier.COMPUTATIONAL
    if Barrier.QUANTUM in (a.barrier, b.barrier):
        barrier = Barrier.QUANTUM
    confidence = combine_confidence(a.confidence, b.confidence, "/") * 7 // 10
    logger.debug(
        "Infinity divide: %d / %d -> %s terminal %s",
        expr_a.quotient,
        expr_b.quotient,
        known,
        terminal or "-",
    )
    return init_with_gap(
        known, barrier, modulus, confidence, Terminal.of_digits(terminal), pool_of(a)
    )


def infinity_power(base: SolidNumber, exponent: SolidNumber) -> SolidNumber | None:
    """Powers where the base, the exponent or both are infinite."""
    pool = pool_of(base)
    if base.is_infinity and exponent.is_infinity:
        return init_with_gap(
            "",
            Barrier.INFINITY,
            INFINITE_GAP,
            combine_confidence(base.confidence, exponent.confidence, "*") // 2,
            Terminal.of_digits(INFINITY_POWER_TERMINAL),
            pool,
        )
    if base.is_infinity:
        return positive_infinity(pool, base.confidence)
    if exponent.is_infinity:
        base_value = to_double(base)
        if base_value > 1.0:
            return positive_infinity(pool, base.confidence)
        if base_value == 1.0:
            return init_exact("1", pool)
        if base_value > 0:
            return init_with_gap(
                "0", Barrier.COMPUTATIONAL, 1, base.confidence, Terminal.of_digits(""), pool
            )
    return undefined_with_reason(
        UndefinedReason.INDETERMINATE_FORM,
        "power with infinite exponent and non-positive base",
        "^",
        pool,
        confidence=100,
    )


def _sign(value: SolidNumber) -> int:
    return -1 if value.known.startswith("-") else 1


def infinity_compare(a: SolidNumber, b: SolidNumber) -> int:
    """Three-way comparison that orders infinities by their terminal digits.

    Infinities without digit terminals compare equal to each other; a
    negative infinity sorts below every finite value.
    """
    if a.is_infinity and b.is_infinity:
        if _sign(a) != _sign(b):
            return -1 if _sign(a) < 0 else 1
        if a.terminal.is_digits and b.terminal.is_digits:
            term_a, term_b = a.terminal.digits, b.terminal.digits
            if term_a != term_b:
                return -1 if term_a < term_b else 1
            return 0
        return 0
    if a.is_infinity:
        return _sign(a)
    if b.is_infinity:
        return -_sign(b)
    value_a, value_b = to_double(a), to_double(b)
    if value_a < value_b:
        return -1
    if value_a > value_b:
        return 1
    return 0


# Named infinities


def positive_infinity(pool: SolidPool | None = None, confidence: int = 1000) -> SolidNumber | None:
    return init_with_gap("", Barrier.INFINITY, INFINITE_GAP, confidence, Terminal.empty_set(), pool)


def negative_infinity(pool: SolidPool | None = None) -> SolidNumber | None:
    return init_with_gap("-", Barrier.INFINITY, INFINITE_GAP, 1000, Terminal.empty_set(), pool)


def countable_infinity(pool: SolidPool | None = None) -> SolidNumber | None:
    """Aleph-null, carrying the digits of the naturals as its terminal."""
    return init_with_gap(
        "ℵ₀",
        Barrier.INFINITY,
        INFINITE_GAP,
        1000,
        Terminal.of_digits(COUNTABLE_INFINITY_TERMINAL),
        pool,
    )


def continuum_infinity(pool: SolidPool | None = None) -> SolidNumber | None:
    """Aleph-one, whose tail is indeterminate."""
    return init_with_gap(
        "ℵ₁",
        Barrier.INFINITY,
        INFINITE_GAP,
        CONTINUUM_CONFIDENCE,
        Terminal.superposition(),
        pool,
    )
