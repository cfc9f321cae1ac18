"""Core arithmetic on Solid Numbers.

Operands are borrowed and never mutated; every call returns a freshly
allocated result (or None when the pool is exhausted). Undefined and
infinite operands are resolved before any digit arithmetic happens.
"""

from __future__ import annotations

from .bigint import (
    add_decimal,
    divide_decimal_exact,
    divide_decimal_truncated,
    multiply_decimal,
    subtract_decimal,
)
from .config import (
    DIVISION_CONFIDENCE,
    DIVISION_FRACTION_DIGITS,
    DIVISION_GAP,
    INFINITE_GAP,
    MAX_EXACT_EXPONENT,
    POSSIBLY_ZERO_CONFIDENCE,
    TERMINAL_DIGIT_CAPACITY,
)
from .exact import exact_add, exact_multiply, exact_subtract
from .infinity import infinity_divide, infinity_power
from .logging_config import get_logger
from .pool import (
    init_exact,
    init_with_gap,
    pool_of,
    to_debug_string,
    to_double,
)
from .propagation import combine_barriers, combine_confidence
from .types import Barrier, SolidNumber, Terminal, UndefinedReason
from .undefined import (
    is_integer,
    is_negative,
    is_zero,
    undefined_with_reason,
    would_be_undefined,
)

logger = get_logger("arithmetic")

__all__ = [
    "add",
    "subtract",
    "multiply",
    "divide",
    "power",
    "combine_barriers",
    "combine_confidence",
]


def _trace(op: str, a: SolidNumber, b: SolidNumber) -> None:
    logger.debug("%s %s %s", to_debug_string(a), op, to_debug_string(b))


def _propagate_undefined(a: SolidNumber, b: SolidNumber, op: str) -> SolidNumber | None:
    return undefined_with_reason(
        UndefinedReason.PROPAGATED, f"undefined operand in {op}", op, pool_of(a)
    )


def _infinite(a: SolidNumber, confidence: int, negative: bool = False) -> SolidNumber | None:
    return init_with_gap(
        "-" if negative else "",
        Barrier.INFINITY,
        INFINITE_GAP,
        confidence,
        Terminal.empty_set(),
        pool_of(a),
    )


def _combine_terminals(a: SolidNumber, b: SolidNumber) -> Terminal:
    """Superposition dominates EmptySet, which dominates digit tails."""
    if a.terminal.is_superposition or b.terminal.is_superposition:
        return Terminal.superposition()
    if a.terminal.is_empty_set or b.terminal.is_empty_set:
        return Terminal.empty_set()
    half = TERMINAL_DIGIT_CAPACITY // 2
    if a.terminal.digits and b.terminal.digits:
        return Terminal.of_digits(a.terminal.digits[:half] + b.terminal.digits[:half])
    return Terminal.of_digits("")


def _known_or_empty(text: str | None) -> str:
    return text if text is not None else ""


def _gapped(
    a: SolidNumber,
    b: SolidNumber,
    known: str,
    op: str,
) -> SolidNumber | None:
    return init_with_gap(
        known,
        combine_barriers(a.barrier, b.barrier),
        max(a.gap_magnitude, b.gap_magnitude),
        combine_confidence(a.confidence, b.confidence, op),
        _combine_terminals(a, b),
        pool_of(a),
    )


def add(a: SolidNumber | None, b: SolidNumber | None) -> SolidNumber | None:
    """Add two values.

    Returns:
        A new value; infinity plus infinity is infinity and exact operands
        are summed exactly
    """
    if a is None or b is None:
        return None
    _trace("+", a, b)
    if a.is_undefined or b.is_undefined:
        return _propagate_undefined(a, b, "+")
    if a.is_infinity and b.is_infinity:
        return _infinite(a, combine_confidence(a.confidence, b.confidence, "+"))
    if a.is_exact and b.is_exact:
        return exact_add(a, b)
    if a.is_infinity or b.is_infinity:
        source = a if a.is_infinity else b
        return _infinite(
            a,
            combine_confidence(a.confidence, b.confidence, "+"),
            negative=is_negative(source),
        )
    return _gapped(a, b, _known_or_empty(add_decimal(a.known, b.known)), "+")


def subtract(a: SolidNumber | None, b: SolidNumber | None) -> SolidNumber | None:
    """Subtract b from a.

    Infinity minus infinity is not undefined: it is the set of naturals,
    written as known digits "ℕ" with a Superposition tail.
    """
    if a is None or b is None:
        return None
    _trace("-", a, b)
    if a.is_undefined or b.is_undefined:
        return _propagate_undefined(a, b, "-")
    if a.is_infinity and b.is_infinity:
        return init_with_gap(
            "ℕ",
            combine_barriers(a.barrier, b.barrier),
            INFINITE_GAP,
            combine_confidence(a.confidence, b.confidence, "-"),
            Terminal.superposition(),
            pool_of(a),
        )
    if a.is_exact and b.is_exact:
        return exact_subtract(a, b)
    if a.is_infinity or b.is_infinity:
        negative = is_negative(a) if a.is_infinity else not is_negative(b)
        return _infinite(
            a, combine_confidence(a.confidence, b.confidence, "-"), negative=negative
        )
    return _gapped(a, b, _known_or_empty(subtract_decimal(a.known, b.known)), "-")


def _multiply_gaps(gap_a: int, gap_b: int) -> int:
    product = max(gap_a, 1) * max(gap_b, 1)
    return INFINITE_GAP if product >= INFINITE_GAP else product


def multiply(a: SolidNumber | None, b: SolidNumber | None) -> SolidNumber | None:
    """Multiply two values.

    Zero times infinity (in either order) is Undefined. Exact operands are
    multiplied with BigInt; gapped operands multiply their gaps.
    """
    if a is None or b is None:
        return None
    _trace("*", a, b)
    if a.is_undefined or b.is_undefined:
        return _propagate_undefined(a, b, "*")
    if (is_zero(a) and b.is_infinity) or (a.is_infinity and is_zero(b)):
        return undefined_with_reason(
            UndefinedReason.ZERO_TIMES_INFINITY, "0 × ∞ indeterminate form", "*", pool_of(a)
        )
    confidence = combine_confidence(a.confidence, b.confidence, "*")
    if a.is_infinity or b.is_infinity:
        return _infinite(a, confidence, negative=is_negative(a) != is_negative(b))
    if a.is_exact and b.is_exact:
        return exact_multiply(a, b)
    return init_with_gap(
        _known_or_empty(multiply_decimal(a.known, b.known)),
        combine_barriers(a.barrier, b.barrier),
        _multiply_gaps(a.gap_magnitude, b.gap_magnitude),
        confidence,
        Terminal.superposition(),
        pool_of(a),
    )


def divide(a: SolidNumber | None, b: SolidNumber | None) -> SolidNumber | None:
    """Divide a by b.

    Resolution order: Undefined operands, exact-zero divisor, infinity
    cases, a gapped divisor that reads as zero, exact operands, and
    finally gapped operands.
    """
    if a is None or b is None:
        return None
    _trace("/", a, b)
    pool = pool_of(a)
    if a.is_undefined or b.is_undefined:
        return _propagate_undefined(a, b, "/")
    if is_zero(b):
        return undefined_with_reason(
            UndefinedReason.DIVISION_BY_ZERO, "exact division by zero", "/", pool
        )
    confidence = combine_confidence(a.confidence, b.confidence, "/")
    if a.is_infinity and b.is_infinity:
        return infinity_divide(a, b)
    if a.is_infinity:
        return _infinite(a, confidence, negative=is_negative(a) != is_negative(b))
    if b.is_infinity:
        return init_with_gap(
            "0", Barrier.COMPUTATIONAL, 1, confidence, Terminal.of_digits(""), pool
        )
    if not b.is_exact and to_double(b) == 0.0:
        return undefined_with_reason(
            UndefinedReason.DIVISION_BY_ZERO,
            "probable division by zero",
            "/",
            pool,
            confidence=POSSIBLY_ZERO_CONFIDENCE,
        )
    if a.is_exact and b.is_exact:
        quotient = divide_decimal_exact(a.known, b.known)
        if quotient is not None:
            return init_exact(quotient, pool)
        return init_with_gap(
            _known_or_empty(
                divide_decimal_truncated(a.known, b.known, DIVISION_FRACTION_DIGITS)
            ),
            Barrier.COMPUTATIONAL,
            DIVISION_GAP,
            DIVISION_CONFIDENCE,
            Terminal.of_digits(""),
            pool,
        )

    barrier = combine_barriers(a.barrier, b.barrier)
    if barrier is Barrier.EXACT:
        barrier = Barrier.COMPUTATIONAL
    gap = a.gap_magnitude * 10
    if gap >= INFINITE_GAP:
        gap = INFINITE_GAP
    return init_with_gap(
        _known_or_empty(divide_decimal_truncated(a.known, b.known, 0)),
        barrier,
        gap,
        confidence,
        Terminal.superposition(),
        pool,
    )


def _integer_power(base: str, exponent: int) -> str | None:
    result = "1"
    square = base
    while exponent > 0:
        if exponent & 1:
            result = multiply_decimal(result, square)
        exponent >>= 1
        if exponent:
            square = multiply_decimal(square, square)
        if result is None or square is None:
            return None
    return result


def power(base: SolidNumber | None, exponent: SolidNumber | None) -> SolidNumber | None:
    """Raise base to exponent.

    Exact bases with exact non-negative integer exponents are computed with
    BigInt; other finite cases fall back to a Computational approximation.
    """
    if base is None or exponent is None:
        return None
    _trace("^", base, exponent)
    pool = pool_of(base)
    if base.is_undefined or exponent.is_undefined:
        return _propagate_undefined(base, exponent, "^")
    if is_zero(base) and is_zero(exponent):
        return undefined_with_reason(
            UndefinedReason.ZERO_POWER_ZERO, "0^0 indeterminate form", "^", pool
        )
    if base.is_infinity or exponent.is_infinity:
        return infinity_power(base, exponent)
    if would_be_undefined(base, exponent, "^"):
        return undefined_with_reason(
            UndefinedReason.INDETERMINATE_FORM,
            "negative base with fractional exponent",
            "^",
            pool,
        )
    if base.is_exact and is_integer(exponent) and not is_negative(exponent):
        whole = exponent.known.partition(".")[0] or "0"
        if whole.isdigit() and int(whole) <= MAX_EXACT_EXPONENT:
            text = _integer_power(base.known, int(whole))
            if text is not None:
                return init_exact(text, pool)

    try:
        value = to_double(base) ** to_double(exponent)
    except (OverflowError, ZeroDivisionError):
        return undefined_with_reason(
            UndefinedReason.INDETERMINATE_FORM, "power out of range", "^", pool
        )
    if isinstance(value, complex):
        return undefined_with_reason(
            UndefinedReason.INDETERMINATE_FORM, "complex power", "^", pool
        )
    return init_with_gap(
        f"{value:.6f}",
        combine_barriers(
            Barrier.COMPUTATIONAL if base.is_exact else base.barrier, exponent.barrier
        ),
        max(base.gap_magnitude, exponent.gap_magnitude, DIVISION_GAP),
        combine_confidence(base.confidence, exponent.confidence, "*"),
        Terminal.of_digits(""),
        pool,
    )
