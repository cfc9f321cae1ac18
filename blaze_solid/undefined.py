"""Undefined values: predicates, indeterminate-form detection, sqrt/log and recovery.

Undefined is an ordinary value with the Undefined barrier. Nothing here
raises for a domain condition; the reason an Undefined was produced is
logged and kept in a short history for diagnostics.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from .config import (
    DIVISION_GAP,
    INFINITE_GAP,
    RECOVERED_INFINITY_CONFIDENCE,
    SQRT_ITERATIONS,
)
from .logging_config import get_logger
from .pool import SolidPool, inc_ref, init_exact, init_with_gap, pool_of, to_double
from .types import (
    NO_TERMINAL,
    Barrier,
    RecoveryStrategy,
    SolidNumber,
    Terminal,
    UndefinedReason,
)

logger = get_logger("undefined")

HISTORY_SIZE = 100


@dataclass(frozen=True)
class UndefinedRecord:
    reason: UndefinedReason
    details: str
    operation: str | None = None


_history: deque[UndefinedRecord] = deque(maxlen=HISTORY_SIZE)


def recent_undefined() -> list[UndefinedRecord]:
    """Most recent reasons for Undefined results, oldest first."""
    return list(_history)


def clear_undefined_history() -> None:
    _history.clear()


def undefined_with_reason(
    reason: UndefinedReason,
    details: str = "",
    operation: str | None = None,
    pool: SolidPool | None = None,
    confidence: int = 0,
) -> SolidNumber | None:
    """Create an Undefined value and record why."""
    _history.append(UndefinedRecord(reason, details or reason.value, operation))
    logger.debug("Undefined result (%s): %s", reason.value, details or reason.value)
    return init_with_gap(
        "", Barrier.UNDEFINED, 0, confidence, Terminal.empty_set(), pool
    )


# Predicates


def _digits(value: SolidNumber) -> str:
    return value.known.lstrip("-")


def is_zero(value: SolidNumber | None) -> bool:
    """Exact value whose significant digits are all zero."""
    if value is None or value.barrier is not Barrier.EXACT:
        return False
    digits = _digits(value).replace(".", "")
    return bool(digits) and digits.isdigit() and set(digits) == {"0"}


def is_negative(value: SolidNumber | None) -> bool:
    return value is not None and value.known.startswith("-")


def is_integer(value: SolidNumber | None) -> bool:
    """Exact value with no non-zero digit after the decimal point."""
    if value is None or value.barrier is not Barrier.EXACT:
        return False
    _, _, fraction = value.known.partition(".")
    return fraction.strip("0") == ""


def would_be_undefined(
    a: SolidNumber | None, b: SolidNumber | None, op: str
) -> bool:
    """Predict whether a op b yields Undefined.

    Subtraction never reports Undefined here: infinity minus infinity
    is the set of naturals, handled by the arithmetic engine.
    """
    if a is None or b is None:
        return True
    if a.is_undefined or b.is_undefined:
        return True
    if op == "/" and is_zero(b):
        return True
    if op == "^":
        if is_zero(a) and is_zero(b):
            return True
        if is_negative(a) and not is_integer(b):
            return True
    if op == "*" and (
        (is_zero(a) and b.is_infinity) or (a.is_infinity and is_zero(b))
    ):
        return True
    return a.confidence == 0 or b.confidence == 0


# Functions that can produce Undefined


def _format_root(result: float) -> str:
    int_part = int(result)
    frac = result - int_part
    text = str(int_part)
    if frac > 0.0001:
        digits = []
        for _ in range(6):
            frac *= 10
            digit = int(frac)
            digits.append(str(digit))
            frac -= digit
        text += "." + "".join(digits)
    return text


def sqrt(value: SolidNumber | None) -> SolidNumber | None:
    """Square root by Newton-Raphson, tagged Computational at 90% of the input confidence."""
    if value is None:
        return None
    pool = pool_of(value)
    if value.is_undefined:
        return undefined_with_reason(
            UndefinedReason.PROPAGATED, "undefined propagation", "sqrt", pool
        )
    if is_negative(value):
        return undefined_with_reason(
            UndefinedReason.SQRT_NEGATIVE, "square root of negative number", "sqrt", pool
        )
    if is_zero(value):
        return init_exact("0", pool)
    if value.is_infinity:
        return init_with_gap(
            "", Barrier.INFINITY, INFINITE_GAP, value.confidence, value.terminal, pool
        )

    x = to_double(value)
    result = 1.0
    for _ in range(SQRT_ITERATIONS):
        result = (result + x / result) / 2.0
    return init_with_gap(
        _format_root(result),
        Barrier.COMPUTATIONAL,
        DIVISION_GAP,
        value.confidence * 9 // 10,
        NO_TERMINAL,
        pool,
    )


def log(value: SolidNumber | None) -> SolidNumber | None:
    """Natural logarithm.

    Only the Undefined cases are implemented; a valid positive input also
    yields Undefined with reason NOT_IMPLEMENTED.
    """
    if value is None:
        return None
    pool = pool_of(value)
    if value.is_undefined:
        return undefined_with_reason(
            UndefinedReason.PROPAGATED, "undefined propagation", "log", pool
        )
    if is_zero(value) or is_negative(value):
        return undefined_with_reason(
            UndefinedReason.LOG_NON_POSITIVE,
            "logarithm of non-positive number",
            "log",
            pool,
        )
    return undefined_with_reason(
        UndefinedReason.NOT_IMPLEMENTED, "logarithm not yet implemented", "log", pool
    )


def recover(
    value: SolidNumber | None, strategy: RecoveryStrategy
) -> SolidNumber | None:
    """Replace an Undefined value according to strategy.

    Propagate, and any value that is not Undefined, come back as a shared
    reference to the same value; every other path returns a new value.
    """
    if value is None:
        return None
    if not value.is_undefined or strategy is RecoveryStrategy.PROPAGATE:
        return inc_ref(value)
    pool = pool_of(value)
    logger.debug("Recovering undefined value with strategy %s", strategy.value)
    if strategy is RecoveryStrategy.USE_ZERO:
        return init_exact("0", pool)
    if strategy is RecoveryStrategy.USE_ONE:
        return init_exact("1", pool)
    if strategy is RecoveryStrategy.USE_INFINITY:
        return init_with_gap(
            "",
            Barrier.INFINITY,
            INFINITE_GAP,
            RECOVERED_INFINITY_CONFIDENCE,
            Terminal.empty_set(),
            pool,
        )
    return init_with_gap(
        "NaN", Barrier.UNDEFINED, 0, 0, Terminal.empty_set(), pool
    )
