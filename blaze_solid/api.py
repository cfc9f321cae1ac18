"""Public API for the Solid Number engine - returns structured objects without side effects.

Every function here parses text operands, runs the engine and renders the
outcome into a result dataclass. Values allocated along the way are
released before returning, so the facade never leaks pool slots.
"""

from __future__ import annotations

import math

from .config import GGGX_DEFAULT_PRECISION
from .gggx import analyze
from .logging_config import get_logger
from .parser import parse_operand, parse_operator, split_calculation
from .pool import SolidPool, dec_ref, to_debug_string, to_double
from .types import (
    AnalysisReport,
    ErrorCode,
    OperationResult,
    RecoveryStrategy,
    SolidNumber,
    ValidationError,
)
from .undefined import recent_undefined, recover, sqrt

logger = get_logger("api")


def to_result(value: SolidNumber | None) -> OperationResult:
    """Render an engine value as an OperationResult.

    Args:
        value: Value returned by an engine operation (None means the pool ran out)

    Returns:
        OperationResult; Undefined values come back with ok=False and
        error_code UNDEFINED_RESULT, but still carry their rendering
    """
    if value is None:
        return OperationResult(
            ok=False,
            error="Value pool exhausted",
            error_code=ErrorCode.ALLOCATION_EXHAUSTED.value,
        )
    rendered = to_debug_string(value)
    if value.is_undefined:
        history = recent_undefined()
        reason = history[-1].details if history else "Undefined result"
        return OperationResult(
            ok=False,
            value=rendered,
            barrier=value.barrier.name.lower(),
            confidence=value.confidence / 1000.0,
            error=reason,
            error_code=ErrorCode.UNDEFINED_RESULT.value,
        )
    approx = None if value.is_infinity else to_double(value)
    return OperationResult(
        ok=True,
        value=rendered,
        barrier=value.barrier.name.lower(),
        confidence=value.confidence / 1000.0,
        approx=approx,
    )


def _release(*values: SolidNumber | None) -> None:
    for value in values:
        dec_ref(value)


def calculate(a: str, op: str, b: str, pool: SolidPool | None = None) -> OperationResult:
    """Apply a binary operator to two operands.

    Args:
        a: Left operand text (e.g., "123456789", "2.5", "inf")
        op: Operator symbol: + - * / ^ (also ×, ÷, **)
        b: Right operand text

    Returns:
        OperationResult with the rendered Solid Number

    Example:
        >>> from blaze_solid.api import calculate
        >>> result = calculate("123456789", "*", "987654321")
        >>> print(result.value)
        121932631112635269
        >>> result = calculate("1", "/", "0")
        >>> print(result.error_code)
        UNDEFINED_RESULT
    """
    left = right = None
    try:
        func = parse_operator(op)
        left = parse_operand(a, pool)
        right = parse_operand(b, pool)
    except ValidationError as e:
        _release(left, right)
        return OperationResult(ok=False, error=str(e), error_code=e.code)
    if left is None or right is None:
        _release(left, right)
        return to_result(None)

    value = func(left, right)
    try:
        return to_result(value)
    finally:
        _release(value, left, right)


def calculate_expression(expression: str, pool: SolidPool | None = None) -> OperationResult:
    """Evaluate a one-line calculation such as "2 * 3" or "inf - inf".

    Example:
        >>> from blaze_solid.api import calculate_expression
        >>> print(calculate_expression("2 + 3").value)
        5
    """
    try:
        a, op, b = split_calculation(expression)
    except ValidationError as e:
        return OperationResult(ok=False, error=str(e), error_code=e.code)
    return calculate(a, op, b, pool)


def square_root(a: str, pool: SolidPool | None = None) -> OperationResult:
    """Square root of an operand (Newton iteration for non-trivial values).

    Example:
        >>> from blaze_solid.api import square_root
        >>> print(square_root("-4").error_code)
        UNDEFINED_RESULT
    """
    try:
        operand = parse_operand(a, pool)
    except ValidationError as e:
        return OperationResult(ok=False, error=str(e), error_code=e.code)
    value = sqrt(operand)
    try:
        return to_result(value)
    finally:
        _release(value, operand)


def recover_value(
    a: str, strategy: str | RecoveryStrategy, pool: SolidPool | None = None
) -> OperationResult:
    """Replace an Undefined operand according to a recovery strategy.

    Args:
        a: Operand text (e.g., "undefined")
        strategy: One of zero, one, infinity, nan, propagate

    Returns:
        OperationResult for the recovered value

    Example:
        >>> from blaze_solid.api import recover_value
        >>> print(recover_value("undefined", "one").value)
        1
    """
    try:
        if not isinstance(strategy, RecoveryStrategy):
            try:
                strategy = RecoveryStrategy(str(strategy).strip().lower())
            except ValueError:
                allowed = ", ".join(s.value for s in RecoveryStrategy)
                raise ValidationError(
                    f"Unknown recovery strategy {strategy!r} (allowed: {allowed})",
                    "INVALID_STRATEGY",
                ) from None
        operand = parse_operand(a, pool)
    except ValidationError as e:
        return OperationResult(ok=False, error=str(e), error_code=e.code)
    value = recover(operand, strategy)
    try:
        return to_result(value)
    finally:
        _release(value, operand)


def _coerce_value(value: float | str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = str(value).strip()
    if not text:
        raise ValidationError("Value cannot be empty", "EMPTY_INPUT")
    try:
        return float(text.replace("∞", "inf"))
    except ValueError:
        raise ValidationError(
            f"Invalid value: {text!r}. Expected a number.", ErrorCode.INVALID_OPERAND.value
        ) from None


def _coerce_precision(precision: int | str | None) -> int:
    try:
        digits = int(precision)
    except (TypeError, ValueError):
        digits = 0
    if digits <= 0:
        raise ValidationError(
            f"Precision must be a positive integer, got {precision!r}",
            "INVALID_PRECISION",
        )
    return digits


def analyze_value(
    value: float | str,
    precision: int = GGGX_DEFAULT_PRECISION,
    pool: SolidPool | None = None,
) -> AnalysisReport:
    """Run the GGGX oracle on a raw value.

    Args:
        value: Float, or text convertible to a float (e.g., "3.141592653589793")
        precision: Desired number of digits

    Returns:
        AnalysisReport with the derived Solid Number, barrier and explanation

    Example:
        >>> from blaze_solid.api import analyze_value
        >>> report = analyze_value(0.5)
        >>> print(report.barrier, report.confidence)
        computational 0.975
    """
    try:
        number = _coerce_value(value)
        digits = _coerce_precision(precision)
    except ValidationError as e:
        return AnalysisReport(ok=False, error=str(e), error_code=e.code)

    analysis = analyze(number, digits, pool)
    if not analysis.is_complete:
        code = analysis.last_error or ErrorCode.ALLOCATION_EXHAUSTED
        logger.warning("GGGX analysis of %r stopped early: %s", number, code.value)
        return AnalysisReport(
            ok=False,
            value=number,
            error=f"Analysis incomplete ({code.value})",
            error_code=code.value,
        )
    try:
        return AnalysisReport(
            ok=True,
            value=number if math.isfinite(number) else None,
            solid=to_debug_string(analysis.result),
            barrier=analysis.barrier.name.lower(),
            achievable_precision=analysis.achievable_precision,
            confidence=round(analysis.confidence, 3),
            pattern_period=analysis.pattern_period if analysis.has_pattern else None,
            algorithm=analysis.trace.algorithm or None,
            explanation=analysis.explanation,
        )
    finally:
        analysis.release()
