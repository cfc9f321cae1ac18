"""Operand parsing for the facade and the CLI.

This module handles:
- Input sanitization and validation of operand text
- Mapping operand tokens (decimals, infinities, alephs, undefined) to Solid Numbers
- Mapping operator symbols to arithmetic functions
- Splitting a one-line calculation ("A op B") into its parts
"""

from __future__ import annotations

import re
from collections.abc import Callable

from . import arithmetic
from .config import (
    DECIMAL_PATTERN,
    INFINITY_TOKENS,
    MAX_OPERAND_LENGTH,
    NEGATIVE_INFINITY_TOKENS,
)
from .infinity import (
    continuum_infinity,
    countable_infinity,
    negative_infinity,
    positive_infinity,
)
from .pool import SolidPool, init_exact
from .types import SolidNumber, UndefinedReason, ValidationError
from .undefined import undefined_with_reason

COUNTABLE_TOKENS = frozenset({"aleph0", "ℵ0", "ℵ₀"})
CONTINUUM_TOKENS = frozenset({"aleph1", "ℵ1", "ℵ₁"})
UNDEFINED_TOKENS = frozenset({"undefined", "nan"})

OPERATORS: dict[str, Callable[[SolidNumber | None, SolidNumber | None], SolidNumber | None]] = {
    "+": arithmetic.add,
    "-": arithmetic.subtract,
    "*": arithmetic.multiply,
    "×": arithmetic.multiply,
    "/": arithmetic.divide,
    "÷": arithmetic.divide,
    "^": arithmetic.power,
    "**": arithmetic.power,
}

# Operands and operator must be separated by whitespace so that "-3" stays one operand
CALCULATION_REGEX = re.compile(r"^\s*(\S+)\s+(\*\*|[-+*/^×÷])\s+(\S+)\s*$")


def validate_operand_text(text: str | None) -> str:
    """Normalize operand text and reject empty or oversized input.

    Args:
        text: Raw operand text

    Returns:
        The stripped text

    Raises:
        ValidationError: EMPTY_INPUT or TOO_LONG
    """
    if text is None or not text.strip():
        raise ValidationError("Operand cannot be empty", "EMPTY_INPUT")
    text = text.strip()
    if len(text) > MAX_OPERAND_LENGTH:
        raise ValidationError(
            f"Operand too long (>{MAX_OPERAND_LENGTH} characters)", "TOO_LONG"
        )
    return text


def _normalize_decimal(text: str) -> str:
    """Drop a leading '+' and redundant leading zeros of the integer part."""
    if text.startswith("+"):
        text = text[1:]
    negative = text.startswith("-")
    body = text[1:] if negative else text
    int_part, dot, frac_part = body.partition(".")
    int_part = int_part.lstrip("0") or "0"
    return ("-" if negative else "") + int_part + dot + frac_part


def parse_operand(text: str | None, pool: SolidPool | None = None) -> SolidNumber | None:
    """Convert operand text to a Solid Number.

    Decimal literals become Exact values. The tokens inf/∞ (optionally signed),
    aleph0/ℵ₀, aleph1/ℵ₁ and undefined/nan name the special values.

    Args:
        text: Operand text (e.g., "123.45", "-7", "∞", "aleph0")
        pool: Pool to allocate from (defaults to the global pool)

    Returns:
        An owned Solid Number, or None if the pool is exhausted

    Raises:
        ValidationError: EMPTY_INPUT, TOO_LONG or INVALID_OPERAND

    Example:
        >>> from blaze_solid.parser import parse_operand
        >>> parse_operand("42").known
        '42'
        >>> parse_operand("-inf").known
        '-'
    """
    text = validate_operand_text(text)
    token = text.lower()
    if token in INFINITY_TOKENS:
        return positive_infinity(pool)
    if token in NEGATIVE_INFINITY_TOKENS:
        return negative_infinity(pool)
    if token in COUNTABLE_TOKENS:
        return countable_infinity(pool)
    if token in CONTINUUM_TOKENS:
        return continuum_infinity(pool)
    if token in UNDEFINED_TOKENS:
        return undefined_with_reason(
            UndefinedReason.PROPAGATED, f"operand {text!r}", pool=pool
        )

    candidate = text[1:] if text.startswith("+") else text
    if not DECIMAL_PATTERN.match(candidate):
        raise ValidationError(
            f"Invalid operand: {text!r}. Expected a decimal number, inf, aleph0, aleph1 or undefined.",
            "INVALID_OPERAND",
        )
    return init_exact(_normalize_decimal(text), pool)


def parse_operator(symbol: str) -> Callable[[SolidNumber | None, SolidNumber | None], SolidNumber | None]:
    """Look up the arithmetic function for an operator symbol.

    Raises:
        ValidationError: INVALID_OPERATOR for unknown symbols
    """
    func = OPERATORS.get(symbol.strip()) if symbol else None
    if func is None:
        allowed = " ".join(sorted(OPERATORS))
        raise ValidationError(
            f"Unknown operator {symbol!r} (allowed: {allowed})", "INVALID_OPERATOR"
        )
    return func


def split_calculation(text: str | None) -> tuple[str, str, str]:
    """Split "A op B" into its three parts.

    Raises:
        ValidationError: EMPTY_INPUT or INVALID_EXPRESSION
    """
    if text is None or not text.strip():
        raise ValidationError("Input cannot be empty", "EMPTY_INPUT")
    match = CALCULATION_REGEX.match(text)
    if not match:
        raise ValidationError(
            "Expected a calculation of the form 'A op B' with spaces around the operator",
            "INVALID_EXPRESSION",
        )
    left, op, right = match.groups()
    return left, op, right
