"""Arbitrary-precision decimal arithmetic for exact Solid Numbers.

A BigInt is a sign plus little-endian groups of nine decimal digits. The
decimal helpers at the bottom of the module scale decimal strings to a
common number of fractional digits so that exact values with a decimal
point go through the same integer routines.
"""

from __future__ import annotations

BASE = 10**9
BASE_DIGITS = 9


class BigInt:
    """Signed integer stored as base-10**9 groups, least significant first."""

    __slots__ = ("negative", "groups")

    def __init__(self, groups: list[int] | None = None, negative: bool = False):
        self.groups = _trim(list(groups or [0]))
        self.negative = negative and not self.is_zero

    @classmethod
    def parse(cls, text: str) -> BigInt | None:
        """Parse an optionally signed string of decimal digits.

        Returns:
            BigInt, or None if text is not a plain integer literal
        """
        negative = text.startswith("-")
        digits = text[1:] if negative or text.startswith("+") else text
        if not digits or not digits.isdigit() or not digits.isascii():
            return None
        groups = []
        end = len(digits)
        while end > 0:
            start = max(0, end - BASE_DIGITS)
            groups.append(int(digits[start:end]))
            end = start
        return cls(groups, negative)

    @property
    def is_zero(self) -> bool:
        return len(self.groups) == 1 and self.groups[0] == 0

    def render(self) -> str:
        parts = [str(self.groups[-1])]
        for group in reversed(self.groups[:-1]):
            parts.append(f"{group:09d}")
        text = "".join(parts)
        return f"-{text}" if self.negative else text

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"BigInt({self.render()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BigInt):
            return NotImplemented
        return self.negative == other.negative and self.groups == other.groups

    def __hash__(self) -> int:
        return hash((self.negative, tuple(self.groups)))


def _trim(groups: list[int]) -> list[int]:
    while len(groups) > 1 and groups[-1] == 0:
        groups.pop()
    return groups or [0]


# Unsigned primitives on group lists


def add_unsigned(a: list[int], b: list[int]) -> list[int]:
    result = []
    carry = 0
    for i in range(max(len(a), len(b))):
        total = carry
        if i < len(a):
            total += a[i]
        if i < len(b):
            total += b[i]
        result.append(total % BASE)
        carry = total // BASE
    if carry:
        result.append(carry)
    return _trim(result)


def compare_unsigned(a: list[int], b: list[int]) -> int:
    """Return -1, 0 or 1 comparing magnitudes."""
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for x, y in zip(reversed(a), reversed(b)):
        if x != y:
            return -1 if x < y else 1
    return 0


def subtract_unsigned(a: list[int], b: list[int]) -> list[int]:
    """Subtract magnitudes; requires a >= b."""
    if compare_unsigned(a, b) < 0:
        raise ValueError("subtract_unsigned requires a >= b")
    result = []
    borrow = 0
    for i in range(len(a)):
        diff = a[i] - borrow - (b[i] if i < len(b) else 0)
        if diff < 0:
            diff += BASE
            borrow = 1
        else:
            borrow = 0
        result.append(diff)
    return _trim(result)


def multiply_unsigned(a: list[int], b: list[int]) -> list[int]:
    """Schoolbook O(n*m) multiplication."""
    result = [0] * (len(a) + len(b))
    for i, x in enumerate(a):
        if x == 0:
            continue
        carry = 0
        for j, y in enumerate(b):
            current = result[i + j] + x * y + carry
            result[i + j] = current % BASE
            carry = current // BASE
        k = i + len(b)
        while carry:
            current = result[k] + carry
            result[k] = current % BASE
            carry = current // BASE
            k += 1
    return _trim(result)


def _multiply_small(a: list[int], factor: int) -> list[int]:
    return multiply_unsigned(a, [factor]) if factor else [0]


def divmod_unsigned(a: list[int], b: list[int]) -> tuple[list[int], list[int]]:
    """Decimal long division of magnitudes; b must be non-zero."""
    if b == [0]:
        raise ZeroDivisionError("BigInt division by zero")
    if compare_unsigned(a, b) < 0:
        return [0], list(a)
    quotient_digits = []
    remainder = [0]
    for ch in BigInt(a).render():
        remainder = add_unsigned(_multiply_small(remainder, 10), [int(ch)])
        digit = 0
        while compare_unsigned(remainder, b) >= 0:
            remainder = subtract_unsigned(remainder, b)
            digit += 1
        quotient_digits.append(str(digit))
    quotient = BigInt.parse("".join(quotient_digits))
    return quotient.groups, remainder


# Signed operations


def add(a: BigInt, b: BigInt) -> BigInt:
    if a.negative == b.negative:
        return BigInt(add_unsigned(a.groups, b.groups), a.negative)
    if compare_unsigned(a.groups, b.groups) >= 0:
        return BigInt(subtract_unsigned(a.groups, b.groups), a.negative)
    return BigInt(subtract_unsigned(b.groups, a.groups), b.negative)


def negate(a: BigInt) -> BigInt:
    return BigInt(a.groups, not a.negative)


def subtract(a: BigInt, b: BigInt) -> BigInt:
    return add(a, negate(b))


def multiply(a: BigInt, b: BigInt) -> BigInt:
    return BigInt(multiply_unsigned(a.groups, b.groups), a.negative != b.negative)


def divmod_truncated(a: BigInt, b: BigInt) -> tuple[BigInt, BigInt]:
    """Quotient rounded toward zero; the remainder takes the dividend's sign."""
    quotient, remainder = divmod_unsigned(a.groups, b.groups)
    return (
        BigInt(quotient, a.negative != b.negative),
        BigInt(remainder, a.negative),
    )


# Decimal strings


def parse_decimal(text: str) -> tuple[BigInt, int] | None:
    """Split a decimal literal into an unscaled BigInt and its fractional digit count."""
    negative = text.startswith("-")
    body = text[1:] if negative else text
    whole, _, fraction = body.partition(".")
    if not whole and not fraction:
        return None
    value = BigInt.parse(("-" if negative else "") + (whole or "0") + fraction)
    if value is None:
        return None
    return value, len(fraction)


def _rescale(value: BigInt, scale: int, target: int) -> BigInt:
    if target == scale:
        return value
    return multiply(value, BigInt.parse("1" + "0" * (target - scale)))


def render_decimal(value: BigInt, scale: int) -> str:
    """Render an unscaled BigInt with scale fractional digits, trimming trailing zeros."""
    digits = BigInt(value.groups).render()
    if scale > 0:
        digits = digits.rjust(scale + 1, "0")
        whole, fraction = digits[:-scale], digits[-scale:].rstrip("0")
        digits = f"{whole}.{fraction}" if fraction else whole
    if value.negative and digits.strip("0.") != "":
        return "-" + digits
    return digits


def _aligned(a_text: str, b_text: str) -> tuple[BigInt, BigInt, int] | None:
    a = parse_decimal(a_text)
    b = parse_decimal(b_text)
    if a is None or b is None:
        return None
    scale = max(a[1], b[1])
    return _rescale(a[0], a[1], scale), _rescale(b[0], b[1], scale), scale


def add_decimal(a_text: str, b_text: str) -> str | None:
    aligned = _aligned(a_text, b_text)
    if aligned is None:
        return None
    a, b, scale = aligned
    return render_decimal(add(a, b), scale)


def subtract_decimal(a_text: str, b_text: str) -> str | None:
    aligned = _aligned(a_text, b_text)
    if aligned is None:
        return None
    a, b, scale = aligned
    return render_decimal(subtract(a, b), scale)


def multiply_decimal(a_text: str, b_text: str) -> str | None:
    a = parse_decimal(a_text)
    b = parse_decimal(b_text)
    if a is None or b is None:
        return None
    return render_decimal(multiply(a[0], b[0]), a[1] + b[1])


def divide_decimal_exact(a_text: str, b_text: str) -> str | None:
    """Integer quotient of two decimals, or None when it is not an exact integer."""
    aligned = _aligned(a_text, b_text)
    if aligned is None:
        return None
    a, b, _ = aligned
    if b.is_zero:
        return None
    quotient, remainder = divmod_truncated(a, b)
    if not remainder.is_zero:
        return None
    return quotient.render()


def divide_decimal_truncated(a_text: str, b_text: str, places: int) -> str | None:
    """Quotient truncated to an integer part and exactly places fractional digits."""
    aligned = _aligned(a_text, b_text)
    if aligned is None:
        return None
    a, b, _ = aligned
    if b.is_zero:
        return None
    scaled = multiply(a, BigInt.parse("1" + "0" * places))
    quotient, _ = divmod_truncated(scaled, b)
    digits = BigInt(quotient.groups).render().rjust(places + 1, "0")
    text = f"{digits[:-places]}.{digits[-places:]}" if places else digits
    return "-" + text if quotient.negative else text
