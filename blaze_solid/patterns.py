"""Pattern detection over digit strings.

Two brute-force detectors (repeating and cyclic) and a chain of heuristic
classifiers. The classifiers run in a fixed priority order and the first
one that fires decides the pattern type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from .config import CHI_SQUARED_CRITICAL, PRIME_TABLE
from .logging_config import get_logger

logger = get_logger("patterns")


class PatternType(Enum):
    NONE = "none"
    REPEATING = "repeating"
    CYCLIC = "cyclic"
    FIBONACCI = "fibonacci"
    PRIME = "prime"
    ALGEBRAIC = "algebraic"
    TRANSCENDENTAL = "transcendental"
    CHAOTIC = "chaotic"
    FRACTAL = "fractal"


@dataclass
class PatternAnalysis:
    type: PatternType = PatternType.NONE
    period: int = 0
    offset: int = 0
    confidence: float = 0.0
    description: str = ""


@dataclass
class DigitStats:
    counts: list[int]
    total: int
    entropy: float
    chi_squared: float
    is_uniform: bool


def digit_stats(digits: str) -> DigitStats:
    """Digit frequencies, Shannon entropy (bits) and chi-squared against uniform."""
    values = [ord(ch) - 48 for ch in digits if "0" <= ch <= "9"]
    counts = np.bincount(np.asarray(values, dtype=np.int64), minlength=10)
    total = int(counts.sum())
    if total == 0:
        return DigitStats([0] * 10, 0, 0.0, 0.0, False)
    present = counts[counts > 0] / total
    entropy = float(-(present * np.log2(present)).sum())
    expected = total / 10
    chi_squared = float((((counts - expected) ** 2) / expected).sum())
    return DigitStats(
        [int(c) for c in counts],
        total,
        entropy,
        chi_squared,
        chi_squared < CHI_SQUARED_CRITICAL,
    )


def detect_repeating_pattern(digits: str) -> tuple[int, int] | None:
    """Find the smallest period, then the smallest start, repeating at least three times.

    Returns:
        (period, start) of the first match, or None
    """
    length = len(digits)
    for period in range(1, length // 2 + 1):
        for start in range(length - period * 2):
            matches = True
            for i in range(period):
                if start + i + period >= length:
                    break
                if digits[start + i] != digits[start + i + period]:
                    matches = False
                    break
            if not matches:
                continue

            block = digits[start : start + period]
            repetitions = 1
            offset = period
            while start + offset + period <= length:
                if digits[start + offset : start + offset + period] != block:
                    break
                repetitions += 1
                offset += period
            if repetitions >= 3:
                return period, start
    return None


def detect_cyclic_pattern(digits: str) -> tuple[int, int] | None:
    """Find a block that appears three times back to back.

    Returns:
        (period, offset) of the first match, or None
    """
    length = len(digits)
    for period in range(1, length // 3 + 1):
        for offset in range(length - period * 3):
            block = digits[offset : offset + period]
            if (
                digits[offset + period : offset + 2 * period] == block
                and digits[offset + 2 * period : offset + 3 * period] == block
            ):
                return period, offset
    return None


def check_fibonacci_pattern(digits: str) -> bool:
    """Each digit is the sum of the previous two, modulo 10, at more than half the positions."""
    if len(digits) < 10:
        return False
    seq = [int(ch) for ch in digits if ch.isdigit() and ch.isascii()][:10]
    if len(seq) < 6:
        return False
    matches = sum(1 for i in range(2, len(seq)) if seq[i] == (seq[i - 1] + seq[i - 2]) % 10)
    return matches > len(seq) // 2


def check_prime_pattern(digits: str) -> bool:
    """The running digit value hits a small prime more than twice."""
    matches = 0
    running = 0
    for ch in digits[:15]:
        if "0" <= ch <= "9":
            running = running * 10 + int(ch)
            if running in PRIME_TABLE:
                matches += 1
            if running > 100:
                running %= 100
    return matches > 2


def detect_algebraic_pattern(value: float) -> bool:
    """value is near a square or cube root of a small integer, or is the golden ratio."""
    square = value * value
    if any(abs(square - n) < 0.01 for n in range(2, 101)):
        return True
    cube = square * value
    if any(abs(cube - n) < 0.01 for n in range(2, 51)):
        return True
    return abs(square - value - 1) < 0.01


def detect_fractal_pattern(digits: str) -> bool:
    length = len(digits)
    if length < 20:
        return False
    scale1 = length // 4
    scale2 = length // 8
    if scale2 < 3:
        return False
    similar = sum(
        1
        for i in range(scale2)
        if digits[i] == digits[i + scale1] or digits[i] == digits[i + scale1 * 2]
    )
    return similar > scale2 // 2


def analyze_patterns(digits: str, value: float) -> PatternAnalysis:
    """Classify a digit string (and the value it came from).

    Args:
        digits: Digit string to examine (may contain a sign or decimal point)
        value: The numeric value the digits were sampled from

    Returns:
        PatternAnalysis; type NONE when no classifier fires
    """
    stats = digit_stats(digits)
    length = len(digits)

    for digit, count in enumerate(stats.counts):
        if count > length * 0.8:
            return PatternAnalysis(
                PatternType.REPEATING,
                period=1,
                confidence=count / length,
                description=f"Repeating digit {digit}",
            )

    cyclic = detect_cyclic_pattern(digits)
    if cyclic is not None:
        period, offset = cyclic
        return PatternAnalysis(
            PatternType.CYCLIC,
            period=period,
            offset=offset,
            confidence=0.9,
            description=f"Cyclic pattern with period {period}",
        )

    if check_fibonacci_pattern(digits):
        return PatternAnalysis(
            PatternType.FIBONACCI, confidence=0.8, description="Fibonacci-like sequence"
        )

    if check_prime_pattern(digits):
        return PatternAnalysis(
            PatternType.PRIME, confidence=0.7, description="Prime-based pattern"
        )

    if detect_algebraic_pattern(value):
        return PatternAnalysis(
            PatternType.ALGEBRAIC,
            confidence=0.85,
            description="Algebraic number (root of polynomial)",
        )

    if detect_fractal_pattern(digits):
        return PatternAnalysis(
            PatternType.FRACTAL, confidence=0.6, description="Self-similar/fractal pattern"
        )

    if stats.entropy > 3.0 and stats.is_uniform:
        return PatternAnalysis(
            PatternType.CHAOTIC,
            confidence=stats.entropy / 3.32,
            description=f"High entropy ({stats.entropy:.2f}), possibly chaotic",
        )

    if stats.entropy > 2.5 and not stats.is_uniform:
        return PatternAnalysis(
            PatternType.TRANSCENDENTAL, confidence=0.5, description="Possibly transcendental"
        )

    logger.debug("No pattern found in %r", digits)
    return PatternAnalysis()
