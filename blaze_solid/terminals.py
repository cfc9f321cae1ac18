"""Terminal-digit extraction.

Five strategies estimate what the digits beyond a gap look like. The
strategy is chosen from the value and its barrier; each reports a
stability score that is diagnostic only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from itertools import islice

import sympy as sp

from .config import (
    CONTINUED_FRACTION_MAX_TERMS,
    E,
    LOGISTIC_MAP_R,
    LOGISTIC_WARMUP_STEPS,
    PI,
    TERMINAL_DIGIT_CAPACITY,
)
from .logging_config import get_logger
from .patterns import digit_stats
from .types import Barrier, Terminal, TerminalKind

logger = get_logger("terminals")


class ExtractionMethod(Enum):
    MODULAR = "modular"
    CONTINUED = "continued_fraction"
    SERIES = "series"
    ITERATIVE = "iterative"
    QUANTUM = "quantum"


@dataclass
class TerminalAnalysis:
    digits: str = ""
    kind: TerminalKind = TerminalKind.DIGITS
    method: ExtractionMethod = ExtractionMethod.MODULAR
    stability: float = 0.5
    has_pattern: bool = False
    pattern_period: int = 0

    @property
    def terminal(self) -> Terminal:
        if self.kind is TerminalKind.DIGITS:
            return Terminal.of_digits(self.digits)
        return Terminal(self.kind)


def _is_near_fraction(value: float, max_denominator: int) -> bool:
    for denominator in range(2, max_denominator + 1):
        scaled = value * denominator
        if math.isfinite(scaled) and abs(scaled - round(scaled)) < 0.0001:
            return True
    return False


def choose_extraction_method(value: float, barrier: Barrier) -> ExtractionMethod:
    if barrier is Barrier.QUANTUM:
        return ExtractionMethod.QUANTUM
    if _is_near_fraction(value, 100):
        return ExtractionMethod.MODULAR
    squared = value * value
    if math.isfinite(squared) and abs(squared - round(squared)) < 0.01:
        return ExtractionMethod.CONTINUED
    if abs(value - PI) < 0.001 or abs(value - E) < 0.001:
        return ExtractionMethod.SERIES
    if 0 < value < 1 and barrier is Barrier.TEMPORAL:
        return ExtractionMethod.ITERATIVE
    return ExtractionMethod.MODULAR


def _leading_period(digits: str) -> int:
    """Smallest p such that the first p digits reappear p places later."""
    if len(digits) <= 3:
        return 0
    for period in range(1, len(digits) // 2 + 1):
        if all(
            digits[i] == digits[i + period]
            for i in range(period)
            if i + period < len(digits)
        ):
            return period
    return 0


def extract_modular(value: float, gap_magnitude: int) -> TerminalAnalysis:
    """Scale by a power of ten sized to the gap and keep the residue."""
    modulus = 1
    for _ in range(TERMINAL_DIGIT_CAPACITY):
        if modulus >= gap_magnitude:
            break
        modulus *= 10
    modulus = max(1, min(modulus, gap_magnitude))
    scaled = abs(value) * modulus
    current = int(scaled) % modulus if math.isfinite(scaled) else 0
    digits = str(current)[:TERMINAL_DIGIT_CAPACITY] if current > 0 else ""
    period = _leading_period(digits)
    return TerminalAnalysis(
        digits=digits,
        method=ExtractionMethod.MODULAR,
        stability=0.8,
        has_pattern=period > 0,
        pattern_period=period,
    )


def continued_fraction(value: float) -> list[int]:
    """Partial quotients of value, stopping early on a repeating tail."""
    terms: list[int] = []
    rational = sp.nsimplify(value, rational=True)
    for term in islice(sp.continued_fraction_iterator(rational), CONTINUED_FRACTION_MAX_TERMS):
        terms.append(int(term))
        if len(terms) > 10 and _tail_period(terms):
            break
    return terms


def _tail_period(terms: list[int]) -> int:
    length = len(terms)
    for period in range(1, length // 2 + 1):
        if all(terms[length - 1 - j] == terms[length - 1 - j - period] for j in range(period)):
            return period
    return 0


def extract_continued(value: float) -> TerminalAnalysis:
    terms = continued_fraction(value)
    if len(terms) < 2:
        return TerminalAnalysis(
            kind=TerminalKind.EMPTY_SET, method=ExtractionMethod.CONTINUED, stability=0.9
        )
    digits = "".join(str(abs(t)) for t in terms[-TERMINAL_DIGIT_CAPACITY:])
    period = _tail_period(terms) if len(terms) > 5 else 0
    return TerminalAnalysis(
        digits=digits[:TERMINAL_DIGIT_CAPACITY],
        method=ExtractionMethod.CONTINUED,
        stability=0.9,
        has_pattern=period > 0,
        pattern_period=period,
    )


def extract_series(value: float, gap_magnitude: int) -> TerminalAnalysis:
    """Digits of the remainder once series terms fall below the gap."""
    threshold = 1.0 / gap_magnitude if gap_magnitude else math.inf
    remainder = value
    factorial = 1.0
    digits = []
    for n in range(1, 20):
        if len(digits) >= TERMINAL_DIGIT_CAPACITY:
            break
        factorial *= n
        term = 1.0 / factorial
        if term < threshold:
            digit = int(remainder * 10)
            if 0 <= digit <= 9:
                digits.append(str(digit))
                remainder = remainder * 10 - digit
        else:
            remainder -= term
    return TerminalAnalysis(
        digits="".join(digits), method=ExtractionMethod.SERIES, stability=0.7
    )


def extract_iterative(value: float) -> TerminalAnalysis:
    """Run the logistic map in its chaotic regime and read digits off its states."""
    x = value
    for _ in range(LOGISTIC_WARMUP_STEPS):
        x = LOGISTIC_MAP_R * x * (1 - x)
        if not math.isfinite(x):
            break
    digits = []
    for _ in range(TERMINAL_DIGIT_CAPACITY):
        if not math.isfinite(x):
            break
        x = LOGISTIC_MAP_R * x * (1 - x)
        if not math.isfinite(x):
            break
        digits.append(str(int(x * 10) % 10))
    return TerminalAnalysis(
        digits="".join(digits), method=ExtractionMethod.ITERATIVE, stability=0.3
    )


def extract_quantum() -> TerminalAnalysis:
    return TerminalAnalysis(
        digits="*" * (TERMINAL_DIGIT_CAPACITY // 2),
        kind=TerminalKind.SUPERPOSITION,
        method=ExtractionMethod.QUANTUM,
        stability=0.1,
    )


def extract_terminal_digits(
    value: float, barrier: Barrier, gap_magnitude: int
) -> TerminalAnalysis:
    """Estimate the terminal digits of value beyond a gap of gap_magnitude.

    Args:
        value: The value being analysed
        barrier: Barrier attributed to the gap
        gap_magnitude: Size of the gap (order of magnitude)

    Returns:
        TerminalAnalysis; Superposition for quantum extraction or unstable
        results, EmptySet when no digits could be produced
    """
    if not math.isfinite(value):
        return TerminalAnalysis(kind=TerminalKind.EMPTY_SET, stability=0.1)

    method = choose_extraction_method(value, barrier)
    if method is ExtractionMethod.QUANTUM:
        analysis = extract_quantum()
    elif method is ExtractionMethod.CONTINUED:
        analysis = extract_continued(value)
    elif method is ExtractionMethod.SERIES:
        analysis = extract_series(value, gap_magnitude)
    elif method is ExtractionMethod.ITERATIVE:
        analysis = extract_iterative(value)
    else:
        analysis = extract_modular(value, gap_magnitude)

    if method is ExtractionMethod.QUANTUM or analysis.stability < 0.3:
        analysis.kind = TerminalKind.SUPERPOSITION
    elif not analysis.digits:
        analysis.kind = TerminalKind.EMPTY_SET
    else:
        analysis.kind = TerminalKind.DIGITS
    logger.debug(
        "Terminal extraction for %r via %s: %r (stability %.2f)",
        value,
        method.value,
        analysis.digits,
        analysis.stability,
    )
    return analysis


def analyze_terminal_statistics(analysis: TerminalAnalysis) -> TerminalAnalysis:
    """Adjust stability by how uniform the terminal digits are."""
    if not analysis.digits or analysis.kind is not TerminalKind.DIGITS:
        return analysis
    if digit_stats(analysis.digits).is_uniform:
        analysis.stability *= 1.1
    else:
        analysis.stability *= 0.9
    analysis.stability = min(1.0, max(0.1, analysis.stability))
    return analysis
