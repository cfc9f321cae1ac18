"""GGGX oracle: derive a Solid Number from a raw float in five phases.

GO gathers digits, patterns and named constants; GET estimates the
computation that would produce the value; GAP gauges the achievable
precision; GLIMPSE names the limiting barrier; GUESS assembles the Solid
Number and an explanation. Each phase refuses to run (returns False and
changes nothing) until the previous one has completed.
"""

from __future__ import annotations

import math
from enum import IntEnum

from .config import (
    CONSTANT_TOLERANCE,
    FRACTION_EPSILON,
    GGGX_BASE_PRECISION,
    GGGX_DEFAULT_PRECISION,
    GGGX_SAMPLE_DIGITS,
    INFINITE_GAP,
    NAMED_CONSTANTS,
)
from .logging_config import get_logger
from .patterns import PatternAnalysis, analyze_patterns, detect_repeating_pattern
from .pool import SolidPool, dec_ref, init_with_gap, to_debug_string
from .terminals import (
    TerminalAnalysis,
    analyze_terminal_statistics,
    extract_terminal_digits,
)
from .trace import (
    ALGORITHM_SIGNATURES,
    ComputationalTrace,
    complexity_class,
    generate_computational_trace,
)
from .types import Barrier, ErrorCode, SolidNumber, Terminal, TerminalKind

logger = get_logger("gggx")


class Phase(IntEnum):
    GO = 0
    GET = 1
    GAP = 2
    GLIMPSE = 3
    GUESS = 4


def detect_mathematical_constant(value: float) -> str | None:
    """Name of the constant within tolerance of value, if any."""
    for name, constant in NAMED_CONSTANTS.items():
        if abs(value - constant) < CONSTANT_TOLERANCE:
            return name
    return None


def sample_fraction(fraction: float, limit: int) -> str:
    """Up to limit digits of fraction by repeated x10 truncation."""
    digits = []
    for _ in range(limit):
        if fraction <= FRACTION_EPSILON:
            break
        fraction *= 10
        digit = int(fraction)
        digits.append(str(digit))
        fraction -= digit
    return "".join(digits)


def barrier_magnitude(precision: int) -> int:
    """10**precision, saturating to the infinite-gap sentinel."""
    magnitude = 1
    for _ in range(precision):
        if magnitude <= INFINITE_GAP // 10:
            magnitude *= 10
        else:
            return INFINITE_GAP
    return magnitude


class GGGXResult:
    """State of one analysis; phases fill it in strictly in order."""

    def __init__(self, desired_precision: int = GGGX_DEFAULT_PRECISION, pool: SolidPool | None = None):
        self.desired_precision = desired_precision
        self.pool = pool
        self.phases_completed = [False] * len(Phase)
        self.last_error: ErrorCode | None = None

        self.input_value = 0.0
        self.special: str | None = None  # "zero", "nan" or "infinity"
        self.digit_sample = ""
        self.significant_digits = 0
        self.has_pattern = False
        self.pattern_period = 0
        self.pattern_start = 0
        self.constant_name: str | None = None

        self.trace = ComputationalTrace()
        self.algorithm_complexity = 0

        self.achievable_precision = 0
        self.confidence = 0.0

        self.barrier = Barrier.COMPUTATIONAL
        self.barrier_magnitude = 0
        self.has_terminal_pattern = False
        self.terminal_length = 0
        self.pattern_analysis = PatternAnalysis()
        self.terminal_info = TerminalAnalysis()

        self.result: SolidNumber | None = None
        self.explanation = ""

    @property
    def is_complete(self) -> bool:
        return all(self.phases_completed)

    def _require(self, phase: Phase) -> bool:
        if self.phases_completed[phase - 1]:
            return True
        self.last_error = ErrorCode.PHASE_ORDER_VIOLATION
        logger.warning(
            "GGGX %s phase requested before %s completed",
            phase.name,
            Phase(phase - 1).name,
        )
        return False

    def _finish(self, phase: Phase) -> bool:
        self.phases_completed[phase] = True
        return True

    def go_phase(self, value: float) -> bool:
        """Classify the value, count significant digits, look for patterns and constants."""
        self.input_value = value
        if value == 0.0:
            self.special = "zero"
            self.significant_digits = 1
            self.digit_sample = "0"
            return self._finish(Phase.GO)
        if math.isnan(value) or math.isinf(value):
            self.special = "nan" if math.isnan(value) else "infinity"
            self.significant_digits = 0
            return self._finish(Phase.GO)

        magnitude = abs(value)
        int_part = int(magnitude)
        fraction = sample_fraction(magnitude - int_part, GGGX_SAMPLE_DIGITS)
        self.digit_sample = f"{int_part}.{fraction}"
        self.significant_digits = len(str(int_part)) + len(fraction)

        found = detect_repeating_pattern(self.digit_sample)
        if found is not None:
            self.has_pattern = True
            self.pattern_period, self.pattern_start = found
        self.constant_name = detect_mathematical_constant(value)
        logger.debug(
            "GO: %r -> %d significant digits, pattern period %d, constant %s",
            value,
            self.significant_digits,
            self.pattern_period,
            self.constant_name,
        )
        return self._finish(Phase.GO)

    def get_phase(self) -> bool:
        """Estimate the computational trace and complexity for the desired precision."""
        if not self._require(Phase.GET):
            return False
        if self.special in ("nan", "infinity"):
            self.trace = ComputationalTrace(algorithm="none")
            self.algorithm_complexity = 0
            return self._finish(Phase.GET)

        self.trace = generate_computational_trace(self.input_value, self.desired_precision)
        signature = ALGORITHM_SIGNATURES[self.trace.algorithm]
        self.algorithm_complexity = complexity_class(self.desired_precision, signature)
        logger.debug(
            "GET: algorithm %s, complexity %d, %d quantum ops",
            signature.name,
            self.algorithm_complexity,
            self.trace.quantum_ops,
        )
        return self._finish(Phase.GET)

    def gap_phase(self) -> bool:
        """Gauge achievable precision and the confidence in it."""
        if not self._require(Phase.GAP):
            return False
        precision = GGGX_BASE_PRECISION
        if self.algorithm_complexity > 100:
            precision = 10
        elif self.algorithm_complexity > 50:
            precision = 12
        if self.trace.quantum_ops > 0:
            precision = max(5, precision - self.trace.quantum_ops)
        if self.has_pattern and self.pattern_period < 10:
            precision += 5
        self.achievable_precision = precision

        confidence = 0.99
        confidence -= self.algorithm_complexity / 1000.0
        confidence -= self.trace.quantum_ops * 0.05
        if self.has_pattern:
            confidence += 0.02
        self.confidence = min(0.99, max(0.1, confidence))
        logger.debug(
            "GAP: precision %d at confidence %.3f", precision, self.confidence
        )
        return self._finish(Phase.GAP)

    def glimpse_phase(self) -> bool:
        """Name the barrier that limits precision and size the gap."""
        if not self._require(Phase.GLIMPSE):
            return False
        if self.special == "nan":
            barrier = Barrier.UNDEFINED
        elif self.special == "infinity":
            barrier = Barrier.INFINITY
        elif self.trace.quantum_ops > 3:
            barrier = Barrier.QUANTUM
        elif self.trace.memory_accesses > 50:
            barrier = Barrier.STORAGE
        elif self.trace.energy_estimate > 0.0005:
            barrier = Barrier.ENERGY
        elif self.algorithm_complexity > 1000:
            barrier = Barrier.TEMPORAL
        else:
            barrier = Barrier.COMPUTATIONAL

        if self.constant_name == "pi":
            barrier = Barrier.QUANTUM
        elif self.constant_name == "e":
            barrier = Barrier.TEMPORAL
        self.barrier = barrier

        if self.special in ("nan", "infinity"):
            self.barrier_magnitude = 0 if self.special == "nan" else INFINITE_GAP
            self.terminal_info = TerminalAnalysis(kind=TerminalKind.EMPTY_SET, stability=0.1)
        else:
            self.barrier_magnitude = barrier_magnitude(self.achievable_precision)
            self.pattern_analysis = analyze_patterns(self.digit_sample, self.input_value)
            self.terminal_info = analyze_terminal_statistics(
                extract_terminal_digits(self.input_value, barrier, self.barrier_magnitude)
            )

        if self.has_pattern and self.pattern_period <= 10:
            self.has_terminal_pattern = True
            self.terminal_length = self.pattern_period
        logger.debug(
            "GLIMPSE: %s barrier at magnitude %d (%s pattern)",
            barrier.name.lower(),
            self.barrier_magnitude,
            self.pattern_analysis.type.value,
        )
        return self._finish(Phase.GLIMPSE)

    def _known_digits(self) -> str:
        value = self.input_value
        if self.special == "nan":
            return ""
        if self.special == "infinity":
            return "-" if value < 0 else ""
        magnitude = abs(value)
        int_part = int(magnitude)
        sign = "-" if value < 0 else ""
        fraction = sample_fraction(magnitude - int_part, self.achievable_precision)
        return f"{sign}{int_part}.{fraction}"

    def _terminal(self) -> Terminal:
        if self.special in ("nan", "infinity"):
            return Terminal.empty_set()
        if self.has_terminal_pattern and self.pattern_period > 0:
            return Terminal.of_digits(
                "".join(str(i % 10) for i in range(min(self.pattern_period, 10)))
            )
        if self.barrier is Barrier.QUANTUM:
            return Terminal.superposition()
        return Terminal.of_digits("")

    def guess_phase(self) -> bool:
        """Assemble the Solid Number and the explanation."""
        if not self._require(Phase.GUESS):
            return False
        confidence = 0 if self.special == "nan" else round(self.confidence * 1000)
        result = init_with_gap(
            self._known_digits(),
            self.barrier,
            self.barrier_magnitude,
            confidence,
            self._terminal(),
            self.pool,
        )
        if result is None:
            self.last_error = ErrorCode.ALLOCATION_EXHAUSTED
            logger.error("GGGX could not allocate a result for %r", self.input_value)
            return False
        self.result = result
        self.explanation = (
            f"Value {self.input_value:.6f} analyzed: "
            f"{self.significant_digits} significant digits, "
            f"{self.barrier.name.lower()} barrier at 10^{self.achievable_precision}, "
            f"{self.confidence * 100:.1f}% confidence"
        )
        logger.debug("GUESS: %s", to_debug_string(result))
        return self._finish(Phase.GUESS)

    def release(self) -> None:
        """Drop the reference held on the result value."""
        if self.result is not None:
            dec_ref(self.result)
            self.result = None

    def summary(self) -> str:
        lines = [
            f"GGGX analysis of {self.input_value!r}",
            "phases: "
            + " ".join(
                f"{phase.name}={'done' if self.phases_completed[phase] else 'pending'}"
                for phase in Phase
            ),
            f"significant digits: {self.significant_digits}",
            f"pattern: {'period ' + str(self.pattern_period) if self.has_pattern else 'none'}",
            f"algorithm: {self.trace.algorithm or 'none'} (complexity {self.algorithm_complexity})",
            f"achievable precision: {self.achievable_precision} digits",
            f"confidence: {self.confidence * 100:.1f}%",
            f"barrier: {self.barrier.name.lower()}",
            f"terminal method: {self.terminal_info.method.value} "
            f"(stability {self.terminal_info.stability:.2f})",
        ]
        if self.result is not None:
            lines.append(f"result: {to_debug_string(self.result)}")
        if self.explanation:
            lines.append(self.explanation)
        return "\n".join(lines)


def analyze(
    value: float,
    desired_precision: int = GGGX_DEFAULT_PRECISION,
    pool: SolidPool | None = None,
) -> GGGXResult:
    """Run all five phases on value.

    Args:
        value: The raw float to analyse
        desired_precision: Number of digits the caller would like computed

    Returns:
        GGGXResult; its result field holds an owned Solid Number when every
        phase completed

    Example:
        >>> from blaze_solid.gggx import analyze
        >>> analysis = analyze(0.5, 15)
        >>> analysis.barrier.name
        'COMPUTATIONAL'
    """
    analysis = GGGXResult(desired_precision, pool)
    phases = (
        lambda: analysis.go_phase(value),
        analysis.get_phase,
        analysis.gap_phase,
        analysis.glimpse_phase,
        analysis.guess_phase,
    )
    for run in phases:
        if not run():
            break
    return analysis
