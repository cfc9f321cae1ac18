"""Tests for the GGGX oracle."""

import math

import pytest

from blaze_solid.config import E, INFINITE_GAP, PI
from blaze_solid.gggx import (
    GGGXResult,
    Phase,
    analyze,
    barrier_magnitude,
    detect_mathematical_constant,
    sample_fraction,
)
from blaze_solid.pool import SolidPool, get_pool, init_exact, to_debug_string
from blaze_solid.types import Barrier, ErrorCode


class TestHelpers:
    def test_detect_constant(self):
        assert detect_mathematical_constant(PI) == "pi"
        assert detect_mathematical_constant(E) == "e"
        assert detect_mathematical_constant(math.sqrt(2)) == "sqrt2"
        assert detect_mathematical_constant(3.14) is None

    def test_sample_fraction(self):
        assert sample_fraction(0.5, 15) == "5"
        assert sample_fraction(0.0, 15) == ""
        assert sample_fraction(0.25, 1) == "2"

    def test_barrier_magnitude(self):
        assert barrier_magnitude(0) == 1
        assert barrier_magnitude(15) == 10**15
        assert barrier_magnitude(19) == 10**19
        assert barrier_magnitude(20) == INFINITE_GAP


class TestPhaseOrdering:
    def test_gap_before_go_is_rejected(self):
        result = GGGXResult()
        assert result.gap_phase() is False
        assert result.phases_completed == [False] * 5
        assert result.last_error is ErrorCode.PHASE_ORDER_VIOLATION
        assert result.achievable_precision == 0

    def test_each_phase_requires_the_previous_one(self):
        result = GGGXResult()
        assert result.go_phase(0.5)
        assert result.glimpse_phase() is False
        assert result.get_phase()
        assert result.guess_phase() is False
        assert result.gap_phase()
        assert result.glimpse_phase()
        assert result.guess_phase()
        assert result.is_complete

    def test_phase_indices(self):
        assert [p.name for p in Phase] == ["GO", "GET", "GAP", "GLIMPSE", "GUESS"]


class TestAnalyze:
    def test_pi_is_quantum(self):
        result = analyze(PI, 15)
        assert result.is_complete
        assert result.constant_name == "pi"
        assert result.significant_digits == 16
        assert result.trace.algorithm == "pi_machin"
        assert result.achievable_precision == 14
        assert result.confidence == pytest.approx(0.938)
        assert result.barrier is Barrier.QUANTUM
        solid = result.result
        assert solid.known.startswith("3.14159")
        assert solid.confidence == 938
        assert solid.gap_magnitude == 10**14
        assert solid.terminal.is_superposition
        assert "(q:10^14|938/1000)" in to_debug_string(solid)

    def test_one_half(self):
        result = analyze(0.5, 15)
        assert result.barrier is Barrier.COMPUTATIONAL
        assert result.achievable_precision == 15
        assert result.result.known == "0.5"
        assert result.result.confidence == 975
        assert result.barrier_magnitude == 10**15
        assert result.explanation == (
            "Value 0.500000 analyzed: 2 significant digits, "
            "computational barrier at 10^15, 97.5% confidence"
        )

    def test_repeating_third(self):
        result = analyze(1 / 3, 15)
        assert result.has_pattern
        assert result.pattern_period == 1
        assert result.achievable_precision == 20
        assert result.result.confidence == 990
        assert result.result.gap_magnitude == INFINITE_GAP
        assert result.result.terminal.digits == "0"
        assert result.result.known.startswith("0.3333333333")

    def test_e_is_temporal(self):
        assert analyze(E, 15).barrier is Barrier.TEMPORAL

    def test_negative_value_keeps_sign(self):
        result = analyze(-2.5, 15)
        assert result.result.known == "-2.5"

    def test_zero(self):
        result = analyze(0.0, 15)
        assert result.is_complete
        assert result.significant_digits == 1
        assert result.result.known == "0."

    def test_nan(self):
        result = analyze(math.nan, 15)
        assert result.is_complete
        assert result.barrier is Barrier.UNDEFINED
        assert result.result.is_undefined
        assert result.result.confidence == 0
        assert result.result.terminal.is_empty_set

    def test_infinity(self):
        result = analyze(-math.inf, 15)
        assert result.barrier is Barrier.INFINITY
        assert result.result.known == "-"
        assert result.result.gap_magnitude == INFINITE_GAP

    @pytest.mark.parametrize("value", [1e308, 1.7e308, -1e308])
    def test_huge_finite_values(self, value):
        result = analyze(value, 15)
        assert result.is_complete
        assert result.trace.algorithm == "rational"
        assert result.barrier is Barrier.COMPUTATIONAL
        sign = "-" if value < 0 else ""
        assert result.result.known.startswith(sign + "1")
        assert result.result.gap_magnitude > 0
        result.release()

    def test_exhausted_pool(self):
        pool = SolidPool(1)
        init_exact("1", pool)
        result = analyze(0.5, 15, pool)
        assert not result.is_complete
        assert result.phases_completed[:4] == [True] * 4
        assert result.last_error is ErrorCode.ALLOCATION_EXHAUSTED
        assert result.result is None

    def test_release(self):
        result = analyze(0.5, 15)
        assert get_pool().in_use == 1
        result.release()
        assert get_pool().in_use == 0
        assert result.result is None

    def test_summary(self):
        result = analyze(PI, 15)
        summary = result.summary()
        assert "GUESS=done" in summary
        assert "barrier: quantum" in summary
        assert "achievable precision: 14 digits" in summary
        assert result.explanation in summary
