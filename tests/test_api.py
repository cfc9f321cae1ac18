"""Test the public facade returns typed results and releases what it allocates."""

import json

import pytest

from blaze_solid.api import (
    analyze_value,
    calculate,
    calculate_expression,
    recover_value,
    square_root,
    to_result,
)
from blaze_solid.pool import SolidPool, get_pool
from blaze_solid.types import AnalysisReport, OperationResult


class TestCalculate:
    def test_exact_product(self):
        result = calculate("123456789", "*", "987654321")
        assert isinstance(result, OperationResult)
        assert result.ok
        assert result.value == "121932631112635269"
        assert result.barrier == "exact"
        assert result.confidence == 1.0
        assert result.approx == pytest.approx(121932631112635269.0)

    def test_inexact_division(self):
        result = calculate("1", "/", "3")
        assert result.ok
        assert result.value == "0.333333...(c:10^6|900/1000)..."
        assert result.barrier == "computational"
        assert result.confidence == 0.9

    def test_division_by_zero(self):
        result = calculate("1", "/", "0")
        assert not result.ok
        assert result.error_code == "UNDEFINED_RESULT"
        assert "zero" in result.error
        assert result.value is not None

    def test_infinity_minus_infinity(self):
        result = calculate("inf", "-", "∞")
        assert result.ok
        assert result.value == "ℕ...(i:∞|1000/1000)...{*}"
        assert result.approx is None

    def test_invalid_inputs(self):
        assert calculate("abc", "+", "1").error_code == "INVALID_OPERAND"
        assert calculate("1", "%", "2").error_code == "INVALID_OPERATOR"
        assert calculate("", "+", "1").error_code == "EMPTY_INPUT"
        assert calculate("1", "+", "9" * 300).error_code == "TOO_LONG"

    def test_releases_every_value(self):
        calculate("2", "^", "10")
        calculate("1", "/", "0")
        calculate("1", "+", "bad")
        calculate("aleph0", "/", "inf")
        assert get_pool().in_use == 0

    def test_exhausted_pool(self):
        pool = SolidPool(1)
        result = calculate("1", "+", "2", pool=pool)
        assert not result.ok
        assert result.error_code == "ALLOCATION_EXHAUSTED"
        assert pool.in_use == 0

    def test_expression(self):
        assert calculate_expression("2 + 3").value == "5"
        assert calculate_expression("-5 - -3").value == "-2"
        assert calculate_expression("2 ** 3").value == "8"
        assert calculate_expression("2+3").error_code == "INVALID_EXPRESSION"
        assert calculate_expression("   ").error_code == "EMPTY_INPUT"


class TestSqrtAndRecover:
    def test_square_root(self):
        result = square_root("4")
        assert result.ok
        assert result.value == "2...(c:10^6|900/1000)..."
        assert square_root("-4").error_code == "UNDEFINED_RESULT"
        assert square_root("x").error_code == "INVALID_OPERAND"

    def test_recover(self):
        assert recover_value("undefined", "one").value == "1"
        assert recover_value("undefined", "ZERO").value == "0"
        assert recover_value("5", "zero").value == "5"
        assert recover_value("undefined", "bogus").error_code == "INVALID_STRATEGY"
        assert recover_value("undefined", "propagate").error_code == "UNDEFINED_RESULT"
        assert get_pool().in_use == 0


class TestAnalyzeValue:
    def test_one_half(self):
        report = analyze_value(0.5)
        assert isinstance(report, AnalysisReport)
        assert report.ok
        assert report.barrier == "computational"
        assert report.confidence == 0.975
        assert report.achievable_precision == 15
        assert report.solid == "0.5...(c:10^15|975/1000)..."
        assert report.algorithm == "rational"
        assert get_pool().in_use == 0

    def test_text_input(self):
        report = analyze_value("3.141592653589793")
        assert report.barrier == "quantum"
        assert report.achievable_precision == 14

    def test_repeating_pattern_reported(self):
        assert analyze_value(1 / 3).pattern_period == 1

    def test_non_finite(self):
        report = analyze_value("nan")
        assert report.ok
        assert report.barrier == "undefined"
        assert report.value is None
        json.dumps(report.to_dict())

    def test_invalid(self):
        assert analyze_value("abc").error_code == "INVALID_OPERAND"
        assert analyze_value("").error_code == "EMPTY_INPUT"
        assert analyze_value(0.5, 0).error_code == "INVALID_PRECISION"
        assert analyze_value(0.5, "many").error_code == "INVALID_PRECISION"
        assert analyze_value(0.5, None).error_code == "INVALID_PRECISION"
        assert analyze_value(0.5, "15").ok

    def test_huge_finite_value(self):
        report = analyze_value("1e308")
        assert report.ok
        assert report.value == 1e308
        assert report.barrier == "computational"
        assert get_pool().in_use == 0

    def test_exhausted_pool(self):
        pool = SolidPool(1)
        pool.alloc()
        report = analyze_value(0.5, pool=pool)
        assert not report.ok
        assert report.error_code == "ALLOCATION_EXHAUSTED"


class TestResultObjects:
    def test_to_result_none(self):
        result = to_result(None)
        assert not result.ok
        assert result.error_code == "ALLOCATION_EXHAUSTED"

    def test_to_dict_omits_missing_fields(self):
        data = calculate("2", "+", "2").to_dict()
        assert data["ok"] is True
        assert data["value"] == "4"
        assert "error" not in data

    def test_repr(self):
        assert "ok=False" in repr(calculate("x", "+", "1"))
        assert "value='4'" in repr(calculate("2", "+", "2"))
