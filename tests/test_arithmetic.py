"""Tests for the arithmetic engine: dispatch, propagation and special values."""

import itertools

import pytest

from blaze_solid.arithmetic import add, divide, multiply, power, subtract
from blaze_solid.config import INFINITE_GAP
from blaze_solid.infinity import negative_infinity, positive_infinity
from blaze_solid.pool import get_pool, init_exact, init_with_gap, to_debug_string
from blaze_solid.propagation import combine_barriers, combine_confidence
from blaze_solid.types import Barrier, Terminal, UndefinedReason
from blaze_solid.undefined import recent_undefined, undefined_with_reason


def gapped(known, barrier=Barrier.COMPUTATIONAL, gap=10**6, confidence=900, terminal=""):
    return init_with_gap(known, barrier, gap, confidence, Terminal.of_digits(terminal))


def last_reason():
    return recent_undefined()[-1].reason


class TestPropagationRules:
    def test_barrier_combination_is_symmetric(self):
        for a, b in itertools.product(Barrier, repeat=2):
            assert combine_barriers(a, b) is combine_barriers(b, a)

    def test_barrier_priority(self):
        assert combine_barriers(Barrier.EXACT, Barrier.EXACT) is Barrier.EXACT
        assert combine_barriers(Barrier.EXACT, Barrier.STORAGE) is Barrier.STORAGE
        assert combine_barriers(Barrier.QUANTUM, Barrier.ENERGY) is Barrier.QUANTUM
        assert combine_barriers(Barrier.INFINITY, Barrier.QUANTUM) is Barrier.INFINITY
        assert combine_barriers(Barrier.UNDEFINED, Barrier.INFINITY) is Barrier.UNDEFINED

    def test_confidence_combination(self):
        assert combine_confidence(900, 800, "+") == 800
        assert combine_confidence(900, 800, "-") == 800
        assert combine_confidence(900, 800, "*") == 720
        assert combine_confidence(900, 800, "/") == 600
        assert combine_confidence(100, 100, "/") == 100


class TestAddSubtract:
    def test_exact_add(self):
        result = add(init_exact("2"), init_exact("3"))
        assert result.known == "5"
        assert result.is_exact

    def test_gapped_add_combines_everything(self):
        a = gapped("1.5", gap=10**6, confidence=900, terminal="12345678901")
        b = gapped("2.5", Barrier.QUANTUM, gap=10**3, confidence=800, terminal="999")
        result = add(a, b)
        assert result.known == "4"
        assert result.barrier is Barrier.QUANTUM
        assert result.gap_magnitude == 10**6
        assert result.confidence == 800
        assert result.terminal.digits == "12345678999"

    def test_operands_are_not_consumed(self):
        a, b = init_exact("1"), init_exact("2")
        add(a, b)
        assert a.ref_count == 1
        assert b.ref_count == 1
        assert a.known == "1"

    def test_none_operand(self):
        assert add(None, init_exact("1")) is None
        assert subtract(init_exact("1"), None) is None

    def test_undefined_propagates(self):
        undefined = undefined_with_reason(UndefinedReason.DIVISION_BY_ZERO)
        for op in (add, subtract, multiply, divide, power):
            assert op(undefined, init_exact("1")).is_undefined
            assert op(init_exact("1"), undefined).is_undefined

    def test_infinity_plus_infinity(self):
        result = add(positive_infinity(), positive_infinity())
        assert result.barrier is Barrier.INFINITY
        assert result.gap_magnitude == INFINITE_GAP
        assert result.confidence == 1000

    def test_infinity_plus_finite(self):
        assert add(positive_infinity(), init_exact("5")).is_infinity
        assert add(init_exact("5"), negative_infinity()).known == "-"

    def test_infinity_minus_infinity_is_naturals(self):
        result = subtract(positive_infinity(), positive_infinity())
        assert not result.is_undefined
        assert result.known == "ℕ"
        assert result.terminal.is_superposition
        assert to_debug_string(result) == "ℕ...(i:∞|1000/1000)...{*}"

    def test_finite_minus_infinity(self):
        assert subtract(init_exact("5"), positive_infinity()).known == "-"
        assert subtract(positive_infinity(), init_exact("5")).known == ""

    def test_exact_subtract_negative(self):
        assert subtract(init_exact("1"), init_exact("1.5")).known == "-0.5"


class TestExactRoundTrip:
    @pytest.mark.parametrize(
        "a, b",
        [
            ("0", "0"),
            ("7", "5"),
            ("123456789", "987654321"),
            ("999999999", "1"),
            ("1000000000000000000", "999999999999"),
            ("-42", "17"),
            ("42", "-17"),
            ("-123456789012", "-987654321098"),
            ("5", "-5"),
        ],
    )
    def test_subtract_undoes_add(self, a, b):
        left, right = init_exact(a), init_exact(b)
        total = add(left, right)
        back = subtract(total, right)
        assert back.is_exact
        assert back.known == a

    @pytest.mark.parametrize("a, b", [(900, 800), (1000, 120), (100, 100), (1000, 1000), (0, 750)])
    def test_division_confidence_is_symmetric(self, a, b):
        assert combine_confidence(a, b, "/") == combine_confidence(b, a, "/")


class TestMultiply:
    def test_exact_product(self):
        result = multiply(init_exact("123456789"), init_exact("987654321"))
        assert result.known == "121932631112635269"
        assert result.is_exact

    def test_zero_times_infinity(self):
        assert multiply(init_exact("0"), positive_infinity()).is_undefined
        assert last_reason() is UndefinedReason.ZERO_TIMES_INFINITY
        assert multiply(positive_infinity(), init_exact("0.0")).is_undefined

    def test_sign_of_infinite_product(self):
        assert multiply(init_exact("-2"), positive_infinity()).known == "-"
        assert multiply(negative_infinity(), negative_infinity()).known == ""

    def test_gapped_product(self):
        a = gapped("2", gap=10, confidence=900)
        b = gapped("3", Barrier.ENERGY, gap=0, confidence=800)
        result = multiply(a, b)
        assert result.known == "6"
        assert result.barrier is Barrier.ENERGY
        assert result.gap_magnitude == 10
        assert result.confidence == 720
        assert result.terminal.is_superposition

    def test_gap_product_saturates(self):
        a = gapped("2", gap=10**12)
        b = gapped("3", gap=10**12)
        assert multiply(a, b).gap_magnitude == INFINITE_GAP


class TestDivide:
    def test_division_by_exact_zero(self):
        result = divide(init_exact("1"), init_exact("0"))
        assert result.is_undefined
        assert result.confidence == 0
        assert last_reason() is UndefinedReason.DIVISION_BY_ZERO

    def test_exact_integer_quotient(self):
        result = divide(init_exact("10"), init_exact("2"))
        assert result.known == "5"
        assert result.is_exact

    def test_inexact_quotient(self):
        result = divide(init_exact("1"), init_exact("3"))
        assert result.known == "0.333333"
        assert result.barrier is Barrier.COMPUTATIONAL
        assert result.gap_magnitude == 10**6
        assert result.confidence == 900

    def test_infinity_divided_by_infinity(self):
        result = divide(positive_infinity(), positive_infinity())
        assert result.known == "1.000"
        assert result.terminal.digits == "00001"
        assert result.gap_magnitude == 100000
        assert result.barrier is Barrier.COMPUTATIONAL
        assert result.confidence == 583

    def test_infinity_and_finite(self):
        assert divide(positive_infinity(), init_exact("5")).is_infinity
        small = divide(init_exact("5"), positive_infinity())
        assert small.known == "0"
        assert small.barrier is Barrier.COMPUTATIONAL
        assert small.gap_magnitude == 1

    def test_possibly_zero_divisor(self):
        result = divide(init_exact("1"), gapped("0.0", gap=10))
        assert result.is_undefined
        assert result.confidence == 50

    def test_gapped_division(self):
        a = gapped("7.5", Barrier.ENERGY, gap=100, confidence=900, terminal="1")
        result = divide(a, init_exact("2"))
        assert result.known == "3"
        assert result.barrier is Barrier.ENERGY
        assert result.gap_magnitude == 1000
        assert result.confidence == 750
        assert result.terminal.is_superposition


class TestPower:
    def test_exact_integer_power(self):
        assert power(init_exact("2"), init_exact("10")).known == "1024"
        assert power(init_exact("2.5"), init_exact("2")).known == "6.25"
        assert power(init_exact("7"), init_exact("0")).known == "1"

    def test_zero_to_the_zero(self):
        assert power(init_exact("0"), init_exact("0")).is_undefined
        assert last_reason() is UndefinedReason.ZERO_POWER_ZERO

    def test_negative_base_fractional_exponent(self):
        assert power(init_exact("-8"), init_exact("0.5")).is_undefined
        assert last_reason() is UndefinedReason.INDETERMINATE_FORM

    def test_float_fallback(self):
        result = power(init_exact("2"), init_exact("0.5"))
        assert result.known == "1.414214"
        assert result.barrier is Barrier.COMPUTATIONAL
        assert result.gap_magnitude == 10**6
        assert power(init_exact("2"), init_exact("-1")).known == "0.500000"

    def test_infinite_powers(self):
        assert power(positive_infinity(), init_exact("2")).is_infinity
        assert power(init_exact("2"), positive_infinity()).is_infinity
        assert power(init_exact("1"), positive_infinity()).known == "1"
        assert power(init_exact("0.5"), positive_infinity()).known == "0"
        both = power(positive_infinity(), positive_infinity())
        assert both.terminal.digits == "2468101214161820"
        assert both.confidence == 500
        undefined = power(init_exact("-2"), positive_infinity())
        assert undefined.is_undefined
        assert undefined.confidence == 100


@pytest.mark.slow
def test_results_are_released_cleanly():
    pool = get_pool()
    for i in range(1000):
        a, b = init_exact(str(i)), init_exact("3")
        for op in (add, subtract, multiply, divide):
            result = op(a, b)
            result.pool.dec_ref(result)
        a.pool.dec_ref(a)
        b.pool.dec_ref(b)
    assert pool.in_use == 0
