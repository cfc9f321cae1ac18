"""Tests for Undefined handling: predicates, sqrt, log and recovery."""

import unittest

from blaze_solid.config import INFINITE_GAP
from blaze_solid.infinity import positive_infinity
from blaze_solid.pool import init_exact, init_with_gap, reset_pool
from blaze_solid.types import Barrier, RecoveryStrategy, Terminal, UndefinedReason
from blaze_solid.undefined import (
    clear_undefined_history,
    is_integer,
    is_negative,
    is_zero,
    log,
    recent_undefined,
    recover,
    sqrt,
    undefined_with_reason,
    would_be_undefined,
)


class TestPredicates(unittest.TestCase):
    def setUp(self):
        reset_pool()

    def test_is_zero(self):
        self.assertTrue(is_zero(init_exact("0")))
        self.assertTrue(is_zero(init_exact("-0.000")))
        self.assertFalse(is_zero(init_exact("0.001")))
        self.assertFalse(is_zero(init_exact("")))
        self.assertFalse(is_zero(init_with_gap("0", Barrier.COMPUTATIONAL, 10, 900, Terminal.of_digits(""))))

    def test_is_negative_and_integer(self):
        self.assertTrue(is_negative(init_exact("-3")))
        self.assertFalse(is_negative(init_exact("3")))
        self.assertTrue(is_integer(init_exact("4.000")))
        self.assertFalse(is_integer(init_exact("4.5")))

    def test_would_be_undefined(self):
        zero, one = init_exact("0"), init_exact("1")
        self.assertTrue(would_be_undefined(one, zero, "/"))
        self.assertTrue(would_be_undefined(zero, zero, "^"))
        self.assertTrue(would_be_undefined(zero, positive_infinity(), "*"))
        self.assertTrue(would_be_undefined(init_exact("-1"), init_exact("0.5"), "^"))
        self.assertFalse(would_be_undefined(positive_infinity(), positive_infinity(), "-"))
        self.assertFalse(would_be_undefined(one, one, "+"))
        self.assertTrue(would_be_undefined(None, one, "+"))


class TestUndefinedCreation(unittest.TestCase):
    def setUp(self):
        reset_pool()
        clear_undefined_history()

    def test_shape(self):
        value = undefined_with_reason(UndefinedReason.SQRT_NEGATIVE, "sqrt(-1)")
        self.assertEqual(value.known, "")
        self.assertIs(value.barrier, Barrier.UNDEFINED)
        self.assertEqual(value.gap_magnitude, 0)
        self.assertEqual(value.confidence, 0)
        self.assertTrue(value.terminal.is_empty_set)

    def test_history_records_reason(self):
        undefined_with_reason(UndefinedReason.DIVISION_BY_ZERO, "1/0", "/")
        record = recent_undefined()[-1]
        self.assertIs(record.reason, UndefinedReason.DIVISION_BY_ZERO)
        self.assertEqual(record.details, "1/0")
        self.assertEqual(record.operation, "/")


class TestSqrtAndLog(unittest.TestCase):
    def setUp(self):
        reset_pool()

    def test_sqrt_perfect_square(self):
        result = sqrt(init_exact("4"))
        self.assertEqual(result.known, "2")
        self.assertIs(result.barrier, Barrier.COMPUTATIONAL)
        self.assertEqual(result.gap_magnitude, 10**6)
        self.assertEqual(result.confidence, 900)

    def test_sqrt_two(self):
        self.assertEqual(sqrt(init_exact("2")).known, "1.414213")

    def test_sqrt_special_values(self):
        self.assertTrue(sqrt(init_exact("-4")).is_undefined)
        self.assertEqual(sqrt(init_exact("0")).known, "0")
        self.assertTrue(sqrt(init_exact("0")).is_exact)
        root = sqrt(positive_infinity())
        self.assertTrue(root.is_infinity)
        self.assertEqual(root.gap_magnitude, INFINITE_GAP)
        self.assertTrue(sqrt(undefined_with_reason(UndefinedReason.PROPAGATED)).is_undefined)
        self.assertIsNone(sqrt(None))

    def test_log_is_always_undefined(self):
        self.assertTrue(log(init_exact("-1")).is_undefined)
        self.assertIs(recent_undefined()[-1].reason, UndefinedReason.LOG_NON_POSITIVE)
        self.assertTrue(log(init_exact("10")).is_undefined)
        self.assertIs(recent_undefined()[-1].reason, UndefinedReason.NOT_IMPLEMENTED)


class TestRecover(unittest.TestCase):
    def setUp(self):
        reset_pool()
        self.undefined = undefined_with_reason(UndefinedReason.DIVISION_BY_ZERO)

    def test_strategies(self):
        self.assertEqual(recover(self.undefined, RecoveryStrategy.USE_ZERO).known, "0")
        self.assertEqual(recover(self.undefined, RecoveryStrategy.USE_ONE).known, "1")
        infinite = recover(self.undefined, RecoveryStrategy.USE_INFINITY)
        self.assertIs(infinite.barrier, Barrier.INFINITY)
        self.assertEqual(infinite.confidence, 500)
        nan = recover(self.undefined, RecoveryStrategy.USE_NAN)
        self.assertEqual(nan.known, "NaN")
        self.assertTrue(nan.is_undefined)

    def test_propagate_shares_the_value(self):
        same = recover(self.undefined, RecoveryStrategy.PROPAGATE)
        self.assertIs(same, self.undefined)
        self.assertEqual(self.undefined.ref_count, 2)

    def test_defined_values_pass_through(self):
        five = init_exact("5")
        self.assertIs(recover(five, RecoveryStrategy.USE_ZERO), five)


if __name__ == "__main__":
    unittest.main()
