"""Unit tests for parser module."""

import unittest

from blaze_solid import arithmetic
from blaze_solid.config import INFINITE_GAP, MAX_OPERAND_LENGTH
from blaze_solid.parser import (
    parse_operand,
    parse_operator,
    split_calculation,
    validate_operand_text,
)
from blaze_solid.pool import reset_pool
from blaze_solid.types import Barrier, ValidationError


class TestParseOperand(unittest.TestCase):
    """Test operand text conversion."""

    def setUp(self):
        reset_pool()

    def test_decimals_are_exact(self):
        value = parse_operand("123.45")
        self.assertTrue(value.is_exact)
        self.assertEqual(value.known, "123.45")
        self.assertEqual(parse_operand("-7").known, "-7")
        self.assertEqual(parse_operand("  42  ").known, "42")

    def test_decimal_normalization(self):
        self.assertEqual(parse_operand("+5").known, "5")
        self.assertEqual(parse_operand("007.50").known, "7.50")
        self.assertEqual(parse_operand("-000").known, "-0")

    def test_infinities(self):
        for token in ("inf", "INF", "∞", "+inf", "infinity"):
            value = parse_operand(token)
            self.assertIs(value.barrier, Barrier.INFINITY)
            self.assertEqual(value.known, "")
            self.assertEqual(value.gap_magnitude, INFINITE_GAP)
        self.assertEqual(parse_operand("-inf").known, "-")
        self.assertEqual(parse_operand("-∞").known, "-")

    def test_alephs_and_undefined(self):
        self.assertEqual(parse_operand("aleph0").known, "ℵ₀")
        self.assertEqual(parse_operand("ℵ₁").known, "ℵ₁")
        self.assertTrue(parse_operand("undefined").is_undefined)

    def test_error_codes(self):
        cases = {
            "": "EMPTY_INPUT",
            "   ": "EMPTY_INPUT",
            "1" * (MAX_OPERAND_LENGTH + 1): "TOO_LONG",
            "abc": "INVALID_OPERAND",
            "1.": "INVALID_OPERAND",
            "1e5": "INVALID_OPERAND",
            "--1": "INVALID_OPERAND",
        }
        for text, code in cases.items():
            with self.assertRaises(ValidationError) as ctx:
                parse_operand(text)
            self.assertEqual(ctx.exception.code, code, text)

    def test_validate_operand_text(self):
        self.assertEqual(validate_operand_text(" 1 "), "1")
        with self.assertRaises(ValidationError):
            validate_operand_text(None)


class TestOperators(unittest.TestCase):
    def test_lookup(self):
        self.assertIs(parse_operator("+"), arithmetic.add)
        self.assertIs(parse_operator("×"), arithmetic.multiply)
        self.assertIs(parse_operator("÷"), arithmetic.divide)
        self.assertIs(parse_operator("**"), arithmetic.power)

    def test_unknown(self):
        with self.assertRaises(ValidationError) as ctx:
            parse_operator("%")
        self.assertEqual(ctx.exception.code, "INVALID_OPERATOR")


class TestSplitCalculation(unittest.TestCase):
    def test_split(self):
        self.assertEqual(split_calculation("1 + 2"), ("1", "+", "2"))
        self.assertEqual(split_calculation(" -1  -  -2 "), ("-1", "-", "-2"))
        self.assertEqual(split_calculation("inf / aleph0"), ("inf", "/", "aleph0"))

    def test_rejects_malformed(self):
        for text in ("1+2", "1 + 2 + 3", "1 +"):
            with self.assertRaises(ValidationError) as ctx:
                split_calculation(text)
            self.assertEqual(ctx.exception.code, "INVALID_EXPRESSION")


if __name__ == "__main__":
    unittest.main()
