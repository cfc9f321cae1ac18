"""Centralized configuration for the Solid Number engine.

This module defines:
- Value store limits (pool capacity, inline digit buffers)
- Constants used by the division and infinity algorithms
- GGGX oracle defaults and tolerances
- The named-constants table and the prime table used by the classifiers
- Regex patterns for validating digit strings and operands

Configuration can be overridden via environment variables (prefixed with
BLAZE_SOLID_).
"""

import os
import re

import mpmath
import sympy as sp

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("blaze-solid")
except Exception:
    # Fallback if package not installed
    VERSION = "0.3.0"

# Value store limits
POOL_CAPACITY = int(os.getenv("BLAZE_SOLID_POOL_CAPACITY", "256"))
KNOWN_DIGIT_CAPACITY = int(
    os.getenv("BLAZE_SOLID_KNOWN_DIGIT_CAPACITY", "32")
)  # characters
TERMINAL_DIGIT_CAPACITY = int(
    os.getenv("BLAZE_SOLID_TERMINAL_DIGIT_CAPACITY", "16")
)  # characters

# Sentinel gap magnitude for unbounded (infinite) gaps: all ones in 64 bits
INFINITE_GAP = (1 << 64) - 1

# Arithmetic engine
DIVISION_GAP = int(os.getenv("BLAZE_SOLID_DIVISION_GAP", "1000000"))
DIVISION_CONFIDENCE = int(os.getenv("BLAZE_SOLID_DIVISION_CONFIDENCE", "900"))
DIVISION_FRACTION_DIGITS = 6
POSSIBLY_ZERO_CONFIDENCE = 50  # gapped divisor that reads as zero
FLOAT_GAP = 10**15  # promotion from a native float
FLOAT_CONFIDENCE = 950
EXACT_PROMOTION_GAP_LIMIT = 1000  # gaps below this can be promoted to Exact
MAX_EXACT_EXPONENT = int(os.getenv("BLAZE_SOLID_MAX_EXACT_EXPONENT", "1024"))

# Undefined / infinity algebra
SQRT_ITERATIONS = int(os.getenv("BLAZE_SOLID_SQRT_ITERATIONS", "10"))
INFINITY_ANCHOR = int(os.getenv("BLAZE_SOLID_INFINITY_ANCHOR", "12345678910"))
INFINITY_TERMINAL_MODULUS = int(
    os.getenv("BLAZE_SOLID_INFINITY_TERMINAL_MODULUS", "100000")
)
INFINITY_POWER_TERMINAL = "2468101214161820"
COUNTABLE_INFINITY_TERMINAL = "01234567890"
RECOVERED_INFINITY_CONFIDENCE = 500
CONTINUUM_CONFIDENCE = 900

# Pattern / terminal analysis
CHI_SQUARED_CRITICAL = float(
    os.getenv("BLAZE_SOLID_CHI_SQUARED_CRITICAL", "16.919")
)  # 9 degrees of freedom, p = 0.05
LOGISTIC_MAP_R = 3.7
LOGISTIC_WARMUP_STEPS = 100
CONTINUED_FRACTION_MAX_TERMS = 50

# GGGX oracle
GGGX_SAMPLE_DIGITS = int(os.getenv("BLAZE_SOLID_GGGX_SAMPLE_DIGITS", "15"))
GGGX_BASE_PRECISION = int(os.getenv("BLAZE_SOLID_GGGX_BASE_PRECISION", "15"))
GGGX_DEFAULT_PRECISION = int(
    os.getenv("BLAZE_SOLID_GGGX_DEFAULT_PRECISION", "15")
)
CONSTANT_TOLERANCE = float(os.getenv("BLAZE_SOLID_CONSTANT_TOLERANCE", "1e-10"))
FRACTION_EPSILON = 1e-10  # digit sampling stops below this remainder

# Named constants recognised by GO (evaluated once at double precision)
NAMED_CONSTANTS = {
    "pi": float(mpmath.pi),
    "e": float(mpmath.e),
    "sqrt2": float(mpmath.sqrt(2)),
    "phi": float(mpmath.phi),
    "euler_gamma": float(mpmath.euler),
}
PI = NAMED_CONSTANTS["pi"]
E = NAMED_CONSTANTS["e"]

# Primes below 48 (the first fifteen), used by the prime-digit classifier
PRIME_TABLE = tuple(int(p) for p in sp.primerange(2, 48))

# Regex patterns
DECIMAL_PATTERN = re.compile(r"^-?[0-9]+(\.[0-9]+)?$")
NUMERIC_PREFIX_PATTERN = re.compile(r"^-?[0-9]*\.?[0-9]*")
INFINITY_TOKENS = frozenset({"inf", "infinity", "∞", "+inf", "+∞"})
NEGATIVE_INFINITY_TOKENS = frozenset({"-inf", "-infinity", "-∞"})
MAX_OPERAND_LENGTH = int(os.getenv("BLAZE_SOLID_MAX_OPERAND_LENGTH", "256"))
