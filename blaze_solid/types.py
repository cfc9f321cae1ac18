"""Type definitions: Solid Numbers, their tags, and result dataclasses for the facade."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import INFINITE_GAP


class Barrier(Enum):
    """Reason the digits beyond the known prefix are not exactly known.

    The value is the single-letter code used by literals and debug strings.
    """

    EXACT = "x"
    QUANTUM = "q"
    ENERGY = "e"
    STORAGE = "s"
    TEMPORAL = "t"
    COMPUTATIONAL = "c"
    INFINITY = "i"
    UNDEFINED = "u"

    @property
    def letter(self) -> str:
        return self.value

    @classmethod
    def from_letter(cls, letter: str) -> Barrier:
        """Map a literal barrier character to a Barrier (unknown letters are Computational)."""
        for barrier in cls:
            if barrier.value == letter:
                return barrier
        return cls.COMPUTATIONAL


class TerminalKind(Enum):
    DIGITS = "digits"
    EMPTY_SET = "empty_set"
    SUPERPOSITION = "superposition"


@dataclass(frozen=True)
class Terminal:
    """Tail behaviour beyond the gap: concrete digits, EmptySet or Superposition."""

    kind: TerminalKind
    digits: str = ""

    @classmethod
    def of_digits(cls, digits: str) -> Terminal:
        return cls(TerminalKind.DIGITS, digits)

    @classmethod
    def empty_set(cls) -> Terminal:
        return cls(TerminalKind.EMPTY_SET)

    @classmethod
    def superposition(cls) -> Terminal:
        return cls(TerminalKind.SUPERPOSITION)

    @property
    def is_digits(self) -> bool:
        return self.kind is TerminalKind.DIGITS

    @property
    def is_empty_set(self) -> bool:
        return self.kind is TerminalKind.EMPTY_SET

    @property
    def is_superposition(self) -> bool:
        return self.kind is TerminalKind.SUPERPOSITION

    def render(self) -> str:
        """Render for debug output: ∅, {*} or the literal digits."""
        if self.kind is TerminalKind.EMPTY_SET:
            return "∅"
        if self.kind is TerminalKind.SUPERPOSITION:
            return "{*}"
        return self.digits


NO_TERMINAL = Terminal.of_digits("")


@dataclass(frozen=True)
class SolidNumber:
    """A number with a known prefix, a barrier-attributed gap, terminal digits and a confidence.

    Instances are created only through the pool constructors and are never
    mutated. The owning pool tracks the reference count of the slot.
    """

    known: str
    barrier: Barrier
    gap_magnitude: int
    confidence: int  # per-mille, 0-1000
    terminal: Terminal
    slot: int = field(default=-1, compare=False, repr=False)
    generation: int = field(default=0, compare=False, repr=False)
    pool: Any = field(default=None, compare=False, repr=False)

    @property
    def ref_count(self) -> int:
        if self.pool is None:
            return 0
        return self.pool.ref_count(self)

    @property
    def is_exact(self) -> bool:
        return self.barrier is Barrier.EXACT

    @property
    def is_undefined(self) -> bool:
        return self.barrier is Barrier.UNDEFINED

    @property
    def is_infinity(self) -> bool:
        return self.barrier is Barrier.INFINITY or self.gap_magnitude == INFINITE_GAP

    def __str__(self) -> str:
        from .pool import to_debug_string

        return to_debug_string(self)


@dataclass(frozen=True)
class SolidLiteral:
    """A solid-number literal as produced by the front end.

    Digit fields are offsets into a shared string pool rather than strings.
    """

    known_offset: int
    known_length: int
    barrier_letter: str
    gap_magnitude: int
    confidence: int
    terminal_kind: TerminalKind = TerminalKind.DIGITS
    terminal_offset: int = 0
    terminal_length: int = 0


class ErrorCode(str, Enum):
    """Failure taxonomy of the engine."""

    ALLOCATION_EXHAUSTED = "ALLOCATION_EXHAUSTED"
    UNDEFINED_RESULT = "UNDEFINED_RESULT"
    NOT_EXACT = "NOT_EXACT"
    PHASE_ORDER_VIOLATION = "PHASE_ORDER_VIOLATION"
    INVALID_OPERAND = "INVALID_OPERAND"


class UndefinedReason(Enum):
    DIVISION_BY_ZERO = "Division by zero"
    ZERO_POWER_ZERO = "Zero to the power of zero"
    ZERO_TIMES_INFINITY = "Zero times infinity"
    SQRT_NEGATIVE = "Square root of negative"
    LOG_NON_POSITIVE = "Logarithm of non-positive"
    INDETERMINATE_FORM = "Indeterminate form"
    CONFIDENCE_ZERO = "Zero confidence operand"
    NOT_IMPLEMENTED = "Not implemented"
    PROPAGATED = "Undefined operand"


class RecoveryStrategy(Enum):
    USE_ZERO = "zero"
    USE_ONE = "one"
    USE_INFINITY = "infinity"
    USE_NAN = "nan"
    PROPAGATE = "propagate"


@dataclass
class OperationResult:
    """Result of an arithmetic operation requested through the facade."""

    ok: bool
    value: str | None = None
    barrier: str | None = None
    confidence: float | None = None
    approx: float | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.value is not None:
            result_dict["value"] = self.value
        if self.barrier is not None:
            result_dict["barrier"] = self.barrier
        if self.confidence is not None:
            result_dict["confidence"] = self.confidence
        if self.approx is not None:
            result_dict["approx"] = self.approx
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"OperationResult(ok=False, error={self.error!r}, error_code={self.error_code!r})"
        parts = [f"ok={self.ok}"]
        if self.value is not None:
            parts.append(f"value={self.value!r}")
        if self.barrier is not None:
            parts.append(f"barrier={self.barrier!r}")
        if self.confidence is not None:
            parts.append(f"confidence={self.confidence!r}")
        return f"OperationResult({', '.join(parts)})"


@dataclass
class AnalysisReport:
    """Result of a GGGX analysis requested through the facade."""

    ok: bool
    value: float | None = None
    solid: str | None = None
    barrier: str | None = None
    achievable_precision: int | None = None
    confidence: float | None = None
    pattern_period: int | None = None
    algorithm: str | None = None
    explanation: str | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        for key in (
            "value",
            "solid",
            "barrier",
            "achievable_precision",
            "confidence",
            "pattern_period",
            "algorithm",
            "explanation",
            "error",
            "error_code",
        ):
            item = getattr(self, key)
            if item is not None:
                result_dict[key] = item
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the report."""
        if not self.ok:
            return f"AnalysisReport(ok=False, error={self.error!r})"
        return (
            f"AnalysisReport(ok=True, solid={self.solid!r}, "
            f"barrier={self.barrier!r}, confidence={self.confidence!r})"
        )


class ValidationError(Exception):
    """Raised when an operand or request fails validation."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
