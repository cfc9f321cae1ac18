"""Fixed-capacity value store for Solid Numbers.

Slots are tracked by a used/free bitmap and a per-slot reference count.
Each allocation bumps the slot generation so a value whose slot has been
freed and reused reports a reference count of zero instead of aliasing
the new occupant. Exhaustion is reported by returning None.
"""

from __future__ import annotations

from .config import (
    FLOAT_CONFIDENCE,
    FLOAT_GAP,
    INFINITE_GAP,
    KNOWN_DIGIT_CAPACITY,
    NUMERIC_PREFIX_PATTERN,
    POOL_CAPACITY,
    TERMINAL_DIGIT_CAPACITY,
)
from .logging_config import get_logger
from .types import (
    NO_TERMINAL,
    Barrier,
    SolidLiteral,
    SolidNumber,
    Terminal,
    TerminalKind,
)

logger = get_logger("pool")


class SolidPool:
    """Slot allocator with reference counting."""

    def __init__(self, capacity: int = POOL_CAPACITY):
        if capacity <= 0:
            raise ValueError("pool capacity must be positive")
        self.capacity = capacity
        self._bitmap = 0
        self._refs = [0] * capacity
        self._generations = [0] * capacity
        self._hint = 0
        self.allocations = 0
        self.frees = 0
        self.failed_allocations = 0
        self.peak = 0

    @property
    def in_use(self) -> int:
        return bin(self._bitmap).count("1")

    def is_used(self, slot: int) -> bool:
        return bool(self._bitmap >> slot & 1)

    def alloc(self) -> int | None:
        """Claim a free slot with a reference count of one.

        Returns:
            The slot index, or None when every slot is in use
        """
        for step in range(self.capacity):
            slot = (self._hint + step) % self.capacity
            if not self.is_used(slot):
                self._bitmap |= 1 << slot
                self._refs[slot] = 1
                self._generations[slot] += 1
                self._hint = (slot + 1) % self.capacity
                self.allocations += 1
                self.peak = max(self.peak, self.in_use)
                return slot
        self.failed_allocations += 1
        logger.warning("Solid pool exhausted (%d slots in use)", self.capacity)
        return None

    def free(self, slot: int) -> None:
        if not 0 <= slot < self.capacity or not self.is_used(slot):
            return
        self._bitmap &= ~(1 << slot)
        self._refs[slot] = 0
        self.frees += 1

    def owns(self, value: SolidNumber) -> bool:
        return (
            value.pool is self
            and 0 <= value.slot < self.capacity
            and self.is_used(value.slot)
            and self._generations[value.slot] == value.generation
        )

    def ref_count(self, value: SolidNumber) -> int:
        if not self.owns(value):
            return 0
        return self._refs[value.slot]

    def inc_ref(self, value: SolidNumber) -> SolidNumber:
        if self.owns(value):
            self._refs[value.slot] += 1
        return value

    def dec_ref(self, value: SolidNumber) -> None:
        if not self.owns(value):
            return
        self._refs[value.slot] -= 1
        if self._refs[value.slot] <= 0:
            self.free(value.slot)

    def bind(
        self,
        known: str,
        barrier: Barrier,
        gap_magnitude: int,
        confidence: int,
        terminal: Terminal,
    ) -> SolidNumber | None:
        """Allocate a slot and attach an immutable value to it."""
        slot = self.alloc()
        if slot is None:
            return None
        return SolidNumber(
            known=known,
            barrier=barrier,
            gap_magnitude=gap_magnitude,
            confidence=confidence,
            terminal=terminal,
            slot=slot,
            generation=self._generations[slot],
            pool=self,
        )

    def stats(self) -> dict[str, int]:
        return {
            "capacity": self.capacity,
            "in_use": self.in_use,
            "allocations": self.allocations,
            "frees": self.frees,
            "failed_allocations": self.failed_allocations,
            "peak": self.peak,
        }


_default_pool: SolidPool | None = None


def get_pool() -> SolidPool:
    """Return the process-wide pool, creating it on first use."""
    global _default_pool
    if _default_pool is None:
        _default_pool = SolidPool()
    return _default_pool


def reset_pool(capacity: int = POOL_CAPACITY) -> SolidPool:
    """Replace the process-wide pool with an empty one."""
    global _default_pool
    _default_pool = SolidPool(capacity)
    return _default_pool


def pool_of(value: SolidNumber | None) -> SolidPool:
    if value is not None and value.pool is not None:
        return value.pool
    return get_pool()


# Reference counting on values


def inc_ref(value: SolidNumber | None) -> SolidNumber | None:
    if value is None:
        return None
    return pool_of(value).inc_ref(value)


def dec_ref(value: SolidNumber | None) -> None:
    if value is not None and value.pool is not None:
        value.pool.dec_ref(value)


def free(value: SolidNumber | None) -> None:
    """Release a value's slot regardless of its reference count."""
    if value is not None and value.pool is not None and value.pool.owns(value):
        value.pool.free(value.slot)


# Constructors


def _truncate(text: str, capacity: int, what: str) -> str:
    if len(text) > capacity:
        logger.debug("Truncating %s digits %r to %d characters", what, text, capacity)
        return text[:capacity]
    return text


def init_with_gap(
    known: str,
    barrier: Barrier,
    gap_magnitude: int,
    confidence: int,
    terminal: Terminal,
    pool: SolidPool | None = None,
) -> SolidNumber | None:
    """Build a value with a barrier-attributed gap.

    Args:
        known: Known decimal prefix (truncated to the inline capacity)
        barrier: Barrier responsible for the gap
        gap_magnitude: Order-of-magnitude size of the gap, or INFINITE_GAP
        confidence: Per-mille confidence, clamped to 0-1000
        terminal: Terminal digits, EmptySet or Superposition

    Returns:
        New value with a reference count of one, or None if the pool is full
    """
    known = _truncate(known, KNOWN_DIGIT_CAPACITY, "known")
    if terminal.is_digits:
        terminal = Terminal.of_digits(
            _truncate(terminal.digits, TERMINAL_DIGIT_CAPACITY, "terminal")
        )
    if barrier is Barrier.EXACT:
        gap_magnitude = 0
        terminal = NO_TERMINAL
    gap_magnitude = min(max(gap_magnitude, 0), INFINITE_GAP)
    confidence = min(max(confidence, 0), 1000)
    target = pool if pool is not None else get_pool()
    return target.bind(known, barrier, gap_magnitude, confidence, terminal)


def init_exact(digits: str, pool: SolidPool | None = None) -> SolidNumber | None:
    """Build an exact value (gap 0, full confidence, no terminal digits)."""
    return init_with_gap(digits, Barrier.EXACT, 0, 1000, NO_TERMINAL, pool)


def init_from_ast(
    node: SolidLiteral | None, string_pool: str, pool: SolidPool | None = None
) -> SolidNumber | None:
    """Build a value from a front-end literal whose digits live in string_pool."""
    if not isinstance(node, SolidLiteral):
        return None
    known = string_pool[node.known_offset : node.known_offset + node.known_length]
    if node.terminal_kind is TerminalKind.DIGITS:
        start = node.terminal_offset
        terminal = Terminal.of_digits(string_pool[start : start + node.terminal_length])
    else:
        terminal = Terminal(node.terminal_kind)
    return init_with_gap(
        known,
        Barrier.from_letter(node.barrier_letter),
        node.gap_magnitude,
        node.confidence,
        terminal,
        pool,
    )


def from_int(value: int, pool: SolidPool | None = None) -> SolidNumber | None:
    return init_exact(str(value), pool)


def from_float(value: float, pool: SolidPool | None = None) -> SolidNumber | None:
    """Promote a native float: six fractional digits, Computational barrier."""
    return init_with_gap(
        f"{value:.6f}",
        Barrier.COMPUTATIONAL,
        FLOAT_GAP,
        FLOAT_CONFIDENCE,
        NO_TERMINAL,
        pool,
    )


# Accessors


def known_digits(value: SolidNumber | None) -> str:
    return "" if value is None else value.known


def terminal_digits(value: SolidNumber | None) -> str:
    if value is None or not value.terminal.is_digits:
        return ""
    return value.terminal.digits


def is_exact(value: SolidNumber | None) -> bool:
    return value is not None and value.is_exact


def is_infinity(value: SolidNumber | None) -> bool:
    return value is not None and value.is_infinity


def confidence(value: SolidNumber | None) -> float:
    """Confidence as a fraction in [0, 1]."""
    if value is None:
        return 0.0
    return value.confidence / 1000.0


def to_double(value: SolidNumber | None) -> float:
    """Best-effort float reading of the known digits (non-numeric text reads as 0.0)."""
    if value is None:
        return 0.0
    match = NUMERIC_PREFIX_PATTERN.match(value.known)
    text = match.group(0) if match else ""
    if not any(ch.isdigit() for ch in text):
        return 0.0
    if text.endswith("."):
        text = text[:-1]
    if text.startswith("-."):
        text = "-0" + text[1:]
    elif text.startswith("."):
        text = "0" + text
    return float(text)


def gap_exponent(gap_magnitude: int) -> int:
    exponent = 0
    while gap_magnitude >= 10:
        gap_magnitude //= 10
        exponent += 1
    return exponent


def to_debug_string(value: SolidNumber | None) -> str:
    """Render ``<known>...(<letter>:<gap>|<conf>/1000)...<terminal>``.

    Exact values render as their known digits alone.
    """
    if value is None:
        return "NULL"
    if value.is_exact:
        return value.known
    if value.gap_magnitude == INFINITE_GAP:
        gap = "∞"
    else:
        gap = f"10^{gap_exponent(value.gap_magnitude)}"
    return (
        f"{value.known}...({value.barrier.letter}:{gap}|{value.confidence}/1000)"
        f"...{value.terminal.render()}"
    )
