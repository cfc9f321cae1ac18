"""Computational trace estimates for the GGGX oracle.

A value is matched against a table of algorithm signatures; the matching
signature drives a synthetic pipeline simulation that yields instruction,
branch, memory, cycle, energy and quantum-operation estimates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, IntFlag

from .config import E, PI
from .types import Barrier


class Instruction(IntFlag):
    ADD = 1
    SUB = 2
    MUL = 4
    DIV = 8
    MOD = 16
    SQRT = 32
    POW = 64
    LOG = 128
    TRIG = 256
    LOAD = 512
    STORE = 1024
    BRANCH = 2048
    QUANTUM = 4096


@dataclass(frozen=True)
class AlgorithmSignature:
    name: str
    instruction_mix: Instruction
    base_cost: int
    scaling_factor: int
    requires_quantum: bool
    energy_factor: float


_Op = Instruction

ALGORITHM_SIGNATURES = {
    "rational": AlgorithmSignature("rational", _Op.DIV | _Op.MOD, 10, 1, False, 1.0),
    "sqrt_newton": AlgorithmSignature(
        "sqrt_newton", _Op.ADD | _Op.DIV | _Op.MUL, 50, 2, False, 1.5
    ),
    "pi_machin": AlgorithmSignature(
        "pi_machin", _Op.ADD | _Op.SUB | _Op.MUL | _Op.DIV, 1000, 3, True, 2.5
    ),
    "e_taylor": AlgorithmSignature("e_taylor", _Op.ADD | _Op.MUL | _Op.DIV, 500, 2, False, 2.0),
    "log_agm": AlgorithmSignature(
        "log_agm", _Op.ADD | _Op.MUL | _Op.DIV | _Op.SQRT, 200, 2, False, 2.2
    ),
    "trig_cordic": AlgorithmSignature(
        "trig_cordic", _Op.ADD | _Op.SUB | _Op.BRANCH, 300, 2, False, 1.8
    ),
    "prime_sieve": AlgorithmSignature(
        "prime_sieve", _Op.MOD | _Op.BRANCH | _Op.STORE, 100, 4, False, 1.2
    ),
    "chaos_logistic": AlgorithmSignature(
        "chaos_logistic", _Op.MUL | _Op.SUB | _Op.BRANCH, 50, 1, True, 3.0
    ),
    "fractal_mandel": AlgorithmSignature(
        "fractal_mandel", _Op.ADD | _Op.MUL | _Op.BRANCH, 1000, 5, True, 4.0
    ),
}


class MemoryPattern(Enum):
    SEQUENTIAL = "sequential"
    RANDOM = "random"
    STRIDED = "strided"
    RECURSIVE = "recursive"
    CACHED = "cached"


@dataclass
class ComputationalTrace:
    algorithm: str = ""
    instruction_count: int = 0
    branch_count: int = 0
    memory_accesses: int = 0
    cycles_estimated: int = 0
    energy_estimate: float = 0.0
    quantum_ops: int = 0


def _near_integer(x: float, tolerance: float) -> bool:
    if not math.isfinite(x):
        return False
    return abs(x - round(x)) < tolerance


def detect_algorithm(value: float, precision: int) -> AlgorithmSignature:
    """Guess which algorithm would have produced value."""
    if abs(value - PI) < 0.001:
        return ALGORITHM_SIGNATURES["pi_machin"]
    if abs(value - E) < 0.001:
        return ALGORITHM_SIGNATURES["e_taylor"]
    if any(_near_integer(value * d, 0.0001) for d in range(2, 21)):
        return ALGORITHM_SIGNATURES["rational"]
    if _near_integer(value * value, 0.01):
        return ALGORITHM_SIGNATURES["sqrt_newton"]
    if 0 < value < 1 and precision > 10:
        return ALGORITHM_SIGNATURES["log_agm"]
    if abs(value) <= 1.0:
        return ALGORITHM_SIGNATURES["trig_cordic"]
    return ALGORITHM_SIGNATURES["rational"]


def estimate_quantum_ops(value: float, precision: int) -> int:
    quantum_ops = 0
    if abs(value - PI) < 0.001:
        quantum_ops += precision // 10
    if 0 < value < 1:
        quantum_ops += 5
    if precision > 50:
        quantum_ops += (precision - 50) // 20
    return quantum_ops


def analyze_memory_pattern(value: float, precision: int) -> MemoryPattern:
    fraction = value - int(value)
    if any(_near_integer(fraction * d, 0.0001) for d in range(2, 101)):
        return MemoryPattern.CACHED
    if precision > 100:
        return MemoryPattern.STRIDED
    return MemoryPattern.SEQUENTIAL


def simulate_pipeline(
    algorithm: AlgorithmSignature, value: float, precision: int
) -> ComputationalTrace:
    trace = ComputationalTrace(algorithm=algorithm.name)
    trace.instruction_count = algorithm.base_cost * (
        1 + precision * algorithm.scaling_factor // 100
    )
    if algorithm.instruction_mix & Instruction.BRANCH:
        trace.branch_count = trace.instruction_count // 10
    else:
        trace.branch_count = trace.instruction_count // 100
    if algorithm.instruction_mix & (Instruction.LOAD | Instruction.STORE):
        trace.memory_accesses = trace.instruction_count // 5
    else:
        trace.memory_accesses = trace.instruction_count // 20
    trace.cycles_estimated = (
        trace.instruction_count
        + trace.branch_count * 10
        + trace.memory_accesses // 10
    )
    trace.energy_estimate = trace.cycles_estimated * algorithm.energy_factor * 0.000001
    if algorithm.requires_quantum:
        trace.quantum_ops = estimate_quantum_ops(value, precision)
    return trace


def complexity_class(precision: int, algorithm: AlgorithmSignature) -> int:
    """Cost of computing precision digits with algorithm, as a plain number."""
    if algorithm.scaling_factor == 0:
        return 1
    if algorithm.scaling_factor == 1:
        return precision
    if algorithm.instruction_mix & Instruction.DIV and algorithm.scaling_factor == 2:
        log_n = 0
        n = precision
        while n > 1:
            log_n += 1
            n //= 2
        return precision * log_n
    if algorithm.scaling_factor >= 3:
        return precision * precision // 100
    return precision


def generate_computational_trace(value: float, precision: int) -> ComputationalTrace:
    """Detect the algorithm for value and simulate computing it to precision digits."""
    algorithm = detect_algorithm(value, precision)
    trace = simulate_pipeline(algorithm, value, precision)

    pattern = analyze_memory_pattern(value, precision)
    if pattern is MemoryPattern.RANDOM:
        trace.memory_accesses *= 2
        trace.cycles_estimated += trace.memory_accesses * 50
    elif pattern is MemoryPattern.RECURSIVE:
        trace.memory_accesses += precision

    if precision > 100:
        trace.instruction_count *= 2
        trace.cycles_estimated *= 3
    if precision > 1000:
        trace.energy_estimate *= 10
        trace.quantum_ops += 10
    return trace


def infer_barrier_from_trace(trace: ComputationalTrace, precision: int) -> Barrier:
    if trace.quantum_ops > precision // 10:
        return Barrier.QUANTUM
    if trace.energy_estimate > 0.01:
        return Barrier.ENERGY
    if trace.memory_accesses > trace.instruction_count:
        return Barrier.STORAGE
    if trace.cycles_estimated > trace.instruction_count * 10:
        return Barrier.TEMPORAL
    return Barrier.COMPUTATIONAL
