from solver.engine import solve_linear_system
from solver.gauss_jordan import (
    FREE,
    GaussJordanResult,
    InvalidInputError,
    StepSnapshot,
    solve,
)
from solver.parsing import parse_system

__all__ = [
    "solve_linear_system",
    "solve",
    "parse_system",
    "FREE",
    "GaussJordanResult",
    "InvalidInputError",
    "StepSnapshot",
]
