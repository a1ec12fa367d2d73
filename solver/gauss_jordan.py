"""Gauss–Jordan elimination with a recorded trace of every row operation.

``solve`` reduces an augmented matrix to reduced row-echelon form and
returns the ordered list of snapshots taken after each elementary row
operation, so a front end can replay the reduction one step at a time.
"""

import logging
import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

# Absolute threshold below which an entry counts as zero.
ZERO_TOLERANCE = 1e-10
# Decimals shown for pivots and factors in step descriptions.
DECIMAL_PLACES = 4

NO_SOLUTION_MESSAGE = "No solutions exist for this system."
INFINITE_SOLUTIONS_MESSAGE = (
    "The system has infinitely many solutions due to free variables."
)

_NOT_2D_MESSAGE = "Input must be a non-empty 2D array."
_RAGGED_MESSAGE = "All rows must have the same number of columns."
_NOT_NUMERIC_MESSAGE = "Matrix entries must be real numbers."


class InvalidInputError(ValueError):
    """Raised when the input is not a non-empty rectangular numeric matrix."""


class _FreeVariable:
    """Marker for a variable left unconstrained by the system."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "FREE"

    def __str__(self) -> str:
        return "free"

    def __reduce__(self):
        return (_FreeVariable, ())


FREE = _FreeVariable()

SolutionEntry = Union[float, _FreeVariable]
MatrixRows = tuple[tuple[float, ...], ...]


@dataclass(frozen=True)
class StepSnapshot:
    """The matrix right after one row operation, plus what that operation was."""

    matrix: MatrixRows
    action: str
    operation: str  # "swap", "scale" or "eliminate"


@dataclass(frozen=True)
class GaussJordanResult:
    steps: tuple[StepSnapshot, ...]
    solution: Optional[tuple[SolutionEntry, ...]]
    error_message: Optional[str]
    reduced: MatrixRows

    @property
    def kind(self) -> str:
        """``"unique"``, ``"infinite"`` or ``"none"``."""
        if self.solution is None:
            return "none"
        if any(entry is FREE for entry in self.solution):
            return "infinite"
        return "unique"

    @property
    def free_variables(self) -> list[int]:
        """Zero-based indices of the free columns."""
        if self.solution is None:
            return []
        return [j for j, entry in enumerate(self.solution) if entry is FREE]


def is_zero(value: float) -> bool:
    return abs(value) < ZERO_TOLERANCE


def _freeze(matrix: np.ndarray) -> MatrixRows:
    return tuple(tuple(float(v) for v in row) for row in matrix)


def _validate(matrix_input) -> np.ndarray:
    """Check the shape and contents of *matrix_input* and return a float copy."""
    if (
        matrix_input is None
        or isinstance(matrix_input, (str, bytes))
        or not isinstance(matrix_input, (Sequence, np.ndarray))
        or len(matrix_input) == 0
    ):
        raise InvalidInputError(_NOT_2D_MESSAGE)

    rows = list(matrix_input)
    first = rows[0]
    if isinstance(first, (str, bytes)) or not isinstance(first, (Sequence, np.ndarray)):
        raise InvalidInputError(_NOT_2D_MESSAGE)
    width = len(first)
    if width == 0:
        raise InvalidInputError(_NOT_2D_MESSAGE)

    for row in rows:
        if (
            isinstance(row, (str, bytes))
            or not isinstance(row, (Sequence, np.ndarray))
            or len(row) != width
        ):
            raise InvalidInputError(_RAGGED_MESSAGE)

    for row in rows:
        for value in row:
            if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Real):
                raise InvalidInputError(_NOT_NUMERIC_MESSAGE)
            if not math.isfinite(value):
                raise InvalidInputError(_NOT_NUMERIC_MESSAGE)

    return np.array([[float(v) for v in row] for row in rows], dtype=np.float64)


def _pivot_row_for(matrix: np.ndarray, col: int) -> int:
    """Return the first row with a non-zero entry in pivot column *col*."""
    hits = [r for r in range(matrix.shape[0]) if not is_zero(matrix[r, col])]
    if len(hits) != 1:
        logger.warning(
            "Column %d is a pivot column but has %d non-zero entries after "
            "reduction", col + 1, len(hits),
        )
    return hits[0] if hits else col


def solve(matrix_input) -> GaussJordanResult:
    """Solve the augmented system *matrix_input* by Gauss–Jordan elimination.

    The last column holds the constants; the other columns are the
    coefficients of ``x1 .. x(m-1)``.  The input is copied before it is
    read, so the caller's matrix is never modified.

    Raises :class:`InvalidInputError` for empty, ragged or non-numeric input.
    No-solution and infinitely-many-solutions outcomes are reported through
    ``error_message`` rather than raised.
    """
    matrix = _validate(matrix_input)
    n, m = matrix.shape
    logger.debug("Reducing a %dx%d augmented matrix", n, m)

    steps: list[StepSnapshot] = []
    pivot_columns: set[int] = set()

    def save_step(action: str, operation: str) -> None:
        steps.append(StepSnapshot(_freeze(matrix), action, operation))

    # Overflow leaves inf/nan entries in the trace.
    with np.errstate(over="ignore", invalid="ignore"):
        for i in range(min(n, m - 1)):
            pivot_row = i
            while pivot_row < n and is_zero(matrix[pivot_row, i]):
                pivot_row += 1
            if pivot_row == n:
                logger.debug("No pivot in column %d", i + 1)
                continue

            if pivot_row != i:
                matrix[[i, pivot_row]] = matrix[[pivot_row, i]]
                save_step(f"Row {i + 1} and Row {pivot_row + 1} swapped.", "swap")

            pivot = float(matrix[i, i])
            if not is_zero(pivot):
                matrix[i, i:] /= pivot
                save_step(
                    f"Row {i + 1} divided by {pivot:.{DECIMAL_PLACES}f} "
                    f"to make leading 1.",
                    "scale",
                )

            pivot_columns.add(i)

            for k in range(n):
                if k != i and not is_zero(matrix[k, i]):
                    factor = float(matrix[k, i])
                    matrix[k, i:] -= factor * matrix[i, i:]
                    save_step(
                        f"Row {k + 1} updated to eliminate variable x{i + 1} "
                        f"(multiplied by {factor:.{DECIMAL_PLACES}f}).",
                        "eliminate",
                    )

    reduced = _freeze(matrix)

    for row in matrix:
        if all(is_zero(v) for v in row[:-1]) and not is_zero(row[-1]):
            logger.debug("Inconsistent row found; no solution")
            return GaussJordanResult(tuple(steps), None, NO_SOLUTION_MESSAGE, reduced)

    solution: list[SolutionEntry] = []
    for j in range(m - 1):
        if j not in pivot_columns:
            solution.append(FREE)
        else:
            solution.append(float(matrix[_pivot_row_for(matrix, j), m - 1]))

    error_message = None
    if any(entry is FREE for entry in solution):
        error_message = INFINITE_SOLUTIONS_MESSAGE
    logger.debug(
        "Reduction finished after %d steps; pivots in columns %s",
        len(steps), sorted(c + 1 for c in pivot_columns),
    )
    return GaussJordanResult(tuple(steps), tuple(solution), error_message, reduced)
