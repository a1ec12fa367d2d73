"""Step-by-step linear system solver built on Gauss–Jordan elimination.

Takes either an augmented matrix (a list of rows) or equation text such as
``"x + y = 10, x - y = 2"``, runs the elimination engine, and packages the
result as a trail: given, method, steps, final_answer, verification_steps
and summary.
"""

import logging
import platform
import time
from datetime import datetime

import numpy as np

from solver.formatting import fmt_num, format_matrix, format_solution
from solver.gauss_jordan import (
    FREE, ZERO_TOLERANCE, GaussJordanResult, solve,
)
from solver.parsing import parse_system, variable_names

logger = logging.getLogger(__name__)

# Largest residual accepted when substituting the answer back.
VERIFY_TOLERANCE = 1e-8

_EXPLANATIONS = {
    "swap": (
        "The entry in the pivot position is zero, so we swap in the first "
        "row below it that has a non-zero entry in this column."
    ),
    "scale": (
        "Dividing the whole row by the pivot turns the pivot into a leading 1. "
        "Scaling a row does not change the solutions of the system."
    ),
    "eliminate": (
        "Subtracting a multiple of the pivot row clears this entry, so the "
        "variable only remains in the pivot row."
    ),
}


def _describe_equation(row, var_names) -> str:
    """Write one augmented row back as an equation, e.g. ``2x - y = 3``."""
    terms = []
    for coeff, name in zip(row[:-1], var_names):
        if abs(coeff) < ZERO_TOLERANCE:
            continue
        magnitude = abs(coeff)
        text = name if abs(magnitude - 1) < 1e-12 else f"{fmt_num(magnitude)}{name}"
        if not terms:
            terms.append(text if coeff > 0 else f"-{text}")
        else:
            terms.append(f"+ {text}" if coeff > 0 else f"- {text}")
    lhs = " ".join(terms) if terms else "0"
    return f"{lhs} = {fmt_num(row[-1])}"


def _particular_solution(solution) -> list[float]:
    return [0.0 if entry is FREE else float(entry) for entry in solution]


def _build_verification(matrix, var_names, solution) -> tuple[list[dict], bool]:
    """Substitute *solution* into every original equation."""
    values = np.array(_particular_solution(solution), dtype=np.float64)
    coefficients = np.array([row[:-1] for row in matrix], dtype=np.float64)
    constants = np.array([row[-1] for row in matrix], dtype=np.float64)
    lhs_values = coefficients @ values if values.size else np.zeros(len(matrix))

    assignment = ", ".join(
        f"{name} = {fmt_num(v)}" for name, v in zip(var_names, values)
    )
    steps = []
    all_ok = True
    for i, (lhs_val, rhs_val) in enumerate(zip(lhs_values, constants), start=1):
        ok = abs(lhs_val - rhs_val) <= VERIFY_TOLERANCE
        all_ok = all_ok and ok
        mark = "✓" if ok else "✗"
        steps.append({
            "description": f"Substitute into equation ({i})",
            "expression": (
                f"{_describe_equation(matrix[i - 1], var_names)}\n"
                f"LHS = {fmt_num(lhs_val)},  RHS = {fmt_num(rhs_val)}  {mark}"
            ),
            "explanation": (
                f"With {assignment}, the left side of equation ({i}) evaluates "
                f"to {fmt_num(lhs_val)}"
                + (", which matches the right side." if ok
                   else f", but the right side is {fmt_num(rhs_val)}.")
            ),
        })
    steps.append({
        "description": "Solution verified" if all_ok else "Verification failed",
        "expression": "LHS = RHS  ✓" if all_ok else "LHS ≠ RHS  ✗",
        "explanation": (
            "Every equation holds, confirming the answer."
            if all_ok else
            "At least one equation does not hold for these values."
        ),
    })
    return steps, all_ok


def _classification_step(result: GaussJordanResult, var_names) -> dict:
    reduced = format_matrix(result.reduced)
    if result.kind == "none":
        return {
            "description": "Contradiction — No Solution",
            "expression": reduced,
            "explanation": (
                "A row of the reduced matrix has all-zero coefficients but a "
                "non-zero constant, i.e. 0 = c with c ≠ 0. That equation can "
                "never hold, so the system is inconsistent."
            ),
        }
    if result.kind == "infinite":
        free = ", ".join(var_names[j] for j in result.free_variables)
        return {
            "description": "Free variables — Infinitely Many Solutions",
            "expression": reduced,
            "explanation": (
                f"No pivot was found for {free}, so "
                f"{'it is' if len(result.free_variables) == 1 else 'they are'} "
                f"free to take any value. The values shown for the other "
                f"variables are the ones obtained with every free variable set to 0."
            ),
        }
    return {
        "description": "Read off the solution",
        "expression": reduced,
        "explanation": (
            "The matrix is in reduced row-echelon form: each row has a "
            "leading 1 for one variable, so the last column holds its value."
        ),
    }


_KIND_LABELS = {
    "unique": "Unique Solution",
    "infinite": "Infinitely Many Solutions",
    "none": "No Solution",
}


def _original_rows(source):
    """Rows of an already-validated matrix as plain floats."""
    return [[float(v) for v in row] for row in source]


def _jsonable_solution(solution):
    if solution is None:
        return None
    return ["free" if entry is FREE else entry for entry in solution]


def solve_linear_system(source) -> dict:
    """
    Solve a linear system step by step with Gauss–Jordan elimination.

    *source* is either:
      - an augmented matrix:  ``[[1, 1, 10], [1, -1, 2]]``
      - equation text (comma / semicolon separated):  ``x + y = 10, x - y = 2``

    Returns a dict with trail-format sections:
      - given, method, steps, final_answer, verification_steps, summary
    plus ``solution`` and ``error_message`` straight from the engine.

    Raises ``ValueError`` (``InvalidInputError`` for malformed matrices) when
    the input cannot be solved at all.
    """
    t_start = time.perf_counter()

    if isinstance(source, str):
        matrix, var_names = parse_system(source)
        result = solve(matrix)
        equation = source.strip()
    else:
        result = solve(source)
        matrix = _original_rows(source)
        var_names = variable_names(len(matrix[0]) - 1)
        equation = format_matrix(matrix)

    n_eq = len(matrix)
    n_var = len(var_names)

    steps = [{
        "description": "Write the augmented matrix",
        "expression": format_matrix(matrix),
        "explanation": (
            f"We have {n_eq} equation{'s' if n_eq != 1 else ''} "
            f"with {n_var} unknown{'s' if n_var != 1 else ''}"
            + (f": {', '.join(var_names)}." if var_names else ".")
            + " Each row holds the coefficients of one equation, and the "
            "column after the bar holds its constant."
        ),
        "operation": "start",
        "matrix": [list(row) for row in matrix],
    }]
    for snapshot in result.steps:
        steps.append({
            "description": snapshot.action,
            "expression": format_matrix(snapshot.matrix),
            "explanation": _EXPLANATIONS[snapshot.operation],
            "operation": snapshot.operation,
            "matrix": [list(row) for row in snapshot.matrix],
        })
    classification = _classification_step(result, var_names)
    classification["operation"] = "classify"
    classification["matrix"] = [list(row) for row in result.reduced]
    steps.append(classification)

    if result.kind == "none":
        verification_steps, verified = [], False
        final_answer = format_solution(None, var_names)
    else:
        verification_steps, verified = _build_verification(
            matrix, var_names, result.solution,
        )
        final_answer = format_solution(result.solution, var_names)
        if result.kind == "infinite":
            final_answer = f"Infinitely many solutions.\n{final_answer}"

    for i, s in enumerate(steps, 1):
        s["step_number"] = i
    for i, s in enumerate(verification_steps, 1):
        s["step_number"] = i

    t_end = time.perf_counter()
    runtime_ms = round((t_end - t_start) * 1000, 2)
    logger.debug(
        "Solved %dx%d system (%s) in %.2f ms",
        n_eq, n_var + 1, result.kind, runtime_ms,
    )

    return {
        "equation": equation,
        "given": {
            "problem": "Solve the system of linear equations",
            "inputs": {
                "matrix": format_matrix(matrix),
                "number_of_equations": str(n_eq),
                "variables": ", ".join(var_names),
                "number_of_variables": str(n_var),
            },
        },
        "method": {
            "name": "Gauss–Jordan Elimination",
            "description": (
                "Reduce the augmented matrix to reduced row-echelon form with "
                "row swaps, row scaling and row combinations, then read off "
                "the solution."
            ),
            "parameters": {
                "equation_type": f"Linear System — {_KIND_LABELS[result.kind]}",
                "variables": ", ".join(var_names),
                "approach": "Pivot search → Swap → Normalise → Eliminate → Classify",
                "zero_tolerance": f"{ZERO_TOLERANCE:g}",
            },
        },
        "steps": steps,
        "final_answer": final_answer,
        "solution": _jsonable_solution(result.solution),
        "error_message": result.error_message,
        "verification_steps": verification_steps,
        "summary": {
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "validation_status": "pass" if verified else "fail",
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": f"NumPy {np.__version__}",
            "python": platform.python_version(),
        },
    }
