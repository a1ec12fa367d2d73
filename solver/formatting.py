"""Plain-text rendering of numbers, augmented matrices and solutions."""

import math

from solver.gauss_jordan import FREE


def fmt_num(value: float, max_decimals: int = 10) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    """
    value = float(value)
    if not math.isfinite(value):
        return str(value)
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    if formatted in ("-0", ""):
        return "0"
    return formatted


def format_matrix(rows) -> str:
    """Render an augmented matrix, one bracketed line per row.

    ``[[1, 2, 3], [4, 5, 6]]`` →::

        [ 1  2 | 3 ]
        [ 4  5 | 6 ]
    """
    cells = [[fmt_num(v) for v in row] for row in rows]
    if not cells or not cells[0]:
        return "[ ]"
    widths = [max(len(row[j]) for row in cells) for j in range(len(cells[0]))]
    lines = []
    for row in cells:
        padded = [cell.rjust(widths[j]) for j, cell in enumerate(row)]
        if len(padded) > 1:
            body = "  ".join(padded[:-1]) + " | " + padded[-1]
        else:
            body = "| " + padded[0]
        lines.append(f"[ {body} ]")
    return "\n".join(lines)


def format_solution(solution, var_names) -> str:
    """One ``name = value`` line per variable; free ones are called out."""
    if solution is None:
        return "No solution — the system is inconsistent."
    lines = []
    for name, entry in zip(var_names, solution):
        if entry is FREE:
            lines.append(f"{name} is a free variable")
        else:
            lines.append(f"{name} = {fmt_num(entry)}")
    return "\n".join(lines)
