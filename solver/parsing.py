"""Read a system of linear equations into an augmented matrix.

Accepts comma- or semicolon-separated equations such as
``"2x + y - z = 8, -3x - y + 2z = -11, -2x + y + 2z = -3"`` and returns the
augmented coefficient matrix together with the variable names, in the order
their columns appear.
"""

import re

import sympy
from sympy import Symbol, expand, fraction, linear_eq_to_matrix, symbols
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor,
)

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
)

# Letters that may name an unknown.
_ALLOWED_VARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")

_RESERVED = {
    'sin', 'cos', 'tan', 'log', 'ln', 'exp', 'sqrt',
    'pi', 'PI', 'Pi', 'abs', 'E',
}

_TRANS_FUNC_NAMES = (
    'sin', 'cos', 'tan', 'cot', 'sec', 'csc',
    'asin', 'acos', 'atan', 'acot',
    'sinh', 'cosh', 'tanh',
    'log', 'exp',
)


def variable_names(count: int) -> list[str]:
    """Default names ``x1 .. x{count}`` for the columns of a raw matrix."""
    return [f"x{j + 1}" for j in range(count)]


def _validate_characters(text: str) -> None:
    """Reject input containing characters outside the allowed set.

    Allowed: letters, digits, whitespace, π, √ and the math symbols
    + - * / ^ = ( ) [ ] { } . , ; :
    """
    allowed = set("abcdefghijklmnopqrstuvwxyz"
                  "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
                  "0123456789"
                  " \t\n+-*/^=()[]{}.,;:π√")
    bad = {ch for ch in text if ch not in allowed}
    if bad:
        bad_sorted = " ".join(sorted(bad))
        raise ValueError(
            f"Invalid character(s): {bad_sorted}\n"
            f"Only letters, numbers, and math symbols "
            "(+ - * / ^ = ( ) [ ] { } . , ; : π √) are allowed."
        )


def _detect_variables(text: str) -> list[str]:
    """Return a sorted list of single-letter variables found in *text*.

    Multi-letter tokens that aren't reserved math names are read as
    implicit multiplication of their letters (``xy`` → x·y); the linearity
    check rejects such products later.
    """
    tokens = re.findall(r'[A-Za-z]+', text)
    candidates = set()
    for tok in tokens:
        if tok in _RESERVED:
            continue
        for ch in tok:
            if ch in _ALLOWED_VARS:
                candidates.add(ch)
    if not candidates:
        raise ValueError("No variable found. Include a letter like x, y, or z.")
    return sorted(candidates)


def _expand_implicit_vars(s: str, var_names: set) -> str:
    """Spell out products of variable letters (``as`` → ``a*s``) so Python
    keywords never reach the parser."""
    def _repl(m):
        tok = m.group(0)
        if all(ch in var_names for ch in tok):
            return '*'.join(tok)
        return tok
    return re.sub(r'[A-Za-z]+', _repl, s)


def _parse_side(expr_str: str, var_symbols: list[Symbol]):
    """Parse one side of an equation into a SymPy expression."""
    s = expr_str.strip().replace('^', '**')
    local = {sym.name: sym for sym in var_symbols}
    s = _expand_implicit_vars(s, set(local))
    try:
        return parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ValueError(f"Could not parse expression: '{expr_str}'. Error: {e}")


def _has_transcendental(expr, var_symbols) -> bool:
    vs_set = set(var_symbols)
    for name in _TRANS_FUNC_NAMES:
        cls = getattr(sympy, name, None)
        if cls is None:
            continue
        for atom in expr.atoms(cls):
            if atom.free_symbols & vs_set:
                return True
    return False


def _has_var_in_denominator(expr, var_symbols) -> bool:
    vs_set = set(var_symbols)
    for term in [expr, *expr.as_ordered_terms()]:
        _, den = fraction(term)
        if den.free_symbols & vs_set:
            return True
    return False


def _check_linear(combined, var_symbols, index: int, raw: str) -> None:
    """Raise ``ValueError`` unless *combined* is of degree ≤ 1 in the unknowns."""
    where = f"Equation ({index}) '{raw}' is not linear"
    if _has_transcendental(combined, var_symbols):
        raise ValueError(f"{where}: a variable appears inside a function.")
    if _has_var_in_denominator(combined, var_symbols):
        raise ValueError(f"{where}: a variable appears in a denominator.")
    poly = combined.as_poly(*var_symbols)
    if poly is None:
        raise ValueError(f"{where}.")
    if poly.total_degree() > 1:
        raise ValueError(
            f"{where}: it has degree {poly.total_degree()}. "
            f"Only linear systems can be solved by row reduction."
        )


def _normalize(text: str) -> str:
    text = text.replace('√', 'sqrt')
    text = text.replace('π', '(pi)')
    text = text.replace('[', '(').replace(']', ')')
    text = text.replace('{', '(').replace('}', ')')
    return text


def parse_system(text: str) -> tuple[list[list[float]], list[str]]:
    """Turn equation text into ``(augmented_matrix, variable_names)``.

    Raises ``ValueError`` with a user-facing message when the text is not a
    system of linear equations.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Enter at least one equation, e.g. x + y = 10, x - y = 2")

    text = _normalize(text)
    _validate_characters(text)

    raw_equations = [eq.strip() for eq in re.split(r'\s*[;,\n]\s*', text)
                     if eq.strip()]
    var_names = _detect_variables(' '.join(raw_equations))
    var_symbols = [symbols(v) for v in var_names]

    expressions = []
    for index, eq_str in enumerate(raw_equations, start=1):
        if '=' not in eq_str:
            raise ValueError(f"Each equation must contain '='. Problem: {eq_str}")
        parts = eq_str.split('=')
        if len(parts) != 2:
            raise ValueError(
                f"Each equation must have exactly one '='. Problem: {eq_str}"
            )
        lhs_str, rhs_str = parts[0].strip(), parts[1].strip()
        if not lhs_str or not rhs_str:
            raise ValueError(
                f"Both sides of the equation must have expressions. Problem: {eq_str}"
            )
        lhs = _parse_side(lhs_str, var_symbols)
        rhs = _parse_side(rhs_str, var_symbols)
        combined = expand(lhs - rhs)
        _check_linear(combined, var_symbols, index, eq_str)
        expressions.append(combined)

    coefficients, constants = linear_eq_to_matrix(expressions, var_symbols)
    matrix = []
    for i in range(coefficients.rows):
        row = [float(coefficients[i, j]) for j in range(coefficients.cols)]
        row.append(float(constants[i, 0]))
        matrix.append(row)
    return matrix, var_names
