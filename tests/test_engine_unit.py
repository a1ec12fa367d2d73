import pytest

from solver import engine
from solver.formatting import fmt_num, format_matrix, format_solution
from solver.gauss_jordan import FREE, InvalidInputError

UNIQUE = [[2, 1, -1, 8], [-3, -1, 2, -11], [-2, 1, 2, -3]]
INFINITE = [[1, 2, -1, 8], [2, 4, -2, 16], [-1, -2, 1, -8]]
INCONSISTENT = [[1, -1, 2, 9], [2, -2, 4, 12], [3, -3, 6, -1]]


# ── Formatting helpers ───────────────────────────────────────────────────

@pytest.mark.parametrize(
    "value,expected",
    [(7.0, "7"), (2.5, "2.5"), (-1.0, "-1"), (-0.0, "0"), (1 / 3, "0.3333333333"),
     (-1e-11, "0"), (float("nan"), "nan"), (float("inf"), "inf"),
     (float("-inf"), "-inf")],
)
def test_fmt_num(value: float, expected: str) -> None:
    assert fmt_num(value) == expected


def test_format_matrix_aligns_columns() -> None:
    assert format_matrix([[1, 2, 3], [4, 5, 6]]) == "[ 1  2 | 3 ]\n[ 4  5 | 6 ]"
    assert format_matrix([[10, 2, 3], [4, 5, -6]]) == (
        "[ 10  2 |  3 ]\n"
        "[  4  5 | -6 ]"
    )
    assert format_matrix([[5]]) == "[ | 5 ]"


def test_format_solution() -> None:
    assert format_solution((2.0, FREE), ["x", "y"]) == "x = 2\ny is a free variable"
    assert "No solution" in format_solution(None, ["x"])


def test_describe_equation() -> None:
    assert engine._describe_equation([2, -1, 0, 3], ["x", "y", "z"]) == "2x - y = 3"
    assert engine._describe_equation([0, 0, 5], ["x", "y"]) == "0 = 5"


# ── Trail structure ──────────────────────────────────────────────────────

def test_solve_matrix_required_fields_type_and_range_checks() -> None:
    result = engine.solve_linear_system(UNIQUE)

    required_fields = {
        "equation",
        "given",
        "method",
        "steps",
        "final_answer",
        "solution",
        "error_message",
        "verification_steps",
        "summary",
    }
    assert required_fields.issubset(set(result.keys()))

    summary = result["summary"]
    assert isinstance(summary["runtime_ms"], (int, float)) and summary["runtime_ms"] >= 0
    assert summary["total_steps"] == len(result["steps"])
    assert summary["verification_steps"] == len(result["verification_steps"])
    assert summary["validation_status"] == "pass"
    assert "NumPy" in summary["library"]
    assert result["method"]["name"] == "Gauss–Jordan Elimination"


def test_unique_solution_trail() -> None:
    result = engine.solve_linear_system(UNIQUE)
    assert result["error_message"] is None
    assert result["solution"] == pytest.approx([2, 3, -1])
    assert result["final_answer"] == "x1 = 2\nx2 = 3\nx3 = -1"

    steps = result["steps"]
    # augmented matrix + 9 row operations + classification
    assert len(steps) == 11
    assert [s["step_number"] for s in steps] == list(range(1, 12))
    assert steps[0]["operation"] == "start"
    assert steps[0]["matrix"] == [[float(v) for v in row] for row in UNIQUE]
    assert steps[1]["description"] == "Row 1 divided by 2.0000 to make leading 1."
    assert steps[-1]["operation"] == "classify"
    assert steps[-1]["matrix"] == steps[-2]["matrix"]

    # one substitution per equation + conclusion
    assert len(result["verification_steps"]) == 4
    assert result["verification_steps"][-1]["description"] == "Solution verified"


def test_system_text_uses_variable_names() -> None:
    result = engine.solve_linear_system("x + y = 10, x - y = 2")
    assert result["final_answer"] == "x = 6\ny = 4"
    assert result["equation"] == "x + y = 10, x - y = 2"
    assert result["given"]["inputs"]["variables"] == "x, y"
    assert result["summary"]["validation_status"] == "pass"


def test_infinite_solution_trail() -> None:
    result = engine.solve_linear_system(INFINITE)
    assert result["error_message"] == (
        "The system has infinitely many solutions due to free variables."
    )
    assert result["solution"][0] == pytest.approx(8)
    assert result["solution"][1:] == ["free", "free"]
    assert result["final_answer"].startswith("Infinitely many solutions.")
    assert "x2 is a free variable" in result["final_answer"]
    assert "x2, x3" in result["steps"][-1]["explanation"]
    assert result["summary"]["validation_status"] == "pass"


def test_inconsistent_trail() -> None:
    result = engine.solve_linear_system(INCONSISTENT)
    assert result["error_message"] == "No solutions exist for this system."
    assert result["solution"] is None
    assert "No solution" in result["final_answer"]
    assert result["verification_steps"] == []
    assert result["summary"]["validation_status"] == "fail"
    assert result["steps"][-1]["description"] == "Contradiction — No Solution"


def test_input_matrix_is_not_mutated() -> None:
    matrix = [[0, 1, 2], [1, 0, 3]]
    engine.solve_linear_system(matrix)
    assert matrix == [[0, 1, 2], [1, 0, 3]]


# ── Invalid input ────────────────────────────────────────────────────────

def test_invalid_matrix_raises() -> None:
    with pytest.raises(InvalidInputError, match="same number of columns"):
        engine.solve_linear_system([[1, 2], [3]])
    with pytest.raises(InvalidInputError, match="non-empty 2D array"):
        engine.solve_linear_system(None)


def test_invalid_text_raises() -> None:
    with pytest.raises(ValueError, match="must contain '='"):
        engine.solve_linear_system("2x + 3")


def test_overflowing_matrix_still_produces_a_trail() -> None:
    result = engine.solve_linear_system([[1e-5, 1e300, 0], [1e5, 1, 1]])
    assert result["error_message"] is None
    assert any("nan" in s["expression"] for s in result["steps"])
    assert result["summary"]["validation_status"] == "fail"
