import pytest
from fastapi.testclient import TestClient

from backend.app.main import app

client = TestClient(app)


def test_solve_matrix() -> None:
    resp = client.post(
        "/api/solve",
        json={"matrix": [[2, 1, -1, 8], [-3, -1, 2, -11], [-2, 1, 2, -3]]},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["error_message"] is None
    assert body["solution"] == pytest.approx([2, 3, -1])
    assert body["steps"][0]["step_number"] == 1
    assert body["verification_steps"]


def test_solve_equations_with_free_variables() -> None:
    resp = client.post("/api/solve", json={"equations": "x + y = 1, 2x + 2y = 2"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["solution"][1] == "free"
    assert "infinitely many" in body["error_message"]


def test_inconsistent_system_is_not_an_http_error() -> None:
    resp = client.post("/api/solve", json={"matrix": [[1, 1, 1], [1, 1, 2]]})
    assert resp.status_code == 200
    assert resp.json()["solution"] is None


@pytest.mark.parametrize(
    "payload,detail",
    [
        ({}, "exactly one"),
        ({"equations": "x = 1", "matrix": [[1, 1]]}, "exactly one"),
        ({"equations": "   "}, "cannot be empty"),
        ({"matrix": [[1, 2], [3]]}, "same number of columns"),
        ({"matrix": []}, "non-empty 2D array"),
        ({"equations": "x^2 = 4"}, "not linear"),
    ],
)
def test_bad_requests(payload: dict, detail: str) -> None:
    resp = client.post("/api/solve", json=payload)
    assert resp.status_code == 400
    assert detail in resp.json()["detail"]


def test_unexpected_failure_maps_to_500(monkeypatch) -> None:
    import backend.app.main as api

    def boom(source):
        raise RuntimeError("boom")

    monkeypatch.setattr(api, "solve_linear_system", boom)
    resp = client.post("/api/solve", json={"equations": "x = 1"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Solver error: boom"
