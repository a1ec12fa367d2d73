import main as entry


def test_main_prints_trail_for_argument(capsys) -> None:
    assert entry.main(["x + y = 10, x - y = 2"]) == 0
    out = capsys.readouterr().out
    assert "Solving: x + y = 10, x - y = 2" in out
    assert "Write the augmented matrix" in out
    assert "=> x = 6" in out
    assert "=> y = 4" in out


def test_main_runs_demo_systems_without_arguments(capsys) -> None:
    assert entry.main([]) == 0
    out = capsys.readouterr().out
    assert out.count("Solving:") == len(entry.DEMO_SYSTEMS)
    assert "Infinitely many solutions." in out
    assert "No solution" in out


def test_main_reports_bad_input(capsys) -> None:
    assert entry.main(["x + 1"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_configures_logging_from_environment(monkeypatch) -> None:
    calls = []
    monkeypatch.setenv("GAUSSSOLVER_LOG_LEVEL", "debug")
    monkeypatch.setattr(entry.logging, "basicConfig", lambda **kw: calls.append(kw))
    assert entry.main(["x = 2"]) == 0
    assert calls == [{"level": "DEBUG"}]
