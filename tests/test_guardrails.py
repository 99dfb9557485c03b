import importlib.util
from pathlib import Path

import pytest

GUARDRAILS = Path(__file__).resolve().parent.parent / "tools" / "guardrails.py"


@pytest.fixture(scope="module")
def guardrails():
    spec = importlib.util.spec_from_file_location("guardrails", GUARDRAILS)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_package_passes(guardrails, capsys):
    assert guardrails.main([]) == 0
    out = capsys.readouterr().out
    assert "speedctl/actions.py" in out.replace("\\", "/")
    assert "Result: PASSED" in out


def test_bare_except_fails(guardrails, tmp_path):
    bad = tmp_path / "bad.py"
    bad.write_text("try:\n    pass\nexcept:\n    pass\n", encoding="utf-8")

    ok, detail = guardrails.check_file(bad)

    assert not ok
    assert "line(s) 3" in detail


def test_syntax_error_and_missing_file(guardrails, tmp_path):
    broken = tmp_path / "broken.py"
    broken.write_text("def f(:\n", encoding="utf-8")

    assert guardrails.check_file(broken)[0] is False
    assert guardrails.check_file(tmp_path / "nope.py") == (False, "missing")
    assert guardrails.main(["--files", str(broken)]) == 1
