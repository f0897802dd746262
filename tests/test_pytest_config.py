from pathlib import Path
import tomllib


def _pyproject() -> dict:
    pyproject_path = Path(__file__).resolve().parents[1] / "pyproject.toml"
    return tomllib.loads(pyproject_path.read_text(encoding="utf-8"))


def test_pytest_asyncio_loop_scope_is_configured() -> None:
    pytest_options = _pyproject().get("tool", {}).get("pytest", {}).get("ini_options", {})
    assert pytest_options.get("asyncio_default_fixture_loop_scope") == "function"


def test_service_tests_are_collected() -> None:
    pytest_options = _pyproject()["tool"]["pytest"]["ini_options"]
    assert "services/dotnetrunner/tests" in pytest_options["testpaths"]
