"""Tests for the case-eval CLI."""

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner

from case_eval.cli.main import app

runner = CliRunner()

TASK_MODULE = """\
from dataclasses import dataclass

from case_eval import Evaluator, EvaluatorContext


def shout(text):
    return text.upper()


@dataclass
class IsUpper(Evaluator):
    def evaluate(self, ctx: EvaluatorContext) -> bool:
        return ctx.output.isupper()


not_callable = 3
"""

DATASET = """\
cases:
  - name: hello
    inputs: hello
    expected_output: HELLO
    evaluators: [EqualsExpected]
  - name: world
    inputs: world
evaluators:
  - IsUpper
"""


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


@pytest.fixture
def project(tmp_path: Path) -> tuple[Path, str]:
    """Write a task module and dataset; return the directory and module name."""
    module = f"tasks_{tmp_path.name}"
    (tmp_path / f"{module}.py").write_text(TASK_MODULE)
    (tmp_path / "cases.yaml").write_text(DATASET)
    return tmp_path, module


def _config(directory: Path, module: str, task: str = "shout") -> Path:
    path = directory / "run.yaml"
    path.write_text(
        "name: shouting\n"
        "dataset: cases.yaml\n"
        f"task: {module}:{task}\n"
        "custom_evaluators:\n"
        f"  - {module}:IsUpper\n"
        "execution:\n"
        "  max_concurrency: 2\n"
    )
    return path


class TestCheckCommand:
    """check validates everything and prints a summary without running."""

    def test_prints_summary(self, project: tuple[Path, str]) -> None:
        directory, module = project
        config = _config(directory, module)

        result = runner.invoke(app, ["check", str(config)])

        assert result.exit_code == 0, result.output
        assert "shouting" in result.output
        assert "Cases" in result.output
        assert f"{module}:shout" in result.output
        assert "Max concurrency" in result.output

    def test_missing_config_exits_1(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["check", str(tmp_path / "absent.yaml")])

        assert result.exit_code == 1
        assert "Failed to load config" in result.output

    def test_unknown_task_exits_1(self, project: tuple[Path, str]) -> None:
        directory, module = project
        config = _config(directory, module, task="missing")

        result = runner.invoke(app, ["check", str(config)])

        assert result.exit_code == 1
        assert "no attribute 'missing'" in result.output

    def test_non_callable_task_exits_1(self, project: tuple[Path, str]) -> None:
        directory, module = project
        config = _config(directory, module, task="not_callable")

        result = runner.invoke(app, ["check", str(config)])

        assert result.exit_code == 1
        assert "task is not callable" in result.output


class TestRunCommand:
    """run evaluates the task and prints the report."""

    def test_table_output(self, project: tuple[Path, str]) -> None:
        directory, module = project
        config = _config(directory, module)

        result = runner.invoke(app, ["run", str(config), "--no-progress", "--include-output"])

        assert result.exit_code == 0, result.output
        assert "Evaluation Summary: shouting" in result.output
        assert "hello" in result.output
        assert "WORLD" in result.output

    def test_json_output(self, project: tuple[Path, str]) -> None:
        directory, module = project
        config = _config(directory, module)

        result = runner.invoke(
            app, ["run", str(config), "--no-progress", "--log-format", "json", "--output", "json"]
        )

        assert result.exit_code == 0, result.output
        assert '"name": "shouting"' in result.output
        assert '"IsUpper"' in result.output
        assert '"EqualsExpected"' in result.output

    def test_invalid_output_format_exits_1(self, project: tuple[Path, str]) -> None:
        directory, module = project
        config = _config(directory, module)

        result = runner.invoke(app, ["run", str(config), "--output", "xml"])

        assert result.exit_code == 1
        assert "Invalid output format" in result.output

    def test_invalid_log_format_exits_1(self, project: tuple[Path, str]) -> None:
        directory, module = project
        config = _config(directory, module)

        result = runner.invoke(app, ["run", str(config), "--log-format", "xml"])

        assert result.exit_code == 1
        assert "Invalid log format" in result.output
