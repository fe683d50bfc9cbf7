"""CLI entrypoint for case-eval — typer app with `run` and `check` commands."""

import sys
from pathlib import Path
from typing import Any

import structlog
import typer

from case_eval.cli.imports import import_evaluator_types, import_task
from case_eval.config.domain.config import RunConfig
from case_eval.config.infrastructure.observer import StructlogConfigObserver
from case_eval.config.infrastructure.yaml_loader import YamlConfigLoader
from case_eval.core.errors import CaseEvalError
from case_eval.dataset.domain.dataset import Dataset
from case_eval.dataset.infrastructure.file_loader import FileDatasetLoader
from case_eval.dataset.infrastructure.observer import StructlogDatasetObserver
from case_eval.evaluation.domain.observer import EvaluationObserver
from case_eval.evaluation.infrastructure.composite_observer import CompositeEvaluationObserver
from case_eval.evaluation.infrastructure.observer import StructlogEvaluationObserver
from case_eval.evaluation.infrastructure.progress_observer import ProgressEvaluationObserver
from case_eval.evaluators.domain.evaluator import Evaluator
from case_eval.evaluators.domain.report_evaluator import ReportEvaluator
from case_eval.evaluators.infrastructure.llm_judge import set_default_judge_model
from case_eval.reporting.infrastructure.renderer import render_report

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format. Logs go to stderr."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(
            f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.",
            err=True,
        )
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load(config_path: Path) -> tuple[RunConfig, Dataset, Any]:
    """Load the config, the dataset it names and the task it references.

    Raises:
        CaseEvalError: if any of the three cannot be loaded.
    """
    config = YamlConfigLoader(observer=StructlogConfigObserver()).load(path=config_path)
    search_path = config_path.parent.resolve()

    if config.judge is not None:
        set_default_judge_model(config.judge.model)

    loader = FileDatasetLoader(
        observer=StructlogDatasetObserver(),
        custom_evaluator_types=import_evaluator_types(
            config.custom_evaluators, Evaluator, search_path
        ),
        custom_report_evaluator_types=import_evaluator_types(
            config.custom_report_evaluators, ReportEvaluator, search_path
        ),
    )
    dataset = loader.load(path=config.dataset)
    task = import_task(config.task, search_path)
    return config, dataset, task


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Path to run config YAML"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
    progress: bool = typer.Option(
        True,
        "--progress/--no-progress",
        help="Show a live progress bar on stderr",
    ),
    output: str = typer.Option(
        "table",
        "--output",
        help="Report format on stdout: 'table' or 'json'",
    ),
    include_input: bool = typer.Option(False, "--include-input"),
    include_output: bool = typer.Option(False, "--include-output"),
    include_reasons: bool = typer.Option(False, "--include-reasons"),
) -> None:
    """Evaluate the configured task against the configured dataset."""
    if output not in ("table", "json"):
        typer.echo(f"Invalid output format: {output!r}. Must be 'table' or 'json'.", err=True)
        raise typer.Exit(code=1)

    try:
        _configure_structlog(log_format=log_format)
        config, dataset, task = _load(config_path=config_path)

        observers: list[EvaluationObserver] = [StructlogEvaluationObserver()]
        if progress and log_format != "json":
            observers.append(ProgressEvaluationObserver())

        report = dataset.evaluate_sync(
            task,
            name=config.name,
            max_concurrency=config.execution.max_concurrency,
            repeat=config.execution.repeat,
            metadata=config.metadata,
            observer=CompositeEvaluationObserver(observers=observers),
        )

        if output == "json":
            typer.echo(report.model_dump_json(indent=2))
        else:
            typer.echo(
                render_report(
                    report,
                    include_input=include_input,
                    include_output=include_output,
                    include_reasons=include_reasons,
                )
            )

    except KeyboardInterrupt:
        typer.echo("Evaluation interrupted.", err=True)
        sys.exit(1)
    except CaseEvalError as exc:
        typer.echo(str(exc), err=True)
        sys.exit(1)


@app.command()
def check(
    config_path: Path = typer.Argument(..., help="Path to run config YAML"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Validate the config, dataset and task reference without running anything."""
    try:
        _configure_structlog(log_format=log_format)
        config, dataset, _ = _load(config_path=config_path)
    except CaseEvalError as exc:
        typer.echo(str(exc), err=True)
        sys.exit(1)

    max_concurrency = config.execution.max_concurrency
    rows = [
        ("Name", config.name or "(task name)"),
        ("Dataset", str(config.dataset)),
        ("Cases", str(len(dataset))),
        ("Evaluators", str(len(dataset.evaluators))),
        ("Report evaluators", str(len(dataset.report_evaluators))),
        ("Task", config.task),
        ("Repeat", str(config.execution.repeat)),
        ("Max concurrency", "unbounded" if max_concurrency is None else str(max_concurrency)),
    ]
    label_w = max(len(label) for label, _ in rows)
    for label, value in rows:
        typer.echo(f"{label:<{label_w}}  {value}")


if __name__ == "__main__":
    app()
