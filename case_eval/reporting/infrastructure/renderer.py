"""Rich table rendering of an EvaluationReport."""

from dataclasses import dataclass
from io import StringIO
from typing import Any

from rich.console import Console
from rich.table import Table

from case_eval.evaluators.domain.result import EvaluationResult
from case_eval.reporting.domain.aggregate import ReportCaseAggregate
from case_eval.reporting.domain.analyses import (
    ConfusionMatrix,
    PrecisionRecall,
    ReportAnalysis,
    ScalarResult,
    TableResult,
)
from case_eval.reporting.domain.case import ReportCase
from case_eval.reporting.domain.report import EvaluationReport
from case_eval.reporting.infrastructure.render_numbers import (
    render_duration,
    render_number,
    render_percentage,
)

EMPTY_CELL = "[i dim]-[/]"
EMPTY_AGGREGATE_CELL = ""
_MAX_VALUE_CHARS = 200


def _render_value(value: Any) -> str:
    if value is None:
        return EMPTY_CELL
    text = value if isinstance(value, str) else repr(value)
    if len(text) > _MAX_VALUE_CHARS:
        text = text[: _MAX_VALUE_CHARS - 3] + "..."
    return text.replace("[", r"\[")


def _render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int | float):
        return render_number(value)
    return _render_value(value)


def _render_mapping(values: dict[str, Any]) -> str:
    if not values:
        return EMPTY_CELL
    return "\n".join(f"{name}: {_render_scalar(value)}" for name, value in values.items())


@dataclass
class ReportRenderer:
    """Builds the case table for one report with a fixed set of columns.

    Score, label, metric and assertion columns appear only when some case in
    the report has at least one such entry.
    """

    include_input: bool = False
    include_metadata: bool = False
    include_expected_output: bool = False
    include_output: bool = False
    include_reasons: bool = False
    include_durations: bool = True
    include_averages: bool = True

    def build_case_table(self, report: EvaluationReport) -> Table:
        include_scores = any(case.scores for case in report.cases)
        include_labels = any(case.labels for case in report.cases)
        include_metrics = any(case.metrics for case in report.cases)
        include_assertions = any(case.assertions for case in report.cases)

        table = Table(title=f"Evaluation Summary: {report.name}", show_lines=True)
        table.add_column("Case ID", style="bold")
        if self.include_input:
            table.add_column("Inputs", overflow="fold")
        if self.include_metadata:
            table.add_column("Metadata", overflow="fold")
        if self.include_expected_output:
            table.add_column("Expected Output", overflow="fold")
        if self.include_output:
            table.add_column("Outputs", overflow="fold")
        if include_scores:
            table.add_column("Scores", overflow="fold")
        if include_labels:
            table.add_column("Labels", overflow="fold")
        if include_metrics:
            table.add_column("Metrics", overflow="fold")
        if include_assertions:
            table.add_column("Assertions", overflow="fold")
        if self.include_durations:
            table.add_column("Durations", justify="right")

        for case in report.cases:
            row = [_render_value(case.name)]
            if self.include_input:
                row.append(_render_value(case.inputs))
            if self.include_metadata:
                row.append(_render_value(case.metadata))
            if self.include_expected_output:
                row.append(_render_value(case.expected_output))
            if self.include_output:
                row.append(_render_value(case.output))
            if include_scores:
                row.append(self._render_results(case.scores))
            if include_labels:
                row.append(self._render_results(case.labels))
            if include_metrics:
                row.append(_render_mapping(case.metrics))
            if include_assertions:
                row.append(self._render_assertions(case))
            if self.include_durations:
                row.append(self._render_durations(case.task_duration, case.total_duration))
            table.add_row(*row)

        average = report.averages() if self.include_averages else None
        if average is not None:
            row = [f"[b i]{average.name}[/]"]
            inline_columns = sum(
                (
                    self.include_input,
                    self.include_metadata,
                    self.include_expected_output,
                    self.include_output,
                )
            )
            row.extend([EMPTY_AGGREGATE_CELL] * inline_columns)
            if include_scores:
                row.append(_render_mapping(average.scores))
            if include_labels:
                row.append(self._render_label_distribution(average))
            if include_metrics:
                row.append(_render_mapping(average.metrics))
            if include_assertions:
                row.append(
                    EMPTY_AGGREGATE_CELL
                    if average.assertions is None
                    else f"{render_percentage(average.assertions)} [green]✔[/]"
                )
            if self.include_durations:
                row.append(
                    self._render_durations(average.task_duration, average.total_duration)
                )
            table.add_row(*row)
        return table

    def _render_results(self, results: dict[str, EvaluationResult]) -> str:
        if not results:
            return EMPTY_CELL
        lines = []
        for name, result in results.items():
            line = f"{name}: {_render_scalar(result.value)}"
            if self.include_reasons and result.reason:
                line += f"\n  Reason: {_render_value(result.reason)}"
            lines.append(line)
        return "\n".join(lines)

    def _render_assertions(self, case: ReportCase) -> str:
        if not case.assertions:
            return EMPTY_CELL
        if not self.include_reasons:
            return "".join(
                "[green]✔[/]" if result.value is True else "[red]✗[/]"
                for result in case.assertions.values()
            )
        lines = []
        for name, result in case.assertions.items():
            mark = "[green]✔[/]" if result.value is True else "[red]✗[/]"
            line = f"{name}: {mark}"
            if result.reason:
                line += f"\n  Reason: {_render_value(result.reason)}"
            lines.append(line)
        return "\n".join(lines)

    def _render_label_distribution(self, average: ReportCaseAggregate) -> str:
        if not average.labels:
            return EMPTY_CELL
        lines = []
        for name, distribution in average.labels.items():
            parts = ", ".join(
                f"{_render_value(value)}: {render_percentage(fraction)}"
                for value, fraction in distribution.items()
            )
            lines.append(f"{name}: {{{parts}}}")
        return "\n".join(lines)

    def _render_durations(self, task_duration: float, total_duration: float) -> str:
        return f"task: {render_duration(task_duration)}\ntotal: {render_duration(total_duration)}"


def _build_failures_table(report: EvaluationReport) -> Table:
    table = Table(title="Case Failures", show_lines=True)
    table.add_column("Case ID", style="bold")
    table.add_column("Error", overflow="fold")
    for failure in report.failures:
        table.add_row(_render_value(failure.name), _render_value(failure.error_message))
    return table


def _build_evaluator_failures_table(report: EvaluationReport) -> Table:
    table = Table(title="Evaluator Failures", show_lines=True)
    table.add_column("Case ID", style="bold")
    table.add_column("Evaluator")
    table.add_column("Error", overflow="fold")
    for case in report.cases:
        for failure in case.evaluator_failures:
            table.add_row(
                _render_value(case.name),
                _render_value(failure.name),
                _render_value(failure.error_message),
            )
    for failure in report.report_evaluator_failures:
        table.add_row(
            EMPTY_CELL, _render_value(failure.name), _render_value(failure.error_message)
        )
    return table


def _build_analysis(analysis: ReportAnalysis) -> Table:
    match analysis:
        case ConfusionMatrix():
            table = Table(title=analysis.title, caption=analysis.description)
            table.add_column("Expected / Predicted", style="bold")
            for label in analysis.class_labels:
                table.add_column(_render_value(label), justify="right")
            for label, counts in zip(analysis.class_labels, analysis.matrix):
                table.add_row(_render_value(label), *(render_number(c) for c in counts))
            return table
        case PrecisionRecall():
            table = Table(title=analysis.title, caption=analysis.description)
            table.add_column("Curve", style="bold")
            table.add_column("Points", justify="right")
            table.add_column("AUC", justify="right")
            for curve in analysis.curves:
                table.add_row(
                    _render_value(curve.name),
                    render_number(len(curve.points)),
                    EMPTY_CELL if curve.auc is None else render_number(curve.auc),
                )
            return table
        case ScalarResult():
            table = Table(title=analysis.title, caption=analysis.description)
            table.add_column("Value", justify="right")
            unit = f" {analysis.unit}" if analysis.unit else ""
            table.add_row(f"{render_number(analysis.value)}{unit}")
            return table
        case TableResult():
            table = Table(title=analysis.title, caption=analysis.description)
            for column in analysis.columns:
                table.add_column(_render_value(column))
            for row in analysis.rows:
                table.add_row(*(_render_scalar(cell) for cell in row))
            return table
    raise TypeError(f"unsupported analysis type: {type(analysis).__name__}")


def render_report(
    report: EvaluationReport,
    *,
    include_input: bool = False,
    include_metadata: bool = False,
    include_expected_output: bool = False,
    include_output: bool = False,
    include_reasons: bool = False,
    include_durations: bool = True,
    include_averages: bool = True,
    width: int | None = None,
) -> str:
    """Render the report as plain text tables.

    Includes the case table with an averages row, then tables for case
    failures, evaluator failures and each analysis when present.
    """
    renderer = ReportRenderer(
        include_input=include_input,
        include_metadata=include_metadata,
        include_expected_output=include_expected_output,
        include_output=include_output,
        include_reasons=include_reasons,
        include_durations=include_durations,
        include_averages=include_averages,
    )
    buffer = StringIO()
    console = Console(file=buffer, width=width or 120, color_system=None)
    console.print(renderer.build_case_table(report))
    if report.failures:
        console.print(_build_failures_table(report))
    if report.report_evaluator_failures or any(c.evaluator_failures for c in report.cases):
        console.print(_build_evaluator_failures_table(report))
    for analysis in report.analyses:
        console.print(_build_analysis(analysis))
    return buffer.getvalue()
