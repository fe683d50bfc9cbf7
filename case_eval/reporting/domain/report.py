"""EvaluationReport — the result of one Dataset.evaluate call."""

from typing import Any

from pydantic import BaseModel, Field

from case_eval.evaluators.domain.result import EvaluatorFailure
from case_eval.reporting.domain.aggregate import (
    ReportCaseAggregate,
    average_cases,
    average_from_aggregates,
)
from case_eval.reporting.domain.analyses import ReportAnalysis
from case_eval.reporting.domain.case import ReportCase, ReportCaseFailure


class ReportCaseGroup(BaseModel, frozen=True):
    """All runs of one source case in a repeated evaluation."""

    name: str
    inputs: Any
    metadata: Any = None
    expected_output: Any = None
    runs: list[ReportCase]
    failures: list[ReportCaseFailure]
    summary: ReportCaseAggregate


class EvaluationReport(BaseModel):
    """Cases and failures in submission order, plus report-level analyses.

    ``analyses`` and ``report_evaluator_failures`` are filled in after all
    cases have finished; nothing else mutates a report once it is built.
    """

    name: str
    cases: list[ReportCase] = Field(default_factory=list)
    failures: list[ReportCaseFailure] = Field(default_factory=list)
    analyses: list[ReportAnalysis] = Field(default_factory=list)
    report_evaluator_failures: list[EvaluatorFailure] = Field(default_factory=list)
    experiment_metadata: dict[str, Any] | None = None

    def case_groups(self) -> list[ReportCaseGroup] | None:
        """Group runs by source case; None when the evaluation did not repeat cases."""
        entries = [*self.cases, *self.failures]
        if not any(entry.source_case_name is not None for entry in entries):
            return None

        runs: dict[str, list[ReportCase]] = {}
        failures: dict[str, list[ReportCaseFailure]] = {}
        first_seen: dict[str, ReportCase | ReportCaseFailure] = {}
        for case in self.cases:
            key = case.source_case_name or case.name
            runs.setdefault(key, []).append(case)
            failures.setdefault(key, [])
            first_seen.setdefault(key, case)
        for failure in self.failures:
            key = failure.source_case_name or failure.name
            runs.setdefault(key, [])
            failures.setdefault(key, []).append(failure)
            first_seen.setdefault(key, failure)

        return [
            ReportCaseGroup(
                name=key,
                inputs=first.inputs,
                metadata=first.metadata,
                expected_output=first.expected_output,
                runs=runs[key],
                failures=failures[key],
                summary=average_cases(runs[key]),
            )
            for key, first in first_seen.items()
        ]

    def averages(self) -> ReportCaseAggregate | None:
        """Experiment-wide averages.

        With repeats, each source case counts once regardless of how many of its
        runs succeeded; groups with no successful run are left out.
        """
        groups = self.case_groups()
        if groups is not None:
            summaries = [group.summary for group in groups if group.runs]
            return average_from_aggregates(summaries) if summaries else None
        if self.cases:
            return average_cases(self.cases)
        return None
