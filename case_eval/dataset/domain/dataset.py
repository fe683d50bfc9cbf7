"""Dataset — an ordered collection of cases plus the evaluators applied to all of them."""

import asyncio
from typing import Any

from case_eval.dataset.domain.case import Case
from case_eval.dataset.domain.errors import CaseNotFoundError, DuplicateCaseNameError
from case_eval.evaluation.application.runner import EvaluationRunner, Task
from case_eval.evaluation.domain.observer import EvaluationObserver
from case_eval.evaluation.infrastructure.observer import StructlogEvaluationObserver
from case_eval.evaluators.domain.evaluator import Evaluator
from case_eval.evaluators.domain.report_evaluator import ReportEvaluator
from case_eval.otel.domain.capture import SpanCapture
from case_eval.otel.infrastructure.otel_capture import OtelSpanCapture
from case_eval.reporting.domain.report import EvaluationReport


class Dataset:
    """Cases to evaluate a task against, with dataset-wide evaluators.

    Named cases are unique at all times. Unnamed cases are reported as
    ``"Case N"`` by position. Mutating a dataset while one of its evaluations
    is in flight is not supported.
    """

    def __init__(
        self,
        cases: list[Case],
        name: str | None = None,
        evaluators: list[Evaluator] | None = None,
        report_evaluators: list[ReportEvaluator] | None = None,
    ) -> None:
        """
        Raises:
            DuplicateCaseNameError: if two cases share a name.
        """
        self.name = name
        self.cases: list[Case] = []
        self.evaluators: list[Evaluator] = list(evaluators or [])
        self.report_evaluators: list[ReportEvaluator] = list(report_evaluators or [])
        for case in cases:
            self.add_case(case)

    def add_case(self, case: Case) -> None:
        """Append a case.

        Raises:
            DuplicateCaseNameError: if a case with the same name already exists.
        """
        if case.name is not None and any(c.name == case.name for c in self.cases):
            raise DuplicateCaseNameError(case_name=case.name)
        self.cases.append(case)

    def add_evaluator(self, evaluator: Evaluator, specific_case: str | None = None) -> None:
        """Add a dataset-wide evaluator, or attach it only to the case named ``specific_case``.

        Raises:
            CaseNotFoundError: if ``specific_case`` names no case in the dataset.
        """
        if specific_case is None:
            self.evaluators.append(evaluator)
            return
        matching = [case for case in self.cases if case.name == specific_case]
        if not matching:
            raise CaseNotFoundError(case_name=specific_case)
        for case in matching:
            case.evaluators.append(evaluator)

    def add_report_evaluator(self, evaluator: ReportEvaluator) -> None:
        self.report_evaluators.append(evaluator)

    async def evaluate(
        self,
        task: Task,
        *,
        name: str | None = None,
        max_concurrency: int | None = None,
        repeat: int = 1,
        metadata: dict[str, Any] | None = None,
        observer: EvaluationObserver | None = None,
        span_capture: SpanCapture | None = None,
    ) -> EvaluationReport:
        """Run ``task`` over every case (``repeat`` times each) and return the report.

        ``name`` defaults to the task's ``__name__``. ``max_concurrency`` of None
        means unbounded. Events go to a structlog observer unless one is given,
        and spans are captured from the global OpenTelemetry tracer provider
        unless a capture is given.

        Raises:
            InvalidRepeatError: if repeat < 1.
            InvalidMaxConcurrencyError: if max_concurrency is < 1.
        """
        runner = EvaluationRunner(
            observer=observer if observer is not None else StructlogEvaluationObserver(),
            span_capture=span_capture if span_capture is not None else OtelSpanCapture(),
        )
        return await runner.run(
            task=task,
            cases=list(self.cases),
            evaluators=list(self.evaluators),
            report_evaluators=list(self.report_evaluators),
            name=name,
            max_concurrency=max_concurrency,
            repeat=repeat,
            metadata=metadata,
        )

    def evaluate_sync(
        self,
        task: Task,
        *,
        name: str | None = None,
        max_concurrency: int | None = None,
        repeat: int = 1,
        metadata: dict[str, Any] | None = None,
        observer: EvaluationObserver | None = None,
        span_capture: SpanCapture | None = None,
    ) -> EvaluationReport:
        """Blocking variant of ``evaluate`` for callers without a running event loop."""
        return asyncio.run(
            self.evaluate(
                task,
                name=name,
                max_concurrency=max_concurrency,
                repeat=repeat,
                metadata=metadata,
                observer=observer,
                span_capture=span_capture,
            )
        )

    def __len__(self) -> int:
        return len(self.cases)
