"""EvaluationRunner — runs a task over every case of a dataset and assembles the report."""

import asyncio
import contextlib
import inspect
import time
from collections.abc import Callable
from typing import Any

from case_eval.dataset.domain.case import Case
from case_eval.evaluation.domain.errors import InvalidMaxConcurrencyError
from case_eval.evaluation.domain.observer import EvaluationObserver
from case_eval.evaluation.domain.results import dedupe_result_names, partition_results
from case_eval.evaluation.domain.task_run import TaskRun, bind_task_run, unbind_task_run
from case_eval.evaluation.domain.unit import EvaluationUnit, build_units
from case_eval.evaluators.application.run_evaluator import (
    format_exception_message,
    format_exception_stacktrace,
    run_evaluator,
)
from case_eval.evaluators.application.run_report_evaluators import run_report_evaluators
from case_eval.evaluators.domain.context import EvaluatorContext
from case_eval.evaluators.domain.evaluator import Evaluator
from case_eval.evaluators.domain.report_evaluator import (
    ReportEvaluator,
    ReportEvaluatorContext,
)
from case_eval.evaluators.domain.result import EvaluationResult, EvaluatorFailure
from case_eval.otel.domain.capture import SpanCapture
from case_eval.otel.domain.errors import SpanTreeRecordingError
from case_eval.otel.domain.span_tree import SpanTree
from case_eval.reporting.domain.case import ReportCase, ReportCaseFailure
from case_eval.reporting.domain.report import EvaluationReport

type Task = Callable[..., Any]


def _accepts_task_run(task: Task) -> bool:
    try:
        parameters = inspect.signature(task).parameters
    except (TypeError, ValueError):
        return False
    return "task_run" in parameters


async def _call_task(task: Task, inputs: Any, task_run: TaskRun) -> Any:
    """Invoke the task with the case inputs.

    Coroutine functions are awaited on the loop; plain callables run in a worker
    thread, which inherits the current context and so the bound TaskRun.
    """
    kwargs = {"task_run": task_run} if _accepts_task_run(task) else {}
    if inspect.iscoroutinefunction(task):
        return await task(inputs, **kwargs)
    output = await asyncio.to_thread(task, inputs, **kwargs)
    if inspect.isawaitable(output):
        output = await output
    return output


def default_run_name(task: Task) -> str:
    return getattr(task, "__name__", None) or "task"


class EvaluationRunner:
    """Runs every (case, repeat) unit of an evaluation and builds the EvaluationReport.

    Units run concurrently, at most ``max_concurrency`` at a time when a bound
    is given. A failing task fails only its own unit, and a failing evaluator
    only its own results, so a report is always produced once preconditions hold.
    """

    def __init__(self, observer: EvaluationObserver, span_capture: SpanCapture) -> None:
        self._observer = observer
        self._span_capture = span_capture

    async def run(
        self,
        task: Task,
        cases: list[Case],
        evaluators: list[Evaluator],
        report_evaluators: list[ReportEvaluator],
        name: str | None = None,
        max_concurrency: int | None = None,
        repeat: int = 1,
        metadata: dict[str, Any] | None = None,
    ) -> EvaluationReport:
        """Execute the evaluation and return its report.

        Cases and failures in the report keep submission order (case-major,
        repeat-minor), regardless of the order units finish in.

        Raises:
            InvalidRepeatError: if repeat < 1.
            InvalidMaxConcurrencyError: if max_concurrency is given and < 1.
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise InvalidMaxConcurrencyError(max_concurrency=max_concurrency)
        units = build_units(cases=cases, repeat=repeat)
        run_name = name if name is not None else default_run_name(task)

        self._observer.evaluation_started(
            run_name=run_name,
            total_cases=len(cases),
            repeat=repeat,
            total_units=len(units),
            max_concurrency=max_concurrency,
        )
        started_at = time.perf_counter()

        limiter = (
            asyncio.Semaphore(max_concurrency) if max_concurrency is not None else None
        )
        completed_count: list[int] = [0]
        progress_lock = asyncio.Lock()

        async with asyncio.TaskGroup() as tg:
            pending = [
                tg.create_task(
                    self._run_one_unit(
                        limiter=limiter,
                        run_name=run_name,
                        unit=unit,
                        task=task,
                        dataset_evaluators=evaluators,
                        total_units=len(units),
                        completed_count=completed_count,
                        progress_lock=progress_lock,
                    )
                )
                for unit in units
            ]
        outcomes = [t.result() for t in pending]

        report = EvaluationReport(
            name=run_name,
            cases=[o for o in outcomes if isinstance(o, ReportCase)],
            failures=[o for o in outcomes if isinstance(o, ReportCaseFailure)],
            experiment_metadata=metadata,
        )

        if report_evaluators:
            failures = await run_report_evaluators(
                report_evaluators=report_evaluators,
                ctx=ReportEvaluatorContext(
                    name=run_name, report=report, experiment_metadata=metadata
                ),
                report=report,
            )
            for failure in failures:
                self._observer.report_evaluator_failed(
                    run_name=run_name,
                    evaluator_name=failure.name,
                    reason=failure.error_message,
                )

        self._observer.evaluation_completed(
            run_name=run_name,
            total_cases=len(report.cases),
            total_failures=len(report.failures),
            elapsed_seconds=time.perf_counter() - started_at,
        )
        return report

    async def _run_one_unit(
        self,
        limiter: asyncio.Semaphore | None,
        run_name: str,
        unit: EvaluationUnit,
        task: Task,
        dataset_evaluators: list[Evaluator],
        total_units: int,
        completed_count: list[int],
        progress_lock: asyncio.Lock,
    ) -> ReportCase | ReportCaseFailure:
        """Execute one unit while holding a concurrency slot, then report progress."""
        async with limiter if limiter is not None else contextlib.nullcontext():
            self._observer.unit_started(
                run_name=run_name,
                case_name=unit.report_name,
                source_case_name=unit.source_case_name,
            )
            outcome = await self._execute_unit(
                run_name=run_name,
                unit=unit,
                task=task,
                dataset_evaluators=dataset_evaluators,
            )

        async with progress_lock:
            completed_count[0] += 1
            self._observer.evaluation_progress(
                run_name=run_name,
                completed=completed_count[0],
                total=total_units,
            )
        return outcome

    async def _execute_unit(
        self,
        run_name: str,
        unit: EvaluationUnit,
        task: Task,
        dataset_evaluators: list[Evaluator],
    ) -> ReportCase | ReportCaseFailure:
        case = unit.case
        task_run = TaskRun()

        async def invoke() -> Any:
            token = bind_task_run(task_run)
            try:
                return await _call_task(task=task, inputs=case.inputs, task_run=task_run)
            finally:
                unbind_task_run(token)

        started_at = time.perf_counter()
        try:
            output, span_tree_or_error = await self._span_capture.capture(invoke)
            task_duration = time.perf_counter() - started_at
            return await self._score_unit(
                run_name=run_name,
                unit=unit,
                task_run=task_run,
                output=output,
                span_tree_or_error=span_tree_or_error,
                dataset_evaluators=dataset_evaluators,
                started_at=started_at,
                task_duration=task_duration,
            )
        except Exception as exc:
            reason = format_exception_message(exc)
            self._observer.unit_failed(
                run_name=run_name, case_name=unit.report_name, reason=reason
            )
            return ReportCaseFailure(
                name=unit.report_name,
                inputs=case.inputs,
                metadata=case.metadata,
                expected_output=case.expected_output,
                error_message=reason,
                error_stacktrace=format_exception_stacktrace(exc),
                source_case_name=unit.source_case_name,
            )

    async def _score_unit(
        self,
        run_name: str,
        unit: EvaluationUnit,
        task_run: TaskRun,
        output: Any,
        span_tree_or_error: SpanTree | SpanTreeRecordingError,
        dataset_evaluators: list[Evaluator],
        started_at: float,
        task_duration: float,
    ) -> ReportCase:
        case = unit.case
        ctx = EvaluatorContext(
            name=case.name,
            inputs=case.inputs,
            metadata=case.metadata,
            expected_output=case.expected_output,
            output=output,
            duration=task_duration,
            attributes=task_run.attributes,
            metrics=task_run.metrics,
            span_tree_or_error=span_tree_or_error,
        )

        # Case-specific evaluators first, then dataset-wide ones.
        evaluators = [*case.evaluators, *dataset_evaluators]
        evaluator_outcomes = await asyncio.gather(
            *(run_evaluator(evaluator=evaluator, ctx=ctx) for evaluator in evaluators)
        )

        results: list[EvaluationResult] = []
        evaluator_failures: list[EvaluatorFailure] = []
        for evaluator_outcome in evaluator_outcomes:
            if isinstance(evaluator_outcome, EvaluatorFailure):
                evaluator_failures.append(evaluator_outcome)
                self._observer.evaluator_failed(
                    run_name=run_name,
                    case_name=unit.report_name,
                    evaluator_name=evaluator_outcome.name,
                    reason=evaluator_outcome.error_message,
                )
            else:
                results.extend(evaluator_outcome)

        scores, labels, assertions = partition_results(dedupe_result_names(results))
        report_case = ReportCase(
            name=unit.report_name,
            inputs=case.inputs,
            metadata=case.metadata,
            expected_output=case.expected_output,
            output=output,
            metrics=task_run.metrics,
            attributes=task_run.attributes,
            scores=scores,
            labels=labels,
            assertions=assertions,
            task_duration=task_duration,
            total_duration=time.perf_counter() - started_at,
            source_case_name=unit.source_case_name,
            evaluator_failures=evaluator_failures,
        )

        self._observer.unit_completed(
            run_name=run_name,
            case_name=unit.report_name,
            task_duration=task_duration,
            evaluator_failures=len(evaluator_failures),
        )
        return report_case
