"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol


class EvaluationObserver(Protocol):
    """Observer port emitting structured events during an evaluation run.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def evaluation_started(
        self,
        run_name: str,
        total_cases: int,
        repeat: int,
        total_units: int,
        max_concurrency: int | None,
    ) -> None: ...

    def evaluation_progress(self, run_name: str, completed: int, total: int) -> None: ...

    def evaluation_completed(
        self,
        run_name: str,
        total_cases: int,
        total_failures: int,
        elapsed_seconds: float,
    ) -> None: ...

    def unit_started(
        self, run_name: str, case_name: str, source_case_name: str | None
    ) -> None: ...

    def unit_completed(
        self,
        run_name: str,
        case_name: str,
        task_duration: float,
        evaluator_failures: int,
    ) -> None: ...

    def unit_failed(self, run_name: str, case_name: str, reason: str) -> None: ...

    def evaluator_failed(
        self, run_name: str, case_name: str, evaluator_name: str, reason: str
    ) -> None: ...

    def report_evaluator_failed(
        self, run_name: str, evaluator_name: str, reason: str
    ) -> None: ...
