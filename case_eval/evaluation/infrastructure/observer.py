"""StructlogEvaluationObserver — production observer that delegates to structlog."""

import structlog


class StructlogEvaluationObserver:
    """Logs evaluation domain events to structlog.

    Run-level events are logged at info, per-unit events at debug.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def evaluation_started(
        self,
        run_name: str,
        total_cases: int,
        repeat: int,
        total_units: int,
        max_concurrency: int | None,
    ) -> None:
        self._log.info(
            "evaluation.started",
            run_name=run_name,
            total_cases=total_cases,
            repeat=repeat,
            total_units=total_units,
            max_concurrency=max_concurrency,
        )

    def evaluation_progress(self, run_name: str, completed: int, total: int) -> None:
        self._log.debug(
            "evaluation.progress",
            run_name=run_name,
            completed=completed,
            total=total,
            percent=round(100.0 * completed / total, 1) if total else 0.0,
        )

    def evaluation_completed(
        self,
        run_name: str,
        total_cases: int,
        total_failures: int,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "evaluation.completed",
            run_name=run_name,
            total_cases=total_cases,
            total_failures=total_failures,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def unit_started(
        self, run_name: str, case_name: str, source_case_name: str | None
    ) -> None:
        self._log.debug(
            "evaluation.unit.started",
            run_name=run_name,
            case_name=case_name,
            source_case_name=source_case_name,
        )

    def unit_completed(
        self,
        run_name: str,
        case_name: str,
        task_duration: float,
        evaluator_failures: int,
    ) -> None:
        self._log.debug(
            "evaluation.unit.completed",
            run_name=run_name,
            case_name=case_name,
            task_duration=round(task_duration, 4),
            evaluator_failures=evaluator_failures,
        )

    def unit_failed(self, run_name: str, case_name: str, reason: str) -> None:
        self._log.error(
            "evaluation.unit.failed",
            run_name=run_name,
            case_name=case_name,
            reason=reason,
        )

    def evaluator_failed(
        self, run_name: str, case_name: str, evaluator_name: str, reason: str
    ) -> None:
        self._log.warning(
            "evaluation.evaluator.failed",
            run_name=run_name,
            case_name=case_name,
            evaluator_name=evaluator_name,
            reason=reason,
        )

    def report_evaluator_failed(
        self, run_name: str, evaluator_name: str, reason: str
    ) -> None:
        self._log.warning(
            "evaluation.report_evaluator.failed",
            run_name=run_name,
            evaluator_name=evaluator_name,
            reason=reason,
        )
