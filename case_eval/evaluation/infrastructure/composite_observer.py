"""CompositeEvaluationObserver — fans out all events to a list of observers."""

from case_eval.evaluation.domain.observer import EvaluationObserver


class CompositeEvaluationObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[EvaluationObserver]) -> None:
        self._observers = observers

    def evaluation_started(
        self,
        run_name: str,
        total_cases: int,
        repeat: int,
        total_units: int,
        max_concurrency: int | None,
    ) -> None:
        for obs in self._observers:
            obs.evaluation_started(
                run_name=run_name,
                total_cases=total_cases,
                repeat=repeat,
                total_units=total_units,
                max_concurrency=max_concurrency,
            )

    def evaluation_progress(self, run_name: str, completed: int, total: int) -> None:
        for obs in self._observers:
            obs.evaluation_progress(run_name=run_name, completed=completed, total=total)

    def evaluation_completed(
        self,
        run_name: str,
        total_cases: int,
        total_failures: int,
        elapsed_seconds: float,
    ) -> None:
        for obs in self._observers:
            obs.evaluation_completed(
                run_name=run_name,
                total_cases=total_cases,
                total_failures=total_failures,
                elapsed_seconds=elapsed_seconds,
            )

    def unit_started(
        self, run_name: str, case_name: str, source_case_name: str | None
    ) -> None:
        for obs in self._observers:
            obs.unit_started(
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
        for obs in self._observers:
            obs.unit_completed(
                run_name=run_name,
                case_name=case_name,
                task_duration=task_duration,
                evaluator_failures=evaluator_failures,
            )

    def unit_failed(self, run_name: str, case_name: str, reason: str) -> None:
        for obs in self._observers:
            obs.unit_failed(run_name=run_name, case_name=case_name, reason=reason)

    def evaluator_failed(
        self, run_name: str, case_name: str, evaluator_name: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.evaluator_failed(
                run_name=run_name,
                case_name=case_name,
                evaluator_name=evaluator_name,
                reason=reason,
            )

    def report_evaluator_failed(
        self, run_name: str, evaluator_name: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.report_evaluator_failed(
                run_name=run_name,
                evaluator_name=evaluator_name,
                reason=reason,
            )
