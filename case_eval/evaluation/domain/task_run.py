"""TaskRun — per-unit accumulator for attributes and metrics recorded by the task."""

from contextvars import ContextVar, Token
from typing import Any

_CURRENT_TASK_RUN: ContextVar["TaskRun | None"] = ContextVar(
    "case_eval_current_task_run", default=None
)


class TaskRun:
    """Collects the attributes and metrics one task execution reports about itself.

    One instance exists per evaluation unit, so concurrent units never share one.
    """

    def __init__(self) -> None:
        self._attributes: dict[str, Any] = {}
        self._metrics: dict[str, int | float] = {}

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    @property
    def metrics(self) -> dict[str, int | float]:
        return dict(self._metrics)

    def record_attribute(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    def record_metric(self, name: str, value: int | float) -> None:
        self._metrics[name] = value

    def increment_metric(self, name: str, amount: int | float) -> None:
        """Add ``amount`` to a metric; a metric that would stay at zero is not recorded."""
        current = self._metrics.get(name, 0)
        if current == 0 and amount == 0:
            return
        self._metrics[name] = current + amount


def current_task_run() -> TaskRun | None:
    return _CURRENT_TASK_RUN.get()


def bind_task_run(task_run: TaskRun) -> Token["TaskRun | None"]:
    """Make ``task_run`` current for this context; returns a token for ``unbind_task_run``."""
    return _CURRENT_TASK_RUN.set(task_run)


def unbind_task_run(token: Token["TaskRun | None"]) -> None:
    _CURRENT_TASK_RUN.reset(token)


def set_eval_attribute(name: str, value: Any) -> None:
    """Record an attribute on the running case. No-op outside a task run."""
    task_run = _CURRENT_TASK_RUN.get()
    if task_run is not None:
        task_run.record_attribute(name=name, value=value)


def increment_eval_metric(name: str, amount: int | float) -> None:
    """Increment a metric on the running case. No-op outside a task run."""
    task_run = _CURRENT_TASK_RUN.get()
    if task_run is not None:
        task_run.increment_metric(name=name, amount=amount)
