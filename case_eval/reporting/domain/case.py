"""Per-run report entries: a completed ReportCase or a ReportCaseFailure."""

from typing import Any

from pydantic import BaseModel, Field

from case_eval.evaluators.domain.result import EvaluationResult, EvaluatorFailure


class ReportCase(BaseModel, frozen=True):
    """Outcome of one run whose task completed.

    Results are partitioned by value type, so a result name appears in at most
    one of ``scores`` (numbers), ``labels`` (strings) and ``assertions`` (booleans).
    ``source_case_name`` is set only when the evaluation repeated each case.
    """

    name: str
    inputs: Any
    metadata: Any = None
    expected_output: Any = None
    output: Any = None
    metrics: dict[str, int | float] = Field(default_factory=dict)
    attributes: dict[str, Any] = Field(default_factory=dict)
    scores: dict[str, EvaluationResult] = Field(default_factory=dict)
    labels: dict[str, EvaluationResult] = Field(default_factory=dict)
    assertions: dict[str, EvaluationResult] = Field(default_factory=dict)
    task_duration: float
    total_duration: float
    source_case_name: str | None = None
    evaluator_failures: list[EvaluatorFailure] = Field(default_factory=list)


class ReportCaseFailure(BaseModel, frozen=True):
    """Outcome of one run whose task raised; no evaluators ran for it."""

    name: str
    inputs: Any
    metadata: Any = None
    expected_output: Any = None
    error_message: str
    error_stacktrace: str
    source_case_name: str | None = None
