"""EvaluatorContext — everything an evaluator may inspect about one run of a case."""

from dataclasses import dataclass, field
from typing import Any

from case_eval.otel.domain.errors import SpanTreeRecordingError
from case_eval.otel.domain.span_tree import SpanTree


@dataclass(frozen=True, kw_only=True)
class EvaluatorContext:
    """Read-only view of a single task run handed to each evaluator.

    ``name`` is the case's own name and may be None for unnamed cases.
    ``duration`` is the task's wall-clock time in seconds, excluding evaluators.
    """

    name: str | None
    inputs: Any
    metadata: Any
    expected_output: Any
    output: Any
    duration: float
    attributes: dict[str, Any] = field(default_factory=dict)
    metrics: dict[str, int | float] = field(default_factory=dict)
    span_tree_or_error: SpanTree | SpanTreeRecordingError = field(repr=False)

    @property
    def span_tree(self) -> SpanTree:
        """The spans recorded while the task ran.

        Raises:
            SpanTreeRecordingError: if spans could not be recorded for this run.
        """
        if isinstance(self.span_tree_or_error, SpanTreeRecordingError):
            raise self.span_tree_or_error
        return self.span_tree_or_error
