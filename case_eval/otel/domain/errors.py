"""Error types for span capture."""

from case_eval.core.errors import CaseEvalError


class SpanTreeRecordingError(CaseEvalError):
    """Stands in for a span tree that could not be recorded for a run.

    Stored on the evaluator context and raised only when an evaluator reads
    ``ctx.span_tree``.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to record span tree: {reason}")
