"""Built-in evaluators available to every dataset and dataset file."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from case_eval.evaluators.domain.context import EvaluatorContext
from case_eval.evaluators.domain.evaluator import Evaluator, EvaluatorOutput
from case_eval.evaluators.domain.result import EvaluationReason
from case_eval.otel.domain.span_tree import SpanQuery


def _truncated_repr(value: Any, max_length: int = 100) -> str:
    text = repr(value)
    if len(text) > max_length:
        half = max_length // 2
        return f"{text[:half]}...{text[-half:]}"
    return text


@dataclass
class Equals(Evaluator):
    """Passes when the output equals ``value``."""

    value: Any
    evaluation_name: str | None = None

    def evaluate(self, ctx: EvaluatorContext) -> bool:
        return ctx.output == self.value


@dataclass
class EqualsExpected(Evaluator):
    """Passes when the output equals the case's expected output; skipped when there is none."""

    evaluation_name: str | None = None

    def evaluate(self, ctx: EvaluatorContext) -> EvaluatorOutput:
        if ctx.expected_output is None:
            return {}
        return ctx.output == ctx.expected_output


@dataclass
class Contains(Evaluator):
    """Passes when the output contains ``value``.

    Strings are checked by substring, mappings by key (or by sub-mapping when
    ``value`` is itself a mapping), and other containers by membership.
    """

    value: Any
    case_sensitive: bool = True
    as_strings: bool = False
    evaluation_name: str | None = None

    def evaluate(self, ctx: EvaluatorContext) -> EvaluationReason:
        output = ctx.output
        if self.as_strings or (isinstance(self.value, str) and isinstance(output, str)):
            return self._contains_string(output=str(output), expected=str(self.value))

        if isinstance(output, Mapping):
            return self._contains_mapping(output=output)

        try:
            found = self.value in output
        except TypeError as exc:
            return EvaluationReason(
                value=False, reason=f"Containment check failed: {exc}"
            )
        if not found:
            return EvaluationReason(
                value=False,
                reason=f"Output {_truncated_repr(output, 200)} does not contain provided value",
            )
        return EvaluationReason(value=True)

    def _contains_string(self, output: str, expected: str) -> EvaluationReason:
        if not self.case_sensitive:
            output = output.lower()
            expected = expected.lower()
        if expected not in output:
            return EvaluationReason(
                value=False,
                reason=(
                    f"Output string {_truncated_repr(output)} does not contain "
                    f"expected string {_truncated_repr(expected)}"
                ),
            )
        return EvaluationReason(value=True)

    def _contains_mapping(self, output: Mapping[Any, Any]) -> EvaluationReason:
        if isinstance(self.value, Mapping):
            for key, expected in self.value.items():
                if key not in output:
                    return EvaluationReason(
                        value=False,
                        reason=f"Output dictionary does not contain expected key {_truncated_repr(key, 30)}",
                    )
                if output[key] != expected:
                    return EvaluationReason(
                        value=False,
                        reason=(
                            f"Output dictionary has different value for key {_truncated_repr(key, 30)}: "
                            f"{_truncated_repr(output[key])} != {_truncated_repr(expected)}"
                        ),
                    )
            return EvaluationReason(value=True)

        try:
            found = self.value in output
        except TypeError as exc:
            return EvaluationReason(value=False, reason=f"Containment check failed: {exc}")
        if not found:
            return EvaluationReason(
                value=False,
                reason=f"Output {_truncated_repr(output, 200)} does not contain provided value as a key",
            )
        return EvaluationReason(value=True)


@dataclass
class IsInstance(Evaluator):
    """Passes when the output's class, or any of its base classes, is named ``type_name``."""

    type_name: str
    evaluation_name: str | None = None

    def evaluate(self, ctx: EvaluatorContext) -> EvaluationReason:
        output_type = type(ctx.output)
        if any(cls.__name__ == self.type_name for cls in output_type.__mro__):
            return EvaluationReason(value=True)
        return EvaluationReason(value=False, reason=f"output is of type {output_type.__name__}")


@dataclass
class MaxDuration(Evaluator):
    """Passes when the task ran for at most ``seconds``."""

    seconds: float | timedelta

    def evaluate(self, ctx: EvaluatorContext) -> bool:
        limit = self.seconds
        if isinstance(limit, timedelta):
            limit = limit.total_seconds()
        return ctx.duration <= limit


@dataclass
class HasMatchingSpan(Evaluator):
    """Passes when any span recorded during the task matches ``query``."""

    query: SpanQuery
    evaluation_name: str | None = None

    def evaluate(self, ctx: EvaluatorContext) -> bool:
        return ctx.span_tree.any(self.query)


DEFAULT_EVALUATORS: tuple[type[Evaluator], ...] = (
    Equals,
    EqualsExpected,
    Contains,
    IsInstance,
    MaxDuration,
    HasMatchingSpan,
)
