"""Value objects produced by evaluators and by the evaluator runner."""

from typing import Any

from pydantic import BaseModel

type EvaluationScalar = bool | int | float | str


class EvaluatorSpec(BaseModel, frozen=True):
    """Serializable description of an evaluator: its registry name and arguments.

    ``arguments`` is ``None`` when every field holds its default, a 1-tuple when
    only the first field differs from its default, and a keyword mapping otherwise.
    """

    name: str
    arguments: tuple[Any] | dict[str, Any] | None = None


class EvaluationReason(BaseModel, frozen=True):
    """A scalar evaluation value paired with an optional human-readable reason."""

    value: EvaluationScalar
    reason: str | None = None


class EvaluationResult(BaseModel, frozen=True):
    """One named outcome produced by an evaluator for one run of a case."""

    name: str
    value: EvaluationScalar
    reason: str | None
    source: EvaluatorSpec

    def with_name(self, name: str) -> "EvaluationResult":
        return self.model_copy(update={"name": name})


class EvaluatorFailure(BaseModel, frozen=True):
    """Records an evaluator that raised instead of returning a result."""

    name: str
    error_message: str
    error_stacktrace: str
    source: EvaluatorSpec
