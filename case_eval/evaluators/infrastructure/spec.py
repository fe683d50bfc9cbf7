"""Short-form (de)serialization of EvaluatorSpec for dataset files.

Accepted forms:
    ``"Name"``                 no arguments
    ``{"Name": arg}``          a single positional argument
    ``{"Name": {k: v, ...}}``  keyword arguments
"""

from collections.abc import Mapping
from typing import Any

from case_eval.evaluators.domain.result import EvaluatorSpec
from case_eval.evaluators.infrastructure.errors import InvalidEvaluatorSpecError

type SerializedEvaluatorSpec = str | dict[str, Any]


def serialize_evaluator_spec(spec: EvaluatorSpec) -> SerializedEvaluatorSpec:
    """Return the shortest form that deserializes back to an equivalent spec."""
    if spec.arguments is None:
        return spec.name
    if isinstance(spec.arguments, tuple):
        return {spec.name: spec.arguments[0]}
    return {spec.name: dict(spec.arguments)}


def deserialize_evaluator_spec(raw: Any) -> EvaluatorSpec:
    """Parse any accepted short form.

    A mapping value whose keys are all strings is read as keyword arguments;
    any other value is a single positional argument.

    Raises:
        InvalidEvaluatorSpecError: if ``raw`` is neither a string nor a single-key mapping.
    """
    if isinstance(raw, str):
        return EvaluatorSpec(name=raw, arguments=None)
    if not isinstance(raw, Mapping):
        raise InvalidEvaluatorSpecError(reason=f"expected a string or mapping, got {raw!r}")
    if len(raw) != 1:
        raise InvalidEvaluatorSpecError(
            reason=f"expected a single key naming the evaluator, found keys {list(raw)}"
        )

    name, value = next(iter(raw.items()))
    if not isinstance(name, str):
        raise InvalidEvaluatorSpecError(reason=f"evaluator name must be a string, got {name!r}")
    if value is None:
        return EvaluatorSpec(name=name, arguments=None)
    if isinstance(value, Mapping) and all(isinstance(key, str) for key in value):
        return EvaluatorSpec(name=name, arguments=dict(value))
    return EvaluatorSpec(name=name, arguments=(value,))
