"""Evaluator registry — maps serialization names to evaluator classes and rebuilds instances from specs."""

from collections.abc import Iterable
from dataclasses import fields

from case_eval.evaluators.domain.evaluator import BaseEvaluator
from case_eval.evaluators.domain.result import EvaluatorSpec
from case_eval.evaluators.infrastructure.errors import (
    DuplicateEvaluatorNameError,
    EvaluatorInstantiationError,
    EvaluatorNotRegisteredError,
)

type EvaluatorRegistry[E: BaseEvaluator] = dict[str, type[E]]


def build_registry[E: BaseEvaluator](
    custom_types: Iterable[type[E]],
    default_types: Iterable[type[E]],
) -> dict[str, type[E]]:
    """Register custom types first, then fill in built-ins that are not overridden.

    Raises:
        DuplicateEvaluatorNameError: if two custom types share a serialization name.
    """
    registry: dict[str, type[E]] = {}
    for evaluator_type in custom_types:
        name = evaluator_type.get_serialization_name()
        if name in registry:
            raise DuplicateEvaluatorNameError(name=name)
        registry[name] = evaluator_type
    for evaluator_type in default_types:
        registry.setdefault(evaluator_type.get_serialization_name(), evaluator_type)
    return registry


def load_evaluator[E: BaseEvaluator](registry: dict[str, type[E]], spec: EvaluatorSpec) -> E:
    """Instantiate the evaluator a spec describes.

    ``as_spec`` always writes a mapping-valued first field in keyword form. For
    hand-written files, a keyword mapping whose keys are not all init fields of
    the target type is passed as a single positional argument instead.

    Raises:
        EvaluatorNotRegisteredError: if ``spec.name`` is not registered.
        EvaluatorInstantiationError: if the type rejects ``spec.arguments``.
    """
    evaluator_type = registry.get(spec.name)
    if evaluator_type is None:
        raise EvaluatorNotRegisteredError(name=spec.name, valid_choices=sorted(registry))

    arguments = spec.arguments
    if isinstance(arguments, dict):
        init_fields = {f.name for f in fields(evaluator_type) if f.init}
        if not set(arguments) <= init_fields:
            arguments = (arguments,)

    try:
        if arguments is None:
            return evaluator_type()
        if isinstance(arguments, tuple):
            return evaluator_type(*arguments)
        return evaluator_type(**arguments)
    except (TypeError, ValueError) as exc:
        raise EvaluatorInstantiationError(name=spec.name, reason=str(exc)) from exc
