"""Evaluator contract — per-case scoring components and their serializable identity."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Mapping
from dataclasses import MISSING, dataclass, fields
from typing import Any

from case_eval.evaluators.domain.context import EvaluatorContext
from case_eval.evaluators.domain.result import (
    EvaluationReason,
    EvaluationScalar,
    EvaluatorSpec,
)

type EvaluatorOutput = (
    EvaluationScalar
    | EvaluationReason
    | Mapping[str, EvaluationScalar | EvaluationReason]
)


@dataclass
class BaseEvaluator(ABC):
    """Shared naming and serialization behaviour for case and report evaluators.

    Subclasses are dataclasses; their init fields are the evaluator's arguments.
    """

    @classmethod
    def get_serialization_name(cls) -> str:
        """Name under which this evaluator is registered and serialized."""
        return cls.__name__

    def build_serialization_arguments(self) -> dict[str, Any]:
        """Return the init fields whose values differ from their defaults, in field order."""
        arguments: dict[str, Any] = {}
        for f in fields(self):
            if not f.init:
                continue
            value = getattr(self, f.name)
            if f.default is not MISSING and value == f.default:
                continue
            if f.default_factory is not MISSING and value == f.default_factory():
                continue
            arguments[f.name] = value
        return arguments

    def as_spec(self) -> EvaluatorSpec:
        arguments = self.build_serialization_arguments()
        if not arguments:
            return EvaluatorSpec(name=self.get_serialization_name(), arguments=None)

        init_fields = [f.name for f in fields(self) if f.init]
        # A lone mapping stays keyed so it cannot be read back as keyword arguments.
        if (
            len(arguments) == 1
            and init_fields
            and init_fields[0] in arguments
            and not isinstance(arguments[init_fields[0]], Mapping)
        ):
            return EvaluatorSpec(
                name=self.get_serialization_name(),
                arguments=(arguments[init_fields[0]],),
            )
        return EvaluatorSpec(name=self.get_serialization_name(), arguments=arguments)


@dataclass
class Evaluator(BaseEvaluator):
    """Scores one run of one case.

    ``evaluate`` may be sync or async and returns a scalar, an EvaluationReason,
    or a mapping of result names to either.
    """

    def get_default_evaluation_name(self) -> str:
        """Result name used when ``evaluate`` returns a single value.

        An ``evaluation_name`` field set to a string takes precedence over the
        serialization name.
        """
        evaluation_name = getattr(self, "evaluation_name", None)
        if isinstance(evaluation_name, str):
            return evaluation_name
        return self.get_serialization_name()

    @abstractmethod
    def evaluate(
        self, ctx: EvaluatorContext
    ) -> EvaluatorOutput | Awaitable[EvaluatorOutput]: ...
