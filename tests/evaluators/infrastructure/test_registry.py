"""Tests for the evaluator registry and the short-form spec codec."""

from dataclasses import dataclass

import pytest

from case_eval.evaluators.domain.result import EvaluatorSpec
from case_eval.evaluators.infrastructure.common import (
    DEFAULT_EVALUATORS,
    Contains,
    Equals,
    HasMatchingSpan,
    MaxDuration,
)
from case_eval.evaluators.infrastructure.errors import (
    DuplicateEvaluatorNameError,
    EvaluatorInstantiationError,
    EvaluatorNotRegisteredError,
    InvalidEvaluatorSpecError,
)
from case_eval.evaluators.infrastructure.registry import build_registry, load_evaluator
from case_eval.evaluators.infrastructure.spec import (
    deserialize_evaluator_spec,
    serialize_evaluator_spec,
)
from tests.evaluators.fake_evaluators import ConstantEvaluator


@dataclass
class Equals2(Equals):
    """Custom evaluator registered under the built-in Equals name."""

    @classmethod
    def get_serialization_name(cls) -> str:
        return "Equals"


class TestSpecSerialization:
    """The short forms cover no arguments, one positional argument and keywords."""

    def test_no_arguments_is_bare_name(self) -> None:
        assert serialize_evaluator_spec(EvaluatorSpec(name="EqualsExpected")) == "EqualsExpected"

    def test_single_argument_is_name_to_value(self) -> None:
        spec = EvaluatorSpec(name="Equals", arguments=(3,))

        assert serialize_evaluator_spec(spec) == {"Equals": 3}

    def test_keyword_arguments_are_name_to_mapping(self) -> None:
        spec = EvaluatorSpec(name="Contains", arguments={"value": "x", "as_strings": True})

        assert serialize_evaluator_spec(spec) == {"Contains": {"value": "x", "as_strings": True}}

    def test_deserializes_each_form(self) -> None:
        assert deserialize_evaluator_spec("EqualsExpected") == EvaluatorSpec(name="EqualsExpected")
        assert deserialize_evaluator_spec({"EqualsExpected": None}) == EvaluatorSpec(
            name="EqualsExpected"
        )
        assert deserialize_evaluator_spec({"Equals": [1, 2]}) == EvaluatorSpec(
            name="Equals", arguments=([1, 2],)
        )
        assert deserialize_evaluator_spec({"Contains": {"value": "x"}}) == EvaluatorSpec(
            name="Contains", arguments={"value": "x"}
        )

    @pytest.mark.parametrize(
        "raw",
        [42, {"A": 1, "B": 2}, {}, {1: "x"}],
    )
    def test_rejects_malformed_specs(self, raw: object) -> None:
        with pytest.raises(InvalidEvaluatorSpecError, match="Failed to parse evaluator spec"):
            deserialize_evaluator_spec(raw)


class TestBuildRegistry:
    """Custom types are registered first and may shadow built-ins."""

    def test_defaults_are_registered_by_class_name(self) -> None:
        registry = build_registry(custom_types=(), default_types=DEFAULT_EVALUATORS)

        assert registry["Equals"] is Equals
        assert set(registry) == {t.__name__ for t in DEFAULT_EVALUATORS}

    def test_custom_type_overrides_builtin(self) -> None:
        registry = build_registry(custom_types=[Equals2], default_types=DEFAULT_EVALUATORS)

        assert registry["Equals"] is Equals2

    def test_duplicate_custom_names_raise(self) -> None:
        with pytest.raises(DuplicateEvaluatorNameError, match="'ConstantEvaluator'"):
            build_registry(
                custom_types=[ConstantEvaluator, ConstantEvaluator],
                default_types=DEFAULT_EVALUATORS,
            )


class TestLoadEvaluator:
    """Specs are turned back into evaluator instances."""

    @pytest.fixture
    def registry(self):
        return build_registry(custom_types=[ConstantEvaluator], default_types=DEFAULT_EVALUATORS)

    @pytest.mark.parametrize(
        "evaluator",
        [
            Equals(value=3),
            Equals(value={"a": 1}),
            Equals(value={}),
            Equals(value={"value": 1}),
            Contains(value="x", case_sensitive=False),
            MaxDuration(seconds=2.5),
            HasMatchingSpan(query={"name_equals": "retrieve"}),
            HasMatchingSpan(query={"name_equals": "retrieve"}, evaluation_name="retrieved"),
            ConstantEvaluator(value=0.5, evaluation_name="constant"),
        ],
    )
    def test_short_form_round_trip(self, registry, evaluator) -> None:
        raw = serialize_evaluator_spec(evaluator.as_spec())

        loaded = load_evaluator(registry, deserialize_evaluator_spec(raw))

        assert loaded == evaluator
        assert loaded.as_spec() == evaluator.as_spec()

    def test_unknown_name_lists_valid_choices(self, registry) -> None:
        with pytest.raises(EvaluatorNotRegisteredError) as exc_info:
            load_evaluator(registry, EvaluatorSpec(name="Nope"))

        assert exc_info.value.valid_choices == sorted(registry)
        assert "'Nope' is not in the registry" in str(exc_info.value)

    def test_missing_required_argument_raises(self, registry) -> None:
        spec = EvaluatorSpec(name="Equals", arguments={"evaluation_name": "x"})

        with pytest.raises(EvaluatorInstantiationError, match="Failed to instantiate evaluator 'Equals'"):
            load_evaluator(registry, spec)
