"""Tests for the error hierarchy."""

import pytest

from case_eval.config.infrastructure.errors import ConfigLoadError, MissingEnvVarsError
from case_eval.core.errors import CaseEvalError
from case_eval.dataset.domain.errors import CaseNotFoundError, DuplicateCaseNameError
from case_eval.dataset.infrastructure.errors import DatasetLoadError
from case_eval.evaluation.domain.errors import InvalidMaxConcurrencyError, InvalidRepeatError
from case_eval.evaluators.infrastructure.errors import (
    EvaluatorNotRegisteredError,
    JudgeInvocationError,
)
from case_eval.otel.domain.errors import SpanTreeRecordingError


class TestErrorHierarchy:
    """Every library error derives from CaseEvalError."""

    @pytest.mark.parametrize(
        "error",
        [
            InvalidRepeatError(repeat=0),
            InvalidMaxConcurrencyError(max_concurrency=0),
            DuplicateCaseNameError(case_name="a"),
            CaseNotFoundError(case_name="a"),
            DatasetLoadError(reason="bad"),
            JudgeInvocationError(reason="bad"),
            SpanTreeRecordingError(reason="bad"),
            MissingEnvVarsError(missing_vars=["A"]),
        ],
    )
    def test_is_case_eval_error(self, error: CaseEvalError) -> None:
        assert isinstance(error, CaseEvalError)
        assert str(error).startswith("Failed to ")


class TestErrorMessages:
    """Messages carry the details needed to act on them."""

    def test_missing_env_vars_are_sorted(self) -> None:
        error = MissingEnvVarsError(missing_vars=["B", "A"])

        assert str(error) == "Failed to load config: missing environment variables: A, B"

    def test_not_registered_lists_choices(self) -> None:
        error = EvaluatorNotRegisteredError(name="Nope", valid_choices=["A", "B"])

        assert "'Nope'" in str(error)
        assert "Valid choices: 'A', 'B'" in str(error)

    def test_config_load_error_names_path(self, tmp_path) -> None:
        error = ConfigLoadError(path=tmp_path / "missing.yaml")

        assert "file not found" in str(error)
        assert "missing.yaml" in str(error)
