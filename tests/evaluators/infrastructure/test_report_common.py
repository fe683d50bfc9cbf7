"""Tests for the built-in report evaluators."""

import pytest

from case_eval.evaluators.domain.report_evaluator import ReportEvaluatorContext
from case_eval.evaluators.infrastructure.report_common import (
    ConfusionMatrixEvaluator,
    PrecisionRecallEvaluator,
)
from case_eval.reporting.domain.report import EvaluationReport
from tests.reporting.cases import make_case


def _context(*cases) -> ReportEvaluatorContext:
    return ReportEvaluatorContext(name="classifier", report=EvaluationReport(name="classifier", cases=list(cases)))


class TestConfusionMatrixEvaluator:
    """Cases are counted by expected and predicted label."""

    def test_counts_output_against_expected_output(self) -> None:
        ctx = _context(
            make_case("a", output="cat", expected_output="cat"),
            make_case("b", output="dog", expected_output="cat"),
            make_case("c", output="dog", expected_output="dog"),
            make_case("d", output="dog"),
        )

        matrix = ConfusionMatrixEvaluator().evaluate(ctx)

        assert matrix.title == "Confusion Matrix"
        assert matrix.class_labels == ["cat", "dog"]
        assert matrix.matrix == [[1, 1], [0, 1]]

    def test_labels_from_metadata_and_evaluator_labels(self) -> None:
        ctx = _context(
            make_case("a", metadata={"gold": "spam"}, labels={"verdict": "spam"}),
            make_case("b", metadata={"gold": "ham"}, labels={"verdict": "spam"}),
        )
        evaluator = ConfusionMatrixEvaluator(
            predicted_from="labels",
            predicted_key="verdict",
            expected_from="metadata",
            expected_key="gold",
            title="Spam",
        )

        matrix = evaluator.evaluate(ctx)

        assert matrix.title == "Spam"
        assert matrix.class_labels == ["ham", "spam"]
        assert matrix.matrix == [[0, 1], [0, 1]]

    def test_labels_source_requires_key(self) -> None:
        ctx = _context(make_case("a", labels={"verdict": "spam"}))

        with pytest.raises(ValueError, match="a key is required"):
            ConfusionMatrixEvaluator(predicted_from="labels").evaluate(ctx)

    def test_no_labelled_cases_gives_empty_matrix(self) -> None:
        matrix = ConfusionMatrixEvaluator().evaluate(_context(make_case("a")))

        assert matrix.class_labels == []
        assert matrix.matrix == []


class TestPrecisionRecallEvaluator:
    """A threshold sweep over scores yields one precision-recall curve."""

    def test_curve_points_and_auc(self) -> None:
        ctx = _context(
            make_case("a", scores={"confidence": 0.9}, assertions={"correct": True}),
            make_case("b", scores={"confidence": 0.8}, assertions={"correct": False}),
            make_case("c", scores={"confidence": 0.3}, assertions={"correct": True}),
            make_case("d", assertions={"correct": True}),
        )
        evaluator = PrecisionRecallEvaluator(
            score_key="confidence",
            positive_from="assertions",
            positive_key="correct",
            n_thresholds=2,
        )

        result = evaluator.evaluate(ctx)

        [curve] = result.curves
        assert curve.name == "classifier"
        assert [(p.precision, p.recall) for p in curve.points] == [
            (pytest.approx(2 / 3), 1.0),
            (0.5, 0.5),
            (1.0, 0.5),
        ]
        assert curve.auc == pytest.approx(0.5 * (0.5 + 2 / 3) / 2)

    def test_scores_from_metrics_and_positive_from_expected_output(self) -> None:
        ctx = _context(
            make_case("a", metrics={"p": 0.7}, expected_output=True),
            make_case("b", metrics={"p": 0.7}, expected_output=False),
        )
        evaluator = PrecisionRecallEvaluator(
            score_key="p", positive_from="expected_output", score_from="metrics"
        )

        [curve] = evaluator.evaluate(ctx).curves

        assert len(curve.points) == 1
        assert curve.points[0].precision == 0.5
        assert curve.points[0].recall == 1.0

    def test_no_scored_cases_gives_no_curves(self) -> None:
        result = PrecisionRecallEvaluator(
            score_key="missing", positive_from="expected_output"
        ).evaluate(_context(make_case("a", expected_output=True)))

        assert result.curves == []

    def test_assertions_source_requires_key(self) -> None:
        ctx = _context(make_case("a", scores={"s": 1.0}))

        with pytest.raises(ValueError, match="positive_key is required"):
            PrecisionRecallEvaluator(score_key="s", positive_from="assertions").evaluate(ctx)
