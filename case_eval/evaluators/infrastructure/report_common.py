"""Built-in report evaluators: confusion matrix and precision-recall curve."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

from case_eval.evaluators.domain.report_evaluator import (
    ReportEvaluator,
    ReportEvaluatorContext,
)
from case_eval.reporting.domain.analyses import (
    ConfusionMatrix,
    PrecisionRecall,
    PrecisionRecallCurve,
    PrecisionRecallPoint,
)
from case_eval.reporting.domain.case import ReportCase

type LabelSource = Literal["expected_output", "output", "metadata", "labels"]


def _extract_label(case: ReportCase, source: LabelSource, key: str | None) -> str | None:
    """Read a class label from one case; None means the case is skipped."""
    match source:
        case "expected_output":
            return None if case.expected_output is None else str(case.expected_output)
        case "output":
            return None if case.output is None else str(case.output)
        case "metadata":
            if key is None:
                return None if case.metadata is None else str(case.metadata)
            if not isinstance(case.metadata, Mapping):
                return None
            value = case.metadata.get(key)
            return None if value is None else str(value)
        case "labels":
            if key is None:
                raise ValueError("a key is required to read class labels from 'labels'")
            result = case.labels.get(key)
            return None if result is None else str(result.value)
    raise ValueError(f"unknown label source: {source!r}")


@dataclass
class ConfusionMatrixEvaluator(ReportEvaluator):
    """Counts cases by (expected, predicted) class label.

    Labels on both axes are the sorted union of every observed label. Cases
    missing either label are left out.
    """

    predicted_from: LabelSource = "output"
    predicted_key: str | None = None
    expected_from: LabelSource = "expected_output"
    expected_key: str | None = None
    title: str = "Confusion Matrix"

    def evaluate(self, ctx: ReportEvaluatorContext) -> ConfusionMatrix:
        pairs: list[tuple[str, str]] = []
        for case in ctx.report.cases:
            predicted = _extract_label(case, self.predicted_from, self.predicted_key)
            expected = _extract_label(case, self.expected_from, self.expected_key)
            if predicted is None or expected is None:
                continue
            pairs.append((expected, predicted))

        class_labels = sorted({label for pair in pairs for label in pair})
        index = {label: i for i, label in enumerate(class_labels)}
        matrix = [[0] * len(class_labels) for _ in class_labels]
        for expected, predicted in pairs:
            matrix[index[expected]][index[predicted]] += 1

        return ConfusionMatrix(title=self.title, class_labels=class_labels, matrix=matrix)


@dataclass
class PrecisionRecallEvaluator(ReportEvaluator):
    """Sweeps a score threshold and reports precision and recall at each step.

    The area under the curve is computed with the trapezoidal rule over recall.
    """

    score_key: str
    positive_from: Literal["expected_output", "assertions", "labels"]
    positive_key: str | None = None
    score_from: Literal["scores", "metrics"] = "scores"
    title: str = "Precision-Recall Curve"
    n_thresholds: int = 100

    def evaluate(self, ctx: ReportEvaluatorContext) -> PrecisionRecall:
        scored: list[tuple[float, bool]] = []
        for case in ctx.report.cases:
            score = self._score(case)
            positive = self._is_positive(case)
            if score is None or positive is None:
                continue
            scored.append((score, positive))

        if not scored:
            return PrecisionRecall(title=self.title, curves=[])

        scores = [score for score, _ in scored]
        low, high = min(scores), max(scores)
        if low == high:
            thresholds = [low]
        else:
            step = (high - low) / self.n_thresholds
            thresholds = [low + i * step for i in range(self.n_thresholds + 1)]

        points: list[PrecisionRecallPoint] = []
        for threshold in thresholds:
            tp = sum(1 for s, p in scored if s >= threshold and p)
            fp = sum(1 for s, p in scored if s >= threshold and not p)
            fn = sum(1 for s, p in scored if s < threshold and p)
            points.append(
                PrecisionRecallPoint(
                    threshold=threshold,
                    precision=tp / (tp + fp) if tp + fp else 1.0,
                    recall=tp / (tp + fn) if tp + fn else 0.0,
                )
            )

        auc = sum(
            abs(curr.recall - prev.recall) * (curr.precision + prev.precision) / 2
            for prev, curr in zip(points, points[1:])
        )
        curve = PrecisionRecallCurve(name=ctx.name, points=points, auc=auc)
        return PrecisionRecall(title=self.title, curves=[curve])

    def _score(self, case: ReportCase) -> float | None:
        if self.score_from == "scores":
            result = case.scores.get(self.score_key)
            return None if result is None else float(result.value)
        value = case.metrics.get(self.score_key)
        return None if value is None else float(value)

    def _is_positive(self, case: ReportCase) -> bool | None:
        if self.positive_from == "expected_output":
            return None if case.expected_output is None else bool(case.expected_output)
        if self.positive_key is None:
            raise ValueError(
                f"positive_key is required when positive_from={self.positive_from!r}"
            )
        if self.positive_from == "assertions":
            result = case.assertions.get(self.positive_key)
        else:
            result = case.labels.get(self.positive_key)
        return None if result is None else bool(result.value)


DEFAULT_REPORT_EVALUATORS: tuple[type[ReportEvaluator], ...] = (
    ConfusionMatrixEvaluator,
    PrecisionRecallEvaluator,
)
