"""Tests for averaging report cases."""

import pytest

from case_eval.reporting.domain.aggregate import (
    ReportCaseAggregate,
    average_cases,
    average_from_aggregates,
)
from tests.reporting.cases import make_case


class TestAverageCases:
    """Cases are averaged per key, skipping cases that lack the key."""

    def test_empty_input(self) -> None:
        aggregate = average_cases([])

        assert aggregate == ReportCaseAggregate()
        assert aggregate.assertions is None
        assert aggregate.name == "Averages"

    def test_scores_average_only_over_cases_that_have_them(self) -> None:
        aggregate = average_cases(
            [
                make_case("a", scores={"accuracy": 1.0, "f1": 0.5}),
                make_case("b", scores={"accuracy": 0.5}),
            ]
        )

        assert aggregate.scores == {"accuracy": 0.75, "f1": 0.5}

    def test_label_distribution(self) -> None:
        aggregate = average_cases(
            [
                make_case("a", labels={"sentiment": "positive"}),
                make_case("b", labels={"sentiment": "positive"}),
                make_case("c", labels={"sentiment": "negative"}),
                make_case("d", labels={"sentiment": "positive"}),
            ]
        )

        assert aggregate.labels == {"sentiment": {"positive": 0.75, "negative": 0.25}}

    def test_assertion_pass_rate_counts_every_assertion(self) -> None:
        aggregate = average_cases(
            [
                make_case("a", assertions={"x": True, "y": True, "z": False}),
                make_case("b", assertions={"x": True}),
            ]
        )

        assert aggregate.assertions == pytest.approx(0.75)

    def test_no_assertions_is_none(self) -> None:
        assert average_cases([make_case("a", scores={"s": 1.0})]).assertions is None

    def test_metrics_and_durations(self) -> None:
        aggregate = average_cases(
            [
                make_case("a", metrics={"tokens": 10}, task_duration=1.0, total_duration=2.0),
                make_case("b", metrics={"tokens": 20}, task_duration=3.0, total_duration=4.0),
            ]
        )

        assert aggregate.metrics == {"tokens": 15.0}
        assert aggregate.task_duration == 2.0
        assert aggregate.total_duration == 3.0


class TestAverageFromAggregates:
    """Group summaries are combined so each group counts once."""

    def test_empty_input(self) -> None:
        assert average_from_aggregates([]) == ReportCaseAggregate()

    def test_groups_weighted_equally(self) -> None:
        combined = average_from_aggregates(
            [
                ReportCaseAggregate(scores={"s": 1.0}, assertions=1.0, task_duration=1.0),
                ReportCaseAggregate(scores={"s": 0.0}, assertions=None, task_duration=3.0),
            ]
        )

        assert combined.scores == {"s": 0.5}
        assert combined.assertions == 1.0
        assert combined.task_duration == 2.0

    def test_label_fractions_divide_by_groups_with_the_label(self) -> None:
        combined = average_from_aggregates(
            [
                ReportCaseAggregate(labels={"tone": {"calm": 1.0}}),
                ReportCaseAggregate(labels={"tone": {"calm": 0.5, "angry": 0.5}}),
                ReportCaseAggregate(),
            ]
        )

        assert combined.labels == {"tone": {"calm": 0.75, "angry": 0.25}}
