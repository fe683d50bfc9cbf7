"""Tests for Dataset construction and mutation."""

import pytest

from case_eval.dataset.domain.case import Case
from case_eval.dataset.domain.dataset import Dataset
from case_eval.dataset.domain.errors import CaseNotFoundError, DuplicateCaseNameError
from case_eval.evaluators.infrastructure.common import Equals
from case_eval.otel.domain.capture import DisabledSpanCapture
from tests.evaluation.fake_observer import FakeEvaluationObserver
from tests.evaluators.fake_evaluators import CaseCount


class TestDatasetCases:
    """Named cases stay unique; unnamed cases are always accepted."""

    def test_duplicate_names_rejected_at_construction(self) -> None:
        with pytest.raises(DuplicateCaseNameError, match="duplicate case name 'a'"):
            Dataset(cases=[Case(name="a", inputs=1), Case(name="a", inputs=2)])

    def test_unnamed_cases_never_collide(self) -> None:
        dataset = Dataset(cases=[Case(inputs=1), Case(inputs=2)])

        assert len(dataset) == 2

    def test_add_case_rejects_existing_name(self) -> None:
        dataset = Dataset(cases=[Case(name="a", inputs=1)])

        with pytest.raises(DuplicateCaseNameError) as exc_info:
            dataset.add_case(Case(name="a", inputs=3))

        assert exc_info.value.case_name == "a"
        assert len(dataset) == 1

    def test_constructor_copies_evaluator_lists(self) -> None:
        evaluators = [Equals(value=1)]
        dataset = Dataset(cases=[], evaluators=evaluators)

        dataset.add_evaluator(Equals(value=2))

        assert len(evaluators) == 1
        assert len(dataset.evaluators) == 2


class TestDatasetEvaluators:
    """Evaluators are added dataset-wide or to one named case."""

    def test_specific_case_gets_the_evaluator(self) -> None:
        dataset = Dataset(cases=[Case(name="a", inputs=1), Case(name="b", inputs=2)])

        dataset.add_evaluator(Equals(value=1), specific_case="a")

        assert dataset.cases[0].evaluators == [Equals(value=1)]
        assert dataset.cases[1].evaluators == []
        assert dataset.evaluators == []

    def test_unknown_case_raises(self) -> None:
        dataset = Dataset(cases=[Case(name="a", inputs=1)])

        with pytest.raises(CaseNotFoundError, match="case 'missing' not found"):
            dataset.add_evaluator(Equals(value=1), specific_case="missing")

    def test_add_report_evaluator(self) -> None:
        dataset = Dataset(cases=[])

        dataset.add_report_evaluator(CaseCount())

        assert dataset.report_evaluators == [CaseCount()]


class TestEvaluateSync:
    """evaluate_sync runs the evaluation on a fresh event loop."""

    def test_returns_report(self) -> None:
        def double(x: int) -> int:
            return x * 2

        dataset = Dataset(
            cases=[Case(name="two", inputs=2, expected_output=4)],
            evaluators=[Equals(value=4)],
        )

        report = dataset.evaluate_sync(
            double, observer=FakeEvaluationObserver(), span_capture=DisabledSpanCapture()
        )

        assert report.name == "double"
        assert report.cases[0].output == 4
        assert report.cases[0].assertions["Equals"].value is True
