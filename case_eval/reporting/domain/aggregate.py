"""Averaging of report cases into ReportCaseAggregate summaries."""

from collections.abc import Iterable, Mapping

from pydantic import BaseModel, Field

from case_eval.reporting.domain.case import ReportCase

_AGGREGATE_NAME = "Averages"


class ReportCaseAggregate(BaseModel, frozen=True):
    """Summary statistics over a set of report cases.

    ``labels`` maps each label name to the fraction of occurrences of each value.
    ``assertions`` is the overall pass rate, or None when no assertions exist.
    """

    name: str = _AGGREGATE_NAME
    scores: dict[str, float] = Field(default_factory=dict)
    labels: dict[str, dict[str, float]] = Field(default_factory=dict)
    metrics: dict[str, float] = Field(default_factory=dict)
    assertions: float | None = None
    task_duration: float = 0.0
    total_duration: float = 0.0


def _mean_per_key(mappings: Iterable[Mapping[str, int | float]]) -> dict[str, float]:
    """Average each key over only the mappings that contain it; missing is not zero."""
    sums: dict[str, float] = {}
    counts: dict[str, int] = {}
    for mapping in mappings:
        for key, value in mapping.items():
            sums[key] = sums.get(key, 0.0) + float(value)
            counts[key] = counts.get(key, 0) + 1
    return {key: sums[key] / counts[key] for key in sums}


def average_cases(cases: list[ReportCase]) -> ReportCaseAggregate:
    """Aggregate a flat list of cases.

    An empty list yields zero durations, empty mappings and ``assertions=None``.
    """
    if not cases:
        return ReportCaseAggregate()

    scores = _mean_per_key(
        {name: result.value for name, result in case.scores.items()} for case in cases
    )
    metrics = _mean_per_key(case.metrics for case in cases)

    label_counts: dict[str, dict[str, int]] = {}
    label_totals: dict[str, int] = {}
    for case in cases:
        for name, result in case.labels.items():
            value = str(result.value)
            per_value = label_counts.setdefault(name, {})
            per_value[value] = per_value.get(value, 0) + 1
            label_totals[name] = label_totals.get(name, 0) + 1
    labels = {
        name: {value: count / label_totals[name] for value, count in per_value.items()}
        for name, per_value in label_counts.items()
    }

    total_assertions = sum(len(case.assertions) for case in cases)
    assertions: float | None = None
    if total_assertions:
        passing = sum(
            1 for case in cases for result in case.assertions.values() if result.value is True
        )
        assertions = passing / total_assertions

    return ReportCaseAggregate(
        scores=scores,
        labels=labels,
        metrics=metrics,
        assertions=assertions,
        task_duration=sum(case.task_duration for case in cases) / len(cases),
        total_duration=sum(case.total_duration for case in cases) / len(cases),
    )


def average_from_aggregates(aggregates: list[ReportCaseAggregate]) -> ReportCaseAggregate:
    """Combine per-group summaries so every group counts equally, whatever its run count."""
    if not aggregates:
        return ReportCaseAggregate()

    labels: dict[str, dict[str, float]] = {}
    groups_with_label: dict[str, int] = {}
    for aggregate in aggregates:
        for name, distribution in aggregate.labels.items():
            groups_with_label[name] = groups_with_label.get(name, 0) + 1
            combined = labels.setdefault(name, {})
            for value, fraction in distribution.items():
                combined[value] = combined.get(value, 0.0) + fraction
    for name, combined in labels.items():
        for value in combined:
            combined[value] /= groups_with_label[name]

    pass_rates = [a.assertions for a in aggregates if a.assertions is not None]

    return ReportCaseAggregate(
        scores=_mean_per_key(a.scores for a in aggregates),
        labels=labels,
        metrics=_mean_per_key(a.metrics for a in aggregates),
        assertions=sum(pass_rates) / len(pass_rates) if pass_rates else None,
        task_duration=sum(a.task_duration for a in aggregates) / len(aggregates),
        total_duration=sum(a.total_duration for a in aggregates) / len(aggregates),
    )
