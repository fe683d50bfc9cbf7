"""Naming and partitioning of the evaluation results gathered for one unit."""

from case_eval.evaluators.domain.result import EvaluationResult


def dedupe_result_names(results: list[EvaluationResult]) -> list[EvaluationResult]:
    """Rename repeated names left to right: ``check``, ``check_2``, ``check_3``, ...

    A suffix already taken by an earlier result is skipped.
    """
    seen: set[str] = set()
    deduped: list[EvaluationResult] = []
    for result in results:
        name = result.name
        if name in seen:
            suffix = 2
            while f"{result.name}_{suffix}" in seen:
                suffix += 1
            name = f"{result.name}_{suffix}"
            result = result.with_name(name)
        seen.add(name)
        deduped.append(result)
    return deduped


def partition_results(
    results: list[EvaluationResult],
) -> tuple[
    dict[str, EvaluationResult],
    dict[str, EvaluationResult],
    dict[str, EvaluationResult],
]:
    """Split results into (scores, labels, assertions) by runtime value type."""
    scores: dict[str, EvaluationResult] = {}
    labels: dict[str, EvaluationResult] = {}
    assertions: dict[str, EvaluationResult] = {}
    for result in results:
        # bool before int: bool is a subclass of int.
        if isinstance(result.value, bool):
            assertions[result.name] = result
        elif isinstance(result.value, int | float):
            scores[result.name] = result
        else:
            labels[result.name] = result
    return scores, labels, assertions
