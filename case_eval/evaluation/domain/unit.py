"""EvaluationUnit — one (case, repeat index) execution scheduled by the orchestrator."""

from dataclasses import dataclass

from case_eval.dataset.domain.case import Case
from case_eval.evaluation.domain.errors import InvalidRepeatError


@dataclass(frozen=True)
class EvaluationUnit:
    index: int
    case: Case
    report_name: str
    source_case_name: str | None


def build_units(cases: list[Case], repeat: int) -> list[EvaluationUnit]:
    """Expand cases into units in case-major, repeat-minor order.

    Without repeats a unit is named after its case, or ``"Case N"`` (1-based) when
    the case is unnamed. With repeats each unit is named ``"<case> [k/repeat]"``
    and remembers its case name as the source.

    Raises:
        InvalidRepeatError: if repeat < 1.
    """
    if repeat < 1:
        raise InvalidRepeatError(repeat=repeat)

    units: list[EvaluationUnit] = []
    for case_index, case in enumerate(cases):
        case_name = case.name if case.name is not None else f"Case {case_index + 1}"
        if repeat == 1:
            units.append(
                EvaluationUnit(
                    index=len(units),
                    case=case,
                    report_name=case_name,
                    source_case_name=None,
                )
            )
            continue
        for k in range(1, repeat + 1):
            units.append(
                EvaluationUnit(
                    index=len(units),
                    case=case,
                    report_name=f"{case_name} [{k}/{repeat}]",
                    source_case_name=case_name,
                )
            )
    return units
