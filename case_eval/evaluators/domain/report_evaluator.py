"""ReportEvaluator contract — experiment-wide analyses computed over a finished report."""

from abc import abstractmethod
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from case_eval.evaluators.domain.evaluator import BaseEvaluator
from case_eval.reporting.domain.analyses import ReportAnalysis

if TYPE_CHECKING:
    from case_eval.reporting.domain.report import EvaluationReport

type ReportEvaluatorOutput = ReportAnalysis | list[ReportAnalysis]


@dataclass(frozen=True, kw_only=True)
class ReportEvaluatorContext:
    """What a report evaluator sees: the run name, the full report, and experiment metadata."""

    name: str
    report: "EvaluationReport"
    experiment_metadata: dict[str, Any] | None = field(default=None)


@dataclass
class ReportEvaluator(BaseEvaluator):
    """Runs once per evaluation over the complete report and returns analyses."""

    @abstractmethod
    def evaluate(
        self, ctx: ReportEvaluatorContext
    ) -> ReportEvaluatorOutput | Awaitable[ReportEvaluatorOutput]: ...
