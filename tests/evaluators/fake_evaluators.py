"""Minimal evaluators for exercising the runner and the registry."""

import asyncio
from dataclasses import dataclass
from typing import Any

from case_eval.evaluators.domain.context import EvaluatorContext
from case_eval.evaluators.domain.evaluator import Evaluator, EvaluatorOutput
from case_eval.evaluators.domain.report_evaluator import (
    ReportEvaluator,
    ReportEvaluatorContext,
)
from case_eval.reporting.domain.analyses import ScalarResult


@dataclass
class ConstantEvaluator(Evaluator):
    """Returns ``value`` unchanged for every case."""

    value: Any
    evaluation_name: str | None = None

    def evaluate(self, ctx: EvaluatorContext) -> EvaluatorOutput:
        return self.value


@dataclass
class AsyncOutputLength(Evaluator):
    async def evaluate(self, ctx: EvaluatorContext) -> int:
        await asyncio.sleep(0)
        return len(ctx.output)


@dataclass
class RaisingEvaluator(Evaluator):
    message: str = "evaluator exploded"

    def evaluate(self, ctx: EvaluatorContext) -> bool:
        raise RuntimeError(self.message)


@dataclass
class CaseCount(ReportEvaluator):
    title: str = "Case count"

    def evaluate(self, ctx: ReportEvaluatorContext) -> ScalarResult:
        return ScalarResult(title=self.title, value=len(ctx.report.cases))


@dataclass
class RaisingReportEvaluator(ReportEvaluator):
    def evaluate(self, ctx: ReportEvaluatorContext) -> ScalarResult:
        raise RuntimeError("report evaluator exploded")


@dataclass
class ContextName(Evaluator):
    """Labels each run with the case name its context carries."""

    def evaluate(self, ctx: EvaluatorContext) -> str:
        return ctx.name if ctx.name is not None else "unnamed"


class _AmbiguousTruth:
    def __bool__(self) -> bool:
        raise ValueError("truth value of an array is ambiguous")


class ArrayLike:
    """Compares elementwise, so ``==`` yields a value with no truth value."""

    def __eq__(self, other: object) -> Any:
        return _AmbiguousTruth()


@dataclass
class NearTarget(Evaluator):
    target: Any = None

    def evaluate(self, ctx: EvaluatorContext) -> bool:
        return True
