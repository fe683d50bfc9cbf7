"""run_report_evaluators — runs report evaluators in order and attaches their analyses."""

import inspect

from case_eval.evaluators.application.run_evaluator import (
    format_exception_message,
    format_exception_stacktrace,
)
from case_eval.evaluators.domain.report_evaluator import (
    ReportEvaluator,
    ReportEvaluatorContext,
)
from case_eval.evaluators.domain.result import EvaluatorFailure, EvaluatorSpec
from case_eval.reporting.domain.analyses import REPORT_ANALYSIS_ADAPTER, ReportAnalysis
from case_eval.reporting.domain.report import EvaluationReport


async def _run_one(
    evaluator: ReportEvaluator, ctx: ReportEvaluatorContext
) -> list[ReportAnalysis]:
    output = evaluator.evaluate(ctx)
    if inspect.isawaitable(output):
        output = await output
    items = output if isinstance(output, list) else [output]
    # Validation also accepts plain dicts shaped like an analysis.
    return [REPORT_ANALYSIS_ADAPTER.validate_python(item) for item in items]


async def run_report_evaluators(
    report_evaluators: list[ReportEvaluator],
    ctx: ReportEvaluatorContext,
    report: EvaluationReport,
) -> list[EvaluatorFailure]:
    """Run each report evaluator once, sequentially, mutating ``report`` in place.

    Analyses are appended to ``report.analyses``. A failing evaluator (including
    one returning an invalid analysis) is recorded in
    ``report.report_evaluator_failures`` and the remaining evaluators still run.

    Returns the failures recorded by this call.
    """
    failures: list[EvaluatorFailure] = []
    for evaluator in report_evaluators:
        name = evaluator.get_serialization_name()
        source = EvaluatorSpec(name=name, arguments=None)
        try:
            source = evaluator.as_spec()
            analyses = await _run_one(evaluator=evaluator, ctx=ctx)
        except Exception as exc:
            failure = EvaluatorFailure(
                name=name,
                error_message=format_exception_message(exc),
                error_stacktrace=format_exception_stacktrace(exc),
                source=source,
            )
            report.report_evaluator_failures.append(failure)
            failures.append(failure)
            continue
        report.analyses.extend(analyses)
    return failures
