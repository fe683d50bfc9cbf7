"""case-eval — evaluate a task against labeled cases and aggregate the results into a report."""

from case_eval.core.errors import CaseEvalError
from case_eval.dataset.domain.case import Case
from case_eval.dataset.domain.dataset import Dataset
from case_eval.evaluation.domain.task_run import increment_eval_metric, set_eval_attribute
from case_eval.evaluators.domain.context import EvaluatorContext
from case_eval.evaluators.domain.evaluator import Evaluator, EvaluatorOutput
from case_eval.evaluators.domain.report_evaluator import ReportEvaluator, ReportEvaluatorContext
from case_eval.evaluators.domain.result import (
    EvaluationReason,
    EvaluationResult,
    EvaluatorFailure,
    EvaluatorSpec,
)
from case_eval.reporting.domain.aggregate import ReportCaseAggregate
from case_eval.reporting.domain.case import ReportCase, ReportCaseFailure
from case_eval.reporting.domain.report import EvaluationReport, ReportCaseGroup

__all__ = [
    "Case",
    "CaseEvalError",
    "Dataset",
    "EvaluationReason",
    "EvaluationReport",
    "EvaluationResult",
    "Evaluator",
    "EvaluatorContext",
    "EvaluatorFailure",
    "EvaluatorOutput",
    "EvaluatorSpec",
    "ReportCase",
    "ReportCaseAggregate",
    "ReportCaseFailure",
    "ReportCaseGroup",
    "ReportEvaluator",
    "ReportEvaluatorContext",
    "increment_eval_metric",
    "set_eval_attribute",
]
