"""run_evaluator — runs one evaluator against one context and normalizes its output."""

import inspect
import traceback
from collections.abc import Mapping

from case_eval.evaluators.domain.context import EvaluatorContext
from case_eval.evaluators.domain.evaluator import Evaluator, EvaluatorOutput
from case_eval.evaluators.domain.result import (
    EvaluationReason,
    EvaluationResult,
    EvaluatorFailure,
    EvaluatorSpec,
)

_SCALAR_TYPES = (bool, int, float, str)


def format_exception_message(exc: BaseException) -> str:
    """Render an exception as ``"<ErrorType>: <message>"``."""
    return f"{type(exc).__name__}: {exc}"


def format_exception_stacktrace(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc))


def _to_reason(name: str, value: object) -> EvaluationReason:
    if isinstance(value, EvaluationReason):
        return value
    if isinstance(value, _SCALAR_TYPES):
        return EvaluationReason(value=value)
    raise TypeError(
        f"evaluation {name!r} returned a value of an invalid type: {value!r}"
    )


def _normalize(
    output: EvaluatorOutput, default_name: str
) -> dict[str, EvaluationReason]:
    """Dispatch the closed set of evaluator output shapes to named reasons."""
    if isinstance(output, Mapping):
        normalized: dict[str, EvaluationReason] = {}
        for name, value in output.items():
            if not isinstance(name, str):
                raise TypeError(f"evaluation names must be strings, got {name!r}")
            normalized[name] = _to_reason(name=name, value=value)
        return normalized
    return {default_name: _to_reason(name=default_name, value=output)}


async def run_evaluator(
    evaluator: Evaluator, ctx: EvaluatorContext
) -> list[EvaluationResult] | EvaluatorFailure:
    """Run a single evaluator and return its named results, or a failure.

    Never raises: an exception from the evaluator, from its naming or
    serialization, or an output of an invalid type, is returned as an
    EvaluatorFailure. When the evaluator cannot name or describe itself, the
    failure falls back to its class name.
    """
    fallback_name = type(evaluator).__name__
    default_name = fallback_name
    source = EvaluatorSpec(name=fallback_name, arguments=None)
    try:
        source = evaluator.as_spec()
        default_name = evaluator.get_default_evaluation_name()
        output = evaluator.evaluate(ctx)
        if inspect.isawaitable(output):
            output = await output
        reasons = _normalize(output=output, default_name=default_name)
    except Exception as exc:
        return EvaluatorFailure(
            name=default_name,
            error_message=format_exception_message(exc),
            error_stacktrace=format_exception_stacktrace(exc),
            source=source,
        )

    return [
        EvaluationResult(
            name=name,
            value=reason.value,
            reason=reason.reason,
            source=source,
        )
        for name, reason in reasons.items()
    ]
