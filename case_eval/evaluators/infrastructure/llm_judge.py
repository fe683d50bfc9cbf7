"""LLMJudge — grades task output against a rubric using an LLM via LiteLLM."""

from dataclasses import dataclass, field
from typing import Any, Literal, TypedDict

import litellm
import pydantic_core
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from case_eval.evaluators.domain.context import EvaluatorContext
from case_eval.evaluators.domain.evaluator import Evaluator
from case_eval.evaluators.domain.result import EvaluationReason, EvaluationScalar
from case_eval.evaluators.infrastructure.errors import JudgeInvocationError

litellm.suppress_debug_info = True

_SYSTEM_PROMPT = """\
You are grading output according to a user-specified rubric. If the statement in \
the rubric is true, then the output passes the test. You respond with a JSON object \
with this structure: {"reason": string, "pass": boolean, "score": number}

Examples:

<Output>Hello world</Output>
<Rubric>Content contains a greeting</Rubric>
{"reason": "the content contains the word 'Hello'", "pass": true, "score": 1.0}

<Output>Avast ye swabs, repel the invaders!</Output>
<Rubric>Does not speak like a pirate</Rubric>
{"reason": "'avast ye' is a common pirate term", "pass": false, "score": 0.0}
"""

_default_judge_model = "gpt-4o"


def set_default_judge_model(model: str) -> None:
    """Set the LiteLLM model used by judges that do not name one."""
    global _default_judge_model
    _default_judge_model = model


def get_default_judge_model() -> str:
    return _default_judge_model


class GradingOutput(BaseModel):
    """Structured verdict returned by the judge model."""

    model_config = ConfigDict(populate_by_name=True)

    reason: str
    pass_: bool = Field(alias="pass")
    score: float


class OutputConfig(TypedDict, total=False):
    """How one judge verdict is reported: under which name, and with or without the reason."""

    evaluation_name: str
    include_reason: bool


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return pydantic_core.to_json(value).decode()
    except pydantic_core.PydanticSerializationError:
        return repr(value)


def _build_user_prompt(
    output: Any,
    rubric: str,
    inputs: Any = None,
    include_inputs: bool = False,
    expected_output: Any = None,
    include_expected_output: bool = False,
) -> str:
    sections: list[str] = []
    if include_inputs:
        sections.append(f"<Input>\n{_stringify(inputs)}\n</Input>")
    sections.append(f"<Output>\n{_stringify(output)}\n</Output>")
    sections.append(f"<Rubric>\n{rubric}\n</Rubric>")
    if include_expected_output:
        sections.append(
            f"<ExpectedOutput>\n{_stringify(expected_output)}\n</ExpectedOutput>"
        )
    return "\n".join(sections)


async def grade_output(model: str, user_prompt: str) -> GradingOutput:
    """Ask the judge model for a verdict.

    Raises:
        JudgeInvocationError: if the LLM call fails or the response cannot be
            parsed into a GradingOutput.
    """
    try:
        response = await litellm.acompletion(
            model=model,
            temperature=0.0,
            response_format=GradingOutput,
            messages=[
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
        )
    except Exception as exc:
        raise JudgeInvocationError(reason=str(exc)) from exc

    raw_content = response.choices[0].message.content
    if not raw_content:
        raise JudgeInvocationError(reason="judge returned an empty response")
    try:
        return GradingOutput.model_validate_json(raw_content)
    except ValidationError as exc:
        raise JudgeInvocationError(
            reason=f"Failed to parse judge response: {exc}"
        ) from exc


def _add_output(
    combined: dict[str, EvaluationScalar | EvaluationReason],
    value: EvaluationScalar,
    reason: str,
    config: OutputConfig,
    default_name: str,
) -> None:
    name = config.get("evaluation_name", default_name)
    if config.get("include_reason", False):
        combined[name] = EvaluationReason(value=value, reason=reason)
    else:
        combined[name] = value


@dataclass
class LLMJudge(Evaluator):
    """Grades the output against ``rubric`` with an LLM.

    Reports a pass/fail assertion by default and, when ``score`` is configured,
    a numeric score too; with both enabled they are named ``<name>_score`` and
    ``<name>_pass``.
    """

    rubric: str
    model: str | None = None
    include_input: bool = False
    include_expected_output: bool = False
    score: OutputConfig | Literal[False] = False
    assertion: OutputConfig | Literal[False] = field(
        default_factory=lambda: OutputConfig(include_reason=True)
    )

    async def evaluate(
        self, ctx: EvaluatorContext
    ) -> dict[str, EvaluationScalar | EvaluationReason]:
        user_prompt = _build_user_prompt(
            output=ctx.output,
            rubric=self.rubric,
            inputs=ctx.inputs,
            include_inputs=self.include_input,
            expected_output=ctx.expected_output,
            include_expected_output=self.include_expected_output,
        )
        grading = await grade_output(
            model=self.model or get_default_judge_model(), user_prompt=user_prompt
        )

        combined: dict[str, EvaluationScalar | EvaluationReason] = {}
        include_both = self.score is not False and self.assertion is not False
        evaluation_name = self.get_default_evaluation_name()

        if self.score is not False:
            _add_output(
                combined,
                value=grading.score,
                reason=grading.reason,
                config=self.score,
                default_name=f"{evaluation_name}_score" if include_both else evaluation_name,
            )
        if self.assertion is not False:
            _add_output(
                combined,
                value=grading.pass_,
                reason=grading.reason,
                config=self.assertion,
                default_name=f"{evaluation_name}_pass" if include_both else evaluation_name,
            )
        return combined
