"""Run configuration models for the case-eval CLI."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_IMPORT_REFERENCE = r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$"


class ExecutionConfig(BaseModel, frozen=True):
    repeat: int = Field(default=1, ge=1)
    max_concurrency: int | None = Field(default=None, ge=1)


class JudgeConfig(BaseModel, frozen=True):
    """Default model for LLM judges that do not name one."""

    model: str = Field(min_length=1)


class RunConfig(BaseModel, frozen=True):
    """Root configuration for one ``case-eval run``.

    Import references use the ``module:attribute`` form. ``dataset`` is
    resolved against the config file's directory by the loader.
    """

    name: str | None = None
    dataset: Path
    task: str = Field(pattern=_IMPORT_REFERENCE)
    custom_evaluators: list[str] = Field(default_factory=list)
    custom_report_evaluators: list[str] = Field(default_factory=list)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    judge: JudgeConfig | None = None
    metadata: dict[str, Any] | None = None
