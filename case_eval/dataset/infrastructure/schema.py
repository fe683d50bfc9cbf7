"""On-disk dataset schema — validated shape of YAML and JSON dataset files."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

type SerializedEvaluator = str | dict[str, Any]


class CaseFileModel(BaseModel):
    """One case as written in a dataset file."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    inputs: Any
    metadata: Any = None
    expected_output: Any = None
    evaluators: list[SerializedEvaluator] = []


class DatasetFileModel(BaseModel):
    """Top-level dataset document. ``$schema`` is accepted and ignored."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_ref: str | None = Field(default=None, alias="$schema")
    name: str | None = None
    cases: list[CaseFileModel]
    evaluators: list[SerializedEvaluator] = []
    report_evaluators: list[SerializedEvaluator] = []
