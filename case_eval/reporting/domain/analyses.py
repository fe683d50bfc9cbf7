"""Report-level analysis types returned by report evaluators."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class ConfusionMatrix(BaseModel, frozen=True):
    """Counts of cases by (expected, predicted) label; ``matrix[expected][predicted]``."""

    type: Literal["confusion_matrix"] = "confusion_matrix"
    title: str
    description: str | None = None
    class_labels: list[str]
    matrix: list[list[int]]


class PrecisionRecallPoint(BaseModel, frozen=True):
    threshold: float
    precision: float
    recall: float


class PrecisionRecallCurve(BaseModel, frozen=True):
    name: str
    points: list[PrecisionRecallPoint]
    auc: float | None = None


class PrecisionRecall(BaseModel, frozen=True):
    type: Literal["precision_recall"] = "precision_recall"
    title: str
    description: str | None = None
    curves: list[PrecisionRecallCurve]


class ScalarResult(BaseModel, frozen=True):
    type: Literal["scalar"] = "scalar"
    title: str
    description: str | None = None
    value: int | float
    unit: str | None = None


class TableResult(BaseModel, frozen=True):
    type: Literal["table"] = "table"
    title: str
    description: str | None = None
    columns: list[str]
    rows: list[list[str | int | float | bool | None]]


ReportAnalysis = Annotated[
    ConfusionMatrix | PrecisionRecall | ScalarResult | TableResult,
    Field(discriminator="type"),
]

REPORT_ANALYSIS_ADAPTER: TypeAdapter[ReportAnalysis] = TypeAdapter(ReportAnalysis)
