"""Case — one labeled scenario to run the task against."""

from dataclasses import dataclass, field
from typing import Any

from case_eval.evaluators.domain.evaluator import Evaluator


@dataclass(kw_only=True)
class Case:
    """Inputs for the task plus optional name, metadata, expected output and evaluators.

    Case-specific evaluators run in addition to the dataset-wide ones.
    """

    inputs: Any
    name: str | None = None
    metadata: Any = None
    expected_output: Any = None
    evaluators: list[Evaluator] = field(default_factory=list)
