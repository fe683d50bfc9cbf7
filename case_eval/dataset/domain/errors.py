"""Error types raised when building or mutating a Dataset."""

from case_eval.core.errors import CaseEvalError


class DuplicateCaseNameError(CaseEvalError):
    """Raised when a named case would collide with an existing case name."""

    def __init__(self, case_name: str) -> None:
        self.case_name = case_name
        super().__init__(f"Failed to add case: duplicate case name '{case_name}'")


class CaseNotFoundError(CaseEvalError):
    """Raised when an evaluator targets a case name the dataset does not contain."""

    def __init__(self, case_name: str) -> None:
        self.case_name = case_name
        super().__init__(
            f"Failed to add evaluator: case '{case_name}' not found in the dataset"
        )
