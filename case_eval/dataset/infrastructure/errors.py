"""Error types raised by dataset infrastructure."""

from case_eval.core.errors import CaseEvalError


class DatasetLoadError(CaseEvalError):
    """Raised when a dataset file cannot be read, parsed or validated."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load dataset: {reason}")


class UnsupportedDatasetFormatError(CaseEvalError):
    """Raised when a dataset format cannot be inferred or is not supported."""

    def __init__(self, fmt: str) -> None:
        self.fmt = fmt
        super().__init__(
            f"Failed to resolve dataset format: '{fmt}' is not one of 'yaml', 'json'"
        )
