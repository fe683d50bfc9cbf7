"""Base exception class for all case-eval-specific errors."""


class CaseEvalError(Exception):
    """Base class for all case-eval errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
