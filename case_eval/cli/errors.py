"""Error types raised by the CLI layer."""

from case_eval.core.errors import CaseEvalError


class ImportReferenceError(CaseEvalError):
    """Raised when a ``module:attribute`` reference cannot be resolved."""

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        super().__init__(f"Failed to import '{reference}': {reason}")
