"""Error types raised by evaluation preconditions."""

from case_eval.core.errors import CaseEvalError


class InvalidRepeatError(CaseEvalError):
    """Raised when an evaluation is asked to run each case fewer than once."""

    def __init__(self, repeat: int) -> None:
        self.repeat = repeat
        super().__init__(f"Failed to start evaluation: repeat must be >= 1, got {repeat}")


class InvalidMaxConcurrencyError(CaseEvalError):
    """Raised when a concurrency bound is given that would admit no unit at all."""

    def __init__(self, max_concurrency: int) -> None:
        self.max_concurrency = max_concurrency
        super().__init__(
            "Failed to start evaluation: max_concurrency must be >= 1 or None,"
            f" got {max_concurrency}"
        )
