"""Error types raised by evaluator infrastructure."""

from case_eval.core.errors import CaseEvalError


class JudgeInvocationError(CaseEvalError):
    """Raised when the LLM judge cannot be invoked or returns an unparseable response."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to grade output: {reason}")


class DuplicateEvaluatorNameError(CaseEvalError):
    """Raised when two custom evaluator types share a serialization name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Failed to build evaluator registry: duplicate evaluator name '{name}'"
        )


class EvaluatorNotRegisteredError(CaseEvalError):
    """Raised when a spec names an evaluator type the registry does not know."""

    def __init__(self, name: str, valid_choices: list[str]) -> None:
        self.name = name
        self.valid_choices = valid_choices
        choices = ", ".join(f"'{choice}'" for choice in valid_choices)
        super().__init__(
            f"Failed to load evaluator: '{name}' is not in the registry."
            f" Valid choices: {choices}"
        )


class EvaluatorInstantiationError(CaseEvalError):
    """Raised when a registered evaluator type rejects the arguments in its spec."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Failed to instantiate evaluator '{name}': {reason}")


class InvalidEvaluatorSpecError(CaseEvalError):
    """Raised when a serialized evaluator spec is not one of the accepted forms."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse evaluator spec: {reason}")
