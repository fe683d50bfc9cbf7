"""SpanCapture port — collects the spans a task emits while it runs."""

from collections.abc import Awaitable, Callable
from typing import Protocol

from case_eval.otel.domain.errors import SpanTreeRecordingError
from case_eval.otel.domain.span_tree import SpanTree


class SpanCapture(Protocol):
    """Runs a coroutine function and returns its result with the spans it produced.

    When spans cannot be recorded the second element is a SpanTreeRecordingError,
    never a raised exception. Errors raised by ``fn`` propagate unchanged.
    """

    async def capture[T](
        self, fn: Callable[[], Awaitable[T]]
    ) -> tuple[T, SpanTree | SpanTreeRecordingError]: ...


class DisabledSpanCapture:
    """SpanCapture that records nothing and reports why.

    Does NOT inherit from SpanCapture (structural typing via Protocol).
    """

    def __init__(self, reason: str = "span capture is disabled for this evaluation") -> None:
        self._reason = reason

    async def capture[T](
        self, fn: Callable[[], Awaitable[T]]
    ) -> tuple[T, SpanTree | SpanTreeRecordingError]:
        result = await fn()
        return result, SpanTreeRecordingError(reason=self._reason)
