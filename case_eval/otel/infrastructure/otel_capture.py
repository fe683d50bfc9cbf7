"""OtelSpanCapture — records the spans a task emits through an OpenTelemetry SDK tracer provider."""

import threading
import uuid
from collections import defaultdict
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from datetime import UTC, datetime
from weakref import WeakKeyDictionary

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.sdk.trace import ReadableSpan, Span, SpanProcessor

from case_eval.otel.domain.errors import SpanTreeRecordingError
from case_eval.otel.domain.span_tree import SpanNode, SpanTree

_CAPTURE_CONTEXT_ID: ContextVar[str | None] = ContextVar(
    "case_eval_capture_context_id", default=None
)


class _ContextSpanCollector(SpanProcessor):
    """Buffers finished spans under the capture id active when each span ended."""

    def __init__(self) -> None:
        self._spans: dict[str, list[ReadableSpan]] = defaultdict(list)
        self._lock = threading.Lock()

    def on_start(self, span: Span, parent_context: Context | None = None) -> None:
        pass

    def on_end(self, span: ReadableSpan) -> None:
        context_id = _CAPTURE_CONTEXT_ID.get()
        if context_id is None:
            return
        with self._lock:
            self._spans[context_id].append(span)

    def pop(self, context_id: str) -> list[ReadableSpan]:
        with self._lock:
            return self._spans.pop(context_id, [])

    def shutdown(self) -> None:
        with self._lock:
            self._spans.clear()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


# One collector per tracer provider; registering twice would record every span twice.
_collectors: WeakKeyDictionary[object, _ContextSpanCollector] = WeakKeyDictionary()
_collectors_lock = threading.Lock()


def _collector_for(
    provider: trace.TracerProvider,
) -> _ContextSpanCollector | SpanTreeRecordingError:
    add_span_processor = getattr(provider, "add_span_processor", None)
    if add_span_processor is None:
        return SpanTreeRecordingError(
            reason=(
                f"tracer provider {type(provider).__name__} cannot register span "
                "processors; call opentelemetry.trace.set_tracer_provider() with an "
                "SDK TracerProvider before evaluating"
            )
        )
    with _collectors_lock:
        collector = _collectors.get(provider)
        if collector is None:
            collector = _ContextSpanCollector()
            add_span_processor(collector)
            _collectors[provider] = collector
    return collector


def span_node_from_readable_span(span: ReadableSpan) -> SpanNode:
    """Convert a finished SDK span into a SpanNode with hex ids and UTC timestamps."""
    context = span.get_span_context()
    if context is None or span.start_time is None or span.end_time is None:
        raise ValueError(f"span {span.name!r} has not finished")
    return SpanNode(
        name=span.name,
        trace_id=format(context.trace_id, "032x"),
        span_id=format(context.span_id, "016x"),
        parent_span_id=format(span.parent.span_id, "016x") if span.parent else None,
        start_timestamp=datetime.fromtimestamp(span.start_time / 1e9, tz=UTC),
        end_timestamp=datetime.fromtimestamp(span.end_time / 1e9, tz=UTC),
        attributes=dict(span.attributes or {}),
    )


class OtelSpanCapture:
    """Captures spans ended while ``fn`` runs, isolated per evaluation unit.

    Uses the given tracer provider, or the globally configured one. Spans are
    attributed by a ContextVar, so concurrent units never see each other's spans.

    Does NOT inherit from SpanCapture (structural typing via Protocol).
    """

    def __init__(self, tracer_provider: trace.TracerProvider | None = None) -> None:
        self._tracer_provider = tracer_provider

    async def capture[T](
        self, fn: Callable[[], Awaitable[T]]
    ) -> tuple[T, SpanTree | SpanTreeRecordingError]:
        provider = self._tracer_provider or trace.get_tracer_provider()
        collector = _collector_for(provider=provider)
        if isinstance(collector, SpanTreeRecordingError):
            return await fn(), collector

        context_id = uuid.uuid4().hex
        token = _CAPTURE_CONTEXT_ID.set(context_id)
        try:
            result = await fn()
        finally:
            _CAPTURE_CONTEXT_ID.reset(token)
            spans = collector.pop(context_id=context_id)

        tree = SpanTree()
        tree.add_spans([span_node_from_readable_span(span) for span in spans])
        return result, tree
