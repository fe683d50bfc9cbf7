"""Tests for OtelSpanCapture and DisabledSpanCapture."""

import asyncio

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import NoOpTracerProvider

from case_eval.otel.domain.capture import DisabledSpanCapture
from case_eval.otel.domain.errors import SpanTreeRecordingError
from case_eval.otel.infrastructure.otel_capture import OtelSpanCapture


def _traced(provider: TracerProvider, outer: str, inner: str):
    tracer = provider.get_tracer("tests")

    async def fn() -> str:
        with tracer.start_as_current_span(outer):
            await asyncio.sleep(0)
            with tracer.start_as_current_span(inner, attributes={"step": 1}):
                await asyncio.sleep(0)
        return "done"

    return fn


class TestOtelSpanCapture:
    """Spans ended while the function runs are returned as a tree."""

    async def test_captures_nested_spans(self) -> None:
        provider = TracerProvider()
        capture = OtelSpanCapture(tracer_provider=provider)

        result, tree = await capture.capture(_traced(provider, "outer", "inner"))

        assert result == "done"
        assert not isinstance(tree, SpanTreeRecordingError)
        assert [root.name for root in tree.roots] == ["outer"]
        inner = tree.first({"name_equals": "inner"})
        assert inner is not None
        assert inner.parent is tree.roots[0]
        assert inner.attributes == {"step": 1}
        assert len(inner.span_id) == 16
        assert len(inner.trace_id) == 32

    async def test_spans_outside_the_capture_are_ignored(self) -> None:
        provider = TracerProvider()
        capture = OtelSpanCapture(tracer_provider=provider)
        with provider.get_tracer("tests").start_as_current_span("before"):
            pass

        _, tree = await capture.capture(_traced(provider, "outer", "inner"))

        assert not isinstance(tree, SpanTreeRecordingError)
        assert not tree.any({"name_equals": "before"})

    async def test_concurrent_captures_are_isolated(self) -> None:
        provider = TracerProvider()
        capture = OtelSpanCapture(tracer_provider=provider)

        (_, first), (_, second) = await asyncio.gather(
            capture.capture(_traced(provider, "a", "a-child")),
            capture.capture(_traced(provider, "b", "b-child")),
        )

        assert not isinstance(first, SpanTreeRecordingError)
        assert not isinstance(second, SpanTreeRecordingError)
        assert sorted(node.name for node in first) == ["a", "a-child"]
        assert sorted(node.name for node in second) == ["b", "b-child"]

    async def test_provider_without_processors_yields_recording_error(self) -> None:
        capture = OtelSpanCapture(tracer_provider=NoOpTracerProvider())

        async def fn() -> int:
            return 7

        result, tree = await capture.capture(fn)

        assert result == 7
        assert isinstance(tree, SpanTreeRecordingError)
        assert "set_tracer_provider" in str(tree)

    async def test_task_errors_propagate(self) -> None:
        provider = TracerProvider()
        capture = OtelSpanCapture(tracer_provider=provider)

        async def fn() -> None:
            raise RuntimeError("task failed")

        with pytest.raises(RuntimeError, match="task failed"):
            await capture.capture(fn)


class TestDisabledSpanCapture:
    """The disabled capture runs the function and reports why nothing was recorded."""

    async def test_returns_result_and_reason(self) -> None:
        async def fn() -> str:
            return "ok"

        result, tree = await DisabledSpanCapture(reason="off in tests").capture(fn)

        assert result == "ok"
        assert isinstance(tree, SpanTreeRecordingError)
        assert str(tree) == "Failed to record span tree: off in tests"
