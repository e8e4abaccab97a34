"""
Shared helpers for flows and their LangGraph workflows.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Iterator, Mapping, Optional

from opentelemetry.trace import Span
from pydantic import BaseModel

from ...errors import PartialDataError
from ...observability.logging_utils import flow_log_scope, log_event
from ...observability.otel import (
    build_span_attributes,
    record_exception,
    set_span_attributes,
    start_span,
)
from ...prompts.farm_insights import UNAVAILABLE


@dataclass(frozen=True)
class SubResult:
    """Outcome of one sub-flow of a composite flow."""

    source: str
    value: Optional[BaseModel] = None
    error: Optional[PartialDataError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def context_value(self) -> object:
        if self.value is None:
            return UNAVAILABLE
        return self.value.model_dump(mode="json", by_alias=True)


async def gather_sub_results(calls: Mapping[str, Awaitable[BaseModel]]) -> Dict[str, SubResult]:
    """Await every sub-flow concurrently; a failure becomes a placeholder, never an abort."""
    names = list(calls)
    outcomes = await asyncio.gather(*calls.values(), return_exceptions=True)
    results: Dict[str, SubResult] = {}
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, Exception):
            reason = str(outcome) or type(outcome).__name__
            log_event("sub_flow_failed", source=name, error=type(outcome).__name__, reason=reason)
            results[name] = SubResult(source=name, error=PartialDataError(name, reason))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results[name] = SubResult(source=name, value=outcome)
    return results


def _shorten(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("data:"):
        return f"<data uri, {len(value)} chars>"
    if isinstance(value, dict):
        return {key: _shorten(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_shorten(item) for item in value]
    return value


def summarize_payload(payload: Any) -> Any:
    """JSON-friendly view of a payload with media data URIs collapsed."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return _shorten(payload)


def summarize_state(state: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: summarize_payload(value) for key, value in state.items()}


@contextmanager
def flow_scope(name: str, payload: Any) -> Iterator[Span]:
    """Span plus log scope around one flow run; nested flows extend the flow chain."""
    attrs: Dict[str, object] = {"flow.name": name}
    attrs.update(build_span_attributes("flow.input", summarize_payload(payload)))
    started = time.perf_counter()
    with flow_log_scope(name) as scope:
        attrs["flow.trace_id"] = scope.trace_id
        if scope.action:
            attrs["flow.action"] = scope.action
        log_event("flow_start")
        with start_span(f"flow.{name}", attributes=attrs) as span:
            try:
                yield span
            except Exception as exc:
                record_exception(span, exc)
                log_event("flow_error", error=type(exc).__name__, message=str(exc))
                raise
        log_event("flow_complete", elapsed_ms=int((time.perf_counter() - started) * 1000))


def trace_node(flow_name: str, node_name: str, func):
    async def _inner(state):
        attrs = {"workflow.name": flow_name, "node.name": node_name}
        attrs.update(build_span_attributes("node.input", summarize_state(state)))
        with start_span(f"workflow.{flow_name}.{node_name}", attributes=attrs) as span:
            try:
                result = await func(state)
            except Exception as exc:
                record_exception(span, exc)
                raise
            set_span_attributes(
                span, build_span_attributes("node.output", summarize_state(result))
            )
            return result

    return _inner
