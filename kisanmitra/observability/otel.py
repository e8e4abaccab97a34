from __future__ import annotations

import json
import logging
import os
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode


SERVICE_NAME = "kisanmitra"
_OTEL_INITIALIZED = False
_OTEL_ATTR_MAX_LEN = int(os.getenv("OTEL_ATTR_MAX_LEN", "2000"))

logger = logging.getLogger(__name__)


def _parse_pairs(raw: Optional[str]) -> Dict[str, str]:
    """Parse ``k1=v1,k2=v2`` strings used by the OTEL_* environment variables."""
    if not raw:
        return {}
    pairs: Dict[str, str] = {}
    for item in raw.split(","):
        key, sep, value = item.strip().partition("=")
        if sep and key.strip() and value.strip():
            pairs[key.strip()] = value.strip()
    return pairs


def _serialize(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def build_span_attributes(
    prefix: str, payload: object, limit: Optional[int] = None
) -> Dict[str, object]:
    text = _serialize(payload)
    size = len(text)
    max_len = _OTEL_ATTR_MAX_LEN if limit is None else limit
    truncated = bool(max_len) and size > max_len
    if truncated:
        text = text[:max_len] + "..."
    return {
        prefix: text,
        f"{prefix}.size": size,
        f"{prefix}.truncated": truncated,
    }


def set_span_attributes(span: Span, attributes: Optional[Dict[str, object]]) -> None:
    if not attributes:
        return None
    for key, value in attributes.items():
        if value is None:
            continue
        if not isinstance(value, (str, bool, int, float)):
            value = _serialize(value)
        span.set_attribute(key, value)


@contextmanager
def start_span(
    name: str, attributes: Optional[Dict[str, object]] = None
) -> Iterator[Span]:
    tracer = trace.get_tracer(os.getenv("OTEL_SERVICE_NAME") or SERVICE_NAME)
    with tracer.start_as_current_span(name) as span:
        set_span_attributes(span, attributes)
        yield span


def record_exception(span: Span, exc: BaseException) -> None:
    span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR, type(exc).__name__))


def _resolve_traces_endpoint() -> Optional[str]:
    override = os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")
    if override:
        return override
    base = (os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or "").strip()
    if not base:
        return None
    if "/v1/" in base:
        return base
    return base.rstrip("/") + "/v1/traces"


def init_otel(service_name: Optional[str] = None) -> bool:
    """Install an OTLP/HTTP span exporter when an endpoint is configured."""
    global _OTEL_INITIALIZED
    if _OTEL_INITIALIZED:
        return True
    exporter_name = (os.getenv("OTEL_TRACES_EXPORTER") or "otlp").strip().lower()
    if exporter_name in {"none", "off", "false", "0"}:
        return False
    endpoint = _resolve_traces_endpoint()
    if not endpoint:
        return False
    service = service_name or os.getenv("OTEL_SERVICE_NAME") or SERVICE_NAME
    resource = Resource.create(
        {"service.name": service, **_parse_pairs(os.getenv("OTEL_RESOURCE_ATTRIBUTES"))}
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=endpoint,
                headers=_parse_pairs(os.getenv("OTEL_EXPORTER_OTLP_HEADERS")),
            )
        )
    )
    trace.set_tracer_provider(provider)
    logger.info("OTLP trace export enabled: %s", endpoint)
    _OTEL_INITIALIZED = True
    return True
