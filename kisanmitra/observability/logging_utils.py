"""
Structured event log.

Every event is one JSON line on the ``kisanmitra.events`` logger. The request
scope (trace id, action, and the chain of flows currently running) lives in a
context var, so events logged deep inside a tool or a sub-flow still say which
request and which flow produced them without threading names through calls.
Tasks started by ``asyncio.gather`` copy the scope of their parent, which is
how sub-flows of a composite flow inherit its trace id and flow chain.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple


UNKNOWN_TRACE = "unknown"
FLOW_PATH_SEPARATOR = "/"

_LOGGER = logging.getLogger("kisanmitra.events")
_INITIALIZED = False


@dataclass(frozen=True)
class LogScope:
    trace_id: str = UNKNOWN_TRACE
    action: Optional[str] = None
    flows: Tuple[str, ...] = ()

    @property
    def flow(self) -> Optional[str]:
        return self.flows[-1] if self.flows else None

    def fields(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"trace_id": self.trace_id or UNKNOWN_TRACE}
        if self.action:
            out["action"] = self.action
        if self.flows:
            out["flow"] = self.flow
        if len(self.flows) > 1:
            out["flow_path"] = FLOW_PATH_SEPARATOR.join(self.flows)
        return out


_SCOPE_CTX: ContextVar[LogScope] = ContextVar("kisanmitra_log_scope", default=LogScope())


def init_logging(*, log_path: Optional[str] = None, level: str = "INFO") -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=[handler],
    )
    _LOGGER.setLevel(logging.INFO)
    _INITIALIZED = True


def current_flow() -> Optional[str]:
    return _SCOPE_CTX.get().flow


def get_trace_id() -> str:
    return _SCOPE_CTX.get().trace_id or UNKNOWN_TRACE


def begin_request(trace_id: str, action: Optional[str] = None) -> Token:
    """Start a fresh scope for one action call; flows of an outer scope are dropped."""
    return _SCOPE_CTX.set(LogScope(trace_id=trace_id, action=action))


def enter_flow(name: str) -> Token:
    scope = _SCOPE_CTX.get()
    return _SCOPE_CTX.set(replace(scope, flows=scope.flows + (name,)))


def reset_scope(token: Token) -> None:
    _SCOPE_CTX.reset(token)


@contextmanager
def request_scope(trace_id: str, action: Optional[str] = None) -> Iterator[LogScope]:
    token = begin_request(trace_id, action)
    try:
        yield _SCOPE_CTX.get()
    finally:
        reset_scope(token)


@contextmanager
def flow_log_scope(name: str) -> Iterator[LogScope]:
    token = enter_flow(name)
    try:
        yield _SCOPE_CTX.get()
    finally:
        reset_scope(token)


def summarize_text(text: str, limit: int = 400) -> str:
    if not text:
        return ""
    text = str(text)
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def _build_payload(event: str, fields: Dict[str, Any]) -> str:
    # explicit fields win over the scope, e.g. a sub-flow name logged by its parent
    payload = {"event": event, **_SCOPE_CTX.get().fields(), **fields}
    return json.dumps(payload, ensure_ascii=False, default=str)


def log_event(event: str, **fields: Any) -> None:
    _LOGGER.info(_build_payload(event, fields))
