from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from langchain_core.tools import BaseTool, tool as lc_tool
from pydantic import BaseModel, ValidationError

from ...errors import ToolExecutionError
from ...observability.logging_utils import log_event


@dataclass(frozen=True)
class RegisteredTool:
    tool: BaseTool
    output_schema: Optional[Type[BaseModel]] = None


TOOL_INDEX: Dict[str, RegisteredTool] = {}


def register_tool(tool: BaseTool, output_schema: Optional[Type[BaseModel]] = None) -> None:
    """Register a LangChain tool so flows can request it by name."""
    TOOL_INDEX[tool.name] = RegisteredTool(tool=tool, output_schema=output_schema)


def get_tool(name: str) -> BaseTool:
    entry = TOOL_INDEX.get(name)
    if entry is None:
        raise ToolExecutionError(f"unknown tool: {name}")
    return entry.tool


def list_tool_specs() -> List[Dict[str, str]]:
    return [
        {"name": entry.tool.name, "description": entry.tool.description or ""}
        for entry in TOOL_INDEX.values()
    ]


def auto_register_tool(*tool_args, output_schema: Optional[Type[BaseModel]] = None, **tool_kwargs):
    """
    Decorator that wraps LangChain's `@tool` and registers the tool automatically.

    Usage:

        @auto_register_tool("name", description="...", args_schema=Query)
        async def handler(crop: str, mandi: str) -> dict:
            ...
    """

    def decorator(func):
        description = tool_kwargs.pop("description", None)
        if description:
            func.__doc__ = description
        langchain_tool = lc_tool(*tool_args, **tool_kwargs)(func)
        register_tool(langchain_tool, output_schema)
        return langchain_tool

    return decorator


def _summarize_tool_output(payload: Any) -> Dict[str, object]:
    summary: Dict[str, object] = {}
    if isinstance(payload, dict):
        summary["data_keys"] = sorted(payload.keys())
        for key, value in payload.items():
            if isinstance(value, list):
                summary[f"{key}_count"] = len(value)
    return summary


async def execute_tool(name: str, args: Dict[str, Any]) -> Dict[str, Any]:
    """
    Run a registered tool and check its answer against the declared output schema.

    Raises:
        ToolExecutionError: the tool is unknown, failed, or returned a malformed payload.
    """
    entry = TOOL_INDEX.get(name)
    if entry is None:
        raise ToolExecutionError(f"unknown tool: {name}")
    try:
        result = await entry.tool.ainvoke(args)
    except ToolExecutionError:
        raise
    except (ValidationError, ValueError, TypeError) as exc:
        raise ToolExecutionError(f"tool {name} rejected its arguments: {exc}") from exc
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json", by_alias=True)
    if entry.output_schema is not None:
        try:
            checked = entry.output_schema.model_validate(result)
        except ValidationError as exc:
            raise ToolExecutionError(
                f"tool {name} returned a malformed payload: {exc.error_count()} errors"
            ) from exc
        result = checked.model_dump(mode="json", by_alias=True)
    if not isinstance(result, dict):
        raise ToolExecutionError(
            f"tool {name} returned unsupported type {type(result)!r}"
        )
    log_event("tool_output", tool=name, summary=_summarize_tool_output(result))
    return result
