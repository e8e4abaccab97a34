from __future__ import annotations

from typing import Any, Dict, Literal, Union

from pydantic import BaseModel, Field


class ActionSuccess(BaseModel):
    success: Literal[True] = True
    data: Any


class ActionFailure(BaseModel):
    success: Literal[False] = False
    error: str = Field(..., min_length=1)


ActionResult = Union[ActionSuccess, ActionFailure]


def to_payload(result: ActionResult) -> Dict[str, Any]:
    """Serialize an action result the way the UI expects it (camelCase data)."""
    if isinstance(result, ActionSuccess):
        data = result.data
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json", by_alias=True)
        return {"success": True, "data": data}
    return {"success": False, "error": result.error}
