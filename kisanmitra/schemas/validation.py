from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..errors import InputValidationError


T = TypeVar("T", bound=BaseModel)

GENERIC_INVALID_MESSAGE = "Invalid input. Please check the form and try again."


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    field: Optional[str]
    message: str
    errors: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> InputValidationError:
        return InputValidationError(self.field, self.message)


ValidationOutcome = Union[Valid[T], Invalid]


def _wire_name(model: Type[BaseModel], name: object) -> Optional[str]:
    if not isinstance(name, str):
        return None
    for field_name, info in model.model_fields.items():
        if name in (field_name, info.alias):
            return info.alias or field_name
    return name


def _describe(error: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    return f"{loc}: {error.get('msg')}" if loc else str(error.get("msg"))


def _friendly_message(
    model: Type[BaseModel], wire_name: Optional[str], error: Mapping[str, Any]
) -> str:
    if error.get("type") == "extra_forbidden":
        return f"Unexpected field: {wire_name}."
    messages = getattr(model, "field_messages", {}) or {}
    if wire_name and wire_name in messages:
        return messages[wire_name]
    if wire_name:
        return f"{wire_name}: {error.get('msg')}"
    return GENERIC_INVALID_MESSAGE


def validate_input(model: Type[T], raw: Any) -> ValidationOutcome:
    """
    Validate a raw request payload against a flow input model.

    Never raises; the ``Invalid`` outcome carries the first failing field and a
    message fit for showing to the farmer, plus every pydantic error for logs.
    """
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(raw, Mapping):
        return Invalid(field=None, message=GENERIC_INVALID_MESSAGE)
    try:
        value = model.model_validate(dict(raw))
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        loc = first.get("loc") or (None,)
        wire_name = _wire_name(model, loc[0])
        return Invalid(
            field=wire_name,
            message=_friendly_message(model, wire_name, first),
            errors=tuple(_describe(item) for item in errors),
        )
    return Valid(value)


def require_valid(model: Type[T], raw: Any) -> T:
    """Like :func:`validate_input` but raises :class:`InputValidationError`."""
    outcome = validate_input(model, raw)
    if isinstance(outcome, Invalid):
        raise outcome.to_error()
    return outcome.value


__all__ = [
    "GENERIC_INVALID_MESSAGE",
    "Invalid",
    "Valid",
    "ValidationOutcome",
    "require_valid",
    "validate_input",
]
