from __future__ import annotations

from typing import Optional

from .observability.logging_utils import current_flow


class FlowError(Exception):
    """Base class for every error raised by the flow layer."""


class InputValidationError(FlowError):
    """Raw input failed the schema checks of a flow."""

    def __init__(self, field: Optional[str], message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class InvocationError(FlowError):
    """The model backend call failed or returned an unusable answer."""

    def __init__(self, message: str, *, flow: Optional[str] = None) -> None:
        super().__init__(message)
        self.flow = flow or current_flow()


class OutputParseError(InvocationError):
    """The model answer could not be coerced to the declared output schema."""


class ToolExecutionError(InvocationError):
    """A tool requested by the model is unknown, failed, or broke its contract."""


class PartialDataError(FlowError):
    """A sub-flow of a composite flow failed; carried as a placeholder, not raised."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason
