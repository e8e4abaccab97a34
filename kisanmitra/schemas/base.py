from __future__ import annotations

import re
from typing import Annotated, Any, Callable, ClassVar, Dict, Tuple

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    model_validator,
)
from pydantic.alias_generators import to_camel


_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[\w.+-]+=[\w.+-]+)*;base64,(?P<data>[A-Za-z0-9+/=\s]+)$"
)

# audio subtype -> file extension accepted by the transcription endpoint
TRANSCRIBABLE_AUDIO = {
    "webm": "webm",
    "ogg": "ogg",
    "wav": "wav",
    "x-wav": "wav",
    "wave": "wav",
    "mpeg": "mp3",
    "mp3": "mp3",
    "mp4": "mp4",
    "m4a": "m4a",
    "x-m4a": "m4a",
    "flac": "flac",
}


def parse_data_uri(value: str) -> Tuple[str, str]:
    """
    Split a base64 data URI into ``(mime_type, payload)``.

    Raises:
        ValueError: if the value is not a ``data:<mimetype>;base64,<data>`` URI.
    """
    match = _DATA_URI_RE.match(value or "")
    if not match:
        raise ValueError("must be a data URI of the form data:<mimetype>;base64,<data>")
    return match.group("mime").lower(), re.sub(r"\s+", "", match.group("data"))


def _media_uri_checker(prefix: str) -> Callable[[str], str]:
    def _check(value: str) -> str:
        mime, _ = parse_data_uri(value)
        if not mime.startswith(prefix):
            raise ValueError(f"must be an {prefix}* data URI, got {mime}")
        return value

    return _check


def _check_audio_uri(value: str) -> str:
    mime, _ = parse_data_uri(value)
    kind, _, subtype = mime.partition("/")
    if kind != "audio" or subtype not in TRANSCRIBABLE_AUDIO:
        raise ValueError(
            f"unsupported audio format {mime}, expected one of "
            + ", ".join(sorted(set(TRANSCRIBABLE_AUDIO.values())))
        )
    return value


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise be read as 1/0
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    return value


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ImageDataUri = Annotated[str, AfterValidator(_media_uri_checker("image/"))]
AudioDataUri = Annotated[str, AfterValidator(_check_audio_uri)]
Number = Annotated[float, BeforeValidator(_reject_bool)]
WholeNumber = Annotated[int, BeforeValidator(_reject_bool)]


class InputRecord(BaseModel):
    """Strict record received from the UI; camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _blank_strings_are_absent(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: None if isinstance(value, str) and not value.strip() else value
            for key, value in data.items()
        }


class FlowInput(InputRecord):
    """Input of a flow. ``language`` travels with every request."""

    field_messages: ClassVar[Dict[str, str]] = {}

    language: NonEmptyStr = Field(
        ..., description="Language the model must answer in (e.g. en, hi, kn)."
    )


class FlowOutput(BaseModel):
    """Shape the model answer is coerced to; unknown keys are dropped."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
