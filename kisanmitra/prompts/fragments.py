"""
Building blocks for flow prompts.

Renderers are pure: they read a validated input model and return a
:class:`RenderedPrompt`. Optional sections are produced by helpers that return
``None`` when the bound field is absent, and :func:`join_lines` drops them, so
a missing field never leaves a dangling label behind.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Union

from ..schemas import TRANSCRIBABLE_AUDIO, parse_data_uri


Fragment = Union[str, None, Iterable[Optional[str]]]


@dataclass(frozen=True)
class MediaPart:
    """An image or audio attachment sent beside the prompt text."""

    uri: str
    mime_type: str
    label: str

    @property
    def kind(self) -> str:
        return self.mime_type.split("/", 1)[0]

    def to_content_block(self) -> Dict[str, Any]:
        if self.kind != "image":
            raise ValueError(f"{self.mime_type} cannot be inlined into a chat message")
        return {"type": "image_url", "image_url": {"url": self.uri}}

    def as_upload(self, stem: str = "recording") -> Tuple[str, bytes, str]:
        """``(filename, content, mime type)`` for multipart upload endpoints."""
        mime, payload = parse_data_uri(self.uri)
        subtype = mime.split("/", 1)[1]
        extension = TRANSCRIBABLE_AUDIO.get(subtype, subtype)
        return f"{stem}.{extension}", base64.b64decode(payload), mime


@dataclass(frozen=True)
class RenderedPrompt:
    text: str
    media: Tuple[MediaPart, ...] = ()

    def content_blocks(self) -> list:
        blocks: list = [{"type": "text", "text": self.text}]
        for part in self.media:
            blocks.append({"type": "text", "text": f"{part.label}:"})
            blocks.append(part.to_content_block())
        return blocks


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def format_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return f"{value:g}"
    return str(value).strip()


def field_line(
    label: str, value: Any, *, bullet: str = "*", suffix: str = ""
) -> Optional[str]:
    if not is_present(value):
        return None
    return f"{bullet} {label}: {format_value(value)}{suffix}"


def when(condition: Any, text: str) -> Optional[str]:
    return text if is_present(condition) else None


def numbered(steps: Sequence[Optional[str]]) -> str:
    kept = [step for step in steps if step]
    return "\n".join(f"{index}. {step}" for index, step in enumerate(kept, start=1))


def join_lines(*parts: Fragment, separator: str = "\n") -> str:
    lines = []
    for part in parts:
        if part is None:
            continue
        if isinstance(part, str):
            if part:
                lines.append(part)
            continue
        nested = [item for item in part if item]
        if nested:
            lines.append("\n".join(nested))
    return separator.join(lines)


def language_directive(language: str) -> str:
    return f"Respond in the specified language: {language}."


def media_part(uri: Optional[str], label: str) -> Optional[MediaPart]:
    if not is_present(uri):
        return None
    mime, _ = parse_data_uri(uri)
    return MediaPart(uri=uri, mime_type=mime, label=label)


def context_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2, sort_keys=True, default=str)


def render(*sections: Fragment, media: Iterable[Optional[MediaPart]] = ()) -> RenderedPrompt:
    text = join_lines(*sections, separator="\n\n")
    return RenderedPrompt(
        text=text, media=tuple(part for part in media if part is not None)
    )
