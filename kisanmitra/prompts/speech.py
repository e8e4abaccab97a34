from __future__ import annotations

import re
from typing import Optional

from ..schemas import SpeechToTextInput, TextToSpeechInput
from .fragments import RenderedPrompt, media_part, render


_ISO_639_1 = re.compile(r"^[a-z]{2}$")


def render_transcription(payload: SpeechToTextInput) -> RenderedPrompt:
    """Context hint for the transcription model; the recording travels as the media part."""
    return render(
        f"A farmer speaking {payload.language} about crops, weather, pests, "
        "mandi prices or government schemes.",
        "Keep crop, pesticide and place names as spoken.",
        media=[media_part(payload.audio, "Audio")],
    )


def transcription_language(payload: SpeechToTextInput) -> Optional[str]:
    """ISO-639-1 code for the transcription endpoint, or None for names like "Hindi"."""
    code = payload.language.strip().lower()
    return code if _ISO_639_1.match(code) else None


def speech_instructions(payload: TextToSpeechInput) -> str:
    return f"Speak clearly and warmly, in {payload.language}, for a farmer listening on a phone."
