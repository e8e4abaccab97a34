from __future__ import annotations

from ..schemas import AskAIInput
from .fragments import RenderedPrompt, field_line, language_directive, render, when


ASSISTANT_PREAMBLE = (
    "You are KisanMitra, an assistant for farmers. Give helpful, accurate and concise "
    "advice on any agricultural topic. Always answer in the farmer's language."
)

HISTORY_NOTE = "Continue the conversation above; earlier turns give context for the query."


def render_ask_ai(payload: AskAIInput) -> RenderedPrompt:
    return render(
        ASSISTANT_PREAMBLE,
        when(payload.history, HISTORY_NOTE),
        field_line("Current query", payload.query, bullet="-"),
        language_directive(payload.language),
    )
