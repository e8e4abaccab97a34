from __future__ import annotations

from ..schemas import GovernmentSchemesInput
from .fragments import RenderedPrompt, field_line, language_directive, render


SCHEMES_PREAMBLE = (
    "You help farmers find government schemes that fit their situation. For the "
    "query below list the relevant schemes and explain, in simple words, who is "
    "eligible, what the benefits are and how to apply. Include an official link when "
    "you know one."
)


def render_government_schemes(payload: GovernmentSchemesInput) -> RenderedPrompt:
    return render(
        SCHEMES_PREAMBLE,
        field_line("Query", payload.query, bullet="-"),
        language_directive(payload.language),
    )
