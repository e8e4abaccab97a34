from __future__ import annotations

from typing import Mapping

from ..schemas import FarmInsightsInput
from .fragments import (
    RenderedPrompt,
    context_json,
    field_line,
    join_lines,
    language_directive,
    numbered,
    render,
)


UNAVAILABLE = "not available"

INSIGHT_SOURCES = (
    ("weather", "Weather Forecast"),
    ("disease", "Disease Risk Forecast"),
    ("market", "Market Price"),
)

INSIGHTS_PREAMBLE = (
    "You are KisanMitra, a farm manager assistant. Combine the data below into a short, "
    "prioritized list of actionable insights for the farmer for the coming week."
)

INSIGHTS_STEPS = (
    "Review the weather forecast, the disease risk forecast and the market price data. "
    f"A section marked '{UNAVAILABLE}' could not be fetched: ignore it and do not guess "
    "its content.",
    "Find what needs the farmer's attention. Think about how the weather changes "
    "disease risk, irrigation needs and field work.",
    "Give each insight a priority: High for anything that can cause significant crop "
    "loss or needs action now, otherwise Medium or Low.",
    "Give each insight a short title and one clear recommendation the farmer can act on.",
    "Set the category to Weather, Disease, Irrigation, Market or General.",
    "Set the source to the section the insight comes from (Weather Forecast, Disease "
    "Risk Forecast or Market Price).",
    "Leave out normal, non-impactful events such as partly cloudy skies without rain. "
    "If there is no significant disease risk, do not produce a disease insight.",
    "Order the insights from highest to lowest priority.",
)


def _section(title: str, value: object) -> str:
    body = UNAVAILABLE if value is None or value == UNAVAILABLE else context_json(value)
    return f"{title}:\n{body}"


def render_farm_insights(
    payload: FarmInsightsInput, context: Mapping[str, object]
) -> RenderedPrompt:
    farm = join_lines(
        "Farm:",
        (
            field_line("Crop", payload.crop),
            field_line("Region", payload.region),
            field_line("Mandi", payload.mandi),
        ),
    )
    data = join_lines(
        "Farm data context:",
        *(_section(title, context.get(key)) for key, title in INSIGHT_SOURCES),
    )
    return render(
        INSIGHTS_PREAMBLE,
        numbered(INSIGHTS_STEPS),
        farm,
        data,
        language_directive(payload.language),
    )
