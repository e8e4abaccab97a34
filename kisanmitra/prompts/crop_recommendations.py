from __future__ import annotations

from typing import Mapping, Sequence

from ..schemas import CropRecommendationsInput
from .fragments import (
    RenderedPrompt,
    context_json,
    field_line,
    join_lines,
    language_directive,
    numbered,
    render,
)
from .farm_insights import UNAVAILABLE


ADVISOR_PREAMBLE = (
    "You are an agronomist acting as a crop switching advisor. From the data below, "
    "recommend the 3 best alternative crops for the farmer's next planting season."
)

ADVISOR_STEPS = (
    "Review the farmer's current crop, region, soil report and field history, and the "
    "candidate crop data with market prices and disease risk forecasts. Data marked "
    f"'{UNAVAILABLE}' could not be fetched; rely on general knowledge for it and say so.",
    "For every candidate assess soil suitability (from the soil report, or typical "
    "soils of the region when none is given), water needs against the regional "
    "climate, the market trend and its volatility, and pest and disease risk.",
    "Give each candidate a profitability score (High, Medium or Low Profitability) "
    "combining market trend and expected yield, and a risk score (High, Medium or Low "
    "Risk) combining price volatility and disease risk.",
    "Rank the candidates, preferring high profitability with low to medium risk, and "
    "keep the top 3.",
    "For each of the 3 give 'cropName', 'profitabilityScore', 'riskScore', "
    "'profitabilityAnalysis' (market trend and yield potential), 'suitability' (soil, "
    "water and climate) and 'actionableAdvice' (seed varieties, sowing window, key "
    "risks to prepare for).",
)

EXACT_COUNT_NOTE = "Return exactly 3 recommendations, best first."


def render_crop_recommendations(
    payload: CropRecommendationsInput,
    candidates: Sequence[Mapping[str, object]],
) -> RenderedPrompt:
    farm = join_lines(
        "Farm:",
        (
            field_line("Current crop", payload.current_crop),
            field_line("Region", payload.region),
            field_line("Soil report", payload.soil_report),
            field_line("Field history", payload.history),
        ),
    )
    return render(
        ADVISOR_PREAMBLE,
        numbered(ADVISOR_STEPS),
        EXACT_COUNT_NOTE,
        farm,
        f"Candidate crop data:\n{context_json(list(candidates))}",
        language_directive(payload.language),
    )
