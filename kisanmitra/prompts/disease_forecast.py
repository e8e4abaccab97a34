from __future__ import annotations

from ..schemas import DiseaseOutbreakInput
from .fragments import RenderedPrompt, field_line, language_directive, numbered, render


OUTBREAK_PREAMBLE = (
    "You are an agricultural scientist and plant pathologist. Forecast the risk of "
    "disease outbreaks for a crop in a region from the crop type and the weather "
    "expected over the coming week."
)

OUTBREAK_STEPS = (
    "Consider the expected 7-day weather for the region: temperature, humidity, "
    "rainfall and leaf wetness.",
    "Name the fungal, bacterial or viral diseases most likely to appear or spread.",
    "Rate each one as Low, Medium, High or Very High in 'riskLevel' and explain the "
    "conditions behind the rating in 'riskFactors'.",
    "Give practical preventive actions for each risk in 'preventiveActions'.",
    "Summarize the overall risk for the week in 'forecastSummary'.",
)


def render_disease_forecast(payload: DiseaseOutbreakInput) -> RenderedPrompt:
    return render(
        OUTBREAK_PREAMBLE,
        "Inputs:",
        (
            field_line("Crop", payload.crop),
            field_line("Region", payload.region),
        ),
        numbered(OUTBREAK_STEPS),
        language_directive(payload.language),
    )
