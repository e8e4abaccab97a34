from __future__ import annotations

from ..schemas import YieldPredictionInput
from .fragments import (
    RenderedPrompt,
    field_line,
    join_lines,
    language_directive,
    media_part,
    numbered,
    render,
    when,
)


YIELD_PREAMBLE = (
    "You are an agronomist and data scientist who forecasts crop yields. Combine the "
    "farmer's inputs with what is typical for the region and crop to give a realistic "
    "forecast and concrete advice."
)

YIELD_ANALYSIS_STEPS = (
    "Compare the farmer's rainfall estimate with typical weather for the region.",
    "Consider typical soil properties (pH, organic matter) for the soil type and region.",
    "Use typical NDVI values for the crop at its current growth stage in the region as "
    "a proxy for vegetation health.",
    "Use the average historical yield of the crop in the region as a baseline.",
    "Estimate the current growth stage from the planting date.",
)

YIELD_OUTPUT_STEPS = (
    "Predict the final yield in tonnes per hectare as a range (for example "
    "\"4.5 - 5.0 t/ha\") in 'predictedYield'.",
    "Rate your confidence as High, Medium or Low with a one-sentence reason in "
    "'confidence'.",
    "Give clear recommendations to secure or improve the yield (fertilizer, "
    "irrigation, soil management) in 'recommendations'.",
)

PHOTO_NOTE = (
    "A photo of the field is attached. Check it for crop health, density, colour and "
    "visible stress, disease or nutrient deficiency, and treat it as the most current "
    "evidence."
)


def render_yield_prediction(payload: YieldPredictionInput) -> RenderedPrompt:
    inputs = join_lines(
        "Farmer inputs:",
        (
            field_line("Crop", payload.crop),
            field_line("Area", payload.hectares, suffix=" hectares"),
            field_line("Soil type", payload.soil_type),
            field_line("Region", payload.region),
            field_line("Planting date", payload.planting_date),
            field_line("Rainfall estimate", payload.rainfall, suffix=" mm/year"),
        ),
    )
    return render(
        YIELD_PREAMBLE,
        inputs,
        when(payload.photo_data_uri, PHOTO_NOTE),
        "Analysis:",
        numbered(YIELD_ANALYSIS_STEPS),
        "Output:",
        numbered(YIELD_OUTPUT_STEPS),
        language_directive(payload.language),
        media=[media_part(payload.photo_data_uri, "Crop field image")],
    )
