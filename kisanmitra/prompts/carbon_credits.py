from __future__ import annotations

from ..domain import ProjectType
from ..schemas import CarbonCreditsInput
from .fragments import (
    RenderedPrompt,
    field_line,
    join_lines,
    language_directive,
    media_part,
    numbered,
    render,
)


CARBON_PREAMBLE = (
    "You estimate carbon credits for small agricultural projects using IPCC default "
    "methodologies (2006 guidelines and 2019 refinement, AFOLU). Give the farmer a "
    "simplified, conservative estimate for the project described below."
)

AGROFORESTRY_METHOD = (
    "This is an agroforestry project: estimate annual CO2 sequestration from tree "
    "biomass growth of a common fast-growing agroforestry species for the region, "
    "using the number of trees, their age and the area."
)

RICE_METHOD = (
    "This is a rice cultivation project: estimate the methane (CH4) emissions avoided "
    "compared with a baseline of continuous flooding and conventional straw "
    "management, applying IPCC emission and scaling factors for the stated water and "
    "straw management, and convert the reduction to tCO2e."
)

CARBON_STEPS = (
    "Use conservative IPCC default values for the region.",
    "Put the estimated annual credits in tCO2e in 'estimatedCredits' as a number.",
    "Explain in simple words how the estimate was reached and which factors mattered "
    "in 'explanation'.",
    "Give a potential annual revenue range in USD at $5-$15 per tCO2e in "
    "'potentialRevenue'.",
    "List simple next steps to enrol in a formal carbon programme in 'nextSteps'.",
)

PHOTO_NOTE = (
    "A photo of the project area is attached. Mention that it can support later "
    "verification; do not analyse it."
)


def _method(payload: CarbonCreditsInput) -> str:
    if payload.project_type == ProjectType.AGROFORESTRY:
        return AGROFORESTRY_METHOD
    return RICE_METHOD


def render_carbon_credits(payload: CarbonCreditsInput) -> RenderedPrompt:
    details = join_lines(
        "Project details:",
        (
            field_line("Project type", payload.project_type),
            field_line("Hectares", payload.hectares),
            field_line("Region", payload.region),
            field_line("Number of trees", payload.tree_count),
            field_line("Planting year", payload.planting_year),
            field_line("Water management", payload.water_management),
            field_line("Straw management", payload.straw_management),
            field_line("Planting date", payload.planting_date),
            field_line("Harvest date", payload.harvest_date),
        ),
    )
    photo = media_part(payload.photo_data_uri, "Project area photo")
    return render(
        CARBON_PREAMBLE,
        _method(payload),
        numbered(CARBON_STEPS + ((PHOTO_NOTE,) if photo else ())),
        details,
        language_directive(payload.language),
        media=[photo],
    )
