from __future__ import annotations

from ..schemas import DiagnoseCropDiseaseInput
from .fragments import (
    RenderedPrompt,
    field_line,
    language_directive,
    media_part,
    numbered,
    render,
    when,
)


DIAGNOSIS_PREAMBLE = (
    "You are a plant pathologist who identifies crops and diagnoses their diseases "
    "and pests from photos. Your answer must be complete and usable by a farmer in the field.\n"
    "Study the attached photo and work through the steps below in order."
)

DIAGNOSIS_STEPS = (
    "Identify the crop in the photo and put it in 'cropName'.",
    "Identify the disease or pest and put it in 'disease'.",
    "Rate the severity as Low, Medium or High in 'severity'.",
    "Describe the stage visible in the photo (for example early yellow spotting on "
    "lower leaves, or heavy larval damage) in 'currentStage'.",
    "Forecast how the problem develops over the next 1-3 weeks if untreated in "
    "'diseaseProgression'.",
    "List the most urgent actions to limit damage in 'immediateSteps'.",
    "Give general, affordable, locally available remedies in 'remedies'.",
    "Give organic and natural remedies in 'organicRemedies'.",
    "Give pesticide or fungicide based remedies in 'chemicalRemedies'.",
    "Explain how to prevent a recurrence in 'preventiveMeasures'.",
)


def render_diagnosis(payload: DiagnoseCropDiseaseInput) -> RenderedPrompt:
    return render(
        DIAGNOSIS_PREAMBLE,
        numbered(DIAGNOSIS_STEPS),
        when(
            payload.crop_name,
            "The farmer reports the crop below; confirm it against the photo.",
        ),
        field_line("Reported crop", payload.crop_name),
        language_directive(payload.language),
        media=[media_part(payload.photo_data_uri, "Crop image")],
    )
