"""
Action boundary: the only entry points the UI calls.

Every action re-validates the raw request, runs its flow and converts the
outcome into an :data:`ActionResult`. Internal exception details never leave
this module; they are logged under the request's trace id instead.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from .agent.flows import (
    ask_ai,
    diagnose_crop_disease,
    estimate_carbon_credits,
    find_government_schemes,
    forecast_disease_outbreak,
    get_crop_recommendations,
    get_farm_insights,
    get_market_price,
    get_weather_forecast,
    predict_yield,
    speech_to_text,
    text_to_speech,
)
from .observability.logging_utils import get_trace_id, log_event, request_scope
from .schemas import (
    ActionFailure,
    ActionResult,
    ActionSuccess,
    AskAIInput,
    CarbonCreditsInput,
    CropRecommendationsInput,
    DiagnoseCropDiseaseInput,
    DiseaseOutbreakInput,
    FarmInsightsInput,
    GovernmentSchemesInput,
    Invalid,
    MarketPriceInput,
    SpeechToTextInput,
    TextToSpeechInput,
    WeatherForecastInput,
    YieldPredictionInput,
    validate_input,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    flow: Callable[[BaseModel], Awaitable[BaseModel]]
    failure_message: str


async def _run(spec: ActionSpec, raw: Any) -> ActionResult:
    with request_scope(uuid.uuid4().hex, action=spec.name):
        outcome = validate_input(spec.input_model, raw)
        if isinstance(outcome, Invalid):
            log_event("action_invalid", field=outcome.field, errors=list(outcome.errors))
            return ActionFailure(error=outcome.message)
        try:
            data = await spec.flow(outcome.value)
        except Exception as exc:
            logger.exception("action %s failed (trace %s)", spec.name, get_trace_id())
            log_event("action_error", error=type(exc).__name__)
            return ActionFailure(error=spec.failure_message)
        log_event("action_success")
        return ActionSuccess(data=data)


DIAGNOSE_CROP_DISEASE = ActionSpec(
    name="diagnose_crop_disease",
    description="Diagnose a crop disease from a photo.",
    input_model=DiagnoseCropDiseaseInput,
    flow=diagnose_crop_disease,
    failure_message="An unexpected error occurred while diagnosing. Please try again.",
)
GET_MARKET_PRICE = ActionSpec(
    name="get_market_price",
    description="Current mandi price with a 7-day history.",
    input_model=MarketPriceInput,
    flow=get_market_price,
    failure_message="An unexpected error occurred while fetching prices. Please try again.",
)
FIND_GOVERNMENT_SCHEMES = ActionSpec(
    name="find_government_schemes",
    description="Government schemes relevant to a query.",
    input_model=GovernmentSchemesInput,
    flow=find_government_schemes,
    failure_message="An unexpected error occurred while finding schemes. Please try again.",
)
SPEECH_TO_TEXT = ActionSpec(
    name="speech_to_text",
    description="Transcribe recorded audio.",
    input_model=SpeechToTextInput,
    flow=speech_to_text,
    failure_message="Failed to transcribe audio. Please try again.",
)
TEXT_TO_SPEECH = ActionSpec(
    name="text_to_speech",
    description="Read text aloud as an audio data URI.",
    input_model=TextToSpeechInput,
    flow=text_to_speech,
    failure_message="Failed to convert text to speech. Please try again.",
)
PREDICT_YIELD = ActionSpec(
    name="predict_yield",
    description="Predict the yield of a field.",
    input_model=YieldPredictionInput,
    flow=predict_yield,
    failure_message="An unexpected error occurred during yield prediction. Please try again.",
)
ASK_AI = ActionSpec(
    name="ask_ai",
    description="Ask the farming assistant a question.",
    input_model=AskAIInput,
    flow=ask_ai,
    failure_message="An unexpected error occurred. Please try again.",
)
GET_WEATHER_FORECAST = ActionSpec(
    name="get_weather_forecast",
    description="5-day weather forecast for a location.",
    input_model=WeatherForecastInput,
    flow=get_weather_forecast,
    failure_message="An unexpected error occurred while fetching the forecast. Please try again.",
)
FORECAST_DISEASE_OUTBREAK = ActionSpec(
    name="forecast_disease_outbreak",
    description="Week-ahead disease outbreak risk for a crop.",
    input_model=DiseaseOutbreakInput,
    flow=forecast_disease_outbreak,
    failure_message="An unexpected error occurred during the forecast. Please try again.",
)
ESTIMATE_CARBON_CREDITS = ActionSpec(
    name="estimate_carbon_credits",
    description="Estimate carbon credits of a project.",
    input_model=CarbonCreditsInput,
    flow=estimate_carbon_credits,
    failure_message=(
        "An unexpected error occurred during carbon credit estimation. Please try again."
    ),
)
GET_FARM_INSIGHTS = ActionSpec(
    name="get_farm_insights",
    description="Prioritized insights combining weather, disease and market data.",
    input_model=FarmInsightsInput,
    flow=get_farm_insights,
    failure_message="An unexpected error occurred while generating insights. Please try again.",
)
GET_CROP_RECOMMENDATIONS = ActionSpec(
    name="get_crop_recommendations",
    description="Top 3 alternative crops for the next season.",
    input_model=CropRecommendationsInput,
    flow=get_crop_recommendations,
    failure_message=(
        "An unexpected error occurred while generating recommendations. Please try again."
    ),
)

ACTIONS: Dict[str, ActionSpec] = {
    spec.name: spec
    for spec in (
        DIAGNOSE_CROP_DISEASE,
        GET_MARKET_PRICE,
        FIND_GOVERNMENT_SCHEMES,
        SPEECH_TO_TEXT,
        TEXT_TO_SPEECH,
        PREDICT_YIELD,
        ASK_AI,
        GET_WEATHER_FORECAST,
        FORECAST_DISEASE_OUTBREAK,
        ESTIMATE_CARBON_CREDITS,
        GET_FARM_INSIGHTS,
        GET_CROP_RECOMMENDATIONS,
    )
}


def list_actions() -> List[Dict[str, str]]:
    return [{"name": spec.name, "description": spec.description} for spec in ACTIONS.values()]


def get_action(name: str) -> Optional[ActionSpec]:
    return ACTIONS.get(name)


async def run_action(name: str, raw: Any) -> ActionResult:
    """
    Run the action called ``name``.

    Raises:
        KeyError: no action has that name.
    """
    spec = ACTIONS.get(name)
    if spec is None:
        raise KeyError(name)
    return await _run(spec, raw)


async def diagnose_crop_disease_action(raw: Any) -> ActionResult:
    return await _run(DIAGNOSE_CROP_DISEASE, raw)


async def get_market_price_action(raw: Any) -> ActionResult:
    return await _run(GET_MARKET_PRICE, raw)


async def find_government_schemes_action(raw: Any) -> ActionResult:
    return await _run(FIND_GOVERNMENT_SCHEMES, raw)


async def speech_to_text_action(raw: Any) -> ActionResult:
    return await _run(SPEECH_TO_TEXT, raw)


async def text_to_speech_action(raw: Any) -> ActionResult:
    return await _run(TEXT_TO_SPEECH, raw)


async def predict_yield_action(raw: Any) -> ActionResult:
    return await _run(PREDICT_YIELD, raw)


async def ask_ai_action(raw: Any) -> ActionResult:
    return await _run(ASK_AI, raw)


async def get_weather_forecast_action(raw: Any) -> ActionResult:
    return await _run(GET_WEATHER_FORECAST, raw)


async def forecast_disease_outbreak_action(raw: Any) -> ActionResult:
    return await _run(FORECAST_DISEASE_OUTBREAK, raw)


async def estimate_carbon_credits_action(raw: Any) -> ActionResult:
    return await _run(ESTIMATE_CARBON_CREDITS, raw)


async def get_farm_insights_action(raw: Any) -> ActionResult:
    return await _run(GET_FARM_INSIGHTS, raw)


async def get_crop_recommendations_action(raw: Any) -> ActionResult:
    return await _run(GET_CROP_RECOMMENDATIONS, raw)
