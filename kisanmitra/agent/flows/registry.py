from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from pydantic import BaseModel

from ...prompts.assistant import render_ask_ai
from ...prompts.carbon_credits import render_carbon_credits
from ...prompts.diagnosis import render_diagnosis
from ...prompts.disease_forecast import render_disease_forecast
from ...prompts.fragments import RenderedPrompt
from ...prompts.market import MARKET_TOOL_NAME, render_market_price
from ...prompts.schemes import render_government_schemes
from ...prompts.weather import render_weather
from ...prompts.yield_prediction import render_yield_prediction
from ...schemas import (
    AskAIInput,
    AskAIOutput,
    CarbonCreditsInput,
    CarbonCreditsOutput,
    ChatTurn,
    DiagnoseCropDiseaseInput,
    DiagnoseCropDiseaseOutput,
    DiseaseOutbreakInput,
    DiseaseOutbreakOutput,
    GovernmentSchemesInput,
    GovernmentSchemesOutput,
    MarketPriceInput,
    MarketPriceOutput,
    WeatherForecastInput,
    WeatherForecastOutput,
    YieldPredictionInput,
    YieldPredictionOutput,
    require_valid,
)
from ..invocation import ModelInvoker, get_invoker
from .common import flow_scope


@dataclass(frozen=True)
class FlowSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    render: Callable[[Any], RenderedPrompt]
    tools: Tuple[str, ...] = ()
    history: Optional[Callable[[Any], Sequence[ChatTurn]]] = None


DIAGNOSIS_FLOW = FlowSpec(
    name="diagnose_crop_disease",
    description="Identify crop, disease and remedies from a photo of an affected plant.",
    input_model=DiagnoseCropDiseaseInput,
    output_model=DiagnoseCropDiseaseOutput,
    render=render_diagnosis,
)
MARKET_PRICE_FLOW = FlowSpec(
    name="get_market_price",
    description="Current price, trend and 7-day history of a crop at a mandi.",
    input_model=MarketPriceInput,
    output_model=MarketPriceOutput,
    render=render_market_price,
    tools=(MARKET_TOOL_NAME,),
)
WEATHER_FLOW = FlowSpec(
    name="get_weather_forecast",
    description="Current conditions and a 5-day forecast with a farming summary.",
    input_model=WeatherForecastInput,
    output_model=WeatherForecastOutput,
    render=render_weather,
)
DISEASE_FORECAST_FLOW = FlowSpec(
    name="forecast_disease_outbreak",
    description="Week-ahead disease risks for a crop in a region.",
    input_model=DiseaseOutbreakInput,
    output_model=DiseaseOutbreakOutput,
    render=render_disease_forecast,
)
YIELD_FLOW = FlowSpec(
    name="predict_yield",
    description="Yield range, recommendations and confidence for a field.",
    input_model=YieldPredictionInput,
    output_model=YieldPredictionOutput,
    render=render_yield_prediction,
)
CARBON_CREDITS_FLOW = FlowSpec(
    name="estimate_carbon_credits",
    description="Annual carbon credit estimate for agroforestry or rice projects.",
    input_model=CarbonCreditsInput,
    output_model=CarbonCreditsOutput,
    render=render_carbon_credits,
)
SCHEMES_FLOW = FlowSpec(
    name="find_government_schemes",
    description="Indian government schemes matching a farmer's query.",
    input_model=GovernmentSchemesInput,
    output_model=GovernmentSchemesOutput,
    render=render_government_schemes,
)
ASK_AI_FLOW = FlowSpec(
    name="ask_ai",
    description="Free-form farming question, optionally continuing a conversation.",
    input_model=AskAIInput,
    output_model=AskAIOutput,
    render=render_ask_ai,
    history=lambda payload: payload.history or (),
)

_FLOWS = (
    DIAGNOSIS_FLOW,
    MARKET_PRICE_FLOW,
    WEATHER_FLOW,
    DISEASE_FORECAST_FLOW,
    YIELD_FLOW,
    CARBON_CREDITS_FLOW,
    SCHEMES_FLOW,
    ASK_AI_FLOW,
)
_FLOW_INDEX: Dict[str, FlowSpec] = {spec.name: spec for spec in _FLOWS}


def list_flow_specs() -> List[FlowSpec]:
    return list(_FLOWS)


def get_flow_spec(name: str) -> Optional[FlowSpec]:
    return _FLOW_INDEX.get(name)


async def run_flow(
    spec: FlowSpec, payload: Any, *, invoker: Optional[ModelInvoker] = None
) -> BaseModel:
    """
    Validate ``payload``, render the flow prompt and return the typed model answer.

    Raises:
        InputValidationError: before any model call when the payload is invalid.
        InvocationError: the model call, a tool call or output parsing failed.
    """
    request = require_valid(spec.input_model, payload)
    invoker = invoker or get_invoker()
    with flow_scope(spec.name, request):
        prompt = spec.render(request)
        history = spec.history(request) if spec.history else ()
        return await invoker.invoke_structured(
            prompt,
            spec.output_model,
            tools=spec.tools,
            history=history,
        )
