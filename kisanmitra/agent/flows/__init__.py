from .crop_recommendations_graph import get_crop_recommendations
from .farm_insights_graph import get_farm_insights
from .registry import FlowSpec, get_flow_spec, list_flow_specs, run_flow
from .simple import (
    ask_ai,
    diagnose_crop_disease,
    estimate_carbon_credits,
    find_government_schemes,
    forecast_disease_outbreak,
    get_market_price,
    get_weather_forecast,
    predict_yield,
    speech_to_text,
    text_to_speech,
)
