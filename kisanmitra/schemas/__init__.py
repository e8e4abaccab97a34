from .base import (
    AudioDataUri,
    FlowInput,
    FlowOutput,
    ImageDataUri,
    InputRecord,
    NonEmptyStr,
    Number,
    TRANSCRIBABLE_AUDIO,
    WholeNumber,
    parse_data_uri,
)
from .models import (
    CROP_RECOMMENDATION_COUNT,
    PRICE_HISTORY_DAYS,
    WEATHER_FORECAST_DAYS,
    AskAIInput,
    AskAIOutput,
    CarbonCreditsInput,
    CarbonCreditsOutput,
    ChatTurn,
    CropRecommendation,
    CropRecommendationsInput,
    CropRecommendationsOutput,
    CurrentWeather,
    DailyForecast,
    DiagnoseCropDiseaseInput,
    DiagnoseCropDiseaseOutput,
    DiseaseOutbreakInput,
    DiseaseOutbreakOutput,
    DiseaseRisk,
    FarmInsightsInput,
    FarmInsightsOutput,
    GovernmentScheme,
    GovernmentSchemesInput,
    GovernmentSchemesOutput,
    Insight,
    MarketDataQuery,
    MarketDataSnapshot,
    MarketPriceInput,
    MarketPriceOutput,
    PricePoint,
    SpeechToTextInput,
    SpeechToTextOutput,
    TextToSpeechInput,
    TextToSpeechOutput,
    WeatherForecastInput,
    WeatherForecastOutput,
    YieldPredictionInput,
    YieldPredictionOutput,
)
from .results import ActionFailure, ActionResult, ActionSuccess, to_payload
from .validation import (
    GENERIC_INVALID_MESSAGE,
    Invalid,
    Valid,
    ValidationOutcome,
    require_valid,
    validate_input,
)
