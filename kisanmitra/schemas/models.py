from __future__ import annotations

from datetime import date
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..domain import (
    ChatRole,
    DiseaseSeverity,
    EnumNormalizer,
    InsightCategory,
    InsightPriority,
    ProjectType,
    RiskLevel,
    StrawManagement,
    WaterManagement,
    WeatherIcon,
)
from .base import (
    AudioDataUri,
    FlowInput,
    FlowOutput,
    ImageDataUri,
    InputRecord,
    NonEmptyStr,
    Number,
    WholeNumber,
)


PRICE_HISTORY_DAYS = 7
WEATHER_FORECAST_DAYS = 5
CROP_RECOMMENDATION_COUNT = 3


# ---------------------------------------------------------------- diagnosis


class DiagnoseCropDiseaseInput(FlowInput):
    """Photo of an affected plant, optionally with the crop the farmer believes it is."""

    field_messages: ClassVar[Dict[str, str]] = {
        "photoDataUri": "Image is required.",
        "cropName": "Crop name must be text.",
        "language": "Language is required.",
    }

    photo_data_uri: ImageDataUri = Field(
        ...,
        description="Photo of the diseased crop as data:<mimetype>;base64,<data>.",
    )
    crop_name: Optional[str] = Field(
        default=None, description="Crop name as reported by the farmer."
    )


class DiagnoseCropDiseaseOutput(FlowOutput):
    crop_name: NonEmptyStr = Field(..., description="Crop identified from the image.")
    disease: NonEmptyStr = Field(..., description="Name of the disease or pest.")
    severity: DiseaseSeverity = Field(..., description="Low, Medium or High.")
    current_stage: NonEmptyStr = Field(
        ..., description="Observable stage of the disease or infestation in the photo."
    )
    remedies: NonEmptyStr = Field(..., description="General affordable remedies.")
    immediate_steps: NonEmptyStr = Field(
        ..., description="Actions to take right away to save the crop."
    )
    preventive_measures: NonEmptyStr = Field(
        ..., description="How to avoid the problem in future seasons."
    )
    organic_remedies: NonEmptyStr = Field(..., description="Organic and natural remedies.")
    chemical_remedies: NonEmptyStr = Field(
        ..., description="Pesticide or fungicide based remedies."
    )
    disease_progression: NonEmptyStr = Field(
        ..., description="How the disease develops over 1-3 weeks if untreated."
    )

    @field_validator("severity", mode="before")
    @classmethod
    def _norm_severity(cls, v):
        return EnumNormalizer.normalize(DiseaseSeverity, v)


# ------------------------------------------------------------- market price


class MarketPriceInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "crop": "Crop name is required.",
        "mandi": "Mandi name is required.",
        "language": "Language is required.",
    }

    crop: NonEmptyStr = Field(..., description="Crop to price.")
    mandi: NonEmptyStr = Field(..., description="Local agricultural market (mandi).")


class PricePoint(FlowOutput):
    point_date: date = Field(..., alias="date", description="Day of the price, YYYY-MM-DD.")
    price: float = Field(..., ge=0, description="Price on that day in INR.")


class MarketPriceOutput(FlowOutput):
    price: float = Field(..., ge=0, description="Most recent market price in INR.")
    trend_analysis: NonEmptyStr = Field(
        ..., description="Short analysis of the recent price trend."
    )
    price_history: List[PricePoint] = Field(
        ..., description="Daily prices for the last 7 days, oldest first."
    )

    @field_validator("price_history", mode="after")
    @classmethod
    def _check_history(cls, points: List[PricePoint]) -> List[PricePoint]:
        points = sorted(points, key=lambda item: item.point_date)
        if len(points) != PRICE_HISTORY_DAYS:
            raise ValueError(
                f"expected {PRICE_HISTORY_DAYS} price points, got {len(points)}"
            )
        for previous, current in zip(points, points[1:]):
            if current.point_date <= previous.point_date:
                raise ValueError(f"duplicate price date {current.point_date}")
        return points


class MarketDataQuery(BaseModel):
    """Arguments of the market data tool the model may call (snake_case, no aliases)."""

    crop: NonEmptyStr = Field(..., description="Crop name, e.g. Wheat.")
    mandi: NonEmptyStr = Field(..., description="Mandi (market) name, e.g. Azadpur.")
    reference_date: Optional[date] = Field(
        default=None,
        description="Last day of the price series, YYYY-MM-DD. Defaults to today.",
    )


class MarketDataSnapshot(FlowOutput):
    crop: str
    mandi: str
    current_price: float = Field(..., ge=0)
    currency: str = "INR"
    unit: str = "quintal"
    price_history: List[PricePoint] = Field(
        ..., min_length=PRICE_HISTORY_DAYS, max_length=PRICE_HISTORY_DAYS
    )
    source: str = "synthetic"


# ------------------------------------------------------------------ weather


class WeatherForecastInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "location": "Please enter a location.",
        "language": "Language is required.",
    }

    location: str = Field(..., min_length=2, description="City or region.")


class CurrentWeather(FlowOutput):
    temp: float = Field(..., description="Current temperature in Celsius.")
    condition: NonEmptyStr
    humidity: float = Field(..., ge=0, le=100)
    wind_speed: float = Field(..., ge=0, description="km/h")


class DailyForecast(FlowOutput):
    day: NonEmptyStr = Field(..., description="Day of the week.")
    forecast_date: date = Field(..., alias="date", description="YYYY-MM-DD")
    high_temp: float = Field(..., description="Celsius")
    low_temp: float = Field(..., description="Celsius")
    condition: NonEmptyStr
    icon: WeatherIcon
    humidity: float = Field(..., ge=0, le=100)
    wind_speed: float = Field(..., ge=0, description="km/h")

    @field_validator("icon", mode="before")
    @classmethod
    def _norm_icon(cls, v):
        return EnumNormalizer.normalize(WeatherIcon, v)


class WeatherForecastOutput(FlowOutput):
    current: CurrentWeather
    forecast: List[DailyForecast] = Field(
        ..., min_length=1, description="Day-by-day forecast for the next 5 days."
    )
    summary: NonEmptyStr = Field(
        ..., description="Farmer-focused summary of the week's weather."
    )

    @field_validator("forecast", mode="before")
    @classmethod
    def _trim_forecast(cls, v):
        if isinstance(v, list):
            return v[:WEATHER_FORECAST_DAYS]
        return v


# ------------------------------------------------------- disease forecast


class DiseaseOutbreakInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "crop": "Please enter a crop name.",
        "region": "Please enter a region.",
        "language": "Language is required.",
    }

    crop: str = Field(..., min_length=2)
    region: str = Field(..., min_length=2)


class DiseaseRisk(FlowOutput):
    disease_name: NonEmptyStr
    risk_level: RiskLevel
    risk_factors: NonEmptyStr
    preventive_actions: NonEmptyStr

    @field_validator("risk_level", mode="before")
    @classmethod
    def _norm_risk(cls, v):
        return EnumNormalizer.normalize(RiskLevel, v)


class DiseaseOutbreakOutput(FlowOutput):
    forecast_summary: NonEmptyStr = Field(
        ..., description="Overall disease risk for the upcoming week."
    )
    disease_risks: List[DiseaseRisk] = Field(default_factory=list)


# -------------------------------------------------------------------- yield


class YieldPredictionInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "crop": "Please enter a crop name.",
        "hectares": "Area must be a positive number.",
        "soilType": "Please select a soil type.",
        "rainfall": "Rainfall must be a positive number.",
        "region": "Please enter a region.",
        "plantingDate": "Please enter the planting date (YYYY-MM-DD).",
        "photoDataUri": "The field photo must be an image.",
        "language": "Language is required.",
    }

    crop: str = Field(..., min_length=2)
    hectares: Number = Field(..., gt=0, description="Area in hectares.")
    soil_type: NonEmptyStr = Field(..., description="Loamy, Sandy, Clay, ...")
    rainfall: Number = Field(..., gt=0, description="Average annual rainfall in mm.")
    region: str = Field(..., min_length=2)
    planting_date: date
    photo_data_uri: Optional[ImageDataUri] = None


class YieldPredictionOutput(FlowOutput):
    predicted_yield: NonEmptyStr = Field(
        ..., description='Yield range with units, e.g. "4.5 - 5.0 t/ha".'
    )
    recommendations: NonEmptyStr
    confidence: NonEmptyStr = Field(
        ..., description="High, Medium or Low with a short justification."
    )


# ------------------------------------------------------------ carbon credits


class CarbonCreditsInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "projectType": "Project type must be agroforestry or rice_cultivation.",
        "hectares": "Area must be a positive number.",
        "region": "Please enter a region.",
        "treeCount": "Tree count must be a positive number.",
        "plantingYear": "Planting year must be a year.",
        "waterManagement": "Water management must be flooded, intermittent_awd or drained.",
        "strawManagement": "Straw management must be removed, incorporated_retained or burned.",
        "plantingDate": "Planting date must be YYYY-MM-DD.",
        "harvestDate": "Harvest date must be YYYY-MM-DD.",
        "photoDataUri": "The project photo must be an image.",
        "language": "Language is required.",
    }

    project_type: ProjectType
    hectares: Number = Field(..., gt=0)
    region: str = Field(..., min_length=2)
    tree_count: Optional[WholeNumber] = Field(default=None, gt=0)
    planting_year: Optional[WholeNumber] = Field(default=None, ge=1900, le=2100)
    water_management: Optional[WaterManagement] = None
    straw_management: Optional[StrawManagement] = None
    planting_date: Optional[date] = None
    harvest_date: Optional[date] = None
    photo_data_uri: Optional[ImageDataUri] = None

    @field_validator("project_type", mode="before")
    @classmethod
    def _norm_project_type(cls, v):
        return EnumNormalizer.normalize(ProjectType, v)

    @field_validator("water_management", mode="before")
    @classmethod
    def _norm_water(cls, v):
        return EnumNormalizer.normalize(WaterManagement, v)

    @field_validator("straw_management", mode="before")
    @classmethod
    def _norm_straw(cls, v):
        return EnumNormalizer.normalize(StrawManagement, v)


class CarbonCreditsOutput(FlowOutput):
    estimated_credits: float = Field(
        ..., ge=0, description="Estimated annual credits in tCO2e."
    )
    explanation: NonEmptyStr
    potential_revenue: NonEmptyStr = Field(
        ..., description="Annual revenue range in USD."
    )
    next_steps: NonEmptyStr


# ------------------------------------------------------- government schemes


class GovernmentSchemesInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "query": "Query must be at least 3 characters.",
        "language": "Language is required.",
    }

    query: str = Field(..., min_length=3)


class GovernmentScheme(FlowOutput):
    title: NonEmptyStr
    eligibility: NonEmptyStr
    benefits: NonEmptyStr
    application_process: NonEmptyStr
    link: Optional[str] = None


class GovernmentSchemesOutput(FlowOutput):
    schemes: List[GovernmentScheme] = Field(default_factory=list)


# ----------------------------------------------------------------- assistant


class ChatTurn(InputRecord):
    role: ChatRole
    text: NonEmptyStr

    @field_validator("role", mode="before")
    @classmethod
    def _norm_role(cls, v):
        return EnumNormalizer.normalize(ChatRole, v)


class AskAIInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "query": "Please type a question.",
        "history": "Conversation history is malformed.",
        "language": "Language is required.",
    }

    query: NonEmptyStr
    history: Optional[List[ChatTurn]] = None


class AskAIOutput(FlowOutput):
    answer: NonEmptyStr


# -------------------------------------------------------------------- speech


class SpeechToTextInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "audio": "Invalid audio input.",
        "language": "Language is required.",
    }

    audio: AudioDataUri


class SpeechToTextOutput(FlowOutput):
    text: str


class TextToSpeechInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "text": "Text is required.",
        "language": "Language is required.",
    }

    text: NonEmptyStr


class TextToSpeechOutput(FlowOutput):
    media: str = Field(..., description="Synthesized speech as an audio data URI.")


# ------------------------------------------------------------ farm insights


class FarmInsightsInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "crop": "Please enter a crop name.",
        "region": "Please enter a region.",
        "mandi": "Mandi name must be text.",
        "language": "Language is required.",
    }

    crop: str = Field(..., min_length=2)
    region: str = Field(..., min_length=2)
    mandi: Optional[str] = Field(
        default=None, description="Market used for prices; the region when absent."
    )


class Insight(FlowOutput):
    priority: InsightPriority
    category: InsightCategory
    title: NonEmptyStr
    recommendation: NonEmptyStr
    source: NonEmptyStr = Field(
        ..., description='Where the insight comes from, e.g. "Weather Forecast".'
    )

    @field_validator("priority", mode="before")
    @classmethod
    def _norm_priority(cls, v):
        return EnumNormalizer.normalize(InsightPriority, v)

    @field_validator("category", mode="before")
    @classmethod
    def _norm_category(cls, v):
        return EnumNormalizer.normalize(InsightCategory, v)


class FarmInsightsOutput(FlowOutput):
    insights: List[Insight] = Field(
        default_factory=list, description="Actionable insights, highest priority first."
    )


# ----------------------------------------------------- crop recommendations


class CropRecommendationsInput(FlowInput):
    field_messages: ClassVar[Dict[str, str]] = {
        "currentCrop": "Please enter the crop you are growing now.",
        "region": "Please enter a region.",
        "soilReport": "Soil report must be text.",
        "history": "Field history must be text.",
        "language": "Language is required.",
    }

    current_crop: str = Field(..., min_length=2)
    region: str = Field(..., min_length=2)
    soil_report: Optional[str] = Field(
        default=None, description="Soil test text, e.g. NPK values and pH."
    )
    history: Optional[str] = Field(
        default=None, description="Past treatments, yields or issues on this field."
    )


class CropRecommendation(FlowOutput):
    crop_name: NonEmptyStr
    profitability_score: NonEmptyStr = Field(..., description='e.g. "High Profitability"')
    risk_score: NonEmptyStr = Field(..., description='e.g. "Low Risk"')
    profitability_analysis: NonEmptyStr
    suitability: NonEmptyStr
    actionable_advice: NonEmptyStr


class CropRecommendationsOutput(FlowOutput):
    recommendations: List[CropRecommendation] = Field(
        ...,
        min_length=CROP_RECOMMENDATION_COUNT,
        max_length=CROP_RECOMMENDATION_COUNT,
        description="Top 3 alternative crops, best first.",
    )

    @field_validator("recommendations", mode="before")
    @classmethod
    def _keep_top_three(cls, v: Any):
        if isinstance(v, list):
            return v[:CROP_RECOMMENDATION_COUNT]
        return v
