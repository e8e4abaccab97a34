from enum import Enum


class DiseaseSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class WeatherIcon(str, Enum):
    SUNNY = "Sunny"
    CLOUDY = "Cloudy"
    RAINY = "Rainy"
    WINDY = "Windy"
    SNOWY = "Snowy"
    THUNDERSTORM = "Thunderstorm"
    PARTLY_CLOUDY = "PartlyCloudy"


class ProjectType(str, Enum):
    AGROFORESTRY = "agroforestry"
    RICE_CULTIVATION = "rice_cultivation"


class WaterManagement(str, Enum):
    FLOODED = "flooded"
    INTERMITTENT_AWD = "intermittent_awd"
    DRAINED = "drained"


class StrawManagement(str, Enum):
    REMOVED = "removed"
    INCORPORATED_RETAINED = "incorporated_retained"
    BURNED = "burned"


class InsightPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class InsightCategory(str, Enum):
    WEATHER = "Weather"
    DISEASE = "Disease"
    IRRIGATION = "Irrigation"
    MARKET = "Market"
    GENERAL = "General"


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
