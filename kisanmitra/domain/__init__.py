from .enums import (
    ChatRole,
    DiseaseSeverity,
    InsightCategory,
    InsightPriority,
    ProjectType,
    RiskLevel,
    StrawManagement,
    WaterManagement,
    WeatherIcon,
)
from .normalizers import EnumNormalizer

__all__ = [
    "ChatRole",
    "DiseaseSeverity",
    "EnumNormalizer",
    "InsightCategory",
    "InsightPriority",
    "ProjectType",
    "RiskLevel",
    "StrawManagement",
    "WaterManagement",
    "WeatherIcon",
]
