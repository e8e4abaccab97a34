import re
from enum import Enum
from typing import Any, Type

from .enums import (
    ChatRole,
    ProjectType,
    RiskLevel,
    StrawManagement,
    WaterManagement,
    WeatherIcon,
)


class EnumNormalizer:
    # per enum: alias -> canonical value
    ALIASES: dict[Type[Enum], dict[str, str]] = {
        ChatRole: {
            "model": "assistant",
            "ai": "assistant",
            "bot": "assistant",
            "human": "user",
        },
        RiskLevel: {
            "very high": "Very High",
            "very_high": "Very High",
            "very-high": "Very High",
            "veryhigh": "Very High",
        },
        WeatherIcon: {
            "partly cloudy": "PartlyCloudy",
            "partly_cloudy": "PartlyCloudy",
            "partly-cloudy": "PartlyCloudy",
            "thunderstorms": "Thunderstorm",
            "rain": "Rainy",
            "snow": "Snowy",
            "sun": "Sunny",
            "clear": "Sunny",
        },
        WaterManagement: {
            "awd": "intermittent_awd",
            "alternate wetting and drying": "intermittent_awd",
            "continuous flooding": "flooded",
        },
        StrawManagement: {
            "incorporated": "incorporated_retained",
            "retained": "incorporated_retained",
        },
        ProjectType: {
            "rice cultivation": "rice_cultivation",
            "rice": "rice_cultivation",
        },
    }

    @staticmethod
    def _canon_key(x: Any) -> str:
        # trim, lower-case, collapse whitespace
        s = str(x).strip().lower()
        s = re.sub(r"\s+", " ", s)
        return s

    @classmethod
    def normalize(cls, enum_cls: Type[Enum], value: Any) -> Any:
        if value is None:
            return value

        if isinstance(value, enum_cls):
            return value.value

        key = cls._canon_key(value)

        # canonical values match case-insensitively
        for member in enum_cls:
            if cls._canon_key(member.value) == key:
                return member.value

        aliases = cls.ALIASES.get(enum_cls, {})
        return aliases.get(key, value)  # unknown values pass through for pydantic to reject
