from __future__ import annotations

from ..schemas import WeatherForecastInput
from .fragments import RenderedPrompt, field_line, language_directive, numbered, render


WEATHER_PREAMBLE = (
    "You are a meteorological assistant that writes weather reports for farmers. "
    "Give an accurate report for the location below."
)

WEATHER_STEPS = (
    "Current conditions: temperature, condition, humidity and wind speed in 'current'.",
    "A day-by-day forecast for the next 5 days in 'forecast'. Each day has the day of "
    "the week, the date (YYYY-MM-DD), high and low temperature, the condition, an icon "
    "(one of Sunny, Cloudy, Rainy, Windy, Snowy, Thunderstorm, PartlyCloudy), average "
    "humidity and average wind speed.",
    "A short, plain summary of the week in 'summary' that calls out anything that "
    "affects field work such as heavy rain, strong wind or heat waves.",
)

WEATHER_UNITS = "Temperatures are in Celsius and wind speeds in km/h."


def render_weather(payload: WeatherForecastInput) -> RenderedPrompt:
    return render(
        WEATHER_PREAMBLE,
        numbered(WEATHER_STEPS),
        WEATHER_UNITS,
        field_line("Location", payload.location),
        language_directive(payload.language),
    )
