from __future__ import annotations

from ..schemas import MarketPriceInput
from .fragments import RenderedPrompt, field_line, language_directive, numbered, render


MARKET_TOOL_NAME = "market_data_lookup"

MARKET_PREAMBLE = (
    "You are a market analyst for Indian agricultural markets (mandis). "
    "Report the current price of a crop in a mandi, its recent history and the trend."
)

MARKET_STEPS = (
    f"Call the '{MARKET_TOOL_NAME}' tool with the crop and mandi below to fetch the "
    "current price and the daily prices of the last 7 days.",
    "Put the most recent price in 'price'.",
    "Copy the 7 daily points into 'priceHistory', oldest first, as {date, price} "
    "with dates in YYYY-MM-DD.",
    "Write a short trend analysis in 'trendAnalysis' (for example stable, rising, "
    "falling or volatile this week) and name the mandi the data is for.",
    "All money values are in Indian Rupees (INR).",
)


def render_market_price(payload: MarketPriceInput) -> RenderedPrompt:
    return render(
        MARKET_PREAMBLE,
        numbered(MARKET_STEPS),
        "Query:",
        (
            field_line("Crop", payload.crop),
            field_line("Mandi", payload.mandi),
        ),
        language_directive(payload.language),
    )
