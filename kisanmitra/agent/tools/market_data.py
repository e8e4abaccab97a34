from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from ...application.services.market_service import lookup_market_data
from ...prompts.market import MARKET_TOOL_NAME
from ...schemas import MarketDataQuery, MarketDataSnapshot
from .registry import auto_register_tool


@auto_register_tool(
    MARKET_TOOL_NAME,
    description=(
        "Look up the current price and the last 7 days of daily prices for a crop "
        "at a mandi. Prices are in INR per quintal."
    ),
    args_schema=MarketDataQuery,
    output_schema=MarketDataSnapshot,
)
async def market_data_lookup(
    crop: str, mandi: str, reference_date: Optional[date] = None
) -> Dict[str, Any]:
    query = MarketDataQuery(crop=crop, mandi=mandi, reference_date=reference_date)
    snapshot = await lookup_market_data(query)
    return snapshot.model_dump(mode="json", by_alias=True)
