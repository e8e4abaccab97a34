"""
Market data behind the ``market_data_lookup`` tool.

No live price feed is wired in by default. The synthetic provider derives a
repeatable, clearly-not-real series from a hash of crop, mandi and date so the
same question always yields the same answer.
"""

from __future__ import annotations

import hashlib
from datetime import date, timedelta
from typing import Optional

from ...infra.config import get_config
from ...infra.tool_provider import (
    LOCAL_PROVIDERS,
    fetch_intranet_market_data,
    normalize_provider,
)
from ...errors import ToolExecutionError
from ...observability.logging_utils import log_event
from ...schemas import (
    PRICE_HISTORY_DAYS,
    MarketDataQuery,
    MarketDataSnapshot,
    PricePoint,
)


BASE_PRICE_FLOOR = 1500
BASE_PRICE_RANGE = 3000
MAX_DAILY_SWING = 0.08


def _canon(text: str) -> str:
    return " ".join(text.split()).casefold()


def _seed_digest(crop: str, mandi: str, reference_date: date) -> bytes:
    key = f"{_canon(crop)}|{_canon(mandi)}|{reference_date.isoformat()}"
    return hashlib.sha256(key.encode("utf-8")).digest()


def synthesize_market_data(
    crop: str, mandi: str, reference_date: date
) -> MarketDataSnapshot:
    digest = _seed_digest(crop, mandi, reference_date)
    base_price = BASE_PRICE_FLOOR + int.from_bytes(digest, "big") % BASE_PRICE_RANGE
    points = []
    for offset in range(PRICE_HISTORY_DAYS):
        day = reference_date - timedelta(days=PRICE_HISTORY_DAYS - 1 - offset)
        # one digest byte per day, mapped onto [-MAX_DAILY_SWING, +MAX_DAILY_SWING]
        swing = (digest[offset] / 255 * 2 - 1) * MAX_DAILY_SWING
        points.append(PricePoint(point_date=day, price=round(base_price * (1 + swing), 2)))
    return MarketDataSnapshot(
        crop=crop.strip(),
        mandi=mandi.strip(),
        current_price=points[-1].price,
        price_history=points,
        source="synthetic",
    )


async def lookup_market_data(
    query: MarketDataQuery, *, today: Optional[date] = None
) -> MarketDataSnapshot:
    cfg = get_config()
    provider = normalize_provider(cfg.market_provider)
    reference_date = query.reference_date or today or date.today()
    if provider in LOCAL_PROVIDERS:
        snapshot = synthesize_market_data(query.crop, query.mandi, reference_date)
    elif provider == "intranet":
        snapshot = await fetch_intranet_market_data(
            query.model_copy(update={"reference_date": reference_date}),
            cfg.market_api_url,
            cfg.market_api_key,
        )
    else:
        raise ToolExecutionError(f"unsupported market provider: {provider}")
    log_event(
        "market_data",
        provider=provider,
        crop=snapshot.crop,
        mandi=snapshot.mandi,
        current_price=snapshot.current_price,
    )
    return snapshot
