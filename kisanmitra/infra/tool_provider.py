from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..errors import ToolExecutionError
from ..schemas import MarketDataQuery, MarketDataSnapshot


INTRANET_TIMEOUT = 10.0
LOCAL_PROVIDERS = {"mock", "local", "synthetic"}


def normalize_provider(value: Optional[str]) -> str:
    return (value or "mock").lower()


def build_intranet_headers(api_key: Optional[str]) -> Dict[str, str]:
    headers = {"Accept": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload


async def fetch_intranet_market_data(
    query: MarketDataQuery,
    api_url: Optional[str],
    api_key: Optional[str],
) -> MarketDataSnapshot:
    """POST the query to an external price feed and validate its answer."""
    if not api_url:
        raise ToolExecutionError("market data provider URL is not configured")
    try:
        async with httpx.AsyncClient(timeout=INTRANET_TIMEOUT, trust_env=False) as client:
            response = await client.post(
                api_url,
                json=query.model_dump(mode="json"),
                headers=build_intranet_headers(api_key),
            )
            response.raise_for_status()
            payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise ToolExecutionError(f"market data request failed: {exc}") from exc
    try:
        return MarketDataSnapshot.model_validate(_unwrap(payload))
    except ValidationError as exc:
        raise ToolExecutionError(
            f"market data response does not match the snapshot schema: {exc.error_count()} errors"
        ) from exc
