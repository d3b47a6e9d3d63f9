"""Normalize raw Bybit ticker payloads into TickerSnapshot objects."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
import logging
import math
from typing import Any, Optional

from ticker_insight.data.models import MarketCategory, TickerSnapshot

logger = logging.getLogger(__name__)


TICKER_MAPPING = {
    "symbol": "symbol",
    "last_price": "lastPrice",
    "high_24h": "highPrice24h",
    "low_24h": "lowPrice24h",
    "volume_24h": "volume24h",
    "change_24h": "price24hPcnt",
}

OPTIONAL_MAPPING = {
    "funding_rate": "fundingRate",
    "open_interest": "openInterest",
}


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    if not parsed.is_finite() or not math.isfinite(float(parsed)):
        return None
    return parsed


def _category(value: Any) -> Optional[MarketCategory]:
    if isinstance(value, MarketCategory):
        return value
    try:
        return MarketCategory(str(value).strip().lower())
    except ValueError:
        logger.warning("Unknown ticker category %r.", value)
        return None


def first_ticker(payload: Any) -> Optional[dict]:
    if not isinstance(payload, dict):
        return None
    result = payload.get("result")
    if not isinstance(result, dict):
        return None
    records = result.get("list")
    if not isinstance(records, list) or not records:
        return None
    record = records[0]
    return record if isinstance(record, dict) else None


def normalize_ticker(payload: Any, category: MarketCategory | str) -> Optional[TickerSnapshot]:
    """Build a snapshot from the first record of a ticker response, or None."""
    category = _category(category)
    if category is None:
        return None
    record = first_ticker(payload)
    if record is None:
        logger.warning("Ticker payload has no records (%s).", category.value)
        return None

    symbol = str(record.get(TICKER_MAPPING["symbol"]) or "").strip()
    if not symbol:
        logger.warning("Ticker record without symbol (%s).", category.value)
        return None

    values: dict[str, Decimal] = {}
    for field, raw_key in TICKER_MAPPING.items():
        if field == "symbol":
            continue
        parsed = _to_decimal(record.get(raw_key))
        if parsed is None:
            logger.warning(
                "Ticker %s missing numeric field %s (%s).", symbol, raw_key, category.value
            )
            return None
        values[field] = parsed

    extras: dict[str, Optional[Decimal]] = {"funding_rate": None, "open_interest": None}
    if category is MarketCategory.LINEAR:
        for field, raw_key in OPTIONAL_MAPPING.items():
            extras[field] = _to_decimal(record.get(raw_key))

    return TickerSnapshot(category=category, symbol=symbol, **values, **extras)
