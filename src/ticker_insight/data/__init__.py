"""Data layer exports."""

from ticker_insight.data.models import (
    MarketCategory,
    MarketPair,
    PositionParameters,
    TickerSnapshot,
)
from ticker_insight.data.normalizer import normalize_ticker

__all__ = [
    "MarketCategory",
    "MarketPair",
    "PositionParameters",
    "TickerSnapshot",
    "normalize_ticker",
]
