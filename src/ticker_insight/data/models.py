"""Data layer models for normalized ticker snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


class MarketCategory(str, Enum):
    SPOT = "spot"
    LINEAR = "linear"


@dataclass(frozen=True)
class TickerSnapshot:
    """One 24h ticker record; numbers are kept as Decimal until a ratio is taken."""

    category: MarketCategory
    symbol: str
    last_price: Decimal
    high_24h: Decimal
    low_24h: Decimal
    volume_24h: Decimal
    change_24h: Decimal
    funding_rate: Optional[Decimal] = None
    open_interest: Optional[Decimal] = None

    @property
    def change_percent(self) -> float:
        return float(self.change_24h) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "symbol": self.symbol,
            "lastPrice": str(self.last_price),
            "high24h": str(self.high_24h),
            "low24h": str(self.low_24h),
            "volume24h": str(self.volume_24h),
            "change24h": str(self.change_24h),
            "fundingRate": str(self.funding_rate) if self.funding_rate is not None else None,
            "openInterest": str(self.open_interest) if self.open_interest is not None else None,
        }


@dataclass(frozen=True)
class MarketPair:
    spot: Optional[TickerSnapshot]
    futures: Optional[TickerSnapshot]


@dataclass(frozen=True)
class PositionParameters:
    average_price: Optional[float] = None
    leverage: Optional[float] = None
    target_price: Optional[float] = None

    def __post_init__(self) -> None:
        for field_name in ("average_price", "leverage", "target_price"):
            value = getattr(self, field_name)
            if value is None:
                continue
            if value <= 0:
                raise ValueError(f"{field_name} must be greater than 0, got {value}")
