from decimal import Decimal
from typing import Optional

import pytest

from ticker_insight.data.models import MarketCategory, MarketPair, TickerSnapshot


def build_snapshot(
    last: str = "100",
    high: str = "110",
    low: str = "90",
    change: str = "0.06",
    volume: str = "12345.678",
    category: MarketCategory = MarketCategory.SPOT,
    symbol: str = "BTCUSDT",
    funding_rate: Optional[str] = None,
    open_interest: Optional[str] = None,
) -> TickerSnapshot:
    return TickerSnapshot(
        category=category,
        symbol=symbol,
        last_price=Decimal(last),
        high_24h=Decimal(high),
        low_24h=Decimal(low),
        volume_24h=Decimal(volume),
        change_24h=Decimal(change),
        funding_rate=Decimal(funding_rate) if funding_rate is not None else None,
        open_interest=Decimal(open_interest) if open_interest is not None else None,
    )


@pytest.fixture
def make_snapshot():
    return build_snapshot


@pytest.fixture
def spot_snapshot():
    return build_snapshot()


@pytest.fixture
def futures_snapshot():
    return build_snapshot(
        last="100.5",
        high="110.5",
        low="90.5",
        category=MarketCategory.LINEAR,
        funding_rate="0.0001",
        open_interest="5000",
    )


class FakeTickerClient:
    """Stands in for BybitTickerClient without network access."""

    def __init__(self, spot=None, futures=None, quote: str = "USDT") -> None:
        self.spot = spot
        self.futures = futures
        self.quote = quote
        self.calls = []

    def fetch_ticker(self, symbol, category=MarketCategory.SPOT):
        category = MarketCategory(category)
        self.calls.append((symbol, category))
        return self.spot if category is MarketCategory.SPOT else self.futures

    def fetch_market(self, symbol):
        self.calls.append((symbol, "market"))
        return MarketPair(spot=self.spot, futures=self.futures)


class FakeNotifier:
    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.sent = []

    def send(self, symbol, spot, futures, report=None):
        self.sent.append((symbol, spot, futures, report))
        return True


@pytest.fixture
def fake_client(spot_snapshot, futures_snapshot):
    return FakeTickerClient(spot=spot_snapshot, futures=futures_snapshot)


@pytest.fixture
def fake_notifier():
    return FakeNotifier()


@pytest.fixture
def client_factory():
    return FakeTickerClient


@pytest.fixture
def notifier_factory():
    return FakeNotifier
