"""Bybit market-data client."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Optional

import httpx

from ticker_insight.config import settings
from ticker_insight.data.models import MarketCategory, MarketPair, TickerSnapshot
from ticker_insight.data.normalizer import normalize_ticker

logger = logging.getLogger(__name__)


TICKERS_PATH = "/v5/market/tickers"

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://www.bybit.com/",
    "Origin": "https://www.bybit.com",
}

TRADE_URLS = {
    MarketCategory.SPOT: "https://www.bybit.com/trade/usdt/{symbol}",
    MarketCategory.LINEAR: "https://www.bybit.com/futures/{symbol}",
}


def _load_proxy() -> str | None:
    return settings.bybit_https_proxy or settings.bybit_http_proxy or None


def trading_pair(symbol: str, quote: Optional[str] = None) -> str:
    quote = (quote or settings.quote_currency).upper()
    base = symbol.strip().upper()
    if base.endswith(quote) and len(base) > len(quote):
        return base
    return f"{base}{quote}"


def trade_url(snapshot: TickerSnapshot) -> str:
    return TRADE_URLS[snapshot.category].format(symbol=snapshot.symbol)


class BybitTickerClient:
    """Fetch 24h tickers from the Bybit v5 public market endpoint."""

    def __init__(
        self,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        quote: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_base = (api_base or settings.bybit_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.bybit_timeout_s
        self.quote = (quote or settings.quote_currency).upper()
        self.transport = transport

    def _client(self) -> httpx.Client:
        if self.transport is not None:
            return httpx.Client(
                timeout=self.timeout, headers=DEFAULT_HEADERS, transport=self.transport
            )
        return httpx.Client(
            timeout=self.timeout, headers=DEFAULT_HEADERS, proxy=_load_proxy()
        )

    def fetch_ticker(
        self, symbol: str, category: MarketCategory | str = MarketCategory.SPOT
    ) -> Optional[TickerSnapshot]:
        category = MarketCategory(category)
        pair = trading_pair(symbol, self.quote)
        params = {"category": category.value, "symbol": pair}
        try:
            with self._client() as client:
                response = client.get(self.api_base + TICKERS_PATH, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Ticker request failed (%s): %s %s",
                category.value,
                exc.response.status_code,
                exc.response.reason_phrase,
            )
            logger.error("Response body: %s", exc.response.text[:500])
            return None
        except httpx.RequestError as exc:
            logger.error(
                "Ticker request failed (%s): no response received (%s)",
                category.value,
                exc.__class__.__name__,
            )
            return None
        except ValueError as exc:
            logger.error("Ticker request failed (%s): invalid JSON (%s)", category.value, exc)
            return None

        if isinstance(payload, dict) and payload.get("retCode") not in (None, 0):
            logger.warning(
                "Bybit rejected %s %s: retCode=%s retMsg=%s",
                category.value,
                pair,
                payload.get("retCode"),
                payload.get("retMsg"),
            )
        return normalize_ticker(payload, category)

    def fetch_market(self, symbol: str) -> MarketPair:
        """Fetch spot and linear tickers concurrently; either side may be None."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            spot_future = pool.submit(self.fetch_ticker, symbol, MarketCategory.SPOT)
            futures_future = pool.submit(self.fetch_ticker, symbol, MarketCategory.LINEAR)
            return MarketPair(spot=spot_future.result(), futures=futures_future.result())
