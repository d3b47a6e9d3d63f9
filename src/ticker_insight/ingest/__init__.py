"""Market-data ingestion exports."""

from ticker_insight.ingest.bybit import BybitTickerClient, trade_url, trading_pair

__all__ = ["BybitTickerClient", "trade_url", "trading_pair"]
