"""Slack incoming-webhook formatting and delivery."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from ticker_insight.config import settings
from ticker_insight.data.models import MarketCategory, TickerSnapshot
from ticker_insight.ingest.bybit import trade_url, trading_pair
from ticker_insight.insights.models import InsightReport
from ticker_insight.presentation.text import (
    format_change,
    format_funding_rate,
    format_number,
    format_price,
)

logger = logging.getLogger(__name__)


SYMBOL_PATTERN = re.compile(r"[A-Z]{2,10}")

SECTION_TITLES = {
    MarketCategory.SPOT: "*📊 Spot market*",
    MarketCategory.LINEAR: "*📈 Futures market*",
}

BUTTON_ACTIONS = {
    MarketCategory.SPOT: "button-action",
    MarketCategory.LINEAR: "button-action-2",
}


def extract_symbol(payload: Optional[Dict[str, Any]]) -> Optional[str]:
    """Pull a base symbol out of a Slack outgoing-webhook or Events API body."""
    if not payload:
        return None
    text = payload.get("text")
    if not text:
        event = payload.get("event")
        if isinstance(event, dict):
            text = event.get("text")
    if text:
        match = SYMBOL_PATTERN.search(str(text).strip().upper())
        return match.group(0) if match else None
    symbol = payload.get("symbol")
    if symbol:
        return str(symbol).strip().upper() or None
    return None


def _market_section(
    snapshot: Optional[TickerSnapshot], category: MarketCategory
) -> Dict[str, Any]:
    title = SECTION_TITLES[category]
    if snapshot is None:
        return {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f"{title}\n❌ Price information unavailable.",
            },
        }

    emoji, change = format_change(snapshot)
    text = (
        f"{title}\n"
        f"Last price: *${format_price(snapshot.last_price)}*\n"
        f"24h high: ${format_price(snapshot.high_24h)}\n"
        f"24h low: ${format_price(snapshot.low_24h)}\n"
        f"24h volume: {format_number(snapshot.volume_24h)}\n"
        f"24h change: {emoji} *{change}*"
    )
    if category is MarketCategory.LINEAR:
        if snapshot.funding_rate is not None:
            text += f"\nFunding rate: {format_funding_rate(snapshot.funding_rate)}"
        if snapshot.open_interest:
            text += f"\nOpen interest: {format_number(snapshot.open_interest)}"

    return {
        "type": "section",
        "text": {"type": "mrkdwn", "text": text},
        "accessory": {
            "type": "button",
            "text": {"type": "plain_text", "text": "Trade page", "emoji": True},
            "url": trade_url(snapshot),
            "action_id": BUTTON_ACTIONS[category],
        },
    }


def format_slack_message(
    symbol: str,
    spot: Optional[TickerSnapshot],
    futures: Optional[TickerSnapshot],
    report: Optional[InsightReport] = None,
) -> Dict[str, Any]:
    pair = trading_pair(symbol)
    blocks: List[Dict[str, Any]] = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": f"📊 {pair} market data",
                "emoji": True,
            },
        },
        {"type": "divider"},
        _market_section(spot, MarketCategory.SPOT),
        {"type": "divider"},
        _market_section(futures, MarketCategory.LINEAR),
    ]
    if report is not None and len(report):
        blocks.append({"type": "divider"})
        blocks.append(
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": "*💡 Insights*\n" + report.to_text()},
            }
        )
    return {"blocks": blocks, "text": f"{pair} market data"}


class SlackNotifier:
    """Post messages to a Slack incoming webhook; disabled without a URL."""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.webhook_url = settings.slack_webhook_url if webhook_url is None else webhook_url
        self.timeout = timeout if timeout is not None else settings.slack_timeout_s
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def post(self, message: Dict[str, Any]) -> bool:
        if not self.enabled:
            return False
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.webhook_url, json=message)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Slack webhook delivery failed: %s", exc)
            return False
        return True

    def send(
        self,
        symbol: str,
        spot: Optional[TickerSnapshot],
        futures: Optional[TickerSnapshot],
        report: Optional[InsightReport] = None,
    ) -> bool:
        if not self.enabled:
            return False
        delivered = self.post(format_slack_message(symbol, spot, futures, report))
        if delivered:
            logger.info("Sent %s market data to Slack.", trading_pair(symbol))
        return delivered
