"""Plain-text rendering for terminal output."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ticker_insight.data.models import MarketCategory, TickerSnapshot
from ticker_insight.ingest.bybit import trade_url
from ticker_insight.insights.models import InsightReport


CATEGORY_LABELS = {
    MarketCategory.SPOT: "📊 Spot market",
    MarketCategory.LINEAR: "📈 Futures market",
}

RULE = "━" * 50


def format_number(value: Decimal, min_digits: int = 0, max_digits: int = 3) -> str:
    """Thousands separators with between min_digits and max_digits decimals."""
    text = format(Decimal(value), f",.{max_digits}f")
    if max_digits > min_digits and "." in text:
        whole, fraction = text.split(".")
        fraction = fraction.rstrip("0")
        if len(fraction) < min_digits:
            fraction = fraction.ljust(min_digits, "0")
        text = f"{whole}.{fraction}" if fraction else whole
    return text


def format_price(value: Decimal) -> str:
    return format_number(value, min_digits=2, max_digits=8)


def format_change(snapshot: TickerSnapshot) -> tuple[str, str]:
    change = snapshot.change_percent
    emoji = "🟢" if round(change, 2) >= 0 else "🔴"
    sign = "+" if round(change, 2) >= 0 else ""
    return emoji, f"{sign}{change:.2f}%"


def format_funding_rate(value: Decimal) -> str:
    return f"{float(value) * 100:.4f}%"


def format_snapshot(snapshot: Optional[TickerSnapshot], category: MarketCategory) -> str:
    label = CATEGORY_LABELS[MarketCategory(category)]
    if snapshot is None:
        return f"❌ {label}: price information unavailable."

    emoji, change = format_change(snapshot)
    lines = [
        f"{label} ticker",
        RULE,
        f"Symbol: {snapshot.symbol}",
        f"Last price: ${format_price(snapshot.last_price)}",
        f"24h high: ${format_price(snapshot.high_24h)}",
        f"24h low: ${format_price(snapshot.low_24h)}",
        f"24h volume: {format_number(snapshot.volume_24h)}",
        f"24h change: {emoji} {change}",
    ]
    if snapshot.category is MarketCategory.LINEAR:
        if snapshot.funding_rate is not None:
            lines.append(f"Funding rate: {format_funding_rate(snapshot.funding_rate)}")
        if snapshot.open_interest:
            lines.append(f"Open interest: {format_number(snapshot.open_interest)}")
    lines.append(RULE)
    lines.append(f"URL: {trade_url(snapshot)}")
    return "\n".join(lines)


def format_report(report: InsightReport) -> str:
    if not len(report):
        return "No insights available for the supplied data."
    return "💡 Insights\n" + RULE + "\n" + report.to_text() + "\n" + RULE
