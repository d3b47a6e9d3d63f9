"""Interactive terminal lookup."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ticker_insight.data.models import MarketCategory, PositionParameters
from ticker_insight.ingest.bybit import BybitTickerClient, trading_pair
from ticker_insight.insights.engine import InsightEngine
from ticker_insight.presentation.text import format_report, format_snapshot

logger = logging.getLogger(__name__)


EXIT_WORDS = {"exit", "quit"}

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _parse_optional_float(text: str) -> Optional[float]:
    text = text.strip().replace(",", "")
    if not text:
        return None
    return float(text)


def prompt_position(input_fn: InputFn, output: OutputFn) -> Optional[PositionParameters]:
    """Ask for average price, leverage and target; blank answers skip a value.

    Returns None when input ends before all three answers are given.
    """
    while True:
        try:
            position = PositionParameters(
                average_price=_parse_optional_float(
                    input_fn("Average entry price (blank to skip): ")
                ),
                leverage=_parse_optional_float(input_fn("Leverage (blank to skip): ")),
                target_price=_parse_optional_float(
                    input_fn("Target price (blank to skip): ")
                ),
            )
        except EOFError:
            return None
        except ValueError as exc:
            output(f"⚠️  Invalid position parameters: {exc}\n")
            continue
        return position


def run_lookup(
    client: BybitTickerClient,
    symbol: str,
    position: Optional[PositionParameters] = None,
    engine: Optional[InsightEngine] = None,
    output: OutputFn = print,
) -> None:
    engine = engine or InsightEngine()
    market = client.fetch_market(symbol)
    output(format_snapshot(market.spot, MarketCategory.SPOT))
    output(format_snapshot(market.futures, MarketCategory.LINEAR))
    if market.spot is None and market.futures is None:
        return
    report = engine.analyze(market.spot, market.futures, position)
    output(format_report(report))


def interactive_loop(
    client: BybitTickerClient,
    input_fn: InputFn = input,
    output: OutputFn = print,
    ask_position: bool = True,
) -> None:
    output("🚀 Bybit ticker lookup started\n")
    while True:
        try:
            raw = input_fn(
                'Symbol to look up (e.g. BTC, ETH, SOL; "exit" or "quit" to stop): '
            )
        except EOFError:
            raw = "exit"
        if raw.strip().lower() in EXIT_WORDS:
            output("\n👋 Bye.")
            return
        if not raw.strip():
            output("⚠️  Please enter a symbol.\n")
            continue

        symbol = raw.strip().upper()
        output(f"\n🔍 Looking up {trading_pair(symbol, client.quote)}...")
        position = prompt_position(input_fn, output) if ask_position else None
        run_lookup(client, symbol, position, output=output)
