"""Look up Bybit tickers and insights from the terminal."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from ticker_insight.cli import interactive_loop, run_lookup
from ticker_insight.config import settings
from ticker_insight.data.models import PositionParameters
from ticker_insight.ingest.bybit import BybitTickerClient


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bybit ticker lookup")
    parser.add_argument(
        "--symbol",
        default="",
        help="Base symbol, e.g. BTC; empty starts the interactive loop.",
    )
    parser.add_argument("--average-price", type=float, default=None, help="Average entry price.")
    parser.add_argument("--leverage", type=float, default=None, help="Position leverage.")
    parser.add_argument("--target-price", type=float, default=None, help="Target exit price.")
    parser.add_argument(
        "--no-position",
        action="store_true",
        help="Interactive mode: do not prompt for position parameters.",
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args()
    client = BybitTickerClient()

    if not args.symbol.strip():
        interactive_loop(client, ask_position=not args.no_position)
        return

    try:
        position = PositionParameters(
            average_price=args.average_price,
            leverage=args.leverage,
            target_price=args.target_price,
        )
    except ValueError as exc:
        raise SystemExit(f"Invalid position parameters: {exc}")
    run_lookup(client, args.symbol.strip().upper(), position)


if __name__ == "__main__":
    main()
