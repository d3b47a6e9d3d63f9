"""Ticker Insight API server."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

import uvicorn

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from ticker_insight.api import create_app
from ticker_insight.config import settings


logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ticker Insight API server.")
    parser.add_argument("--host", default=settings.api_host, help="Bind host.")
    parser.add_argument(
        "--port", type=int, default=settings.api_port, help="Bind port (default: PORT)."
    )
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args()
    app = create_app()
    logger.info("API endpoints:")
    logger.info("  spot:    http://%s:%s/api/price/{symbol}", args.host, args.port)
    logger.info("  futures: http://%s:%s/api/futures/{symbol}", args.host, args.port)
    logger.info("  all:     http://%s:%s/api/all/{symbol}", args.host, args.port)
    logger.info("  insight: http://%s:%s/api/insights/{symbol}", args.host, args.port)
    logger.info("  slack:   http://%s:%s/webhook/slack", args.host, args.port)
    if settings.slack_webhook_url:
        logger.info("Slack webhook URL configured.")
    else:
        logger.warning("SLACK_WEBHOOK_URL is not set; Slack delivery disabled.")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
