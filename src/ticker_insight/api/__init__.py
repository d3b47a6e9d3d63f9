"""HTTP API exports."""

from ticker_insight.api.server import create_app

__all__ = ["create_app"]
