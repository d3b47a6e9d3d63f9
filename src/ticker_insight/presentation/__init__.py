"""Presentation helpers."""

from ticker_insight.presentation.text import (
    format_number,
    format_price,
    format_report,
    format_snapshot,
)

__all__ = ["format_number", "format_price", "format_report", "format_snapshot"]
