"""Bybit ticker lookups and heuristic trading insights."""

__version__ = "0.1.0"
