"""Notification exports."""

from ticker_insight.notify.slack import SlackNotifier, extract_symbol, format_slack_message

__all__ = ["SlackNotifier", "extract_symbol", "format_slack_message"]
