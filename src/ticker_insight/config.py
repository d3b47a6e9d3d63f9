"""Configuration loader for Ticker Insight."""

from dataclasses import dataclass
import os

from dotenv import load_dotenv


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    bybit_api_base: str
    bybit_timeout_s: float
    bybit_http_proxy: str
    bybit_https_proxy: str
    quote_currency: str
    slack_webhook_url: str
    slack_timeout_s: float
    slack_notify_api: bool
    api_host: str
    api_port: int
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            bybit_api_base=os.getenv("BYBIT_API_BASE", "https://api.bybit.com"),
            bybit_timeout_s=_get_float(os.getenv("BYBIT_TIMEOUT_S"), 10.0),
            bybit_http_proxy=(
                os.getenv("BYBIT_HTTP_PROXY")
                or os.getenv("HTTP_PROXY")
                or os.getenv("http_proxy")
                or ""
            ),
            bybit_https_proxy=(
                os.getenv("BYBIT_HTTPS_PROXY")
                or os.getenv("HTTPS_PROXY")
                or os.getenv("https_proxy")
                or ""
            ),
            quote_currency=os.getenv("QUOTE_CURRENCY", "USDT").strip().upper(),
            slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL", ""),
            slack_timeout_s=_get_float(os.getenv("SLACK_TIMEOUT_S"), 10.0),
            slack_notify_api=_get_bool(os.getenv("SLACK_NOTIFY_API"), default=True),
            api_host=os.getenv("API_HOST", "127.0.0.1"),
            api_port=_get_int(os.getenv("PORT"), 3000),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        )


settings = Settings.from_env()
