"""HTTP API for ticker lookups, insights and the Slack webhook."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from ticker_insight.config import settings
from ticker_insight.data.models import (
    MarketCategory,
    PositionParameters,
    TickerSnapshot,
)
from ticker_insight.ingest.bybit import BybitTickerClient, trading_pair
from ticker_insight.insights.engine import InsightEngine
from ticker_insight.notify.slack import SlackNotifier, extract_symbol

logger = logging.getLogger(__name__)


class SlackWebhookPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: Optional[str] = None
    event: Optional[Dict[str, Any]] = None
    symbol: Optional[str] = None


def _snapshot_payload(snapshot: Optional[TickerSnapshot]) -> Optional[Dict[str, Any]]:
    return snapshot.to_dict() if snapshot is not None else None


def create_app(
    client: Optional[BybitTickerClient] = None,
    notifier: Optional[SlackNotifier] = None,
    engine: Optional[InsightEngine] = None,
) -> FastAPI:
    app = FastAPI(title="Ticker Insight API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    client = client or BybitTickerClient()
    notifier = notifier or SlackNotifier()
    engine = engine or InsightEngine()

    def _notify(
        background: BackgroundTasks,
        symbol: str,
        spot: Optional[TickerSnapshot],
        futures: Optional[TickerSnapshot],
    ) -> None:
        if notifier.enabled and settings.slack_notify_api:
            background.add_task(notifier.send, symbol, spot, futures)

    def _single(symbol: str, category: MarketCategory, background: BackgroundTasks) -> JSONResponse:
        symbol = symbol.upper()
        snapshot = client.fetch_ticker(symbol, category)
        if snapshot is None:
            raise HTTPException(
                status_code=404,
                detail={
                    "error": "Price information not found.",
                    "symbol": trading_pair(symbol, client.quote),
                },
            )
        if category is MarketCategory.SPOT:
            _notify(background, symbol, snapshot, None)
        else:
            _notify(background, symbol, None, snapshot)
        return JSONResponse({"success": True, "data": snapshot.to_dict()})

    @app.get("/api/price/{symbol}", response_class=JSONResponse)
    def api_price(symbol: str, background: BackgroundTasks) -> JSONResponse:
        return _single(symbol, MarketCategory.SPOT, background)

    @app.get("/api/futures/{symbol}", response_class=JSONResponse)
    def api_futures(symbol: str, background: BackgroundTasks) -> JSONResponse:
        return _single(symbol, MarketCategory.LINEAR, background)

    @app.get("/api/all/{symbol}", response_class=JSONResponse)
    def api_all(symbol: str, background: BackgroundTasks) -> JSONResponse:
        symbol = symbol.upper()
        market = client.fetch_market(symbol)
        _notify(background, symbol, market.spot, market.futures)
        return JSONResponse(
            {
                "success": True,
                "data": {
                    "spot": _snapshot_payload(market.spot),
                    "futures": _snapshot_payload(market.futures),
                },
            }
        )

    @app.get("/api/insights/{symbol}", response_class=JSONResponse)
    def api_insights(
        symbol: str,
        average_price: Optional[float] = Query(None, gt=0),
        leverage: Optional[float] = Query(None, gt=0),
        target_price: Optional[float] = Query(None, gt=0),
    ) -> JSONResponse:
        try:
            position = PositionParameters(
                average_price=average_price,
                leverage=leverage,
                target_price=target_price,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        symbol = symbol.upper()
        market = client.fetch_market(symbol)
        if market.spot is None and market.futures is None:
            raise HTTPException(
                status_code=404,
                detail={
                    "error": "Price information not found.",
                    "symbol": trading_pair(symbol, client.quote),
                },
            )
        report = engine.analyze(market.spot, market.futures, position)
        return JSONResponse(
            {
                "success": True,
                "data": {
                    "spot": _snapshot_payload(market.spot),
                    "futures": _snapshot_payload(market.futures),
                    "insights": report.to_dict(),
                    "text": report.to_text(),
                },
            }
        )

    def _lookup_and_notify(symbol: str) -> None:
        if not notifier.enabled:
            logger.warning("SLACK_WEBHOOK_URL is not set; skipping %s lookup.", symbol)
            return
        market = client.fetch_market(symbol)
        report = engine.analyze(market.spot, market.futures)
        notifier.send(symbol, market.spot, market.futures, report)

    @app.post("/webhook/slack", response_class=JSONResponse)
    def webhook_slack(
        background: BackgroundTasks,
        payload: Optional[SlackWebhookPayload] = Body(None),
    ) -> JSONResponse:
        symbol = extract_symbol(payload.model_dump(exclude_none=True) if payload else None)
        if not symbol:
            raise HTTPException(
                status_code=400,
                detail="No symbol found. Include a symbol in the message (e.g. BTC, ETH).",
            )
        background.add_task(_lookup_and_notify, symbol)
        return JSONResponse(
            {
                "text": f"🔍 {trading_pair(symbol, client.quote)} lookup in progress...",
                "response_type": "in_channel",
            }
        )

    @app.get("/health", response_class=JSONResponse)
    def health() -> JSONResponse:
        return JSONResponse(
            {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
        )

    return app
