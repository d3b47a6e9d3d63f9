"""Insight engine: run every facet whose inputs are available."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any, Callable, Dict, List, Optional

from ticker_insight.data.models import PositionParameters, TickerSnapshot
from ticker_insight.insights import facets
from ticker_insight.insights.models import FacetResult, InsightReport

logger = logging.getLogger(__name__)


FacetFactory = Callable[[Dict[str, Any]], FacetResult]


@dataclass(frozen=True)
class FacetSpec:
    key: str
    name: str
    requires: tuple[str, ...]
    compute: FacetFactory


FACET_SPECS: List[FacetSpec] = [
    FacetSpec(
        key="price_position",
        name="Price Position",
        requires=("spot",),
        compute=lambda i: facets.price_position(i["spot"]),
    ),
    FacetSpec(
        key="market_sentiment",
        name="Market Sentiment",
        requires=("futures", "funding_rate"),
        compute=lambda i: facets.market_sentiment(i["futures"]),
    ),
    FacetSpec(
        key="volatility",
        name="Volatility",
        requires=("spot",),
        compute=lambda i: facets.volatility(i["spot"]),
    ),
    FacetSpec(
        key="risk_level",
        name="Risk Level",
        requires=("spot", "leverage"),
        compute=lambda i: facets.risk_level(i["spot"], i["leverage"]),
    ),
    FacetSpec(
        key="target_reachability",
        name="Target Reachability",
        requires=("spot", "average_price", "target_price"),
        compute=lambda i: facets.target_reachability(
            i["spot"], i["average_price"], i["target_price"]
        ),
    ),
    FacetSpec(
        key="volume_activity",
        name="Volume Activity",
        requires=("spot",),
        compute=lambda i: facets.volume_activity(i["spot"]),
    ),
    FacetSpec(
        key="price_trend",
        name="Price Trend",
        requires=("spot",),
        compute=lambda i: facets.price_trend(i["spot"]),
    ),
    FacetSpec(
        key="recommendation",
        name="Trading Recommendation",
        requires=("spot",),
        compute=lambda i: facets.recommendation(i["spot"]),
    ),
    FacetSpec(
        key="stop_loss",
        name="Stop-Loss Suggestion",
        requires=("spot", "average_price", "leverage"),
        compute=lambda i: facets.stop_loss(i["spot"], i["average_price"], i["leverage"]),
    ),
]


def _positive(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


class InsightEngine:
    """Derive an InsightReport from ticker snapshots and position parameters."""

    def __init__(self, specs: Optional[List[FacetSpec]] = None) -> None:
        self.specs = list(specs) if specs is not None else list(FACET_SPECS)

    def analyze(
        self,
        spot: Optional[TickerSnapshot] = None,
        futures: Optional[TickerSnapshot] = None,
        position: Optional[PositionParameters] = None,
    ) -> InsightReport:
        position = position or PositionParameters()
        inputs: Dict[str, Any] = {
            "spot": spot,
            "futures": futures,
            "funding_rate": futures.funding_rate if futures is not None else None,
            "average_price": _positive(position.average_price),
            "leverage": _positive(position.leverage),
            "target_price": _positive(position.target_price),
        }

        results: Dict[str, FacetResult] = {}
        for spec in self.specs:
            if any(inputs.get(name) is None for name in spec.requires):
                continue
            try:
                results[spec.key] = spec.compute(inputs)
            except Exception as exc:
                logger.exception("Facet %s failed, omitting it: %s", spec.key, exc)
        return InsightReport(facets=results)


def derive_insights(
    spot: Optional[TickerSnapshot] = None,
    futures: Optional[TickerSnapshot] = None,
    average_price: Optional[float] = None,
    leverage: Optional[float] = None,
    target_price: Optional[float] = None,
) -> InsightReport:
    """Functional entry point; non-positive position values count as absent."""
    position = PositionParameters(
        average_price=_positive(average_price),
        leverage=_positive(leverage),
        target_price=_positive(target_price),
    )
    return InsightEngine().analyze(spot=spot, futures=futures, position=position)
