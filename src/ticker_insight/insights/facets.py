"""Insight facets computed from ticker snapshots and position parameters.

Each facet builds a small context of floats, runs it through an ordered
classification table (first match wins) and returns a FacetResult. Ratios
that would divide by zero fall back to the facet's neutral classification
with the undefined value reported as None.
"""

from __future__ import annotations

import math
from typing import Optional

from ticker_insight.data.models import TickerSnapshot
from ticker_insight.insights.models import Classification, FacetResult
from ticker_insight.insights.rules import ClassificationRule, always, classify


PERCENT_DIGITS = 2
FUNDING_DIGITS = 4
FLAT_RANGE_POSITION = 50.0


def _round(value: Optional[float], digits: int = PERCENT_DIGITS) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return round(value, digits)


def position_from_low(spot: TickerSnapshot) -> float:
    """Where the last price sits inside the 24h range, 0 (low) to 100 (high)."""
    high = float(spot.high_24h)
    low = float(spot.low_24h)
    last = float(spot.last_price)
    span = high - low
    if span == 0 or not math.isfinite(span):
        return FLAT_RANGE_POSITION
    position = (last - low) / span * 100
    return min(max(position, 0.0), 100.0)


# 1. Price position

PRICE_POSITION_RULES = (
    ClassificationRule(
        lambda c: c["position"] >= 70,
        Classification(
            "high",
            "🔺",
            "Price is near the 24h high ({position_percent:.2f}% of the daily range).",
            "Buying here is risky; wait for a pullback before adding.",
        ),
    ),
    ClassificationRule(
        lambda c: c["position"] <= 30,
        Classification(
            "low",
            "🔻",
            "Price is near the 24h low ({position_percent:.2f}% of the daily range).",
            "Possible buying opportunity; scale in gradually.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "mid",
            "↔️",
            "Price is mid-range ({position_percent:.2f}% of the daily range).",
            "No edge from price position alone; watch for a breakout.",
        ),
    ),
)


def price_position(spot: TickerSnapshot) -> FacetResult:
    position = position_from_low(spot)
    classification = classify(PRICE_POSITION_RULES, {"position": position})
    return FacetResult.from_classification(
        "price_position", classification, position_percent=_round(position)
    )


# 2. Market sentiment

SENTIMENT_RULES = (
    ClassificationRule(
        lambda c: c["fr"] > 0.01,
        Classification(
            "overheated_long",
            "🔥",
            "Funding rate is {funding_rate_percent:.4f}%: longs are crowded and paying shorts.",
            "Beware of a long squeeze; avoid chasing the move with leverage.",
        ),
    ),
    ClassificationRule(
        lambda c: c["fr"] < -0.01,
        Classification(
            "overheated_short",
            "🧊",
            "Funding rate is {funding_rate_percent:.4f}%: shorts are crowded and paying longs.",
            "Beware of a short squeeze; avoid adding shorts here.",
        ),
    ),
    ClassificationRule(
        lambda c: c["fr"] > 0,
        Classification(
            "mild_long_bias",
            "📈",
            "Funding rate is {funding_rate_percent:.4f}%: the market leans slightly long.",
            "Sentiment is mildly bullish; no sign of excess yet.",
        ),
    ),
    ClassificationRule(
        lambda c: c["fr"] < 0,
        Classification(
            "mild_short_bias",
            "📉",
            "Funding rate is {funding_rate_percent:.4f}%: the market leans slightly short.",
            "Sentiment is mildly bearish; no sign of excess yet.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "neutral",
            "⚖️",
            "Funding rate is {funding_rate_percent:.4f}%: longs and shorts are balanced.",
            "Sentiment is neutral; rely on price action.",
        ),
    ),
)


def market_sentiment(futures: TickerSnapshot) -> FacetResult:
    fr = float(futures.funding_rate * 100)
    classification = classify(SENTIMENT_RULES, {"fr": fr})
    return FacetResult.from_classification(
        "market_sentiment",
        classification,
        funding_rate_percent=_round(fr, FUNDING_DIGITS),
    )


# 3. Volatility

VOLATILITY_RULES = (
    ClassificationRule(
        lambda c: c["range"] > 15,
        Classification(
            "very_high",
            "🌪️",
            "24h range is {range_percent:.2f}%: volatility is very high.",
            "Cut position size and keep leverage low.",
        ),
    ),
    ClassificationRule(
        lambda c: c["range"] > 10,
        Classification(
            "high",
            "⚡",
            "24h range is {range_percent:.2f}%: volatility is high.",
            "Use wider stops or smaller size.",
        ),
    ),
    ClassificationRule(
        lambda c: c["range"] < 3,
        Classification(
            "low",
            "😴",
            "24h range is {range_percent:.2f}%: volatility is low.",
            "Quiet market; a larger move may be building up.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "normal",
            "🌤️",
            "24h range is {range_percent:.2f}%: volatility is normal.",
            "Trade with your usual risk settings.",
        ),
    ),
)

VOLATILITY_UNDEFINED = Classification(
    "normal",
    "🌤️",
    "24h range cannot be measured from the reported high and low.",
    "Trade with your usual risk settings.",
)


def volatility(spot: TickerSnapshot) -> FacetResult:
    low = float(spot.low_24h)
    range_percent = (float(spot.high_24h) - low) / low * 100 if low > 0 else math.inf
    if not math.isfinite(range_percent):
        return FacetResult.from_classification(
            "volatility", VOLATILITY_UNDEFINED, range_percent=None
        )
    classification = classify(VOLATILITY_RULES, {"range": range_percent})
    return FacetResult.from_classification(
        "volatility", classification, range_percent=_round(range_percent)
    )


# 4. Risk level

RISK_RULES = (
    ClassificationRule(
        lambda c: c["score"] > 50,
        Classification(
            "very_high",
            "🚨",
            "Risk score {risk_score:.2f} ({change_percent:.2f}% move × {leverage:g}x): very high risk.",
            "A move like today's could liquidate you; reduce leverage now.",
        ),
    ),
    ClassificationRule(
        lambda c: c["score"] > 30,
        Classification(
            "high",
            "⚠️",
            "Risk score {risk_score:.2f} ({change_percent:.2f}% move × {leverage:g}x): high risk.",
            "Consider lowering leverage and setting a firm stop-loss.",
        ),
    ),
    ClassificationRule(
        lambda c: c["score"] > 15,
        Classification(
            "moderate",
            "🟡",
            "Risk score {risk_score:.2f} ({change_percent:.2f}% move × {leverage:g}x): moderate risk.",
            "Keep a stop-loss in place and monitor the position.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "low",
            "🟢",
            "Risk score {risk_score:.2f} ({change_percent:.2f}% move × {leverage:g}x): low risk.",
            "Risk is manageable at the current leverage.",
        ),
    ),
)


def risk_level(spot: TickerSnapshot, leverage: float) -> FacetResult:
    change = spot.change_percent
    score = abs(change) * leverage
    classification = classify(RISK_RULES, {"score": score})
    return FacetResult.from_classification(
        "risk_level",
        classification,
        risk_score=_round(score),
        change_percent=_round(change),
        leverage=leverage,
    )


# 5. Target reachability

LONG_TARGET_RULES = (
    ClassificationRule(
        lambda c: c["to_target"] < 0,
        Classification(
            "reached",
            "🎯",
            "Target already reached: price is {distance_to_target_percent:.2f}% past it.",
            "Consider taking profit or trailing your stop.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] > 5 and c["to_target"] < 10,
        Classification(
            "high",
            "🚀",
            "Target is {distance_to_target_percent:.2f}% away with strong upward momentum.",
            "Target looks reachable; hold and protect gains.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] < -5 and c["to_target"] > 20,
        Classification(
            "low",
            "🧱",
            "Target is {distance_to_target_percent:.2f}% away while price is falling.",
            "Target looks unlikely soon; consider a closer target.",
        ),
    ),
    ClassificationRule(
        lambda c: c["in_profit"],
        Classification(
            "moderate",
            "🧭",
            "Target is {distance_to_target_percent:.2f}% away; position is "
            "{distance_from_average_percent:.2f}% above entry.",
            "Position is in profit; keep the target and manage the stop.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "moderate",
            "🧭",
            "Target is {distance_to_target_percent:.2f}% away; position is "
            "{distance_from_average_percent:.2f}% from entry.",
            "Be patient and wait for momentum toward the target.",
        ),
    ),
)

SHORT_TARGET_RULES = (
    ClassificationRule(
        lambda c: c["to_target"] > 0,
        Classification(
            "reached",
            "🎯",
            "Target already reached: price is {distance_to_target_percent:.2f}% below it.",
            "Consider taking profit or trailing your stop.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] < -5 and c["to_target"] > -10,
        Classification(
            "high",
            "🚀",
            "Target is {distance_to_target_percent:.2f}% away with strong downward momentum.",
            "Target looks reachable; hold and protect gains.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] > 5 and c["to_target"] < -20,
        Classification(
            "low",
            "🧱",
            "Target is {distance_to_target_percent:.2f}% away while price is rising.",
            "Target looks unlikely soon; consider a closer target.",
        ),
    ),
    ClassificationRule(
        lambda c: c["in_profit"],
        Classification(
            "moderate",
            "🧭",
            "Target is {distance_to_target_percent:.2f}% away; position is "
            "{distance_from_average_percent:.2f}% below entry.",
            "Position is in profit; keep the target and manage the stop.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "moderate",
            "🧭",
            "Target is {distance_to_target_percent:.2f}% away; position is "
            "{distance_from_average_percent:.2f}% from entry.",
            "Be patient and wait for momentum toward the target.",
        ),
    ),
)

TARGET_UNDEFINED = Classification(
    "moderate",
    "🧭",
    "Distance to target cannot be measured from the last price.",
    "Wait for a valid price before judging the target.",
)


def target_reachability(
    spot: TickerSnapshot, average_price: float, target_price: float
) -> FacetResult:
    direction = "long" if target_price > average_price else "short"
    last = float(spot.last_price)
    to_target = (target_price - last) / last * 100 if last > 0 else math.inf
    from_average = (last - average_price) / average_price * 100
    if not (math.isfinite(to_target) and math.isfinite(from_average)):
        return FacetResult.from_classification(
            "target_reachability",
            TARGET_UNDEFINED,
            direction=direction,
            distance_to_target_percent=None,
            distance_from_average_percent=None,
        )

    context = {
        "to_target": to_target,
        "change": spot.change_percent,
        "in_profit": last > average_price if direction == "long" else last < average_price,
    }
    rules = LONG_TARGET_RULES if direction == "long" else SHORT_TARGET_RULES
    classification = classify(rules, context)
    return FacetResult.from_classification(
        "target_reachability",
        classification,
        direction=direction,
        distance_to_target_percent=_round(to_target),
        distance_from_average_percent=_round(from_average),
    )


# 6. Volume / activity character (reads the 24h change only, not volume_24h)

VOLUME_RULES = (
    ClassificationRule(
        lambda c: c["change"] > 5,
        Classification(
            "active_rising",
            "📊",
            "Active trading with buyers in control ({change_percent:+.2f}% in 24h).",
            "Strong demand; follow the trend but watch for exhaustion.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] < -5,
        Classification(
            "active_falling",
            "📊",
            "Active trading with sellers in control ({change_percent:+.2f}% in 24h).",
            "Selling pressure is heavy; wait for it to ease.",
        ),
    ),
    ClassificationRule(
        lambda c: abs(c["change"]) < 2,
        Classification(
            "quiet",
            "💤",
            "Quiet trading ({change_percent:+.2f}% in 24h).",
            "Little participation; signals are less reliable.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "normal",
            "📊",
            "Normal trading activity ({change_percent:+.2f}% in 24h).",
            "Nothing unusual in participation.",
        ),
    ),
)


def volume_activity(spot: TickerSnapshot) -> FacetResult:
    change = spot.change_percent
    classification = classify(VOLUME_RULES, {"change": change})
    return FacetResult.from_classification(
        "volume_activity", classification, change_percent=_round(change)
    )


# 7. Price trend

TREND_RULES = (
    ClassificationRule(
        lambda c: c["change"] > 5 and c["position"] > 60,
        Classification(
            "strong_uptrend",
            "🚀",
            "Strong uptrend: {change_percent:+.2f}% and holding the upper range.",
            "Momentum is with buyers; trail stops rather than fading it.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] > 5,
        Classification(
            "uptrend",
            "📈",
            "Uptrend: {change_percent:+.2f}% in 24h.",
            "Trend is up; look for pullbacks to enter.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] < -5 and c["position"] < 40,
        Classification(
            "strong_downtrend",
            "💥",
            "Strong downtrend: {change_percent:+.2f}% and pinned to the lower range.",
            "Avoid catching the knife; wait for stabilization.",
        ),
    ),
    ClassificationRule(
        lambda c: c["change"] < -5,
        Classification(
            "downtrend",
            "📉",
            "Downtrend: {change_percent:+.2f}% in 24h.",
            "Trend is down; be cautious with new longs.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "sideways",
            "➡️",
            "Sideways: {change_percent:+.2f}% in 24h.",
            "Range-bound market; trade the edges of the range.",
        ),
    ),
)


def price_trend(spot: TickerSnapshot) -> FacetResult:
    change = spot.change_percent
    position = position_from_low(spot)
    classification = classify(TREND_RULES, {"change": change, "position": position})
    return FacetResult.from_classification(
        "price_trend",
        classification,
        change_percent=_round(change),
        position_percent=_round(position),
    )


# 8. Trading recommendation

RECOMMENDATION_RULES = (
    ClassificationRule(
        lambda c: c["is_low"] and not c["is_falling"],
        Classification(
            "consider_buy",
            "✅",
            "Price is near the daily low and not falling.",
            "Consider buying in small tranches.",
        ),
    ),
    ClassificationRule(
        lambda c: c["is_high"] and c["is_rising"],
        Classification(
            "consider_sell",
            "💰",
            "Price is near the daily high and still rising.",
            "Consider taking partial profit.",
        ),
    ),
    ClassificationRule(
        lambda c: c["is_high"],
        Classification(
            "caution_buy",
            "✋",
            "Price is near the daily high without momentum.",
            "Be careful buying here; wait for a better entry.",
        ),
    ),
    ClassificationRule(
        lambda c: c["is_falling"],
        Classification(
            "wait_and_watch",
            "👀",
            "Price is falling.",
            "Wait for the decline to stop before acting.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "neutral_watch",
            "🔍",
            "No clear setup.",
            "Stay on the sidelines and keep watching.",
        ),
    ),
)


def recommendation(spot: TickerSnapshot) -> FacetResult:
    position = position_from_low(spot)
    change = spot.change_percent
    context = {
        "is_low": position <= 30,
        "is_high": position >= 70,
        "is_rising": change > 3,
        "is_falling": change < -3,
    }
    classification = classify(RECOMMENDATION_RULES, context)
    return FacetResult.from_classification(
        "recommendation",
        classification,
        position_percent=_round(position),
        change_percent=_round(change),
    )


# 9. Stop-loss suggestion

STOP_LOSS_RULES = (
    ClassificationRule(
        lambda c: c["direction"] == "long",
        Classification(
            "long",
            "🛡️",
            "Suggested stop-loss for a long: {stop_loss_price:.2f} ({stop_loss_percent:.2f}% from entry).",
            "Half of the {risk_percent:.2f}% move that would liquidate you; set it now.",
        ),
    ),
    ClassificationRule(
        always,
        Classification(
            "short",
            "🛡️",
            "Suggested stop-loss for a short: {stop_loss_price:.2f} (+{stop_loss_percent:.2f}% from entry).",
            "Half of the {risk_percent:.2f}% move that would liquidate you; set it now.",
        ),
    ),
)


def stop_loss(spot: TickerSnapshot, average_price: float, leverage: float) -> FacetResult:
    direction = "long" if float(spot.last_price) > average_price else "short"
    risk_percent = 100 / leverage
    stop_percent = -risk_percent * 0.5 if direction == "long" else risk_percent * 0.5
    stop_price = average_price * (1 + stop_percent / 100)
    classification = classify(STOP_LOSS_RULES, {"direction": direction})
    return FacetResult.from_classification(
        "stop_loss",
        classification,
        direction=direction,
        risk_percent=_round(risk_percent),
        stop_loss_percent=_round(stop_percent),
        stop_loss_price=_round(stop_price),
    )
