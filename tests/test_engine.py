import json

import pytest

from ticker_insight.data.models import MarketCategory, PositionParameters
from ticker_insight.insights.engine import FACET_SPECS, FacetSpec, InsightEngine, derive_insights
from ticker_insight.insights.models import InsightReport
from ticker_insight.insights.rules import ClassificationRule, always, classify
from ticker_insight.insights.models import Classification


SPOT_ONLY_FACETS = [
    "price_position",
    "volatility",
    "volume_activity",
    "price_trend",
    "recommendation",
]


def test_spot_only_report(make_snapshot):
    report = derive_insights(spot=make_snapshot(last="100", high="110", low="90", change="0.06"))

    assert report.names() == SPOT_ONLY_FACETS
    assert report.get("price_position").level == "mid"
    assert report.get("price_position").values["position_percent"] == 50.0
    assert report.get("volatility").level == "very_high"
    assert report.get("volatility").values["range_percent"] == pytest.approx(22.22)
    assert report.get("price_trend").level == "uptrend"
    assert report.get("recommendation").level == "neutral_watch"


def test_falling_takes_priority_over_low_price(make_snapshot):
    report = derive_insights(spot=make_snapshot(last="91", high="110", low="90", change="-0.06"))

    assert report.get("price_position").level == "low"
    assert report.get("price_position").values["position_percent"] == pytest.approx(5.0)
    assert report.get("recommendation").level == "wait_and_watch"


def test_full_report_order(spot_snapshot, futures_snapshot):
    report = derive_insights(
        spot=spot_snapshot,
        futures=futures_snapshot,
        average_price=100,
        leverage=10,
        target_price=120,
    )

    assert report.names() == [spec.key for spec in FACET_SPECS]
    assert len(report) == 9


def test_sentiment_requires_futures_with_funding(make_snapshot, spot_snapshot):
    assert "market_sentiment" not in derive_insights(spot=spot_snapshot)

    no_funding = make_snapshot(category=MarketCategory.LINEAR)
    assert "market_sentiment" not in derive_insights(futures=no_funding)

    overheated = make_snapshot(category=MarketCategory.LINEAR, funding_rate="0.02")
    report = derive_insights(futures=overheated)
    assert report.names() == ["market_sentiment"]
    assert report.get("market_sentiment").level == "overheated_long"


def test_leverage_gates_risk_and_stop_loss(spot_snapshot):
    without = derive_insights(spot=spot_snapshot, average_price=100)
    assert "risk_level" not in without
    assert "stop_loss" not in without

    risk_only = derive_insights(spot=spot_snapshot, leverage=5)
    assert "risk_level" in risk_only
    assert "stop_loss" not in risk_only

    both = derive_insights(spot=spot_snapshot, average_price=100, leverage=5)
    assert "risk_level" in both
    assert "stop_loss" in both


def test_target_needs_average_and_target(spot_snapshot):
    assert "target_reachability" not in derive_insights(spot=spot_snapshot, target_price=120)
    assert "target_reachability" not in derive_insights(spot=spot_snapshot, average_price=100)
    assert "target_reachability" in derive_insights(
        spot=spot_snapshot, average_price=100, target_price=120
    )


def test_stop_loss_scenario(make_snapshot):
    report = derive_insights(spot=make_snapshot(last="105"), average_price=100, leverage=10)

    stop = report.get("stop_loss")
    assert stop.values["stop_loss_percent"] == -5.0
    assert stop.values["stop_loss_price"] == 95.0


def test_no_inputs_gives_empty_report():
    report = derive_insights()
    assert isinstance(report, InsightReport)
    assert len(report) == 0
    assert report.to_dict() == {}
    assert report.to_text() == ""


def test_non_positive_position_values_are_ignored(spot_snapshot):
    report = derive_insights(spot=spot_snapshot, average_price=0, leverage=-3, target_price=float("nan"))
    assert report.names() == SPOT_ONLY_FACETS


def test_identical_inputs_give_identical_output(spot_snapshot, futures_snapshot):
    kwargs = dict(
        spot=spot_snapshot,
        futures=futures_snapshot,
        average_price=95,
        leverage=3,
        target_price=130,
    )
    first = json.dumps(derive_insights(**kwargs).to_dict(), ensure_ascii=False)
    second = json.dumps(derive_insights(**kwargs).to_dict(), ensure_ascii=False)
    assert first == second


def test_analyze_with_position_parameters(spot_snapshot):
    engine = InsightEngine()
    position = PositionParameters(average_price=100, leverage=10, target_price=110)

    report = engine.analyze(spot_snapshot, None, position)

    assert "stop_loss" in report
    assert "target_reachability" in report
    assert "market_sentiment" not in report


def test_failing_facet_is_omitted(spot_snapshot):
    def boom(_inputs):
        raise ZeroDivisionError("bad")

    engine = InsightEngine(
        specs=[
            FacetSpec(key="broken", name="Broken", requires=("spot",), compute=boom),
            FACET_SPECS[0],
        ]
    )

    report = engine.analyze(spot=spot_snapshot)

    assert report.names() == ["price_position"]


def test_text_rendering_has_description_and_advice(spot_snapshot):
    report = derive_insights(spot=spot_snapshot)
    text = report.to_text()
    for result in report:
        assert result.description in text
        assert result.advice in text


def test_position_parameters_reject_non_positive():
    with pytest.raises(ValueError):
        PositionParameters(average_price=0)
    with pytest.raises(ValueError):
        PositionParameters(leverage=-1)
    assert PositionParameters().leverage is None


def test_classify_first_match_wins():
    first = Classification("first", "1", "d", "a")
    second = Classification("second", "2", "d", "a")
    rules = (
        ClassificationRule(lambda c: c["x"] > 0, first),
        ClassificationRule(lambda c: c["x"] > -1, second),
        ClassificationRule(always, second),
    )
    assert classify(rules, {"x": 1}) is first
    assert classify(rules, {"x": 0}) is second


def test_classify_without_catch_all_raises():
    rules = (ClassificationRule(lambda c: False, Classification("x", "", "", "")),)
    with pytest.raises(LookupError):
        classify(rules, {})
