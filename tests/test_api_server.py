import pytest
from fastapi.testclient import TestClient

from ticker_insight.api.server import create_app
from ticker_insight.data.models import MarketCategory


@pytest.fixture
def api(fake_client, fake_notifier):
    return TestClient(create_app(client=fake_client, notifier=fake_notifier))


class TestTickerEndpoints:
    def test_price(self, api, fake_client, fake_notifier):
        response = api.get("/api/price/btc")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["category"] == "spot"
        assert body["data"]["lastPrice"] == "100"
        assert fake_client.calls == [("BTC", MarketCategory.SPOT)]
        assert len(fake_notifier.sent) == 1
        assert fake_notifier.sent[0][2] is None

    def test_futures(self, api):
        response = api.get("/api/futures/BTC")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["category"] == "linear"
        assert data["fundingRate"] == "0.0001"

    def test_missing_ticker_is_404(self, client_factory, fake_notifier):
        api = TestClient(create_app(client=client_factory(), notifier=fake_notifier))

        response = api.get("/api/price/zzz")

        assert response.status_code == 404
        assert response.json()["detail"] == {
            "error": "Price information not found.",
            "symbol": "ZZZUSDT",
        }
        assert fake_notifier.sent == []

    def test_all_with_partial_data(self, client_factory, notifier_factory, spot_snapshot):
        api = TestClient(
            create_app(client=client_factory(spot=spot_snapshot), notifier=notifier_factory())
        )

        response = api.get("/api/all/btc")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["spot"]["symbol"] == "BTCUSDT"
        assert data["futures"] is None

    def test_disabled_notifier_sends_nothing(self, fake_client, notifier_factory):
        notifier = notifier_factory(enabled=False)
        api = TestClient(create_app(client=fake_client, notifier=notifier))

        assert api.get("/api/all/btc").status_code == 200
        assert notifier.sent == []


class TestInsights:
    def test_spot_and_futures_without_position(self, api):
        response = api.get("/api/insights/btc")

        assert response.status_code == 200
        data = response.json()["data"]
        assert "price_position" in data["insights"]
        assert "market_sentiment" in data["insights"]
        assert "risk_level" not in data["insights"]
        assert data["insights"]["price_position"]["level"] == "mid"
        assert data["text"]

    def test_with_position(self, api):
        response = api.get(
            "/api/insights/btc",
            params={"average_price": 95, "leverage": 5, "target_price": 120},
        )

        insights = response.json()["data"]["insights"]
        assert set(insights) >= {"risk_level", "target_reachability", "stop_loss"}
        assert insights["stop_loss"]["direction"] == "long"

    def test_non_positive_leverage_is_rejected(self, api):
        assert api.get("/api/insights/btc", params={"leverage": -1}).status_code == 422
        assert api.get("/api/insights/btc", params={"average_price": 0}).status_code == 422

    def test_nothing_found_is_404(self, client_factory, notifier_factory):
        api = TestClient(create_app(client=client_factory(), notifier=notifier_factory()))

        assert api.get("/api/insights/btc").status_code == 404


class TestSlackWebhook:
    def test_text_message_triggers_lookup(self, api, fake_notifier):
        response = api.post("/webhook/slack", json={"text": "eth price"})

        assert response.status_code == 200
        assert response.json() == {
            "text": "🔍 ETHUSDT lookup in progress...",
            "response_type": "in_channel",
        }
        assert len(fake_notifier.sent) == 1
        symbol, spot, futures, report = fake_notifier.sent[0]
        assert symbol == "ETH"
        assert spot is not None
        assert "price_position" in report

    def test_event_text(self, api):
        response = api.post("/webhook/slack", json={"event": {"text": "sol"}})

        assert response.status_code == 200
        assert "SOLUSDT" in response.json()["text"]

    def test_symbol_field(self, api):
        response = api.post("/webhook/slack", json={"symbol": "doge"})

        assert "DOGEUSDT" in response.json()["text"]

    def test_missing_symbol_is_400(self, api, fake_notifier):
        assert api.post("/webhook/slack", json={"text": "?!"}).status_code == 400
        assert api.post("/webhook/slack").status_code == 400
        assert fake_notifier.sent == []

    def test_lookup_skipped_without_webhook(self, fake_client, notifier_factory):
        notifier = notifier_factory(enabled=False)
        api = TestClient(create_app(client=fake_client, notifier=notifier))

        response = api.post("/webhook/slack", json={"text": "btc"})

        assert response.status_code == 200
        assert notifier.sent == []
        assert fake_client.calls == []


def test_health(api):
    response = api.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "timestamp" in response.json()


def test_insights_with_out_of_range_high_stay_json(
    client_factory, notifier_factory, make_snapshot
):
    api = TestClient(
        create_app(
            client=client_factory(spot=make_snapshot(high="1e400")),
            notifier=notifier_factory(),
        )
    )

    response = api.get("/api/insights/btc", params={"average_price": 95, "leverage": 5})

    assert response.status_code == 200
    insights = response.json()["data"]["insights"]
    assert insights["volatility"]["range_percent"] is None
    assert insights["price_position"]["position_percent"] == 50.0
