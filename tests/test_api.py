import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "store.db")


@pytest.fixture
def client(db_path):
    app = create_app(db_path=db_path, seed=7, autostart=False)
    with TestClient(app) as c:
        yield c


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_filter_and_sort(client):
    rows = client.get("/api/instruments").json()
    assert len(rows) == 130
    assert [r["name"] for r in rows] == sorted(r["name"] for r in rows)
    assert len(rows[0]["priceHistory"]) == 25

    by_price = client.get("/api/instruments", params={"sort": "price"}).json()
    assert by_price[0]["price"] == max(r["price"] for r in rows)

    energy = client.get("/api/instruments", params={"sector": "Energy"}).json()
    assert {r["symbol"] for r in energy} == {"XOM", "CVX", "COP"}

    found = client.get("/api/instruments", params={"q": "apple"}).json()
    assert [r["symbol"] for r in found] == ["AAPL"]

    assert client.get("/api/instruments", params={"sort": "nope"}).status_code == 400


def test_lookups(client):
    assert client.get("/api/instruments/stock-0").json()["symbol"] == "AAPL"
    assert client.get("/api/instruments/symbol/msft").json()["id"] == "stock-1"
    assert client.get("/api/instruments/stock-999").status_code == 404
    assert client.get("/api/instruments/symbol/NOPE").status_code == 404
    assert "Technology" in client.get("/api/sectors").json()


def test_manual_tick_and_movers(client):
    state = client.post("/api/simulation/tick").json()
    assert state["tick"] == 1
    assert state["running"] is False
    movers = client.get("/api/instruments/movers", params={"limit": 3}).json()
    changes = [r["changePercent"] for r in client.get("/api/instruments").json()]
    assert movers["marketTrend"] == pytest.approx(sum(changes) / len(changes))
    assert len(movers["gainers"]) <= 3
    assert all(r["changePercent"] > 0 for r in movers["gainers"])
    assert all(r["changePercent"] < 0 for r in movers["losers"])


def test_start_stop(client):
    assert client.post("/api/simulation/start").json()["running"] is True
    assert client.post("/api/simulation/start").json()["running"] is True
    assert client.post("/api/simulation/stop").json()["running"] is False


def test_parameters(client):
    params = client.get("/api/simulation").json()["parameters"]
    assert params == {"volatilityFactor": 0.015, "tickIntervalMs": 5000,
                      "marketTrendBias": 0.001, "sectorCorrelation": 0.6}
    r = client.patch("/api/simulation/parameters", json={"volatilityFactor": 0.05})
    assert r.status_code == 200
    assert r.json()["volatilityFactor"] == 0.05
    assert client.patch("/api/simulation/parameters", json={"tickIntervalMs": 0}).status_code == 422
    assert client.patch("/api/simulation/parameters", json={"bogus": 1}).status_code == 422
    assert client.get("/api/simulation").json()["parameters"]["tickIntervalMs"] == 5000


def test_trading_flow(client):
    price = client.get("/api/instruments/stock-0").json()["price"]
    r = client.post("/api/trades", json={"instrumentId": "stock-0", "side": "buy", "shares": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["order"]["total"] == pytest.approx(price * 2)
    assert body["portfolio"]["cash"] == pytest.approx(100_000 - price * 2, abs=0.01)

    r = client.post("/api/trades", json={"instrumentId": "stock-0", "side": "sell", "shares": 5})
    assert r.status_code == 400
    assert r.json()["detail"] == "insufficient_shares"
    r = client.post("/api/trades", json={"instrumentId": "stock-x", "side": "buy", "shares": 1})
    assert r.status_code == 404
    assert len(client.get("/api/trades").json()) == 1

    client.post("/api/simulation/tick")
    holding = client.get("/api/portfolio").json()["holdings"][0]
    assert holding["currentPrice"] == client.get("/api/instruments/stock-0").json()["price"]

    reset = client.post("/api/portfolio/reset").json()
    assert reset["cash"] == 100_000
    assert reset["holdings"] == [] and reset["trades"] == []


def test_leaderboard_includes_local_player(client):
    board = client.get("/api/leaderboard").json()
    assert len(board["rows"]) == 17
    assert board["stats"]["totalTraders"] == 17
    assert "You" in [r["name"] for r in board["rows"]]
    values = [r["totalValue"] for r in board["rows"]]
    assert values == sorted(values, reverse=True)
    assert client.get("/api/leaderboard", params={"sort": "cash"}).status_code == 400


def test_settings_apply_and_persist(db_path):
    app = create_app(db_path=db_path, seed=7, autostart=False)
    with TestClient(app) as c:
        s = c.put("/api/settings", json={"updateInterval": 3, "volatility": 0.025,
                                         "playerName": "  Ada ", "theme": "dark"}).json()
        assert s["updateInterval"] == 3
        assert s["playerName"] == "Ada"
        assert c.get("/api/simulation").json()["parameters"]["tickIntervalMs"] == 3000
        assert c.put("/api/settings", json={"theme": "neon"}).status_code == 422
        assert c.put("/api/settings", json={"volatility": 7}).status_code == 422
        assert c.put("/api/settings", json={"playerName": "   "}).status_code == 422
        c.post("/api/trades", json={"instrumentId": "stock-3", "side": "buy", "shares": 1})

    app = create_app(db_path=db_path, seed=7, autostart=False)
    with TestClient(app) as c:
        s = c.get("/api/settings").json()
        assert (s["updateInterval"], s["volatility"], s["theme"]) == (3, 0.025, "dark")
        assert s["choices"]["updateInterval"] == [1, 3, 5, 10, 30]
        assert c.get("/api/simulation").json()["parameters"]["volatilityFactor"] == 0.025
        assert len(c.get("/api/trades").json()) == 1
        board = c.get("/api/leaderboard", params={"q": "ada"}).json()
        assert [r["name"] for r in board["rows"]] == ["Ada"]


@pytest.mark.parametrize("raw", ['{"updateInterval": 1e306}', '{"updateInterval": Infinity}',
                                 '{"updateInterval": NaN}'])
def test_settings_reject_unrepresentable_interval(client, raw):
    r = client.put("/api/settings", content=raw, headers={"content-type": "application/json"})
    assert r.status_code == 422
    assert client.get("/api/simulation").json()["parameters"]["tickIntervalMs"] == 5000
    assert client.get("/api/settings").json()["updateInterval"] == 5
