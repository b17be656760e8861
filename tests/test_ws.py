import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture
def client(tmp_path):
    app = create_app(db_path=str(tmp_path / "store.db"), seed=3, autostart=False)
    with TestClient(app) as c:
        yield c


def receive_types(ws, n):
    msgs = [ws.receive_json() for _ in range(n)]
    return {m["type"]: m for m in msgs}, msgs


def test_connect_gets_hello_snapshot_and_portfolio(client):
    with client.websocket_connect("/ws") as ws:
        by_type, msgs = receive_types(ws, 3)
        assert msgs[0]["type"] == "HELLO"
        assert set(by_type) == {"HELLO", "TICK", "PORTFOLIO"}
        assert len(by_type["TICK"]["instruments"]) == 130
        assert by_type["TICK"]["tick"] == 0


def test_tick_is_streamed(client):
    with client.websocket_connect("/ws") as ws:
        receive_types(ws, 3)
        client.post("/api/simulation/tick")
        msg = ws.receive_json()
        assert msg["type"] == "TICK"
        assert msg["tick"] == 1


def test_order_round_trip(client):
    with client.websocket_connect("/ws") as ws:
        receive_types(ws, 3)
        ws.send_json({"type": "ORDER", "instrumentId": "stock-2", "side": "buy", "shares": 1})
        by_type, _ = receive_types(ws, 3)
        assert set(by_type) == {"ORDER_ACCEPTED", "PORTFOLIO", "LEADERBOARD"}
        assert by_type["PORTFOLIO"]["holdings"][0]["instrumentId"] == "stock-2"

        ws.send_json({"type": "ORDER", "instrumentId": "stock-2", "side": "sell", "shares": 9})
        assert ws.receive_json() == {"type": "ORDER_REJECT", "reason": "insufficient_shares"}

        ws.send_json({"type": "ORDER", "instrumentId": ["stock-2"], "side": "buy", "shares": 1})
        assert ws.receive_json() == {"type": "ORDER_REJECT", "reason": "invalid"}

        ws.send_json({"type": "PING"})
        assert ws.receive_json()["type"] == "PONG"

        ws.send_json({"type": "DANCE"})
        assert ws.receive_json() == {"type": "ERROR", "code": "unknown_message"}


def test_disconnect_unsubscribes(client):
    game = client.app.state.game
    before = game.engine.observer_count
    with client.websocket_connect("/ws") as ws:
        receive_types(ws, 3)
        assert game.engine.observer_count == before + 1
    client.get("/health")
    assert game.engine.observer_count == before
    assert game.clients == {}
