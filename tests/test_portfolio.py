import random

import pytest

from domain.models import Player, Portfolio, PortfolioHolding, TradeOrder
from domain.portfolio import (RIVAL_NAMES, generate_rivals, leaderboard, new_portfolio,
                              record_trade, revalue, snapshot_portfolio)


def holding(instrument_id, shares, avg, price):
    return PortfolioHolding(instrument_id=instrument_id, symbol=instrument_id.upper(),
                            name=instrument_id, shares=shares, average_buy_price=avg,
                            current_price=price)


def test_revalue_marks_to_market():
    p = Portfolio(cash=90_000.0, holdings=[holding("a", 10, 100.0, 100.0),
                                           holding("b", 5, 200.0, 200.0)])
    revalue(p, {"a": 120.0, "zzz": 1.0})
    a, b = p.holdings
    assert a.current_price == 120.0
    assert a.total_gain == pytest.approx(200.0)
    assert a.total_gain_percent == pytest.approx(20.0)
    assert b.current_price == 200.0
    assert p.total_value == pytest.approx(90_000 + 1200 + 1000)
    assert p.total_gain == pytest.approx(2200.0)
    assert p.total_gain_percent == pytest.approx(2.2)


def test_trade_log_is_capped():
    pl = Player("user", "You")
    for i in range(205):
        record_trade(pl, TradeOrder("buy", "a", 1, 1.0, 1.0, i))
    assert len(pl.trades) == 200
    assert pl.trades[0].timestamp == 5


def test_snapshot_orders_holdings_by_value():
    pl = Player("user", "You", portfolio=Portfolio(
        cash=0.0, holdings=[holding("a", 1, 10.0, 10.0), holding("b", 1, 50.0, 50.0)]))
    revalue(pl.portfolio, {})
    payload = snapshot_portfolio(pl)
    assert payload["type"] == "PORTFOLIO"
    assert [h["instrumentId"] for h in payload["holdings"]] == ["b", "a"]


def test_rivals():
    rivals = generate_rivals(random.Random(1), now_ms=10**12)
    assert [r.name for r in rivals] == RIVAL_NAMES
    for r in rivals:
        assert 80_000 <= r.portfolio.total_value < 150_000
        assert r.portfolio.total_gain == pytest.approx(r.portfolio.total_value - 100_000)


def _player(pid, name, value, gain_pct):
    p = new_portfolio()
    p.total_value = value
    p.total_gain_percent = gain_pct
    return Player(pid, name, portfolio=p)


def test_leaderboard_sorting_and_search():
    players = [_player("1", "BullBaron", 120_000, 5.0),
               _player("2", "StockSage", 110_000, 30.0),
               _player("user", "You", 130_000, 1.0)]
    by_value = leaderboard(players)
    assert [r["playerId"] for r in by_value["rows"]] == ["user", "1", "2"]
    assert [r["rank"] for r in by_value["rows"]] == [1, 2, 3]
    by_pct = leaderboard(players, sort_field="totalGainPercent")
    assert by_pct["rows"][0]["name"] == "StockSage"
    found = leaderboard(players, query="  stock ")
    assert [r["name"] for r in found["rows"]] == ["StockSage"]


def test_leaderboard_rejects_unknown_sort():
    with pytest.raises(ValueError):
        leaderboard([], sort_field="cash")


def test_leaderboard_stats_cover_all_players():
    players = [_player("1", "BullBaron", 120_000, 20.0),
               _player("2", "StockSage", 90_000, -10.0),
               _player("user", "You", 150_000, 50.0)]
    for pl in players:
        pl.portfolio.total_gain = pl.portfolio.total_value - 100_000
    stats = leaderboard(players, query="sage")["stats"]
    assert stats == {"totalTraders": 3, "averageValue": 120_000.0,
                     "profitableTraders": 2, "profitablePercent": 67}
    assert leaderboard([])["stats"]["totalTraders"] == 0
