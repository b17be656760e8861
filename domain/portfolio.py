# domain/portfolio.py
from __future__ import annotations

import random
import time
from typing import Iterable, List, Mapping, Optional

from config import MAX_TRADE_HISTORY, STARTING_CASH
from domain.models import InstrumentSnapshot, Player, Portfolio, TradeOrder

RIVAL_NAMES = [
    "WallStreetWiz", "StockSurfer", "BullBaron", "TradeTitan", "MarketMaster",
    "WealthWhiz", "StockSage", "PortfolioPro", "InvestorIQ", "AssetAce",
    "GainsGuru", "TradingTycoon", "CashCaptain", "MoneyMogul", "DividendDiva",
    "ProfitPundit"
]
SORT_FIELDS = ("totalValue", "totalGainPercent")
WEEK_MS = 7 * 24 * 60 * 60 * 1000


def prices_from(snapshot: Iterable[InstrumentSnapshot]) -> dict:
  return {s.id: s.price for s in snapshot}


def revalue(portfolio: Portfolio, prices: Mapping[str, float]) -> Portfolio:
  """Mark holdings to `prices` (missing ids keep their last price)."""
  stock_value = 0.0
  for h in portfolio.holdings:
    if h.instrument_id in prices:
      h.current_price = prices[h.instrument_id]
    cost = h.average_buy_price * h.shares
    h.total_value = h.shares * h.current_price
    h.total_gain = h.total_value - cost
    h.total_gain_percent = h.total_gain / cost * 100 if cost else 0.0
    stock_value += h.total_value
  portfolio.total_value = portfolio.cash + stock_value
  portfolio.total_gain = portfolio.total_value - STARTING_CASH
  portfolio.total_gain_percent = portfolio.total_gain / STARTING_CASH * 100
  return portfolio


def record_trade(pl: Player, order: TradeOrder):
  pl.trades.append(order)
  if len(pl.trades) > MAX_TRADE_HISTORY:
    pl.trades = pl.trades[-MAX_TRADE_HISTORY:]


def new_portfolio() -> Portfolio:
  return Portfolio(cash=STARTING_CASH,
                   holdings=[],
                   total_value=STARTING_CASH,
                   total_gain=0.0,
                   total_gain_percent=0.0)


def snapshot_portfolio(pl: Player) -> dict:
  p = pl.portfolio
  rows = sorted(p.holdings, key=lambda h: h.total_value, reverse=True)
  return {
      "type": "PORTFOLIO",
      "cash": round(p.cash, 2),
      "totalValue": round(p.total_value, 2),
      "totalGain": round(p.total_gain, 2),
      "totalGainPercent": round(p.total_gain_percent, 2),
      "holdings": [h.to_dict() for h in rows],
      "trades": [t.to_dict() for t in pl.trades[-50:]]
  }


def generate_rivals(rng: Optional[random.Random] = None,
                    now_ms: Optional[int] = None) -> List[Player]:
  rng = rng or random.Random()
  now_ms = int(time.time() * 1000) if now_ms is None else now_ms
  players = []
  for i, name in enumerate(RIVAL_NAMES):
    value = 80_000 + rng.random() * 70_000
    cash = 10_000 + rng.random() * 50_000
    gain = value - STARTING_CASH
    portfolio = Portfolio(cash=cash,
                          holdings=[],
                          total_value=value,
                          total_gain=gain,
                          total_gain_percent=gain / STARTING_CASH * 100)
    players.append(
        Player(f"player-{i}",
               name,
               portfolio=portfolio,
               joined_at=now_ms - rng.randrange(WEEK_MS)))
  return players


def leaderboard_stats(players: List[Player]) -> dict:
  count = len(players)
  profitable = sum(1 for pl in players if pl.portfolio.total_gain > 0)
  total = sum(pl.portfolio.total_value for pl in players)
  return {
      "totalTraders": count,
      "averageValue": round(total / count, 2) if count else 0.0,
      "profitableTraders": profitable,
      "profitablePercent": round(profitable / count * 100) if count else 0,
  }


def leaderboard(players: Iterable[Player], sort_field: str = "totalValue",
                query: str = "") -> dict:
  if sort_field not in SORT_FIELDS:
    raise ValueError(f"unknown sort field {sort_field!r}")
  players = list(players)
  q = query.strip().lower()
  rows = []
  for pl in players:
    if q and q not in pl.name.lower():
      continue
    p = pl.portfolio
    rows.append({
        "playerId": pl.id,
        "name": pl.name,
        "totalValue": round(p.total_value, 2),
        "totalGain": round(p.total_gain, 2),
        "totalGainPercent": round(p.total_gain_percent, 2),
    })
  rows.sort(key=lambda r: r[sort_field], reverse=True)
  for rank, r in enumerate(rows, start=1):
    r["rank"] = rank
  return {"type": "LEADERBOARD", "sort": sort_field, "rows": rows,
          "stats": leaderboard_stats(players)}
