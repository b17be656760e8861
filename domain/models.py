# domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import (DEFAULT_MARKET_TREND, DEFAULT_SECTOR_CORRELATION,
                    DEFAULT_TICK_INTERVAL_MS, DEFAULT_VOLATILITY, STARTING_CASH)

# Only for type hints to avoid circular imports at runtime
if TYPE_CHECKING:
  from domain.history import PriceHistory


@dataclass(frozen=True)
class PricePoint:
  timestamp: int  # epoch ms
  price: float

  def to_dict(self) -> dict:
    return {"timestamp": self.timestamp, "price": self.price}


@dataclass(frozen=True)
class InstrumentSnapshot:
  """Read-only copy of an instrument handed out by the engine."""
  id: str
  symbol: str
  name: str
  sector: str
  price: float
  previous_price: float
  change: float
  change_percent: float
  volume: int
  market_cap: float
  price_history: Tuple[PricePoint, ...]

  def to_dict(self) -> dict:
    return {
        "id": self.id,
        "symbol": self.symbol,
        "name": self.name,
        "sector": self.sector,
        "price": self.price,
        "previousPrice": self.previous_price,
        "change": self.change,
        "changePercent": self.change_percent,
        "volume": self.volume,
        "marketCap": self.market_cap,
        "priceHistory": [p.to_dict() for p in self.price_history],
    }


class Instrument:
  """Engine-owned mutable price state for one instrument."""

  def __init__(self, instrument_id: str, symbol: str, name: str, sector: str,
               price: float, volume: int, history: "PriceHistory"):
    self.id = instrument_id
    self.symbol = symbol
    self.name = name
    self.sector = sector
    self.price = float(price)
    self.previous_price = float(price)
    self.change = 0.0
    self.change_percent = 0.0
    self.volume = volume
    # simplified on purpose: price * volume * 10
    self.market_cap = price * volume * 10
    self.history = history

  def apply_price(self, new_price: float, timestamp: int):
    old_price = self.price
    self.previous_price = old_price
    self.price = new_price
    self.change = new_price - old_price
    self.change_percent = self.change / old_price * 100
    self.history.append(timestamp, new_price)

  def snapshot(self) -> InstrumentSnapshot:
    return InstrumentSnapshot(
        id=self.id,
        symbol=self.symbol,
        name=self.name,
        sector=self.sector,
        price=self.price,
        previous_price=self.previous_price,
        change=self.change,
        change_percent=self.change_percent,
        volume=self.volume,
        market_cap=self.market_cap,
        price_history=self.history.points(),
    )


class SimulationParameters(BaseModel):
  """Live tunables of the engine. Changes only affect future ticks."""
  model_config = ConfigDict(alias_generator=to_camel,
                            populate_by_name=True,
                            extra="forbid",
                            allow_inf_nan=False)

  volatility_factor: float = Field(DEFAULT_VOLATILITY, ge=0, le=1)
  tick_interval_ms: int = Field(DEFAULT_TICK_INTERVAL_MS, gt=0)
  market_trend_bias: float = Field(DEFAULT_MARKET_TREND, ge=-1, le=1)
  sector_correlation: float = Field(DEFAULT_SECTOR_CORRELATION, ge=0, le=1)

  def merged(self, partial: Mapping[str, Any]) -> "SimulationParameters":
    """Return a validated copy with `partial` applied (snake or camel keys)."""
    names = {f.alias or n: n for n, f in type(self).model_fields.items()}
    data = self.model_dump()
    for key, value in partial.items():
      data[names.get(key, key)] = value
    return type(self).model_validate(data)

  def to_dict(self) -> dict:
    return self.model_dump(by_alias=True)


# ---------- Ledger ----------
@dataclass
class PortfolioHolding:
  instrument_id: str
  symbol: str
  name: str
  shares: float
  average_buy_price: float
  current_price: float
  total_value: float = 0.0
  total_gain: float = 0.0
  total_gain_percent: float = 0.0

  def to_dict(self) -> dict:
    return {
        "instrumentId": self.instrument_id,
        "symbol": self.symbol,
        "name": self.name,
        "shares": self.shares,
        "averageBuyPrice": self.average_buy_price,
        "currentPrice": self.current_price,
        "totalValue": self.total_value,
        "totalGain": self.total_gain,
        "totalGainPercent": self.total_gain_percent,
    }

  @classmethod
  def from_dict(cls, d: Mapping[str, Any]) -> "PortfolioHolding":
    return cls(
        instrument_id=d["instrumentId"],
        symbol=d["symbol"],
        name=d["name"],
        shares=float(d["shares"]),
        average_buy_price=float(d["averageBuyPrice"]),
        current_price=float(d["currentPrice"]),
        total_value=float(d.get("totalValue", 0.0)),
        total_gain=float(d.get("totalGain", 0.0)),
        total_gain_percent=float(d.get("totalGainPercent", 0.0)),
    )


@dataclass
class Portfolio:
  cash: float = STARTING_CASH
  holdings: List[PortfolioHolding] = field(default_factory=list)
  total_value: float = STARTING_CASH
  total_gain: float = 0.0
  total_gain_percent: float = 0.0

  def holding(self, instrument_id: str) -> Optional[PortfolioHolding]:
    for h in self.holdings:
      if h.instrument_id == instrument_id:
        return h
    return None

  def to_dict(self) -> dict:
    return {
        "cash": self.cash,
        "holdings": [h.to_dict() for h in self.holdings],
        "totalValue": self.total_value,
        "totalGain": self.total_gain,
        "totalGainPercent": self.total_gain_percent,
    }

  @classmethod
  def from_dict(cls, d: Mapping[str, Any]) -> "Portfolio":
    return cls(
        cash=float(d["cash"]),
        holdings=[PortfolioHolding.from_dict(h) for h in d.get("holdings", [])],
        total_value=float(d.get("totalValue", d["cash"])),
        total_gain=float(d.get("totalGain", 0.0)),
        total_gain_percent=float(d.get("totalGainPercent", 0.0)),
    )


@dataclass(frozen=True)
class TradeOrder:
  type: str  # buy | sell
  instrument_id: str
  shares: float
  price: float
  total: float
  timestamp: int

  def to_dict(self) -> dict:
    return {
        "type": self.type,
        "instrumentId": self.instrument_id,
        "shares": self.shares,
        "price": self.price,
        "total": self.total,
        "timestamp": self.timestamp,
    }

  @classmethod
  def from_dict(cls, d: Mapping[str, Any]) -> "TradeOrder":
    return cls(type=d["type"],
               instrument_id=d["instrumentId"],
               shares=float(d["shares"]),
               price=float(d["price"]),
               total=float(d["total"]),
               timestamp=int(d["timestamp"]))


class Player:

  def __init__(self, player_id: str, name: str,
               portfolio: Optional[Portfolio] = None,
               trades: Optional[List[TradeOrder]] = None,
               joined_at: int = 0):
    self.id = player_id
    self.name = name
    self.portfolio = portfolio if portfolio is not None else Portfolio()
    self.trades: List[TradeOrder] = trades if trades is not None else []
    self.joined_at = joined_at

  def to_dict(self) -> Dict[str, Any]:
    return {
        "id": self.id,
        "name": self.name,
        "portfolio": self.portfolio.to_dict(),
        "trades": [t.to_dict() for t in self.trades],
        "joinedAt": self.joined_at,
    }
