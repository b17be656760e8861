# domain/pricing.py
from __future__ import annotations

import random
from typing import Dict, Iterable, List, Tuple

from config import IDIOSYNCRATIC_WEIGHT, MARKET_WEIGHT, PRICE_FLOOR, SECTOR_WEIGHT
from domain.models import Instrument, InstrumentSnapshot, SimulationParameters


def floor_price(x: float, floor: float = PRICE_FLOOR) -> float:
  return max(floor, x)


def market_movement(rng: random.Random, params: SimulationParameters) -> float:
  return rng.uniform(-1, 1) + params.market_trend_bias


def sector_movements(rng: random.Random, sectors: Iterable[str], market: float,
                     params: SimulationParameters) -> Dict[str, float]:
  # one draw per sector, blended with the market factor
  corr = params.sector_correlation
  return {
      s: market * corr + rng.uniform(-1, 1) * (1 - corr)
      for s in sectors
  }


def price_delta(previous_price: float, idiosyncratic: float, sector: float,
                market: float, volatility: float) -> float:
  scale = volatility * previous_price
  return (idiosyncratic * scale * IDIOSYNCRATIC_WEIGHT +
          sector * scale * SECTOR_WEIGHT + market * scale * MARKET_WEIGHT)


def compute_prices(instruments: List[Instrument], params: SimulationParameters,
                   rng: random.Random) -> List[Tuple[Instrument, float]]:
  """
  Draw this tick's factors and return (instrument, new_price) pairs without
  touching any instrument.
  """
  market = market_movement(rng, params)
  sectors = dict.fromkeys(i.sector for i in instruments)
  by_sector = sector_movements(rng, sectors, market, params)
  updates = []
  for inst in instruments:
    idio = rng.uniform(-1, 1)
    delta = price_delta(inst.price, idio, by_sector[inst.sector], market,
                        params.volatility_factor)
    updates.append((inst, floor_price(inst.price + delta)))
  return updates


def step_prices(instruments: Iterable[Instrument], params: SimulationParameters,
                rng: random.Random, timestamp: int):
  updates = compute_prices(list(instruments), params, rng)
  for inst, new_price in updates:
    inst.apply_price(new_price, timestamp)


def market_trend(snapshot: Iterable[InstrumentSnapshot]) -> float:
  """Mean change percent across the market, 0 for an empty snapshot."""
  changes = [s.change_percent for s in snapshot]
  return sum(changes) / (len(changes) or 1)
