import random
import sys
from pathlib import Path

import pytest

# project root on sys.path so tests import the top-level packages directly
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from domain.catalog import make_instrument  # noqa: E402
from domain.engine import MarketEngine  # noqa: E402
from domain.models import SimulationParameters  # noqa: E402

NOW_MS = 1_700_000_000_000


class StepClock:
    """Clock returning a strictly increasing time, one second per call."""

    def __init__(self, start: float = NOW_MS / 1000):
        self.t = start

    def __call__(self) -> float:
        self.t += 1.0
        return self.t


@pytest.fixture
def make_engine():
    def _make(roster=(("AAA", "Alpha Corp", "Technology", 100),), seed=1, **params):
        rng = random.Random(seed)
        instruments = [
            make_instrument(i, symbol, name, sector, price, 1_000_000, NOW_MS, rng)
            for i, (symbol, name, sector, price) in enumerate(roster)
        ]
        return MarketEngine(instruments, params=SimulationParameters(**params),
                            rng=rng, clock=StepClock())

    return _make


@pytest.fixture
def quote():
    """Factory for a single-instrument snapshot at a given price."""
    from domain.models import InstrumentSnapshot, PricePoint

    def _quote(price, instrument_id="stock-0", symbol="AAA"):
        return InstrumentSnapshot(
            id=instrument_id, symbol=symbol, name="Alpha Corp", sector="Technology",
            price=price, previous_price=price, change=0.0, change_percent=0.0,
            volume=1000, market_cap=price * 1000 * 10,
            price_history=(PricePoint(0, price),),
        )

    return _quote
