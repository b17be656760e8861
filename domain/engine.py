# domain/engine.py
from __future__ import annotations

import asyncio
import logging
import random
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from domain.models import Instrument, InstrumentSnapshot, SimulationParameters
from domain.pricing import step_prices

logger = logging.getLogger(__name__)

Snapshot = List[InstrumentSnapshot]
Observer = Callable[[Snapshot], None]


class MarketEngine:
    """
    Sole owner of instrument price state.

    A single asyncio task calls `tick()` every `tick_interval_ms`. Readers
    only ever get `InstrumentSnapshot` copies; observers registered with
    `subscribe()` receive one full snapshot per tick.
    """

    def __init__(self, instruments: Iterable[Instrument],
                 params: Optional[SimulationParameters] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.time):
        self._instruments: Dict[str, Instrument] = {i.id: i for i in instruments}
        self.params = params or SimulationParameters()
        self.rng = rng or random.Random()
        self._clock = clock
        self._observers: Dict[Observer, None] = {}  # insertion-ordered set
        self._task: Optional[asyncio.Task] = None
        self.tick_count = 0

    # ---------- lifecycle ----------
    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self) -> None:
        """Begin ticking. No-op if already running. Needs a running event loop."""
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        logger.info("Simulation started (interval=%sms)", self.params.tick_interval_ms)

    def stop(self) -> None:
        """Cancel the ticker. No-op if not running."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        logger.info("Simulation stopped")

    def shutdown(self) -> None:
        self.stop()
        self._observers.clear()

    async def _run(self):
        try:
            while True:
                await asyncio.sleep(self.params.tick_interval_ms / 1000)
                try:
                    self.tick()
                except Exception:
                    logger.exception("Tick %s failed", self.tick_count + 1)
        finally:
            # a restart may already have installed a new task
            if self._task is asyncio.current_task():
                self._task = None

    # ---------- reads ----------
    def get_snapshot(self) -> Snapshot:
        return [inst.snapshot() for inst in self._instruments.values()]

    def get_by_id(self, instrument_id: str) -> Optional[InstrumentSnapshot]:
        inst = self._instruments.get(instrument_id)
        return inst.snapshot() if inst else None

    def get_by_symbol(self, symbol: str) -> Optional[InstrumentSnapshot]:
        for inst in self._instruments.values():
            if inst.symbol == symbol:
                return inst.snapshot()
        return None

    def sectors(self) -> List[str]:
        return list(dict.fromkeys(i.sector for i in self._instruments.values()))

    # ---------- observers ----------
    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register `observer` and hand it the current snapshot right away.
        Returns an unsubscribe function; calling it again does nothing.
        """
        self._observers[observer] = None
        self._deliver(observer, self.get_snapshot())

        def unsubscribe() -> None:
            self._observers.pop(observer, None)

        return unsubscribe

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def _deliver(self, observer: Observer, snapshot: Snapshot) -> None:
        try:
            observer(list(snapshot))
        except Exception:
            logger.exception("Observer %r failed", observer)

    def _notify(self, snapshot: Snapshot) -> None:
        for observer in list(self._observers):
            self._deliver(observer, snapshot)

    # ---------- parameters ----------
    def update_parameters(self, partial: Optional[Mapping[str, Any]] = None,
                          **changes: Any) -> SimulationParameters:
        """
        Merge `partial` into the live parameters. Raises ValueError on an
        invalid value and leaves the current parameters untouched.
        A changed interval restarts a running ticker.
        """
        merged = dict(partial or {})
        merged.update(changes)
        old_interval = self.params.tick_interval_ms
        self.params = self.params.merged(merged)
        logger.info("Simulation parameters updated: %s", self.params.to_dict())
        if self.running and self.params.tick_interval_ms != old_interval:
            self.stop()
            self.start()
        return self.params

    # ---------- tick ----------
    def tick(self) -> Snapshot:
        """Advance every instrument one step, then notify observers once."""
        now_ms = int(self._clock() * 1000)
        step_prices(self._instruments.values(), self.params, self.rng, now_ms)
        self.tick_count += 1
        snapshot = self.get_snapshot()
        self._notify(snapshot)
        return snapshot
