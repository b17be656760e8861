from __future__ import annotations

import logging
import random
import string
import time
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import WebSocket

from config import THEMES, TICK_INTERVAL_CHOICES_SEC, VOLATILITY_CHOICES
from domain.catalog import generate_instruments
from domain.engine import MarketEngine, Snapshot
from domain.execution import execute_order
from domain.models import InstrumentSnapshot, Player, SimulationParameters
from domain.portfolio import generate_rivals, new_portfolio, prices_from, revalue
from domain.storage import (AUTO_SAVE_KEY, PLAYER_NAME_KEY, THEME_KEY,
                            UPDATE_INTERVAL_KEY, VOLATILITY_KEY, LocalStore,
                            load_player, save_player)

logger = logging.getLogger(__name__)


# ---- ID generators ----
def gen_client_id() -> str:
    """Generate a short opaque connection id, e.g. 'k8z2q1m9d0'."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=10))


def _now_ms() -> int:
    return int(time.time() * 1000)


class GameContext:
    """
    Everything one running game needs, built once at startup and handed to
    routes and sockets through `app.state.game`.
    """

    def __init__(self, engine: MarketEngine, store: LocalStore,
                 rivals: Optional[List[Player]] = None):
        self.engine = engine
        self.store = store
        self.player = load_player(store, joined_at=_now_ms())
        self.rivals = rivals if rivals is not None else []
        self.auto_save = bool(store.get(AUTO_SAVE_KEY, True))
        # ---- Connections ----
        self.clients: Dict[str, WebSocket] = {}  # clientId -> ws
        self._unsubscribe: Optional[Callable[[], None]] = None

    @classmethod
    def init(cls, db_path: str, seed: Optional[int] = None,
             params: Optional[SimulationParameters] = None) -> "GameContext":
        rng = random.Random(seed)
        engine = MarketEngine(generate_instruments(rng), params=params, rng=rng)
        ctx = cls(engine, LocalStore(db_path), rivals=generate_rivals(rng))
        ctx.apply_saved_settings()
        ctx._unsubscribe = engine.subscribe(ctx.on_tick)
        logger.info("Game initialised with %d instruments", len(engine.get_snapshot()))
        return ctx

    def shutdown(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self.engine.shutdown()
        save_player(self.store, self.player)
        self.store.close()
        logger.info("Game shut down")

    # ---- Market feed ----
    def on_tick(self, snapshot: Snapshot) -> None:
        revalue(self.player.portfolio, prices_from(snapshot))

    def players(self) -> List[Player]:
        return [*self.rivals, self.player]

    # ---- Trading ----
    def place_order(self, instrument_id: str, side: str,
                    shares: float) -> Tuple[bool, Optional[str], Optional[InstrumentSnapshot]]:
        instrument = self.engine.get_by_id(instrument_id)
        if instrument is None:
            return False, "unknown_instrument", None
        ok, reason = execute_order(self.player, instrument, side, shares)
        if ok:
            logger.info("%s %s x%s @ %.2f", side.upper(), instrument.symbol, shares, instrument.price)
            if self.auto_save:
                save_player(self.store, self.player)
        return ok, reason, instrument

    def save(self) -> None:
        save_player(self.store, self.player)

    def reset(self) -> None:
        """Back to starting cash with an empty trade log, and restart the ticker."""
        self.player.portfolio = new_portfolio()
        self.player.trades = []
        save_player(self.store, self.player)
        if self.engine.running:
            self.engine.stop()
            self.engine.start()
        logger.info("Simulation reset")

    # ---- Settings ----
    def settings(self) -> dict:
        interval_s = self.engine.params.tick_interval_ms / 1000
        return {
            "updateInterval": int(interval_s) if interval_s.is_integer() else interval_s,
            "volatility": self.engine.params.volatility_factor,
            "playerName": self.player.name,
            "theme": self.store.get(THEME_KEY, "system"),
            "autoSave": self.auto_save,
            "choices": {
                "updateInterval": TICK_INTERVAL_CHOICES_SEC,
                "volatility": VOLATILITY_CHOICES,
                "theme": THEMES,
            },
        }

    def update_settings(self, update_interval: Optional[float] = None,
                        volatility: Optional[float] = None,
                        player_name: Optional[str] = None,
                        theme: Optional[str] = None,
                        auto_save: Optional[bool] = None) -> dict:
        """Raises ValueError before anything is changed if a value is invalid."""
        changes = {}
        if update_interval is not None:
            try:
                changes["tick_interval_ms"] = int(round(update_interval * 1000))
            except (TypeError, ValueError, OverflowError) as e:
                raise ValueError(f"invalid update interval {update_interval!r}") from e
        if volatility is not None:
            changes["volatility_factor"] = volatility
        if player_name is not None and not player_name.strip():
            raise ValueError("player name must not be empty")
        if theme is not None and theme not in THEMES:
            raise ValueError(f"unknown theme {theme!r}")

        if changes:
            self.engine.update_parameters(changes)
            if update_interval is not None:
                self.store.set(UPDATE_INTERVAL_KEY, update_interval)
            if volatility is not None:
                self.store.set(VOLATILITY_KEY, volatility)
        if player_name is not None:
            self.player.name = player_name.strip()
            self.store.set(PLAYER_NAME_KEY, self.player.name)
        if theme is not None:
            self.store.set(THEME_KEY, theme)
        if auto_save is not None:
            self.auto_save = auto_save
            self.store.set(AUTO_SAVE_KEY, auto_save)
        return self.settings()

    def apply_saved_settings(self) -> None:
        interval = self.store.get(UPDATE_INTERVAL_KEY)
        volatility = self.store.get(VOLATILITY_KEY)
        try:
            changes = {}
            if interval is not None:
                changes["tick_interval_ms"] = int(round(float(interval) * 1000))
            if volatility is not None:
                changes["volatility_factor"] = float(volatility)
            if changes:
                self.engine.update_parameters(changes)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring invalid saved simulation settings (interval=%r, volatility=%r)",
                           interval, volatility)
