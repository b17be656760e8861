# domain/storage.py
"""
Durable key/value store for player-side state.

Mirrors browser local storage: a handful of fixed string keys, each holding
one JSON document. The market engine never reads or writes here.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, List, Optional, Union

from domain.models import Player, Portfolio, TradeOrder

logger = logging.getLogger(__name__)

PORTFOLIO_KEY = "portfolio"
TRADES_KEY = "trades"
PLAYER_NAME_KEY = "playerName"
THEME_KEY = "theme"
UPDATE_INTERVAL_KEY = "updateInterval"
VOLATILITY_KEY = "volatility"
AUTO_SAVE_KEY = "autoSave"

LOCAL_PLAYER_ID = "user"


def _json_dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, allow_nan=False)


class LocalStore:

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        if str(path) != ":memory:":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path), isolation_level=None, check_same_thread=False)
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
              key TEXT PRIMARY KEY,
              value_json TEXT NOT NULL
            );
            """
        )

    def close(self) -> None:
        self._conn.close()

    def get(self, key: str, default: Any = None) -> Any:
        row = self._conn.execute("SELECT value_json FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except ValueError:
            logger.warning("Discarding unreadable value for key %r", key)
            return default

    def set(self, key: str, value: Any) -> None:
        self._conn.execute(
            "INSERT INTO kv (key, value_json) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value_json = excluded.value_json",
            (key, _json_dumps(value)),
        )


def load_player(store: LocalStore, joined_at: int = 0) -> Player:
    name = store.get(PLAYER_NAME_KEY) or "You"
    raw_portfolio = store.get(PORTFOLIO_KEY)
    raw_trades = store.get(TRADES_KEY) or []
    portfolio: Optional[Portfolio] = None
    trades: List[TradeOrder] = []
    try:
        if raw_portfolio:
            portfolio = Portfolio.from_dict(raw_portfolio)
        trades = [TradeOrder.from_dict(t) for t in raw_trades]
    except (KeyError, TypeError, ValueError):
        logger.warning("Saved portfolio is malformed, starting fresh")
        portfolio, trades = None, []
    return Player(LOCAL_PLAYER_ID, name, portfolio=portfolio, trades=trades, joined_at=joined_at)


def save_player(store: LocalStore, player: Player) -> None:
    store.set(PORTFOLIO_KEY, player.portfolio.to_dict())
    store.set(TRADES_KEY, [t.to_dict() for t in player.trades])
