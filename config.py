# config.py
import os

from dotenv import load_dotenv

load_dotenv()

# ---------- Market ----------
HISTORY_CAPACITY = 25
HISTORY_BACKFILL_HOURS = 24
HISTORY_BACKFILL_VARIATION = 0.05
PRICE_FLOOR = 1.0

# tick blend weights: idiosyncratic / sector / market
IDIOSYNCRATIC_WEIGHT = 0.4
SECTOR_WEIGHT = 0.4
MARKET_WEIGHT = 0.2

DEFAULT_VOLATILITY = 0.015
DEFAULT_TICK_INTERVAL_MS = 5000
DEFAULT_MARKET_TREND = 0.001
DEFAULT_SECTOR_CORRELATION = 0.6

# ---------- Game ----------
STARTING_CASH = 100_000.0
MAX_TRADE_HISTORY = 200

# Settings page choices
TICK_INTERVAL_CHOICES_SEC = [1, 3, 5, 10, 30]
VOLATILITY_CHOICES = [0.005, 0.01, 0.015, 0.025, 0.05]
THEMES = ["light", "dark", "system"]

# ---------- Environment ----------
DB_PATH = os.getenv("SIM_DB_PATH", "data/local_store.sqlite3")
SEED = os.getenv("SIM_SEED")
TICK_INTERVAL_MS = int(os.getenv("SIM_TICK_INTERVAL_MS", DEFAULT_TICK_INTERVAL_MS))
VOLATILITY = float(os.getenv("SIM_VOLATILITY", DEFAULT_VOLATILITY))
AUTOSTART = os.getenv("SIM_AUTOSTART", "1").lower() not in ("0", "false", "no")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
