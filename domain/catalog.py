# domain/catalog.py
"""
Instrument universe and its seeding.

Prices and volumes are random per run; the roster itself is fixed. Every
instrument starts with a synthetic 24h backfill so charts have something to
draw before the first tick.
"""
from __future__ import annotations

import random
import time
from typing import List, Optional, Sequence, Tuple

from config import (HISTORY_BACKFILL_HOURS, HISTORY_BACKFILL_VARIATION,
                    HISTORY_CAPACITY)
from domain.history import PriceHistory
from domain.models import Instrument, PricePoint

HOUR_MS = 3_600_000

# (symbol, name, sector)
ROSTER: List[Tuple[str, str, str]] = [
    ("AAPL", "Apple Inc.", "Technology"),
    ("MSFT", "Microsoft Corporation", "Technology"),
    ("GOOGL", "Alphabet Inc.", "Technology"),
    ("AMZN", "Amazon.com Inc.", "Consumer Goods"),
    ("META", "Meta Platforms Inc.", "Technology"),
    ("TSLA", "Tesla Inc.", "Consumer Goods"),
    ("NVDA", "NVIDIA Corporation", "Technology"),
    ("JPM", "JPMorgan Chase & Co.", "Finance"),
    ("JNJ", "Johnson & Johnson", "Healthcare"),
    ("V", "Visa Inc.", "Finance"),
    ("PG", "Procter & Gamble Co.", "Consumer Goods"),
    ("UNH", "UnitedHealth Group Inc.", "Healthcare"),
    ("HD", "Home Depot Inc.", "Consumer Goods"),
    ("MA", "Mastercard Inc.", "Finance"),
    ("BAC", "Bank of America Corp.", "Finance"),
    ("DIS", "Walt Disney Co.", "Communication"),
    ("ADBE", "Adobe Inc.", "Technology"),
    ("PFE", "Pfizer Inc.", "Healthcare"),
    ("NFLX", "Netflix Inc.", "Communication"),
    ("XOM", "Exxon Mobil Corp.", "Energy"),
    ("CSCO", "Cisco Systems Inc.", "Technology"),
    ("CMCSA", "Comcast Corp.", "Communication"),
    ("PEP", "PepsiCo Inc.", "Consumer Goods"),
    ("COST", "Costco Wholesale Corp.", "Consumer Goods"),
    ("ABT", "Abbott Laboratories", "Healthcare"),
    ("TMO", "Thermo Fisher Scientific Inc.", "Healthcare"),
    ("VZ", "Verizon Communications Inc.", "Communication"),
    ("AVGO", "Broadcom Inc.", "Technology"),
    ("ACN", "Accenture plc", "Technology"),
    ("MRK", "Merck & Co. Inc.", "Healthcare"),
    ("INTC", "Intel Corporation", "Technology"),
    ("CRM", "Salesforce.com Inc.", "Technology"),
    ("WMT", "Walmart Inc.", "Consumer Goods"),
    ("KO", "Coca-Cola Co.", "Consumer Goods"),
    ("ABBV", "AbbVie Inc.", "Healthcare"),
    ("NKE", "Nike Inc.", "Consumer Goods"),
    ("PYPL", "PayPal Holdings Inc.", "Finance"),
    ("WFC", "Wells Fargo & Co.", "Finance"),
    ("MCD", "McDonald's Corp.", "Consumer Goods"),
    ("QCOM", "Qualcomm Inc.", "Technology"),
    ("DHR", "Danaher Corp.", "Healthcare"),
    ("PM", "Philip Morris International", "Consumer Goods"),
    ("T", "AT&T Inc.", "Communication"),
    ("TXN", "Texas Instruments Inc.", "Technology"),
    ("UPS", "United Parcel Service", "Industrial"),
    ("NEE", "NextEra Energy Inc.", "Utilities"),
    ("RTX", "Raytheon Technologies", "Industrial"),
    ("ORCL", "Oracle Corp.", "Technology"),
    ("LLY", "Eli Lilly and Co.", "Healthcare"),
    ("AMD", "Advanced Micro Devices", "Technology"),
    ("IBM", "International Business Machines", "Technology"),
    ("AMT", "American Tower Corp.", "Real Estate"),
    ("LIN", "Linde plc", "Materials"),
    ("SBUX", "Starbucks Corp.", "Consumer Goods"),
    ("AMAT", "Applied Materials Inc.", "Technology"),
    ("GILD", "Gilead Sciences Inc.", "Healthcare"),
    ("MDLZ", "Mondelez International", "Consumer Goods"),
    ("CVX", "Chevron Corp.", "Energy"),
    ("NOW", "ServiceNow Inc.", "Technology"),
    ("GS", "Goldman Sachs Group", "Finance"),
    ("MMM", "3M Co.", "Industrial"),
    ("ISRG", "Intuitive Surgical Inc.", "Healthcare"),
    ("BMY", "Bristol-Myers Squibb", "Healthcare"),
    ("HON", "Honeywell International", "Industrial"),
    ("C", "Citigroup Inc.", "Finance"),
    ("TGT", "Target Corp.", "Consumer Goods"),
    ("BLK", "BlackRock Inc.", "Finance"),
    ("MS", "Morgan Stanley", "Finance"),
    ("SPGI", "S&P Global Inc.", "Finance"),
    ("BA", "Boeing Co.", "Industrial"),
    ("LOW", "Lowe's Companies", "Consumer Goods"),
    ("AXP", "American Express Co.", "Finance"),
    ("DE", "Deere & Co.", "Industrial"),
    ("GE", "General Electric", "Industrial"),
    ("CAT", "Caterpillar Inc.", "Industrial"),
    ("SCHW", "Charles Schwab Corp.", "Finance"),
    ("CHTR", "Charter Communications", "Communication"),
    ("BKNG", "Booking Holdings Inc.", "Consumer Goods"),
    ("PLD", "Prologis Inc.", "Real Estate"),
    ("ANTM", "Anthem Inc.", "Healthcare"),
    ("COP", "ConocoPhillips", "Energy"),
    ("AMGN", "Amgen Inc.", "Healthcare"),
    ("ADI", "Analog Devices Inc.", "Technology"),
    ("CB", "Chubb Ltd.", "Finance"),
    ("CI", "Cigna Corp.", "Healthcare"),
    ("CME", "CME Group Inc.", "Finance"),
    ("TMUS", "T-Mobile US Inc.", "Communication"),
    ("INTU", "Intuit Inc.", "Technology"),
    ("PGR", "Progressive Corp.", "Finance"),
    ("SO", "Southern Co.", "Utilities"),
    ("USB", "U.S. Bancorp", "Finance"),
    ("FIS", "Fidelity National Information", "Technology"),
    ("MO", "Altria Group Inc.", "Consumer Goods"),
    ("DUK", "Duke Energy Corp.", "Utilities"),
    ("ICE", "Intercontinental Exchange", "Finance"),
    ("CSX", "CSX Corp.", "Industrial"),
    ("FISV", "Fiserv Inc.", "Technology"),
    ("VRTX", "Vertex Pharmaceuticals", "Healthcare"),
    ("ITW", "Illinois Tool Works", "Industrial"),
    ("SYK", "Stryker Corp.", "Healthcare"),
    ("ATVI", "Activision Blizzard", "Communication"),
    ("LRCX", "Lam Research Corp.", "Technology"),
    ("PNC", "PNC Financial Services", "Finance"),
    ("BSX", "Boston Scientific Corp.", "Healthcare"),
    ("EQIX", "Equinix Inc.", "Real Estate"),
    ("ZTS", "Zoetis Inc.", "Healthcare"),
    ("AON", "Aon plc", "Finance"),
    ("D", "Dominion Energy Inc.", "Utilities"),
    ("EL", "Estee Lauder Companies", "Consumer Goods"),
    ("REGN", "Regeneron Pharmaceuticals", "Healthcare"),
    ("TJX", "TJX Companies Inc.", "Consumer Goods"),
    ("HCA", "HCA Healthcare Inc.", "Healthcare"),
    ("SHW", "Sherwin-Williams Co.", "Materials"),
    ("APD", "Air Products & Chemicals", "Materials"),
    ("KLAC", "KLA Corp.", "Technology"),
    ("WM", "Waste Management Inc.", "Industrial"),
    ("CL", "Colgate-Palmolive Co.", "Consumer Goods"),
    ("CMG", "Chipotle Mexican Grill", "Consumer Goods"),
    ("ADSK", "Autodesk Inc.", "Technology"),
    ("ADP", "Automatic Data Processing", "Technology"),
    ("NOC", "Northrop Grumman Corp.", "Industrial"),
    ("MCO", "Moody's Corp.", "Finance"),
    ("ILMN", "Illumina Inc.", "Healthcare"),
    ("EW", "Edwards Lifesciences", "Healthcare"),
    ("ECL", "Ecolab Inc.", "Materials"),
    ("SNPS", "Synopsys Inc.", "Technology"),
    ("ETN", "Eaton Corp. plc", "Industrial"),
    ("PSA", "Public Storage", "Real Estate"),
    ("FDX", "FedEx Corp.", "Industrial"),
    ("CCI", "Crown Castle International", "Real Estate"),
]


def seed_history(price: float, now_ms: int, rng: random.Random) -> PriceHistory:
    """
    Backfill one point per past hour at +/-5% around `price`, then the
    current price itself at `now_ms`.
    """
    points = []
    for i in range(HISTORY_BACKFILL_HOURS, 0, -1):
        variation = rng.uniform(-HISTORY_BACKFILL_VARIATION, HISTORY_BACKFILL_VARIATION)
        points.append(PricePoint(timestamp=now_ms - i * HOUR_MS, price=price * (1 + variation)))
    points.append(PricePoint(timestamp=now_ms, price=float(price)))
    return PriceHistory(points, capacity=HISTORY_CAPACITY)


def make_instrument(index: int, symbol: str, name: str, sector: str,
                    price: float, volume: int, now_ms: int,
                    rng: random.Random) -> Instrument:
    return Instrument(
        instrument_id=f"stock-{index}",
        symbol=symbol,
        name=name,
        sector=sector,
        price=price,
        volume=volume,
        history=seed_history(price, now_ms, rng),
    )


def generate_instruments(rng: Optional[random.Random] = None,
                         now_ms: Optional[int] = None,
                         roster: Sequence[Tuple[str, str, str]] = ROSTER) -> List[Instrument]:
    """Build one instrument per roster entry with a random price in [10, 1000)."""
    rng = rng or random.Random()
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    instruments = []
    for index, (symbol, name, sector) in enumerate(roster):
        price = rng.randrange(10, 1000)
        volume = rng.randrange(100_000, 10_000_000)
        instruments.append(
            make_instrument(index, symbol, name, sector, price, volume, now_ms, rng))
    return instruments
