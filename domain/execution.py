# domain/execution.py
from __future__ import annotations

import time
from typing import Optional, Tuple

from domain.models import InstrumentSnapshot, Player, PortfolioHolding, TradeOrder
from domain.portfolio import record_trade, revalue


def execute_order(
    player: Player, instrument: InstrumentSnapshot, side: str, shares: float,
    timestamp: Optional[int] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Execute a market BUY/SELL of `shares` of `instrument` at its current
    snapshot price for `player`.
    - Buys average into the existing cost basis.
    - Sells reduce the holding and drop it once empty. No shorting.
    - Updates cash, appends the order to the trade log, revalues the
      portfolio at the fill price.

    Returns:
        (ok, reason) where reason is None on success.
    """
    if side not in ("buy", "sell"):
        return False, "invalid_side"
    try:
        shares = float(shares)
    except (TypeError, ValueError):
        return False, "invalid_shares"
    if not shares > 0:
        return False, "invalid_shares"

    portfolio = player.portfolio
    price = instrument.price
    total = price * shares
    holding = portfolio.holding(instrument.id)

    if side == "buy":
        if total > portfolio.cash:
            return False, "insufficient_cash"
        portfolio.cash -= total
        if holding is not None:
            new_shares = holding.shares + shares
            holding.average_buy_price = (
                holding.shares * holding.average_buy_price + shares * price
            ) / new_shares
            holding.shares = new_shares
        else:
            portfolio.holdings.append(
                PortfolioHolding(
                    instrument_id=instrument.id,
                    symbol=instrument.symbol,
                    name=instrument.name,
                    shares=shares,
                    average_buy_price=price,
                    current_price=price,
                )
            )

    else:  # sell
        if holding is None or shares > holding.shares:
            return False, "insufficient_shares"
        portfolio.cash += total
        holding.shares -= shares
        if holding.shares <= 0:
            portfolio.holdings.remove(holding)

    order = TradeOrder(
        type=side,
        instrument_id=instrument.id,
        shares=shares,
        price=price,
        total=total,
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
    )
    record_trade(player, order)
    revalue(portfolio, {instrument.id: price})
    return True, None
