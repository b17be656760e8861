# api/routes.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from domain.portfolio import SORT_FIELDS, leaderboard, snapshot_portfolio
from domain.pricing import market_trend
from state import GameContext

router = APIRouter(prefix="/api")

SORT_KEYS = {
    "name": (lambda s: s.name, False),
    "price": (lambda s: s.price, True),
    "change": (lambda s: s.change_percent, True),
    "volume": (lambda s: s.volume, True),
}


def get_game(request: Request) -> GameContext:
    return request.app.state.game


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class OrderRequest(CamelModel):
    instrument_id: str
    side: str
    shares: float


class SettingsRequest(CamelModel):
    update_interval: Optional[float] = None
    volatility: Optional[float] = None
    player_name: Optional[str] = None
    theme: Optional[str] = None
    auto_save: Optional[bool] = None


def _unprocessable(e: ValueError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False, include_input=False))
    return HTTPException(status_code=422, detail=str(e))


# ---------- Instruments ----------
@router.get("/instruments")
async def list_instruments(sector: Optional[str] = None, q: Optional[str] = None,
                           sort: str = "name", game: GameContext = Depends(get_game)):
    """Dashboard listing: optional sector filter, symbol/name search, sort."""
    if sort not in SORT_KEYS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {sorted(SORT_KEYS)}")
    rows = game.engine.get_snapshot()
    if q:
        needle = q.lower()
        rows = [s for s in rows if needle in s.symbol.lower() or needle in s.name.lower()]
    if sector:
        rows = [s for s in rows if s.sector == sector]
    key, reverse = SORT_KEYS[sort]
    rows.sort(key=key, reverse=reverse)
    return [s.to_dict() for s in rows]


@router.get("/instruments/movers")
async def movers(limit: int = 5, game: GameContext = Depends(get_game)):
    snapshot = game.engine.get_snapshot()
    gainers = sorted((s for s in snapshot if s.change_percent > 0),
                     key=lambda s: s.change_percent, reverse=True)
    losers = sorted((s for s in snapshot if s.change_percent < 0),
                    key=lambda s: s.change_percent)
    return {
        "marketTrend": market_trend(snapshot),
        "gainers": [s.to_dict() for s in gainers[:limit]],
        "losers": [s.to_dict() for s in losers[:limit]],
    }


@router.get("/instruments/symbol/{symbol}")
async def instrument_by_symbol(symbol: str, game: GameContext = Depends(get_game)):
    inst = game.engine.get_by_symbol(symbol.upper())
    if inst is None:
        raise HTTPException(status_code=404, detail="instrument_not_found")
    return inst.to_dict()


@router.get("/instruments/{instrument_id}")
async def instrument_by_id(instrument_id: str, game: GameContext = Depends(get_game)):
    inst = game.engine.get_by_id(instrument_id)
    if inst is None:
        raise HTTPException(status_code=404, detail="instrument_not_found")
    return inst.to_dict()


@router.get("/sectors")
async def sectors(game: GameContext = Depends(get_game)):
    return game.engine.sectors()


# ---------- Simulation ----------
def _simulation_state(game: GameContext) -> Dict[str, Any]:
    return {
        "running": game.engine.running,
        "tick": game.engine.tick_count,
        "observers": game.engine.observer_count,
        "parameters": game.engine.params.to_dict(),
    }


@router.get("/simulation")
async def simulation(game: GameContext = Depends(get_game)):
    return _simulation_state(game)


@router.patch("/simulation/parameters")
async def update_parameters(partial: Dict[str, Any], game: GameContext = Depends(get_game)):
    try:
        params = game.engine.update_parameters(partial)
    except ValueError as e:
        raise _unprocessable(e) from e
    return params.to_dict()


@router.post("/simulation/start")
async def start(game: GameContext = Depends(get_game)):
    game.engine.start()
    return _simulation_state(game)


@router.post("/simulation/stop")
async def stop(game: GameContext = Depends(get_game)):
    game.engine.stop()
    return _simulation_state(game)


@router.post("/simulation/tick")
async def step(game: GameContext = Depends(get_game)):
    game.engine.tick()
    return _simulation_state(game)


# ---------- Portfolio ----------
@router.get("/portfolio")
async def portfolio(game: GameContext = Depends(get_game)):
    return snapshot_portfolio(game.player)


@router.post("/portfolio/reset")
async def reset_portfolio(game: GameContext = Depends(get_game)):
    game.reset()
    return snapshot_portfolio(game.player)


@router.post("/portfolio/save")
async def save_portfolio(game: GameContext = Depends(get_game)):
    game.save()
    return {"saved": True}


@router.get("/trades")
async def trades(game: GameContext = Depends(get_game)):
    return [t.to_dict() for t in game.player.trades]


@router.post("/trades")
async def place_trade(order: OrderRequest, game: GameContext = Depends(get_game)):
    ok, reason, inst = game.place_order(order.instrument_id, order.side, order.shares)
    if inst is None:
        raise HTTPException(status_code=404, detail=reason)
    if not ok:
        raise HTTPException(status_code=400, detail=reason)
    return {
        "order": game.player.trades[-1].to_dict(),
        "portfolio": snapshot_portfolio(game.player),
    }


@router.get("/leaderboard")
async def get_leaderboard(sort: str = "totalValue", q: str = "",
                          game: GameContext = Depends(get_game)):
    if sort not in SORT_FIELDS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {list(SORT_FIELDS)}")
    return leaderboard(game.players(), sort_field=sort, query=q)


# ---------- Settings ----------
@router.get("/settings")
async def get_settings(game: GameContext = Depends(get_game)):
    return game.settings()


@router.put("/settings")
async def put_settings(body: SettingsRequest, game: GameContext = Depends(get_game)):
    try:
        return game.update_settings(
            update_interval=body.update_interval,
            volatility=body.volatility,
            player_name=body.player_name,
            theme=body.theme,
            auto_save=body.auto_save,
        )
    except ValueError as e:
        raise _unprocessable(e) from e
