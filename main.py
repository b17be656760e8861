# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
# REST routes
from api.routes import router as api_router
from domain.models import SimulationParameters
from state import GameContext
from utils.logging import setup_logger
# WebSocket endpoint
from ws.endpoints import ws_endpoint

logger = logging.getLogger(__name__)


def create_app(db_path: Optional[str] = None, seed: Optional[int] = None,
               autostart: Optional[bool] = None,
               params: Optional[SimulationParameters] = None) -> FastAPI:
    db_path = db_path or config.DB_PATH
    if seed is None and config.SEED is not None:
        seed = int(config.SEED)
    autostart = config.AUTOSTART if autostart is None else autostart
    if params is None:
        params = SimulationParameters(tick_interval_ms=config.TICK_INTERVAL_MS,
                                      volatility_factor=config.VOLATILITY)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        game = GameContext.init(db_path, seed=seed, params=params)
        app.state.game = game
        if autostart:
            game.engine.start()
        try:
            yield
        finally:
            game.shutdown()

    app = FastAPI(title="Market Simulation Game", version="1.0", lifespan=lifespan)

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- REST API ---
    app.include_router(api_router)

    # --- WebSockets ---
    app.add_api_websocket_route("/ws", ws_endpoint)

    # --- Healthcheck ---
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


setup_logger(level=config.LOG_LEVEL)
app = create_app()

# --- Dev runner ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
