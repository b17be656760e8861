# ws/endpoints.py
import asyncio
import logging
import time

from fastapi import WebSocket, WebSocketDisconnect

from domain.portfolio import leaderboard, snapshot_portfolio
from state import GameContext, gen_client_id
from ws.ticker import QUEUE_SIZE, queue_observer, stream_ticks
from ws.utils import broadcast, send_json_safe

logger = logging.getLogger(__name__)


async def ws_endpoint(ws: WebSocket):
  game: GameContext = ws.app.state.game
  await ws.accept()
  cid = gen_client_id()
  game.clients[cid] = ws

  await send_json_safe(ws, {"type": "HELLO", "clientId": cid})

  # subscribe() replays the current snapshot into the queue right away
  queue: asyncio.Queue = asyncio.Queue(maxsize=QUEUE_SIZE)
  unsubscribe = game.engine.subscribe(queue_observer(queue))
  sender = asyncio.create_task(stream_ticks(ws, game.engine, queue))
  await send_json_safe(ws, snapshot_portfolio(game.player))
  logger.info("Client %s connected (%d open)", cid, len(game.clients))

  try:
    while True:
      msg = await ws.receive_json()
      mtype = msg.get("type") if isinstance(msg, dict) else None

      if mtype == "ORDER":
        instrument_id = msg.get("instrumentId")
        side = msg.get("side")
        shares = msg.get("shares")
        if not isinstance(instrument_id, str):
          await send_json_safe(ws, {"type": "ORDER_REJECT", "reason": "invalid"})
          continue
        ok, reason, inst = game.place_order(instrument_id, side, shares)
        if ok:
          await send_json_safe(
              ws, {
                  "type": "ORDER_ACCEPTED",
                  "instrumentId": instrument_id,
                  "side": side,
                  "shares": float(shares),
                  "price": round(inst.price, 2)
              })
          await broadcast(game.clients.values(),
                          snapshot_portfolio(game.player))
          await broadcast(game.clients.values(), leaderboard(game.players()))
        else:
          await send_json_safe(ws, {
              "type": "ORDER_REJECT",
              "reason": reason or "unknown"
          })

      elif mtype == "PING":
        await send_json_safe(ws, {"type": "PONG", "ts": time.time()})

      else:
        await send_json_safe(ws, {"type": "ERROR", "code": "unknown_message"})

  except WebSocketDisconnect:
    pass
  except Exception:
    logger.exception("Client %s socket error", cid)
  finally:
    unsubscribe()
    sender.cancel()
    game.clients.pop(cid, None)
    logger.info("Client %s disconnected", cid)
