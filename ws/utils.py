# ws/utils.py
import logging
import time

from fastapi import WebSocket

from domain.engine import Snapshot

logger = logging.getLogger(__name__)


async def send_json_safe(ws: WebSocket, payload: dict):
  try:
    await ws.send_json(payload)
  except Exception as e:
    logger.debug("Dropping %s frame: %s", payload.get("type"), e)


async def broadcast(clients, payload: dict):
  for ws in list(clients):
    await send_json_safe(ws, payload)


def tick_payload(snapshot: Snapshot, tick: int, running: bool) -> dict:
  return {
      "type": "TICK",
      "ts": int(time.time() * 1000),
      "tick": tick,
      "running": running,
      "instruments": [s.to_dict() for s in snapshot]
  }
