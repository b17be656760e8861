# ws/ticker.py
import asyncio
import logging

from fastapi import WebSocket

from domain.engine import MarketEngine, Snapshot
from ws.utils import send_json_safe, tick_payload

logger = logging.getLogger(__name__)

QUEUE_SIZE = 16


def queue_observer(queue: asyncio.Queue):
  """Engine observer that buffers snapshots for one socket, dropping the oldest when full."""

  def observe(snapshot: Snapshot):
    if queue.full():
      try:
        queue.get_nowait()
      except asyncio.QueueEmpty:
        pass
      logger.warning("Client queue full, dropped oldest tick")
    queue.put_nowait(snapshot)

  return observe


async def stream_ticks(ws: WebSocket, engine: MarketEngine,
                       queue: asyncio.Queue):
  while True:
    snapshot = await queue.get()
    await send_json_safe(
        ws, tick_payload(snapshot, engine.tick_count, engine.running))
