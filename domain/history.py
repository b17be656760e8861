# domain/history.py
from __future__ import annotations

from collections import deque
from typing import Iterable, Tuple

from config import HISTORY_CAPACITY
from domain.models import PricePoint


class PriceHistory:
    """
    Rolling window of price samples for one instrument, oldest first.

    Appending past capacity evicts the oldest sample. The buffer is seeded
    with at least one point and never shrinks afterwards.
    """

    def __init__(self, points: Iterable[PricePoint], capacity: int = HISTORY_CAPACITY):
        self.capacity = capacity
        self._points: deque = deque(points, maxlen=capacity)
        if not self._points:
            raise ValueError("price history needs at least one point")

    def append(self, timestamp: int, price: float) -> PricePoint:
        point = PricePoint(timestamp=timestamp, price=price)
        self._points.append(point)
        return point

    def points(self) -> Tuple[PricePoint, ...]:
        return tuple(self._points)
