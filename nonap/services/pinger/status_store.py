from __future__ import annotations

import heapq
from collections import deque
from threading import Lock

from nonap.services.pinger.models import PingOutcome


DEFAULT_HISTORY_CAPACITY = 100


class StatusStore:
    """Bounded per-target ping history.

    Each target's history is written only by that target's worker; the lock
    keeps readers on other threads from iterating a deque mid-append.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("history capacity must be a positive integer")
        self.capacity = capacity
        self._lock = Lock()
        self._histories: dict[str, deque[PingOutcome]] = {}

    def append(self, outcome: PingOutcome) -> None:
        with self._lock:
            history = self._histories.get(outcome.target_id)
            if history is None:
                history = deque(maxlen=self.capacity)
                self._histories[outcome.target_id] = history
            history.append(outcome)

    def history(self, target_id: str) -> tuple[PingOutcome, ...]:
        with self._lock:
            history = self._histories.get(target_id)
            return tuple(history) if history else ()

    def latest(self, target_id: str) -> PingOutcome | None:
        with self._lock:
            history = self._histories.get(target_id)
            return history[-1] if history else None

    def count(self, target_id: str) -> int:
        with self._lock:
            history = self._histories.get(target_id)
            return len(history) if history else 0

    def drop(self, target_id: str) -> None:
        with self._lock:
            self._histories.pop(target_id, None)

    def recent(self, tail: int = 20) -> list[PingOutcome]:
        # 跨目标合并最近 tail 条结果（按时间升序）
        if tail <= 0:
            return []
        with self._lock:
            snapshots = [tuple(history) for history in self._histories.values()]
        merged = heapq.merge(*snapshots, key=lambda outcome: outcome.timestamp)
        return list(deque(merged, maxlen=tail))
