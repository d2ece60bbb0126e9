from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Dict, List, Optional

from .models import WatcherRecord


class _InMemoryWatcherRecordStore:
    def __init__(self, *, max_cancelled_records: int):
        if max_cancelled_records < 0:
            raise ValueError("max_cancelled_records must be >= 0")
        self._records: Dict[str, WatcherRecord] = {}
        self._max_cancelled_records = max_cancelled_records
        self._cancelled_order = deque()

    def create_running(self, *, watcher_id: str, location: str, kind: str, now: datetime) -> WatcherRecord:
        rec = WatcherRecord(
            id=watcher_id,
            location=location,
            kind=kind,
            status="running",
            started_at=now,
        )
        self._records[watcher_id] = rec
        return rec

    def get(self, watcher_id: str) -> Optional[WatcherRecord]:
        return self._records.get(watcher_id)

    def update_stats(self, watcher_id: str, stats: dict) -> bool:
        rec = self._records.get(watcher_id)
        if not rec:
            return False
        rec.last_event_at = stats.get("last_event_at")
        rec.last_error = stats.get("last_error")
        rec.applies = stats.get("applies", rec.applies)
        return True

    def mark_cancelled(self, watcher_id: str, *, now: datetime) -> bool:
        rec = self._records.get(watcher_id)
        if not rec or rec.status != "running":
            return False
        rec.status = "cancelled"
        rec.finished_at = now
        self._cancelled_order.append(watcher_id)
        return True

    def evict_cancelled_overflow(self) -> List[str]:
        evicted: List[str] = []
        while len(self._cancelled_order) > self._max_cancelled_records:
            oldest = self._cancelled_order.popleft()
            if oldest in self._records:
                del self._records[oldest]
                evicted.append(oldest)
        return evicted

    def list_active(self) -> List[WatcherRecord]:
        return [r for r in self._records.values() if r.status == "running"]
