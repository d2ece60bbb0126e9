from __future__ import annotations

from typing import Dict, List, Optional

from probesync.services.source_watcher import SourceWatcher


class _InMemoryWatcherCancellationManager:
    """Keeps the live watcher objects so they can be cancelled by id."""

    def __init__(self):
        self._watchers: Dict[str, SourceWatcher] = {}

    def register(self, watcher_id: str, watcher: SourceWatcher) -> None:
        self._watchers[watcher_id] = watcher

    def get(self, watcher_id: str) -> Optional[SourceWatcher]:
        return self._watchers.get(watcher_id)

    def pop(self, watcher_id: str) -> Optional[SourceWatcher]:
        return self._watchers.pop(watcher_id, None)

    def ids(self) -> List[str]:
        return list(self._watchers.keys())
