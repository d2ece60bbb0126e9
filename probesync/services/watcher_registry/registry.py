from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import asdict
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Union

from probesync.domain.location import ConfigLocation, LocationKind
from probesync.services.config_applier import ConfigApplier
from probesync.services.config_sources import FileConfigSource, UrlConfigSource
from probesync.services.file_watcher import FileWatcher
from probesync.services.http_service import HttpService
from probesync.services.source_watcher import SourceWatcher
from probesync.services.url_poller import UrlPoller

from .cancellation import _InMemoryWatcherCancellationManager
from .models import StartResult, WatchFailure, WatcherHandle
from .store import _InMemoryWatcherRecordStore

logger = logging.getLogger(__name__)


class WatcherRegistry:
    """Start one watcher per config location and keep track of them.

    Thread-safe and in-memory. A location that cannot be watched is reported
    in `StartResult.failures` without stopping the others. Cancelled watchers
    are never restarted; call `start` again to watch a location anew.
    """

    def __init__(
        self,
        *,
        applier: ConfigApplier,
        http_service: HttpService,
        poll_interval_seconds: int = 900,
        debounce_seconds: float = 0.0,
        max_cancelled_records: int = 1000,
        poller_factory: Callable[..., SourceWatcher] = UrlPoller,
        file_watcher_factory: Callable[..., SourceWatcher] = FileWatcher,
    ):
        self.applier = applier
        self.http_service = http_service
        self.poll_interval_seconds = poll_interval_seconds
        self.debounce_seconds = debounce_seconds
        self._poller_factory = poller_factory
        self._file_watcher_factory = file_watcher_factory
        self._lock = threading.Lock()
        self._records = _InMemoryWatcherRecordStore(max_cancelled_records=max_cancelled_records)
        self._cancellation = _InMemoryWatcherCancellationManager()

    def start(
        self,
        locations: Iterable[Union[ConfigLocation, str]],
        poll_interval_seconds: Optional[int] = None,
    ) -> StartResult:
        interval = poll_interval_seconds if poll_interval_seconds is not None else self.poll_interval_seconds
        result = StartResult()

        for raw in locations:
            try:
                location = raw if isinstance(raw, ConfigLocation) else ConfigLocation.parse(raw)
            except ValueError as e:
                logger.warning("Skipping config location %r: %s", raw, e)
                result.failures.append(WatchFailure(location=raw, error=e))
                continue

            try:
                watcher = self._build_watcher(location, interval)
                watcher.start()
            except Exception as e:
                logger.warning("Could not start watcher for %s: %s", location, e)
                result.failures.append(WatchFailure(location=location, error=e))
                continue

            result.handles.append(self._register(location, watcher))

        return result

    def _build_watcher(self, location: ConfigLocation, interval: int) -> SourceWatcher:
        if location.kind is LocationKind.URL:
            return self._poller_factory(
                UrlConfigSource(location.value, self.http_service),
                self.applier,
                interval_seconds=interval,
            )
        return self._file_watcher_factory(
            FileConfigSource(location.value),
            self.applier,
            debounce_seconds=self.debounce_seconds,
        )

    def _register(self, location: ConfigLocation, watcher: SourceWatcher) -> WatcherHandle:
        with self._lock:
            wid = str(uuid.uuid4())
            self._records.create_running(
                watcher_id=wid,
                location=location.value,
                kind=location.kind.value,
                now=datetime.utcnow(),
            )
            self._cancellation.register(wid, watcher)
        return WatcherHandle(watcher_id=wid, location=location, _watcher=watcher, _registry=self)

    def cancel(self, watcher_id: str) -> bool:
        """Cancel a running watcher. Returns False if unknown or already cancelled."""
        with self._lock:
            watcher = self._cancellation.pop(watcher_id)
            if watcher is None:
                return False
            self._records.update_stats(watcher_id, watcher.stats())
            self._records.mark_cancelled(watcher_id, now=datetime.utcnow())
            self._records.evict_cancelled_overflow()
        # Outside the lock: this waits for an apply that is still in progress.
        watcher.cancel()
        return True

    def cancel_all(self) -> int:
        with self._lock:
            ids = self._cancellation.ids()
        return sum(1 for wid in ids if self.cancel(wid))

    def get(self, watcher_id: str) -> Optional[Dict]:
        with self._lock:
            self._refresh(watcher_id)
            rec = self._records.get(watcher_id)
            return asdict(rec) if rec else None

    def list_active(self) -> List[Dict]:
        with self._lock:
            for wid in self._cancellation.ids():
                self._refresh(wid)
            return [asdict(r) for r in self._records.list_active()]

    def _refresh(self, watcher_id: str) -> None:
        watcher = self._cancellation.get(watcher_id)
        if watcher is not None:
            self._records.update_stats(watcher_id, watcher.stats())
