from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from probesync.exceptions import SourceUnreachableError
from probesync.services.config_applier import ConfigApplier
from probesync.services.protocols import ConfigSource

logger = logging.getLogger(__name__)


class SourceWatcher(ABC):
    """Shared fetch-and-apply cycle and cancellation for UrlPoller and FileWatcher.

    Cancellation contract: once `cancel()` returns, no new apply originates
    from this watcher. An apply already inside `_apply_lock` finishes first;
    anything that reaches the lock afterwards sees the stop event and bails.
    """

    def __init__(self, source: ConfigSource, applier: ConfigApplier):
        self.source = source
        self.applier = applier
        self._stop_event = threading.Event()
        # Reentrant so a snapshot listener may cancel its own watcher.
        self._apply_lock = threading.RLock()
        self._cancel_lock = threading.Lock()
        self.last_event_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.applies = 0

    @property
    def location(self) -> str:
        return self.source.location

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    @abstractmethod
    def start(self) -> None:
        ...

    def cancel(self) -> None:
        """Stop the watcher. Safe to call repeatedly and from any thread."""
        with self._cancel_lock:
            first = not self._stop_event.is_set()
            self._stop_event.set()
        if first:
            self._stop_watching()
            logger.info("Stopped watching %s", self.location)
        # Every caller waits out an apply that was already in progress.
        with self._apply_lock:
            pass

    def _stop_watching(self) -> None:
        """Release the background resources (scheduler, observer, timers)."""

    def _fetch_and_apply(self, *, fetch_inside_lock: bool = False) -> bool:
        """Run one cycle. Returns True when a document was applied (changed or not)."""
        if self._stop_event.is_set():
            return False
        try:
            if fetch_inside_lock:
                with self._apply_lock:
                    if self._stop_event.is_set():
                        return False
                    raw = self._fetch()
                    if raw is None:
                        return False
                    return self._apply(raw)
            raw = self._fetch()
            if raw is None:
                return False
            with self._apply_lock:
                if self._stop_event.is_set():
                    logger.debug("Discarding fetch from %s completed after cancel", self.location)
                    return False
                return self._apply(raw)
        except Exception as e:
            self.last_error = str(e)
            logger.exception("Unexpected error while syncing config from %s", self.location)
            return False

    def _fetch(self) -> Optional[bytes]:
        self.last_event_at = datetime.utcnow()
        try:
            return self.source.fetch()
        except SourceUnreachableError as e:
            self.last_error = str(e)
            logger.warning("Could not fetch config: %s", e)
            return None

    def _apply(self, raw: bytes) -> bool:
        result = self.applier.apply(raw, source=self.location)
        if not result.ok:
            self.last_error = str(result.error)
            logger.warning("Rejected config: %s", result.error)
            return False
        self.last_error = None
        self.applies += 1
        return True

    def stats(self) -> dict:
        return {
            "last_event_at": self.last_event_at,
            "last_error": self.last_error,
            "applies": self.applies,
        }
