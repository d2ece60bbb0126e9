from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from probesync.exceptions import WatchSetupError
from probesync.services.config_applier import ConfigApplier
from probesync.services.config_sources import FileConfigSource
from probesync.services.source_watcher import SourceWatcher

logger = logging.getLogger(__name__)

_RELEVANT_EVENTS = {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}


def _normalize(path) -> str:
    return os.path.normcase(os.path.abspath(os.fsdecode(path)))


class _ConfigFileEventHandler(FileSystemEventHandler):
    """Forward change events for one file inside a watched directory."""

    def __init__(self, path: Path, on_change: Callable[[str], None]):
        super().__init__()
        self._path = _normalize(path)
        self._on_change = on_change

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _RELEVANT_EVENTS:
            return
        # Atomic saves write a temp file and rename it over the target.
        target = event.dest_path if event.event_type == EVENT_TYPE_MOVED else event.src_path
        if not target or _normalize(target) != self._path:
            return
        self._on_change(event.event_type)


class FileWatcher(SourceWatcher):
    """Re-apply a local config file whenever the OS reports it changed.

    The observer watches the parent directory rather than the file itself, so
    the watch survives editors and deploy tools that delete and recreate the
    file or rename a new one over it.

    With `debounce_seconds` > 0 only the trailing event of a burst reloads.
    Without it every event reloads; re-applying identical content is a no-op
    for the snapshot.
    """

    def __init__(
        self,
        source: FileConfigSource,
        applier: ConfigApplier,
        *,
        debounce_seconds: float = 0.0,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        if not source.exists():
            raise WatchSetupError(source.location, "file does not exist")
        super().__init__(source, applier)
        self.path = source.path.absolute()
        self.debounce_seconds = max(0.0, float(debounce_seconds or 0.0))
        self._observer_factory = observer_factory
        self._observer: Optional[Observer] = None
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()

    def start(self) -> None:
        if self._observer is not None or self.cancelled:
            return
        handler = _ConfigFileEventHandler(self.path, self._on_change)
        observer = self._observer_factory()
        try:
            observer.schedule(handler, str(self.path.parent), recursive=False)
            observer.daemon = True
            observer.start()
        except Exception as e:
            raise WatchSetupError(self.location, f"could not subscribe to changes: {e}") from e
        self._observer = observer
        if self.cancelled:
            self._stop_watching()
            return
        logger.info("Watching config file %s", self.location)

        # Subscribe first, then read, so a change in between is not lost.
        self.reload()

    def reload(self) -> bool:
        """Read the file and apply it; events of one watcher never overlap."""
        return self._fetch_and_apply(fetch_inside_lock=True)

    def _on_change(self, event_type: str) -> None:
        if self.cancelled:
            return
        logger.debug("Config file %s %s", self.location, event_type)
        if self.debounce_seconds <= 0:
            self.reload()
            return
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.debounce_seconds, self.reload)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _stop_watching(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

        observer = self._observer
        if observer is None:
            return
        self._observer = None
        try:
            observer.stop()
            # A handler may cancel its own watcher from the observer thread.
            if threading.current_thread() is not observer:
                observer.join(timeout=5.0)
        except Exception:
            logger.exception("Error stopping file observer for %s", self.location)
