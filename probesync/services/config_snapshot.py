from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from probesync.domain.probe import ConfigurationDocument

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[ConfigurationDocument], None]


class ConfigSnapshot:
    """Process-wide cell holding the current ConfigurationDocument.

    Readers call `get()` without locking: the cell only ever holds a reference
    to an immutable document, and replacing it is a single attribute store.
    Writers serialize on `_write_lock` so the fingerprint check and the swap
    happen together.
    """

    def __init__(self, initial: Optional[ConfigurationDocument] = None):
        self._document = initial
        self._version = 1 if initial is not None else 0
        self._write_lock = threading.Lock()
        self._listeners: List[SnapshotListener] = []

    def get(self) -> Optional[ConfigurationDocument]:
        return self._document

    @property
    def version(self) -> int:
        return self._version

    def replace(self, document: ConfigurationDocument) -> bool:
        """Swap in `document`. Returns False (no swap) when the content is unchanged."""
        if document is None:
            raise ValueError("document is required")
        with self._write_lock:
            current = self._document
            if current is not None and document.fingerprint and current.fingerprint == document.fingerprint:
                return False
            self._document = document
            self._version += 1
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(document)
            except Exception:
                logger.exception("Config snapshot listener %r failed", listener)
        return True

    def subscribe(self, listener: SnapshotListener) -> None:
        with self._write_lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        with self._write_lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

    def reset(self) -> None:
        """Empty the cell and drop listeners. Mostly for tests."""
        with self._write_lock:
            self._document = None
            self._version = 0
            self._listeners.clear()


_shared = ConfigSnapshot()


def shared_snapshot() -> ConfigSnapshot:
    return _shared


def current_config() -> Optional[ConfigurationDocument]:
    """Return the process-wide current config, or None before the first successful load."""
    return _shared.get()
