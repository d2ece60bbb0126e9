from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Union

from probesync.domain.location import ConfigLocation

if TYPE_CHECKING:
    from probesync.services.source_watcher import SourceWatcher
    from .registry import WatcherRegistry


@dataclass
class WatcherRecord:
    id: str
    location: str
    kind: str
    status: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    last_event_at: Optional[datetime] = None
    last_error: Optional[str] = None
    applies: int = 0


@dataclass(frozen=True)
class WatcherHandle:
    """Caller-held reference to one running watcher."""

    watcher_id: str
    location: ConfigLocation
    _watcher: "SourceWatcher" = field(repr=False, compare=False)
    _registry: "WatcherRegistry" = field(repr=False, compare=False)

    def cancel(self) -> None:
        """Stop the watcher. Idempotent; no new apply happens once this returns."""
        self._registry.cancel(self.watcher_id)
        # Covers callers racing a cancel that another thread is still finishing.
        self._watcher.cancel()

    @property
    def cancelled(self) -> bool:
        return self._watcher.cancelled


@dataclass(frozen=True)
class WatchFailure:
    location: Union[ConfigLocation, str]
    error: Exception

    @property
    def reason(self) -> str:
        return str(self.error)


@dataclass
class StartResult:
    handles: List[WatcherHandle] = field(default_factory=list)
    failures: List[WatchFailure] = field(default_factory=list)

    def cancel_all(self) -> None:
        for handle in self.handles:
            handle.cancel()
