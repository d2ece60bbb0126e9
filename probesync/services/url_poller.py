from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from probesync.exceptions import WatchSetupError
from probesync.services.config_applier import ConfigApplier
from probesync.services.config_sources import UrlConfigSource
from probesync.services.source_watcher import SourceWatcher

logger = logging.getLogger(__name__)


class UrlPoller(SourceWatcher):
    """Poll a remote config document on a fixed interval.

    Each poller owns a BackgroundScheduler so a hung request only ever ties up
    its own worker. The first cycle runs immediately on `start()`.
    """

    def __init__(
        self,
        source: UrlConfigSource,
        applier: ConfigApplier,
        *,
        interval_seconds: int,
        scheduler_factory: Callable[[], BackgroundScheduler] = BackgroundScheduler,
    ):
        try:
            interval = int(interval_seconds)
        except (TypeError, ValueError):
            raise WatchSetupError(source.location, f"invalid poll interval {interval_seconds!r}")
        if interval < 1:
            raise WatchSetupError(source.location, f"poll interval must be >= 1 second, got {interval}")
        super().__init__(source, applier)
        self.interval_seconds = interval
        self._scheduler_factory = scheduler_factory
        self._sched: Optional[BackgroundScheduler] = None
        self._in_flight = threading.Lock()

    def start(self) -> None:
        if self._sched is not None or self.cancelled:
            return
        sched = self._scheduler_factory()
        sched.start()
        # max_instances=1 drops ticks while a fetch is outstanding instead of queueing them.
        sched.add_job(
            self.poll_once,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=f"poll:{self.location}",
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._sched = sched
        if self.cancelled:
            # cancel() raced with start() and saw no scheduler yet.
            self._stop_watching()
            return
        logger.info("Polling config %s every %s seconds", self.location, self.interval_seconds)

    def poll_once(self) -> bool:
        """Run one fetch-and-apply cycle unless another one is still in flight."""
        if self.cancelled:
            return False
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Skipping poll of %s: previous fetch still in flight", self.location)
            return False
        try:
            self._fetch_and_apply()
        finally:
            self._in_flight.release()
        return True

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def _stop_watching(self) -> None:
        sched = self._sched
        if sched is None:
            return
        try:
            # Do not wait on a hung request; its result is discarded after cancel.
            sched.shutdown(wait=False)
        except Exception:
            logger.exception("Error shutting down poll scheduler for %s", self.location)
        finally:
            self._sched = None
