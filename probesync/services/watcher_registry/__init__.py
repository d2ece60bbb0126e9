from .models import StartResult, WatchFailure, WatcherHandle, WatcherRecord
from .registry import WatcherRegistry

__all__ = ["StartResult", "WatchFailure", "WatcherHandle", "WatcherRecord", "WatcherRegistry"]
