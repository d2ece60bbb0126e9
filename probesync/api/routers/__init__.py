"""API router factory functions."""
from .config import create_config_router
from .systems import create_systems_router
from .watchers import create_watchers_router

__all__ = [
    "create_config_router",
    "create_systems_router",
    "create_watchers_router",
]
