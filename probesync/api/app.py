from fastapi import FastAPI

from probesync.api.routers import create_config_router, create_systems_router, create_watchers_router
from probesync.container import ENV


def create_app(container) -> FastAPI:
    """Build the control API on top of the container's snapshot and registry."""
    app = FastAPI(title="probesync")
    app.include_router(create_systems_router(ENV))
    app.include_router(create_config_router(container.snapshot()))
    app.include_router(create_watchers_router(container.watcher_registry()))
    return app
