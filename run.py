import logging

import uvicorn

from probesync import config as env
from probesync.api.app import create_app
from probesync.container import Container

logger = logging.getLogger("probesync")


def main(container: Container = None):
    logging.basicConfig(
        level=env.get_str_env("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    container = container or Container()

    registry = container.watcher_registry()
    locations = container.config.PROBESYNC_CONFIG() or []
    result = registry.start(locations)
    for failure in result.failures:
        logger.error("Not watching %s: %s", failure.location, failure.reason)
    logger.info("Watching %d of %d config location(s)", len(result.handles), len(locations))

    app = create_app(container)
    try:
        uvicorn.run(
            app,
            host=container.config.API_HOST() or "0.0.0.0",
            port=int(container.config.API_PORT() or 8000),
        )
    finally:
        cancelled = registry.cancel_all()
        logger.info("Shutting down; cancelled %d watcher(s)", cancelled)


if __name__ == '__main__':
    main()
