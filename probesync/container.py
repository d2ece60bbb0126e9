"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from probesync import config as env
from probesync.services.config_applier import ConfigApplier
from probesync.services.config_document_parser import ConfigDocumentParser
from probesync.services.config_snapshot import shared_snapshot
from probesync.services.http_service import HttpService
from probesync.services.watcher_registry import WatcherRegistry


# Environment variables used by the container (read via `probesync.config` helpers).
#
# PROBESYNC_CONFIG (comma separated list, default: "monika.json")
#   Config locations to watch. http(s) URLs are polled, anything else is a local file.
#
# PROBESYNC_CONFIG_INTERVAL (int seconds, default: 900)
#   Poll interval applied to every URL location.
#
# PROBESYNC_FILE_DEBOUNCE_SECONDS (float seconds, default: 0)
#   Trailing debounce for file change bursts. 0 reloads on every event.
#
# USER_AGENT (str, default: "probesync/0.1")
#   User-Agent header for config downloads.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for each config download.
#
# PROBESYNC_MAX_CANCELLED_RECORDS (int, default: 1000)
#   How many cancelled watcher records the registry keeps for inspection.
#
# API_HOST / API_PORT (default: "0.0.0.0" / 8000)
#   Bind address for the control API started by run.py.
ENV = {
    "PROBESYNC_CONFIG": env.config_locations(),
    "PROBESYNC_CONFIG_INTERVAL": env.config_interval_seconds(),
    "PROBESYNC_FILE_DEBOUNCE_SECONDS": env.file_debounce_seconds(),
    "USER_AGENT": env.get_str_env("USER_AGENT", "probesync/0.1"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "PROBESYNC_MAX_CANCELLED_RECORDS": env.get_int_env("PROBESYNC_MAX_CANCELLED_RECORDS", 1000),
    "API_HOST": env.get_str_env("API_HOST", "0.0.0.0"),
    "API_PORT": env.get_int_env("API_PORT", 8000),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for probesync."""

    config = providers.Configuration(default=ENV)

    # The snapshot is process-wide; every consumer must see the same cell.
    snapshot = providers.Object(shared_snapshot())

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    document_parser = providers.Singleton(ConfigDocumentParser)

    config_applier = providers.Singleton(
        ConfigApplier,
        snapshot=snapshot,
        parser=document_parser,
    )

    watcher_registry = providers.Singleton(
        WatcherRegistry,
        applier=config_applier,
        http_service=http_service,
        poll_interval_seconds=config.PROBESYNC_CONFIG_INTERVAL.as_(int),
        debounce_seconds=config.PROBESYNC_FILE_DEBOUNCE_SECONDS.as_(float),
        max_cancelled_records=config.PROBESYNC_MAX_CANCELLED_RECORDS.as_(int),
    )
