"""Custom exceptions for probesync services."""
from typing import Optional


class SourceUnreachableError(Exception):
    """Raised when a config source cannot produce a document (network, HTTP status or file IO)."""

    def __init__(self, location: str, reason: str, status_code: Optional[int] = None):
        self.location = location
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Config source '{location}' unreachable: {reason}")


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class DocumentInvalidError(Exception):
    """Raised when a fetched document is malformed or fails schema validation."""

    def __init__(self, reason: str, source: Optional[str] = None):
        self.reason = reason
        self.source = source
        where = f" from '{source}'" if source else ""
        super().__init__(f"Invalid config document{where}: {reason}")


class WatchSetupError(Exception):
    """Raised when a watcher cannot be constructed or started for a location."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Cannot watch '{location}': {reason}")
