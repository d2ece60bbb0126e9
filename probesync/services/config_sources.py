from pathlib import Path

from probesync.exceptions import HttpFetchError, SourceUnreachableError
from probesync.services.http_service import HttpService


class UrlConfigSource:
    """Fetch a config document with a GET request.

    Responsibility: transport only. Anything outside 2xx counts as unreachable;
    the body is not inspected here.
    """

    def __init__(self, url: str, http_service: HttpService):
        self.url = url
        self.http_service = http_service

    @property
    def location(self) -> str:
        return self.url

    def fetch(self) -> bytes:
        try:
            resp = self.http_service.fetch(self.url)
        except HttpFetchError as e:
            raise SourceUnreachableError(self.url, str(e.original)) from e
        if not resp.ok:
            raise SourceUnreachableError(self.url, f"HTTP {resp.status_code}", status_code=resp.status_code)
        return resp.text.encode("utf-8")


class FileConfigSource:
    """Read a config document from a local file."""

    def __init__(self, path: str):
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def exists(self) -> bool:
        return self.path.is_file()

    def fetch(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise SourceUnreachableError(str(self.path), str(e)) from e
