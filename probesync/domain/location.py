from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LocationKind(str, Enum):
    URL = "url"
    FILE = "file"


_URL_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class ConfigLocation:
    """Where a config document comes from: a remote URL or a local file path."""

    kind: LocationKind
    value: str

    @classmethod
    def parse(cls, text: str) -> "ConfigLocation":
        """Classify a raw location string. Anything that is not http(s) is a file path."""
        if text is None or text.strip() == "":
            raise ValueError("config location must not be empty")
        value = text.strip()
        if value.lower().startswith(_URL_SCHEMES):
            return cls(kind=LocationKind.URL, value=value)
        return cls(kind=LocationKind.FILE, value=value)

    @classmethod
    def url(cls, value: str) -> "ConfigLocation":
        return cls(kind=LocationKind.URL, value=value)

    @classmethod
    def file(cls, value: str) -> "ConfigLocation":
        return cls(kind=LocationKind.FILE, value=value)

    @property
    def is_url(self) -> bool:
        return self.kind is LocationKind.URL

    def __str__(self) -> str:
        return self.value
