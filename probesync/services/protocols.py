"""Protocol (interface) definitions for services."""

from typing import Protocol


class ConfigSource(Protocol):
    """Something that can be asked, on demand, for the current raw config document.

    Implementations raise SourceUnreachableError when the document cannot be
    produced and must never touch the shared snapshot themselves.
    """

    @property
    def location(self) -> str: ...

    def fetch(self) -> bytes: ...
