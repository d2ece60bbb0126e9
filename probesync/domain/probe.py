from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


def freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of `freeze`: plain dicts and lists, safe to hand out and mutate."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return [thaw(v) for v in value]
    return value


def frozen_mapping(data: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    return freeze(dict(data or {}))


@dataclass(frozen=True)
class ProbeRequest:
    """One HTTP request a probe performs."""

    url: str
    method: str = "GET"
    headers: Mapping[str, Any] = field(default_factory=frozen_mapping)
    body: Optional[Any] = None
    timeout: Optional[float] = None

@dataclass(frozen=True)
class Probe:
    """A monitored target: an id plus the requests to run against it.

    Keys the watcher does not interpret (alerts, per-probe notifications, ...)
    are kept untouched in `extra` for the probe-execution engine.
    """

    id: str
    name: str
    requests: tuple[ProbeRequest, ...] = ()
    interval: Optional[float] = None
    extra: Mapping[str, Any] = field(default_factory=frozen_mapping)

    def to_dict(self) -> dict:
        return {
            **thaw(self.extra),
            "id": self.id,
            "name": self.name,
            "interval": self.interval,
            "requests": [
                {
                    "url": r.url,
                    "method": r.method,
                    "headers": thaw(r.headers),
                    "body": thaw(r.body),
                    "timeout": r.timeout,
                }
                for r in self.requests
            ],
        }


@dataclass(frozen=True)
class ConfigurationDocument:
    """A validated configuration: probes plus the remaining top-level settings.

    `fingerprint` identifies the content and is excluded from equality so two
    documents built from the same data compare equal. Nested values are frozen
    too; use `to_dict` for a mutable copy.
    """

    probes: tuple[Probe, ...]
    settings: Mapping[str, Any] = field(default_factory=frozen_mapping)
    fingerprint: str = field(default="", compare=False)

    def get_probe(self, probe_id: str) -> Optional[Probe]:
        for probe in self.probes:
            if probe.id == probe_id:
                return probe
        return None

    def to_dict(self) -> dict:
        """Plain JSON-friendly representation (used by the HTTP API)."""
        return {
            "probes": [p.to_dict() for p in self.probes],
            **thaw(self.settings),
        }
