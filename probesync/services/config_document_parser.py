import hashlib
import json
from typing import Any, Optional, Union

import yaml

from probesync.domain.probe import ConfigurationDocument, Probe, ProbeRequest, freeze, frozen_mapping
from probesync.exceptions import DocumentInvalidError

_PROBE_KEYS = {"id", "name", "interval", "requests"}


class ConfigDocumentParser:
    """Turn raw bytes into a validated ConfigurationDocument.

    Responsibility: decoding and schema checks. It does NOT fetch anything and
    does NOT touch the shared snapshot. Every rejection is a
    DocumentInvalidError naming the offending field.
    """

    def load(self, raw: Union[bytes, str], *, source: Optional[str] = None) -> dict:
        """Decode `raw` as JSON, falling back to YAML, and return the mapping."""
        if isinstance(raw, bytes):
            try:
                text = raw.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise DocumentInvalidError(f"not valid UTF-8: {e}", source) from e
        else:
            text = raw

        if text.strip() == "":
            raise DocumentInvalidError("document is empty", source)

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise DocumentInvalidError(f"neither JSON nor YAML: {e}", source) from e

        if not isinstance(data, dict):
            raise DocumentInvalidError("top level must be a mapping", source)
        _check_keys(data, "", source)
        return data

    def parse(self, data: dict, *, source: Optional[str] = None) -> ConfigurationDocument:
        probes_data = data.get("probes")
        if not isinstance(probes_data, list) or len(probes_data) == 0:
            raise DocumentInvalidError("'probes' must be a non-empty list", source)

        probes = []
        seen_ids: set[str] = set()
        for index, item in enumerate(probes_data):
            probe = self._parse_probe(item, index=index, source=source)
            if probe.id in seen_ids:
                raise DocumentInvalidError(f"duplicate probe id {probe.id!r}", source)
            seen_ids.add(probe.id)
            probes.append(probe)

        settings = {k: v for k, v in data.items() if k != "probes"}
        return ConfigurationDocument(
            probes=tuple(probes),
            settings=frozen_mapping(settings),
            fingerprint=_fingerprint(data, source),
        )

    def parse_raw(self, raw: Union[bytes, str], *, source: Optional[str] = None) -> ConfigurationDocument:
        return self.parse(self.load(raw, source=source), source=source)

    def _parse_probe(self, item: Any, *, index: int, source: Optional[str]) -> Probe:
        if not isinstance(item, dict):
            raise DocumentInvalidError(f"probes[{index}] must be a mapping", source)

        probe_id = item.get("id")
        if isinstance(probe_id, bool) or not isinstance(probe_id, (str, int)) or str(probe_id).strip() == "":
            raise DocumentInvalidError(f"probes[{index}].id is required", source)
        probe_id = str(probe_id)

        requests_data = item.get("requests", [])
        if requests_data is None:
            requests_data = []
        if not isinstance(requests_data, list):
            raise DocumentInvalidError(f"probes[{index}].requests must be a list", source)

        requests = tuple(
            self._parse_request(r, where=f"probes[{index}].requests[{i}]", source=source)
            for i, r in enumerate(requests_data)
        )

        name = item.get("name") or probe_id
        return Probe(
            id=probe_id,
            name=str(name),
            requests=requests,
            interval=_positive_number(item.get("interval"), f"probes[{index}].interval", source),
            extra=frozen_mapping({k: v for k, v in item.items() if k not in _PROBE_KEYS}),
        )

    def _parse_request(self, item: Any, *, where: str, source: Optional[str]) -> ProbeRequest:
        if not isinstance(item, dict):
            raise DocumentInvalidError(f"{where} must be a mapping", source)

        url = item.get("url")
        if not isinstance(url, str) or url.strip() == "":
            raise DocumentInvalidError(f"{where}.url is required", source)

        method = item.get("method") or "GET"
        if not isinstance(method, str):
            raise DocumentInvalidError(f"{where}.method must be a string", source)

        headers = item.get("headers")
        if headers is None:
            headers = {}
        if not isinstance(headers, dict):
            raise DocumentInvalidError(f"{where}.headers must be a mapping", source)

        return ProbeRequest(
            url=url.strip(),
            method=method.strip().upper(),
            headers=frozen_mapping(headers),
            body=freeze(item.get("body")),
            timeout=_positive_number(item.get("timeout"), f"{where}.timeout", source),
        )


def _positive_number(value: Any, where: str, source: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise DocumentInvalidError(f"{where} must be a positive number", source)
    return value


def _check_keys(value: Any, where: str, source: Optional[str]) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise DocumentInvalidError(f"key {key!r} at {where or '<root>'} must be a string", source)
            _check_keys(item, f"{where}.{key}" if where else key, source)
    elif isinstance(value, list):
        for i, item in enumerate(value):
            _check_keys(item, f"{where}[{i}]", source)


def _fingerprint(data: dict, source: Optional[str]) -> str:
    try:
        return fingerprint(data)
    except (TypeError, ValueError) as e:
        raise DocumentInvalidError(f"cannot fingerprint document: {e}", source) from e


def fingerprint(data: dict) -> str:
    """Content hash of a parsed document; key order does not matter."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
