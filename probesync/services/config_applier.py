import logging
from dataclasses import dataclass
from typing import Optional, Union

from probesync.domain.probe import ConfigurationDocument
from probesync.exceptions import DocumentInvalidError
from probesync.services.config_document_parser import ConfigDocumentParser
from probesync.services.config_snapshot import ConfigSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplyResult:
    ok: bool
    changed: bool = False
    document: Optional[ConfigurationDocument] = None
    error: Optional[DocumentInvalidError] = None


class ConfigApplier:
    """Validate a fetched document and, if valid, replace the shared snapshot.

    The snapshot is never touched when parsing or validation fails; the
    failure is returned so the calling watcher can report it and keep going.
    """

    def __init__(self, *, snapshot: ConfigSnapshot, parser: Optional[ConfigDocumentParser] = None):
        self.snapshot = snapshot
        self.parser = parser or ConfigDocumentParser()

    def apply(self, raw: Union[bytes, str], *, source: Optional[str] = None) -> ApplyResult:
        try:
            document = self.parser.parse_raw(raw, source=source)
        except DocumentInvalidError as e:
            return ApplyResult(ok=False, error=e)

        changed = self.snapshot.replace(document)
        if changed:
            logger.info(
                "Applied config from %s: %d probe(s), fingerprint=%s",
                source or "<unknown>", len(document.probes), document.fingerprint[:12],
            )
        else:
            logger.debug("Config from %s unchanged; snapshot kept", source or "<unknown>")
        return ApplyResult(ok=True, changed=changed, document=document)
