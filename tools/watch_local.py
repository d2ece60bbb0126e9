import time
import logging
import os
import sys

# Ensure repo root is on sys.path so `probesync` package imports resolve when
# running the script directly.
ROOT = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, ROOT)

from probesync.container import Container
from probesync.services.config_snapshot import current_config


logging.basicConfig(level=logging.INFO)


def print_probes(document):
    print(f"config changed: {len(document.probes)} probe(s)")
    for probe in document.probes:
        urls = ", ".join(r.url for r in probe.requests)
        print(f"  {probe.id}: {urls}")


def main(argv):
    locations = argv[1:] or ["monika.json"]
    container = Container()
    container.snapshot().subscribe(print_probes)
    registry = container.watcher_registry()

    result = registry.start(locations, poll_interval_seconds=5)
    for failure in result.failures:
        print(f"could not watch {failure.location}: {failure.reason}")
    if not result.handles:
        return 1

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        result.cancel_all()

    doc = current_config()
    print(f"final config fingerprint: {doc.fingerprint if doc else None}")
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
