import threading

import pytest

from probesync.services.config_document_parser import ConfigDocumentParser
from probesync.services.config_snapshot import ConfigSnapshot, current_config, shared_snapshot


def _doc(probe_id: str, url: str = "https://example.com"):
    return ConfigDocumentParser().parse({"probes": [{"id": probe_id, "requests": [{"url": url}]}]})


def test_empty_until_first_replace():
    snap = ConfigSnapshot()
    assert snap.get() is None
    assert snap.version == 0


def test_initial_document():
    doc = _doc("1")
    snap = ConfigSnapshot(initial=doc)
    assert snap.get() is doc
    assert snap.version == 1


def test_replace_swaps_and_bumps_version():
    snap = ConfigSnapshot()
    d1, d2 = _doc("1"), _doc("2")
    assert snap.replace(d1) is True
    assert snap.replace(d2) is True
    assert snap.get() is d2
    assert snap.version == 2


def test_replace_with_same_content_is_a_no_op():
    snap = ConfigSnapshot()
    first = _doc("1")
    snap.replace(first)
    assert snap.replace(_doc("1")) is False
    assert snap.get() is first
    assert snap.version == 1


def test_replace_requires_document():
    with pytest.raises(ValueError):
        ConfigSnapshot().replace(None)


def test_listeners_called_only_on_change():
    snap = ConfigSnapshot()
    seen = []
    snap.subscribe(seen.append)
    snap.replace(_doc("1"))
    snap.replace(_doc("1"))
    snap.replace(_doc("2"))
    assert [d.probes[0].id for d in seen] == ["1", "2"]

    snap.unsubscribe(seen.append)
    snap.replace(_doc("3"))
    assert len(seen) == 2


def test_failing_listener_does_not_block_replace(caplog):
    snap = ConfigSnapshot()

    def boom(_doc):
        raise RuntimeError("listener bug")

    seen = []
    snap.subscribe(boom)
    snap.subscribe(seen.append)
    assert snap.replace(_doc("1")) is True
    assert snap.get().probes[0].id == "1"
    assert len(seen) == 1
    assert "listener" in caplog.text


def test_unsubscribe_unknown_listener_is_ignored():
    ConfigSnapshot().unsubscribe(lambda d: None)


def test_reset_clears_document_and_listeners():
    snap = ConfigSnapshot()
    seen = []
    snap.subscribe(seen.append)
    snap.replace(_doc("1"))
    snap.reset()
    assert snap.get() is None
    assert snap.version == 0
    snap.replace(_doc("2"))
    assert len(seen) == 1


def test_current_config_reads_shared_snapshot():
    assert current_config() is None
    doc = _doc("1")
    shared_snapshot().replace(doc)
    assert current_config() is doc


def test_readers_never_observe_torn_documents():
    snap = ConfigSnapshot()
    docs = [_doc(str(i), url=f"https://example.com/{i}") for i in range(50)]
    snap.replace(docs[0])
    stop = threading.Event()
    bad = []

    def reader():
        while not stop.is_set():
            d = snap.get()
            probe = d.probes[0]
            if probe.requests[0].url != f"https://example.com/{probe.id}":
                bad.append(d)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()

    def writer(offset):
        for d in docs[offset::2]:
            snap.replace(d)

    writers = [threading.Thread(target=writer, args=(i,)) for i in range(2)]
    for t in writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()

    assert bad == []
    assert snap.get() in docs
