from unittest.mock import Mock

import pytest
import requests

from probesync.exceptions import SourceUnreachableError
from probesync.services.config_sources import FileConfigSource, UrlConfigSource
from probesync.services.http_service import HttpService

URL = "https://example.com/monika.json"


def _http(status_code=200, text="{}", side_effect=None):
    client = Mock()
    client.return_value.status_code = status_code
    client.return_value.text = text
    client.return_value.headers = {}
    if side_effect is not None:
        client.side_effect = side_effect
    return HttpService(user_agent="TestAgent", http_client=client)


def test_url_source_returns_body_bytes():
    source = UrlConfigSource(URL, _http(text='{"probes": []}'))
    assert source.fetch() == b'{"probes": []}'
    assert source.location == URL


@pytest.mark.parametrize("status", [301, 404, 500, 503])
def test_url_source_non_success_status_is_unreachable(status):
    source = UrlConfigSource(URL, _http(status_code=status))
    with pytest.raises(SourceUnreachableError) as e:
        source.fetch()
    assert e.value.status_code == status
    assert e.value.location == URL


def test_url_source_transport_error_is_unreachable():
    source = UrlConfigSource(URL, _http(side_effect=requests.exceptions.Timeout("timed out")))
    with pytest.raises(SourceUnreachableError) as e:
        source.fetch()
    assert e.value.status_code is None
    assert "timed out" in str(e.value)


def test_file_source_reads_bytes(tmp_path):
    cfg = tmp_path / "monika.json"
    cfg.write_bytes(b'{"probes": []}')
    source = FileConfigSource(str(cfg))
    assert source.exists()
    assert source.fetch() == b'{"probes": []}'


def test_file_source_missing_file_is_unreachable(tmp_path):
    source = FileConfigSource(str(tmp_path / "missing.json"))
    assert not source.exists()
    with pytest.raises(SourceUnreachableError):
        source.fetch()


def test_file_source_directory_does_not_exist_as_file(tmp_path):
    assert not FileConfigSource(str(tmp_path)).exists()
