from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from probesync.api.routers.watchers import StartWatchersRequest, create_watchers_router
from probesync.domain.location import ConfigLocation
from probesync.exceptions import WatchSetupError
from probesync.services.watcher_registry import StartResult, WatchFailure


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        methods = getattr(route, "methods", set())
        if method.upper() in methods:
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def test_list_active_watchers():
    registry = Mock(list_active=Mock(return_value=[{"id": "w1", "status": "running"}]))
    endpoint = _get_endpoint(create_watchers_router(registry), "/watchers", "GET")

    assert endpoint() == {"active": [{"id": "w1", "status": "running"}]}


def test_get_watcher_404_when_missing():
    registry = Mock(get=Mock(return_value=None))
    endpoint = _get_endpoint(create_watchers_router(registry), "/watchers/{watcher_id}", "GET")

    with pytest.raises(HTTPException) as exc:
        endpoint("missing")
    assert exc.value.status_code == 404


def test_start_watchers_reports_started_and_failures():
    missing = ConfigLocation.file("missing.json")
    result = StartResult(
        handles=[SimpleNamespace(watcher_id="w1", location=ConfigLocation.url("https://example.com/monika.json"))],
        failures=[WatchFailure(location=missing, error=WatchSetupError("missing.json", "file does not exist"))],
    )
    registry = Mock(start=Mock(return_value=result))
    endpoint = _get_endpoint(create_watchers_router(registry), "/watchers", "POST")

    body = endpoint(StartWatchersRequest(locations=["https://example.com/monika.json", "missing.json"], poll_interval_seconds=30))

    registry.start.assert_called_once_with(["https://example.com/monika.json", "missing.json"], poll_interval_seconds=30)
    assert body["started"] == [{"watcher_id": "w1", "location": "https://example.com/monika.json"}]
    assert body["failures"][0]["location"] == "missing.json"
    assert "file does not exist" in body["failures"][0]["reason"]


@pytest.mark.parametrize("req", [
    StartWatchersRequest(locations=[]),
    StartWatchersRequest(locations=["a.json"], poll_interval_seconds=0),
])
def test_start_watchers_rejects_bad_requests(req):
    registry = Mock()
    endpoint = _get_endpoint(create_watchers_router(registry), "/watchers", "POST")

    with pytest.raises(HTTPException) as exc:
        endpoint(req)
    assert exc.value.status_code == 400
    registry.start.assert_not_called()


def test_cancel_watcher():
    registry = Mock(cancel=Mock(side_effect=[True, False]))
    endpoint = _get_endpoint(create_watchers_router(registry), "/watchers/{watcher_id}", "DELETE")

    assert endpoint("w1") == {"status": "cancelled", "watcher_id": "w1"}
    with pytest.raises(HTTPException) as exc:
        endpoint("w1")
    assert exc.value.status_code == 404
