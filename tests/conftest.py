import time

import pytest

from probesync.services.config_snapshot import shared_snapshot


@pytest.fixture(autouse=True)
def _reset_shared_snapshot():
    shared_snapshot().reset()
    yield
    shared_snapshot().reset()


@pytest.fixture
def wait_until():
    """Poll `predicate` until it is truthy or `timeout` seconds pass."""

    def _wait(predicate, timeout: float = 5.0, interval: float = 0.05) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return bool(predicate())

    return _wait
