from probesync.api.routers.systems import create_systems_router


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        methods = getattr(route, "methods", set())
        if method.upper() in methods:
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def test_health():
    router = create_systems_router({})
    assert _get_endpoint(router, "/systems/health", "GET")() == {"status": "ok"}


def test_config_stringifies_values():
    router = create_systems_router({"HTTP_TIMEOUT": 10, "ADMIN": None, "PROBESYNC_CONFIG": ["a.json"]})
    body = _get_endpoint(router, "/systems/config", "GET")()
    assert body == {"environment": {"HTTP_TIMEOUT": "10", "ADMIN": None, "PROBESYNC_CONFIG": ["a.json"]}}
