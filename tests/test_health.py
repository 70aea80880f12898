from fastapi.testclient import TestClient

from app.main import app


def test_health_reports_backends():
    with TestClient(app) as c:
        r = c.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "store": "memory", "cache": "memory"}


def test_request_id_is_generated_or_echoed():
    with TestClient(app) as c:
        assert c.get("/health").headers["X-Request-ID"]
        r = c.get("/health", headers={"X-Request-ID": "req-123"})
        assert r.headers["X-Request-ID"] == "req-123"


def test_unknown_route_is_404():
    with TestClient(app) as c:
        assert c.get("/v1/nope").status_code == 404
