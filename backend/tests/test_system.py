import asyncio

from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.system.timeout import RequestTimeoutMiddleware


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_ready_checks_the_database(client):
    assert client.get("/ready").json() == {"status": "ready"}


def test_security_headers_are_set(client):
    r = client.get("/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/v1/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Not Found"}


def test_malformed_body_is_400_with_envelope(client):
    r = client.post("/api/v1/user/login", content="not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_slow_requests_time_out():
    app = FastAPI()
    app.add_middleware(RequestTimeoutMiddleware, timeout=0.05)

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(0.3)
        return {"done": True}

    @app.get("/fast")
    async def fast():
        return {"done": True}

    with TestClient(app) as c:
        r = c.get("/slow")
        assert r.status_code == 504
        assert r.json() == {"success": False, "message": "Request timed out"}
        assert c.get("/fast").status_code == 200
