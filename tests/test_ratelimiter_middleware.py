import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from batchembed.ratelimiter.contracts import Policy
from batchembed.ratelimiter.middleware import RateLimiterMiddleware, client_key
from batchembed.ratelimiter.service import RateLimiterService
from batchembed.ratelimiter.store import InMemoryStore


@pytest.mark.anyio
async def test_middleware_basic_flow():
    app = FastAPI()

    # Deterministic clock for service used by middleware
    t = {"now": 0.0}
    def now():
        return t["now"]
    svc = RateLimiterService(Policy(rate=2, burst=2), store=InMemoryStore(), now=now)

    app.add_middleware(RateLimiterMiddleware, service=svc, skip_paths=[r"^/healthz$"])

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.get("/echo")
    async def echo():
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        # healthz should bypass
        for _ in range(5):
            assert (await ac.get("/healthz")).status_code == 200

        # allow 2, then deny
        r1 = await ac.get("/echo")
        assert r1.status_code == 200
        assert "X-RateLimit-Limit" in r1.headers
        r2 = await ac.get("/echo")
        assert r2.status_code == 200
        r3 = await ac.get("/echo")
        assert r3.status_code == 429
        assert r3.json()["code"] == "too_many_requests"
        assert r3.headers["Retry-After"] == "1"

        # other clients have their own bucket
        r_other = await ac.get("/echo", headers={"Authorization": "Bearer other"})
        assert r_other.status_code == 200

        # advance time → allow again
        t["now"] += 1.0
        r4 = await ac.get("/echo")
        assert r4.status_code == 200


class _Req:
    def __init__(self, headers, host="10.0.0.1"):
        self.headers = headers
        self.client = type("C", (), {"host": host})()


def test_client_key_precedence():
    assert client_key(_Req({"X-RapidAPI-User": "u1", "Authorization": "Bearer k"})) == "rapidapi:u1"
    assert client_key(_Req({"Authorization": "Bearer k"})) == "auth:Bearer k"
    assert client_key(_Req({})) == "ip:10.0.0.1"
