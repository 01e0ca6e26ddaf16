import json
import time

import pytest
from fastapi.testclient import TestClient

from batchembed.apigateway.app import create_app
from batchembed.ratelimiter import Policy, RateLimiterService
from batchembed.workerpool.errors import PoolNotRunning

AUTH = {"Authorization": "Bearer test-api-key"}


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings=settings)) as c:
        yield c


def wait_for_terminal(client, job_id, timeout=10.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        body = client.get(f"/v1/jobs/{job_id}", headers=AUTH).json()
        if body["status"] in ("completed", "failed"):
            return body
        time.sleep(0.05)
    raise AssertionError(f"job {job_id} did not finish")


def test_health_is_public(client):
    r = client.get("/v1/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "version": "1.0.0", "queue_depth": 0}


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer nope"},
        {"Authorization": "Token test-api-key"},
    ],
)
def test_embed_requires_valid_key(client, headers):
    r = client.post("/v1/embed", json={"model": "m", "inputs": [{"id": "d", "text": "x"}]}, headers=headers)
    assert r.status_code == 401
    assert r.json()["code"] == "unauthorized"


def test_rapidapi_proxy_secret_is_accepted(settings):
    settings = settings.model_copy(update={"RAPIDAPI_PROXY_SECRET": "proxy-s3cret"})
    with TestClient(create_app(settings=settings)) as c:
        r = c.get("/v1/jobs", headers={"X-RapidAPI-Proxy-Secret": "proxy-s3cret"})
    assert r.status_code == 200


def test_embed_hello_world(client):
    r = client.post(
        "/v1/embed",
        json={"model": "embed-large-512", "inputs": [{"id": "doc1", "text": "hello world"}]},
        headers=AUTH,
    )
    assert r.status_code == 200
    results = r.json()["results"]
    assert len(results) == 1
    assert results[0]["id"] == "doc1"
    assert len(results[0]["embeddings"]) == 32
    assert "chunks" not in results[0]


def test_embed_split_returns_chunks(client):
    r = client.post(
        "/v1/embed",
        json={
            "model": "m",
            "inputs": [{"id": "long", "text": "x" * 250}],
            "truncate_strategy": "split",
            "chunk_size": 100,
            "normalize": True,
        },
        headers=AUTH,
    )
    chunks = r.json()["results"][0]["chunks"]
    assert [(c["start"], c["end"]) for c in chunks] == [(0, 100), (100, 200), (200, 250)]
    assert [c["chunk_id"] for c in chunks] == ["long_0", "long_1", "long_2"]


@pytest.mark.parametrize(
    "extra",
    [
        {"chunk_size": -1},
        {"chunk_size": 9000},
        {"truncate_strategy": "shred"},
    ],
)
def test_embed_rejects_bad_options(client, extra):
    body = {"model": "m", "inputs": [{"id": "d", "text": "x"}], **extra}
    r = client.post("/v1/embed", json=body, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"


def test_embed_schema_errors_are_400(client):
    r = client.post("/v1/embed", json={"model": "m", "inputs": []}, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"


def test_embed_batch_limit(client):
    inputs = [{"id": str(i), "text": "t"} for i in range(101)]
    r = client.post("/v1/embed", json={"model": "m", "inputs": inputs}, headers=AUTH)
    assert r.status_code == 413


def test_embed_file_upload(client):
    r = client.post(
        "/v1/embed/file",
        files={"file": ("note.txt", b"hello from a file", "text/plain")},
        data={"model": "m", "truncate_strategy": "split"},
        headers=AUTH,
    )
    assert r.status_code == 200
    result = r.json()["results"][0]
    assert result["id"] == "note.txt"
    assert len(result["embeddings"]) == 32


def test_embed_file_rejects_other_types(client):
    r = client.post(
        "/v1/embed/file",
        files={"file": ("photo.png", b"\x89PNG", "image/png")},
        headers=AUTH,
    )
    assert r.status_code == 400


def test_job_lifecycle_and_results_download(client, tmp_path):
    a = tmp_path / "a.txt"
    a.write_text("alpha " * 300)
    b = tmp_path / "b.txt"
    b.write_text("beta")

    r = client.post("/v1/jobs", json={"model": "m", "files": [str(a), str(b)]}, headers=AUTH)
    assert r.status_code == 202
    accepted = r.json()
    assert accepted["status"] == "queued"

    job = wait_for_terminal(client, accepted["job_id"])
    assert job["status"] == "completed"
    assert job["progress"] == 100
    assert job["result_urls"] == [f"/v1/results/{accepted['job_id']}_results.json"]
    assert "error" not in job

    r = client.get(job["result_urls"][0], headers=AUTH)
    assert r.status_code == 200
    doc = json.loads(r.content)
    assert [resp["results"][0]["id"] for resp in doc] == ["a.txt", "b.txt"]
    assert "chunks" in doc[0]["results"][0]
    assert "embeddings" in doc[1]["results"][0]


def test_job_with_missing_file_fails(client, tmp_path):
    r = client.post("/v1/jobs", json={"model": "m", "files": [str(tmp_path / "gone.txt")]}, headers=AUTH)
    job = wait_for_terminal(client, r.json()["job_id"])
    assert job["status"] == "failed"
    assert job["error"]["code"] == "download_failed"
    assert "result_urls" not in job


def test_job_rejects_bare_names(client):
    r = client.post("/v1/jobs", json={"model": "m", "files": ["report.pdf"]}, headers=AUTH)
    assert r.status_code == 400


def test_unknown_job_and_result(client):
    assert client.get("/v1/jobs/does-not-exist", headers=AUTH).status_code == 404
    assert client.get("/v1/results/does-not-exist.json", headers=AUTH).status_code == 404


def test_list_jobs(client, tmp_path):
    f = tmp_path / "x.txt"
    f.write_text("x")
    ids = {client.post("/v1/jobs", json={"model": "m", "files": [str(f)]}, headers=AUTH).json()["job_id"] for _ in range(3)}
    listed = client.get("/v1/jobs", headers=AUTH).json()["jobs"]
    assert {j["job_id"] for j in listed} == ids


def test_rate_limit_returns_429(settings):
    limiter = RateLimiterService(Policy(rate=1, burst=1), now=lambda: 0.0)
    with TestClient(create_app(settings=settings, rate_limiter=limiter)) as c:
        assert c.get("/v1/jobs", headers=AUTH).status_code == 200
        r = c.get("/v1/jobs", headers=AUTH)
        assert r.status_code == 429
        assert r.headers["Retry-After"] == "1"
        assert r.json()["code"] == "too_many_requests"
        # health is exempt
        assert c.get("/v1/health").status_code == 200


def test_embed_rejects_empty_text(client):
    r = client.post("/v1/embed", json={"model": "m", "inputs": [{"id": "d", "text": ""}]}, headers=AUTH)
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"


def test_job_rejects_non_http_callback(client, tmp_path):
    f = tmp_path / "x.txt"
    f.write_text("x")
    r = client.post(
        "/v1/jobs",
        json={"model": "m", "files": [str(f)], "callback_url": "ftp://cb.test/hook"},
        headers=AUTH,
    )
    assert r.status_code == 400
    assert client.get("/v1/jobs", headers=AUTH).json()["jobs"] == []


def test_job_refused_after_pool_stop_leaves_no_record(client, tmp_path):
    f = tmp_path / "x.txt"
    f.write_text("x")
    container = client.app.state.container
    container.pool.stop()

    r = client.post("/v1/jobs", json={"model": "m", "files": [str(f)]}, headers=AUTH)

    assert r.status_code == 503
    assert r.json()["code"] == "service_unavailable"
    assert container.registry.list() == []
    assert client.get("/v1/health").json()["queue_depth"] == 0


def test_job_dropped_when_enqueue_is_rejected(client, tmp_path, monkeypatch):
    f = tmp_path / "x.txt"
    f.write_text("x")
    container = client.app.state.container

    def refuse(job_id, timeout=None):
        raise PoolNotRunning("worker pool is stopped")

    monkeypatch.setattr(container.pool, "enqueue", refuse)
    r = client.post("/v1/jobs", json={"model": "m", "files": [str(f)]}, headers=AUTH)

    assert r.status_code == 503
    assert container.registry.list() == []


def test_shutdown_closes_outbound_clients(settings):
    app = create_app(settings=settings)
    container = app.state.container
    with TestClient(app) as c:
        assert c.get("/v1/health").status_code == 200
        assert not container.fetcher._client.is_closed

    assert not container.pool.accepting
    assert container.fetcher._client.is_closed
    assert container.notifier._client.is_closed
