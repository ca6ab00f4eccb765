import httpx
import pytest

from comment_digest.core.config import Settings
from comment_digest.services.comments import normalizer

from conftest import COMMENTS, gemini_reply, sent_prompt


def test_summarize_success(make_client, upstream_calls):
    client = make_client()
    resp = client.post("/summarize", json={"comments": COMMENTS, "metadata": {"videoId": "xyz"}})

    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"] == "Hello"
    meta = body["metadata"]
    assert meta["commentsProcessed"] == 4
    assert meta["originalCount"] == 4
    assert meta["analysisType"] == "simple"
    assert meta["timestamp"].endswith("Z")
    assert meta["requestId"] == resp.headers["X-Request-ID"]

    assert len(upstream_calls) == 1
    assert upstream_calls[0].headers["x-request-id"] == meta["requestId"]


def test_counts_reflect_normalization(make_client):
    client = make_client()
    comments = COMMENTS + [COMMENTS[0], "ok", "first", 17]
    body = client.post("/summarize", json={"comments": comments}).json()

    assert body["metadata"]["commentsProcessed"] == 4
    assert body["metadata"]["originalCount"] == 8


def test_detailed_analysis_for_large_batches(make_client, upstream_calls):
    client = make_client()
    comments = [f"viewer feedback number {i}" for i in range(30)]
    body = client.post("/summarize", json={"comments": comments}).json()

    assert body["metadata"]["analysisType"] == "detailed"
    assert "[30] viewer feedback number 29" in sent_prompt(upstream_calls[0])


def test_summary_is_formatted(make_client):
    client = make_client(lambda r: httpx.Response(200, json=gemini_reply("\n  Para one. \n\n\n\n Para two.\n")))
    body = client.post("/summarize", json={"comments": COMMENTS}).json()
    assert body["summary"] == "Para one.\n\nPara two."


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"comments": None},
        {"comments": []},
        {"comments": "not a list"},
        {"comments": {"a": "b"}},
        {"metadata": {"only": "metadata"}},
    ],
)
def test_invalid_comments_field(make_client, upstream_calls, payload):
    client = make_client()
    resp = client.post("/summarize", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid input: comments array is required and must not be empty"}
    assert upstream_calls == []


def test_non_json_body_is_rejected(make_client, upstream_calls):
    client = make_client()
    resp = client.post("/summarize", content=b"comments=1", headers={"Content-Type": "text/plain"})
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert upstream_calls == []


def test_too_many_comments_skips_normalization(make_client, upstream_calls, monkeypatch):
    def _boom(*args, **kwargs):
        raise AssertionError("normalization should not run")

    monkeypatch.setattr(normalizer, "normalize_comments", _boom)
    client = make_client()
    resp = client.post("/summarize", json={"comments": [f"comment body {i}" for i in range(201)]})

    assert resp.status_code == 400
    assert "maximum 200" in resp.json()["error"]
    assert upstream_calls == []


def test_exactly_max_comments_is_accepted(make_client):
    client = make_client()
    resp = client.post("/summarize", json={"comments": [f"comment body {i}" for i in range(200)]})
    assert resp.status_code == 200
    assert resp.json()["metadata"]["commentsProcessed"] == 120
    assert resp.json()["metadata"]["originalCount"] == 200


def test_insufficient_meaningful_comments(make_client, upstream_calls):
    client = make_client()
    resp = client.post(
        "/summarize",
        json={"comments": ["first", "ok", "https://spam.example/buy-now", COMMENTS[0], COMMENTS[0], COMMENTS[1]]},
    )
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Insufficient comments")
    assert upstream_calls == []


def test_malformed_upstream_response_is_502(make_client):
    client = make_client(lambda r: httpx.Response(200, json={"candidates": [{"content": {}}]}))
    resp = client.post("/summarize", json={"comments": COMMENTS})

    assert resp.status_code == 502
    assert resp.json() == {"error": "Invalid response from AI service"}


def test_upstream_timeout_is_generic_500(make_client):
    def handler(request):
        raise httpx.ConnectTimeout("connect timeout", request=request)

    client = make_client(handler)
    resp = client.post("/summarize", json={"comments": COMMENTS})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate summary"}


def test_upstream_error_status_is_generic_500(make_client):
    client = make_client(lambda r: httpx.Response(400, json={"error": {"message": "API key not valid"}}))
    resp = client.post("/summarize", json={"comments": COMMENTS})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate summary"}
    assert "API key" not in resp.text


def test_unexpected_failure_is_caught(make_client, monkeypatch):
    from comment_digest.services.summarize import pipeline

    def _broken(raw, separator="\n\n"):
        raise RuntimeError("formatter exploded")

    monkeypatch.setattr(pipeline, "format_summary", _broken)
    client = make_client(raise_server_exceptions=False)
    resp = client.post("/summarize", json={"comments": COMMENTS})

    assert resp.status_code == 500
    body = resp.json()
    assert body["error"] == "Internal server error"
    assert body["requestId"]
    assert "exploded" not in resp.text


def test_unknown_route_uses_error_envelope(make_client):
    resp = make_client().get("/nope")
    assert resp.status_code == 404
    assert "error" in resp.json()


def test_oversized_body_is_rejected_before_parsing(make_client, upstream_calls, monkeypatch):
    def _boom(*args, **kwargs):
        raise AssertionError("normalization should not run")

    monkeypatch.setattr(normalizer, "normalize_comments", _boom)
    client = make_client()
    resp = client.post("/summarize", json={"comments": ["x " * 1_500_000] + COMMENTS})

    assert resp.status_code == 413
    assert resp.json()["error"].startswith("Payload too large")
    assert resp.headers["X-Request-ID"]
    assert upstream_calls == []


def test_body_limit_follows_settings(make_client, upstream_calls):
    small = Settings(_env_file=None, GEMINI_API_KEY="test-key", MAX_BODY_BYTES=1024)
    client = make_client(app_settings=small)

    assert client.post("/summarize", json={"comments": COMMENTS}).status_code == 200
    resp = client.post("/summarize", json={"comments": COMMENTS + ["long comment " * 100]})
    assert resp.status_code == 413
    assert "1024 bytes" in resp.json()["error"]
    assert len(upstream_calls) == 1
