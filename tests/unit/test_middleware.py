"""Request id, request log context and timeout middleware."""

import asyncio
import json
import logging

from app.middleware import RequestIDMiddleware, TimeoutMiddleware
from app.middleware.request_id import sanitize_request_id
from app.shared.context import bind_request_context, get_request_context, reset_request_context
from app.shared.telemetry import RequestContextFilter


def test_sanitize_request_id() -> None:
    assert sanitize_request_id(" abc-123_X ") == "abc-123_X"
    generated = sanitize_request_id("bad id\nwith newline")
    assert len(generated) == 36 and generated.count("-") == 4
    assert sanitize_request_id("x" * 65) != "x" * 65
    assert sanitize_request_id(None)


def test_context_filter_adds_request_fields() -> None:
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    RequestContextFilter().filter(record)
    assert (record.request_id, record.site_id) == ("-", "-")

    token = bind_request_context("req-1", user_id="u1", site_id="s1")
    try:
        RequestContextFilter().filter(record)
    finally:
        reset_request_context(token)
    assert (record.request_id, record.site_id) == ("req-1", "s1")
    assert get_request_context().request_id is None


async def _call(app, scope: dict) -> list[dict]:
    sent: list[dict] = []

    async def receive() -> dict:
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message: dict) -> None:
        sent.append(message)

    await app(scope, receive, send)
    return sent


async def _ok_app(scope, receive, send) -> None:
    await send({"type": "http.response.start", "status": 200, "headers": []})
    await send({"type": "http.response.body", "body": b"ok"})


async def test_request_id_binds_context_and_echoes_header() -> None:
    seen = {}

    async def inner(scope, receive, send) -> None:
        context = get_request_context()
        seen.update(request_id=context.request_id, site_id=context.site_id)
        await _ok_app(scope, receive, send)

    app = RequestIDMiddleware(inner)
    sent = await _call(
        app,
        {"type": "http", "headers": [(b"x-request-id", b"abc"), (b"x-site-id", b" s1 ")]},
    )

    assert seen == {"request_id": "abc", "site_id": "s1"}
    assert (b"X-Request-ID", b"abc") in sent[0]["headers"]
    assert get_request_context().request_id is None


async def test_timeout_answers_504() -> None:
    async def slow(scope, receive, send) -> None:
        await asyncio.sleep(1)
        await _ok_app(scope, receive, send)

    sent = await _call(TimeoutMiddleware(slow, timeout_seconds=0.01), {"type": "http", "path": "/x"})

    assert sent[0]["status"] == 504
    body = json.loads(sent[1]["body"])
    assert body["error"] == "GATEWAY_TIMEOUT"
    assert body["details"] == {"timeout_seconds": 0.01}


async def test_timeout_passes_fast_requests() -> None:
    sent = await _call(TimeoutMiddleware(_ok_app, timeout_seconds=1), {"type": "http"})
    assert sent[0]["status"] == 200
    assert len(sent) == 2


async def test_request_id_header_on_api_response(client) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "trace-42"})
    assert response.headers["x-request-id"] == "trace-42"

    response = await client.get("/api/v1/health", headers={"X-Request-ID": "no spaces allowed"})
    assert response.headers["x-request-id"] != "no spaces allowed"
