# tests/test_request_logging.py
from __future__ import annotations

import json
import logging

from fastapi.testclient import TestClient

from backoffice.logging_config import JsonFormatter
from backoffice.main import create_app
from backoffice.middleware.request_id import pick_request_id, request_id_ctx


def test_pick_request_id():
    assert pick_request_id("abc-123") == "abc-123"
    assert pick_request_id("  abc  ") == "abc"

    generated = pick_request_id(None)
    assert len(generated) == 32
    assert pick_request_id("x" * 65) != "x" * 65
    assert pick_request_id("bad id\nwith newline") != "bad id\nwith newline"


def test_json_formatter_carries_request_id_and_extras():
    record = logging.LogRecord("backoffice.storage", logging.INFO, __file__, 1, "rent %s created", ("r1",), None)
    record.rent_id = "r1"

    token = request_id_ctx.set("req-9")
    try:
        line = json.loads(JsonFormatter().format(record))
    finally:
        request_id_ctx.reset(token)

    assert line["message"] == "rent r1 created"
    assert line["logger"] == "backoffice.storage"
    assert line["request_id"] == "req-9"
    assert line["rent_id"] == "r1"
    assert "user_id" not in line


def test_unsafe_incoming_request_id_is_replaced():
    client = TestClient(create_app())
    r = client.get("/api/health", headers={"X-Request-ID": "a" * 100})
    assert r.status_code == 200
    assert r.headers["X-Request-ID"] != "a" * 100
    assert len(r.headers["X-Request-ID"]) == 32
