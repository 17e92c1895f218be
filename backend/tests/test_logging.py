"""Tests for the request log line and the JSON log format."""
import json
import logging

import pytest
from httpx import AsyncClient

from printquote.logging_config import JSONFormatter


def _request_records(caplog, path: str) -> list[logging.LogRecord]:
    return [
        record
        for record in caplog.records
        if record.name == "printquote.requests" and record.http_path == path
    ]


@pytest.mark.asyncio
async def test_request_log_names_the_caller(master: AsyncClient, make_client, caplog) -> None:
    caplog.set_level(logging.INFO, logger="printquote.requests")
    me = (await master.get("/api/auth/me")).json()
    anonymous = await make_client()

    await master.get("/api/clients")
    await anonymous.get("/api/clients")

    served, refused = _request_records(caplog, "/api/clients")
    assert served.user_id == me["id"]
    assert served.http_status == 200
    assert served.levelno == logging.INFO
    assert served.request_id
    assert refused.user_id is None
    assert refused.http_status == 401
    assert refused.levelno == logging.WARNING


def test_json_formatter_emits_request_fields() -> None:
    record = logging.LogRecord("printquote.requests", logging.INFO, __file__, 1, "GET /x", None, None)
    record.request_id = "abc"
    record.user_id = None
    record.http_status = 200

    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "GET /x"
    assert entry["request_id"] == "abc"
    assert entry["http_status"] == 200
    assert "user_id" not in entry
