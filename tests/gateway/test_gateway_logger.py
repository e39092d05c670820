from __future__ import annotations

import asyncio
import json
import logging
import sys

import pytest

from evolution_mcp.config import LoggingSettings
from evolution_mcp.utils.logger import (
    SimpleFormatter,
    StructuredJsonFormatter,
    clear_request_context,
    log_duration,
    set_request_context,
    setup_logging,
)


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_keeps_extra_fields_and_unicode() -> None:
    record = _record("工具调用开始")
    record.status_code = 500

    payload = json.loads(StructuredJsonFormatter().format(record))

    assert payload["message"] == "工具调用开始"
    assert payload["status_code"] == 500
    assert payload["level"] == "INFO"
    assert "msg" not in payload


def test_json_formatter_includes_request_context() -> None:
    set_request_context(request_id="req-001", tool_name="send_text")
    try:
        payload = json.loads(StructuredJsonFormatter().format(_record("started")))
    finally:
        clear_request_context()

    assert payload["request_id"] == "req-001"
    assert payload["tool"] == "send_text"
    assert "request_id" not in json.loads(StructuredJsonFormatter().format(_record("after")))


def test_simple_formatter_appends_context_and_extras() -> None:
    set_request_context(request_id="abcdef123456", tool_name="find_contacts")
    record = _record("Evolution API call failed")
    record.status_code = 404
    try:
        line = SimpleFormatter().format(record)
    finally:
        clear_request_context()

    assert "req=abcdef12" in line
    assert "tool=find_contacts" in line
    assert "status_code=404" in line


def test_setup_logging_writes_to_stderr() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(LoggingSettings(level="debug", format="text"))

        assert root.level == logging.DEBUG
        assert root.handlers[0].stream is sys.stderr
        assert isinstance(root.handlers[0].formatter, SimpleFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_log_duration_reraises_failures() -> None:
    @log_duration("test.duration")
    async def _boom() -> None:
        raise RuntimeError("boom")

    @log_duration("test.duration")
    async def _ok() -> int:
        return 7

    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(_boom())
    assert asyncio.run(_ok()) == 7


def test_log_duration_rejects_plain_functions() -> None:
    def _plain() -> int:
        return 1

    with pytest.raises(TypeError, match="coroutine"):
        log_duration("test.duration")(_plain)
