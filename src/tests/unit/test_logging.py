"""Unit tests for structured logging."""

import json

import pytest
from loguru import logger

from src.shared.context import bind_request, clear_request
from src.shared.logging import log_crud_completed, log_crud_failed
from src.shared.logging.config import _context_patcher, json_formatter


@pytest.fixture
def captured():
    """Capture loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def test_client_errors_are_warnings(captured):
    log_crud_failed("cachegroups", "create", "'name' cannot be blank", error_code="VALIDATION")
    log_crud_failed("cachegroups", "create", "Database error", error_code="PERSISTENCE")

    assert [r["level"].name for r in captured] == ["WARNING", "ERROR"]
    assert captured[0]["extra"]["event"] == "crud.failed"


def test_completed_event_fields(captured):
    log_crud_completed("cdns", "read", count=2)

    extra = captured[0]["extra"]
    assert extra["resource"] == "cdns"
    assert extra["operation"] == "read"
    assert extra["count"] == 2


def test_json_entry_has_correlation_ids(captured):
    bind_request(request_id="req-42")
    try:
        logger.patch(_context_patcher).info("hello", password="hunter2")
    finally:
        clear_request()

    entry = json.loads(json_formatter(captured[0]))
    assert entry["message"] == "hello"
    assert entry["request_id"] == "req-42"
    assert entry["trace_id"] == "req-42"
    assert entry["password"] == "***REDACTED***"
