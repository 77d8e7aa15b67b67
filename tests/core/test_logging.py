from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from types import ModuleType
from typing import Iterator

import pytest

from exception_report.core import logging as logging_module


@pytest.fixture()
def fresh_logging_module(monkeypatch: pytest.MonkeyPatch) -> Iterator[ModuleType]:
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    monkeypatch.setattr(logging_module, "_LOGGING_CONFIGURED", False)

    yield logging_module

    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)
    logging_module._LOGGING_CONFIGURED = False


def test_configure_logging_installs_json_formatter(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("debug", quiet_loggers=["noisy.lib"])

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG
    assert any(
        isinstance(handler.formatter, logging_module.JsonLogFormatter)
        for handler in root_logger.handlers
    )
    assert logging.getLogger("noisy.lib").level == logging.WARNING


def test_configure_logging_is_idempotent(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("info")
    root_logger = logging.getLogger()
    first_handlers = list(root_logger.handlers)

    fresh_logging_module.configure_logging("warning")

    assert list(root_logger.handlers) == first_handlers
    assert root_logger.level == logging.INFO


def test_unknown_level_falls_back_to_info(fresh_logging_module: ModuleType) -> None:
    fresh_logging_module.configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO


def test_json_formatter_enriches_request_context() -> None:
    token = logging_module.bind_request_id("req-123")
    logger = logging.getLogger("test-json")

    try:
        record = logger.makeRecord(
            name="test-json",
            level=logging.WARNING,
            fn="test_logging.py",
            lno=42,
            msg="Business error during request",
            args=(),
            exc_info=None,
            func="test_json_formatter_enriches_request_context",
            extra={
                "exception_id": "abc",
                "business_codes": ["FOO_01"],
                "status_code": 409,
                "captured_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
                "non_serializable": object(),
            },
        )
        formatted = logging_module.JsonLogFormatter().format(record)
    finally:
        logging_module.reset_request_id(token)

    payload = json.loads(formatted)
    assert payload["request_id"] == "req-123"
    assert payload["level"] == "WARNING"
    assert payload["message"] == "Business error during request"
    assert payload["exception_id"] == "abc"
    assert payload["business_codes"] == ["FOO_01"]
    assert payload["status_code"] == 409
    assert payload["captured_at"] == "2024-01-01T00:00:00+00:00"
    assert isinstance(payload["non_serializable"], str)


def test_json_formatter_keeps_traceback_on_one_line() -> None:
    logger = logging.getLogger("test-exc")
    try:
        raise ValueError("boom")
    except ValueError as exc:
        record = logger.makeRecord(
            name="test-exc",
            level=logging.ERROR,
            fn="test_logging.py",
            lno=1,
            msg="failed",
            args=(),
            exc_info=(type(exc), exc, exc.__traceback__),
        )

    formatted = logging_module.JsonLogFormatter().format(record)

    assert "\n" not in formatted
    assert "ValueError: boom" in json.loads(formatted)["exc_info"]


def test_request_id_unbound_by_default() -> None:
    assert logging_module.get_request_id() is None


def test_setup_exception_reporting_applies_log_level(fresh_logging_module: ModuleType) -> None:
    from fastapi import FastAPI

    from exception_report.api import setup_exception_reporting
    from exception_report.core.config import Settings

    setup_exception_reporting(
        FastAPI(),
        settings=Settings(log_level="WARNING"),
        configure_logs=True,
    )

    assert logging.getLogger().level == logging.WARNING
