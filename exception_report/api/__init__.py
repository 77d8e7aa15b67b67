"""FastAPI integration: report-producing exception handlers and request ids."""

from __future__ import annotations

from fastapi import FastAPI

from exception_report.core.config import Settings, get_settings
from exception_report.core.logging import configure_logging

from .handlers import register_exception_handlers, report_builder_for, report_response
from .middleware import RequestIDMiddleware


def setup_exception_reporting(
    app: FastAPI,
    *,
    settings: Settings | None = None,
    configure_logs: bool = False,
) -> None:
    """Install the exception handlers and the request id middleware on ``app``.

    With ``configure_logs`` the root logger is switched to JSON output at the
    configured ``LOG_LEVEL``.
    """
    resolved = settings or get_settings()
    if configure_logs:
        configure_logging(resolved.log_level)
    register_exception_handlers(app, settings=resolved)
    app.add_middleware(RequestIDMiddleware)


__all__ = [
    "RequestIDMiddleware",
    "register_exception_handlers",
    "report_builder_for",
    "report_response",
    "setup_exception_reporting",
]
