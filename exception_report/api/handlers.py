"""FastAPI exception handlers rendering every failure as an exception report."""

from __future__ import annotations

import json
import logging
from typing import Awaitable, Callable, Mapping, Sequence, cast

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from exception_report.core.config import Settings, get_settings
from exception_report.core.logging import get_request_id
from exception_report.exceptions.business_error import BusinessError
from exception_report.schemas.report import ExceptionReport
from exception_report.services.report_builder import (
    ExceptionReportBuilder,
    qualified_class_name,
    reason_phrase,
)

ExceptionHandlerCallable = Callable[[Request, Exception], Awaitable[Response]]

SETTINGS_STATE_KEY = "exception_report_settings"
VALIDATION_MESSAGE = "Request validation failed."

logger = logging.getLogger("exception_report.errors")


def register_exception_handlers(app: FastAPI, *, settings: Settings | None = None) -> None:
    """Attach report-producing exception handlers to the FastAPI app."""

    setattr(app.state, SETTINGS_STATE_KEY, settings or get_settings())

    app.add_exception_handler(
        BusinessError,
        cast(ExceptionHandlerCallable, business_error_handler),
    )
    app.add_exception_handler(
        RequestValidationError,
        cast(ExceptionHandlerCallable, request_validation_exception_handler),
    )
    app.add_exception_handler(
        StarletteHTTPException,
        cast(ExceptionHandlerCallable, http_exception_handler),
    )
    app.add_exception_handler(
        Exception,
        cast(ExceptionHandlerCallable, unexpected_exception_handler),
    )


async def business_error_handler(request: Request, exc: BusinessError) -> JSONResponse:
    status_code = exc.http_code or status.HTTP_400_BAD_REQUEST
    report = report_builder_for(request, exc).with_http_status(status_code).build()
    logger.warning(
        "Business error during request",
        extra={
            "exception_id": report.exception_id,
            "business_codes": list(report.business_codes),
            "status_code": status_code,
        },
    )
    return report_response(report)


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    settings = _settings_for(request)
    builder = (
        report_builder_for(request, exc)
        .with_exception(qualified_class_name(exc), VALIDATION_MESSAGE)
        .with_http_status(status.HTTP_422_UNPROCESSABLE_ENTITY)
        .with_context("errors", _format_validation_errors(exc))
    )
    if settings.include_request_body and exc.body is not None:
        builder.with_request_body(_render_body(exc.body))
    return report_response(builder.build())


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    detail = exc.detail
    builder = report_builder_for(request, exc).with_http_status(exc.status_code)

    if isinstance(detail, Mapping):
        message = detail.get("message")
        builder.with_context("detail", jsonable_encoder(detail))
    else:
        message = detail
    message = message or reason_phrase(exc.status_code) or _settings_for(request).default_message
    builder.with_exception(qualified_class_name(exc), str(message))

    return report_response(builder.build(), headers=exc.headers)


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    report = (
        report_builder_for(request, exc)
        .with_http_status(status.HTTP_500_INTERNAL_SERVER_ERROR)
        .build()
    )
    logger.exception(
        "Unhandled exception during request",
        exc_info=(exc.__class__, exc, exc.__traceback__),
        extra={"exception_id": report.exception_id, "http_path": report.path},
    )
    return report_response(report)


def report_builder_for(request: Request, exc: Exception) -> ExceptionReportBuilder:
    """Start a report for ``exc`` pre-filled with request-scoped fields."""
    settings = _settings_for(request)
    builder = ExceptionReportBuilder.from_exception(
        settings.application_name,
        exc,
        settings=settings,
    ).with_path(request.url.path)

    request_id = getattr(request.state, "request_id", None) or get_request_id()
    if request_id:
        builder.with_request_id(request_id)
        if not getattr(exc, "trace_id", None):
            builder.with_trace_id(request_id)

    session_id = request.headers.get(settings.session_header)
    if session_id:
        builder.with_session_id(session_id)
    if settings.help_link:
        builder.with_help_link(settings.help_link)
    return builder


def report_response(
    report: ExceptionReport,
    *,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Render the report using its HTTP status code."""
    status_code = report.http_status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(content=report.to_payload(), status_code=status_code, headers=headers)


def _settings_for(request: Request) -> Settings:
    settings = getattr(request.app.state, SETTINGS_STATE_KEY, None)
    return settings if isinstance(settings, Settings) else get_settings()


def _format_validation_errors(exc: RequestValidationError) -> dict[str, str]:
    formatted: dict[str, str] = {}
    for error in exc.errors():
        field = _format_error_location(error.get("loc") or ())
        message = error.get("msg", "Invalid value")
        if field in formatted:
            formatted[field] = f"{formatted[field]}; {message}"
        else:
            formatted[field] = message
    return formatted


def _format_error_location(location: Sequence[object]) -> str:
    filtered = [str(part) for part in location if part not in {"body", "query", "path"}]
    if not filtered:
        filtered = [str(part) for part in location]
    return ".".join(filtered) if filtered else "_schema"


def _render_body(body: object) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        return body
    return json.dumps(jsonable_encoder(body), ensure_ascii=False)


__all__ = [
    "business_error_handler",
    "http_exception_handler",
    "register_exception_handlers",
    "report_builder_for",
    "report_response",
    "request_validation_exception_handler",
    "unexpected_exception_handler",
]
