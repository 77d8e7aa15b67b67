"""Assemble exception reports from caught errors."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Callable, Iterable, Mapping

from exception_report.core.config import Settings, get_settings
from exception_report.core.ids import IdGenerator, generate_id
from exception_report.exceptions.capabilities import SelfIdentifying, TraceableError
from exception_report.schemas.business_code import BusinessCode
from exception_report.schemas.report import ChainEntry, ExceptionReport
from exception_report.services.chain import error_message, walk_exception_chain

logger = logging.getLogger("exception_report.builder")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def qualified_class_name(error: BaseException) -> str:
    """Return ``module.QualName`` for ``error``; builtins use the bare name."""
    error_type = type(error)
    module = error_type.__module__
    if module == "builtins":
        return error_type.__qualname__
    return f"{module}.{error_type.__qualname__}"


def reason_phrase(status_code: int) -> str | None:
    """Return the standard reason phrase, or ``None`` for unregistered codes."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return None


class ExceptionReportBuilder:
    """Fluent builder turning a caught error into an :class:`ExceptionReport`.

    Constructing the builder from an error fills the identifier, message,
    exception class, timestamp, cause chain and metadata tag. A
    self-identifying error seeds the report id, and one carrying full
    metadata (see :class:`TraceableError`) also contributes business codes,
    params, span and trace ids.
    Transport fields are then added through the ``with_*`` methods, each of
    which returns the builder::

        report = (
            ExceptionReportBuilder.from_exception("billing", exc)
            .with_http_status(500)
            .with_path("/api/v1/invoices")
            .build()
        )

    A builder created without an error starts empty and is assembled field
    by field.
    """

    def __init__(
        self,
        application_name: str | None = None,
        error: BaseException | None = None,
        *,
        id_generator: IdGenerator = generate_id,
        clock: Clock = utc_now,
        settings: Settings | None = None,
    ) -> None:
        self._fields: dict[str, Any] = {}
        self._params: dict[str, Any] = {}
        self._business_codes: dict[str, str] = {}
        self._context: dict[str, Any] = {}
        self._chain: list[ChainEntry] = []
        self._id_generator = id_generator
        self._clock = clock
        self._settings = settings

        if application_name is not None:
            self.with_application_name(application_name)
        if error is not None:
            self._populate_from_error(error)

    @classmethod
    def from_exception(
        cls,
        application_name: str,
        error: BaseException,
        *,
        id_generator: IdGenerator = generate_id,
        clock: Clock = utc_now,
        settings: Settings | None = None,
    ) -> ExceptionReportBuilder:
        return cls(
            application_name,
            error,
            id_generator=id_generator,
            clock=clock,
            settings=settings,
        )

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _populate_from_error(self, error: BaseException) -> None:
        exception_id: str | None = None
        if isinstance(error, SelfIdentifying):
            exception_id = error.error_id or None

        self.with_exception_id(exception_id or self._id_generator())
        self.with_exception(
            qualified_class_name(error),
            error_message(error) or self.settings.default_message,
        )
        self.with_date_time(self._clock())
        self.with_exception_chain(walk_exception_chain(error))
        self.with_metadata(self.settings.metadata)

        if not isinstance(error, TraceableError):
            return

        if error.business_codes:
            self.with_business_codes(error.business_codes)
        if error.params:
            self.with_params(error.params)
        if error.span_id:
            self.with_span_id(error.span_id)
        if error.trace_id:
            self.with_trace_id(error.trace_id)

    def with_application_name(self, name: str | None) -> ExceptionReportBuilder:
        self._fields["application_name"] = name
        return self

    def with_exception_id(self, exception_id: str | None) -> ExceptionReportBuilder:
        self._fields["exception_id"] = exception_id
        return self

    def with_exception(
        self, exception_class_name: str | None, message: str | None
    ) -> ExceptionReportBuilder:
        self._fields["exception_class_name"] = exception_class_name
        self._fields["message"] = message
        return self

    def with_http_status(
        self, status_code: int, description: str | None = None
    ) -> ExceptionReportBuilder:
        """Set the status pair; the description defaults to the reason phrase."""
        if description is None:
            description = reason_phrase(status_code)
        self._fields["http_status_code"] = status_code
        self._fields["http_status_description"] = description
        return self

    def with_path(self, path: str | None) -> ExceptionReportBuilder:
        self._fields["path"] = path
        return self

    def with_session_id(self, session_id: str | None) -> ExceptionReportBuilder:
        self._fields["session_id"] = session_id
        return self

    def with_help_link(self, help_link: str | None) -> ExceptionReportBuilder:
        self._fields["help_link"] = help_link
        return self

    def with_trace_id(self, trace_id: str | None) -> ExceptionReportBuilder:
        self._fields["trace_id"] = trace_id
        return self

    def with_span_id(self, span_id: str | None) -> ExceptionReportBuilder:
        self._fields["span_id"] = span_id
        return self

    def with_request_id(self, request_id: str | None) -> ExceptionReportBuilder:
        self._fields["request_id"] = request_id
        return self

    def with_request_body(self, request_body: str | None) -> ExceptionReportBuilder:
        self._fields["request_body"] = request_body
        return self

    def with_metadata(self, metadata: str | None) -> ExceptionReportBuilder:
        self._fields["metadata"] = metadata
        return self

    def with_date_time(self, date_time: datetime | None) -> ExceptionReportBuilder:
        self._fields["date_time"] = date_time
        return self

    def with_context(self, key: str, value: Any) -> ExceptionReportBuilder:
        self._context[key] = value
        return self

    def with_param(self, key: str, value: Any) -> ExceptionReportBuilder:
        self._params[key] = value
        return self

    def with_params(self, params: Mapping[str, Any]) -> ExceptionReportBuilder:
        """Merge ``params`` into the report params; later keys win."""
        self._params.update(params)
        return self

    def with_business_code(self, code: BusinessCode) -> ExceptionReportBuilder:
        self._business_codes[code.code] = code.description
        return self

    def with_business_codes(self, codes: Iterable[BusinessCode]) -> ExceptionReportBuilder:
        """Flatten ``codes`` into the code mapping; a repeated code keeps its last description."""
        for code in codes:
            self.with_business_code(code)
        return self

    def with_exception_chain(self, entries: Iterable[ChainEntry]) -> ExceptionReportBuilder:
        """Replace the exception chain."""
        self._chain = list(entries)
        return self

    def add_chain_entry(self, entry: ChainEntry) -> ExceptionReportBuilder:
        self._chain.append(entry)
        return self

    def build(self) -> ExceptionReport:
        """Snapshot the current state into an immutable report."""
        report = ExceptionReport(
            **self._fields,
            params=dict(self._params),
            business_codes=dict(self._business_codes),
            context=dict(self._context),
            exception_chain=list(self._chain),
        )
        logger.debug(
            "Exception report built",
            extra={
                "exception_id": report.exception_id,
                "chain_length": len(report.exception_chain),
                "application_name": report.application_name,
            },
        )
        return report


__all__ = [
    "Clock",
    "ExceptionReportBuilder",
    "qualified_class_name",
    "reason_phrase",
    "utc_now",
]
