"""Report payloads returned to callers when a request fails."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def encode_unknown(value: Any) -> Any:
    """Render a value pydantic cannot serialize; opaque objects become their ``str``."""
    try:
        return jsonable_encoder(value)
    except (TypeError, ValueError):
        return str(value)


class ChainEntry(BaseModel):
    """One node of an error's cause chain.

    ``correlation_id`` is the node's own error id for business errors, or an
    identifier recovered from the node's message text for anything else.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    correlation_id: str | None = None
    message: str | None = None


class ExceptionReport(BaseModel):
    """Canonical diagnostic payload describing a caught error.

    Field aliases (camelCase) form the wire contract consumed by clients, e.g.
    ``exceptionId``, ``businessCodes`` and ``exceptionChain``. The exception
    id lets a client map its failure onto the matching log entries.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    application_name: str | None = None
    exception_id: str | None = None
    trace_id: str | None = None
    span_id: str | None = None
    request_id: str | None = None
    message: str | None = None
    exception_class_name: str | None = None
    path: str | None = None
    session_id: str | None = None
    help_link: str | None = None
    metadata: str | None = None
    request_body: str | None = None
    http_status_code: int = 0
    http_status_description: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    business_codes: dict[str, str] = Field(default_factory=dict)
    context: dict[str, Any] = Field(default_factory=dict)
    exception_chain: list[ChainEntry] = Field(default_factory=list)
    date_time: datetime | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-ready dict keyed by the wire names.

        ``params`` and ``context`` hold arbitrary values; anything outside the
        JSON types goes through :func:`encode_unknown`.
        """
        return self.model_dump(mode="json", by_alias=True, fallback=encode_unknown)


__all__ = ["ChainEntry", "ExceptionReport", "encode_unknown"]
