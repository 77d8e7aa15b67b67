"""Structural capabilities the chain walker and report builder look for."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from exception_report.schemas.business_code import BusinessCode


@runtime_checkable
class SelfIdentifying(Protocol):
    """An error that carries its own occurrence identifier."""

    error_id: str | None


@runtime_checkable
class TraceableError(SelfIdentifying, Protocol):
    """An error exposing the metadata merged into a report."""

    span_id: str | None
    trace_id: str | None
    business_codes: Sequence[BusinessCode]
    params: dict[str, Any]


def error_message(error: BaseException) -> str | None:
    """Return the error's message, treating an empty message as absent."""
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message or None
    return str(error) or None


__all__ = ["SelfIdentifying", "TraceableError", "error_message"]
