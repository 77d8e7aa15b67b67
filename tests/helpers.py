"""Shared helpers for tests."""

from __future__ import annotations

from datetime import datetime, timezone
from itertools import count
from typing import Callable

from exception_report.exceptions import BusinessError
from exception_report.schemas import BusinessCode, BusinessCodeEnum

EMBEDDED_ID = "d99306bc-4b04-4a34-b7e7-f5554383f570"
EMBEDDED_MESSAGE = f"Something went wrong here is the exception Id {EMBEDDED_ID}"
FIXED_NOW = datetime(2024, 5, 17, 12, 30, tzinfo=timezone.utc)


class FooBusinessCode(BusinessCodeEnum):
    FOO_01 = "User not found."
    FOO_02 = "Users account has been locked."
    FOO_03 = "Users account not active."
    FOO_04 = "Security concern over users account."


def sequential_ids(prefix: str = "id") -> Callable[[], str]:
    """Return a deterministic id generator yielding ``prefix-1``, ``prefix-2``..."""
    counter = count(1)
    return lambda: f"{prefix}-{next(counter)}"


def build_business_error(
    code: BusinessCode,
    message: str,
    cause: BaseException | None = None,
) -> BusinessError:
    return (
        BusinessError(message, cause=cause)
        .generate_id()
        .with_business_code(code)
        .with_param("user", "imam")
        .with_trace_id("ABCD12335")
    )


def build_value_error() -> ValueError:
    return ValueError(EMBEDDED_MESSAGE)


def fixed_clock() -> datetime:
    return FIXED_NOW
