"""
Exception report package.

Builds traceable, serializable reports from caught errors: the cause chain is
walked node by node, correlation ids are recovered from each node, and the
result is folded into a single payload an HTTP boundary can return.
"""

from __future__ import annotations

from exception_report.exceptions import BusinessError
from exception_report.schemas import BusinessCode, BusinessCodeEnum, ChainEntry, ExceptionReport
from exception_report.services import (
    ExceptionReportBuilder,
    find_correlation_id,
    walk_exception_chain,
)

__all__ = [
    "BusinessCode",
    "BusinessCodeEnum",
    "BusinessError",
    "ChainEntry",
    "ExceptionReport",
    "ExceptionReportBuilder",
    "find_correlation_id",
    "walk_exception_chain",
]
