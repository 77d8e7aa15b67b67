"""Chain walking and report assembly."""

from __future__ import annotations

from .chain import find_correlation_id, walk_exception_chain
from .report_builder import ExceptionReportBuilder

__all__ = ["ExceptionReportBuilder", "find_correlation_id", "walk_exception_chain"]
