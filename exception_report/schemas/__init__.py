"""Public exports for report schemas."""

from __future__ import annotations

from .business_code import BusinessCode, BusinessCodeEnum
from .report import ChainEntry, ExceptionReport

__all__ = [
    "BusinessCode",
    "BusinessCodeEnum",
    "ChainEntry",
    "ExceptionReport",
]
