"""Error types and the capabilities reports are built from."""

from __future__ import annotations

from .business_error import BusinessError
from .capabilities import SelfIdentifying, TraceableError, error_message

__all__ = ["BusinessError", "SelfIdentifying", "TraceableError", "error_message"]
