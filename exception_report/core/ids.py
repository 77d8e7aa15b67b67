"""Identifier generation capability shared by errors and reports."""

from __future__ import annotations

import uuid
from typing import Callable

IdGenerator = Callable[[], str]


def generate_id() -> str:
    """Return a random version-4 UUID in canonical 8-4-4-4-12 form."""
    return str(uuid.uuid4())


__all__ = ["IdGenerator", "generate_id"]
