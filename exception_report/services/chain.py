"""Walk an error's cause chain and extract per-node correlation ids."""

from __future__ import annotations

import logging
import re
from typing import Final

from exception_report.exceptions.capabilities import SelfIdentifying, error_message
from exception_report.schemas.report import ChainEntry

logger = logging.getLogger("exception_report.chain")

UUID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[a-f0-9]{8}-[a-f0-9]{4}-4[a-f0-9]{3}-[89aAbB][a-f0-9]{3}-[a-f0-9]{12}"
)


def find_correlation_id(message: str | None) -> str | None:
    """Return the first version-4 UUID embedded in ``message``, if any."""
    if not message:
        return None
    match = UUID_PATTERN.search(message)
    return match.group() if match else None


def next_cause(error: BaseException) -> BaseException | None:
    """Return the error's own cause.

    Only ``__cause__`` is followed (``raise ... from`` or ``cause=``); an
    exception that was merely being handled when ``error`` was raised is not
    part of its chain.
    """
    return error.__cause__


def walk_exception_chain(error: BaseException | None) -> list[ChainEntry]:
    """Summarize every node from ``error`` down to its deepest cause.

    Self-identifying errors report their own id; any other node is scanned
    for an identifier embedded in its message. A node seen twice ends the
    walk so cyclic chains terminate.
    """
    chain: list[ChainEntry] = []
    seen: set[int] = set()
    node = error

    while node is not None:
        if id(node) in seen:
            logger.warning(
                "Cyclic exception chain detected",
                extra={"chain_length": len(chain), "exception_class": type(node).__name__},
            )
            break
        seen.add(id(node))

        message = error_message(node)
        if isinstance(node, SelfIdentifying):
            correlation_id = node.error_id
        else:
            correlation_id = find_correlation_id(message)

        chain.append(ChainEntry(correlation_id=correlation_id, message=message))
        node = next_cause(node)

    return chain


__all__ = [
    "UUID_PATTERN",
    "error_message",
    "find_correlation_id",
    "next_cause",
    "walk_exception_chain",
]
