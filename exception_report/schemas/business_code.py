"""Business codes: short machine codes paired with a human description."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


@runtime_checkable
class BusinessCode(Protocol):
    """Anything exposing a short ``code`` and a full ``description``."""

    @property
    def code(self) -> str: ...

    @property
    def description(self) -> str: ...


class BusinessCodeEnum(Enum):
    """Enum base for code catalogues.

    Members are declared as ``NAME = "description"``; the member name doubles
    as the business code::

        class AccountCode(BusinessCodeEnum):
            ACC_01 = "User not found."

    Descriptions must be unique within a catalogue, otherwise Enum turns the
    later member into an alias of the earlier one.
    """

    @property
    def code(self) -> str:
        return self.name

    @property
    def description(self) -> str:
        return str(self.value)


__all__ = ["BusinessCode", "BusinessCodeEnum"]
