# src/mcal/core/errors.py
from __future__ import annotations

from datetime import date
from typing import Optional, Union


class McalError(Exception):
    """Base error."""


class OutOfRangeError(McalError, ValueError):
    """Raised when a date or lunar year falls outside the supported lunar table."""

    def __init__(
        self,
        value: Union[date, int],
        *,
        lower: Optional[Union[date, int]] = None,
        upper: Optional[Union[date, int]] = None,
    ) -> None:
        self.value = value
        self.lower = lower
        self.upper = upper
        msg = f"{value} is outside the supported lunar calendar range"
        if lower is not None and upper is not None:
            msg += f" ({lower} .. {upper})"
        super().__init__(msg)


class MissingFieldError(McalError, KeyError):
    """Raised when a required column is absent from an external record."""

    def __init__(self, field: str, record_kind: str = "record") -> None:
        self.field = field
        self.record_kind = record_kind
        super().__init__(f"{record_kind} is missing required field {field!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])
