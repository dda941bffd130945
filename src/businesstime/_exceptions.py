from __future__ import annotations

from typing import Any


class BusinessTimeError(Exception):
    """Base exception for all business-time errors."""


class InvalidTimestamp(BusinessTimeError, ValueError):

    def __init__(self, raw: Any, reason: str | None = None) -> None:
        self.raw = raw
        message = f"Invalid date time for business time: {raw!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidPrecision(BusinessTimeError, ValueError):
    pass


class InvalidBusinessDayLength(BusinessTimeError, ValueError):
    pass


class ZeroLengthBusinessDay(InvalidBusinessDayLength):

    def __init__(self) -> None:
        super().__init__("Business day cannot be zero-length.")


class BusinessDayTooLong(InvalidBusinessDayLength):

    def __init__(self, hours: float) -> None:
        self.hours = hours
        super().__init__(
            f"Length of business day cannot be more than 24 hours (set to {hours} hours)."
        )


class NoBusinessTimeFound(BusinessTimeError):
    pass


class InstantOutOfRange(BusinessTimeError, OverflowError):
    pass
