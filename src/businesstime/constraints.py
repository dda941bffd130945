from __future__ import annotations

from calendar import FRIDAY, MONDAY, SUNDAY, day_abbr
from typing import Iterable, Protocol, runtime_checkable

from .instant import Instant


@runtime_checkable
class BusinessTimeConstraint(Protocol):
    """
    A rule deciding whether an instant counts as business time.

    Implementations must be pure: the same instant always gives the same
    answer.  The engine combines a list of them with logical AND.
    """

    def is_business_time(self, instant: Instant) -> bool: ...


class BetweenHoursOfDay:
    """Business time is ``start_hour <= hour < end_hour`` (UTC)."""

    def __init__(self, start_hour: int = 9, end_hour: int = 17) -> None:
        if not 0 <= start_hour < end_hour <= 24:
            raise ValueError(
                f"Hours must satisfy 0 <= start < end <= 24; got {start_hour}, {end_hour}."
            )
        self._start_hour = start_hour
        self._end_hour = end_hour

    def is_business_time(self, instant: Instant) -> bool:
        return self._start_hour <= instant.hour < self._end_hour

    @property
    def start_hour(self) -> int:
        return self._start_hour

    @property
    def end_hour(self) -> int:
        return self._end_hour

    def __repr__(self) -> str:
        return f"BetweenHoursOfDay({self._start_hour}, {self._end_hour})"


class WeekDays:
    """Business time falls on one of ``days`` (Monday = 0 ... Sunday = 6)."""

    def __init__(self, days: Iterable[int] = range(MONDAY, FRIDAY + 1)) -> None:
        self._days: frozenset[int] = frozenset(days)
        bad = sorted(d for d in self._days if not MONDAY <= d <= SUNDAY)
        if bad:
            raise ValueError(f"Week days must be in 0..6; got {bad}.")

    def is_business_time(self, instant: Instant) -> bool:
        return instant.weekday() in self._days

    @property
    def days(self) -> frozenset[int]:
        return self._days

    def __repr__(self) -> str:
        names = ", ".join(day_abbr[d] for d in sorted(self._days))
        return f"WeekDays([{names}])"


def default_constraints() -> list[BusinessTimeConstraint]:
    """09:00-17:00, Monday to Friday."""
    return [BetweenHoursOfDay(9, 17), WeekDays()]
