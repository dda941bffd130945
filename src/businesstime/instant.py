from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Iterator

import numpy as np
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from ._exceptions import InstantOutOfRange, InvalidTimestamp
from .duration import DurationLike, as_micros, to_offset

# Format hint forcing strict ISO-8601 parsing of string input.
ISO_8601 = object()

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Steps materialised at a time by Instant.steps_until.
_GRID_CHUNK = 4096

_TRUNCATE_UNITS = ("year", "month", "week", "day", "hour", "minute", "second")
_UNIT_ALIASES = {
    "years": "year", "y": "year",
    "months": "month", "M": "month",
    "weeks": "week", "isoWeek": "week", "w": "week",
    "days": "day", "date": "day", "d": "day",
    "hours": "hour", "h": "hour",
    "minutes": "minute", "m": "minute",
    "seconds": "second", "s": "second",
}


def _normalise_unit(unit: str) -> str:
    unit = _UNIT_ALIASES.get(unit, unit)
    if unit not in _TRUNCATE_UNITS:
        raise ValueError(f"Unknown calendar unit {unit!r}.")
    return unit


@dataclass(frozen=True, order=True)
class Instant:
    """
    Immutable point on the UTC timeline.

    Wraps a timezone-aware :class:`~datetime.datetime` that is always in
    UTC.  Build one with :meth:`parse`; every operation returns a new
    Instant.
    """

    moment: datetime

    def __post_init__(self) -> None:
        if self.moment.tzinfo is None:
            object.__setattr__(self, "moment", self.moment.replace(tzinfo=timezone.utc))
        else:
            object.__setattr__(self, "moment", self.moment.astimezone(timezone.utc))

    # ── construction ─────────────────────────────────────────────────────

    @classmethod
    def parse(cls, raw: Any = None, fmt: Any = None) -> Instant:
        """
        Resolve ``raw`` to an Instant.

        ``None`` is now, numbers are epoch milliseconds, naive datetimes and
        dates are read as UTC, strings are ISO-8601 (or anything dateutil
        understands) unless ``fmt`` gives a ``strptime`` pattern.
        """
        if raw is None:
            return cls.now()
        if isinstance(raw, Instant):
            return raw
        if hasattr(raw, "instant") and isinstance(raw.instant, Instant):
            return raw.instant
        if isinstance(raw, datetime):
            return cls(raw)
        if isinstance(raw, date):
            return cls(datetime(raw.year, raw.month, raw.day))
        if isinstance(raw, bool):
            raise InvalidTimestamp(raw, "booleans are not timestamps")
        if isinstance(raw, (int, float, Decimal)):
            try:
                return cls(_EPOCH + timedelta(milliseconds=float(raw)))
            except (OverflowError, ValueError) as exc:
                raise InvalidTimestamp(raw, str(exc)) from exc
        if isinstance(raw, str):
            return cls(_parse_string(raw, fmt))
        raise InvalidTimestamp(raw, f"unsupported type {type(raw).__name__}")

    @classmethod
    def now(cls) -> Instant:
        return cls(datetime.now(timezone.utc))

    # ── accessors ────────────────────────────────────────────────────────

    def to_datetime(self) -> datetime:
        return self.moment

    @property
    def year(self) -> int:
        return self.moment.year

    @property
    def month(self) -> int:
        return self.moment.month

    @property
    def day(self) -> int:
        return self.moment.day

    @property
    def hour(self) -> int:
        return self.moment.hour

    @property
    def minute(self) -> int:
        return self.moment.minute

    @property
    def second(self) -> int:
        return self.moment.second

    def weekday(self) -> int:
        return self.moment.weekday()

    def isoweekday(self) -> int:
        return self.moment.isoweekday()

    # ── translation ──────────────────────────────────────────────────────

    def add(self, amount: DurationLike, unit: str | None = None) -> Instant:
        try:
            return Instant(self.moment + to_offset(amount, unit))
        except OverflowError as exc:
            raise InstantOutOfRange(f"{self} + {amount} {unit or ''}".rstrip()) from exc

    def subtract(self, amount: DurationLike, unit: str | None = None) -> Instant:
        try:
            return Instant(self.moment - to_offset(amount, unit))
        except OverflowError as exc:
            raise InstantOutOfRange(f"{self} - {amount} {unit or ''}".rstrip()) from exc

    def start_of(self, unit: str) -> Instant:
        unit = _normalise_unit(unit)
        m = self.moment.replace(microsecond=0)
        if unit == "second":
            return Instant(m)
        m = m.replace(second=0)
        if unit == "minute":
            return Instant(m)
        m = m.replace(minute=0)
        if unit == "hour":
            return Instant(m)
        m = m.replace(hour=0)
        if unit == "day":
            return Instant(m)
        if unit == "week":
            return Instant(m - timedelta(days=m.weekday()))
        m = m.replace(day=1)
        if unit == "month":
            return Instant(m)
        return Instant(m.replace(month=1))

    def end_of(self, unit: str) -> Instant:
        unit = _normalise_unit(unit)
        step = {
            "second": timedelta(seconds=1),
            "minute": timedelta(minutes=1),
            "hour": timedelta(hours=1),
            "day": timedelta(days=1),
            "week": timedelta(weeks=1),
            "month": relativedelta(months=1),
            "year": relativedelta(years=1),
        }[unit]
        return Instant(self.start_of(unit).moment + step - timedelta(microseconds=1))

    def steps_until(self, end: Instant, step: timedelta) -> Iterator[Instant]:
        """
        Yield every instant ``self + k * step`` strictly before ``end``.

        Nothing is yielded when ``end`` is not after ``self``.  The grid is
        built lazily, ``_GRID_CHUNK`` steps at a time, so memory stays
        constant however many steps the span holds.
        """
        lo = np.datetime64(self.moment.replace(tzinfo=None), "us")
        stop = np.datetime64(end.moment.replace(tzinfo=None), "us")
        delta = np.timedelta64(as_micros(step), "us")
        span = delta * _GRID_CHUNK
        while lo < stop:
            hi = min(lo + span, stop)
            for t in np.arange(lo, hi, delta).tolist():
                yield Instant(t)
            lo = hi

    # ── comparison ───────────────────────────────────────────────────────

    def is_before(self, other: Any, granularity: str | None = None) -> bool:
        a, b = self._aligned(other, granularity)
        return a < b

    def is_after(self, other: Any, granularity: str | None = None) -> bool:
        a, b = self._aligned(other, granularity)
        return a > b

    def is_same(self, other: Any, granularity: str | None = None) -> bool:
        a, b = self._aligned(other, granularity)
        return a == b

    def _aligned(self, other: Any, granularity: str | None) -> tuple[datetime, datetime]:
        other = Instant.parse(other)
        if granularity is None:
            return self.moment, other.moment
        return self.start_of(granularity).moment, other.start_of(granularity).moment

    # ── rendering ────────────────────────────────────────────────────────

    def format(self, pattern: str | None = None) -> str:
        if pattern is None:
            return self.moment.strftime("%Y-%m-%dT%H:%M:%SZ")
        return self.moment.strftime(pattern)

    def to_iso_string(self, keep_offset: bool = False) -> str:
        text = self.moment.isoformat(timespec="milliseconds")
        return text if keep_offset else text.replace("+00:00", "Z")

    def __str__(self) -> str:
        return self.to_iso_string()


def _parse_string(raw: str, fmt: Any) -> datetime:
    text = raw.strip()
    if not text:
        raise InvalidTimestamp(raw, "empty string")
    try:
        if fmt is ISO_8601:
            return dateutil_parser.isoparse(text)
        if fmt is not None:
            return datetime.strptime(text, fmt)
        try:
            return dateutil_parser.isoparse(text)
        except ValueError:
            return dateutil_parser.parse(text)
    except (ValueError, OverflowError, TypeError) as exc:
        raise InvalidTimestamp(raw, str(exc)) from exc
