from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Union

from dateutil.relativedelta import relativedelta

from ._exceptions import InvalidPrecision

DurationLike = Union[timedelta, int, float, Decimal]

_MICROSECOND = timedelta(microseconds=1)

# Unit name -> timedelta keyword.  Plural, singular and short forms are all
# accepted so that ``add(2, "days")`` and ``add(2, "d")`` read the same.
_FIXED_UNITS: dict[str, str] = {}
for _kw, _aliases in {
    "weeks": ("week", "w"),
    "days": ("day", "d"),
    "hours": ("hour", "h"),
    "minutes": ("minute", "m"),
    "seconds": ("second", "s"),
    "milliseconds": ("millisecond", "ms"),
    "microseconds": ("microsecond", "us"),
}.items():
    _FIXED_UNITS[_kw] = _kw
    for _alias in _aliases:
        _FIXED_UNITS[_alias] = _kw

_CALENDAR_UNITS: dict[str, str] = {
    "months": "months", "month": "months", "M": "months",
    "quarters": "quarters", "quarter": "quarters", "Q": "quarters",
    "years": "years", "year": "years", "y": "years",
}


def to_duration(value: DurationLike, unit: str | None = None) -> timedelta:
    """
    Coerce ``value`` to a :class:`~datetime.timedelta`.

    A timedelta is returned unchanged.  A bare number is read in ``unit``,
    defaulting to seconds, the canonical unit of business durations.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise TypeError(f"Cannot interpret {value!r} as a duration.")
    kw = _FIXED_UNITS.get(unit or "seconds")
    if kw is None:
        raise ValueError(f"Unknown duration unit {unit!r}.")
    amount = value if isinstance(value, int) else float(value)
    return timedelta(**{kw: amount})


def to_offset(amount: DurationLike, unit: str | None = None) -> timedelta | relativedelta:
    """Like :func:`to_duration` but also understands months, quarters and years."""
    if unit is not None and unit in _CALENDAR_UNITS:
        if isinstance(amount, timedelta) or float(amount) != int(amount):
            raise ValueError(f"Calendar unit {unit!r} needs a whole amount; got {amount!r}.")
        kw = _CALENDAR_UNITS[unit]
        if kw == "quarters":
            return relativedelta(months=3 * int(amount))
        return relativedelta(**{kw: int(amount)})
    return to_duration(amount, unit)


def as_micros(duration: timedelta) -> int:
    return duration // _MICROSECOND


def as_hours(duration: timedelta) -> float:
    return duration / timedelta(hours=1)


def ratio(numerator: timedelta, denominator: timedelta) -> Decimal:
    """Exact ratio of two durations, computed on integer microseconds."""
    return Decimal(as_micros(numerator)) / Decimal(as_micros(denominator))


def validate_precision(precision: DurationLike) -> timedelta:
    precision = to_duration(precision)
    if precision <= timedelta(0):
        raise InvalidPrecision(f"Precision must be strictly positive; got {precision!r}.")
    return precision
