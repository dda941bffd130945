from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from dateutil.relativedelta import relativedelta

from businesstime import InvalidPrecision
from businesstime.duration import (
    as_hours,
    as_micros,
    ratio,
    to_duration,
    to_offset,
    validate_precision,
)


def test_timedelta_passes_through() -> None:
    td = timedelta(minutes=5)
    assert to_duration(td) is td


def test_bare_number_is_seconds() -> None:
    assert to_duration(90) == timedelta(seconds=90)
    assert to_duration(1.5) == timedelta(seconds=1.5)
    assert to_duration(Decimal("2")) == timedelta(seconds=2)


@pytest.mark.parametrize("unit", ["hours", "hour", "h"])
def test_unit_aliases(unit: str) -> None:
    assert to_duration(2, unit) == timedelta(hours=2)


def test_unknown_unit() -> None:
    with pytest.raises(ValueError):
        to_duration(1, "parsecs")


def test_non_numeric_rejected() -> None:
    with pytest.raises(TypeError):
        to_duration("1h")
    with pytest.raises(TypeError):
        to_duration(True)


def test_calendar_offsets() -> None:
    assert to_offset(2, "months") == relativedelta(months=2)
    assert to_offset(1, "quarter") == relativedelta(months=3)
    assert to_offset(1, "years") == relativedelta(years=1)
    assert to_offset(3, "days") == timedelta(days=3)


def test_conversions() -> None:
    d = timedelta(hours=6)
    assert as_hours(d) == 6.0
    assert as_micros(timedelta(milliseconds=1)) == 1000


def test_ratio_is_exact() -> None:
    assert ratio(timedelta(hours=1), timedelta(hours=8)) == Decimal("0.125")


@pytest.mark.parametrize("bad", [timedelta(0), timedelta(minutes=-5), 0, -1])
def test_non_positive_precision_rejected(bad) -> None:
    with pytest.raises(InvalidPrecision):
        validate_precision(bad)


def test_precision_from_seconds() -> None:
    assert validate_precision(1800) == timedelta(minutes=30)
