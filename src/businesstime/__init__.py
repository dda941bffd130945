# src/businesstime/__init__.py
"""
businesstime
~~~~~~~~~~~~

Calendar arithmetic measured in business time.  A BusinessTime is a UTC
instant together with a step size (``precision``) and an ordered list of
constraints deciding which instants are business time.  Adding, subtracting
and diffing walk the timeline in precision-sized steps.

Basic usage::

    from businesstime import BusinessTime

    bt = BusinessTime("2018-05-25T16:00:00Z")     # Friday, defaults 09-17 Mon-Fri
    bt.add_business_days(1).to_iso_string()        # → '2018-05-28T16:00:00.000Z'
    bt.length_of_business_day()                    # → timedelta(hours=8)

Custom rules are any object with ``is_business_time(instant) -> bool``::

    from datetime import timedelta
    from businesstime import BetweenHoursOfDay, BusinessTime, WeekDays

    bt = BusinessTime(
        "2018-05-21T08:00:00Z",
        precision=timedelta(minutes=15),
        constraints=[BetweenHoursOfDay(8, 12), WeekDays([0, 2, 4])],
    )

Logging goes through loguru and is disabled by default; call
``logger.enable("businesstime")`` to see it.

Public API
----------
BusinessTime             The engine.
Instant                  Immutable UTC calendar point.
BusinessTimeConstraint   Protocol every rule implements.
BetweenHoursOfDay        Hour-of-day window rule.
WeekDays                 Weekday set rule.
BusinessTimeError        Base exception for all business-time errors.
"""

from __future__ import annotations

from loguru import logger

from businesstime._exceptions import (
    BusinessDayTooLong,
    BusinessTimeError,
    InvalidBusinessDayLength,
    InvalidPrecision,
    InstantOutOfRange,
    InvalidTimestamp,
    NoBusinessTimeFound,
    ZeroLengthBusinessDay,
)
from businesstime.business_time import BusinessTime
from businesstime.constraints import (
    BetweenHoursOfDay,
    BusinessTimeConstraint,
    WeekDays,
    default_constraints,
)
from businesstime.day_length import REFERENCE_DAY, determine_length_of_business_day
from businesstime.instant import ISO_8601, Instant

logger.disable("businesstime")

__all__ = [
    "BusinessTime",
    "Instant",
    "ISO_8601",
    "BusinessTimeConstraint",
    "BetweenHoursOfDay",
    "WeekDays",
    "default_constraints",
    "REFERENCE_DAY",
    "determine_length_of_business_day",
    "BusinessTimeError",
    "InvalidTimestamp",
    "InstantOutOfRange",
    "InvalidPrecision",
    "InvalidBusinessDayLength",
    "ZeroLengthBusinessDay",
    "BusinessDayTooLong",
    "NoBusinessTimeFound",
]
