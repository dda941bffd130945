from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from loguru import logger

from ._exceptions import BusinessDayTooLong, ZeroLengthBusinessDay
from .duration import DurationLike, as_hours, to_duration
from .instant import Instant

if TYPE_CHECKING:
    from .business_time import BusinessTime

# A fixed Wednesday, so the derived length is the same on every run.
REFERENCE_DAY = Instant(datetime(2018, 5, 23, tzinfo=timezone.utc))

MAX_LENGTH = timedelta(hours=24)


def validate_length(duration: DurationLike) -> timedelta:
    duration = to_duration(duration)
    if duration <= timedelta(0):
        raise ZeroLengthBusinessDay()
    if duration > MAX_LENGTH:
        raise BusinessDayTooLong(as_hours(duration))
    return duration


def determine_length_of_business_day(
    engine: BusinessTime,
    typical_day: Any = None,
) -> timedelta:
    """
    Measure the business time contained in one typical calendar day.

    A temporary engine with ``engine``'s constraints and precision is
    anchored at ``typical_day`` (default :data:`REFERENCE_DAY`).  The
    length is the business time from its start of business day through
    the end of its last business step, so 09:00-17:00 at one hour
    precision gives eight hours.
    """
    day = REFERENCE_DAY if typical_day is None else Instant.parse(typical_day)
    anchor = engine.at(day)

    start = anchor.start_of_business_day()
    end = anchor.end_of_business_day()
    length = start.diff_business(end.add(engine.precision))

    logger.debug(
        "Determined length of business day",
        day=day.to_iso_string(),
        start=start.to_iso_string(),
        end=end.to_iso_string(),
        length=str(length),
    )
    return validate_length(length)
