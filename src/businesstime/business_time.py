from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Union

from loguru import logger

from ._exceptions import NoBusinessTimeFound
from .constraints import BusinessTimeConstraint, default_constraints
from .day_length import determine_length_of_business_day, validate_length
from .duration import DurationLike, ratio, to_duration, validate_precision
from .instant import Instant

NumberLike = Union[int, float, str, Decimal]


def _to_decimal(value: NumberLike) -> Decimal:
    if isinstance(value, bool):
        raise TypeError("Business day counts must be numbers, not booleans.")
    if isinstance(value, float):
        value = repr(value)
    try:
        number = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Cannot interpret {value!r} as a number of business days.") from exc
    if not number.is_finite():
        raise ValueError(f"Number of business days must be finite; got {value!r}.")
    return number


def _round_half_away(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


class BusinessTime:
    """
    An instant plus the rules that say which instants are business time.

    Arithmetic walks the timeline in steps of ``precision`` and asks every
    constraint whether each step is business time.  Finer precision is more
    accurate and proportionally slower.

    Values are immutable: every transformation returns a new BusinessTime
    with the same precision and constraints.  The only state filled in
    later is the cached length of a business day, which belongs to this
    instance alone and is never passed on to derived values.
    """

    DEFAULT_PRECISION: timedelta = timedelta(hours=1)

    # Longest stretch any walk may go without meeting business time.
    SCAN_HORIZON: timedelta = timedelta(days=366)

    def __init__(
        self,
        raw: Any = None,
        fmt: Any = None,
        precision: DurationLike | None = None,
        constraints: Iterable[BusinessTimeConstraint] | None = None,
    ) -> None:
        self._instant: Instant = Instant.parse(raw, fmt)
        self._precision: timedelta = validate_precision(
            self.DEFAULT_PRECISION if precision is None else precision
        )
        self._constraints: tuple[BusinessTimeConstraint, ...] = tuple(
            default_constraints() if constraints is None else constraints
        )
        self._length_of_business_day: timedelta | None = None

    # ── business time predicate ──────────────────────────────────────────

    def is_business_time(self) -> bool:
        return self._satisfies(self._instant)

    def _satisfies(self, instant: Instant) -> bool:
        # all() stops at the first constraint that says no.
        return all(c.is_business_time(instant) for c in self._constraints)

    # ── adding / subtracting business days ───────────────────────────────

    def add_business_day(self) -> BusinessTime:
        return self.add_business_days(1)

    def add_business_days(self, business_days: NumberLike) -> BusinessTime:
        remaining = _to_decimal(business_days)
        if remaining < 0:
            return self.sub_business_days(-remaining)

        # Jump ahead in whole days first; the business days to add are at
        # least this many.  This is also what makes Monday 09:00 + 1 land on
        # Tuesday 09:00 rather than Monday 17:00.
        jumped = self._instant.add(_round_half_away(remaining), "days")
        remaining -= self.diff_in_partial_business_days(jumped)
        if remaining <= 0:
            return self.at(jumped)

        decrement = self._decrement()
        moment, idle = jumped, 0
        while remaining > 0:
            if self._satisfies(moment):
                remaining -= decrement
                idle = 0
            else:
                idle = self._idle_step(idle, jumped, "add_business_days")
            moment = moment.add(self._precision)

        return self.at(moment)

    def sub_business_day(self) -> BusinessTime:
        return self.sub_business_days(1)

    def sub_business_days(self, business_days: NumberLike) -> BusinessTime:
        remaining = _to_decimal(business_days)
        if remaining < 0:
            return self.add_business_days(-remaining)

        # Tuesday 17:00 - 1 should be Monday 17:00, not Tuesday 09:00.
        jumped = self._instant.subtract(_round_half_away(remaining), "days")
        remaining -= self.diff_in_partial_business_days(jumped)
        if remaining <= 0:
            return self.at(jumped)

        decrement = self._decrement()
        moment, idle = jumped, 0
        while remaining > 0:
            moment = moment.subtract(self._precision)
            if self._satisfies(moment):
                remaining -= decrement
                idle = 0
            else:
                idle = self._idle_step(idle, jumped, "sub_business_days")

        return self.at(moment)

    def _decrement(self) -> Decimal:
        """Fraction of one business day covered by a single precision step."""
        return ratio(self._precision, self.length_of_business_day())

    # ── differences ──────────────────────────────────────────────────────

    def diff_in_business_days(self, other: Any = None, absolute: bool = True) -> int:
        return _round_half_away(self.diff_in_partial_business_days(other, absolute))

    def diff_in_partial_business_days(
        self, other: Any = None, absolute: bool = True
    ) -> Decimal:
        steps = self.diff_in_business_time(other, absolute)
        return ratio(self._precision * steps, self.length_of_business_day())

    def diff_in_business_time(self, other: Any = None, absolute: bool = True) -> int:
        """
        Difference in business time, counted in steps of the precision.

        Every step ``x`` in ``[start, end)`` for which ``x`` is business time
        counts once.  ``other`` defaults to now.  The result is negative only
        when ``other`` lies before this instant and ``absolute`` is false.
        """
        other = Instant.parse(other)
        if other.is_same(self._instant, "minute"):
            return 0

        start, end, sign = self._instant, other, 1
        if start.is_after(end):
            start, end = end, start
            sign = 1 if absolute else -1

        steps = sum(
            1 for moment in start.steps_until(end, self._precision)
            if self._satisfies(moment)
        )
        return sign * steps

    def diff_business(self, other: Any = None, absolute: bool = True) -> timedelta:
        """
        Difference in business time as a duration.

        The walk happens in steps of the precision; only the result is
        expressed in seconds.
        """
        return self._precision * self.diff_in_business_time(other, absolute)

    # ── business day boundaries ──────────────────────────────────────────

    def start_of_business_day(self) -> BusinessTime:
        """First business time at or after the start of this calendar day."""
        start = self._instant.start_of("day")
        return self.at(self._seek(start, self._precision, "start_of_business_day"))

    def end_of_business_day(self) -> BusinessTime:
        """Start of the last business step at or before the end of this calendar day."""
        end = self._instant.start_of("day").add(1, "days").subtract(self._precision)
        return self.at(self._seek(end, -self._precision, "end_of_business_day"))

    def _seek(self, start: Instant, step: timedelta, operation: str) -> Instant:
        moment, idle = start, 0
        while not self._satisfies(moment):
            idle = self._idle_step(idle, start, operation)
            moment = moment.add(step)
        return moment

    def _idle_step(self, idle: int, origin: Instant, operation: str) -> int:
        idle += 1
        if idle * self._precision > self.SCAN_HORIZON:
            logger.warning(
                "No business time within scan horizon",
                operation=operation,
                origin=origin.to_iso_string(),
                horizon=str(self.SCAN_HORIZON),
            )
            raise NoBusinessTimeFound(
                f"{operation}: no business time within {self.SCAN_HORIZON} "
                f"of {origin.to_iso_string()} under {list(self._constraints)!r}."
            )
        return idle

    # ── length of a business day ─────────────────────────────────────────

    def length_of_business_day(self) -> timedelta:
        """
        Business time in one typical day, derived on first use and cached.

        The typical day is the Wednesday :data:`~businesstime.day_length.REFERENCE_DAY`.
        Rules with no business time on that day (weekend-only rules, say)
        raise ``ZeroLengthBusinessDay`` here; measure another day instead::

            bt.set_length_of_business_day(
                determine_length_of_business_day(bt, "2018-05-26")
            )
        """
        if self._length_of_business_day is None:
            self._length_of_business_day = determine_length_of_business_day(self)
        return self._length_of_business_day

    def set_length_of_business_day(self, duration: DurationLike) -> BusinessTime:
        """
        Override the cached length of a business day on this instance.

        Raises ``ZeroLengthBusinessDay`` for a length <= 0 and
        ``BusinessDayTooLong`` above 24 hours; the cache is left untouched
        in both cases.  Returns ``self``.
        """
        self._length_of_business_day = validate_length(to_duration(duration))
        logger.debug(
            "Length of business day set",
            length=str(self._length_of_business_day),
        )
        return self

    # ── calendar passthroughs ────────────────────────────────────────────

    def add(self, amount: DurationLike, unit: str | None = None) -> BusinessTime:
        return self.at(self._instant.add(amount, unit))

    def subtract(self, amount: DurationLike, unit: str | None = None) -> BusinessTime:
        return self.at(self._instant.subtract(amount, unit))

    def start_of(self, unit: str) -> BusinessTime:
        return self.at(self._instant.start_of(unit))

    def end_of(self, unit: str) -> BusinessTime:
        return self.at(self._instant.end_of(unit))

    def is_after(self, other: Any = None, granularity: str | None = None) -> bool:
        return self._instant.is_after(other, granularity)

    def is_before(self, other: Any = None, granularity: str | None = None) -> bool:
        return self._instant.is_before(other, granularity)

    def is_same(self, other: Any = None, granularity: str | None = None) -> bool:
        return self._instant.is_same(other, granularity)

    def format(self, pattern: str | None = None) -> str:
        return self._instant.format(pattern)

    def to_iso_string(self, keep_offset: bool = False) -> str:
        return self._instant.to_iso_string(keep_offset)

    def clone(self) -> BusinessTime:
        return self.at(self._instant)

    def at(self, instant: Any) -> BusinessTime:
        """A new BusinessTime at ``instant`` with these rules; the length cache is not copied."""
        return BusinessTime(
            Instant.parse(instant),
            precision=self._precision,
            constraints=self._constraints,
        )

    # ── properties / repr ────────────────────────────────────────────────

    @property
    def instant(self) -> Instant:
        return self._instant

    @property
    def precision(self) -> timedelta:
        return self._precision

    @property
    def constraints(self) -> tuple[BusinessTimeConstraint, ...]:
        return self._constraints

    def to_datetime(self) -> datetime:
        return self._instant.to_datetime()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BusinessTime):
            return NotImplemented
        return (
            self._instant == other._instant
            and self._precision == other._precision
            and self._constraints == other._constraints
        )

    def __hash__(self) -> int:
        return hash((self._instant, self._precision, self._constraints))

    def __repr__(self) -> str:
        return (
            f"BusinessTime({self._instant.to_iso_string()!r}, "
            f"precision={self._precision}, "
            f"constraints={list(self._constraints)})"
        )
