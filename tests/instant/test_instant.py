"""
tests/instant/test_instant.py

Covers:
  - Parsing of strings, datetimes, dates, epoch milliseconds
  - Format hints (strptime patterns, strict ISO-8601)
  - Invalid input
  - Translation by durations and calendar units
  - start_of / end_of truncation
  - Comparison with granularity
  - Step grids
  - Rendering
"""

from datetime import date, datetime, timedelta, timezone
from itertools import islice

import pytest

from businesstime import (
    ISO_8601,
    BusinessTimeError,
    Instant,
    InstantOutOfRange,
    InvalidTimestamp,
)


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def monday_nine():
    """Monday 2018-05-21 09:00 UTC."""
    return Instant.parse("2018-05-21T09:00:00Z")


# ── Parsing ───────────────────────────────────────────────────────────────────

class TestParse:

    def test_iso_string_with_z(self, monday_nine):
        assert monday_nine.to_iso_string() == "2018-05-21T09:00:00.000Z"

    def test_offset_is_normalised_to_utc(self):
        inst = Instant.parse("2018-05-21T11:00:00+02:00")
        assert inst.to_iso_string() == "2018-05-21T09:00:00.000Z"

    def test_naive_datetime_is_utc(self):
        inst = Instant.parse(datetime(2018, 5, 21, 9))
        assert inst.to_datetime() == datetime(2018, 5, 21, 9, tzinfo=timezone.utc)

    def test_date_is_midnight(self):
        inst = Instant.parse(date(2018, 5, 21))
        assert inst.to_iso_string() == "2018-05-21T00:00:00.000Z"

    def test_epoch_milliseconds(self):
        assert Instant.parse(0).to_iso_string() == "1970-01-01T00:00:00.000Z"
        assert Instant.parse(1_527_000_000_000).to_iso_string() == "2018-05-22T14:40:00.000Z"

    def test_instant_passes_through(self, monday_nine):
        assert Instant.parse(monday_nine) is monday_nine

    def test_none_is_now(self):
        before = datetime.now(timezone.utc)
        inst = Instant.parse(None)
        after = datetime.now(timezone.utc)
        assert before <= inst.to_datetime() <= after

    def test_strptime_format_hint(self):
        inst = Instant.parse("21/05/2018 09:30", "%d/%m/%Y %H:%M")
        assert inst.to_iso_string() == "2018-05-21T09:30:00.000Z"

    def test_loose_string_without_hint(self):
        inst = Instant.parse("May 21 2018 09:00")
        assert inst.to_iso_string() == "2018-05-21T09:00:00.000Z"

    def test_strict_iso_hint_rejects_loose_string(self):
        with pytest.raises(InvalidTimestamp):
            Instant.parse("May 21 2018 09:00", ISO_8601)


class TestInvalidInput:

    @pytest.mark.parametrize("raw", ["", "not a date", "2018-13-45T99:00:00Z"])
    def test_unparsable_string(self, raw):
        with pytest.raises(InvalidTimestamp) as info:
            Instant.parse(raw)
        assert info.value.raw == raw

    def test_format_mismatch(self):
        with pytest.raises(InvalidTimestamp):
            Instant.parse("2018-05-21", "%d/%m/%Y")

    def test_unsupported_type(self):
        with pytest.raises(InvalidTimestamp):
            Instant.parse([2018, 5, 21])

    def test_boolean_rejected(self):
        with pytest.raises(InvalidTimestamp):
            Instant.parse(True)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            Instant.parse("garbage")


# ── Translation ───────────────────────────────────────────────────────────────

class TestTranslation:

    def test_add_days(self, monday_nine):
        assert monday_nine.add(1, "days").to_iso_string() == "2018-05-22T09:00:00.000Z"

    def test_add_timedelta(self, monday_nine):
        assert monday_nine.add(timedelta(hours=3)).hour == 12

    def test_add_bare_number_is_seconds(self, monday_nine):
        assert monday_nine.add(90).to_iso_string() == "2018-05-21T09:01:30.000Z"

    def test_subtract_hours(self, monday_nine):
        assert monday_nine.subtract(10, "h").to_iso_string() == "2018-05-20T23:00:00.000Z"

    def test_add_month_clamps_day(self):
        inst = Instant.parse("2018-01-31T00:00:00Z")
        assert inst.add(1, "months").to_iso_string() == "2018-02-28T00:00:00.000Z"

    def test_out_of_range_is_a_business_time_error(self, monday_nine):
        with pytest.raises(InstantOutOfRange):
            monday_nine.add(10**7, "days")
        with pytest.raises(BusinessTimeError):
            monday_nine.subtract(10**7, "days")

    def test_fractional_month_rejected(self, monday_nine):
        with pytest.raises(ValueError):
            monday_nine.add(1.5, "months")

    def test_unknown_unit_rejected(self, monday_nine):
        with pytest.raises(ValueError):
            monday_nine.add(1, "fortnights")

    def test_receiver_unchanged(self, monday_nine):
        monday_nine.add(1, "days")
        assert monday_nine.to_iso_string() == "2018-05-21T09:00:00.000Z"


# ── Truncation ────────────────────────────────────────────────────────────────

class TestTruncation:

    @pytest.fixture
    def wednesday(self):
        return Instant.parse("2018-05-23T13:45:12.345Z")

    @pytest.mark.parametrize(
        "unit, expected",
        [
            ("second", "2018-05-23T13:45:12.000Z"),
            ("minute", "2018-05-23T13:45:00.000Z"),
            ("hour", "2018-05-23T13:00:00.000Z"),
            ("day", "2018-05-23T00:00:00.000Z"),
            ("week", "2018-05-21T00:00:00.000Z"),
            ("month", "2018-05-01T00:00:00.000Z"),
            ("year", "2018-01-01T00:00:00.000Z"),
        ],
    )
    def test_start_of(self, wednesday, unit, expected):
        assert wednesday.start_of(unit).to_iso_string() == expected

    @pytest.mark.parametrize(
        "unit, expected",
        [
            ("hour", "2018-05-23T13:59:59.999Z"),
            ("day", "2018-05-23T23:59:59.999Z"),
            ("week", "2018-05-27T23:59:59.999Z"),
            ("month", "2018-05-31T23:59:59.999Z"),
            ("year", "2018-12-31T23:59:59.999Z"),
        ],
    )
    def test_end_of(self, wednesday, unit, expected):
        assert wednesday.end_of(unit).to_iso_string() == expected

    def test_plural_alias(self, wednesday):
        assert wednesday.start_of("days") == wednesday.start_of("day")

    def test_unknown_unit(self, wednesday):
        with pytest.raises(ValueError):
            wednesday.start_of("decade")


# ── Comparison ────────────────────────────────────────────────────────────────

class TestComparison:

    def test_before_after(self, monday_nine):
        later = monday_nine.add(1, "seconds")
        assert monday_nine.is_before(later)
        assert later.is_after(monday_nine)
        assert not monday_nine.is_after(later)

    def test_same_with_granularity(self, monday_nine):
        later = monday_nine.add(30, "seconds")
        assert not monday_nine.is_same(later)
        assert monday_nine.is_same(later, "minute")
        assert not monday_nine.is_before(later, "minute")

    def test_compares_against_strings(self, monday_nine):
        assert monday_nine.is_before("2018-05-21T10:00:00Z")

    def test_ordering(self, monday_nine):
        assert monday_nine < monday_nine.add(1, "h")
        assert max(monday_nine, monday_nine.add(1, "h")).hour == 10


# ── Step grid ─────────────────────────────────────────────────────────────────

class TestStepsUntil:

    def test_hourly_grid_excludes_end(self, monday_nine):
        end = monday_nine.add(3, "hours")
        steps = list(monday_nine.steps_until(end, timedelta(hours=1)))
        assert [s.hour for s in steps] == [9, 10, 11]

    def test_partial_last_step_included(self, monday_nine):
        end = monday_nine.add(150, "minutes")
        steps = list(monday_nine.steps_until(end, timedelta(hours=1)))
        assert len(steps) == 3

    def test_end_before_start_is_empty(self, monday_nine):
        assert list(monday_nine.steps_until(monday_nine.subtract(1, "h"), timedelta(hours=1))) == []

    def test_grid_crosses_chunk_boundaries(self, monday_nine):
        end = monday_nine.add(10_000, "seconds")
        steps = list(monday_nine.steps_until(end, timedelta(seconds=1)))
        assert len(steps) == 10_000
        assert steps[4096].to_iso_string() == "2018-05-21T10:08:16.000Z"
        assert steps[-1].to_iso_string() == "2018-05-21T11:46:39.000Z"

    def test_grid_is_lazy(self, monday_nine):
        # A century of microsecond steps would never fit in memory.
        steps = monday_nine.steps_until(monday_nine.add(36_500, "days"), timedelta(microseconds=1))
        first = list(islice(steps, 3))
        assert first[-1].to_iso_string(keep_offset=True) == "2018-05-21T09:00:00.000+00:00"
        assert first[-1].to_datetime().microsecond == 2

    def test_grid_is_utc(self, monday_nine):
        step = list(monday_nine.steps_until(monday_nine.add(1, "h"), timedelta(minutes=15)))[2]
        assert step.to_datetime().tzinfo == timezone.utc
        assert step.to_iso_string() == "2018-05-21T09:30:00.000Z"


# ── Rendering ─────────────────────────────────────────────────────────────────

class TestRendering:

    def test_default_format(self, monday_nine):
        assert monday_nine.format() == "2018-05-21T09:00:00Z"

    def test_pattern_format(self, monday_nine):
        assert monday_nine.format("%Y/%m/%d %H:%M") == "2018/05/21 09:00"

    def test_keep_offset(self, monday_nine):
        assert monday_nine.to_iso_string(keep_offset=True) == "2018-05-21T09:00:00.000+00:00"

    def test_str_is_iso(self, monday_nine):
        assert str(monday_nine) == "2018-05-21T09:00:00.000Z"

    def test_weekday_accessors(self, monday_nine):
        assert monday_nine.weekday() == 0
        assert monday_nine.isoweekday() == 1
        assert (monday_nine.year, monday_nine.month, monday_nine.day) == (2018, 5, 21)
