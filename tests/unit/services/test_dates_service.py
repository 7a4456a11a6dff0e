"""Tests for services/dates_service.py - civil dates and the reference clock."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
import time_machine

from exercise_streaks.services.dates_service import (
    JST_OFFSET,
    CivilDate,
    FixedClock,
    InvalidDateError,
    SystemClock,
    add_days,
    compare,
    day_of_week,
    days_in_month,
    is_consecutive,
    month_start,
    normalize,
    shift_month,
)

pytestmark = pytest.mark.unit


class TestCivilDate:
    def test_valid_leap_day(self):
        d = CivilDate(2024, 2, 29)
        assert (d.year, d.month, d.day) == (2024, 2, 29)

    @pytest.mark.parametrize(
        "parts",
        [
            (2023, 2, 29),  # not a leap year
            (1900, 2, 29),  # century, not a leap year
            (2024, 13, 1),
            (2024, 0, 10),
            (2024, 4, 31),
            (2024, 6, 0),
            (0, 1, 1),
        ],
    )
    def test_invalid_dates_fail_fast(self, parts):
        with pytest.raises(InvalidDateError):
            CivilDate(*parts)

    def test_non_integer_parts_rejected(self):
        with pytest.raises(InvalidDateError):
            CivilDate(2024, "6", 1)

    def test_invalid_date_error_is_value_error(self):
        with pytest.raises(ValueError, match="month must be in 1..12"):
            CivilDate(2024, 13, 1)

    def test_ordering_is_lexicographic(self):
        assert CivilDate(2024, 1, 31) < CivilDate(2024, 2, 1)
        assert CivilDate(2023, 12, 31) < CivilDate(2024, 1, 1)
        assert sorted([CivilDate(2024, 6, 2), CivilDate(2024, 5, 30)]) == [
            CivilDate(2024, 5, 30),
            CivilDate(2024, 6, 2),
        ]

    def test_equal_dates_hash_equal(self):
        assert len({CivilDate(2024, 6, 1), CivilDate(2024, 6, 1)}) == 1

    def test_immutable(self):
        d = CivilDate(2024, 6, 1)
        with pytest.raises(AttributeError):
            d.day = 2

    def test_parse_and_isoformat(self):
        d = CivilDate.parse("2024-06-01")
        assert d == CivilDate(2024, 6, 1)
        assert d.isoformat() == "2024-06-01"
        assert str(d) == "2024-06-01"

    @pytest.mark.parametrize("text", ["2024-6-1", "2024/06/01", "20240601", ""])
    def test_parse_is_strict(self, text):
        with pytest.raises(InvalidDateError):
            CivilDate.parse(text)

    def test_parse_rejects_impossible_date(self):
        with pytest.raises(InvalidDateError):
            CivilDate.parse("2024-02-30")

    def test_date_round_trip(self):
        assert CivilDate.from_date(date(2024, 6, 1)).to_date() == date(2024, 6, 1)


class TestNormalize:
    def test_utc_afternoon_is_next_day_in_jst(self):
        instant = datetime(2024, 6, 1, 15, 30, tzinfo=UTC)
        assert normalize(instant, 9) == CivilDate(2024, 6, 2)

    def test_last_minute_before_jst_midnight(self):
        instant = datetime(2024, 6, 1, 14, 59, tzinfo=UTC)
        assert normalize(instant, JST_OFFSET) == CivilDate(2024, 6, 1)

    def test_embedded_offset_is_ignored_beyond_the_instant(self):
        eastern = timezone(timedelta(hours=-5))
        # 10:00 at -05:00 is 15:00 UTC, which is midnight in JST
        assert normalize(datetime(2024, 6, 1, 10, 0, tzinfo=eastern), 9) == CivilDate(
            2024, 6, 2
        )
        assert normalize(datetime(2024, 6, 1, 8, 0, tzinfo=eastern), 9) == CivilDate(
            2024, 6, 1
        )

    def test_naive_datetime_is_taken_as_utc(self):
        assert normalize(datetime(2024, 12, 31, 15, 0), 9) == CivilDate(2025, 1, 1)

    def test_negative_offset(self):
        instant = datetime(2024, 1, 1, 3, 0, tzinfo=UTC)
        assert normalize(instant, -5) == CivilDate(2023, 12, 31)

    def test_iso_datetime_string(self):
        assert normalize("2024-06-01T15:30:00Z", 9) == CivilDate(2024, 6, 2)
        assert normalize("2024-06-01T23:00:00+09:00", 9) == CivilDate(2024, 6, 1)

    def test_date_string_is_already_civil(self):
        assert normalize("2024-06-01", 9) == CivilDate(2024, 6, 1)
        assert normalize("2024-06-01", -11) == CivilDate(2024, 6, 1)

    def test_plain_date_and_civil_date_pass_through(self):
        assert normalize(date(2024, 6, 1), 9) == CivilDate(2024, 6, 1)
        assert normalize(CivilDate(2024, 6, 1), 9) == CivilDate(2024, 6, 1)

    def test_posix_timestamp(self):
        assert normalize(0, 9) == CivilDate(1970, 1, 1)
        assert normalize(15 * 3600, 9) == CivilDate(1970, 1, 2)
        assert normalize(15 * 3600.0, 0) == CivilDate(1970, 1, 1)

    def test_timedelta_and_hours_agree(self):
        instant = datetime(2024, 3, 10, 20, 0, tzinfo=UTC)
        assert normalize(instant, timedelta(hours=9)) == normalize(instant, 9)

    @pytest.mark.parametrize("text", ["not a date", "2024-02-30", "2024-13-01T00:00"])
    def test_unparseable_strings_raise(self, text):
        with pytest.raises(InvalidDateError):
            normalize(text, 9)

    def test_unsupported_types_raise_type_error(self):
        with pytest.raises(TypeError):
            normalize(True, 9)
        with pytest.raises(TypeError):
            normalize([2024, 6, 1], 9)

    def test_offset_must_be_within_a_day(self):
        with pytest.raises(ValueError):
            normalize("2024-06-01", 24)


class TestDateArithmetic:
    @pytest.mark.parametrize(
        ("start", "days", "expected"),
        [
            (CivilDate(2024, 2, 28), 1, CivilDate(2024, 2, 29)),
            (CivilDate(2023, 2, 28), 1, CivilDate(2023, 3, 1)),
            (CivilDate(2024, 12, 31), 1, CivilDate(2025, 1, 1)),
            (CivilDate(2024, 3, 1), -1, CivilDate(2024, 2, 29)),
            (CivilDate(2024, 1, 1), -1, CivilDate(2023, 12, 31)),
            (CivilDate(2024, 6, 1), 0, CivilDate(2024, 6, 1)),
            (CivilDate(2024, 6, 1), 366, CivilDate(2025, 6, 2)),
        ],
    )
    def test_add_days(self, start, days, expected):
        assert add_days(start, days) == expected

    def test_add_days_out_of_range(self):
        with pytest.raises(InvalidDateError):
            add_days(CivilDate(9999, 12, 31), 1)

    def test_compare(self):
        a, b = CivilDate(2024, 6, 1), CivilDate(2024, 6, 2)
        assert compare(a, b) == -1
        assert compare(b, a) == 1
        assert compare(a, CivilDate(2024, 6, 1)) == 0

    def test_is_consecutive(self):
        assert is_consecutive(CivilDate(2024, 12, 31), CivilDate(2025, 1, 1))
        assert is_consecutive(CivilDate(2024, 2, 28), CivilDate(2024, 2, 29))
        assert not is_consecutive(CivilDate(2025, 1, 1), CivilDate(2024, 12, 31))
        assert not is_consecutive(CivilDate(2024, 6, 1), CivilDate(2024, 6, 1))
        assert not is_consecutive(CivilDate(2024, 6, 1), CivilDate(2024, 6, 3))

    def test_day_of_week_sunday_first(self):
        assert day_of_week(CivilDate(2024, 6, 1)) == 6  # Saturday
        assert day_of_week(CivilDate(2024, 6, 2)) == 0  # Sunday
        assert day_of_week(CivilDate(2024, 6, 3)) == 1  # Monday

    def test_days_in_month(self):
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2023, 2) == 28
        assert days_in_month(2024, 12) == 31
        with pytest.raises(InvalidDateError):
            days_in_month(2024, 13)

    def test_month_start(self):
        assert month_start(2024, 6) == CivilDate(2024, 6, 1)

    @pytest.mark.parametrize(
        ("year", "month", "delta", "expected"),
        [
            (2024, 1, -1, (2023, 12)),
            (2024, 12, 1, (2025, 1)),
            (2024, 6, 0, (2024, 6)),
            (2024, 1, -13, (2022, 12)),
            (2024, 11, 14, (2026, 1)),
        ],
    )
    def test_shift_month(self, year, month, delta, expected):
        assert shift_month(year, month, delta) == expected


class TestClocks:
    @time_machine.travel(datetime(2024, 6, 1, 15, 30, tzinfo=UTC), tick=False)
    def test_system_clock_uses_reference_offset(self):
        assert SystemClock().today() == CivilDate(2024, 6, 2)
        assert SystemClock(0).today() == CivilDate(2024, 6, 1)

    @time_machine.travel(datetime(2024, 12, 31, 14, 59, tzinfo=UTC), tick=False)
    def test_system_clock_before_jst_midnight(self):
        assert SystemClock(timedelta(hours=9)).today() == CivilDate(2024, 12, 31)

    def test_system_clock_offset(self):
        assert SystemClock(9).offset == timedelta(hours=9)

    def test_fixed_clock(self):
        assert FixedClock(CivilDate(2024, 6, 3)).today() == CivilDate(2024, 6, 3)
