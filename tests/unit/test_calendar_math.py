"""
Тесты для модуля Calendar Math

Проверяет:
1. Високосные годы и длины месяцев
2. Дни от эпохи и civil-поля в обе стороны
3. Порядковый день года
4. ISO и локальные недели
5. Проверки диапазонов полей
"""

import pytest

from civilclock.core.domain.records import CivilFields
from civilclock.core.math.calendar_math import (
    civil_from_days,
    compute_ordinal,
    days_from_civil,
    days_in_month,
    days_in_year,
    gregorian_to_ordinal,
    gregorian_to_week,
    has_invalid_gregorian_data,
    has_invalid_ordinal_data,
    has_invalid_time_data,
    has_invalid_week_data,
    is_leap_year,
    iso_weekday,
    obj_to_local_ts,
    ordinal_to_gregorian,
    signed_offset,
    ts_to_obj,
    uncompute_ordinal,
    untruncate_year,
    week_data_of,
    week_to_gregorian,
    weeks_in_week_year,
)

from tests.conftest import NOW_MS

# =============================================================================
# ГОДЫ И МЕСЯЦЫ
# =============================================================================


class TestLeapYears:
    """Тесты для is_leap_year / days_in_year"""

    @pytest.mark.parametrize(
        "year,expected", [(2000, True), (1900, False), (2016, True), (2019, False), (2100, False)]
    )
    def test_gregorian_rule(self, year, expected) -> None:
        assert is_leap_year(year) is expected

    def test_days_in_year(self) -> None:
        assert days_in_year(2016) == 366
        assert days_in_year(2017) == 365


class TestDaysInMonth:
    """Тесты для days_in_month"""

    def test_february_branches_on_leap_year(self) -> None:
        assert days_in_month(2000, 2) == 29
        assert days_in_month(1900, 2) == 28
        assert days_in_month(2016, 2) == 29

    def test_regular_months(self) -> None:
        assert days_in_month(2019, 1) == 31
        assert days_in_month(2019, 4) == 30

    def test_month_overflow_wraps_year(self) -> None:
        """Месяц 14 — февраль следующего года, месяц 0 — декабрь предыдущего"""
        assert days_in_month(2019, 14) == 29
        assert days_in_month(2019, 0) == 31


class TestUntruncateYear:
    """Тесты для untruncate_year"""

    def test_cutoff(self) -> None:
        assert untruncate_year(61, 60) == 1961
        assert untruncate_year(60, 60) == 2060
        assert untruncate_year(5, 60) == 2005

    def test_full_years_unchanged(self) -> None:
        assert untruncate_year(1999, 60) == 1999


# =============================================================================
# ДНИ ОТ ЭПОХИ И CIVIL-ПОЛЯ
# =============================================================================


class TestEpochDays:
    """Тесты для days_from_civil / civil_from_days / iso_weekday"""

    def test_epoch(self) -> None:
        assert days_from_civil(1970, 1, 1) == 0
        assert civil_from_days(0) == (1970, 1, 1)

    def test_leap_day_handling(self) -> None:
        assert days_from_civil(2000, 3, 1) == 11017
        assert civil_from_days(11016) == (2000, 2, 29)

    def test_before_epoch(self) -> None:
        assert civil_from_days(-1) == (1969, 12, 31)

    def test_overflow_carries(self) -> None:
        assert days_from_civil(2020, 13, 1) == days_from_civil(2021, 1, 1)
        assert days_from_civil(2020, 1, 32) == days_from_civil(2020, 2, 1)

    def test_iso_weekday(self) -> None:
        """1970-01-01 — четверг, 2020-06-15 — понедельник"""
        assert iso_weekday(1970, 1, 1) == 4
        assert iso_weekday(2020, 6, 15) == 1
        assert iso_weekday(2020, 6, 14) == 7


class TestCivilTimestamps:
    """Тесты для obj_to_local_ts / ts_to_obj"""

    def test_fields_to_ts(self) -> None:
        fields = {"year": 2020, "month": 6, "day": 15, "hour": 12}
        assert obj_to_local_ts(fields) == NOW_MS

    def test_round_trip(self) -> None:
        """ts_to_obj(obj_to_local_ts(f), 0) == f"""
        fields = CivilFields(
            year=1982, month=5, day=25, hour=9, minute=30, second=15, millisecond=123
        )
        assert ts_to_obj(obj_to_local_ts(fields), 0) == fields

    def test_two_digit_years_are_literal(self) -> None:
        """Год 50 — это 50 год, а не 1950"""
        ts = obj_to_local_ts({"year": 50, "month": 1, "day": 1})
        assert ts_to_obj(ts, 0).year == 50

    def test_offset_applied(self) -> None:
        civil = ts_to_obj(NOW_MS, 330)
        assert (civil.hour, civil.minute) == (17, 30)

    def test_negative_ts(self) -> None:
        civil = ts_to_obj(-1, 0)
        assert (civil.year, civil.month, civil.day) == (1969, 12, 31)
        assert (civil.hour, civil.minute, civil.second, civil.millisecond) == (23, 59, 59, 999)


# =============================================================================
# ORDINAL
# =============================================================================


class TestOrdinal:
    """Тесты для порядкового дня года"""

    def test_compute(self) -> None:
        assert compute_ordinal(2020, 3, 1) == 61
        assert compute_ordinal(2019, 3, 1) == 60
        assert compute_ordinal(2019, 12, 31) == 365

    def test_uncompute(self) -> None:
        assert uncompute_ordinal(2020, 61) == (3, 1)
        assert uncompute_ordinal(2019, 365) == (12, 31)
        assert uncompute_ordinal(2016, 200) == (7, 18)

    def test_field_conversion_keeps_time(self) -> None:
        ordinal = gregorian_to_ordinal({"year": 2020, "month": 3, "day": 1, "hour": 5})
        assert ordinal == {"year": 2020, "ordinal": 61, "hour": 5}
        assert ordinal_to_gregorian(ordinal) == {"year": 2020, "month": 3, "day": 1, "hour": 5}


# =============================================================================
# НЕДЕЛИ
# =============================================================================


class TestIsoWeeks:
    """Тесты для ISO недель"""

    def test_weeks_in_week_year(self) -> None:
        assert weeks_in_week_year(2004) == 53
        assert weeks_in_week_year(2005) == 52

    def test_end_of_2004(self) -> None:
        week = gregorian_to_week({"year": 2004, "month": 12, "day": 31})
        assert (week["week_year"], week["week_number"], week["weekday"]) == (2004, 53, 5)

    def test_january_first_belongs_to_previous_week_year(self) -> None:
        """2005-01-01 (суббота) — 2004-W53-6"""
        week = gregorian_to_week({"year": 2005, "month": 1, "day": 1})
        assert (week["week_year"], week["week_number"], week["weekday"]) == (2004, 53, 6)

    def test_december_belongs_to_next_week_year(self) -> None:
        """2008-12-29 (понедельник) — 2009-W01-1"""
        week = gregorian_to_week({"year": 2008, "month": 12, "day": 29})
        assert (week["week_year"], week["week_number"], week["weekday"]) == (2009, 1, 1)

    def test_week_to_gregorian(self) -> None:
        result = week_to_gregorian({"week_year": 2009, "week_number": 1, "weekday": 1, "hour": 3})
        assert result == {"hour": 3, "year": 2008, "month": 12, "day": 29}

    def test_week_data_of_civil_fields(self) -> None:
        fields = CivilFields(year=2016, month=5, day=25, hour=0, minute=0, second=0, millisecond=0)
        week = week_data_of(fields)
        assert (week.week_year, week.week_number, week.weekday) == (2016, 21, 3)


class TestLocaleWeeks:
    """Тесты для недель с параметрами локали"""

    def test_sunday_start_single_day_first_week(self) -> None:
        """en-US: неделя с воскресенья, первая неделя — содержащая 1 января"""
        week = gregorian_to_week({"year": 2020, "month": 1, "day": 1}, 1, 7)
        assert (week["week_year"], week["week_number"], week["weekday"]) == (2020, 1, 4)

    def test_sunday_is_first_local_weekday(self) -> None:
        week = gregorian_to_week({"year": 2020, "month": 6, "day": 14}, 1, 7)
        assert week["weekday"] == 1

    def test_round_trip_with_locale_parameters(self) -> None:
        fields = {"year": 2021, "month": 1, "day": 2}
        week = gregorian_to_week(fields, 1, 7)
        assert week_to_gregorian(week, 1, 7) == fields


# =============================================================================
# ПРОВЕРКИ ДИАПАЗОНОВ
# =============================================================================


class TestRangeChecks:
    """Тесты для has_invalid_*"""

    def test_valid_gregorian(self) -> None:
        assert has_invalid_gregorian_data({"year": 2020, "month": 2, "day": 29}) is None

    def test_invalid_day(self) -> None:
        invalid = has_invalid_gregorian_data({"year": 2019, "month": 2, "day": 29})
        assert invalid is not None
        assert invalid.reason == "unit out of range"
        assert "as a day" in invalid.explanation

    def test_invalid_month(self) -> None:
        invalid = has_invalid_gregorian_data({"year": 2019, "month": 13, "day": 1})
        assert "as a month" in invalid.explanation

    def test_ordinal_bounds(self) -> None:
        assert has_invalid_ordinal_data({"year": 2016, "ordinal": 366}) is None
        assert has_invalid_ordinal_data({"year": 2017, "ordinal": 366}) is not None

    def test_week_bounds(self) -> None:
        assert has_invalid_week_data({"week_year": 2004, "week_number": 53, "weekday": 1}) is None
        invalid = has_invalid_week_data({"week_year": 2005, "week_number": 53, "weekday": 1})
        assert "as a week" in invalid.explanation

    def test_hour_24_only_at_end_of_day(self) -> None:
        """24:00:00.000 допустимо, 24:01 — нет"""
        midnight = {"hour": 24, "minute": 0, "second": 0, "millisecond": 0}
        assert has_invalid_time_data(midnight) is None
        invalid = has_invalid_time_data({**midnight, "minute": 1})
        assert "as a hour" in invalid.explanation

    def test_fractional_second_rejected(self) -> None:
        invalid = has_invalid_time_data({"hour": 1, "minute": 0, "second": 1.5, "millisecond": 0})
        assert invalid is not None


class TestSignedOffset:
    """Тесты для signed_offset"""

    def test_minutes_follow_hour_sign(self) -> None:
        assert signed_offset("-05", "30") == -330
        assert signed_offset("+05", "30") == 330
        assert signed_offset("+5", None) == 300

    def test_negative_zero_hours(self) -> None:
        """-00:30 — минус полчаса"""
        assert signed_offset("-00", "30") == -30
