"""
Тесты Instant

Проверяет:
1. Фабрики: utc/local, from_millis/from_seconds, from_object (григорианские,
   недельные и ordinal-поля), опции
2. Civil-поля, ISO-недели, день года
3. set/plus/minus с обрезкой дня, start_of/end_of
4. Переходы DST в America/New_York (разрыв и откат часов)
5. Смену зоны, вывод ISO/RFC/HTTP/SQL, связь с datetime
6. Невалидные моменты, сравнения, min/max, hash
"""

import math
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from civilclock import Instant, Settings
from civilclock.core.errors import (
    ConflictingSpecificationError,
    InvalidArgumentError,
    InvalidDateTimeError,
    InvalidUnitError,
)
from tests.conftest import NOW_MS

NEW_YORK = "America/New_York"


@pytest.fixture
def moment() -> Instant:
    """1982-05-25T09:30:00Z, вторник"""
    return Instant.utc(1982, 5, 25, 9, 30)


# =============================================================================
# ФАБРИКИ
# =============================================================================


class TestFactories:
    """Тесты конструирования Instant"""

    def test_utc_positional_fields(self, moment: Instant) -> None:
        assert moment.to_iso() == "1982-05-25T09:30:00.000Z"
        assert moment.zone_name == "UTC"
        assert moment.locale == "en-US"

    def test_utc_without_fields_is_now(self) -> None:
        assert Instant.utc().to_millis() == NOW_MS
        assert Instant.now().to_millis() == NOW_MS

    def test_local_uses_default_zone(self) -> None:
        Settings.default_zone = NEW_YORK
        instant = Instant.local(2017, 3, 12, 5, 45)
        assert instant.hour == 5
        assert instant.zone_name == NEW_YORK
        assert instant.offset == -240

    def test_local_out_of_range_field(self) -> None:
        instant = Instant.utc(2017, 13)
        assert not instant.is_valid
        assert instant.invalid_reason == "unit out of range"

    def test_too_many_fields(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Instant.utc(2017, 1, 1, 0, 0, 0, 0, 0)

    def test_unknown_option(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Instant.utc(2017, 1, 1, colour="red")

    def test_from_millis_truncates(self) -> None:
        assert Instant.from_millis(NOW_MS + 0.9).to_millis() == NOW_MS

    def test_from_millis_requires_number(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Instant.from_millis("1000")

    def test_from_millis_out_of_range(self) -> None:
        assert Instant.from_millis(1e20).invalid_reason == "timestamp out of range"

    def test_from_seconds(self) -> None:
        assert Instant.from_seconds(1.5).to_millis() == 1500

    def test_from_millis_with_zone(self) -> None:
        instant = Instant.from_millis(0, zone="utc+3")
        assert instant.hour == 3
        assert instant.offset == 180

    def test_unsupported_zone(self) -> None:
        instant = Instant.from_millis(0, zone="Mars/Olympus")
        assert not instant.is_valid
        assert instant.invalid_reason == "unsupported zone"


class TestFromObject:
    """Тесты from_object"""

    def test_missing_lower_fields_are_minimal(self) -> None:
        instant = Instant.from_object({"year": 2017, "month": 5})
        assert instant.to_object() == {
            "year": 2017,
            "month": 5,
            "day": 1,
            "hour": 0,
            "minute": 0,
            "second": 0,
            "millisecond": 0,
        }

    def test_missing_higher_fields_come_from_now(self) -> None:
        instant = Instant.from_object({"hour": 10})
        assert (instant.year, instant.month, instant.day) == (2020, 6, 15)
        assert (instant.hour, instant.minute) == (10, 0)

    def test_singular_and_camel_names(self) -> None:
        instant = Instant.from_object({"Year": 2017, "months": 2, "weekNumber": None, "day": 3})
        assert instant.to_iso_date() == "2017-02-03"

    def test_iso_week_fields(self) -> None:
        instant = Instant.from_object({"week_year": 2020, "week_number": 1, "weekday": 1})
        assert instant.to_iso_date() == "2019-12-30"

    def test_ordinal_fields(self) -> None:
        assert Instant.from_object({"year": 2020, "ordinal": 60}).to_iso_date() == "2020-02-29"

    def test_local_week_fields(self) -> None:
        """en-US: неделя с воскресенья, первая неделя содержит 1 января"""
        instant = Instant.from_object(
            {"local_week_year": 2020, "local_week_number": 25, "local_weekday": 1}
        )
        assert instant.to_iso_date() == "2020-06-14"

    def test_mixing_week_and_gregorian(self) -> None:
        with pytest.raises(ConflictingSpecificationError):
            Instant.from_object({"week_year": 2020, "month": 3})

    def test_mixing_ordinal_and_month(self) -> None:
        with pytest.raises(ConflictingSpecificationError):
            Instant.from_object({"year": 2020, "ordinal": 3, "day": 4})

    def test_mixing_local_and_iso_weeks(self) -> None:
        with pytest.raises(ConflictingSpecificationError):
            Instant.from_object({"local_week_number": 3, "weekday": 2})

    def test_unknown_field(self) -> None:
        with pytest.raises(InvalidUnitError):
            Instant.from_object({"fortnight": 2})

    def test_invalid_day(self) -> None:
        instant = Instant.from_object({"year": 2019, "month": 2, "day": 30})
        assert not instant.is_valid
        assert instant.invalid_reason == "unit out of range"

    def test_mismatched_weekday(self) -> None:
        """2020-06-15 — понедельник"""
        instant = Instant.from_object({"year": 2020, "month": 6, "day": 15, "weekday": 2})
        assert instant.invalid_reason == "mismatched weekday"
        assert Instant.from_object({"year": 2020, "month": 6, "day": 15, "weekday": 1}).is_valid


# =============================================================================
# ПОЛЯ
# =============================================================================


class TestFields:
    """Тесты civil-полей и недель"""

    def test_civil_fields(self, moment: Instant) -> None:
        assert (moment.year, moment.month, moment.day) == (1982, 5, 25)
        assert (moment.hour, moment.minute, moment.second, moment.millisecond) == (9, 30, 0, 0)
        assert moment.quarter == 2

    def test_iso_week_and_ordinal(self, moment: Instant) -> None:
        assert moment.weekday == 2
        assert moment.week_number == 21
        assert moment.week_year == 1982
        assert moment.ordinal == 145
        assert moment.to_iso_week_date() == "1982-W21-2"

    def test_local_week(self) -> None:
        sunday = Instant.utc(2020, 6, 14)
        assert sunday.week_number == 24
        assert sunday.local_week_number == 25
        assert sunday.local_weekday == 1

    def test_get_by_unit_name(self, moment: Instant) -> None:
        assert moment.get("year") == 1982
        assert moment.get("weekNumber") == 21

    def test_names(self, moment: Instant) -> None:
        assert moment.month_long == "May"
        assert moment.weekday_short == "Tue"

    def test_calendar_quantities(self) -> None:
        instant = Instant.utc(2020, 2, 10)
        assert instant.is_in_leap_year
        assert instant.days_in_month == 29
        assert instant.days_in_year == 366
        assert Instant.utc(2020, 6, 1).weeks_in_week_year == 53

    def test_weekend(self) -> None:
        assert Instant.utc(2020, 6, 13).is_weekend
        assert not Instant.utc(2020, 6, 15).is_weekend


# =============================================================================
# SET / PLUS / MINUS
# =============================================================================


class TestMath:
    """Тесты set, plus, minus, start_of, end_of"""

    def test_set_clamps_day(self) -> None:
        assert Instant.utc(2017, 1, 31).set(month=2).day == 28

    def test_set_mapping(self) -> None:
        assert Instant.utc(2017, 1, 31).set({"month": 3, "day": 15}).to_iso_date() == "2017-03-15"

    def test_set_weekday(self) -> None:
        """Вторник 1982-05-25 → воскресенье той же ISO-недели"""
        assert Instant.utc(1982, 5, 25).set(weekday=7).to_iso_date() == "1982-05-30"

    def test_set_ordinal(self) -> None:
        assert Instant.utc(2017, 1, 31).set(ordinal=100).to_iso_date() == "2017-04-10"

    def test_plus_month_clamps(self) -> None:
        assert Instant.utc(2017, 1, 31).plus(months=1).to_iso_date() == "2017-02-28"

    def test_plus_mapping_and_duration_like(self) -> None:
        base = Instant.utc(2017, 1, 1)
        assert base.plus({"days": 2, "hours": 3}).to_iso() == "2017-01-03T03:00:00.000Z"
        assert base.plus(1000).to_iso() == "2017-01-01T00:00:01.000Z"
        assert base.plus(timedelta(minutes=5)).minute == 5
        assert (base + {"weeks": 1}).day == 8

    def test_minus(self) -> None:
        assert Instant.utc(2017, 3, 31).minus(months=1).to_iso_date() == "2017-02-28"
        assert Instant.utc(2017, 1, 1).minus(hours=1).to_iso() == "2016-12-31T23:00:00.000Z"

    def test_fractional_days_become_millis(self) -> None:
        assert Instant.utc(2017, 1, 1).plus(days=1.5).to_iso() == "2017-01-02T12:00:00.000Z"

    def test_start_of(self) -> None:
        instant = Instant.utc(2017, 2, 15, 10, 20, 30, 400)
        assert instant.start_of("year").to_iso() == "2017-01-01T00:00:00.000Z"
        assert instant.start_of("quarter").to_iso_date() == "2017-01-01"
        assert instant.start_of("month").to_iso_date() == "2017-02-01"
        assert instant.start_of("week").to_iso_date() == "2017-02-13"
        assert instant.start_of("hour").to_iso() == "2017-02-15T10:00:00.000Z"

    def test_start_of_locale_week(self) -> None:
        """Среда 2017-02-15, неделя en-US начинается в воскресенье"""
        instant = Instant.utc(2017, 2, 15)
        assert instant.start_of("week", use_locale_weeks=True).to_iso_date() == "2017-02-12"

    def test_end_of(self) -> None:
        instant = Instant.utc(2017, 2, 15, 10)
        assert instant.end_of("day").to_iso() == "2017-02-15T23:59:59.999Z"
        assert instant.end_of("month").to_iso() == "2017-02-28T23:59:59.999Z"
        assert instant.end_of("week").to_iso() == "2017-02-19T23:59:59.999Z"

    def test_start_of_unknown_unit(self) -> None:
        with pytest.raises(InvalidUnitError):
            Instant.utc(2017, 2, 15).start_of("fortnight")

    def test_has_same(self) -> None:
        assert Instant.utc(2017, 3, 1, 10).has_same(Instant.utc(2017, 3, 1, 23), "day")
        assert not Instant.utc(2017, 3, 1, 10).has_same(Instant.utc(2017, 3, 2), "day")


# =============================================================================
# DST
# =============================================================================


class TestDaylightSaving:
    """Тесты переходов DST в America/New_York"""

    def test_ambiguous_time_prefers_earlier_offset(self) -> None:
        instant = Instant.from_object(
            {"year": 2017, "month": 11, "day": 5, "hour": 1, "minute": 30}, zone=NEW_YORK
        )
        assert instant.offset == -240
        assert instant.is_in_dst

    def test_possible_offsets_during_fall_back(self) -> None:
        instant = Instant.from_object(
            {"year": 2017, "month": 11, "day": 5, "hour": 1, "minute": 30}, zone=NEW_YORK
        )
        candidates = instant.get_possible_offsets()
        assert [c.offset for c in candidates] == [-240, -300]
        assert all(c.hour == 1 and c.minute == 30 for c in candidates)
        assert candidates[1].to_millis() - candidates[0].to_millis() == 3_600_000

    def test_possible_offsets_outside_transition(self) -> None:
        instant = Instant.from_object({"year": 2017, "month": 7, "day": 1}, zone=NEW_YORK)
        assert instant.get_possible_offsets() == [instant]

    def test_gap_moves_forward(self) -> None:
        instant = Instant.from_object(
            {"year": 2017, "month": 3, "day": 12, "hour": 2, "minute": 30}, zone=NEW_YORK
        )
        assert (instant.hour, instant.minute) == (3, 30)
        assert instant.offset == -240

    def test_calendar_day_vs_24_hours(self) -> None:
        instant = Instant.from_object(
            {"year": 2017, "month": 3, "day": 11, "hour": 12}, zone=NEW_YORK
        )
        assert instant.plus(days=1).hour == 12
        assert instant.plus(hours=24).hour == 13

    def test_offset_names(self) -> None:
        instant = Instant.from_object({"year": 2017, "month": 7, "day": 1}, zone=NEW_YORK)
        assert instant.offset_name_short
        assert not instant.is_offset_fixed
        assert not Instant.utc(2017, 7, 1).is_in_dst


# =============================================================================
# ЗОНЫ
# =============================================================================


class TestZones:
    """Тесты set_zone, to_utc, to_local"""

    def test_set_zone_keeps_instant(self) -> None:
        instant = Instant.utc(2017, 5, 15, 10).set_zone(NEW_YORK)
        assert instant.hour == 6
        assert instant.to_millis() == Instant.utc(2017, 5, 15, 10).to_millis()
        assert instant.to_iso() == "2017-05-15T06:00:00.000-04:00"

    def test_set_zone_keep_local_time(self) -> None:
        instant = Instant.utc(2017, 5, 15, 10).set_zone(NEW_YORK, keep_local_time=True)
        assert instant.hour == 10
        assert instant.to_millis() == Instant.utc(2017, 5, 15, 14).to_millis()

    def test_set_invalid_zone(self) -> None:
        instant = Instant.utc(2017, 5, 15).set_zone("Nowhere/Special")
        assert instant.invalid_reason == "unsupported zone"

    def test_to_utc_with_offset(self) -> None:
        instant = Instant.utc(2017, 5, 15, 10).to_utc(120)
        assert instant.hour == 12
        assert instant.to_iso() == "2017-05-15T12:00:00.000+02:00"

    def test_to_local(self) -> None:
        instant = Instant.from_millis(0, zone=NEW_YORK).to_local()
        assert instant.zone_name == "UTC"

    def test_reconfigure(self) -> None:
        instant = Instant.utc(2017, 5, 15).reconfigure(locale="fr", numbering_system="arab")
        assert instant.locale == "fr"
        assert instant.numbering_system == "arab"
        assert instant.set_locale("de").locale == "de"


# =============================================================================
# ВЫВОД
# =============================================================================


class TestOutput:
    """Тесты технических форматов вывода"""

    def test_iso_options(self, moment: Instant) -> None:
        assert moment.to_iso(suppress_milliseconds=True) == "1982-05-25T09:30:00Z"
        assert moment.to_iso(include_offset=False) == "1982-05-25T09:30:00.000"
        assert moment.to_iso(format="basic") == "19820525T093000.000Z"
        assert moment.to_iso(precision="minute") == "1982-05-25T09:30Z"

    def test_iso_date_and_time(self, moment: Instant) -> None:
        assert moment.to_iso_date() == "1982-05-25"
        assert moment.to_iso_date(format="basic") == "19820525"
        assert moment.to_iso_time() == "09:30:00.000Z"

    def test_iso_negative_years(self) -> None:
        assert Instant.utc(-1, 1, 1).to_iso_date() == "-000001-01-01"

    def test_timestamp_out_of_range(self) -> None:
        assert Instant.utc(12345, 1, 1).invalid_reason == "timestamp out of range"

    def test_rfc2822(self, moment: Instant) -> None:
        assert moment.to_rfc2822() == "Tue, 25 May 1982 09:30:00 +0000"

    def test_http(self, moment: Instant) -> None:
        assert moment.set_zone(NEW_YORK).to_http() == "Tue, 25 May 1982 09:30:00 GMT"

    def test_sql(self, moment: Instant) -> None:
        assert moment.to_sql_date() == "1982-05-25"
        assert moment.to_sql_time() == "09:30:00.000 Z"
        assert moment.to_sql() == "1982-05-25 09:30:00.000 Z"
        assert moment.to_sql(include_offset=False) == "1982-05-25 09:30:00.000"

    def test_numeric_outputs(self, moment: Instant) -> None:
        assert moment.to_millis() == 391_167_000_000
        assert moment.to_seconds() == 391_167_000
        assert moment.to_unix_integer() == 391_167_000

    def test_to_object_with_config(self, moment: Instant) -> None:
        obj = moment.to_object(include_config=True)
        assert obj["year"] == 1982
        assert obj["locale"] == "en-US"

    def test_str_and_json(self, moment: Instant) -> None:
        assert str(moment) == moment.to_json() == "1982-05-25T09:30:00.000Z"
        assert "1982-05-25" in repr(moment)


# =============================================================================
# DATETIME
# =============================================================================


class TestDatetimeInterop:
    """Тесты from_datetime / to_datetime"""

    def test_from_aware_datetime(self) -> None:
        instant = Instant.from_datetime(datetime(2017, 5, 15, 10, tzinfo=timezone.utc))
        assert instant.to_iso() == "2017-05-15T10:00:00.000Z"
        assert instant.is_offset_fixed

    def test_from_zoneinfo_datetime(self) -> None:
        instant = Instant.from_datetime(datetime(2017, 5, 15, 10, tzinfo=ZoneInfo(NEW_YORK)))
        assert instant.zone_name == NEW_YORK
        assert instant.hour == 10
        assert instant.offset == -240

    def test_from_naive_datetime(self) -> None:
        instant = Instant.from_datetime(datetime(2017, 5, 15, 10, 30, 0, 250_000))
        assert instant.to_iso() == "2017-05-15T10:30:00.250Z"

    def test_from_datetime_requires_datetime(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Instant.from_datetime("2017-05-15")

    def test_to_datetime(self) -> None:
        assert Instant.utc(2017, 5, 15, 10).to_datetime() == datetime(
            2017, 5, 15, 10, tzinfo=timezone.utc
        )
        zoned = Instant.utc(2017, 5, 15, 10).set_zone(NEW_YORK).to_datetime()
        assert zoned.tzinfo == ZoneInfo(NEW_YORK)
        assert zoned.hour == 6

    def test_to_datetime_out_of_range(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Instant.utc(0, 6, 1).to_datetime()


# =============================================================================
# НЕВАЛИДНОСТЬ
# =============================================================================


class TestInvalid:
    """Тесты невалидных Instant"""

    def test_reason_is_sticky(self) -> None:
        instant = Instant.invalid("x", "because")
        shifted = instant.plus(days=1).set(year=2000).start_of("day")
        assert shifted.invalid_reason == "x"
        assert shifted.invalid_explanation == "because"

    def test_fields_are_nan(self) -> None:
        instant = Instant.invalid("x")
        assert math.isnan(instant.year)
        assert math.isnan(instant.to_millis())
        assert instant.to_iso() is None
        assert instant.month_long is None
        assert str(instant) == "Invalid DateTime"
        assert instant.to_format("yyyy") == "Invalid DateTime"

    def test_reason_required(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Instant.invalid("")

    def test_unwrap(self) -> None:
        with pytest.raises(InvalidDateTimeError):
            Instant.invalid("x").unwrap()
        valid = Instant.utc(2017, 1, 1)
        assert valid.unwrap() is valid

    def test_throw_on_invalid(self) -> None:
        Settings.throw_on_invalid = True
        with pytest.raises(InvalidDateTimeError, match="x"):
            Instant.invalid("x")

    def test_diff_with_invalid(self) -> None:
        duration = Instant.invalid("x").diff(Instant.utc(2017, 1, 1))
        assert not duration.is_valid


# =============================================================================
# СРАВНЕНИЯ
# =============================================================================


class TestComparison:
    """Тесты сравнений, равенства и hash"""

    def test_ordering(self) -> None:
        early = Instant.utc(2017, 1, 1)
        late = early.plus(hours=1)
        assert early < late
        assert late >= early
        assert early <= early

    def test_equality_requires_same_zone(self) -> None:
        utc = Instant.utc(2017, 1, 1)
        zoned = utc.set_zone(NEW_YORK)
        assert utc != zoned
        assert utc <= zoned <= utc
        assert utc == Instant.utc(2017, 1, 1)

    def test_invalid_never_equal(self) -> None:
        instant = Instant.invalid("x")
        assert instant != instant
        assert not instant.equals(instant)

    def test_hash(self) -> None:
        assert hash(Instant.utc(2017, 1, 1)) == hash(Instant.utc(2017, 1, 1))
        assert len({Instant.utc(2017, 1, 1), Instant.utc(2017, 1, 1)}) == 1

    def test_min_max(self) -> None:
        a = Instant.utc(2017, 1, 1)
        b = Instant.utc(2018, 1, 1)
        c = Instant.utc(2016, 1, 1)
        assert Instant.min(a, b, c) is c
        assert Instant.max(a, b, c) is b
        assert Instant.min() is None

    def test_min_requires_instants(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Instant.min(Instant.utc(2017, 1, 1), 5)

    def test_subtraction_gives_duration(self) -> None:
        delta = Instant.utc(2017, 1, 2) - Instant.utc(2017, 1, 1)
        assert delta.as_unit("hours") == 24
