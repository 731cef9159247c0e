"""
Тесты Duration

Проверяет:
1. Конструирование: mapping, миллисекунды, timedelta, ISO-8601
2. Арифметику: plus/minus/negate/map_units/set
3. normalize, shift_to, rescale, as_unit в режимах casual и longterm
4. Вывод: to_iso, to_iso_time, to_millis, to_human
5. Прилипание невалидности и throw_on_invalid
"""

import math
from datetime import timedelta

import pytest

from civilclock import Duration, Settings
from civilclock.core.domain.units import ConversionAccuracy
from civilclock.core.errors import InvalidArgumentError, InvalidDurationError, InvalidUnitError

# =============================================================================
# КОНСТРУИРОВАНИЕ
# =============================================================================


class TestConstruction:
    """Тесты фабрик Duration"""

    def test_from_object_normalizes_unit_names(self) -> None:
        dur = Duration.from_object({"hour": 2, "Minutes": 30})
        assert dur.to_object() == {"hours": 2, "minutes": 30}
        assert dur.get("hour") == 2
        assert dur.minutes == 30
        assert dur.days == 0

    def test_from_object_skips_none(self) -> None:
        assert Duration.from_object({"hours": None, "days": 1}).to_object() == {"days": 1}

    def test_unknown_unit(self) -> None:
        with pytest.raises(InvalidUnitError):
            Duration.from_object({"fortnights": 1})

    def test_non_numeric_value(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Duration.from_object({"hours": "2"})

    def test_non_mapping(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Duration.from_object([("hours", 2)])

    def test_from_millis(self) -> None:
        assert Duration.from_millis(1500).milliseconds == 1500

    def test_from_duration_like(self) -> None:
        assert Duration.from_duration_like(2000).to_object() == {"milliseconds": 2000}
        assert Duration.from_duration_like({"days": 1}).days == 1
        assert Duration.from_duration_like(timedelta(hours=1)).to_millis() == 3_600_000
        dur = Duration.from_object({"days": 1})
        assert Duration.from_duration_like(dur) is dur

    def test_from_duration_like_rejects(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Duration.from_duration_like("PT1H")

    def test_from_iso(self) -> None:
        dur = Duration.from_iso("P3Y6M1W4DT12H30M5S")
        assert dur.to_object() == {
            "years": 3,
            "months": 6,
            "weeks": 1,
            "days": 4,
            "hours": 12,
            "minutes": 30,
            "seconds": 5,
        }

    def test_from_iso_time(self) -> None:
        dur = Duration.from_iso_time("11:22:33.444")
        assert dur.to_object() == {"hours": 11, "minutes": 22, "seconds": 33, "milliseconds": 444}

    def test_unparsable_iso(self) -> None:
        dur = Duration.from_iso("P1Q")
        assert not dur.is_valid
        assert dur.invalid_reason == "unparsable"


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


class TestArithmetic:
    """Тесты арифметики Duration"""

    def test_plus_merges_units(self) -> None:
        dur = Duration.from_object({"hours": 1}).plus({"minutes": 30})
        assert dur.to_object() == {"hours": 1, "minutes": 30}

    def test_plus_millis(self) -> None:
        dur = Duration.from_object({"hours": 1}).plus(1000)
        assert dur.to_object() == {"hours": 1, "milliseconds": 1000}

    def test_minus(self) -> None:
        dur = Duration.from_object({"hours": 2}) - {"hours": 3}
        assert dur.to_object() == {"hours": -1}

    def test_negate_keeps_zero(self) -> None:
        dur = -Duration.from_object({"hours": 1, "minutes": 0})
        assert dur.to_object() == {"hours": -1, "minutes": 0}

    def test_map_units(self) -> None:
        dur = Duration.from_object({"hours": 1, "minutes": 30}).map_units(lambda x, u: x * 2)
        assert dur.to_object() == {"hours": 2, "minutes": 60}

    def test_map_units_rejects_non_finite(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Duration.from_object({"hours": 1}).map_units(lambda x, u: math.inf)

    def test_set(self) -> None:
        dur = Duration.from_object({"hours": 1, "minutes": 5}).set({"minutes": 10})
        assert dur.to_object() == {"hours": 1, "minutes": 10}

    def test_immutability(self) -> None:
        dur = Duration.from_object({"hours": 1})
        dur.plus({"hours": 1})
        assert dur.hours == 1


# =============================================================================
# КОНВЕРСИЯ
# =============================================================================


class TestConversion:
    """Тесты normalize, shift_to, rescale"""

    def test_normalize_borrows(self) -> None:
        dur = Duration.from_object({"hours": 12, "minutes": -45}).normalize()
        assert dur.to_object() == {"hours": 11, "minutes": 15}

    def test_normalize_rolls_up(self) -> None:
        dur = Duration.from_object({"years": 2, "days": 5000}).normalize()
        assert dur.to_object() == {"years": 15, "days": 255}

    def test_normalize_pushes_fractions_down(self) -> None:
        dur = Duration.from_object({"hours": 1.5, "minutes": 0}).normalize()
        assert dur.to_object() == {"hours": 1, "minutes": 30}

    def test_normalize_negative(self) -> None:
        dur = Duration.from_object({"hours": -1, "minutes": -90}).normalize()
        assert dur.to_object() == {"hours": -2, "minutes": -30}

    def test_normalize_idempotent(self) -> None:
        once = Duration.from_object({"hours": 12, "minutes": -45, "seconds": 130}).normalize()
        assert once.normalize() == once

    def test_shift_to(self) -> None:
        dur = Duration.from_object({"hours": 1, "seconds": 30}).shift_to("minutes")
        assert dur.to_object() == {"minutes": 60.5}

    def test_shift_to_several_units(self) -> None:
        dur = Duration.from_object({"minutes": 90}).shift_to("hours", "minutes")
        assert dur.to_object() == {"hours": 1, "minutes": 30}

    def test_shift_to_without_units(self) -> None:
        dur = Duration.from_object({"minutes": 90})
        assert dur.shift_to() is dur

    def test_casual_calendar_units(self) -> None:
        year = Duration.from_object({"years": 1})
        assert year.shift_to("months").months == 12
        assert year.shift_to("days").days == 365
        assert Duration.from_object({"months": 1}).to_millis() == 30 * 86_400_000

    def test_longterm_calendar_units(self) -> None:
        year = Duration.from_object({"years": 1}, conversion_accuracy="longterm")
        assert year.conversion_accuracy is ConversionAccuracy.LONGTERM
        assert year.as_unit("days") == pytest.approx(365.2425)

    def test_reconfigure_accuracy(self) -> None:
        year = Duration.from_object({"years": 1}).reconfigure(conversion_accuracy="longterm")
        assert year.as_unit("days") == pytest.approx(365.2425)

    @pytest.mark.parametrize("accuracy", ["casual", "longterm"])
    def test_shift_to_weeks_keeps_length(self, accuracy: str) -> None:
        """Перевод в недели не меняет длину ни в одном режиме"""
        dur = Duration.from_object(
            {"years": 1, "months": 2, "days": 3, "hours": 4.5}, conversion_accuracy=accuracy
        )
        shifted = dur.shift_to("weeks", "minutes")
        assert shifted.as_unit("milliseconds") == pytest.approx(dur.as_unit("milliseconds"))

    def test_custom_matrix(self) -> None:
        matrix = {
            "years": {"quarters": 4, "months": 12, "weeks": 52, "days": 360, "hours": 360 * 24,
                      "minutes": 360 * 1440, "seconds": 360 * 86400, "milliseconds": 360 * 86_400_000},
            "quarters": {"months": 3, "weeks": 13, "days": 90, "hours": 90 * 24,
                         "minutes": 90 * 1440, "seconds": 90 * 86400, "milliseconds": 90 * 86_400_000},
            "months": {"weeks": 4, "days": 30, "hours": 720, "minutes": 43200,
                       "seconds": 2_592_000, "milliseconds": 2_592_000_000},
            "weeks": {"days": 7, "hours": 168, "minutes": 10080, "seconds": 604800,
                      "milliseconds": 604_800_000},
            "days": {"hours": 24, "minutes": 1440, "seconds": 86400, "milliseconds": 86_400_000},
            "hours": {"minutes": 60, "seconds": 3600, "milliseconds": 3_600_000},
            "minutes": {"seconds": 60, "milliseconds": 60_000},
            "seconds": {"milliseconds": 1000},
        }
        year = Duration.from_object({"years": 1}, matrix=matrix)
        assert year.as_unit("days") == 360

    def test_as_unit(self) -> None:
        assert Duration.from_object({"hours": 1, "minutes": 30}).as_unit("hours") == 1.5
        assert Duration.from_object({"days": 1}).as_unit("minutes") == 1440
        assert Duration.from_object({"weeks": 2}).as_unit("days") == 14

    def test_rescale(self) -> None:
        dur = Duration.from_millis(90_061_001).rescale()
        assert dur.to_object() == {
            "days": 1,
            "hours": 1,
            "minutes": 1,
            "seconds": 1,
            "milliseconds": 1,
        }

    def test_remove_zeros(self) -> None:
        dur = Duration.from_object({"hours": 0, "minutes": 5}).remove_zeros()
        assert dur.to_object() == {"minutes": 5}


# =============================================================================
# ВЫВОД
# =============================================================================


class TestOutput:
    """Тесты вывода Duration"""

    @pytest.mark.parametrize(
        "values,expected",
        [
            ({"years": 3, "months": 6, "weeks": 1, "days": 4, "hours": 12, "minutes": 30, "seconds": 5},
             "P3Y6M1W4DT12H30M5S"),
            ({"hours": 2, "minutes": 30}, "PT2H30M"),
            ({}, "PT0S"),
            ({"years": 3, "seconds": 5.25}, "P3YT5.25S"),
            ({"milliseconds": 500}, "PT0.5S"),
            ({"quarters": 1}, "P3M"),
            ({"days": -1}, "P-1D"),
        ],
    )
    def test_to_iso(self, values: dict, expected: str) -> None:
        assert Duration.from_object(values).to_iso() == expected

    def test_str_is_iso(self) -> None:
        assert str(Duration.from_object({"hours": 1})) == "PT1H"

    def test_to_iso_time(self) -> None:
        dur = Duration.from_object({"hours": 11, "minutes": 22, "seconds": 33, "milliseconds": 444})
        assert dur.to_iso_time() == "11:22:33.444"
        assert dur.to_iso_time(suppress_milliseconds=True) == "11:22:33.444"
        whole = Duration.from_object({"hours": 11, "minutes": 22, "seconds": 33})
        assert whole.to_iso_time(suppress_milliseconds=True) == "11:22:33"

    def test_to_iso_time_out_of_day(self) -> None:
        assert Duration.from_object({"hours": 24}).to_iso_time() is None
        assert Duration.from_object({"hours": -1}).to_iso_time() is None

    def test_to_human_lists_units(self) -> None:
        human = Duration.from_object({"days": 1, "hours": 5}).to_human()
        assert "1" in human
        assert "5" in human
        assert "day" in human

    def test_to_human_hides_zeros(self) -> None:
        human = Duration.from_object({"days": 0, "hours": 5}).to_human(show_zeros=False)
        assert "day" not in human


# =============================================================================
# РАВЕНСТВО
# =============================================================================


class TestEquality:
    """Тесты равенства Duration"""

    def test_missing_unit_equals_zero(self) -> None:
        assert Duration.from_object({"hours": 1, "minutes": 0}) == Duration.from_object({"hours": 1})
        assert hash(Duration.from_object({"hours": 1, "minutes": 0})) == hash(
            Duration.from_object({"hours": 1})
        )

    def test_different_units_differ(self) -> None:
        assert Duration.from_object({"hours": 1}) != Duration.from_object({"minutes": 60})

    def test_locale_matters(self) -> None:
        assert Duration.from_object({"hours": 1}) != Duration.from_object({"hours": 1}, locale="fr")


# =============================================================================
# НЕВАЛИДНОСТЬ
# =============================================================================


class TestInvalid:
    """Тесты невалидной Duration"""

    def test_reason_required(self) -> None:
        with pytest.raises(InvalidArgumentError):
            Duration.invalid("")

    def test_invalid_is_sticky(self) -> None:
        dur = Duration.invalid("because", "some explanation")
        assert dur.plus({"hours": 1}) is dur
        assert dur.normalize() is dur
        assert dur.shift_to("hours") is dur
        assert dur.invalid_explanation == "some explanation"

    def test_invalid_values(self) -> None:
        dur = Duration.invalid("because")
        assert math.isnan(dur.hours)
        assert math.isnan(dur.to_millis())
        assert dur.to_iso() is None
        assert dur.to_object() == {}
        assert dur.locale is None
        assert str(dur) == "Invalid Duration"

    def test_invalid_never_equal(self) -> None:
        dur = Duration.invalid("because")
        assert dur != dur

    def test_unwrap(self) -> None:
        with pytest.raises(InvalidDurationError):
            Duration.invalid("because").unwrap()
        valid = Duration.from_object({"hours": 1})
        assert valid.unwrap() is valid

    def test_reconfigure_keeps_invalid(self) -> None:
        dur = Duration.invalid("bad").reconfigure(locale="fr")
        assert not dur.is_valid
        assert dur.invalid_reason == "bad"

    def test_throw_on_invalid(self) -> None:
        Settings.throw_on_invalid = True
        with pytest.raises(InvalidDurationError, match="because"):
            Duration.invalid("because")
