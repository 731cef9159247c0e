"""
Тесты неизменяемых записей и иерархии исключений

Проверяет:
1. Неизменяемость CivilFields / WeekData / WeekSettings / Invalid
2. Валидацию диапазонов недельных записей
3. Сообщения исключений пакета
"""

import pytest
from pydantic import ValidationError

from civilclock.core.domain.records import (
    ISO_WEEK_SETTINGS,
    CivilFields,
    Invalid,
    WeekData,
    WeekSettings,
)
from civilclock.core.errors import (
    CivilClockError,
    ConflictingSpecificationError,
    InvalidDateTimeError,
    InvalidDurationError,
    InvalidIntervalError,
    InvalidUnitError,
    ZoneIsAbstractError,
)

# =============================================================================
# ЗАПИСИ
# =============================================================================


class TestCivilFields:
    """Тесты CivilFields"""

    def test_time_defaults_to_zero(self) -> None:
        fields = CivilFields(year=2020, month=6, day=15)
        assert (fields.hour, fields.minute, fields.second, fields.millisecond) == (0, 0, 0, 0)

    def test_frozen(self) -> None:
        fields = CivilFields(year=2020, month=6, day=15)
        with pytest.raises(ValidationError):
            fields.year = 2021  # type: ignore[misc]

    def test_equality_by_value(self) -> None:
        assert CivilFields(year=2020, month=1, day=1) == CivilFields(year=2020, month=1, day=1)


class TestWeekRecords:
    """Тесты WeekData / WeekSettings"""

    def test_week_data_bounds(self) -> None:
        WeekData(week_year=2004, week_number=53, weekday=7)
        with pytest.raises(ValidationError):
            WeekData(week_year=2004, week_number=54, weekday=1)
        with pytest.raises(ValidationError):
            WeekData(week_year=2004, week_number=1, weekday=0)

    def test_iso_settings(self) -> None:
        assert ISO_WEEK_SETTINGS.first_day == 1
        assert ISO_WEEK_SETTINGS.minimal_days == 4
        assert ISO_WEEK_SETTINGS.weekend == (6, 7)

    def test_weekend_days_validated(self) -> None:
        with pytest.raises(ValidationError):
            WeekSettings(weekend=(0, 7))

    def test_first_day_validated(self) -> None:
        with pytest.raises(ValidationError):
            WeekSettings(first_day=8)

    def test_hashable(self) -> None:
        """WeekSettings участвует в ключах кэша локалей"""
        assert hash(WeekSettings()) == hash(WeekSettings(first_day=1, minimal_days=4))


class TestInvalid:
    """Тесты маркера невалидности"""

    def test_message_with_explanation(self) -> None:
        invalid = Invalid(reason="unparsable", explanation="bad input")
        assert invalid.to_message() == "unparsable: bad input"

    def test_message_without_explanation(self) -> None:
        assert Invalid(reason="x").to_message() == "x"


# =============================================================================
# ИСКЛЮЧЕНИЯ
# =============================================================================


class TestErrors:
    """Тесты иерархии исключений"""

    def test_invalid_value_errors_carry_reason(self) -> None:
        reason = Invalid(reason="unit out of range", explanation="day 32")
        for error_type, prefix in (
            (InvalidDateTimeError, "Invalid DateTime"),
            (InvalidIntervalError, "Invalid Interval"),
            (InvalidDurationError, "Invalid Duration"),
        ):
            error = error_type(reason)
            assert str(error) == f"{prefix}: unit out of range: day 32"
            assert error.reason is reason
            assert isinstance(error, CivilClockError)

    def test_invalid_unit(self) -> None:
        error = InvalidUnitError("fortnight")
        assert str(error) == "Invalid unit fortnight"
        assert error.unit == "fortnight"

    def test_conflicting_specification_is_package_error(self) -> None:
        assert issubclass(ConflictingSpecificationError, CivilClockError)

    def test_zone_is_abstract_message(self) -> None:
        assert str(ZoneIsAbstractError()) == "Zone is an abstract class"
