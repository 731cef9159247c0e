"""
Тесты локалей

Проверяет:
1. Разбор языковых тегов с расширениями -u- и -x-
2. Таблицы имён: встроенные английские и CLDR (Babel)
3. Недельные настройки локали и их перекрытие
4. Кэширование и clone()
5. Цифры систем счисления и относительное время
"""

import pytest

from civilclock.core.domain.records import ISO_WEEK_SETTINGS, WeekSettings
from civilclock.locale import Locale, parse_locale_string
from civilclock.locale import digits, english
from civilclock.locale.presets import DATE_SHORT, MACRO_TOKENS, FormatOptions
from civilclock.settings import Settings

# =============================================================================
# ТЕГИ
# =============================================================================


class TestParseLocaleString:
    """Тесты разбора тегов"""

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("fr", ("fr", None, None)),
            ("en_GB", ("en-GB", None, None)),
            ("th-TH-u-nu-thai-ca-buddhist", ("th-TH", "thai", "buddhist")),
            ("ar-u-nu-arab", ("ar", "arab", None)),
            ("en-US-x-twain", ("en-US", None, None)),
        ],
    )
    def test_parse(self, tag: str, expected: tuple) -> None:
        assert parse_locale_string(tag) == expected

    def test_intl_string_rebuilt(self) -> None:
        loc = Locale.create("ar", numbering_system="arab")
        assert loc.intl == "ar-u-nu-arab"
        assert Locale.create("fr").intl == "fr"


# =============================================================================
# ТАБЛИЦЫ ИМЁН
# =============================================================================


class TestNames:
    """Тесты таблиц имён"""

    def test_english_mode(self) -> None:
        loc = Locale.create("en-US")
        assert loc.listing_mode() == "en"
        assert loc.months("long")[0] == "January"
        assert loc.months("short")[8] == "Sep"
        assert loc.weekdays("long")[0] == "Monday"
        assert loc.weekdays("narrow")[6] == "S"
        assert loc.meridiems() == ("AM", "PM")
        assert loc.eras("short") == ("BC", "AD")

    def test_numeric_lengths(self) -> None:
        loc = Locale.create("en-US")
        assert loc.months("2-digit")[0] == "01"
        assert loc.months("numeric")[11] == "12"
        assert loc.weekdays("numeric")[0] == "1"

    def test_non_latin_digits_switch_to_intl(self) -> None:
        assert Locale.create("en-US", numbering_system="arab").listing_mode() == "intl"
        assert Locale.create("fr").listing_mode() == "intl"

    def test_french_months(self) -> None:
        months = Locale.create("fr").months("long")
        assert len(months) == 12
        assert months[0] == "janvier"

    def test_german_weekdays(self) -> None:
        weekdays = Locale.create("de").weekdays("long")
        assert len(weekdays) == 7
        assert weekdays[0] == "Montag"

    def test_unknown_length(self) -> None:
        with pytest.raises(ValueError):
            english.months("tiny")


# =============================================================================
# НЕДЕЛИ
# =============================================================================


class TestWeekSettings:
    """Тесты недельных данных"""

    def test_us_weeks_start_on_sunday(self) -> None:
        loc = Locale.create("en-US")
        assert loc.get_start_of_week() == 7
        assert loc.get_min_days_in_first_week() == 1
        assert loc.get_weekend_days() == (6, 7)

    def test_german_weeks_are_iso(self) -> None:
        loc = Locale.create("de")
        assert loc.get_start_of_week() == 1
        assert loc.get_min_days_in_first_week() == 4

    def test_language_without_region_uses_likely_region(self) -> None:
        """"fr" без региона берёт недельные данные Франции"""
        loc = Locale.create("fr")
        assert loc.get_start_of_week() == 1
        assert loc.get_min_days_in_first_week() == 4
        assert loc.get_weekend_days() == (6, 7)

    def test_explicit_override(self) -> None:
        loc = Locale.create("en-US", week_settings={"first_day": 3, "minimal_days": 2})
        assert loc.get_start_of_week() == 3
        assert loc.get_min_days_in_first_week() == 2

    def test_settings_override(self) -> None:
        Settings.default_week_settings = ISO_WEEK_SETTINGS
        assert Locale.create("en-US").get_week_settings() == ISO_WEEK_SETTINGS

    def test_invalid_override_rejected(self) -> None:
        with pytest.raises(ValueError):
            Locale.create("en-US", week_settings={"first_day": 8})


# =============================================================================
# КЭШ И КЛОНИРОВАНИЕ
# =============================================================================


class TestCaching:
    """Тесты кэша локалей"""

    def test_create_is_cached(self) -> None:
        assert Locale.create("fr") is Locale.create("fr")

    def test_default_locale_from_settings(self) -> None:
        assert Locale.create().locale == "en-US"
        Settings.default_locale = "de"
        assert Locale.create().locale == "de"

    def test_clone_without_changes(self) -> None:
        loc = Locale.create("fr")
        assert loc.clone() is loc

    def test_clone_with_changes(self) -> None:
        loc = Locale.create("fr").clone(numbering_system="arab")
        assert loc.locale == "fr"
        assert loc.numbering_system == "arab"

    def test_equality(self) -> None:
        assert Locale.create("fr") == Locale.create("fr", week_settings=WeekSettings())
        assert Locale.create("fr") != Locale.create("de")


# =============================================================================
# ЦИФРЫ И ФОРМАТТЕРЫ
# =============================================================================


class TestDigits:
    """Тесты систем счисления"""

    def test_arab_number_formatter(self) -> None:
        formatter = Locale.create("ar", numbering_system="arab").number_formatter()
        assert formatter.format(12) == "١٢"

    def test_padding(self) -> None:
        formatter = Locale.create("en-US").number_formatter(pad_to=3)
        assert formatter.format(7) == "007"

    def test_force_simple(self) -> None:
        formatter = Locale.create("ar", numbering_system="arab").number_formatter(force_simple=True)
        assert formatter.format(12) == "12"

    def test_transliterate_and_parse(self) -> None:
        assert digits.transliterate("2017-05", "arab") == "٢٠١٧-٠٥"
        assert digits.parse_digits("١٢") == 12
        assert digits.parse_digits("-07") == -7

    def test_parse_rejects_letters(self) -> None:
        with pytest.raises(ValueError):
            digits.parse_digits("1a")


class TestEnglishRelativeTime:
    """Тесты английского относительного времени"""

    @pytest.mark.parametrize(
        "unit,count,numeric,narrow,expected",
        [
            ("days", 3, "always", False, "in 3 days"),
            ("days", -1, "always", False, "1 day ago"),
            ("days", 1, "auto", False, "tomorrow"),
            ("days", -1, "auto", False, "yesterday"),
            ("days", 0, "auto", False, "today"),
            ("months", 1, "auto", False, "next month"),
            ("hours", 1, "auto", False, "in 1 hour"),
            ("hours", -2, "always", True, "2 hr. ago"),
        ],
    )
    def test_format(self, unit: str, count: int, numeric: str, narrow: bool, expected: str) -> None:
        assert english.format_relative_time(unit, count, numeric, narrow) == expected

    def test_rel_formatter_uses_english_table(self) -> None:
        formatter = Locale.create("en-US").rel_formatter(numeric="auto")
        assert formatter.format(-1, "days") == "yesterday"


class TestPresets:
    """Тесты пресетов форматирования"""

    def test_macro_tokens(self) -> None:
        assert MACRO_TOKENS["D"] is DATE_SHORT
        assert len(MACRO_TOKENS) == 20

    def test_has_date_and_time(self) -> None:
        assert DATE_SHORT.has_date
        assert not DATE_SHORT.has_time
        assert FormatOptions(hour="numeric").has_time
