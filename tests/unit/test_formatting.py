"""
Тесты рендеринга по токенам

Проверяет:
1. Токенизатор строки формата (литералы, кавычки, пробелы)
2. Рендеринг Instant по токенам: поля, имена, недели, смещения
3. Макро-токены и to_locale_string (через шаблоны локали)
4. Рендеринг Duration по токенам
"""

import pytest

from civilclock import DATE_FULL, DATE_SHORT, Duration, Instant
from civilclock.formatting.tokens import FormatToken, ldml_to_tokens, parse_format

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def moment() -> Instant:
    """1982-05-25T09:30:05.123Z, вторник"""
    return Instant.utc(1982, 5, 25, 9, 30, 5, 123)


# =============================================================================
# ТОКЕНИЗАТОР
# =============================================================================


class TestParseFormat:
    """Тесты разбора строки формата"""

    def test_groups_repeated_chars(self) -> None:
        assert [t.val for t in parse_format("yyyy-MM-dd")] == ["yyyy", "-", "MM", "-", "dd"]

    def test_quoted_literal(self) -> None:
        tokens = parse_format("HH 'h' mm")
        assert tokens[2] == FormatToken(literal=True, val="h")
        assert tokens[1].literal

    def test_escaped_quote(self) -> None:
        tokens = parse_format("''")
        assert tokens == [FormatToken(literal=True, val="'")]

    def test_non_whitespace_is_not_literal(self) -> None:
        """Разделители вроде '-' не литералы: рендерер вернёт их как есть"""
        assert not parse_format("yyyy-MM")[1].literal

    def test_ldml_pattern(self) -> None:
        assert [t.val for t in ldml_to_tokens("M/d/y")] == ["M", "/", "d", "/", "y"]
        assert [t.val for t in ldml_to_tokens("EEEE, MMMM d, y")][0] == "EEEE"


# =============================================================================
# INSTANT
# =============================================================================


class TestInstantTokens:
    """Тесты рендеринга Instant"""

    @pytest.mark.parametrize(
        "fmt,expected",
        [
            ("yyyy-MM-dd HH:mm:ss.SSS", "1982-05-25 09:30:05.123"),
            ("y M d H m s S", "1982 5 25 9 30 5 123"),
            ("yy", "82"),
            ("yyyyyy", "001982"),
            ("h:mm a", "9:30 AM"),
            ("hh", "09"),
            ("EEEE, MMMM d", "Tuesday, May 25"),
            ("EEE LLL", "Tue May"),
            ("EEEEE MMMMM", "T M"),
            ("E c", "2 2"),
            ("o ooo", "145 145"),
            ("q qq", "2 02"),
            ("kkkk-'W'WW-c", "1982-W21-2"),
            ("G GG GGGGG", "AD Anno Domini A"),
            ("'week' W", "week 21"),
        ],
    )
    def test_render(self, moment: Instant, fmt: str, expected: str) -> None:
        assert moment.to_format(fmt) == expected

    def test_epoch_tokens(self, moment: Instant) -> None:
        assert moment.to_format("x") == str(moment.to_millis())
        assert moment.to_format("X") == str(moment.to_millis() // 1000)

    def test_offsets_in_utc(self, moment: Instant) -> None:
        assert moment.to_format("Z") == "+0"
        assert moment.to_format("ZZ") == "+00:00"
        assert moment.to_format("ZZZ") == "+0000"
        assert moment.to_format("z") == "UTC"

    def test_offsets_in_fixed_zone(self, moment: Instant) -> None:
        shifted = moment.set_zone("UTC-5:30")
        assert shifted.to_format("Z") == "-5:30"
        assert shifted.to_format("ZZ") == "-05:30"
        assert shifted.to_format("ZZZ") == "-0530"
        assert shifted.to_format("HH:mm") == "04:00"

    def test_pm_and_midnight(self) -> None:
        assert Instant.utc(2020, 1, 1, 0, 5).to_format("h:mm a") == "12:05 AM"
        assert Instant.utc(2020, 1, 1, 12, 5).to_format("h:mm a") == "12:05 PM"
        assert Instant.utc(2020, 1, 1, 23, 5).to_format("h:mm a") == "11:05 PM"

    def test_bc_year(self) -> None:
        ancient = Instant.utc(-43, 3, 15)
        assert ancient.to_format("G") == "BC"
        assert ancient.to_format("y") == "-43"

    def test_french_names(self, moment: Instant) -> None:
        assert moment.reconfigure(locale="fr").to_format("MMMM") == "mai"
        assert moment.to_format("LLLL", locale="fr") == "mai"

    def test_arab_digits(self, moment: Instant) -> None:
        assert moment.to_format("dd", numbering_system="arab") == "٢٥"

    def test_unknown_token_passes_through(self, moment: Instant) -> None:
        assert moment.to_format("Q") == "Q"

    def test_local_week_tokens(self) -> None:
        """2020-06-14 — воскресенье, первый день недели в en-US"""
        sunday = Instant.utc(2020, 6, 14)
        assert sunday.to_format("WW") == "24"
        assert sunday.to_format("nn") == "25"
        assert sunday.to_format("iiii") == "2020"

    def test_invalid_instant(self) -> None:
        assert Instant.invalid("because").to_format("yyyy") == "Invalid DateTime"


class TestLocaleStrings:
    """Тесты локализованных строк"""

    def test_macro_token_uses_locale_pattern(self, moment: Instant) -> None:
        rendered = moment.to_format("D")
        assert "1982" in rendered
        assert "25" in rendered

    def test_date_full_in_english(self, moment: Instant) -> None:
        rendered = moment.to_locale_string(DATE_FULL)
        assert "May" in rendered
        assert "1982" in rendered

    def test_locale_override(self, moment: Instant) -> None:
        rendered = moment.to_locale_string(DATE_FULL, locale="fr")
        assert "mai" in rendered

    def test_mapping_options(self, moment: Instant) -> None:
        rendered = moment.to_locale_string({"month": "long"})
        assert rendered == "May"

    def test_default_is_date_short(self, moment: Instant) -> None:
        assert moment.to_locale_string() == moment.to_locale_string(DATE_SHORT)


# =============================================================================
# DURATION
# =============================================================================


class TestDurationTokens:
    """Тесты рендеринга Duration"""

    def test_clock_format(self) -> None:
        dur = Duration.from_object({"hours": 1, "minutes": 2, "seconds": 3})
        assert dur.to_format("hh:mm:ss") == "01:02:03"

    def test_collapses_into_format_units(self) -> None:
        dur = Duration.from_object({"days": 1, "hours": 2})
        assert dur.to_format("h") == "26"
        assert dur.to_format("m") == "1560"

    def test_literals(self) -> None:
        dur = Duration.from_object({"minutes": 90})
        assert dur.to_format("h 'hours' m 'minutes'") == "1 hours 30 minutes"

    def test_floor(self) -> None:
        dur = Duration.from_object({"seconds": 90})
        assert dur.to_format("m") == "1"

    def test_invalid_duration(self) -> None:
        assert Duration.invalid("nope").to_format("hh") == "Invalid Duration"
