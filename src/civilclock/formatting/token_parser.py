"""
Token Parser — разбор строки по строке формата

Алгоритм:
1. Формат → токены, макро-токены разворачиваются по шаблону локали
2. Каждый токен → фрагмент регулярного выражения + десериализатор
3. Фрагменты склеиваются в одно выражение ^...$ (без учёта регистра)
4. Группы совпадения раздаются токенам по порядку
5. Согласование полей: AM/PM, квартал → месяц, эра → знак года,
   доли секунды, зона и смещение

Неразобранная строка не бросает исключение: результат без полей.
Конфликт AM/PM и 24-часового формата бросает ConflictingSpecificationError.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Final, Optional, Sequence

from civilclock.core.errors import ConflictingSpecificationError
from civilclock.core.math.calendar_math import signed_offset, untruncate_year
from civilclock.core.math.numerical_safeguards import parse_millis
from civilclock.formatting.tokens import (
    FormatToken,
    ldml_to_tokens,
    macro_token_to_format_opts,
    parse_format,
)
from civilclock.locale.digits import digit_regex, parse_digits
from civilclock.locale.locale import Locale
from civilclock.settings import Settings
from civilclock.zones.base import Zone
from civilclock.zones.fixed import FixedOffsetZone
from civilclock.zones.iana import IANAZone

# Первая буква токена → civil-поле
_TOKEN_FIELDS: Final[dict[str, str]] = {
    "S": "millisecond",
    "s": "second",
    "m": "minute",
    "h": "hour",
    "H": "hour",
    "d": "day",
    "o": "ordinal",
    "L": "month",
    "M": "month",
    "y": "year",
    "E": "weekday",
    "c": "weekday",
    "W": "week_number",
    "k": "week_year",
    "q": "quarter",
}


@dataclass(frozen=True)
class TokenUnit:
    """Фрагмент регулярного выражения для одного токена."""

    token: FormatToken
    regex: str
    deser: Callable[[Sequence[Optional[str]]], Any]
    literal: bool = False
    groups: int = 0


@dataclass(frozen=True)
class TokenExplanation:
    """Диагностика разбора: токены, выражение, совпадения, результат."""

    input: str
    tokens: list[FormatToken]
    regex: Optional[str] = None
    raw_matches: Optional[tuple[Optional[str], ...]] = None
    matches: Optional[dict[str, Any]] = None
    result: Optional[dict[str, Any]] = None
    zone: Optional[Zone] = None
    specific_offset: Optional[int] = None
    invalid_reason: Optional[str] = None
    units: list[TokenUnit] = field(default_factory=list)


# =============================================================================
# ФРАГМЕНТЫ ВЫРАЖЕНИЙ
# =============================================================================

_HORIZONTAL_SPACE: Final[str] = r"[^\S\n\r]+"


def _escape_literal(value: str) -> str:
    """Литерал → фрагмент: точка необязательна, пробелы любой ширины."""
    parts = []
    for chunk in re.split(r"(\s+)", value):
        if not chunk:
            continue
        if chunk.isspace():
            parts.append(_HORIZONTAL_SPACE)
        else:
            parts.append(re.escape(chunk).replace(r"\.", r"\.?"))
    return "".join(parts)


def _strip_insensitivities(value: str) -> str:
    return re.sub(r"\s+", " ", value.replace(".", "")).lower()


def _one_of(token: FormatToken, strings: Sequence[str], start_index: int) -> TokenUnit:
    """Альтернатива из имён (месяцы, дни недели, эры, AM/PM)."""
    # Длинные имена первыми, чтобы "May" не перехватывал "Mayo"
    ordered = sorted(strings, key=len, reverse=True)
    regex = "|".join(_escape_literal(name) for name in ordered)
    stripped = [_strip_insensitivities(name) for name in strings]

    def deser(groups: Sequence[Optional[str]]) -> int:
        return stripped.index(_strip_insensitivities(groups[0] or "")) + start_index

    return TokenUnit(token=token, regex=regex, deser=deser)


def _int_unit(
    token: FormatToken, regex: str, post: Callable[[int], int] = lambda value: value
) -> TokenUnit:
    return TokenUnit(token=token, regex=regex, deser=lambda groups: post(parse_digits(groups[0])))


def _simple(token: FormatToken, regex: str) -> TokenUnit:
    return TokenUnit(token=token, regex=regex, deser=lambda groups: groups[0])


def _offset(token: FormatToken, regex: str) -> TokenUnit:
    return TokenUnit(
        token=token,
        regex=regex,
        deser=lambda groups: signed_offset(groups[1], groups[2]),
        groups=re.compile(regex).groups,
    )


def _skip(token: FormatToken, regex: str) -> TokenUnit:
    """Фрагмент, который должен совпасть, но не даёт значения поля."""
    return TokenUnit(token=token, regex=regex, deser=lambda groups: groups[0], literal=True)


def _literal(token: FormatToken) -> TokenUnit:
    return TokenUnit(
        token=token, regex=_escape_literal(token.val), deser=lambda groups: groups[0], literal=True
    )


def _untruncate(value: int) -> int:
    return untruncate_year(value, Settings.two_digit_cutoff_year)


def unit_for_token(token: FormatToken, loc: Locale) -> TokenUnit:
    """
    Токен → фрагмент выражения с десериализатором.

    Числовые токены принимают цифры системы счисления локали.
    """
    ns = loc.numbering_system
    one = digit_regex(ns)
    two = digit_regex(ns, "{2}")
    three = digit_regex(ns, "{3}")
    four = digit_regex(ns, "{4}")
    six = digit_regex(ns, "{6}")
    one_or_two = digit_regex(ns, "{1,2}")
    one_to_three = digit_regex(ns, "{1,3}")
    one_to_six = digit_regex(ns, "{1,6}")
    one_to_nine = digit_regex(ns, "{1,9}")
    two_to_four = digit_regex(ns, "{2,4}")
    four_to_six = digit_regex(ns, "{4,6}")

    if token.literal:
        return _literal(token)

    units: dict[str, Callable[[], TokenUnit]] = {
        # эра
        "G": lambda: _one_of(token, loc.eras("short"), 0),
        "GG": lambda: _one_of(token, loc.eras("long"), 0),
        # годы
        "y": lambda: _int_unit(token, one_to_six),
        "yy": lambda: _int_unit(token, two_to_four, _untruncate),
        "yyyy": lambda: _int_unit(token, four),
        "yyyyy": lambda: _int_unit(token, four_to_six),
        "yyyyyy": lambda: _int_unit(token, six),
        # месяцы
        "M": lambda: _int_unit(token, one_or_two),
        "MM": lambda: _int_unit(token, two),
        "MMM": lambda: _one_of(token, loc.months("short", True), 1),
        "MMMM": lambda: _one_of(token, loc.months("long", True), 1),
        "L": lambda: _int_unit(token, one_or_two),
        "LL": lambda: _int_unit(token, two),
        "LLL": lambda: _one_of(token, loc.months("short", False), 1),
        "LLLL": lambda: _one_of(token, loc.months("long", False), 1),
        # дни
        "d": lambda: _int_unit(token, one_or_two),
        "dd": lambda: _int_unit(token, two),
        "o": lambda: _int_unit(token, one_to_three),
        "ooo": lambda: _int_unit(token, three),
        # время
        "HH": lambda: _int_unit(token, two),
        "H": lambda: _int_unit(token, one_or_two),
        "hh": lambda: _int_unit(token, two),
        "h": lambda: _int_unit(token, one_or_two),
        "mm": lambda: _int_unit(token, two),
        "m": lambda: _int_unit(token, one_or_two),
        "q": lambda: _int_unit(token, one_or_two),
        "qq": lambda: _int_unit(token, two),
        "s": lambda: _int_unit(token, one_or_two),
        "ss": lambda: _int_unit(token, two),
        "S": lambda: _int_unit(token, one_to_three),
        "SSS": lambda: _int_unit(token, three),
        "u": lambda: _simple(token, one_to_nine),
        "uu": lambda: _simple(token, one_or_two),
        "uuu": lambda: _int_unit(token, one),
        # AM/PM
        "a": lambda: _one_of(token, loc.meridiems(), 0),
        # год и номер недели
        "kkkk": lambda: _int_unit(token, four),
        "kk": lambda: _int_unit(token, two_to_four, _untruncate),
        "W": lambda: _int_unit(token, one_or_two),
        "WW": lambda: _int_unit(token, two),
        # дни недели
        "E": lambda: _int_unit(token, one),
        "c": lambda: _int_unit(token, one),
        "EEE": lambda: _one_of(token, loc.weekdays("short", False), 1),
        "EEEE": lambda: _one_of(token, loc.weekdays("long", False), 1),
        "ccc": lambda: _one_of(token, loc.weekdays("short", True), 1),
        "cccc": lambda: _one_of(token, loc.weekdays("long", True), 1),
        # смещение и зона
        "Z": lambda: _offset(token, f"([+-]{one_or_two})(?::({two}))?"),
        "ZZ": lambda: _offset(token, f"([+-]{one_or_two})(?::({two}))?"),
        "ZZZ": lambda: _offset(token, f"([+-]{one_or_two})({two})?"),
        "z": lambda: _simple(token, r"[a-z_+\-/]{1,256}?"),
        # имена зон из шаблонов локали: совпадают, но не разбираются
        "ZZZZ": lambda: _skip(token, r"[^\n\r]+?"),
        "ZZZZZ": lambda: _skip(token, r"[^\n\r]+?"),
    }

    build = units.get(token.val)
    return build() if build is not None else _literal(token)


# =============================================================================
# МАКРО-ТОКЕНЫ
# =============================================================================


def expand_macro_tokens(tokens: Sequence[FormatToken], loc: Locale) -> list[FormatToken]:
    """Макро-токены → токены шаблона локали; остальные без изменений."""
    expanded: list[FormatToken] = []
    for token in tokens:
        options = None if token.literal else macro_token_to_format_opts(token.val)
        if options is None:
            expanded.append(token)
        else:
            expanded.extend(ldml_to_tokens(loc.pattern_for(options)))
    return expanded



# =============================================================================
# СОВПАДЕНИЕ И СОГЛАСОВАНИЕ
# =============================================================================


def _build_regex(units: Sequence[TokenUnit]) -> str:
    return "^" + "".join(f"({unit.regex})" for unit in units) + "$"


def _match(
    text: str, regex: re.Pattern[str], units: Sequence[TokenUnit]
) -> tuple[Optional[tuple[Optional[str], ...]], Optional[dict[str, Any]]]:
    found = regex.match(text)
    if found is None:
        return None, None

    groups = found.groups()
    matches: dict[str, Any] = {}
    index = 0
    for unit in units:
        count = unit.groups + 1
        if not unit.literal:
            matches[unit.token.val[0]] = unit.deser(groups[index : index + count])
        index += count
    return groups, matches


def _date_time_from_matches(
    matches: dict[str, Any],
) -> tuple[dict[str, Any], Optional[Zone], Optional[int]]:
    zone: Optional[Zone] = None
    specific_offset: Optional[int] = None

    if matches.get("z") is not None:
        zone = IANAZone.create(matches["z"])
    if matches.get("Z") is not None:
        if zone is None:
            zone = FixedOffsetZone.instance(matches["Z"])
        specific_offset = matches["Z"]

    if matches.get("q") is not None:
        matches["M"] = (matches["q"] - 1) * 3 + 1

    if matches.get("h") is not None:
        if matches["h"] < 12 and matches.get("a") == 1:
            matches["h"] += 12
        elif matches["h"] == 12 and matches.get("a") == 0:
            matches["h"] = 0

    if matches.get("G") == 0 and matches.get("y"):
        matches["y"] = -matches["y"]

    if matches.get("u") is not None:
        matches["S"] = parse_millis(str(matches["u"]))

    values: dict[str, Any] = {}
    for key, value in matches.items():
        field_name = _TOKEN_FIELDS.get(key)
        if field_name is not None and field_name != "quarter":
            values[field_name] = value
    return values, zone, specific_offset


def explain_from_tokens(loc: Locale, text: str, fmt: str) -> TokenExplanation:
    """
    Разбор строки с полной диагностикой.

    Raises:
        ConflictingSpecificationError: Формат содержит и AM/PM, и 24-часовой час
    """
    tokens = expand_macro_tokens(parse_format(fmt), loc)
    units = [unit_for_token(token, loc) for token in tokens]

    regex_source = _build_regex(units)
    regex = re.compile(regex_source, re.IGNORECASE)
    raw_matches, matches = _match(text, regex, units)

    if matches is None:
        return TokenExplanation(
            input=text, tokens=tokens, regex=regex_source, raw_matches=raw_matches, units=units
        )

    if "a" in matches and "H" in matches:
        raise ConflictingSpecificationError("Can't include meridiem when specifying 24-hour format")

    matched = dict(matches)
    result, zone, specific_offset = _date_time_from_matches(matches)
    return TokenExplanation(
        input=text,
        tokens=tokens,
        regex=regex_source,
        raw_matches=raw_matches,
        matches=matched,
        result=result,
        zone=zone,
        specific_offset=specific_offset,
        units=units,
    )


def parse_from_tokens(
    loc: Locale, text: str, fmt: str
) -> tuple[Optional[dict[str, Any]], Optional[Zone], Optional[int], Optional[str]]:
    """(поля, зона, явное смещение, причина невалидности) для строки."""
    explanation = explain_from_tokens(loc, text, fmt)
    return (
        explanation.result,
        explanation.zone,
        explanation.specific_offset,
        explanation.invalid_reason,
    )
