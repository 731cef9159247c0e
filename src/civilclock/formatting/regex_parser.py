"""
Regex Parser — фиксированные форматы строк

Поддерживаемые форматы:
- ISO-8601: календарная дата, неделя, день года, только время; смещение
  (Z, +HH:MM, +HHMM) и расширение [IANA-зона]
- RFC-2822: комментарии и складки удаляются, устаревшие имена зон (EST, PDT...)
- HTTP: RFC-1123, RFC-850, asctime (всегда UTC)
- SQL: дата, время, дата-время со смещением или именем зоны
- ISO-8601 длительности (P...) и время суток как длительность

Каждый парсер возвращает (поля, зона); при несовпадении — (None, None).
Поля используют канонические имена civil-полей (year, week_number, ...).
"""

import re
from typing import Any, Callable, Final, Optional

from civilclock.core.math.calendar_math import signed_offset, untruncate_year
from civilclock.core.math.numerical_safeguards import (
    normalize_number,
    parse_floating,
    parse_integer,
    parse_millis,
)
from civilclock.locale import english
from civilclock.settings import Settings
from civilclock.zones.base import Zone
from civilclock.zones.fixed import FixedOffsetZone
from civilclock.zones.iana import IANAZone

ParseResult = tuple[Optional[dict[str, Any]], Optional[Zone]]
# (match, cursor) → (поля, зона, следующий cursor)
Extractor = Callable[[re.Match[str], int], tuple[dict[str, Any], Optional[Zone], int]]


# =============================================================================
# КОМБИНАТОРЫ
# =============================================================================


def _combine_regexes(*regexes: str) -> re.Pattern[str]:
    return re.compile("^" + "".join(regexes) + "$")


def _combine_extractors(*extractors: Extractor) -> Callable[[re.Match[str]], ParseResult]:
    def extract(match: re.Match[str]) -> ParseResult:
        merged: dict[str, Any] = {}
        merged_zone: Optional[Zone] = None
        cursor = 1
        for extractor in extractors:
            values, zone, cursor = extractor(match, cursor)
            merged.update(values)
            merged_zone = zone or merged_zone
        return merged, merged_zone

    return extract


def _parse(text: Optional[str], *patterns) -> ParseResult:
    if text is None:
        return None, None
    for regex, extractor in patterns:
        match = regex.match(text)
        if match is not None:
            return extractor(match)
    return None, None


def _simple_parse(*keys: str) -> Extractor:
    def extract(match: re.Match[str], cursor: int) -> tuple[dict[str, Any], None, int]:
        values = {key: parse_integer(match.group(cursor + i)) for i, key in enumerate(keys)}
        return values, None, cursor + len(keys)

    return extract


# =============================================================================
# ISO-8601 И SQL
# =============================================================================

_OFFSET_RE: Final[str] = r"(?:([Zz])|([+-]\d\d)(?::?(\d\d))?)"
_IANA_RE: Final[str] = (
    r"[A-Za-z_+-]{1,256}(?::?/[A-Za-z0-9_+-]{1,256}(?:/[A-Za-z0-9_+-]{1,256})?)?"
)
_ISO_EXTENDED_ZONE: Final[str] = rf"(?:{_OFFSET_RE}?(?:\[({_IANA_RE})\])?)?"
_ISO_TIME_BASE_RE: Final[str] = r"(\d\d)(?::?(\d\d)(?::?(\d\d)(?:[.,](\d{1,30}))?)?)?"
_ISO_TIME_RE: Final[str] = _ISO_TIME_BASE_RE + _ISO_EXTENDED_ZONE
_ISO_TIME_EXTENSION_RE: Final[str] = rf"(?:[Tt]{_ISO_TIME_RE})?"
_ISO_YMD_RE: Final[str] = r"([+-]\d{6}|\d{4})(?:-?(\d\d)(?:-?(\d\d))?)?"
_ISO_WEEK_RE: Final[str] = r"(\d{4})-?W(\d\d)(?:-?(\d))?"
_ISO_ORDINAL_RE: Final[str] = r"(\d{4})-?(\d{3})"
_SQL_YMD_RE: Final[str] = r"(\d{4})-(\d\d)-(\d\d)"
_SQL_TIME_RE: Final[str] = rf"{_ISO_TIME_BASE_RE} ?(?:{_OFFSET_RE}|({_IANA_RE}))?"
_SQL_TIME_EXTENSION_RE: Final[str] = rf"(?: {_SQL_TIME_RE})?"


def _int(match: re.Match[str], pos: int, fallback: Optional[int] = None) -> Optional[int]:
    value = match.group(pos)
    return fallback if value is None else parse_integer(value)


def _extract_iso_ymd(match: re.Match[str], cursor: int) -> tuple[dict[str, Any], None, int]:
    values = {
        "year": _int(match, cursor),
        "month": _int(match, cursor + 1, 1),
        "day": _int(match, cursor + 2, 1),
    }
    return values, None, cursor + 3


def _extract_iso_time(match: re.Match[str], cursor: int) -> tuple[dict[str, Any], None, int]:
    values = {
        "hour": _int(match, cursor, 0),
        "minute": _int(match, cursor + 1, 0),
        "second": _int(match, cursor + 2, 0),
        "millisecond": parse_millis(match.group(cursor + 3)),
    }
    if values["millisecond"] is None:
        del values["millisecond"]
    return values, None, cursor + 4


def _extract_iso_offset(
    match: re.Match[str], cursor: int
) -> tuple[dict[str, Any], Optional[Zone], int]:
    local = not match.group(cursor) and not match.group(cursor + 1)
    zone = None
    if not local:
        if match.group(cursor):
            zone = FixedOffsetZone.utc_instance()
        else:
            zone = FixedOffsetZone.instance(
                signed_offset(match.group(cursor + 1), match.group(cursor + 2))
            )
    return {}, zone, cursor + 3


def _extract_iana_zone(
    match: re.Match[str], cursor: int
) -> tuple[dict[str, Any], Optional[Zone], int]:
    name = match.group(cursor)
    zone = IANAZone.create(name) if name else None
    return {}, zone, cursor + 1


_ISO_YMD_WITH_TIME: Final = _combine_regexes(_ISO_YMD_RE, _ISO_TIME_EXTENSION_RE)
_ISO_WEEK_WITH_TIME: Final = _combine_regexes(_ISO_WEEK_RE, _ISO_TIME_EXTENSION_RE)
_ISO_ORDINAL_WITH_TIME: Final = _combine_regexes(_ISO_ORDINAL_RE, _ISO_TIME_EXTENSION_RE)
_ISO_TIME_COMBINED: Final = _combine_regexes(_ISO_TIME_RE)

_extract_iso_ymd_time_and_offset = _combine_extractors(
    _extract_iso_ymd, _extract_iso_time, _extract_iso_offset, _extract_iana_zone
)
_extract_iso_week_time_and_offset = _combine_extractors(
    _simple_parse("week_year", "week_number", "weekday"),
    _extract_iso_time,
    _extract_iso_offset,
    _extract_iana_zone,
)
_extract_iso_ordinal_date_and_time = _combine_extractors(
    _simple_parse("year", "ordinal"), _extract_iso_time, _extract_iso_offset, _extract_iana_zone
)
_extract_iso_time_and_offset = _combine_extractors(
    _extract_iso_time, _extract_iso_offset, _extract_iana_zone
)


def _drop_missing(result: ParseResult) -> ParseResult:
    values, zone = result
    if values is None:
        return None, zone
    return {k: v for k, v in values.items() if v is not None}, zone


def parse_iso_date(text: Optional[str]) -> ParseResult:
    """
    ISO-8601 дата/время.

    Examples:
        >>> parse_iso_date("2016-05-25T09:08:34.123")[0]["millisecond"]
        123
        >>> parse_iso_date("2016-W21-3")[0]["week_number"]
        21
    """
    return _drop_missing(
        _parse(
            text,
            (_ISO_YMD_WITH_TIME, _extract_iso_ymd_time_and_offset),
            (_ISO_WEEK_WITH_TIME, _extract_iso_week_time_and_offset),
            (_ISO_ORDINAL_WITH_TIME, _extract_iso_ordinal_date_and_time),
            (_ISO_TIME_COMBINED, _extract_iso_time_and_offset),
        )
    )


_SQL_YMD_WITH_TIME: Final = _combine_regexes(_SQL_YMD_RE, _SQL_TIME_EXTENSION_RE)
_SQL_TIME_COMBINED: Final = _combine_regexes(_SQL_TIME_RE)


def parse_sql(text: Optional[str]) -> ParseResult:
    """SQL дата, время или дата-время (смещение или имя зоны после пробела)."""
    return _drop_missing(
        _parse(
            text,
            (_SQL_YMD_WITH_TIME, _extract_iso_ymd_time_and_offset),
            (_SQL_TIME_COMBINED, _extract_iso_time_and_offset),
        )
    )


# =============================================================================
# RFC-2822 И HTTP
# =============================================================================

# Устаревшие имена зон RFC-2822 → смещение в минутах
OBSOLETE_OFFSETS: Final[dict[str, int]] = {
    "GMT": 0,
    "EDT": -4 * 60,
    "EST": -5 * 60,
    "CDT": -5 * 60,
    "CST": -6 * 60,
    "MDT": -6 * 60,
    "MST": -7 * 60,
    "PDT": -7 * 60,
    "PST": -8 * 60,
}

_RFC2822_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?:(Mon|Tue|Wed|Thu|Fri|Sat|Sun),\s)?(\d{1,2})\s"
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s(\d{2,4})\s(\d\d):(\d\d)(?::(\d\d))?\s"
    r"(?:(UT|GMT|[ECMP][SD]T)|([Zz])|(?:([+-]\d\d)(\d\d)))$"
)
_RFC1123_RE: Final[re.Pattern[str]] = re.compile(
    r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun), (\d\d) (Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"(\d{4}) (\d\d):(\d\d):(\d\d) GMT$"
)
_RFC850_RE: Final[re.Pattern[str]] = re.compile(
    r"^(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday), "
    r"(\d\d)-(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)-(\d\d) (\d\d):(\d\d):(\d\d) GMT$"
)
_ASCTIME_RE: Final[re.Pattern[str]] = re.compile(
    r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun) (Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
    r"( \d|\d\d) (\d\d):(\d\d):(\d\d) (\d{4})$"
)


def _from_strings(
    weekday_str: Optional[str],
    year_str: str,
    month_str: str,
    day_str: str,
    hour_str: str,
    minute_str: str,
    second_str: Optional[str],
) -> dict[str, Any]:
    year = parse_integer(year_str)
    if len(year_str) == 2:
        year = untruncate_year(year, Settings.two_digit_cutoff_year)
    result = {
        "year": year,
        "month": english.MONTHS_SHORT.index(month_str) + 1,
        "day": parse_integer(day_str.strip()),
        "hour": parse_integer(hour_str),
        "minute": parse_integer(minute_str),
    }
    if second_str:
        result["second"] = parse_integer(second_str)
    if weekday_str:
        names = english.WEEKDAYS_LONG if len(weekday_str) > 3 else english.WEEKDAYS_SHORT
        result["weekday"] = names.index(weekday_str) + 1
    return result


def _extract_rfc2822(match: re.Match[str]) -> ParseResult:
    (
        weekday_str,
        day_str,
        month_str,
        year_str,
        hour_str,
        minute_str,
        second_str,
        obs_offset,
        mil_offset,
        off_hour_str,
        off_minute_str,
    ) = match.groups()
    result = _from_strings(
        weekday_str, year_str, month_str, day_str, hour_str, minute_str, second_str
    )
    if obs_offset:
        offset = OBSOLETE_OFFSETS.get(obs_offset, 0)
    elif mil_offset:
        offset = 0
    else:
        offset = signed_offset(off_hour_str, off_minute_str)
    return result, FixedOffsetZone.instance(offset)


def _preprocess_rfc2822(text: str) -> str:
    """Удаление комментариев и складок, схлопывание пробелов."""
    without_comments = re.sub(r"\([^()]*\)|[\n\t]", " ", text)
    return re.sub(r"(\s\s+)", " ", without_comments).strip()


def parse_rfc2822_date(text: Optional[str]) -> ParseResult:
    """
    RFC-2822 дата.

    Examples:
        >>> parse_rfc2822_date("Tue, 01 Nov 2016 13:23:12 +0630")[0]["hour"]
        13
    """
    if text is None:
        return None, None
    return _parse(_preprocess_rfc2822(text), (_RFC2822_RE, _extract_rfc2822))


def _extract_rfc1123_or_850(match: re.Match[str]) -> ParseResult:
    weekday_str, day_str, month_str, year_str, hour_str, minute_str, second_str = match.groups()
    result = _from_strings(
        weekday_str, year_str, month_str, day_str, hour_str, minute_str, second_str
    )
    return result, FixedOffsetZone.utc_instance()


def _extract_asctime(match: re.Match[str]) -> ParseResult:
    weekday_str, month_str, day_str, hour_str, minute_str, second_str, year_str = match.groups()
    result = _from_strings(
        weekday_str, year_str, month_str, day_str, hour_str, minute_str, second_str
    )
    return result, FixedOffsetZone.utc_instance()


def parse_http_date(text: Optional[str]) -> ParseResult:
    """HTTP-дата в одном из трёх форматов (RFC-1123, RFC-850, asctime)."""
    return _parse(
        text,
        (_RFC1123_RE, _extract_rfc1123_or_850),
        (_RFC850_RE, _extract_rfc1123_or_850),
        (_ASCTIME_RE, _extract_asctime),
    )


# =============================================================================
# ДЛИТЕЛЬНОСТИ
# =============================================================================

_ISO_DURATION_RE: Final[re.Pattern[str]] = re.compile(
    r"^-?P(?:(?:(-?\d{1,20}(?:\.\d{1,20})?)Y)?(?:(-?\d{1,20}(?:\.\d{1,20})?)M)?"
    r"(?:(-?\d{1,20}(?:\.\d{1,20})?)W)?(?:(-?\d{1,20}(?:\.\d{1,20})?)D)?"
    r"(?:T(?:(-?\d{1,20}(?:\.\d{1,20})?)H)?(?:(-?\d{1,20}(?:\.\d{1,20})?)M)?"
    r"(?:(-?\d{1,20})(?:[.,](-?\d{1,20}))?S)?)?)$"
)

_ISO_TIME_ONLY: Final[re.Pattern[str]] = re.compile(rf"^T?{_ISO_TIME_BASE_RE}$")


def _extract_iso_duration(match: re.Match[str]) -> ParseResult:
    text = match.group(0)
    year_str, month_str, week_str, day_str, hour_str, minute_str, second_str, millis_str = (
        match.groups()
    )
    has_negative_prefix = text[0] == "-"
    negative_seconds = bool(second_str) and second_str[0] == "-"

    def maybe_negate(value: Optional[float], force: bool = False) -> Optional[float]:
        if value is None:
            return None
        if force or (value and has_negative_prefix):
            value = -value
        return normalize_number(value)

    values = {
        "years": maybe_negate(parse_floating(year_str)),
        "months": maybe_negate(parse_floating(month_str)),
        "weeks": maybe_negate(parse_floating(week_str)),
        "days": maybe_negate(parse_floating(day_str)),
        "hours": maybe_negate(parse_floating(hour_str)),
        "minutes": maybe_negate(parse_floating(minute_str)),
        "seconds": maybe_negate(parse_floating(second_str), second_str == "-0"),
        "milliseconds": maybe_negate(parse_millis(millis_str and millis_str.lstrip("-")), negative_seconds),
    }
    return {k: v for k, v in values.items() if v is not None}, None


def parse_iso_duration(text: Optional[str]) -> ParseResult:
    """
    ISO-8601 длительность.

    Examples:
        >>> parse_iso_duration("P3Y6M1W4DT12H30M5S")[0]
        {'years': 3, 'months': 6, 'weeks': 1, 'days': 4, 'hours': 12, 'minutes': 30, 'seconds': 5}
    """
    return _parse(text, (_ISO_DURATION_RE, _extract_iso_duration))


def _extract_iso_time_only(match: re.Match[str]) -> ParseResult:
    values, _, _ = _extract_iso_time(match, 1)
    return {f"{unit}s": value for unit, value in values.items()}, None


def parse_iso_time_only(text: Optional[str]) -> ParseResult:
    """Время суток ISO-8601 ("11:22:33.444") как единицы длительности."""
    return _parse(text, (_ISO_TIME_ONLY, _extract_iso_time_only))
