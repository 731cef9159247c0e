"""
Instant — неизменяемый момент времени в зоне

Instant = epoch-миллисекунды + Zone + Locale + кэш civil-полей.

Состояния:
- валидный: ts конечен, зона валидна, civil-поля = decode(ts, zone.offset(ts))
- невалидный: несёт Invalid (reason + explanation); все преобразования
  возвращают self, выводы — None или "Invalid DateTime"

Civil → instant (fix-offset):
1. Смещение-догадка (текущее смещение зоны или явное)
2. Пересчёт момента, проверка смещения в новом моменте
3. Одна повторная итерация; при расхождении — меньшее из двух смещений

Разбор строк (ISO, RFC-2822, HTTP, SQL, по формату) никогда не бросает
исключение на неверном вводе, даже при Settings.throw_on_invalid.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Final, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, ValidationError

from civilclock.core.contracts import validate_instant_object
from civilclock.core.domain.records import CivilFields, Invalid, WeekData, WeekSettings
from civilclock.core.domain.units import (
    DEFAULT_ORDINAL_UNIT_VALUES,
    DEFAULT_UNIT_VALUES,
    DEFAULT_WEEK_UNIT_VALUES,
    ORDERED_ORDINAL_UNITS,
    ORDERED_UNITS,
    ORDERED_WEEK_UNITS,
    normalize_instant_unit,
)
from civilclock.core.errors import (
    ConflictingSpecificationError,
    InvalidArgumentError,
    InvalidDateTimeError,
)
from civilclock.core.math.calendar_math import (
    ISO_MIN_DAYS_IN_FIRST_WEEK,
    ISO_START_OF_WEEK,
    MS_PER_DAY,
    MS_PER_MINUTE,
    compute_ordinal,
    days_in_month,
    days_in_year,
    gregorian_to_ordinal,
    gregorian_to_week,
    has_invalid_gregorian_data,
    has_invalid_ordinal_data,
    has_invalid_time_data,
    has_invalid_week_data,
    is_leap_year,
    obj_to_local_ts,
    ordinal_to_gregorian,
    ts_to_obj,
    week_data_of,
    week_to_gregorian,
    weeks_in_week_year,
)
from civilclock.core.math.numerical_safeguards import is_finite_number, normalize_number, pad_start, trunc
from civilclock.duration import Duration, DurationLike
from civilclock.formatting.diff import diff as diff_instants
from civilclock.formatting.formatter import Formatter
from civilclock.formatting.regex_parser import (
    parse_http_date,
    parse_iso_date,
    parse_rfc2822_date,
    parse_sql,
)
from civilclock.formatting.relative import diff_relative
from civilclock.formatting.token_parser import TokenExplanation, explain_from_tokens
from civilclock.locale.locale import Locale
from civilclock.locale.presets import DATE_SHORT, FormatOptions
from civilclock.settings import Settings
from civilclock.zones import FixedOffsetZone, IANAZone, SystemZone, Zone, normalize_zone
from civilclock.zones.iana import HOST_MAX_TS, HOST_MIN_TS

if TYPE_CHECKING:
    from civilclock.interval import Interval

INVALID = "Invalid DateTime"

# ±8000 средних григорианских лет от эпохи
MAX_TIMESTAMP_MS: Final[int] = int(8000 * 365.2425 * MS_PER_DAY)

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)

InstantLike = Union["Instant", int, float, datetime, Mapping[str, Any]]


# =============================================================================
# ОПЦИИ
# =============================================================================


class InstantOptions(BaseModel):
    """Опции конструкторов и парсеров Instant."""

    zone: Any = Field(None, description="Зона (Zone, строка, минуты, tzinfo)")
    set_zone: bool = Field(False, description="Оставить зону из разобранной строки")
    locale: Optional[str] = Field(None, description="Тег локали")
    numbering_system: Optional[str] = Field(None, description="Система счисления")
    output_calendar: Optional[str] = Field(None, description="Календарь вывода")
    week_settings: Optional[WeekSettings] = Field(None, description="Недельные настройки")
    specific_offset: Optional[float] = Field(
        None, description="Явное смещение (минуты) для первой догадки fix-offset"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    def build_locale(self, default_to_en: bool = False) -> Locale:
        return Locale.create(
            self.locale,
            self.numbering_system,
            self.output_calendar,
            self.week_settings,
            default_to_en,
        )

    def resolve_zone(self) -> Zone:
        return normalize_zone(self.zone, Settings.default_zone)


def _options(opts: Mapping[str, Any]) -> InstantOptions:
    """
    kwargs → InstantOptions.

    Raises:
        InvalidArgumentError: Неизвестная опция или значение неверного типа
    """
    try:
        return InstantOptions(**opts)
    except ValidationError as e:
        raise InvalidArgumentError(str(e)) from e


# =============================================================================
# CIVIL → INSTANT
# =============================================================================


def _unsupported_zone(zone: Zone) -> Invalid:
    return Invalid(reason="unsupported zone", explanation=f'the zone "{zone.name}" is not supported')


def fix_offset(local_ts: int, offset: float, zone: Zone) -> tuple[int, float]:
    """
    Локальные миллисекунды → (момент, смещение) с учётом переходов DST.

    Args:
        local_ts: Civil-поля как UTC-миллисекунды
        offset: Смещение-догадка (минуты)
        zone: Зона

    Returns:
        (epoch ms, смещение в этот момент)
    """
    utc_guess = local_ts - offset * MS_PER_MINUTE
    offset2 = zone.offset(utc_guess)
    if offset == offset2:
        return int(utc_guess), offset

    utc_guess -= (offset2 - offset) * MS_PER_MINUTE
    offset3 = zone.offset(utc_guess)
    if offset2 == offset3:
        return int(utc_guess), offset2

    # Разрыв: меньшее смещение для момента
    return int(local_ts - min(offset2, offset3) * MS_PER_MINUTE), max(offset2, offset3)


def _obj_to_ts(fields: Mapping[str, Any], offset: float, zone: Zone) -> tuple[int, float]:
    return fix_offset(obj_to_local_ts(fields), offset, zone)


def _normalize_object(values: Mapping[str, Any]) -> dict[str, Any]:
    """
    Mapping civil-полей → канонические имена (None пропускаются).

    Raises:
        InvalidArgumentError: Не mapping или значение не число
        InvalidUnitError: Неизвестное поле
    """
    if not isinstance(values, Mapping):
        raise InvalidArgumentError(
            f"expected a mapping of civil fields, got {type(values).__name__}"
        )
    normalized = {
        normalize_instant_unit(unit): value for unit, value in values.items() if value is not None
    }
    validate_instant_object(normalized)
    return {unit: normalize_number(value) for unit, value in normalized.items()}


def _uses_local_week_values(normalized: dict[str, Any], loc: Locale) -> tuple[int, int]:
    """
    local_week_* → week_* (in place) и недельные параметры локали.

    Returns:
        (min_days_in_first_week, start_of_week)

    Raises:
        ConflictingSpecificationError: Смешаны локальные и ISO недельные поля
    """
    local_keys = ("local_weekday", "local_week_number", "local_week_year")
    if not any(key in normalized for key in local_keys):
        return ISO_MIN_DAYS_IN_FIRST_WEEK, ISO_START_OF_WEEK

    if any(key in normalized for key in ("weekday", "week_number", "week_year")):
        raise ConflictingSpecificationError(
            "Cannot mix locale-based week fields with ISO-based week fields"
        )
    for local_key in local_keys:
        if local_key in normalized:
            normalized[local_key.replace("local_", "")] = normalized.pop(local_key)
    return loc.get_min_days_in_first_week(), loc.get_start_of_week()


def _check_families(normalized: Mapping[str, Any]) -> tuple[bool, bool, bool]:
    """
    Проверка взаимоисключающих семейств полей.

    Returns:
        (contains_gregor, contains_ordinal, definite_week_def)
    """
    contains_ordinal = "ordinal" in normalized
    contains_gregor_md = "month" in normalized or "day" in normalized
    contains_gregor = "year" in normalized or contains_gregor_md
    definite_week_def = bool(normalized.get("week_year") or normalized.get("week_number"))

    if (contains_gregor or contains_ordinal) and definite_week_def:
        raise ConflictingSpecificationError(
            "Can't mix weekYear/weekNumber units with year/month/day or ordinals"
        )
    if contains_gregor_md and contains_ordinal:
        raise ConflictingSpecificationError("Can't mix ordinal dates with month/day")
    return contains_gregor, contains_ordinal, definite_week_def


def _adjust_time(instant: "Instant", duration: Duration) -> tuple[int, float]:
    """
    Сдвиг на длительность.

    Целые календарные единицы сдвигают civil-поля (день обрезается по
    длине месяца), остальное добавляется миллисекундами.
    """
    civil = instant._c
    year = civil.year + trunc(duration.years)
    month = civil.month + trunc(duration.months) + trunc(duration.quarters) * 3
    fields = civil.model_dump()
    fields.update(
        year=year,
        month=month,
        day=min(civil.day, days_in_month(year, month))
        + trunc(duration.days)
        + trunc(duration.weeks) * 7,
    )
    millis_to_add = Duration.from_object(
        {
            "years": duration.years - trunc(duration.years),
            "quarters": duration.quarters - trunc(duration.quarters),
            "months": duration.months - trunc(duration.months),
            "weeks": duration.weeks - trunc(duration.weeks),
            "days": duration.days - trunc(duration.days),
            "hours": duration.hours,
            "minutes": duration.minutes,
            "seconds": duration.seconds,
            "milliseconds": duration.milliseconds,
        }
    ).as_unit("milliseconds")

    ts, offset = _obj_to_ts(fields, instant._o, instant.zone)
    if millis_to_add != 0:
        ts += round(millis_to_add)
        offset = instant.zone.offset(ts)
    return ts, offset


# =============================================================================
# ISO / TECH ВЫВОД
# =============================================================================


def _unit_rank(unit: str) -> int:
    return ORDERED_UNITS.index(unit) if unit in ORDERED_UNITS else -1


def _to_iso_date(instant: "Instant", extended: bool, precision: str) -> str:
    civil = instant._c
    long_format = civil.year > 9999 or civil.year < 0
    text = "+" if long_format and civil.year >= 0 else ""
    text += pad_start(civil.year, 6 if long_format else 4)
    if precision == "year":
        return text
    separator = "-" if extended else ""
    text += separator + pad_start(civil.month)
    if precision == "month":
        return text
    return text + separator + pad_start(civil.day)


def _to_iso_time(
    instant: "Instant",
    extended: bool,
    suppress_seconds: bool,
    suppress_milliseconds: bool,
    include_offset: bool,
    extended_zone: bool,
    precision: str,
) -> str:
    civil = instant._c
    show_seconds = not suppress_seconds or civil.millisecond != 0 or civil.second != 0
    separator = ":" if extended else ""
    text = ""

    if precision not in ("day", "month", "year"):
        text += pad_start(civil.hour)
        if precision != "hour":
            text += separator + pad_start(civil.minute)
            if precision != "minute":
                if show_seconds:
                    text += separator + pad_start(civil.second)
                if precision != "second" and show_seconds:
                    if not suppress_milliseconds or civil.millisecond != 0:
                        text += "." + pad_start(civil.millisecond, 3)

    if include_offset:
        offset = instant._o
        if instant.is_offset_fixed and offset == 0 and not extended_zone:
            text += "Z"
        else:
            sign = "-" if offset < 0 else "+"
            hours = trunc(abs(offset) / 60)
            minutes = trunc(abs(offset) % 60)
            text += f"{sign}{pad_start(hours)}{separator}{pad_start(minutes)}"

    if extended_zone:
        text += f"[{instant.zone.iana_name}]"
    return text


def _to_tech_format(instant: "Instant", fmt: str, allow_z: bool = True) -> Optional[str]:
    if not instant.is_valid:
        return None
    formatter = Formatter.create(Locale.create("en-US"), allow_z=allow_z, force_simple=True)
    return formatter.format_instant_from_string(instant, fmt)


# =============================================================================
# INSTANT
# =============================================================================


class Instant:
    """
    Неизменяемый момент времени.

    Examples:
        >>> Instant.utc(1982, 5, 25, 9, 30).to_iso()
        '1982-05-25T09:30:00.000Z'
    """

    __slots__ = ("ts", "_zone", "loc", "_invalid_state", "_c", "_o", "_week_data", "_local_week_data")

    def __init__(
        self,
        ts: Optional[float] = None,
        zone: Optional[Zone] = None,
        loc: Optional[Locale] = None,
        invalid: Optional[Invalid] = None,
        offset: Optional[float] = None,
        old: Optional["Instant"] = None,
    ):
        zone = zone if zone is not None else Settings.default_zone
        if invalid is None and isinstance(ts, float) and not math.isfinite(ts):
            invalid = Invalid(reason="invalid input")
        if invalid is None and not zone.is_valid:
            invalid = _unsupported_zone(zone)

        self.ts: int = Settings.now() if ts is None or invalid is not None else int(ts)
        if invalid is None and abs(self.ts) > MAX_TIMESTAMP_MS:
            invalid = Invalid(reason="timestamp out of range")

        civil: Optional[CivilFields] = None
        zone_offset: Optional[float] = None
        if invalid is None:
            unchanged = (
                old is not None
                and old.is_valid
                and old.ts == self.ts
                and old.zone.equals(zone)
            )
            if unchanged:
                civil, zone_offset = old._c, old._o
            else:
                zone_offset = offset if offset is not None and old is None else zone.offset(self.ts)
                civil = ts_to_obj(self.ts, zone_offset)

        self._zone = zone
        self.loc = loc or Locale.create()
        self._invalid_state = invalid
        self._c = civil
        self._o = zone_offset
        self._week_data: Optional[WeekData] = None
        self._local_week_data: Optional[WeekData] = None

    def _clone(
        self, ts: Optional[int] = None, zone: Optional[Zone] = None, loc: Optional[Locale] = None
    ) -> "Instant":
        return Instant(
            ts=self.ts if ts is None else ts,
            zone=zone or self._zone,
            loc=loc or self.loc,
            invalid=self._invalid_state,
            old=self,
        )

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def now(cls, **opts: Any) -> "Instant":
        """Текущий момент (часы Settings.now)."""
        options = _options(opts)
        return cls(ts=Settings.now(), zone=options.resolve_zone(), loc=options.build_locale())

    @classmethod
    def _quick(cls, fields: Sequence[int], options: InstantOptions, zone: Zone) -> "Instant":
        if len(fields) > len(ORDERED_UNITS):
            raise InvalidArgumentError(f"expected at most {len(ORDERED_UNITS)} civil fields")
        if not zone.is_valid:
            return cls.invalid(_unsupported_zone(zone))
        loc = options.build_locale()
        if not fields:
            return cls(ts=Settings.now(), zone=zone, loc=loc)

        obj = dict(zip(ORDERED_UNITS, fields))
        for unit in ORDERED_UNITS:
            obj.setdefault(unit, DEFAULT_UNIT_VALUES.get(unit))
        invalid = has_invalid_gregorian_data(obj) or has_invalid_time_data(obj)
        if invalid is not None:
            return cls.invalid(invalid)
        ts, offset = _obj_to_ts(obj, zone.offset(Settings.now()), zone)
        return cls(ts=ts, zone=zone, loc=loc, offset=offset)

    @classmethod
    def local(cls, *fields: int, **opts: Any) -> "Instant":
        """
        Момент из позиционных civil-полей в зоне по умолчанию.

        Examples:
            >>> Instant.local(2017, 3, 12, 5, 45).hour
            5
        """
        options = _options(opts)
        return cls._quick(fields, options, options.resolve_zone())

    @classmethod
    def utc(cls, *fields: int, **opts: Any) -> "Instant":
        """Момент из позиционных civil-полей в UTC."""
        options = _options(opts)
        return cls._quick(fields, options, FixedOffsetZone.utc_instance())

    @classmethod
    def from_millis(cls, milliseconds: float, **opts: Any) -> "Instant":
        """
        Момент из epoch-миллисекунд (дробная часть отбрасывается).

        Raises:
            InvalidArgumentError: Не число
        """
        if not is_finite_number(milliseconds):
            raise InvalidArgumentError(
                f"from_millis requires a numerical input, but received a "
                f"{type(milliseconds).__name__} with value {milliseconds!r}"
            )
        if abs(milliseconds) > MAX_TIMESTAMP_MS:
            return cls.invalid("timestamp out of range")
        options = _options(opts)
        return cls(ts=trunc(milliseconds), zone=options.resolve_zone(), loc=options.build_locale())

    @classmethod
    def from_seconds(cls, seconds: float, **opts: Any) -> "Instant":
        """Момент из epoch-секунд."""
        if not is_finite_number(seconds):
            raise InvalidArgumentError("from_seconds requires a numerical input")
        return cls.from_millis(seconds * 1000, **opts)

    @classmethod
    def from_object(cls, obj: Optional[Mapping[str, Any]] = None, **opts: Any) -> "Instant":
        """
        Момент из mapping civil-полей.

        Недостающие старшие поля берутся из текущего момента, младшие —
        минимальные. Поддерживаются семейства: year/month/day,
        year/ordinal, week_year/week_number/weekday и их локальные варианты.

        Raises:
            ConflictingSpecificationError: Смешаны семейства полей
            InvalidUnitError: Неизвестное поле
            InvalidDateTimeError: Невалидный результат при throw_on_invalid
        """
        return cls._from_object(obj or {}, _options(opts), strict=True)

    @classmethod
    def _from_object(
        cls, obj: Mapping[str, Any], options: InstantOptions, strict: bool
    ) -> "Instant":
        zone = options.resolve_zone()
        if not zone.is_valid:
            return cls._fail(_unsupported_zone(zone), strict)

        loc = options.build_locale()
        normalized = _normalize_object(obj)
        used_local_weeks = any(key.startswith("local_") for key in normalized)
        min_days, start_of_week = _uses_local_week_values(normalized, loc)

        ts_now = Settings.now()
        offset_provis = (
            options.specific_offset if options.specific_offset is not None else zone.offset(ts_now)
        )
        contains_gregor, contains_ordinal, definite_week_def = _check_families(normalized)
        use_week_data = definite_week_def or (bool(normalized.get("weekday")) and not contains_gregor)

        obj_now: dict[str, Any] = ts_to_obj(ts_now, offset_provis).model_dump()
        if use_week_data:
            units, defaults = ORDERED_WEEK_UNITS, DEFAULT_WEEK_UNIT_VALUES
            obj_now = gregorian_to_week(obj_now, min_days, start_of_week)
        elif contains_ordinal:
            units, defaults = ORDERED_ORDINAL_UNITS, DEFAULT_ORDINAL_UNIT_VALUES
            obj_now = gregorian_to_ordinal(obj_now)
        else:
            units, defaults = ORDERED_UNITS, DEFAULT_UNIT_VALUES

        found_first = False
        for unit in units:
            if unit in normalized:
                found_first = True
            elif found_first:
                normalized[unit] = defaults[unit]
            else:
                normalized[unit] = obj_now[unit]

        if use_week_data:
            higher_order_invalid = has_invalid_week_data(normalized, min_days, start_of_week)
        elif contains_ordinal:
            higher_order_invalid = has_invalid_ordinal_data(normalized)
        else:
            higher_order_invalid = has_invalid_gregorian_data(normalized)
        invalid = higher_order_invalid or has_invalid_time_data(normalized)
        if invalid is not None:
            return cls._fail(invalid, strict)

        if use_week_data:
            gregorian = week_to_gregorian(normalized, min_days, start_of_week)
        elif contains_ordinal:
            gregorian = ordinal_to_gregorian(normalized)
        else:
            gregorian = normalized
        ts_final, offset_final = _obj_to_ts(gregorian, offset_provis, zone)
        instant = cls(ts=ts_final, zone=zone, offset=offset_final, loc=loc)

        if normalized.get("weekday") and contains_gregor and instant.is_valid:
            actual = instant.local_weekday if used_local_weeks else instant.weekday
            if normalized["weekday"] != actual:
                return cls._fail(
                    Invalid(
                        reason="mismatched weekday",
                        explanation=(
                            f"you can't specify both a weekday of {normalized['weekday']} "
                            f"and a date of {instant.to_iso()}"
                        ),
                    ),
                    strict,
                )

        if not instant.is_valid:
            return cls._fail(instant._invalid_state, strict)
        return instant

    @classmethod
    def from_datetime(cls, value: datetime, **opts: Any) -> "Instant":
        """
        Момент из datetime.datetime.

        Aware datetime даёт точный момент; зона — из опции zone, иначе из
        tzinfo (ZoneInfo → IANA, timezone → фиксированная, прочие tzinfo →
        фиксированное смещение в этот момент). Naive datetime читается как
        civil-поля в зоне опций.
        """
        if not isinstance(value, datetime):
            raise InvalidArgumentError(
                f"from_datetime requires a datetime, got {type(value).__name__}"
            )
        offset = value.utcoffset()
        if offset is None:
            fields = {
                "year": value.year,
                "month": value.month,
                "day": value.day,
                "hour": value.hour,
                "minute": value.minute,
                "second": value.second,
                "millisecond": value.microsecond // 1000,
            }
            return cls.from_object(fields, **opts)

        options = _options(opts)
        zone = options.zone
        if zone is None:
            zone = normalize_zone(value.tzinfo, Settings.default_zone)
            if not zone.is_valid:
                zone = FixedOffsetZone.instance(normalize_number(offset / timedelta(minutes=1)))
        millis = (value - _EPOCH) // timedelta(milliseconds=1)
        return cls.from_millis(millis, **{**opts, "zone": zone})

    @classmethod
    def _parse_data(
        cls,
        parsed: Optional[Mapping[str, Any]],
        parsed_zone: Optional[Zone],
        options: InstantOptions,
        format_name: str,
        text: str,
        specific_offset: Optional[float] = None,
    ) -> "Instant":
        if parsed or parsed_zone is not None:
            interpretation_zone = parsed_zone if parsed_zone is not None else options.zone
            instant = cls._from_object(
                parsed or {},
                options.model_copy(
                    update={"zone": interpretation_zone, "specific_offset": specific_offset}
                ),
                strict=False,
            )
            return instant if options.set_zone else instant._set_zone(options.zone, False, False)
        return cls._fail(
            Invalid(
                reason="unparsable",
                explanation=f'the input "{text}" can\'t be parsed as {format_name}',
            ),
            strict=False,
        )

    @classmethod
    def from_iso(cls, text: str, **opts: Any) -> "Instant":
        """
        Момент из ISO-8601 строки.

        Args:
            text: "2016-05-25T09:08:34.123+06:00", "2016-W21-3", "2016-200"
            **opts: zone, set_zone, locale, numbering_system, output_calendar

        Examples:
            >>> Instant.from_iso("2016-05-25T09:08:34.123+06:00", set_zone=True).offset
            360
        """
        values, zone = parse_iso_date(text)
        return cls._parse_data(values, zone, _options(opts), "ISO 8601", text)

    @classmethod
    def from_rfc2822(cls, text: str, **opts: Any) -> "Instant":
        """Момент из RFC-2822 строки ("Tue, 01 Nov 2016 13:23:12 +0630")."""
        values, zone = parse_rfc2822_date(text)
        return cls._parse_data(values, zone, _options(opts), "RFC 2822", text)

    @classmethod
    def from_http(cls, text: str, **opts: Any) -> "Instant":
        """Момент из HTTP-даты (RFC-1123, RFC-850, asctime)."""
        values, zone = parse_http_date(text)
        return cls._parse_data(values, zone, _options(opts), "HTTP", text)

    @classmethod
    def from_sql(cls, text: str, **opts: Any) -> "Instant":
        """Момент из SQL-строки ("2017-05-15 09:24:15.000 +02:00")."""
        values, zone = parse_sql(text)
        return cls._parse_data(values, zone, _options(opts), "SQL", text)

    @classmethod
    def from_format(cls, text: str, fmt: str, **opts: Any) -> "Instant":
        """
        Момент из строки по формату токенов.

        Локаль разбора по умолчанию — en-US.

        Raises:
            InvalidArgumentError: Не передан текст или формат
            ConflictingSpecificationError: Формат смешивает AM/PM и 24-часовой час
        """
        if text is None or fmt is None:
            raise InvalidArgumentError("from_format requires an input string and a format")
        options = _options(opts)
        explanation = explain_from_tokens(options.build_locale(default_to_en=True), text, fmt)
        if explanation.invalid_reason:
            return cls._fail(Invalid(reason=explanation.invalid_reason), strict=False)
        return cls._parse_data(
            explanation.result,
            explanation.zone,
            options,
            f"format {fmt}",
            text,
            explanation.specific_offset,
        )

    @classmethod
    def from_format_explain(cls, text: str, fmt: str, **opts: Any) -> TokenExplanation:
        """Диагностика разбора строки по формату (токены, выражение, совпадения)."""
        options = _options(opts)
        return explain_from_tokens(options.build_locale(default_to_en=True), text, fmt)

    @classmethod
    def invalid(cls, reason: Union[str, Invalid], explanation: Optional[str] = None) -> "Instant":
        """
        Невалидный Instant.

        Raises:
            InvalidArgumentError: Причина не указана
            InvalidDateTimeError: Включён Settings.throw_on_invalid
        """
        if not reason:
            raise InvalidArgumentError("need to specify a reason the Instant is invalid")
        invalid = reason if isinstance(reason, Invalid) else Invalid(reason=reason, explanation=explanation)
        return cls._fail(invalid, strict=True)

    @classmethod
    def _fail(cls, invalid: Invalid, strict: bool) -> "Instant":
        if strict and Settings.throw_on_invalid:
            raise InvalidDateTimeError(invalid)
        return cls(invalid=invalid)

    @staticmethod
    def is_instant(obj: object) -> bool:
        return isinstance(obj, Instant)

    @classmethod
    def min(cls, *instants: "Instant") -> Optional["Instant"]:
        """Самый ранний момент (None без аргументов)."""
        return cls._best_by(instants, lambda current, candidate: candidate < current, "min")

    @classmethod
    def max(cls, *instants: "Instant") -> Optional["Instant"]:
        """Самый поздний момент (None без аргументов)."""
        return cls._best_by(instants, lambda current, candidate: candidate > current, "max")

    @staticmethod
    def _best_by(instants: Sequence["Instant"], better, name: str) -> Optional["Instant"]:
        if not all(isinstance(instant, Instant) for instant in instants):
            raise InvalidArgumentError(f"{name} requires all arguments be Instants")
        best: Optional[Instant] = None
        for instant in instants:
            if best is None:
                best = instant
                continue
            current, candidate = best.to_millis(), instant.to_millis()
            if math.isnan(current) or math.isnan(candidate) or better(current, candidate):
                best = instant
        return best

    # -------------------------------------------------------------------------
    # Состояние
    # -------------------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        return self._invalid_state is None

    @property
    def invalid_reason(self) -> Optional[str]:
        return self._invalid_state.reason if self._invalid_state else None

    @property
    def invalid_explanation(self) -> Optional[str]:
        return self._invalid_state.explanation if self._invalid_state else None

    def unwrap(self) -> "Instant":
        """
        self для валидного Instant.

        Raises:
            InvalidDateTimeError: Instant невалиден
        """
        if self._invalid_state is not None:
            raise InvalidDateTimeError(self._invalid_state)
        return self

    @property
    def zone(self) -> Zone:
        return self._zone

    @property
    def zone_name(self) -> Optional[str]:
        return self._zone.name if self.is_valid else None

    @property
    def locale(self) -> Optional[str]:
        return self.loc.locale if self.is_valid else None

    @property
    def numbering_system(self) -> Optional[str]:
        return self.loc.numbering_system if self.is_valid else None

    @property
    def output_calendar(self) -> Optional[str]:
        return self.loc.output_calendar if self.is_valid else None

    def resolved_locale_options(self, **alts: Any) -> dict[str, str]:
        """Локаль, система счисления и календарь, которые будут использованы при выводе."""
        loc = self.loc.clone(**{k: v for k, v in alts.items() if v})
        return {
            "locale": loc.locale,
            "numbering_system": loc.numbering_system or "latn",
            "output_calendar": loc.output_calendar or "gregory",
        }

    # -------------------------------------------------------------------------
    # Civil-поля
    # -------------------------------------------------------------------------

    def _field(self, name: str) -> float:
        return getattr(self._c, name) if self.is_valid else math.nan

    @property
    def year(self) -> int:
        return self._field("year")

    @property
    def quarter(self) -> int:
        return math.ceil(self._c.month / 3) if self.is_valid else math.nan

    @property
    def month(self) -> int:
        return self._field("month")

    @property
    def day(self) -> int:
        return self._field("day")

    @property
    def hour(self) -> int:
        return self._field("hour")

    @property
    def minute(self) -> int:
        return self._field("minute")

    @property
    def second(self) -> int:
        return self._field("second")

    @property
    def millisecond(self) -> int:
        return self._field("millisecond")

    def get(self, unit: str) -> float:
        """Значение поля по имени единицы ("year", "weekNumber", "local_weekday")."""
        name = normalize_instant_unit(unit)
        if name == "week":
            name = "week_number"
        return getattr(self, name)

    # -------------------------------------------------------------------------
    # Недели и день года
    # -------------------------------------------------------------------------

    def _iso_week(self) -> WeekData:
        if self._week_data is None:
            self._week_data = week_data_of(self._c)
        return self._week_data

    def _locale_week(self) -> WeekData:
        if self._local_week_data is None:
            self._local_week_data = week_data_of(
                self._c, self.loc.get_min_days_in_first_week(), self.loc.get_start_of_week()
            )
        return self._local_week_data

    @property
    def week_year(self) -> int:
        return self._iso_week().week_year if self.is_valid else math.nan

    @property
    def week_number(self) -> int:
        return self._iso_week().week_number if self.is_valid else math.nan

    @property
    def weekday(self) -> int:
        """ISO день недели: 1 = понедельник ... 7 = воскресенье."""
        return self._iso_week().weekday if self.is_valid else math.nan

    @property
    def local_week_year(self) -> int:
        return self._locale_week().week_year if self.is_valid else math.nan

    @property
    def local_week_number(self) -> int:
        return self._locale_week().week_number if self.is_valid else math.nan

    @property
    def local_weekday(self) -> int:
        """День недели относительно первого дня недели локали (1..7)."""
        return self._locale_week().weekday if self.is_valid else math.nan

    @property
    def is_weekend(self) -> bool:
        return self.is_valid and self.weekday in self.loc.get_weekend_days()

    @property
    def ordinal(self) -> int:
        if not self.is_valid:
            return math.nan
        return compute_ordinal(self._c.year, self._c.month, self._c.day)

    # -------------------------------------------------------------------------
    # Имена
    # -------------------------------------------------------------------------

    @property
    def month_short(self) -> Optional[str]:
        return self.loc.months("short")[self.month - 1] if self.is_valid else None

    @property
    def month_long(self) -> Optional[str]:
        return self.loc.months("long")[self.month - 1] if self.is_valid else None

    @property
    def weekday_short(self) -> Optional[str]:
        return self.loc.weekdays("short")[self.weekday - 1] if self.is_valid else None

    @property
    def weekday_long(self) -> Optional[str]:
        return self.loc.weekdays("long")[self.weekday - 1] if self.is_valid else None

    # -------------------------------------------------------------------------
    # Смещение и DST
    # -------------------------------------------------------------------------

    @property
    def offset(self) -> float:
        """Смещение зоны в этот момент (минуты)."""
        return self._o if self.is_valid else math.nan

    @property
    def offset_name_short(self) -> Optional[str]:
        if not self.is_valid:
            return None
        return self._zone.offset_name(self.ts, "short", self.loc.locale)

    @property
    def offset_name_long(self) -> Optional[str]:
        if not self.is_valid:
            return None
        return self._zone.offset_name(self.ts, "long", self.loc.locale)

    @property
    def is_offset_fixed(self) -> Optional[bool]:
        return self._zone.is_universal if self.is_valid else None

    @property
    def is_in_dst(self) -> bool:
        """
        Летнее время: смещение больше, чем 1 января или 1 мая.

        Эвристика, не поиск переходов.
        """
        if not self.is_valid or self.is_offset_fixed:
            return False
        return (
            self.offset > self.set(month=1, day=1).offset
            or self.offset > self.set(month=5).offset
        )

    def get_possible_offsets(self) -> list["Instant"]:
        """
        Все моменты с теми же civil-полями в этой зоне.

        Два элемента для неоднозначного времени (откат часов), иначе [self].
        Проверяется только окно около перехода.
        """
        if not self.is_valid or self.is_offset_fixed:
            return [self]

        local_ts = obj_to_local_ts(self._c)
        offset_earlier = self._zone.offset(local_ts - MS_PER_DAY)
        offset_later = self._zone.offset(local_ts + MS_PER_DAY)

        offset1 = self._zone.offset(local_ts - offset_earlier * MS_PER_MINUTE)
        offset2 = self._zone.offset(local_ts - offset_later * MS_PER_MINUTE)
        if offset1 == offset2:
            return [self]

        ts1 = int(local_ts - offset1 * MS_PER_MINUTE)
        ts2 = int(local_ts - offset2 * MS_PER_MINUTE)
        civil1 = ts_to_obj(ts1, offset1)
        civil2 = ts_to_obj(ts2, offset2)
        if (
            civil1.hour == civil2.hour
            and civil1.minute == civil2.minute
            and civil1.second == civil2.second
            and civil1.millisecond == civil2.millisecond
        ):
            return [self._clone(ts=ts1), self._clone(ts=ts2)]
        return [self]

    # -------------------------------------------------------------------------
    # Календарные величины
    # -------------------------------------------------------------------------

    @property
    def is_in_leap_year(self) -> bool:
        return self.is_valid and is_leap_year(self.year)

    @property
    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month) if self.is_valid else math.nan

    @property
    def days_in_year(self) -> int:
        return days_in_year(self.year) if self.is_valid else math.nan

    @property
    def weeks_in_week_year(self) -> int:
        return weeks_in_week_year(self.week_year) if self.is_valid else math.nan

    @property
    def weeks_in_local_week_year(self) -> int:
        if not self.is_valid:
            return math.nan
        return weeks_in_week_year(
            self.local_week_year,
            self.loc.get_min_days_in_first_week(),
            self.loc.get_start_of_week(),
        )

    # -------------------------------------------------------------------------
    # Преобразования
    # -------------------------------------------------------------------------

    def set_zone(self, zone: Any = None, keep_local_time: bool = False, keep_calendar_time: bool = False) -> "Instant":
        """
        Тот же момент в другой зоне.

        Args:
            zone: Новая зона (None → зона по умолчанию)
            keep_local_time: Сохранить civil-поля (момент сдвигается)
            keep_calendar_time: Синоним keep_local_time
        """
        return self._set_zone(zone, keep_local_time or keep_calendar_time, True)

    def _set_zone(self, zone: Any, keep_local_time: bool, strict: bool) -> "Instant":
        if not self.is_valid:
            return self
        target = normalize_zone(zone, Settings.default_zone)
        if target.equals(self._zone):
            return self
        if not target.is_valid:
            return self._fail(_unsupported_zone(target), strict)

        new_ts = self.ts
        if keep_local_time:
            new_ts, _ = _obj_to_ts(self.to_object(), target.offset(self.ts), target)
        return self._clone(ts=new_ts, zone=target)

    def to_utc(self, offset: float = 0, keep_local_time: bool = False) -> "Instant":
        """Тот же момент в фиксированной зоне (UTC по умолчанию)."""
        return self.set_zone(FixedOffsetZone.instance(offset), keep_local_time=keep_local_time)

    def to_local(self) -> "Instant":
        """Тот же момент в зоне по умолчанию."""
        return self.set_zone(Settings.default_zone)

    def reconfigure(
        self,
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        output_calendar: Optional[str] = None,
    ) -> "Instant":
        """Смена локали, системы счисления или календаря вывода."""
        if not self.is_valid:
            return self
        alts = {
            key: value
            for key, value in (
                ("locale", locale),
                ("numbering_system", numbering_system),
                ("output_calendar", output_calendar),
            )
            if value
        }
        return self._clone(loc=self.loc.clone(**alts))

    def set_locale(self, locale: str) -> "Instant":
        return self.reconfigure(locale=locale)

    def set(self, values: Optional[Mapping[str, Any]] = None, **fields: Any) -> "Instant":
        """
        Замена civil-полей (смещение пересчитывается).

        День обрезается по длине месяца, если сам день не задан.

        Examples:
            >>> Instant.utc(2017, 1, 31).set(month=2).day
            28

        Raises:
            ConflictingSpecificationError: Смешаны семейства полей
        """
        if not self.is_valid:
            return self
        normalized = _normalize_object({**(values or {}), **fields})
        min_days, start_of_week = _uses_local_week_values(normalized, self.loc)
        _, contains_ordinal, _ = _check_families(normalized)
        setting_week_stuff = any(
            key in normalized for key in ("week_year", "week_number", "weekday")
        )

        civil = self._c.model_dump()
        if setting_week_stuff:
            mixed = week_to_gregorian(
                {**gregorian_to_week(civil, min_days, start_of_week), **normalized},
                min_days,
                start_of_week,
            )
        elif contains_ordinal:
            mixed = ordinal_to_gregorian({**gregorian_to_ordinal(civil), **normalized})
        else:
            mixed = {**civil, **normalized}
            if "day" not in normalized:
                mixed["day"] = min(days_in_month(mixed["year"], mixed["month"]), mixed["day"])

        ts, _ = _obj_to_ts(mixed, self._o, self._zone)
        return self._clone(ts=ts)

    def plus(self, duration: Optional[DurationLike] = None, **units: float) -> "Instant":
        """
        Сдвиг вперёд на длительность.

        Целые календарные единицы сдвигают civil-поля, остальное —
        миллисекунды.

        Examples:
            >>> Instant.utc(2017, 1, 31).plus(months=1).to_iso_date()
            '2017-02-28'
        """
        if not self.is_valid:
            return self
        amount = Duration.from_duration_like(duration if duration is not None else units)
        ts, _ = _adjust_time(self, amount)
        return self._clone(ts=ts)

    def minus(self, duration: Optional[DurationLike] = None, **units: float) -> "Instant":
        """Сдвиг назад на длительность."""
        if not self.is_valid:
            return self
        amount = Duration.from_duration_like(duration if duration is not None else units)
        ts, _ = _adjust_time(self, amount.negate())
        return self._clone(ts=ts)

    def start_of(self, unit: str, use_locale_weeks: bool = False) -> "Instant":
        """
        Начало единицы (младшие поля обнуляются).

        Недели начинаются с понедельника; с use_locale_weeks — с первого
        дня недели локали.
        """
        if not self.is_valid:
            return self
        normalized_unit = Duration.normalize_unit(unit)
        fields: dict[str, int] = {}

        chain = ("years", "quarters", "months", "weeks", "days", "hours", "minutes", "seconds")
        if normalized_unit in chain:
            position = chain.index(normalized_unit)
            if position <= 0:
                fields["month"] = 1
            if position <= 2:
                fields["day"] = 1
            if position <= 4:
                fields["hour"] = 0
            if position <= 5:
                fields["minute"] = 0
            if position <= 6:
                fields["second"] = 0
            fields["millisecond"] = 0

        if normalized_unit == "weeks":
            fields.pop("day", None)
            if use_locale_weeks:
                start_of_week = self.loc.get_start_of_week()
                if self.weekday < start_of_week:
                    fields["week_number"] = self.week_number - 1
                fields["weekday"] = start_of_week
            else:
                fields["weekday"] = 1

        if normalized_unit == "quarters":
            fields["month"] = (self.quarter - 1) * 3 + 1

        return self.set(fields)

    def end_of(self, unit: str, use_locale_weeks: bool = False) -> "Instant":
        """Последняя миллисекунда единицы."""
        if not self.is_valid:
            return self
        return (
            self.plus({unit: 1})
            .start_of(unit, use_locale_weeks=use_locale_weeks)
            .minus(1)
        )

    # -------------------------------------------------------------------------
    # Разности и сравнения
    # -------------------------------------------------------------------------

    def diff(
        self, other: "Instant", unit: Union[str, Sequence[str]] = "milliseconds", **opts: Any
    ) -> Duration:
        """
        Длительность self - other в указанных единицах.

        Examples:
            >>> Instant.utc(2017, 3, 1).diff(Instant.utc(2017, 1, 1), "months").to_object()
            {'months': 2}
        """
        if not self.is_valid or not other.is_valid:
            return Duration.invalid("created by diffing an invalid DateTime")
        duration_opts = {
            "locale": self.locale,
            "numbering_system": self.numbering_system,
            **opts,
        }
        units = [unit] if isinstance(unit, str) else list(unit)
        units = [Duration.normalize_unit(u) for u in units]

        other_is_later = other.to_millis() > self.to_millis()
        earlier = self if other_is_later else other
        later = other if other_is_later else self
        diffed = diff_instants(earlier, later, units, duration_opts)
        return diffed.negate() if other_is_later else diffed

    def diff_now(self, unit: Union[str, Sequence[str]] = "milliseconds", **opts: Any) -> Duration:
        return self.diff(Instant.now(), unit, **opts)

    def until(self, other: "Instant") -> Union["Interval", "Instant"]:
        """Интервал [self, other)."""
        if not self.is_valid:
            return self
        from civilclock.interval import Interval

        return Interval.from_instants(self, other)

    def has_same(self, other: "Instant", unit: str, use_locale_weeks: bool = False) -> bool:
        """
        Оба момента в одной и той же единице (civil-поля зоны other).

        Examples:
            >>> Instant.utc(2017, 3, 1, 10).has_same(Instant.utc(2017, 3, 1, 23), "day")
            True
        """
        if not self.is_valid:
            return False
        input_ms = other.to_millis()
        adjusted = self.set_zone(other.zone, keep_local_time=True)
        return (
            adjusted.start_of(unit, use_locale_weeks).to_millis()
            <= input_ms
            <= adjusted.end_of(unit, use_locale_weeks).to_millis()
        )

    def equals(self, other: object) -> bool:
        """Тот же момент, та же зона и та же локаль."""
        if not isinstance(other, Instant) or not self.is_valid or not other.is_valid:
            return False
        return (
            self.ts == other.ts
            and self._zone.equals(other._zone)
            and self.loc.equals(other.loc)
        )

    def _compare(self, other: object) -> Optional[tuple[int, int]]:
        if not isinstance(other, Instant):
            return None
        return self.to_millis(), other.to_millis()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        if not self.is_valid:
            return hash(self._invalid_state)
        return hash((self.ts, self._zone, self.loc))

    def __lt__(self, other: object) -> bool:
        pair = self._compare(other)
        return NotImplemented if pair is None else pair[0] < pair[1]

    def __le__(self, other: object) -> bool:
        pair = self._compare(other)
        return NotImplemented if pair is None else pair[0] <= pair[1]

    def __gt__(self, other: object) -> bool:
        pair = self._compare(other)
        return NotImplemented if pair is None else pair[0] > pair[1]

    def __ge__(self, other: object) -> bool:
        pair = self._compare(other)
        return NotImplemented if pair is None else pair[0] >= pair[1]

    def __add__(self, duration: DurationLike) -> "Instant":
        return self.plus(duration)

    def __sub__(self, other: Union["Instant", DurationLike]) -> Union["Instant", Duration]:
        if isinstance(other, Instant):
            return self.diff(other)
        return self.minus(other)

    # -------------------------------------------------------------------------
    # Вывод
    # -------------------------------------------------------------------------

    def to_iso(
        self,
        format: str = "extended",
        suppress_seconds: bool = False,
        suppress_milliseconds: bool = False,
        include_offset: bool = True,
        extended_zone: bool = False,
        precision: str = "milliseconds",
    ) -> Optional[str]:
        """
        ISO-8601 дата-время.

        Args:
            format: extended ("2017-04-22T20:47:05.335-04:00") | basic
                ("20170422T204705.335-0400")
            suppress_seconds: Не выводить нулевые секунды
            suppress_milliseconds: Не выводить нулевые миллисекунды
            include_offset: Выводить смещение
            extended_zone: Добавить [IANA-зону] (UTC выводится как +00:00)
            precision: Последняя выводимая единица (year ... millisecond)
        """
        if not self.is_valid:
            return None
        precision = normalize_instant_unit(precision)
        extended = format == "extended"
        text = _to_iso_date(self, extended, precision)
        if _unit_rank(precision) >= 3:
            text += "T"
        return text + _to_iso_time(
            self,
            extended,
            suppress_seconds,
            suppress_milliseconds,
            include_offset,
            extended_zone,
            precision,
        )

    def to_iso_date(self, format: str = "extended", precision: str = "day") -> Optional[str]:
        """ISO-8601 дата ("1982-05-25")."""
        if not self.is_valid:
            return None
        return _to_iso_date(self, format == "extended", normalize_instant_unit(precision))

    def to_iso_week_date(self) -> Optional[str]:
        """ISO-8601 недельная дата ("1982-W21-2")."""
        return _to_tech_format(self, "kkkk-'W'WW-c")

    def to_iso_time(
        self,
        suppress_milliseconds: bool = False,
        suppress_seconds: bool = False,
        include_offset: bool = True,
        include_prefix: bool = False,
        extended_zone: bool = False,
        format: str = "extended",
        precision: str = "milliseconds",
    ) -> Optional[str]:
        """ISO-8601 время ("09:30:00.000Z")."""
        if not self.is_valid:
            return None
        precision = normalize_instant_unit(precision)
        prefix = "T" if include_prefix and _unit_rank(precision) >= 3 else ""
        return prefix + _to_iso_time(
            self,
            format == "extended",
            suppress_seconds,
            suppress_milliseconds,
            include_offset,
            extended_zone,
            precision,
        )

    def to_rfc2822(self) -> Optional[str]:
        """RFC-2822 ("Tue, 25 May 1982 09:30:00 +0000")."""
        return _to_tech_format(self, "EEE, dd LLL yyyy HH:mm:ss ZZZ", allow_z=False)

    def to_http(self) -> Optional[str]:
        """HTTP-дата, всегда в UTC ("Tue, 25 May 1982 09:30:00 GMT")."""
        return _to_tech_format(self.to_utc(), "EEE, dd LLL yyyy HH:mm:ss 'GMT'")

    def to_sql_date(self) -> Optional[str]:
        if not self.is_valid:
            return None
        return _to_iso_date(self, True, "day")

    def to_sql_time(
        self,
        include_offset: bool = True,
        include_zone: bool = False,
        include_offset_space: bool = True,
    ) -> Optional[str]:
        """SQL-время ("09:30:00.000 Z", "09:30:00.000 America/New_York")."""
        fmt = "HH:mm:ss.SSS"
        if include_zone or include_offset:
            if include_offset_space:
                fmt += " "
            fmt += "z" if include_zone else "ZZ"
        return _to_tech_format(self, fmt, allow_z=True)

    def to_sql(self, **opts: bool) -> Optional[str]:
        """SQL дата-время ("1982-05-25 09:30:00.000 Z")."""
        if not self.is_valid:
            return None
        return f"{self.to_sql_date()} {self.to_sql_time(**opts)}"

    def to_format(self, fmt: str, **opts: Any) -> str:
        """
        Рендеринг по строке токенов.

        Examples:
            >>> Instant.utc(1982, 5, 25).to_format("yyyy LLL dd")
            '1982 May 25'
        """
        if not self.is_valid:
            return INVALID
        alts = {k: v for k, v in opts.items() if v}
        return Formatter.create(self.loc.redefault_to_en(**alts)).format_instant_from_string(self, fmt)

    def to_locale_string(
        self, format_opts: Union[FormatOptions, Mapping[str, Any]] = DATE_SHORT, **opts: Any
    ) -> str:
        """
        Локализованная строка по набору опций (DATE_SHORT, DATETIME_FULL, ...).

        Args:
            format_opts: FormatOptions или mapping с теми же полями
            **opts: locale, numbering_system, output_calendar
        """
        if not self.is_valid:
            return INVALID
        if not isinstance(format_opts, FormatOptions):
            format_opts = FormatOptions(**format_opts)
        alts = {k: v for k, v in opts.items() if v}
        formatter = Formatter.create(self.loc.clone(**alts))
        return formatter.format_with_system_default(self, format_opts)

    def to_millis(self) -> float:
        return self.ts if self.is_valid else math.nan

    def to_seconds(self) -> float:
        return normalize_number(self.ts / 1000) if self.is_valid else math.nan

    def to_unix_integer(self) -> Optional[int]:
        return self.ts // 1000 if self.is_valid else None

    def to_object(self, include_config: bool = False) -> dict[str, Any]:
        """Civil-поля (и, по запросу, опции локали)."""
        if not self.is_valid:
            return {}
        result: dict[str, Any] = self._c.model_dump()
        if include_config:
            result["output_calendar"] = self.output_calendar
            result["numbering_system"] = self.numbering_system
            result["locale"] = self.locale
        return result

    def to_datetime(self) -> Optional[datetime]:
        """
        Aware datetime.datetime того же момента.

        IANA-зона → ZoneInfo, системная → локальная зона хоста, фиксированная →
        datetime.timezone.

        Raises:
            InvalidArgumentError: Момент вне диапазона datetime (годы 1..9999)
        """
        if not self.is_valid:
            return None
        if not HOST_MIN_TS <= self.ts <= HOST_MAX_TS:
            raise InvalidArgumentError(f"{self.to_iso()} is outside the datetime range")
        moment = _EPOCH + timedelta(milliseconds=self.ts)
        if isinstance(self._zone, IANAZone):
            return moment.astimezone(self._zone.zone_info)
        if isinstance(self._zone, SystemZone):
            return moment.astimezone()
        if self._o == 0:
            return moment
        return moment.astimezone(timezone(timedelta(minutes=self._o)))

    def to_json(self) -> Optional[str]:
        return self.to_iso()

    def to_relative(
        self,
        base: Optional["Instant"] = None,
        unit: Union[str, Sequence[str], None] = None,
        style: str = "long",
        round: bool = True,
        rounding: str = "trunc",
        padding: float = 0,
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
    ) -> Optional[str]:
        """
        Относительное время ("in 3 days", "2 hours ago").

        Args:
            base: База (по умолчанию — текущий момент в зоне self)
            unit: Единица или список единиц-кандидатов
            style: long | short | narrow
            round: Округлять до целых
            rounding: trunc | floor | ceil | expand | round
            padding: Миллисекунды, добавляемые в сторону от base
        """
        if not self.is_valid:
            return None
        base = base or Instant.from_object({}, zone=self._zone)
        pad = (-padding if self < base else padding) if padding else 0

        units: Sequence[str] = ("years", "months", "days", "hours", "minutes", "seconds")
        single_unit: Optional[str] = None
        if isinstance(unit, str):
            single_unit = unit
        elif unit is not None:
            units = list(unit)

        return diff_relative(
            base,
            self.plus(pad),
            units,
            unit=single_unit,
            round=round,
            rounding=rounding,
            numeric="always",
            style=style,
            locale=locale,
            numbering_system=numbering_system,
        )

    def to_relative_calendar(
        self,
        base: Optional["Instant"] = None,
        unit: Optional[str] = None,
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
    ) -> Optional[str]:
        """Относительная календарная дата ("tomorrow", "last month", "in 2 years")."""
        if not self.is_valid:
            return None
        return diff_relative(
            base or Instant.from_object({}, zone=self._zone),
            self,
            ("years", "months", "days"),
            unit=unit,
            calendary=True,
            numeric="auto",
            locale=locale,
            numbering_system=numbering_system,
        )

    def __str__(self) -> str:
        return self.to_iso() if self.is_valid else INVALID

    def __repr__(self) -> str:
        if not self.is_valid:
            return f"Instant(invalid={self.invalid_reason!r})"
        return f"Instant({self.to_iso()!r}, zone={self._zone.name!r}, locale={self.loc.locale!r})"


# =============================================================================
# ПРИВЕДЕНИЕ
# =============================================================================


def friendly_instant(value: InstantLike) -> Instant:
    """
    Instant | epoch ms | datetime | mapping civil-полей → Instant.

    Raises:
        InvalidArgumentError: Неподдерживаемый тип
    """
    if isinstance(value, Instant):
        return value
    if is_finite_number(value):
        return Instant.from_millis(value)
    if isinstance(value, datetime):
        return Instant.from_datetime(value)
    if isinstance(value, Mapping):
        return Instant.from_object(value)
    raise InvalidArgumentError(
        f"Unknown datetime argument: {value!r}, of type {type(value).__name__}"
    )
