"""
Calendar Math — чистые функции пролептического григорианского календаря

Модуль не хранит состояния и не обращается к хост-платформе:
- Високосные годы, дни в месяце/году
- Civil-поля ↔ epoch-миллисекунды (UTC-якорь, смещение передаётся снаружи)
- Порядковый день года (ordinal) в обе стороны
- Неделя/год недели в обе стороны, параметризованные
  min_days_in_first_week и start_of_week (ISO по умолчанию: 4 и понедельник)
- Проверки диапазонов civil-полей

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. ts_to_obj(obj_to_local_ts(f), 0) == f для любых корректных полей f
2. Годы 0–99 — буквальные годы (без сдвига на 1900)
3. Переполнение месяца/дня/часа при сборке ts переносится в старшие поля
"""

from typing import Any, Final, Mapping, Optional

from civilclock.core.domain.records import CivilFields, Invalid, WeekData
from civilclock.core.math.numerical_safeguards import floor_mod, integer_between

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

MS_PER_SECOND: Final[int] = 1_000
MS_PER_MINUTE: Final[int] = 60_000
MS_PER_HOUR: Final[int] = 3_600_000
MS_PER_DAY: Final[int] = 86_400_000

# Накопленное число дней до начала месяца (индекс = месяц - 1)
NON_LEAP_LADDER: Final[tuple[int, ...]] = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
LEAP_LADDER: Final[tuple[int, ...]] = (0, 31, 60, 91, 121, 152, 182, 213, 244, 274, 305, 335)

_DAYS_IN_MONTH: Final[tuple[int, ...]] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# ISO-8601: неделя начинается с понедельника, первая неделя содержит 4 января
ISO_MIN_DAYS_IN_FIRST_WEEK: Final[int] = 4
ISO_START_OF_WEEK: Final[int] = 1


# =============================================================================
# ГОДЫ И МЕСЯЦЫ
# =============================================================================


def is_leap_year(year: int) -> bool:
    """
    Високосный год по григорианскому правилу.

    Examples:
        >>> is_leap_year(2000)
        True
        >>> is_leap_year(1900)
        False
        >>> is_leap_year(2016)
        True
    """
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    """366 для високосного года, иначе 365."""
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """
    Количество дней в месяце.

    Месяц вне 1..12 нормализуется с переносом года (13 → январь следующего).

    Examples:
        >>> days_in_month(2000, 2)
        29
        >>> days_in_month(1900, 2)
        28
        >>> days_in_month(2019, 14)
        29
    """
    mod_month = int(floor_mod(month - 1, 12)) + 1
    mod_year = year + (month - mod_month) // 12
    if mod_month == 2:
        return 29 if is_leap_year(mod_year) else 28
    return _DAYS_IN_MONTH[mod_month - 1]


def untruncate_year(year: int, cutoff: int) -> int:
    """
    Двухзначный год → полный год по правилу отсечения.

    Год > cutoff → 1900-е, иначе 2000-е. Годы > 99 не меняются.

    Examples:
        >>> untruncate_year(61, 60)
        1961
        >>> untruncate_year(60, 60)
        2060
    """
    if year > 99:
        return year
    return 1900 + year if year > cutoff else 2000 + year


# =============================================================================
# ДНИ ОТ ЭПОХИ
# =============================================================================


def days_from_civil(year: int, month: int, day: int) -> int:
    """
    Дни от 1970-01-01 до даты (пролептический григорианский календарь).

    Допускает переполнение месяца и дня: (2020, 13, 1) == (2021, 1, 1),
    (2020, 1, 32) == (2020, 2, 1).
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1

    # Сдвиг начала года на март: февраль становится последним месяцем
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = month - 3 if month > 2 else month + 9
    doy = (153 * mp + 2) // 5
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468 + (day - 1)


def civil_from_days(days: int) -> tuple[int, int, int]:
    """Дни от 1970-01-01 → (year, month, day)."""
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day


def iso_weekday(year: int, month: int, day: int) -> int:
    """ISO день недели: 1 = понедельник ... 7 = воскресенье."""
    # 1970-01-01 — четверг (4)
    return (days_from_civil(year, month, day) + 3) % 7 + 1


# =============================================================================
# CIVIL-ПОЛЯ ↔ EPOCH-МИЛЛИСЕКУНДЫ
# =============================================================================


def obj_to_local_ts(fields: Mapping[str, Any] | CivilFields) -> int:
    """
    Civil-поля → "локальные" epoch-миллисекунды (поля трактуются как UTC).

    Отсутствующие поля времени считаются нулём. Переполнение любых полей
    переносится в старшие поля.

    Args:
        fields: year/month/day[/hour/minute/second/millisecond]

    Returns:
        Миллисекунды от эпохи без учёта смещения зоны
    """
    if isinstance(fields, CivilFields):
        fields = fields.model_dump()
    days = days_from_civil(int(fields["year"]), int(fields["month"]), 1)
    ts = (days + int(fields["day"]) - 1) * MS_PER_DAY
    ts += int(fields.get("hour") or 0) * MS_PER_HOUR
    ts += int(fields.get("minute") or 0) * MS_PER_MINUTE
    ts += int(fields.get("second") or 0) * MS_PER_SECOND
    ts += int(fields.get("millisecond") or 0)
    return ts


def ts_to_obj(ts: int, offset_minutes: float) -> CivilFields:
    """
    Epoch-миллисекунды → civil-поля при заданном смещении зоны.

    Args:
        ts: Абсолютный момент (epoch ms)
        offset_minutes: Смещение зоны в этот момент (минуты, восток > 0)

    Returns:
        CivilFields наблюдаемые в зоне
    """
    local = int(ts + offset_minutes * MS_PER_MINUTE)
    days, ms_of_day = divmod(local, MS_PER_DAY)
    year, month, day = civil_from_days(days)
    hour, rest = divmod(ms_of_day, MS_PER_HOUR)
    minute, rest = divmod(rest, MS_PER_MINUTE)
    second, millisecond = divmod(rest, MS_PER_SECOND)
    return CivilFields(
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        millisecond=millisecond,
    )


# =============================================================================
# ORDINAL (ДЕНЬ ГОДА)
# =============================================================================


def compute_ordinal(year: int, month: int, day: int) -> int:
    """Порядковый номер дня в году (1..366)."""
    ladder = LEAP_LADDER if is_leap_year(year) else NON_LEAP_LADDER
    return day + ladder[month - 1]


def uncompute_ordinal(year: int, ordinal: int) -> tuple[int, int]:
    """Порядковый номер дня → (month, day)."""
    ladder = LEAP_LADDER if is_leap_year(year) else NON_LEAP_LADDER
    month0 = 0
    for index, start in enumerate(ladder):
        if start < ordinal:
            month0 = index
    return month0 + 1, ordinal - ladder[month0]


def gregorian_to_ordinal(fields: Mapping[str, Any]) -> dict[str, Any]:
    """year/month/day → year/ordinal (поля времени сохраняются)."""
    result = {k: v for k, v in fields.items() if k not in ("month", "day")}
    result["ordinal"] = compute_ordinal(fields["year"], fields["month"], fields["day"])
    return result


def ordinal_to_gregorian(fields: Mapping[str, Any]) -> dict[str, Any]:
    """year/ordinal → year/month/day (поля времени сохраняются)."""
    month, day = uncompute_ordinal(fields["year"], fields["ordinal"])
    result = {k: v for k, v in fields.items() if k != "ordinal"}
    result["month"] = month
    result["day"] = day
    return result


# =============================================================================
# НЕДЕЛИ
# =============================================================================


def _local_weekday(iso_wd: int, start_of_week: int) -> int:
    return (iso_wd - start_of_week) % 7 + 1


def _first_week_start(
    week_year: int, min_days_in_first_week: int, start_of_week: int
) -> int:
    """
    День (от эпохи), с которого начинается неделя 1 года week_year.

    Неделя 1 — первая неделя, содержащая не менее min_days_in_first_week
    дней этого года.
    """
    jan1 = days_from_civil(week_year, 1, 1)
    back = (iso_weekday(week_year, 1, 1) - start_of_week) % 7
    start = jan1 - back
    if 7 - back < min_days_in_first_week:
        start += 7
    return start


def weeks_in_week_year(
    week_year: int,
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
    start_of_week: int = ISO_START_OF_WEEK,
) -> int:
    """
    Количество недель в году недели (52 или 53).

    Examples:
        >>> weeks_in_week_year(2004)
        53
        >>> weeks_in_week_year(2005)
        52
    """
    this_start = _first_week_start(week_year, min_days_in_first_week, start_of_week)
    next_start = _first_week_start(week_year + 1, min_days_in_first_week, start_of_week)
    return (next_start - this_start) // 7


def gregorian_to_week(
    fields: Mapping[str, Any],
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
    start_of_week: int = ISO_START_OF_WEEK,
) -> dict[str, Any]:
    """
    year/month/day → week_year/week_number/weekday (поля времени сохраняются).

    weekday относителен start_of_week: 1 — первый день недели локали.
    """
    year, month, day = fields["year"], fields["month"], fields["day"]
    days = days_from_civil(year, month, day)

    week_year = year
    if days < _first_week_start(year, min_days_in_first_week, start_of_week):
        week_year = year - 1
    elif days >= _first_week_start(year + 1, min_days_in_first_week, start_of_week):
        week_year = year + 1

    start = _first_week_start(week_year, min_days_in_first_week, start_of_week)
    result = {k: v for k, v in fields.items() if k not in ("year", "month", "day")}
    result["week_year"] = week_year
    result["week_number"] = (days - start) // 7 + 1
    result["weekday"] = _local_weekday(iso_weekday(year, month, day), start_of_week)
    return result


def week_to_gregorian(
    fields: Mapping[str, Any],
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
    start_of_week: int = ISO_START_OF_WEEK,
) -> dict[str, Any]:
    """week_year/week_number/weekday → year/month/day (поля времени сохраняются)."""
    start = _first_week_start(fields["week_year"], min_days_in_first_week, start_of_week)
    days = start + (fields["week_number"] - 1) * 7 + (fields["weekday"] - 1)
    year, month, day = civil_from_days(days)
    result = {
        k: v for k, v in fields.items() if k not in ("week_year", "week_number", "weekday")
    }
    result.update(year=year, month=month, day=day)
    return result


def week_data_of(
    fields: Mapping[str, Any] | CivilFields,
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
    start_of_week: int = ISO_START_OF_WEEK,
) -> WeekData:
    """Данные недели для civil-полей в виде WeekData."""
    if isinstance(fields, CivilFields):
        fields = fields.model_dump()
    data = gregorian_to_week(fields, min_days_in_first_week, start_of_week)
    return WeekData(
        week_year=data["week_year"],
        week_number=data["week_number"],
        weekday=data["weekday"],
    )


# =============================================================================
# ВАЛИДАЦИЯ ДИАПАЗОНОВ
# =============================================================================


def _unit_out_of_range(unit: str, value: Any) -> Invalid:
    return Invalid(
        reason="unit out of range",
        explanation=f"you specified {value} (of type {type(value).__name__}) as a {unit}, which is invalid",
    )


def has_invalid_week_data(
    fields: Mapping[str, Any],
    min_days_in_first_week: int = ISO_MIN_DAYS_IN_FIRST_WEEK,
    start_of_week: int = ISO_START_OF_WEEK,
) -> Optional[Invalid]:
    """Проверка week_year/week_number/weekday."""
    week_year = fields["week_year"]
    if not integer_between(week_year, -(10**6), 10**6):
        return _unit_out_of_range("week_year", week_year)
    last_week = weeks_in_week_year(int(week_year), min_days_in_first_week, start_of_week)
    if not integer_between(fields["week_number"], 1, last_week):
        return _unit_out_of_range("week", fields["week_number"])
    if not integer_between(fields["weekday"], 1, 7):
        return _unit_out_of_range("weekday", fields["weekday"])
    return None


def has_invalid_ordinal_data(fields: Mapping[str, Any]) -> Optional[Invalid]:
    """Проверка year/ordinal."""
    year = fields["year"]
    if not integer_between(year, -(10**6), 10**6):
        return _unit_out_of_range("year", year)
    if not integer_between(fields["ordinal"], 1, days_in_year(int(year))):
        return _unit_out_of_range("ordinal", fields["ordinal"])
    return None


def has_invalid_gregorian_data(fields: Mapping[str, Any]) -> Optional[Invalid]:
    """Проверка year/month/day."""
    year = fields["year"]
    if not integer_between(year, -(10**6), 10**6):
        return _unit_out_of_range("year", year)
    if not integer_between(fields["month"], 1, 12):
        return _unit_out_of_range("month", fields["month"])
    if not integer_between(fields["day"], 1, days_in_month(int(year), int(fields["month"]))):
        return _unit_out_of_range("day", fields["day"])
    return None


def has_invalid_time_data(fields: Mapping[str, Any]) -> Optional[Invalid]:
    """
    Проверка hour/minute/second/millisecond.

    hour == 24 допустим только как конец суток (остальные поля равны 0).
    """
    hour = fields["hour"]
    minute = fields["minute"]
    second = fields["second"]
    millisecond = fields["millisecond"]

    valid_hour = integer_between(hour, 0, 23) or (
        hour == 24 and minute == 0 and second == 0 and millisecond == 0
    )
    if not valid_hour:
        return _unit_out_of_range("hour", hour)
    if not integer_between(minute, 0, 59):
        return _unit_out_of_range("minute", minute)
    if not integer_between(second, 0, 59):
        return _unit_out_of_range("second", second)
    if not integer_between(millisecond, 0, 999):
        return _unit_out_of_range("millisecond", millisecond)
    return None


# =============================================================================
# СМЕЩЕНИЯ
# =============================================================================


def signed_offset(hours_str: str, minutes_str: Optional[str]) -> int:
    """
    Строковые часы/минуты смещения → минуты со знаком часов.

    Examples:
        >>> signed_offset("-05", "30")
        -330
        >>> signed_offset("+5", None)
        300
    """
    hours = int(hours_str, 10)
    minutes = int(minutes_str, 10) if minutes_str else 0
    signed_minutes = -minutes if hours < 0 or hours_str.startswith("-") else minutes
    return hours * 60 + signed_minutes
