"""
English — встроенные английские таблицы имён

Используются в listing-режиме "en" (en/en-US, латинские цифры, григорианский
календарь) без обращения к Babel.
"""

from typing import Final, Literal, Optional

from civilclock.core.math.numerical_safeguards import format_number, is_negative_zero

# =============================================================================
# МЕСЯЦЫ И ДНИ НЕДЕЛИ
# =============================================================================

MONTHS_LONG: Final[tuple[str, ...]] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

MONTHS_SHORT: Final[tuple[str, ...]] = tuple(name[:3] for name in MONTHS_LONG)

MONTHS_NARROW: Final[tuple[str, ...]] = tuple(name[0] for name in MONTHS_LONG)

# Понедельник первым (ISO)
WEEKDAYS_LONG: Final[tuple[str, ...]] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

WEEKDAYS_SHORT: Final[tuple[str, ...]] = tuple(name[:3] for name in WEEKDAYS_LONG)

WEEKDAYS_NARROW: Final[tuple[str, ...]] = tuple(name[0] for name in WEEKDAYS_LONG)

MERIDIEMS: Final[tuple[str, ...]] = ("AM", "PM")

ERAS_LONG: Final[tuple[str, ...]] = ("Before Christ", "Anno Domini")
ERAS_SHORT: Final[tuple[str, ...]] = ("BC", "AD")
ERAS_NARROW: Final[tuple[str, ...]] = ("B", "A")


def months(length: str) -> tuple[str, ...]:
    """Имена месяцев: narrow | short | long | numeric | 2-digit."""
    if length == "narrow":
        return MONTHS_NARROW
    if length == "short":
        return MONTHS_SHORT
    if length == "long":
        return MONTHS_LONG
    if length == "numeric":
        return tuple(str(m) for m in range(1, 13))
    if length == "2-digit":
        return tuple(f"{m:02d}" for m in range(1, 13))
    raise ValueError(f"Unknown month length: {length}")


def weekdays(length: str) -> tuple[str, ...]:
    """Имена дней недели: narrow | short | long | numeric."""
    if length == "narrow":
        return WEEKDAYS_NARROW
    if length == "short":
        return WEEKDAYS_SHORT
    if length == "long":
        return WEEKDAYS_LONG
    if length == "numeric":
        return tuple(str(d) for d in range(1, 8))
    raise ValueError(f"Unknown weekday length: {length}")


def eras(length: str) -> tuple[str, ...]:
    """Имена эр: narrow | short | long."""
    if length == "narrow":
        return ERAS_NARROW
    if length == "short":
        return ERAS_SHORT
    if length == "long":
        return ERAS_LONG
    raise ValueError(f"Unknown era length: {length}")


# =============================================================================
# ОТНОСИТЕЛЬНОЕ ВРЕМЯ
# =============================================================================

# unit → (полное имя, сокращение, сокращение во множественном числе)
_RELATIVE_UNITS: Final[dict[str, tuple[str, str, Optional[str]]]] = {
    "years": ("year", "yr.", None),
    "quarters": ("quarter", "qtr.", None),
    "months": ("month", "mo.", None),
    "weeks": ("week", "wk.", None),
    "days": ("day", "day", "days"),
    "hours": ("hour", "hr.", None),
    "minutes": ("minute", "min.", None),
    "seconds": ("second", "sec.", None),
}

_UNLASTABLE: Final[frozenset[str]] = frozenset({"hours", "minutes", "seconds"})


def format_relative_time(
    unit: str,
    count: float,
    numeric: Literal["always", "auto"] = "always",
    narrow: bool = False,
) -> str:
    """
    Относительное время по-английски.

    Examples:
        >>> format_relative_time("days", 3)
        'in 3 days'
        >>> format_relative_time("days", -1, numeric="auto")
        'yesterday'
        >>> format_relative_time("hours", -2, narrow=True)
        '2 hr. ago'
    """
    full, short, short_plural = _RELATIVE_UNITS[unit]

    if numeric == "auto" and unit not in _UNLASTABLE:
        is_day = unit == "days"
        if count == 1:
            return "tomorrow" if is_day else f"next {full}"
        if count == -1:
            return "yesterday" if is_day else f"last {full}"
        if count == 0:
            return "today" if is_day else f"this {full}"

    is_in_past = count < 0 or is_negative_zero(count)
    value = abs(count)
    singular = value == 1
    if narrow:
        label = short if singular else (short_plural or short)
    else:
        label = full if singular else unit

    rendered = format_number(value)
    return f"{rendered} {label} ago" if is_in_past else f"in {rendered} {label}"
