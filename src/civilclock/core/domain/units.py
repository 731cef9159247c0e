"""
Units — таблицы единиц времени и матрицы конверсии

Единственный допустимый способ:
- Нормализации имён единиц (singular/plural/camelCase → каноническое имя)
- Получения упорядоченных списков единиц для Instant и Duration
- Выбора матрицы конверсии Duration по режиму точности

Режимы точности:
- casual: год = 365 дней, месяц = 30 дней
- longterm: год = 365.2425 дня (средний григорианский), месяц = год / 12

Суточные и более мелкие множители точные в обоих режимах.
"""

from enum import Enum
from typing import Final, Mapping, Union

from civilclock.core.errors import InvalidUnitError

# =============================================================================
# ЕДИНИЦЫ INSTANT
# =============================================================================

# Civil-единицы от старшей к младшей
ORDERED_UNITS: Final[tuple[str, ...]] = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "millisecond",
)

ORDERED_WEEK_UNITS: Final[tuple[str, ...]] = (
    "week_year",
    "week_number",
    "weekday",
    "hour",
    "minute",
    "second",
    "millisecond",
)

ORDERED_ORDINAL_UNITS: Final[tuple[str, ...]] = (
    "year",
    "ordinal",
    "hour",
    "minute",
    "second",
    "millisecond",
)

DEFAULT_UNIT_VALUES: Final[dict[str, int]] = {
    "month": 1,
    "day": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "millisecond": 0,
}

DEFAULT_WEEK_UNIT_VALUES: Final[dict[str, int]] = {
    "week_number": 1,
    "weekday": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "millisecond": 0,
}

DEFAULT_ORDINAL_UNIT_VALUES: Final[dict[str, int]] = {
    "ordinal": 1,
    "hour": 0,
    "minute": 0,
    "second": 0,
    "millisecond": 0,
}

_INSTANT_UNIT_ALIASES: Final[dict[str, str]] = {
    "year": "year",
    "years": "year",
    "quarter": "quarter",
    "quarters": "quarter",
    "month": "month",
    "months": "month",
    "week": "week",
    "weeks": "week",
    "day": "day",
    "days": "day",
    "date": "day",
    "hour": "hour",
    "hours": "hour",
    "minute": "minute",
    "minutes": "minute",
    "second": "second",
    "seconds": "second",
    "millisecond": "millisecond",
    "milliseconds": "millisecond",
    "weekday": "weekday",
    "weekdays": "weekday",
    "weeknumber": "week_number",
    "weeksnumber": "week_number",
    "weeknumbers": "week_number",
    "weekyear": "week_year",
    "weekyears": "week_year",
    "ordinal": "ordinal",
    "localweekday": "local_weekday",
    "localweekdays": "local_weekday",
    "localweeknumber": "local_week_number",
    "localweeknumbers": "local_week_number",
    "localweekyear": "local_week_year",
    "localweekyears": "local_week_year",
}


def _fold(unit: str) -> str:
    return unit.replace("_", "").lower()


def normalize_instant_unit(unit: object) -> str:
    """
    Имя единицы → каноническое имя civil-поля.

    Принимает singular/plural, camelCase и snake_case:
    "Years", "weekNumber", "local_weekday".

    Raises:
        InvalidUnitError: Неизвестная единица
    """
    if not isinstance(unit, str):
        raise InvalidUnitError(unit)
    normalized = _INSTANT_UNIT_ALIASES.get(_fold(unit))
    if normalized is None:
        raise InvalidUnitError(unit)
    return normalized


# =============================================================================
# ЕДИНИЦЫ DURATION
# =============================================================================

ORDERED_DURATION_UNITS: Final[tuple[str, ...]] = (
    "years",
    "quarters",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
)

# От младшей к старшей (свёртка при нормализации)
REVERSE_DURATION_UNITS: Final[tuple[str, ...]] = tuple(reversed(ORDERED_DURATION_UNITS))

_DURATION_UNIT_ALIASES: Final[dict[str, str]] = {
    **{unit: unit for unit in ORDERED_DURATION_UNITS},
    **{unit[:-1]: unit for unit in ORDERED_DURATION_UNITS},
}


def normalize_duration_unit(unit: object) -> str:
    """
    Имя единицы → каноническое имя единицы Duration (plural).

    Examples:
        >>> normalize_duration_unit("Hour")
        'hours'
        >>> normalize_duration_unit("milliseconds")
        'milliseconds'

    Raises:
        InvalidUnitError: Неизвестная единица
    """
    if not isinstance(unit, str):
        raise InvalidUnitError(unit)
    normalized = _DURATION_UNIT_ALIASES.get(unit.lower())
    if normalized is None:
        raise InvalidUnitError(unit)
    return normalized


# =============================================================================
# МАТРИЦЫ КОНВЕРСИИ
# =============================================================================

Matrix = Mapping[str, Mapping[str, float]]

DAYS_IN_YEAR_ACCURATE: Final[float] = 146097 / 400
DAYS_IN_MONTH_ACCURATE: Final[float] = 146097 / 4800

LOW_ORDER_MATRIX: Final[dict[str, dict[str, float]]] = {
    "weeks": {
        "days": 7,
        "hours": 7 * 24,
        "minutes": 7 * 24 * 60,
        "seconds": 7 * 24 * 60 * 60,
        "milliseconds": 7 * 24 * 60 * 60 * 1000,
    },
    "days": {
        "hours": 24,
        "minutes": 24 * 60,
        "seconds": 24 * 60 * 60,
        "milliseconds": 24 * 60 * 60 * 1000,
    },
    "hours": {"minutes": 60, "seconds": 60 * 60, "milliseconds": 60 * 60 * 1000},
    "minutes": {"seconds": 60, "milliseconds": 60 * 1000},
    "seconds": {"milliseconds": 1000},
}


def _days_row(days: float) -> dict[str, float]:
    return {
        "days": days,
        "hours": days * 24,
        "minutes": days * 24 * 60,
        "seconds": days * 24 * 60 * 60,
        "milliseconds": days * 24 * 60 * 60 * 1000,
    }


CASUAL_MATRIX: Final[dict[str, dict[str, float]]] = {
    "years": {"quarters": 4, "months": 12, "weeks": 365 / 7, **_days_row(365)},
    "quarters": {"months": 3, "weeks": 91 / 7, **_days_row(91)},
    "months": {"weeks": 30 / 7, **_days_row(30)},
    **LOW_ORDER_MATRIX,
}

ACCURATE_MATRIX: Final[dict[str, dict[str, float]]] = {
    "years": {
        "quarters": 4,
        "months": 12,
        "weeks": DAYS_IN_YEAR_ACCURATE / 7,
        **_days_row(DAYS_IN_YEAR_ACCURATE),
    },
    "quarters": {
        "months": 3,
        "weeks": DAYS_IN_YEAR_ACCURATE / 28,
        **_days_row(DAYS_IN_YEAR_ACCURATE / 4),
    },
    "months": {
        "weeks": DAYS_IN_MONTH_ACCURATE / 7,
        **_days_row(DAYS_IN_MONTH_ACCURATE),
    },
    **LOW_ORDER_MATRIX,
}


class ConversionAccuracy(str, Enum):
    """Режим точности конверсии календарных единиц Duration."""

    CASUAL = "casual"
    LONGTERM = "longterm"


def matrix_for(accuracy: Union[str, ConversionAccuracy, Matrix, None]) -> Matrix:
    """
    Матрица конверсии для режима точности.

    Args:
        accuracy: "casual" | "longterm" | ConversionAccuracy | пользовательская матрица

    Returns:
        Матрица {старшая единица: {младшая единица: множитель}}
    """
    if accuracy is None:
        return CASUAL_MATRIX
    if isinstance(accuracy, Mapping):
        return accuracy
    if ConversionAccuracy(accuracy) is ConversionAccuracy.LONGTERM:
        return ACCURATE_MATRIX
    return CASUAL_MATRIX
