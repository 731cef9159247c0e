"""
Numerical Safeguards — числовые примитивы календарного движка

Модуль обеспечивает единообразную работу с числами во всех компонентах:
- Проверка конечности (NaN/Inf никогда не попадают в civil-поля)
- Целочисленная арифметика с floor-семантикой (floor_mod)
- Округление до заданной точности (round_to)
- Разбор числовых фрагментов строк (целые, дробные, доли секунды)
- Рендеринг чисел без артефактов float (3.0 → "3")

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. floor_mod всегда возвращает значение со знаком делителя
2. parse_millis никогда не округляет вверх (усечение долей)
3. format_number детерминирован для одинаковых входов
"""

import math
from typing import Final, Optional, Union

Number = Union[int, float]

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Точность по умолчанию для round_to при сравнении дробных единиц
DEFAULT_ROUND_DIGITS: Final[int] = 3


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_finite_number(value: object) -> bool:
    """
    Проверка, что значение — конечное число (int/float, не bool).

    Args:
        value: Проверяемое значение

    Returns:
        True для конечных int/float, False для NaN/Inf и нечисловых типов
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def is_integer(value: object) -> bool:
    """True, если значение — целое число (включая float с нулевой дробной частью)."""
    if not is_finite_number(value):
        return False
    return float(value).is_integer()  # type: ignore[arg-type]


def integer_between(value: object, bottom: int, top: int) -> bool:
    """
    Проверка целого в замкнутом диапазоне [bottom, top].

    Examples:
        >>> integer_between(12, 1, 12)
        True
        >>> integer_between(13, 1, 12)
        False
        >>> integer_between(1.5, 1, 12)
        False
    """
    return is_integer(value) and bottom <= value <= top  # type: ignore[operator]


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def floor_mod(x: Number, n: Number) -> Number:
    """
    Остаток с floor-семантикой (знак результата = знак делителя).

    Examples:
        >>> floor_mod(-1, 12)
        11
        >>> floor_mod(13, 12)
        1
    """
    return x - n * math.floor(x / n)


def trunc(x: Number) -> int:
    """Усечение к нулю (как int(), но явно для читаемости)."""
    return int(math.trunc(x))


def round_to(number: Number, digits: int, towards_zero: bool = False) -> float:
    """
    Округление до digits знаков после запятой.

    Округление half-away-from-zero (а не банковское), чтобы 2.5 → 3.

    Args:
        number: Исходное число
        digits: Количество знаков после запятой
        towards_zero: Усекать вместо округления

    Returns:
        Округлённое значение
    """
    factor = 10 ** digits
    scaled = number * factor
    if towards_zero:
        rounded = math.trunc(scaled)
    else:
        rounded = math.floor(abs(scaled) + 0.5)
        rounded = rounded if scaled >= 0 else -rounded
    return rounded / factor


def normalize_number(value: Number) -> Number:
    """Целочисленный float → int (5.0 → 5), остальные значения без изменений."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def is_negative_zero(value: Number) -> bool:
    """True для -0.0."""
    return value == 0 and math.copysign(1.0, value) < 0


# =============================================================================
# РАЗБОР СТРОК
# =============================================================================


def parse_integer(string: Optional[str]) -> Optional[int]:
    """Разбор целого из строки; None/пустая строка → None."""
    if string is None or string == "":
        return None
    return int(string, 10)


def parse_floating(string: Optional[str]) -> Optional[float]:
    """Разбор дробного из строки; None/пустая строка → None. Запятая = точка."""
    if string is None or string == "":
        return None
    return float(string.replace(",", "."))


def parse_millis(fraction: Optional[str]) -> Optional[int]:
    """
    Доля секунды (цифры после точки) → миллисекунды с усечением.

    Examples:
        >>> parse_millis("5")
        500
        >>> parse_millis("123456")
        123
        >>> parse_millis("0009")
        0
    """
    if fraction is None or fraction == "":
        return None
    return int(math.floor(float("0." + fraction) * 1000))


# =============================================================================
# РЕНДЕРИНГ
# =============================================================================


def pad_start(value: Number, width: int = 2) -> str:
    """
    Дополнение нулями слева с учётом знака.

    Examples:
        >>> pad_start(5)
        '05'
        >>> pad_start(-5, 3)
        '-005'
        >>> pad_start(1234, 2)
        '1234'
    """
    body = format_number(abs(value))
    if value < 0:
        return "-" + body.rjust(width, "0")
    return body.rjust(width, "0")


def format_number(value: Number) -> str:
    """
    Рендеринг числа без артефактов float.

    Examples:
        >>> format_number(3.0)
        '3'
        >>> format_number(1.5)
        '1.5'
        >>> format_number(-0.25)
        '-0.25'
    """
    normalized = normalize_number(value)
    if isinstance(normalized, int):
        return str(normalized)
    text = repr(normalized)
    if "e" in text or "E" in text:
        text = f"{normalized:.15f}".rstrip("0").rstrip(".")
    return text
