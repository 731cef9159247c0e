"""
Duration — знаковая многоединичная длительность

Значения хранятся по единицам (years ... milliseconds); неуказанная единица
отсутствует в mapping и читается как 0, у невалидной Duration — как NaN.

Конверсия между единицами идёт через матрицу точности:
- casual: год = 365 дней, месяц = 30 дней
- longterm: год = 365.2425 дня, месяц = год / 12
- пользовательская матрица {старшая: {младшая: множитель}}

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все операции возвращают новый экземпляр
2. normalize() идемпотентна
3. shift_to() сохраняет сумму в миллисекундах (в пределах округления)
4. Невалидность прилипает: операции над невалидной Duration возвращают self
"""

import math
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional, Union

from civilclock.core.contracts import validate_duration_object
from civilclock.core.domain.records import Invalid
from civilclock.core.domain.units import (
    ORDERED_DURATION_UNITS,
    REVERSE_DURATION_UNITS,
    ConversionAccuracy,
    Matrix,
    matrix_for,
    normalize_duration_unit,
)
from civilclock.core.errors import InvalidArgumentError, InvalidDurationError
from civilclock.core.math.numerical_safeguards import (
    format_number,
    is_finite_number,
    normalize_number,
    round_to,
    trunc,
)
from civilclock.formatting.formatter import Formatter
from civilclock.formatting.regex_parser import parse_iso_duration, parse_iso_time_only
from civilclock.locale.locale import Locale
from civilclock.settings import Settings

INVALID = "Invalid Duration"

DurationLike = Union["Duration", int, float, Mapping[str, Any], timedelta]

# Ширина имени единицы → стиль списка Babel
_LIST_STYLES = {
    "long": "standard",
    "short": "standard-short",
    "narrow": "standard-narrow",
}


# =============================================================================
# АРИФМЕТИКА ЗНАЧЕНИЙ
# =============================================================================


def duration_to_millis(matrix: Matrix, values: Mapping[str, float]) -> float:
    """Сумма значений в миллисекундах по матрице."""
    total = values.get("milliseconds") or 0
    for unit in REVERSE_DURATION_UNITS[1:]:
        if values.get(unit):
            total += values[unit] * matrix[unit]["milliseconds"]
    return total


def _normalize_values(matrix: Matrix, values: dict[str, float]) -> None:
    """
    Двухпроходная нормализация (in place).

    Проход 1 (справа налево): избыток и отрицательные младшие значения
    переносятся в старшую единицу. Проход 2 (слева направо): дробные части
    старших единиц переносятся вниз.
    """
    factor = -1 if duration_to_millis(matrix, values) < 0 else 1

    previous: Optional[str] = None
    for current in REVERSE_DURATION_UNITS:
        if values.get(current) is None:
            continue
        if previous is not None:
            previous_value = values[previous] * factor
            conversion = matrix[current][previous]
            roll_up = math.floor(previous_value / conversion)
            values[current] += roll_up * factor
            values[previous] -= roll_up * conversion * factor
        previous = current

    previous = None
    for current in ORDERED_DURATION_UNITS:
        if values.get(current) is None:
            continue
        if previous is not None:
            fraction = math.fmod(values[previous], 1)
            if fraction:
                values[previous] -= fraction
                values[current] += fraction * matrix[previous][current]
        previous = current

    for unit, value in values.items():
        values[unit] = normalize_number(value)


def _remove_zeros(values: Mapping[str, float]) -> dict[str, float]:
    return {unit: value for unit, value in values.items() if value != 0}


def _normalize_object(values: Mapping[str, Any]) -> dict[str, float]:
    """
    Mapping единиц → канонические имена (None пропускаются).

    Raises:
        InvalidArgumentError: Mapping не передан или значение не число
        InvalidUnitError: Неизвестная единица
    """
    if not isinstance(values, Mapping):
        raise InvalidArgumentError(
            f"Duration.from_object: argument expected to be a mapping, got {type(values).__name__}"
        )
    normalized = {
        normalize_duration_unit(unit): value for unit, value in values.items() if value is not None
    }
    validate_duration_object(normalized)
    return {unit: normalize_number(value) for unit, value in normalized.items()}


# =============================================================================
# DURATION
# =============================================================================


class Duration:
    """Неизменяемая длительность."""

    __slots__ = ("_values", "loc", "conversion_accuracy", "matrix", "_invalid_state")

    def __init__(
        self,
        values: Optional[Mapping[str, float]] = None,
        loc: Optional[Locale] = None,
        conversion_accuracy: Union[str, ConversionAccuracy, None] = None,
        matrix: Optional[Matrix] = None,
        invalid: Optional[Invalid] = None,
    ):
        accuracy = ConversionAccuracy(conversion_accuracy or ConversionAccuracy.CASUAL)
        self._values: dict[str, float] = dict(values or {})
        self.loc = loc or Locale.create()
        self.conversion_accuracy = accuracy
        self.matrix = matrix or matrix_for(accuracy)
        self._invalid_state = invalid

    def _clone(
        self,
        values: Optional[Mapping[str, float]] = None,
        clear: bool = False,
        loc: Optional[Locale] = None,
        conversion_accuracy: Union[str, ConversionAccuracy, None] = None,
        matrix: Optional[Matrix] = None,
    ) -> "Duration":
        merged = dict(values or {}) if clear else {**self._values, **(values or {})}
        return Duration(
            merged,
            loc or self.loc,
            conversion_accuracy or self.conversion_accuracy,
            matrix or self.matrix,
        )

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def from_millis(cls, count: float, **opts: Any) -> "Duration":
        """Длительность из миллисекунд."""
        return cls.from_object({"milliseconds": count}, **opts)

    @classmethod
    def from_object(
        cls,
        values: Mapping[str, Any],
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        conversion_accuracy: Union[str, ConversionAccuracy, None] = None,
        matrix: Optional[Matrix] = None,
    ) -> "Duration":
        """
        Длительность из mapping единиц.

        Examples:
            >>> Duration.from_object({"hours": 2, "minute": 30}).to_iso()
            'PT2H30M'

        Raises:
            InvalidUnitError: Неизвестная единица
            InvalidArgumentError: Значение не число
        """
        return cls(
            _normalize_object(values),
            Locale.create(locale, numbering_system),
            conversion_accuracy,
            matrix,
        )

    @classmethod
    def from_duration_like(cls, duration_like: DurationLike) -> "Duration":
        """
        Duration | миллисекунды | mapping единиц | datetime.timedelta → Duration.

        Raises:
            InvalidArgumentError: Неподдерживаемый тип
        """
        if isinstance(duration_like, Duration):
            return duration_like
        if is_finite_number(duration_like):
            return cls.from_millis(duration_like)
        if isinstance(duration_like, timedelta):
            return cls.from_millis(normalize_number(duration_like / timedelta(milliseconds=1)))
        if isinstance(duration_like, Mapping):
            return cls.from_object(duration_like)
        raise InvalidArgumentError(
            f"Unknown duration argument {duration_like!r} of type {type(duration_like).__name__}"
        )

    @classmethod
    def from_iso(cls, text: str, **opts: Any) -> "Duration":
        """
        Длительность из ISO-8601 ("P3Y6M1W4DT12H30M5S").

        Неразобранная строка → невалидная Duration (без исключения).
        """
        parsed, _ = parse_iso_duration(text)
        if parsed is not None:
            return cls.from_object(parsed, **opts)
        return cls._invalid(
            Invalid(reason="unparsable", explanation=f'the input "{text}" can\'t be parsed as ISO 8601')
        )

    @classmethod
    def from_iso_time(cls, text: str, **opts: Any) -> "Duration":
        """Длительность из времени суток ISO-8601 ("11:22:33.444")."""
        parsed, _ = parse_iso_time_only(text)
        if parsed is not None:
            return cls.from_object(parsed, **opts)
        return cls._invalid(
            Invalid(reason="unparsable", explanation=f'the input "{text}" can\'t be parsed as ISO 8601')
        )

    @classmethod
    def invalid(cls, reason: Union[str, Invalid], explanation: Optional[str] = None) -> "Duration":
        """
        Невалидная Duration.

        Raises:
            InvalidArgumentError: Причина не указана
            InvalidDurationError: Включён Settings.throw_on_invalid
        """
        if not reason:
            raise InvalidArgumentError("need to specify a reason the Duration is invalid")
        invalid = reason if isinstance(reason, Invalid) else Invalid(reason=reason, explanation=explanation)
        if Settings.throw_on_invalid:
            raise InvalidDurationError(invalid)
        return cls._invalid(invalid)

    @classmethod
    def _invalid(cls, invalid: Invalid) -> "Duration":
        return cls(invalid=invalid)

    @staticmethod
    def normalize_unit(unit: str) -> str:
        return normalize_duration_unit(unit)

    @staticmethod
    def is_duration(obj: object) -> bool:
        return isinstance(obj, Duration)

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

    @property
    def values(self) -> dict[str, float]:
        return dict(self._values)

    @property
    def locale(self) -> Optional[str]:
        return self.loc.locale if self.is_valid else None

    @property
    def numbering_system(self) -> Optional[str]:
        return self.loc.numbering_system if self.is_valid else None

    def unwrap(self) -> "Duration":
        """
        self для валидной Duration.

        Raises:
            InvalidDurationError: Duration невалидна
        """
        if self._invalid_state is not None:
            raise InvalidDurationError(self._invalid_state)
        return self

    def _unit_value(self, unit: str) -> float:
        if not self.is_valid:
            return math.nan
        return self._values.get(unit) or 0

    @property
    def years(self) -> float:
        return self._unit_value("years")

    @property
    def quarters(self) -> float:
        return self._unit_value("quarters")

    @property
    def months(self) -> float:
        return self._unit_value("months")

    @property
    def weeks(self) -> float:
        return self._unit_value("weeks")

    @property
    def days(self) -> float:
        return self._unit_value("days")

    @property
    def hours(self) -> float:
        return self._unit_value("hours")

    @property
    def minutes(self) -> float:
        return self._unit_value("minutes")

    @property
    def seconds(self) -> float:
        return self._unit_value("seconds")

    @property
    def milliseconds(self) -> float:
        return self._unit_value("milliseconds")

    def get(self, unit: str) -> float:
        """Значение единицы ("hour" и "hours" эквивалентны)."""
        return self._unit_value(normalize_duration_unit(unit))

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def plus(self, duration: DurationLike) -> "Duration":
        """Поединичная сумма (единицы, заданные хотя бы в одном слагаемом)."""
        if not self.is_valid:
            return self
        other = Duration.from_duration_like(duration)
        result = {}
        for unit in ORDERED_DURATION_UNITS:
            if unit in other._values or unit in self._values:
                result[unit] = normalize_number(other.get(unit) + self.get(unit))
        return self._clone(result, clear=True)

    def minus(self, duration: DurationLike) -> "Duration":
        if not self.is_valid:
            return self
        return self.plus(Duration.from_duration_like(duration).negate())

    def negate(self) -> "Duration":
        """Смена знака всех единиц (ноль остаётся нулём)."""
        if not self.is_valid:
            return self
        negated = {unit: 0 if value == 0 else -value for unit, value in self._values.items()}
        return self._clone(negated, clear=True)

    def map_units(self, fn: Callable[[float, str], float]) -> "Duration":
        """
        Применение fn(value, unit) к каждой заданной единице.

        Examples:
            >>> Duration.from_object({"hours": 1, "minutes": 30}).map_units(lambda x, u: x * 2).to_object()
            {'hours': 2, 'minutes': 60}
        """
        if not self.is_valid:
            return self
        result = {}
        for unit, value in self._values.items():
            mapped = fn(value, unit)
            if not is_finite_number(mapped):
                raise InvalidArgumentError(f"Invalid unit value {mapped!r}")
            result[unit] = normalize_number(mapped)
        return self._clone(result, clear=True)

    def set(self, values: Mapping[str, Any]) -> "Duration":
        """Замена значений отдельных единиц."""
        if not self.is_valid:
            return self
        return self._clone(_normalize_object(values))

    def reconfigure(
        self,
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        conversion_accuracy: Union[str, ConversionAccuracy, None] = None,
        matrix: Optional[Matrix] = None,
    ) -> "Duration":
        """Смена локали или режима точности."""
        if not self.is_valid:
            return self
        alts = {k: v for k, v in (("locale", locale), ("numbering_system", numbering_system)) if v}
        loc = self.loc.clone(**alts)
        if conversion_accuracy is not None and matrix is None:
            matrix = matrix_for(conversion_accuracy)
        return self._clone(
            loc=loc, conversion_accuracy=conversion_accuracy, matrix=matrix
        )

    def as_unit(self, unit: str) -> float:
        """
        Длительность в одной единице.

        Examples:
            >>> Duration.from_object({"hours": 1, "minutes": 30}).as_unit("hours")
            1.5
        """
        if not self.is_valid:
            return math.nan
        return self.shift_to(unit).get(unit)

    def normalize(self) -> "Duration":
        """
        Каноническое представление в заданных единицах.

        Examples:
            >>> Duration.from_object({"hours": 12, "minutes": -45}).normalize().to_object()
            {'hours': 11, 'minutes': 15}
        """
        if not self.is_valid:
            return self
        values = self.to_object()
        _normalize_values(self.matrix, values)
        return self._clone(values, clear=True)

    def rescale(self) -> "Duration":
        """Нормализация во все единицы с удалением нулевых."""
        if not self.is_valid:
            return self
        values = _remove_zeros(self.normalize().shift_to_all().to_object())
        return self._clone(values, clear=True)

    def shift_to(self, *units: str) -> "Duration":
        """
        Выражение длительности ровно в указанных единицах.

        Остаток переносится сверху вниз по матрице, дробь младших
        неуказанных единиц добавляется к последней указанной.

        Examples:
            >>> Duration.from_object({"hours": 1, "seconds": 30}).shift_to("minutes").to_object()
            {'minutes': 60.5}
        """
        if not self.is_valid or not units:
            return self
        wanted = [normalize_duration_unit(unit) for unit in units]

        built: dict[str, float] = {}
        accumulated: dict[str, float] = {}
        values = self.to_object()
        last_unit: Optional[str] = None

        for unit in ORDERED_DURATION_UNITS:
            if unit in wanted:
                last_unit = unit
                own: float = 0
                for acc_unit in accumulated:
                    own += self.matrix[acc_unit][unit] * accumulated[acc_unit]
                    accumulated[acc_unit] = 0
                if is_finite_number(values.get(unit)):
                    own += values[unit]
                whole = trunc(own)
                built[unit] = whole
                accumulated[unit] = (own * 1000 - whole * 1000) / 1000
            elif is_finite_number(values.get(unit)):
                accumulated[unit] = values[unit]

        for acc_unit, amount in accumulated.items():
            if amount != 0:
                if acc_unit == last_unit:
                    built[last_unit] += amount
                else:
                    built[last_unit] += amount / self.matrix[last_unit][acc_unit]

        _normalize_values(self.matrix, built)
        return self._clone(built, clear=True)

    def shift_to_all(self) -> "Duration":
        if not self.is_valid:
            return self
        return self.shift_to(*ORDERED_DURATION_UNITS)

    def remove_zeros(self) -> "Duration":
        if not self.is_valid:
            return self
        return self._clone(_remove_zeros(self._values), clear=True)

    # -------------------------------------------------------------------------
    # Вывод
    # -------------------------------------------------------------------------

    def to_object(self) -> dict[str, float]:
        if not self.is_valid:
            return {}
        return dict(self._values)

    def to_millis(self) -> float:
        """Миллисекунды (по матрице, если заданы календарные единицы)."""
        if not self.is_valid:
            return math.nan
        return normalize_number(duration_to_millis(self.matrix, self._values))

    def to_iso(self) -> Optional[str]:
        """
        ISO-8601 представление.

        Examples:
            >>> Duration.from_object({"years": 3, "seconds": 5.25}).to_iso()
            'P3YT5.25S'
            >>> Duration.from_object({}).to_iso()
            'PT0S'
        """
        if not self.is_valid:
            return None
        text = "P"
        if self.years != 0:
            text += f"{format_number(self.years)}Y"
        if self.months != 0 or self.quarters != 0:
            text += f"{format_number(self.months + self.quarters * 3)}M"
        if self.weeks != 0:
            text += f"{format_number(self.weeks)}W"
        if self.days != 0:
            text += f"{format_number(self.days)}D"
        if self.hours != 0 or self.minutes != 0 or self.seconds != 0 or self.milliseconds != 0:
            text += "T"
        if self.hours != 0:
            text += f"{format_number(self.hours)}H"
        if self.minutes != 0:
            text += f"{format_number(self.minutes)}M"
        if self.seconds != 0 or self.milliseconds != 0:
            text += f"{format_number(round_to(self.seconds + self.milliseconds / 1000, 3))}S"
        if text == "P":
            text += "T0S"
        return text

    def to_iso_time(
        self,
        suppress_milliseconds: bool = False,
        suppress_seconds: bool = False,
        include_prefix: bool = False,
        format: str = "extended",
    ) -> Optional[str]:
        """
        Время суток ISO-8601 ("11:22:33.444").

        None, если длительность отрицательна или не меньше суток.
        """
        if not self.is_valid:
            return None
        millis = self.to_millis()
        if millis < 0 or millis >= 86_400_000:
            return None
        from civilclock.instant import Instant

        moment = Instant.from_millis(millis, zone="utc")
        return moment.to_iso_time(
            suppress_milliseconds=suppress_milliseconds,
            suppress_seconds=suppress_seconds,
            include_prefix=include_prefix,
            include_offset=False,
            format=format,
        )

    def to_json(self) -> Optional[str]:
        return self.to_iso()

    def to_format(self, fmt: str, floor: bool = True) -> str:
        """
        Рендеринг по токенам ("hh:mm:ss"): y M w d h m s S.

        Examples:
            >>> Duration.from_object({"hours": 1, "minutes": 5}).to_format("hh:mm:ss")
            '01:05:00'
        """
        if not self.is_valid:
            return INVALID
        return Formatter.create(self.loc, floor=floor).format_duration_from_string(self, fmt)

    def to_human(
        self,
        unit_display: str = "long",
        list_style: str = "narrow",
        show_zeros: bool = True,
    ) -> str:
        """
        Человекочитаемая строка ("1 day, 5 hours").

        Args:
            unit_display: Ширина имён единиц (long | short | narrow)
            list_style: Ширина соединения списка (long | short | narrow)
            show_zeros: Выводить единицы с нулевым значением
        """
        if not self.is_valid:
            return INVALID
        parts = []
        for unit in ORDERED_DURATION_UNITS:
            value = self._values.get(unit)
            if value is None or (value == 0 and not show_zeros):
                continue
            parts.append(self.loc.unit_format(value, unit, unit_display))
        return self.loc.list_format(parts, _LIST_STYLES.get(list_style, list_style))

    # -------------------------------------------------------------------------
    # Сравнение и операторы
    # -------------------------------------------------------------------------

    def equals(self, other: object) -> bool:
        """Равенство по единицам (неуказанная == 0) и локали."""
        if not isinstance(other, Duration):
            return False
        if not self.is_valid or not other.is_valid:
            return False
        if not self.loc.equals(other.loc):
            return False
        for unit in ORDERED_DURATION_UNITS:
            mine = self._values.get(unit)
            theirs = other._values.get(unit)
            if not mine:
                if theirs:
                    return False
            elif mine != theirs:
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        if not self.is_valid:
            return hash(self._invalid_state)
        return hash((tuple(sorted(_remove_zeros(self._values).items())), self.loc))

    def __add__(self, other: DurationLike) -> "Duration":
        return self.plus(other)

    def __sub__(self, other: DurationLike) -> "Duration":
        return self.minus(other)

    def __neg__(self) -> "Duration":
        return self.negate()

    def __str__(self) -> str:
        return self.to_iso() or INVALID

    def __repr__(self) -> str:
        if not self.is_valid:
            return f"Duration(invalid={self.invalid_reason!r})"
        return f"Duration({self._values!r})"
