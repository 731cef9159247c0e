"""
Interval — полуоткрытый интервал [start, end) между двумя Instant

Валидный интервал: оба конца валидны и end >= start (равенство —
пустой интервал). Конец в интервал не входит.

Алгебра: пересечение, объединение, merge (слияние перекрывающихся и
смыкающихся), xor (покрытые ровно одним интервалом участки), difference.
"""

import math
from typing import Any, Callable, Optional, Sequence, Union

from civilclock.core.domain.records import Invalid
from civilclock.core.errors import InvalidArgumentError, InvalidIntervalError
from civilclock.duration import Duration, DurationLike
from civilclock.instant import Instant, InstantLike, friendly_instant
from civilclock.locale.presets import DATE_SHORT, FormatOptions
from civilclock.settings import Settings

INVALID = "Invalid Interval"

_SEPARATOR = " – "


def _friendly_or_none(value: Optional[InstantLike]) -> Optional[Instant]:
    return friendly_instant(value) if value is not None else None


def _validate_start_end(start: Optional[Instant], end: Optional[Instant]) -> Optional["Interval"]:
    if start is None or not start.is_valid:
        return Interval.invalid("missing or invalid start")
    if end is None or not end.is_valid:
        return Interval.invalid("missing or invalid end")
    if end < start:
        return Interval.invalid(
            "end before start",
            f"The end of an interval must be after its start, but you had "
            f"start={start.to_iso()} and end={end.to_iso()}",
        )
    return None


class Interval:
    """
    Полуоткрытый интервал между двумя моментами.

    Examples:
        >>> i = Interval.from_instants(Instant.utc(2020, 1, 1), Instant.utc(2020, 1, 3))
        >>> i.length("days")
        2
    """

    __slots__ = ("s", "e", "_invalid_state")

    def __init__(
        self,
        start: Optional[Instant] = None,
        end: Optional[Instant] = None,
        invalid: Optional[Invalid] = None,
    ):
        self.s = start
        self.e = end
        self._invalid_state = invalid

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def invalid(cls, reason: Union[str, Invalid], explanation: Optional[str] = None) -> "Interval":
        """
        Невалидный интервал.

        Raises:
            InvalidArgumentError: Причина не указана
            InvalidIntervalError: Включён Settings.throw_on_invalid
        """
        if not reason:
            raise InvalidArgumentError("need to specify a reason the Interval is invalid")
        invalid = reason if isinstance(reason, Invalid) else Invalid(reason=reason, explanation=explanation)
        if Settings.throw_on_invalid:
            raise InvalidIntervalError(invalid)
        return cls(invalid=invalid)

    @classmethod
    def from_instants(cls, start: Optional[InstantLike], end: Optional[InstantLike]) -> "Interval":
        """Интервал [start, end)."""
        builtin_start = _friendly_or_none(start)
        builtin_end = _friendly_or_none(end)
        validate_error = _validate_start_end(builtin_start, builtin_end)
        if validate_error is not None:
            return validate_error
        return cls(start=builtin_start, end=builtin_end)

    @classmethod
    def after(cls, start: InstantLike, duration: DurationLike) -> "Interval":
        """Интервал длительностью duration, начинающийся в start."""
        dur = Duration.from_duration_like(duration)
        instant = friendly_instant(start)
        return cls.from_instants(instant, instant.plus(dur))

    @classmethod
    def before(cls, end: InstantLike, duration: DurationLike) -> "Interval":
        """Интервал длительностью duration, заканчивающийся в end."""
        dur = Duration.from_duration_like(duration)
        instant = friendly_instant(end)
        return cls.from_instants(instant.minus(dur), instant)

    @classmethod
    def from_iso(cls, text: str, **opts: Any) -> "Interval":
        """
        Интервал из ISO-8601 строки "a/b".

        Формы: start/end, start/duration, duration/end.

        Examples:
            >>> Interval.from_iso("2007-03-01T13:00:00Z/P1Y2M10DT2H30M").is_valid
            True
        """
        parts = (text or "").split("/", 1)
        if len(parts) == 2:
            first, second = parts
            start = Instant.from_iso(first, **opts)
            end = Instant.from_iso(second, **opts)

            if start.is_valid and end.is_valid:
                return cls.from_instants(start, end)
            if start.is_valid:
                dur = Duration.from_iso(second)
                if dur.is_valid:
                    return cls.after(start, dur)
            elif end.is_valid:
                dur = Duration.from_iso(first)
                if dur.is_valid:
                    return cls.before(end, dur)
        return cls._unparsable(text)

    @classmethod
    def _unparsable(cls, text: str) -> "Interval":
        # Разбор не зависит от throw_on_invalid
        return cls(
            invalid=Invalid(
                reason="unparsable",
                explanation=f'the input "{text}" can\'t be parsed as ISO 8601',
            )
        )

    @staticmethod
    def is_interval(obj: object) -> bool:
        return isinstance(obj, Interval)

    # -------------------------------------------------------------------------
    # Состояние
    # -------------------------------------------------------------------------

    @property
    def start(self) -> Optional[Instant]:
        return self.s if self.is_valid else None

    @property
    def end(self) -> Optional[Instant]:
        return self.e if self.is_valid else None

    @property
    def last_instant(self) -> Optional[Instant]:
        """Последняя миллисекунда интервала (None для пустого)."""
        if not self.is_valid:
            return None
        return self.e.minus(1) if self.e.ts > self.s.ts else self.s

    @property
    def is_valid(self) -> bool:
        return self._invalid_state is None

    @property
    def invalid_reason(self) -> Optional[str]:
        return self._invalid_state.reason if self._invalid_state else None

    @property
    def invalid_explanation(self) -> Optional[str]:
        return self._invalid_state.explanation if self._invalid_state else None

    def unwrap(self) -> "Interval":
        """
        self для валидного интервала.

        Raises:
            InvalidIntervalError: Интервал невалиден
        """
        if self._invalid_state is not None:
            raise InvalidIntervalError(self._invalid_state)
        return self

    # -------------------------------------------------------------------------
    # Длина и счёт
    # -------------------------------------------------------------------------

    def length(self, unit: str = "milliseconds") -> float:
        """Длина в единицах (дробная)."""
        if not self.is_valid:
            return math.nan
        return self.to_duration(unit).get(unit)

    def count(self, unit: str = "milliseconds", use_locale_weeks: bool = False) -> float:
        """
        Число единиц календаря, которых касается интервал.

        Examples:
            >>> Interval.from_instants(Instant.utc(2020, 1, 1, 23), Instant.utc(2020, 1, 2, 1)).count("days")
            2
        """
        if not self.is_valid:
            return math.nan
        start = self.s.start_of(unit, use_locale_weeks=use_locale_weeks)
        end = self.e.reconfigure(locale=start.locale) if use_locale_weeks else self.e
        end = end.start_of(unit, use_locale_weeks=use_locale_weeks)
        whole = math.floor(end.diff(start, unit).get(unit))
        return whole + (1 if end.to_millis() != self.e.to_millis() else 0)

    def has_same(self, unit: str) -> bool:
        """Интервал целиком внутри одной единицы календаря."""
        if not self.is_valid:
            return False
        return self.is_empty() or self.e.minus(1).has_same(self.s, unit)

    def is_empty(self) -> bool:
        return self.s.to_millis() == self.e.to_millis()

    # -------------------------------------------------------------------------
    # Положение момента
    # -------------------------------------------------------------------------

    def is_after(self, instant: Instant) -> bool:
        """Интервал целиком после момента."""
        if not self.is_valid:
            return False
        return self.s > instant

    def is_before(self, instant: Instant) -> bool:
        """Интервал целиком до момента (конец не включён)."""
        if not self.is_valid:
            return False
        return self.e <= instant

    def contains(self, instant: Instant) -> bool:
        """start <= instant < end."""
        if not self.is_valid:
            return False
        return self.s <= instant < self.e

    def __contains__(self, instant: Instant) -> bool:
        return self.contains(instant)

    # -------------------------------------------------------------------------
    # Преобразования
    # -------------------------------------------------------------------------

    def set(self, start: Optional[Instant] = None, end: Optional[Instant] = None) -> "Interval":
        """Интервал с заменёнными концами."""
        if not self.is_valid:
            return self
        return Interval.from_instants(start or self.s, end or self.e)

    def split_at(self, *instants: InstantLike) -> list["Interval"]:
        """Разбиение по моментам внутри интервала."""
        if not self.is_valid:
            return []
        cuts = sorted(
            (instant for instant in map(friendly_instant, instants) if self.contains(instant)),
            key=lambda instant: instant.to_millis(),
        )
        results: list[Interval] = []
        cursor = self.s
        index = 0
        while cursor < self.e:
            added = cuts[index] if index < len(cuts) else self.e
            upper = self.e if added > self.e else added
            results.append(Interval.from_instants(cursor, upper))
            cursor = upper
            index += 1
        return results

    def split_by(self, duration: DurationLike) -> list["Interval"]:
        """
        Разбиение на куски длительности duration (последний может быть короче).

        Каждая граница отсчитывается от начала интервала, а не от
        предыдущей границы.
        """
        dur = Duration.from_duration_like(duration)
        if not self.is_valid or not dur.is_valid or dur.as_unit("milliseconds") == 0:
            return []

        results: list[Interval] = []
        cursor = self.s
        index = 1
        while cursor < self.e:
            step = index
            added = self.s.plus(dur.map_units(lambda value, _unit: value * step))
            upper = self.e if added > self.e else added
            results.append(Interval.from_instants(cursor, upper))
            cursor = upper
            index += 1
        return results

    def divide_equally(self, number_of_parts: int) -> list["Interval"]:
        """Разбиение на number_of_parts равных по миллисекундам частей."""
        if not self.is_valid:
            return []
        return self.split_by(self.length() / number_of_parts)[:number_of_parts]

    def map_endpoints(self, mapper: Callable[[Instant], Instant]) -> "Interval":
        """Интервал из преобразованных концов."""
        return Interval.from_instants(mapper(self.s), mapper(self.e))

    # -------------------------------------------------------------------------
    # Отношения
    # -------------------------------------------------------------------------

    def overlaps(self, other: "Interval") -> bool:
        if not self.is_valid or not other.is_valid:
            return False
        return self.e > other.s and self.s < other.e

    def abuts_start(self, other: "Interval") -> bool:
        """Конец self совпадает с началом other."""
        if not self.is_valid or not other.is_valid:
            return False
        return self.e.to_millis() == other.s.to_millis()

    def abuts_end(self, other: "Interval") -> bool:
        """Конец other совпадает с началом self."""
        if not self.is_valid or not other.is_valid:
            return False
        return other.e.to_millis() == self.s.to_millis()

    def engulfs(self, other: "Interval") -> bool:
        """other целиком внутри self."""
        if not self.is_valid or not other.is_valid:
            return False
        return self.s <= other.s and self.e >= other.e

    def equals(self, other: object) -> bool:
        if not isinstance(other, Interval) or not self.is_valid or not other.is_valid:
            return False
        return self.s.equals(other.s) and self.e.equals(other.e)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        if not self.is_valid:
            return hash(self._invalid_state)
        return hash((self.s, self.e))

    # -------------------------------------------------------------------------
    # Алгебра
    # -------------------------------------------------------------------------

    def intersection(self, other: "Interval") -> Optional["Interval"]:
        """Общая часть (None, если интервалы не пересекаются)."""
        if not self.is_valid:
            return self
        if not other.is_valid:
            return None
        start = self.s if self.s > other.s else other.s
        end = self.e if self.e < other.e else other.e
        if start >= end:
            return None
        return Interval.from_instants(start, end)

    def union(self, other: "Interval") -> "Interval":
        """Наименьший интервал, содержащий оба."""
        if not self.is_valid or not other.is_valid:
            return self
        start = self.s if self.s < other.s else other.s
        end = self.e if self.e > other.e else other.e
        return Interval.from_instants(start, end)

    @staticmethod
    def merge(intervals: Sequence["Interval"]) -> list["Interval"]:
        """
        Слияние перекрывающихся и смыкающихся интервалов.

        Результат упорядочен по началу; невалидные интервалы пропускаются.
        """
        ordered = sorted(
            (interval for interval in intervals if interval.is_valid),
            key=lambda interval: interval.s.to_millis(),
        )
        found: list[Interval] = []
        current: Optional[Interval] = None
        for item in ordered:
            if current is None:
                current = item
            elif current.overlaps(item) or current.abuts_start(item):
                current = current.union(item)
            else:
                found.append(current)
                current = item
        if current is not None:
            found.append(current)
        return found

    @staticmethod
    def xor(intervals: Sequence["Interval"]) -> list["Interval"]:
        """
        Участки, покрытые ровно одним интервалом.

        Examples:
            >>> a = Interval.from_instants(Instant.utc(2020, 1, 1), Instant.utc(2020, 1, 3))
            >>> b = Interval.from_instants(Instant.utc(2020, 1, 2), Instant.utc(2020, 1, 4))
            >>> [str(i.start.day) + "-" + str(i.end.day) for i in Interval.xor([a, b])]
            ['1-2', '3-4']
        """
        events: list[tuple[Instant, str]] = []
        for interval in intervals:
            if interval.is_valid:
                events.append((interval.s, "s"))
                events.append((interval.e, "e"))
        events.sort(key=lambda event: event[0].to_millis())

        results: list[Interval] = []
        depth = 0
        start: Optional[Instant] = None
        for time, kind in events:
            depth += 1 if kind == "s" else -1
            if depth == 1:
                start = time
            else:
                if start is not None and start.to_millis() != time.to_millis():
                    results.append(Interval.from_instants(start, time))
                start = None
        return Interval.merge(results)

    def difference(self, *intervals: "Interval") -> list["Interval"]:
        """Части self, не покрытые ни одним из intervals."""
        pieces = (self.intersection(piece) for piece in Interval.xor([self, *intervals]))
        return [piece for piece in pieces if piece is not None and not piece.is_empty()]

    # -------------------------------------------------------------------------
    # Вывод
    # -------------------------------------------------------------------------

    def to_duration(self, unit: Union[str, Sequence[str]] = "milliseconds", **opts: Any) -> Duration:
        """Длительность end - start в единицах unit."""
        if not self.is_valid:
            return Duration._invalid(self._invalid_state)
        return self.e.diff(self.s, unit, **opts)

    def to_iso(self, **opts: Any) -> Optional[str]:
        """ISO-8601 "start/end" (опции как у Instant.to_iso)."""
        if not self.is_valid:
            return None
        return f"{self.s.to_iso(**opts)}/{self.e.to_iso(**opts)}"

    def to_iso_date(self) -> Optional[str]:
        if not self.is_valid:
            return None
        return f"{self.s.to_iso_date()}/{self.e.to_iso_date()}"

    def to_iso_time(self, **opts: Any) -> Optional[str]:
        if not self.is_valid:
            return None
        return f"{self.s.to_iso_time(**opts)}/{self.e.to_iso_time(**opts)}"

    def to_format(self, fmt: str, separator: str = _SEPARATOR) -> str:
        """Оба конца по строке токенов через разделитель."""
        if not self.is_valid:
            return INVALID
        return f"{self.s.to_format(fmt)}{separator}{self.e.to_format(fmt)}"

    def to_locale_string(
        self, format_opts: Union[FormatOptions, dict[str, Any]] = DATE_SHORT, **opts: Any
    ) -> str:
        """Оба конца локализованной строкой через " – "."""
        if not self.is_valid:
            return INVALID
        return _SEPARATOR.join(
            (
                self.s.to_locale_string(format_opts, **opts),
                self.e.to_locale_string(format_opts, **opts),
            )
        )

    def to_json(self) -> Optional[str]:
        return self.to_iso()

    def __str__(self) -> str:
        if not self.is_valid:
            return INVALID
        return f"[{self.s.to_iso()}{_SEPARATOR}{self.e.to_iso()})"

    def __repr__(self) -> str:
        if not self.is_valid:
            return f"Interval(invalid={self.invalid_reason!r})"
        return f"Interval(start={self.s.to_iso()!r}, end={self.e.to_iso()!r})"
