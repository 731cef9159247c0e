"""
Diff — разность двух моментов в наборе единиц

Жадный спуск по единицам:
1. Календарные единицы (years, quarters, months, weeks, days) — целое число
   единиц, не перескакивающее позднего момента; курсор двигается вперёд
2. Остаток в миллисекундах раскладывается по часовым единицам (shift_to)
3. Если часовых единиц нет, остаток становится дробью младшей календарной
   единицы (доля от длины следующего шага)
"""

import math
from typing import TYPE_CHECKING, Any, Callable, Final, Optional, Sequence

from civilclock.duration import Duration

if TYPE_CHECKING:
    from civilclock.instant import Instant

_LOWER_ORDER_UNITS: Final[tuple[str, ...]] = ("hours", "minutes", "seconds", "milliseconds")


def _utc_day_start(instant: "Instant") -> int:
    return instant.to_utc(0, keep_local_time=True).start_of("day").to_millis()


def day_diff(earlier: "Instant", later: "Instant") -> int:
    """Целые календарные сутки между civil-датами двух моментов."""
    millis = _utc_day_start(later) - _utc_day_start(earlier)
    return math.floor(Duration.from_millis(millis).as_unit("days"))


def _week_diff(earlier: "Instant", later: "Instant") -> int:
    days = day_diff(earlier, later)
    return int((days - math.fmod(days, 7)) / 7)


_DIFFERS: Final[tuple[tuple[str, Callable[["Instant", "Instant"], int]], ...]] = (
    ("years", lambda a, b: b.year - a.year),
    ("quarters", lambda a, b: b.quarter - a.quarter + (b.year - a.year) * 4),
    ("months", lambda a, b: b.month - a.month + (b.year - a.year) * 12),
    ("weeks", _week_diff),
    ("days", day_diff),
)


def _high_order_diffs(
    cursor: "Instant", later: "Instant", units: Sequence[str]
) -> tuple["Instant", dict[str, int], Optional["Instant"], Optional[str]]:
    results: dict[str, int] = {}
    earlier = cursor
    lowest_order: Optional[str] = None
    high_water: Optional["Instant"] = None

    for unit, differ in _DIFFERS:
        if unit not in units:
            continue
        lowest_order = unit
        results[unit] = differ(cursor, later)
        high_water = earlier.plus(results)

        if high_water.to_millis() > later.to_millis():
            # Перескок: шаг назад (дважды для концов месяцев)
            results[unit] -= 1
            cursor = earlier.plus(results)
            if cursor.to_millis() > later.to_millis():
                high_water = cursor
                results[unit] -= 1
                cursor = earlier.plus(results)
        else:
            cursor = high_water

    return cursor, results, high_water, lowest_order


def diff(earlier: "Instant", later: "Instant", units: Sequence[str], opts: dict[str, Any]) -> Duration:
    """
    Длительность later - earlier в единицах units (earlier <= later).

    Args:
        earlier: Ранний момент
        later: Поздний момент
        units: Канонические единицы Duration
        opts: Опции создаваемой Duration (locale, numbering_system, conversion_accuracy)
    """
    cursor, results, high_water, lowest_order = _high_order_diffs(earlier, later, units)

    remaining_millis = later.to_millis() - cursor.to_millis()
    lower_order_units = [unit for unit in units if unit in _LOWER_ORDER_UNITS]

    values: dict[str, float] = dict(results)
    if not lower_order_units and lowest_order is not None:
        if high_water is not None and high_water.to_millis() < later.to_millis():
            high_water = cursor.plus({lowest_order: 1})
        if high_water is not None and high_water is not cursor:
            span = high_water.to_millis() - cursor.to_millis()
            values[lowest_order] = (values.get(lowest_order) or 0) + remaining_millis / span

    duration = Duration.from_object(values, **opts)
    if lower_order_units:
        return (
            Duration.from_millis(remaining_millis, **opts)
            .shift_to(*lower_order_units)
            .plus(duration)
        )
    return duration
