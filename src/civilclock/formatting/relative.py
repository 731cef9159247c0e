"""
Relative — относительное время ("in 3 days", "yesterday")

to_relative: первая единица из списка с |количеством| >= 1, numeric="always".
to_relative_calendar: календарная разность (years, months, days),
numeric="auto" ("tomorrow", "last month").
"""

import math
from typing import TYPE_CHECKING, Optional, Sequence

from civilclock.core.domain.units import normalize_duration_unit
from civilclock.core.math.numerical_safeguards import normalize_number

if TYPE_CHECKING:
    from civilclock.instant import Instant


def _round(count: float, digits: int, rounding: str) -> float:
    """Округление количества с сохранением отрицательного нуля."""
    if count == 0:
        return count
    factor = 10**digits
    scaled = count * factor
    if rounding == "trunc":
        rounded = math.trunc(scaled)
    elif rounding == "floor":
        rounded = math.floor(scaled)
    elif rounding == "ceil":
        rounded = math.ceil(scaled)
    elif rounding == "expand":
        rounded = math.ceil(abs(scaled)) * (1 if scaled > 0 else -1)
    else:
        rounded = math.floor(abs(scaled) + 0.5) * (1 if scaled > 0 else -1)
    result = rounded / factor
    if result == 0 and count < 0:
        return -0.0
    return normalize_number(result)


def diff_relative(
    start: "Instant",
    end: "Instant",
    units: Sequence[str],
    unit: Optional[str] = None,
    round: bool = True,
    rounding: str = "trunc",
    calendary: bool = False,
    numeric: str = "always",
    style: str = "long",
    locale: Optional[str] = None,
    numbering_system: Optional[str] = None,
) -> str:
    """
    Относительная строка для end относительно start.

    Args:
        start: База отсчёта
        end: Описываемый момент
        units: Единицы-кандидаты от старшей к младшей
        unit: Единственная единица (перекрывает units)
        round: Округлять до целых (иначе два знака)
        rounding: trunc | floor | ceil | expand | round
        calendary: Календарная разность (начала единиц)
        numeric: always | auto
        style: long | short | narrow
    """
    alts = {k: v for k, v in (("locale", locale), ("numbering_system", numbering_system)) if v}
    formatter = end.loc.clone(**alts).rel_formatter(style, numeric)

    def render(count: float, unit_name: str) -> str:
        digits = 0 if round or calendary else 2
        count = _round(count, digits, "round" if calendary else rounding)
        return formatter.format(count, unit_name)

    def differ(unit_name: str) -> float:
        if calendary:
            if end.has_same(start, unit_name):
                return 0
            return end.start_of(unit_name).diff(start.start_of(unit_name), unit_name).get(unit_name)
        return end.diff(start, unit_name).get(unit_name)

    if unit:
        unit_name = normalize_duration_unit(unit)
        return render(differ(unit_name), unit_name)

    candidates = [normalize_duration_unit(u) for u in units]
    for unit_name in candidates:
        count = differ(unit_name)
        if abs(count) >= 1:
            return render(count, unit_name)

    past = start.to_millis() > end.to_millis()
    return render(-0.0 if past else 0, candidates[-1])
