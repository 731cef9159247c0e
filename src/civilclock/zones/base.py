"""
Zone — контракт временной зоны

Зона отвечает на один вопрос: смещение (минуты, восток > 0) в момент ts.
Варианты: SystemZone, IANAZone, FixedOffsetZone, InvalidZone.

Базовый класс не реализует методы: каждый бросает ZoneIsAbstractError.
"""

import math
from enum import Enum
from typing import Optional

from civilclock.core.errors import ZoneIsAbstractError
from civilclock.core.math.numerical_safeguards import pad_start, trunc


# =============================================================================
# ENUMS
# =============================================================================


class ZoneType(str, Enum):
    """Тег варианта зоны"""

    SYSTEM = "system"
    IANA = "iana"
    FIXED = "fixed"
    INVALID = "invalid"


class OffsetFormat(str, Enum):
    """Формат рендеринга смещения"""

    NARROW = "narrow"  # +5, +5:30
    SHORT = "short"  # +05:00
    TECHIE = "techie"  # +0500


# =============================================================================
# OFFSET RENDERING
# =============================================================================


def format_offset(offset: float, fmt: str = "short") -> str:
    """
    Смещение в минутах → строка.

    Examples:
        >>> format_offset(330, "narrow")
        '+5:30'
        >>> format_offset(-300, "short")
        '-05:00'
        >>> format_offset(60, "techie")
        '+0100'

    Raises:
        ValueError: Неизвестный формат
    """
    hours = trunc(abs(offset / 60))
    minutes = trunc(abs(offset) % 60)
    sign = "+" if offset >= 0 else "-"

    style = OffsetFormat(fmt)
    if style is OffsetFormat.SHORT:
        return f"{sign}{pad_start(hours, 2)}:{pad_start(minutes, 2)}"
    if style is OffsetFormat.NARROW:
        return f"{sign}{hours}" + (f":{minutes}" if minutes > 0 else "")
    return f"{sign}{pad_start(hours, 2)}{pad_start(minutes, 2)}"


# =============================================================================
# ZONE
# =============================================================================


class Zone:
    """Абстрактная временная зона."""

    @property
    def type(self) -> ZoneType:
        raise ZoneIsAbstractError()

    @property
    def name(self) -> Optional[str]:
        raise ZoneIsAbstractError()

    @property
    def iana_name(self) -> Optional[str]:
        """IANA-идентификатор зоны (для внешнего сервиса форматирования)."""
        return self.name

    @property
    def is_universal(self) -> bool:
        """True, если смещение не зависит от момента."""
        raise ZoneIsAbstractError()

    @property
    def is_valid(self) -> bool:
        raise ZoneIsAbstractError()

    def offset_name(
        self, ts: int, format: str = "short", locale: Optional[str] = None
    ) -> Optional[str]:
        """Человекочитаемое имя смещения в момент ts."""
        raise ZoneIsAbstractError()

    def format_offset(self, ts: int, fmt: str = "short") -> str:
        """Смещение в момент ts как строка (narrow/short/techie)."""
        return format_offset(self.offset(ts), fmt)

    def offset(self, ts: int) -> float:
        """Смещение в минутах в момент ts (epoch ms)."""
        raise ZoneIsAbstractError()

    def equals(self, other: object) -> bool:
        raise ZoneIsAbstractError()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Zone):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.type, self.name))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def offset_is_nan(offset: float) -> bool:
    return isinstance(offset, float) and math.isnan(offset)
