"""
FixedOffsetZone — зона с постоянным смещением

UTC — мемоизированный синглтон instance(0). Спецификаторы вида
"UTC", "UTC+6", "utc-03:30" разбираются в экземпляр.
"""

import re
from typing import Final, Optional

from civilclock.core.math.calendar_math import signed_offset
from civilclock.zones.base import Zone, ZoneType, format_offset

_SPECIFIER_RE: Final[re.Pattern[str]] = re.compile(
    r"^utc(?:([+-]\d{1,2})(?::(\d{2}))?)?$", re.IGNORECASE
)

_UTC_INSTANCE: Optional["FixedOffsetZone"] = None


class FixedOffsetZone(Zone):
    """Зона с постоянным смещением в минутах."""

    def __init__(self, offset: float):
        self.fixed = offset

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def utc_instance(cls) -> "FixedOffsetZone":
        """Синглтон UTC."""
        global _UTC_INSTANCE
        if _UTC_INSTANCE is None:
            _UTC_INSTANCE = cls(0)
        return _UTC_INSTANCE

    @classmethod
    def instance(cls, offset: float) -> "FixedOffsetZone":
        """Зона для смещения (0 → синглтон UTC)."""
        return cls.utc_instance() if offset == 0 else cls(offset)

    @classmethod
    def parse_specifier(cls, specifier: str) -> Optional["FixedOffsetZone"]:
        """
        "UTC", "UTC+6", "UTC-3:30" → FixedOffsetZone; иначе None.

        Examples:
            >>> FixedOffsetZone.parse_specifier("UTC+6").fixed
            360
        """
        if not specifier:
            return None
        match = _SPECIFIER_RE.match(specifier)
        if match is None:
            return None
        if match.group(1) is None:
            return cls.utc_instance()
        return cls.instance(signed_offset(match.group(1), match.group(2)))

    # -------------------------------------------------------------------------
    # Контракт Zone
    # -------------------------------------------------------------------------

    @property
    def type(self) -> ZoneType:
        return ZoneType.FIXED

    @property
    def name(self) -> str:
        if self.fixed == 0:
            return "UTC"
        return f"UTC{format_offset(self.fixed, 'narrow')}"

    @property
    def iana_name(self) -> Optional[str]:
        """Etc/UTC для 0, Etc/GMT∓N для целых часов, иначе None."""
        if self.fixed == 0:
            return "Etc/UTC"
        if self.fixed % 60 == 0:
            # Знак Etc/GMT инвертирован: UTC+5 == Etc/GMT-5
            hours = int(-self.fixed // 60)
            return f"Etc/GMT{hours:+d}"
        return None

    @property
    def is_universal(self) -> bool:
        return True

    @property
    def is_valid(self) -> bool:
        return True

    def offset_name(self, ts: int, format: str = "short", locale: Optional[str] = None) -> str:
        return self.name

    def format_offset(self, ts: int, fmt: str = "short") -> str:
        return format_offset(self.fixed, fmt)

    def offset(self, ts: int) -> float:
        return self.fixed

    def equals(self, other: object) -> bool:
        return isinstance(other, FixedOffsetZone) and other.fixed == self.fixed
