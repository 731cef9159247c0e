"""
InvalidZone — маркер неподдерживаемой зоны

Все операции деградируют: смещение NaN, имена None, is_valid=False.
Instant в такой зоне становится невалидным ("unsupported zone").
"""

import math
from typing import Optional

from civilclock.zones.base import Zone, ZoneType


class InvalidZone(Zone):
    """Зона, которую не удалось распознать."""

    def __init__(self, zone_name: str):
        self.zone_name = zone_name

    @property
    def type(self) -> ZoneType:
        return ZoneType.INVALID

    @property
    def name(self) -> str:
        return self.zone_name

    @property
    def iana_name(self) -> Optional[str]:
        return None

    @property
    def is_universal(self) -> bool:
        return False

    @property
    def is_valid(self) -> bool:
        return False

    def offset_name(self, ts: int, format: str = "short", locale: Optional[str] = None) -> None:
        return None

    def format_offset(self, ts: int, fmt: str = "short") -> str:
        return ""

    def offset(self, ts: int) -> float:
        return math.nan

    def equals(self, other: object) -> bool:
        return False

    def __hash__(self) -> int:
        return hash((ZoneType.INVALID, self.zone_name))
