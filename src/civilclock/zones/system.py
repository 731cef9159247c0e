"""
SystemZone — зона хоста

Смещение берётся из локального времени процесса (time.localtime через
datetime.astimezone). Имя определяется по переменной TZ, ссылке
/etc/localtime или аббревиатуре хоста.
"""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Final, Optional

from civilclock.core.math.numerical_safeguards import normalize_number
from civilclock.zones.base import Zone, ZoneType
from civilclock.zones.iana import IANAZone, clamp_host_ts

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)
_LOCALTIME_LINK: Final[Path] = Path("/etc/localtime")

_SYSTEM_INSTANCE: Optional["SystemZone"] = None


def _detect_zone_name() -> Optional[str]:
    """IANA-имя зоны хоста или None."""
    tz_env = os.environ.get("TZ", "").lstrip(":")
    if tz_env and IANAZone.is_valid_zone(tz_env):
        return IANAZone.create(tz_env).name

    if _LOCALTIME_LINK.is_symlink():
        target = str(_LOCALTIME_LINK.resolve())
        marker = "zoneinfo/"
        if marker in target:
            candidate = target.split(marker, 1)[1]
            if IANAZone.is_valid_zone(candidate):
                return IANAZone.create(candidate).name
    return None


class SystemZone(Zone):
    """Зона, в которой работает процесс."""

    @classmethod
    def instance(cls) -> "SystemZone":
        """Синглтон системной зоны."""
        global _SYSTEM_INSTANCE
        if _SYSTEM_INSTANCE is None:
            _SYSTEM_INSTANCE = cls()
        return _SYSTEM_INSTANCE

    @property
    def type(self) -> ZoneType:
        return ZoneType.SYSTEM

    @property
    def name(self) -> str:
        detected = _detect_zone_name()
        if detected is not None:
            return detected
        return self.to_host_datetime(0).tzname() or "UTC"

    @property
    def iana_name(self) -> Optional[str]:
        return _detect_zone_name()

    @property
    def is_universal(self) -> bool:
        return False

    @property
    def is_valid(self) -> bool:
        return True

    def offset_name(
        self, ts: int, format: str = "short", locale: Optional[str] = None
    ) -> Optional[str]:
        iana_name = self.iana_name
        if iana_name is not None:
            return IANAZone.create(iana_name).offset_name(ts, format, locale)
        return self.to_host_datetime(ts).tzname()

    def offset(self, ts: int) -> float:
        delta = self.to_host_datetime(ts).utcoffset()
        if delta is None:
            return 0
        return normalize_number(delta.total_seconds() / 60)

    def to_host_datetime(self, ts: int) -> datetime:
        """Момент как aware datetime в локальной зоне хоста."""
        return (_EPOCH + timedelta(milliseconds=clamp_host_ts(ts))).astimezone()

    def equals(self, other: object) -> bool:
        return isinstance(other, SystemZone)

    def __hash__(self) -> int:
        return hash(ZoneType.SYSTEM)
