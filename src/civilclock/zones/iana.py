"""
IANAZone — именованная зона базы IANA

Внешний сервис календаря — zoneinfo (+ дистрибутив tzdata):
1. Валидность имени: ZoneInfo(name) находит зону
2. Смещение: civil-поля момента в зоне, прочитанные как UTC, минус момент,
   усечённый до секунды
3. Имена смещений: Babel (metazone-имена CLDR)

Экземпляры (валидные и невалидные) кэшируются по имени в CacheRegistry.
"""

import math
import re
import zoneinfo
from datetime import datetime, timedelta, timezone
from typing import Final, Optional

import structlog
from babel.dates import get_timezone_name

from civilclock.core.math.calendar_math import MS_PER_MINUTE, obj_to_local_ts
from civilclock.core.math.numerical_safeguards import normalize_number
from civilclock.settings import CacheRegistry, Settings
from civilclock.zones.base import Zone, ZoneType

logger = structlog.get_logger(__name__)

# Границы, которые принимает datetime хоста (год 1 .. 9999, с запасом в сутки)
HOST_MIN_TS: Final[int] = int(datetime(1, 1, 2, tzinfo=timezone.utc).timestamp() * 1000)
HOST_MAX_TS: Final[int] = int(datetime(9999, 12, 30, tzinfo=timezone.utc).timestamp() * 1000)

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)

_SPECIFIER_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_+\-]+(?:/[A-Za-z0-9_+\-]+)*$")


def _lookup_zone_info(name: str) -> Optional[zoneinfo.ZoneInfo]:
    """ZoneInfo для имени (без учёта регистра) или None."""
    if not name or not _SPECIFIER_RE.match(name):
        return None
    try:
        return zoneinfo.ZoneInfo(name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        pass
    canonical = _canonical_names().get(name.lower())
    if canonical is None:
        return None
    return zoneinfo.ZoneInfo(canonical)


def _canonical_names() -> dict[str, str]:
    return Settings.registry.get_or_create(
        "zone_names",
        "all",
        lambda: {key.lower(): key for key in zoneinfo.available_timezones()},
    )


def clamp_host_ts(ts: float) -> int:
    """Момент, приведённый в диапазон datetime хоста."""
    return int(min(max(ts, HOST_MIN_TS), HOST_MAX_TS))


class IANAZone(Zone):
    """Зона базы IANA, смещение по правилам tzdata."""

    def __init__(self, name: str):
        self._zone_info = _lookup_zone_info(name)
        # Каноническое написание имени, если зона найдена
        self.zone_name = self._zone_info.key if self._zone_info is not None else name
        self.valid = self._zone_info is not None

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def create(cls, name: str, registry: Optional[CacheRegistry] = None) -> "IANAZone":
        """
        Зона по имени из кэша (валидная или невалидная).

        Args:
            name: IANA-имя ("America/New_York")
            registry: Контекст кэшей (по умолчанию Settings.registry)
        """
        registry = registry or Settings.registry

        def build() -> IANAZone:
            zone = cls(name)
            if not zone.is_valid:
                logger.debug("iana_zone_unknown", zone=name)
            return zone

        return registry.get_or_create("zones", name, build)

    @classmethod
    def reset_cache(cls) -> None:
        Settings.registry.reset("zones")

    @staticmethod
    def is_valid_specifier(specifier: str) -> bool:
        """Синтаксическая проверка имени (без обращения к tzdata)."""
        return bool(specifier) and _SPECIFIER_RE.match(specifier) is not None

    @staticmethod
    def is_valid_zone(name: str) -> bool:
        """True, если tzdata знает зону."""
        return _lookup_zone_info(name) is not None

    # -------------------------------------------------------------------------
    # Контракт Zone
    # -------------------------------------------------------------------------

    @property
    def type(self) -> ZoneType:
        return ZoneType.IANA

    @property
    def name(self) -> str:
        return self.zone_name

    @property
    def is_universal(self) -> bool:
        return False

    @property
    def is_valid(self) -> bool:
        return self.valid

    @property
    def zone_info(self) -> Optional[zoneinfo.ZoneInfo]:
        return self._zone_info

    def offset_name(
        self, ts: int, format: str = "short", locale: Optional[str] = None
    ) -> Optional[str]:
        """Имя смещения из CLDR ("EST", "Eastern Standard Time")."""
        if not self.valid:
            return None
        from civilclock.locale.locale import babel_locale

        moment = self.to_host_datetime(ts)
        return get_timezone_name(moment, width=format, locale=babel_locale(locale))

    def offset(self, ts: int) -> float:
        """
        Смещение в минутах в момент ts.

        Civil-поля из tzdata читаются как UTC; разница с моментом,
        усечённым до секунды, и есть смещение.
        """
        if not self.valid:
            return math.nan
        if isinstance(ts, float) and math.isnan(ts):
            return math.nan

        host_ts = clamp_host_ts(ts)
        whole_second_ts = host_ts - host_ts % 1000
        moment = self.to_host_datetime(whole_second_ts)
        as_utc = obj_to_local_ts(
            {
                "year": moment.year,
                "month": moment.month,
                "day": moment.day,
                "hour": moment.hour,
                "minute": moment.minute,
                "second": moment.second,
            }
        )
        return normalize_number((as_utc - whole_second_ts) / MS_PER_MINUTE)

    def to_host_datetime(self, ts: int) -> datetime:
        """Момент как aware datetime в этой зоне."""
        host_ts = clamp_host_ts(ts)
        return (_EPOCH + timedelta(milliseconds=host_ts)).astimezone(self._zone_info)

    def equals(self, other: object) -> bool:
        return isinstance(other, IANAZone) and other.name == self.name
