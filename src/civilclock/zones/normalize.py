"""
normalize_zone — приведение пользовательского значения к Zone

Вход классифицируется в закрытый набор видов (ZoneInputKind). Всё, что не
распознано, становится InvalidZone: Instant в такой зоне невалиден,
но конструктор не бросает исключение.
"""

import math
import zoneinfo
from datetime import timezone, tzinfo
from enum import Enum
from typing import Any

from civilclock.core.math.numerical_safeguards import normalize_number
from civilclock.zones.base import Zone
from civilclock.zones.fixed import FixedOffsetZone
from civilclock.zones.iana import IANAZone
from civilclock.zones.invalid import InvalidZone
from civilclock.zones.system import SystemZone


class ZoneInputKind(str, Enum):
    """Вид значения, переданного как зона"""

    MISSING = "missing"  # None → зона по умолчанию
    ZONE = "zone"  # готовый Zone
    STRING = "string"  # "local", "utc", "UTC+3", IANA-имя
    NUMBER = "number"  # смещение в минутах
    TZINFO = "tzinfo"  # datetime.tzinfo хоста
    UNSUPPORTED = "unsupported"


def classify_zone_input(value: Any) -> ZoneInputKind:
    if value is None:
        return ZoneInputKind.MISSING
    if isinstance(value, Zone):
        return ZoneInputKind.ZONE
    if isinstance(value, str):
        return ZoneInputKind.STRING
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return ZoneInputKind.NUMBER
    if isinstance(value, tzinfo):
        return ZoneInputKind.TZINFO
    return ZoneInputKind.UNSUPPORTED


def _from_string(value: str, default_zone: Zone) -> Zone:
    lowered = value.lower()
    if lowered == "default":
        return default_zone
    if lowered in ("local", "system"):
        return SystemZone.instance()
    if lowered in ("utc", "gmt"):
        return FixedOffsetZone.utc_instance()

    fixed = FixedOffsetZone.parse_specifier(lowered)
    if fixed is not None:
        return fixed
    zone = IANAZone.create(value)
    return zone if zone.is_valid else InvalidZone(value)


def _from_tzinfo(value: tzinfo) -> Zone:
    if isinstance(value, zoneinfo.ZoneInfo) and value.key:
        zone = IANAZone.create(value.key)
        return zone if zone.is_valid else InvalidZone(value.key)
    if isinstance(value, timezone):
        delta = value.utcoffset(None)
        return FixedOffsetZone.instance(normalize_number(delta.total_seconds() / 60))
    return InvalidZone(str(value))


def normalize_zone(value: Any, default_zone: Zone) -> Zone:
    """
    Значение → Zone.

    Args:
        value: None, Zone, строка, смещение в минутах или tzinfo
        default_zone: Зона для None и "default"

    Returns:
        Распознанная зона или InvalidZone

    Examples:
        >>> normalize_zone("UTC+3", SystemZone.instance()).name
        'UTC+3'
        >>> normalize_zone(-300, SystemZone.instance()).name
        'UTC-5'
    """
    kind = classify_zone_input(value)
    if kind is ZoneInputKind.MISSING:
        return default_zone
    if kind is ZoneInputKind.ZONE:
        return value
    if kind is ZoneInputKind.STRING:
        return _from_string(value, default_zone)
    if kind is ZoneInputKind.NUMBER:
        if math.isnan(value) or math.isinf(value):
            return InvalidZone(str(value))
        return FixedOffsetZone.instance(normalize_number(value))
    if kind is ZoneInputKind.TZINFO:
        return _from_tzinfo(value)
    return InvalidZone(str(value))
