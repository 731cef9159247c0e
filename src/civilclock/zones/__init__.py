"""Временные зоны: контракт Zone и его варианты."""

from civilclock.zones.base import OffsetFormat, Zone, ZoneType, format_offset
from civilclock.zones.fixed import FixedOffsetZone
from civilclock.zones.iana import IANAZone
from civilclock.zones.invalid import InvalidZone
from civilclock.zones.normalize import ZoneInputKind, classify_zone_input, normalize_zone
from civilclock.zones.system import SystemZone

__all__ = [
    "Zone",
    "ZoneType",
    "OffsetFormat",
    "format_offset",
    "FixedOffsetZone",
    "IANAZone",
    "InvalidZone",
    "SystemZone",
    "ZoneInputKind",
    "classify_zone_input",
    "normalize_zone",
]
