"""
civilclock — календарный движок: моменты, длительности, интервалы

Instant   — момент времени в зоне с локалью
Duration  — величина в календарных единицах
Interval  — полуоткрытый интервал [start, end)
Info      — справочные запросы о локалях и зонах
Settings  — процессные настройки (часы, зона, локаль, кэши)
"""

from civilclock.core.errors import (
    CivilClockError,
    ConflictingSpecificationError,
    InvalidArgumentError,
    InvalidDateTimeError,
    InvalidDurationError,
    InvalidIntervalError,
    InvalidUnitError,
    ZoneIsAbstractError,
)
from civilclock.duration import Duration
from civilclock.info import Info
from civilclock.instant import Instant, InstantOptions
from civilclock.interval import Interval
from civilclock.locale.presets import (
    DATE_FULL,
    DATE_HUGE,
    DATE_MED,
    DATE_MED_WITH_WEEKDAY,
    DATE_SHORT,
    DATETIME_FULL,
    DATETIME_FULL_WITH_SECONDS,
    DATETIME_HUGE,
    DATETIME_HUGE_WITH_SECONDS,
    DATETIME_MED,
    DATETIME_MED_WITH_SECONDS,
    DATETIME_MED_WITH_WEEKDAY,
    DATETIME_SHORT,
    DATETIME_SHORT_WITH_SECONDS,
    TIME_24_SIMPLE,
    TIME_24_WITH_LONG_OFFSET,
    TIME_24_WITH_SECONDS,
    TIME_24_WITH_SHORT_OFFSET,
    TIME_SIMPLE,
    TIME_WITH_LONG_OFFSET,
    TIME_WITH_SECONDS,
    TIME_WITH_SHORT_OFFSET,
    FormatOptions,
)
from civilclock.settings import Settings, configure_logging
from civilclock.zones import FixedOffsetZone, IANAZone, InvalidZone, SystemZone, Zone

__version__ = "1.0.0"

__all__ = [
    "Instant",
    "InstantOptions",
    "Duration",
    "Interval",
    "Info",
    "Settings",
    "configure_logging",
    "Zone",
    "FixedOffsetZone",
    "IANAZone",
    "InvalidZone",
    "SystemZone",
    "FormatOptions",
    "DATE_SHORT",
    "DATE_MED",
    "DATE_MED_WITH_WEEKDAY",
    "DATE_FULL",
    "DATE_HUGE",
    "TIME_SIMPLE",
    "TIME_WITH_SECONDS",
    "TIME_WITH_SHORT_OFFSET",
    "TIME_WITH_LONG_OFFSET",
    "TIME_24_SIMPLE",
    "TIME_24_WITH_SECONDS",
    "TIME_24_WITH_SHORT_OFFSET",
    "TIME_24_WITH_LONG_OFFSET",
    "DATETIME_SHORT",
    "DATETIME_SHORT_WITH_SECONDS",
    "DATETIME_MED",
    "DATETIME_MED_WITH_SECONDS",
    "DATETIME_MED_WITH_WEEKDAY",
    "DATETIME_FULL",
    "DATETIME_FULL_WITH_SECONDS",
    "DATETIME_HUGE",
    "DATETIME_HUGE_WITH_SECONDS",
    "CivilClockError",
    "InvalidDateTimeError",
    "InvalidIntervalError",
    "InvalidDurationError",
    "ConflictingSpecificationError",
    "InvalidUnitError",
    "InvalidArgumentError",
    "ZoneIsAbstractError",
]
