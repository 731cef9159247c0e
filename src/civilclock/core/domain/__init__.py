"""
Domain records and unit tables.

Contains immutable value records (CivilFields, WeekData, WeekSettings, Invalid)
and the unit tables / conversion matrices.
"""

from civilclock.core.domain.records import (
    ISO_WEEK_SETTINGS,
    CivilFields,
    Invalid,
    WeekData,
    WeekSettings,
)
from civilclock.core.domain.units import (
    ACCURATE_MATRIX,
    CASUAL_MATRIX,
    ORDERED_DURATION_UNITS,
    ORDERED_UNITS,
    ConversionAccuracy,
    matrix_for,
    normalize_duration_unit,
    normalize_instant_unit,
)

__all__ = [
    # Records
    "CivilFields",
    "WeekData",
    "WeekSettings",
    "ISO_WEEK_SETTINGS",
    "Invalid",
    # Units
    "ORDERED_UNITS",
    "ORDERED_DURATION_UNITS",
    "CASUAL_MATRIX",
    "ACCURATE_MATRIX",
    "ConversionAccuracy",
    "matrix_for",
    "normalize_instant_unit",
    "normalize_duration_unit",
]
