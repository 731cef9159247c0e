"""
Core math modules для civilclock

Чистые функции календарной арифметики и числовые примитивы.
"""

# Calendar Math
from civilclock.core.math.calendar_math import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    civil_from_days,
    compute_ordinal,
    days_from_civil,
    days_in_month,
    days_in_year,
    gregorian_to_ordinal,
    gregorian_to_week,
    has_invalid_gregorian_data,
    has_invalid_ordinal_data,
    has_invalid_time_data,
    has_invalid_week_data,
    is_leap_year,
    iso_weekday,
    obj_to_local_ts,
    ordinal_to_gregorian,
    signed_offset,
    ts_to_obj,
    uncompute_ordinal,
    untruncate_year,
    week_data_of,
    week_to_gregorian,
    weeks_in_week_year,
)

# Numerical Safeguards
from civilclock.core.math.numerical_safeguards import (
    floor_mod,
    format_number,
    integer_between,
    is_finite_number,
    is_integer,
    pad_start,
    parse_floating,
    parse_integer,
    parse_millis,
    round_to,
)

__all__ = [
    # Calendar Math — Constants
    "MS_PER_SECOND",
    "MS_PER_MINUTE",
    "MS_PER_HOUR",
    "MS_PER_DAY",
    # Calendar Math — Years and months
    "is_leap_year",
    "days_in_year",
    "days_in_month",
    "untruncate_year",
    # Calendar Math — Epoch conversion
    "days_from_civil",
    "civil_from_days",
    "iso_weekday",
    "obj_to_local_ts",
    "ts_to_obj",
    # Calendar Math — Ordinal and weeks
    "compute_ordinal",
    "uncompute_ordinal",
    "gregorian_to_ordinal",
    "ordinal_to_gregorian",
    "gregorian_to_week",
    "week_to_gregorian",
    "weeks_in_week_year",
    "week_data_of",
    # Calendar Math — Validation
    "has_invalid_gregorian_data",
    "has_invalid_ordinal_data",
    "has_invalid_week_data",
    "has_invalid_time_data",
    "signed_offset",
    # Numerical Safeguards
    "is_finite_number",
    "is_integer",
    "integer_between",
    "floor_mod",
    "round_to",
    "parse_integer",
    "parse_floating",
    "parse_millis",
    "pad_start",
    "format_number",
]
