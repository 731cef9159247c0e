"""
Локали: тег языка, система счисления, календарь вывода и недельные
настройки с кэшированными таблицами имён и форматтерами.
"""

from civilclock.locale.locale import (
    Locale,
    NumberFormatter,
    RelativeTimeFormatter,
    babel_locale,
    parse_locale_string,
    system_locale,
)
from civilclock.locale.presets import MACRO_TOKENS, FormatOptions

__all__ = [
    "Locale",
    "NumberFormatter",
    "RelativeTimeFormatter",
    "babel_locale",
    "parse_locale_string",
    "system_locale",
    "FormatOptions",
    "MACRO_TOKENS",
]
