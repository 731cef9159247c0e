"""
Formatting: токены формата, рендеринг, разбор по токенам и фиксированным
форматам (ISO-8601, RFC-2822, HTTP, SQL).

diff и relative импортируются напрямую (зависят от Duration).
"""

from civilclock.formatting.formatter import Formatter
from civilclock.formatting.regex_parser import (
    parse_http_date,
    parse_iso_date,
    parse_iso_duration,
    parse_iso_time_only,
    parse_rfc2822_date,
    parse_sql,
)
from civilclock.formatting.token_parser import (
    TokenExplanation,
    explain_from_tokens,
    parse_from_tokens,
)
from civilclock.formatting.tokens import FormatToken, parse_format

__all__ = [
    "Formatter",
    "FormatToken",
    "parse_format",
    "TokenExplanation",
    "explain_from_tokens",
    "parse_from_tokens",
    "parse_iso_date",
    "parse_rfc2822_date",
    "parse_http_date",
    "parse_sql",
    "parse_iso_duration",
    "parse_iso_time_only",
]
