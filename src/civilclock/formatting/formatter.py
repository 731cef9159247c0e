"""
Formatter — рендеринг Instant и Duration по строке формата

Три пути:
1. Токены формата ("yyyy-MM-dd HH:mm") → поля Instant, числа в цифрах
   системы счисления локали, имена из таблиц локали
2. Макро-токены и to_locale_string → LDML-шаблон локали, отрендеренный Babel
   (имена зон подставляются заранее как литералы)
3. Токены Duration ("hh:mm:ss") → значения после shift_to в единицы токенов

Годы вне диапазона datetime хоста (1..9999) рендерятся токенным путём по
тому же LDML-шаблону.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Final, Optional, Sequence

from babel.dates import format_datetime, tokenize_pattern, untokenize_pattern

from civilclock.core.math.numerical_safeguards import pad_start
from civilclock.formatting.tokens import (
    FormatToken,
    ldml_to_tokens,
    macro_token_to_format_opts,
    parse_format,
    stringify_tokens,
)
from civilclock.locale import digits
from civilclock.locale.locale import Locale
from civilclock.locale.presets import FormatOptions

if TYPE_CHECKING:
    from civilclock.duration import Duration
    from civilclock.instant import Instant

# Первая буква токена Duration → единица
_DURATION_TOKEN_UNITS: Final[dict[str, str]] = {
    "S": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
    "M": "months",
    "y": "years",
}


def _last_two_digits(value: int) -> int:
    """Последние две цифры года со знаком (как в "yy"/"kk")."""
    return int(str(value)[-2:])


class Formatter:
    """
    Рендеринг значений по токенам в контексте локали.

    Опции:
        force_simple: Латинские цифры без обращения к форматтеру локали
        allow_z: "Z" вместо +0 для токена Z при UTC
        floor: Усечение дробных значений (для Duration)
    """

    def __init__(self, locale: Locale, options: Optional[dict[str, Any]] = None):
        self.loc = locale
        self.opts = dict(options or {})

    @classmethod
    def create(cls, locale: Locale, **options: Any) -> "Formatter":
        return cls(locale, options)

    # -------------------------------------------------------------------------
    # Числа
    # -------------------------------------------------------------------------

    def num(self, value: float, pad_to: int = 0) -> str:
        if self.opts.get("force_simple"):
            return pad_start(value, pad_to)
        formatter = self.loc.number_formatter(pad_to=pad_to, floor=bool(self.opts.get("floor")))
        return formatter.format(value)

    # -------------------------------------------------------------------------
    # Instant
    # -------------------------------------------------------------------------

    def format_instant_from_string(self, instant: "Instant", fmt: str) -> str:
        return self.format_instant_from_tokens(instant, parse_format(fmt))

    def format_instant_from_tokens(self, instant: "Instant", tokens: Sequence[FormatToken]) -> str:
        """Рендеринг токенов для валидного Instant."""
        def format_offset(fmt: str, allow_z: bool = False) -> str:
            if instant.is_offset_fixed and instant.offset == 0 and allow_z:
                return "Z"
            return instant.zone.format_offset(instant.ts, fmt) if instant.is_valid else ""

        def meridiem() -> str:
            return self.loc.meridiems()[0 if instant.hour < 12 else 1]

        def month(length: str, standalone: bool) -> str:
            names = self.loc.months(length, format_context=not standalone)
            return names[instant.month - 1]

        def weekday(length: str, standalone: bool) -> str:
            names = self.loc.weekdays(length, format_context=not standalone)
            return names[instant.weekday - 1]

        def era(length: str) -> str:
            names = self.loc.eras(length)
            return names[0 if instant.year < 0 else 1]

        def maybe_macro(token: str) -> str:
            options = macro_token_to_format_opts(token)
            if options is not None:
                return self.format_with_system_default(instant, options)
            return token

        allow_z = bool(self.opts.get("allow_z"))
        renderers: dict[str, Callable[[], str]] = {
            # миллисекунды и доли секунды
            "S": lambda: self.num(instant.millisecond),
            "u": lambda: self.num(instant.millisecond, 3),
            "SSS": lambda: self.num(instant.millisecond, 3),
            "uu": lambda: self.num(instant.millisecond // 10, 2),
            "uuu": lambda: self.num(instant.millisecond // 100),
            # время
            "s": lambda: self.num(instant.second),
            "ss": lambda: self.num(instant.second, 2),
            "m": lambda: self.num(instant.minute),
            "mm": lambda: self.num(instant.minute, 2),
            "h": lambda: self.num(instant.hour % 12 or 12),
            "hh": lambda: self.num(instant.hour % 12 or 12, 2),
            "H": lambda: self.num(instant.hour),
            "HH": lambda: self.num(instant.hour, 2),
            # смещение и зона
            "Z": lambda: format_offset("narrow", allow_z),
            "ZZ": lambda: format_offset("short", allow_z),
            "ZZZ": lambda: format_offset("techie", allow_z),
            "ZZZZ": lambda: instant.zone.offset_name(instant.ts, "short", self.loc.locale) or "",
            "ZZZZZ": lambda: instant.zone.offset_name(instant.ts, "long", self.loc.locale) or "",
            "z": lambda: instant.zone_name or "",
            "a": meridiem,
            # дата
            "d": lambda: self.num(instant.day),
            "dd": lambda: self.num(instant.day, 2),
            "c": lambda: self.num(instant.weekday),
            "ccc": lambda: weekday("short", True),
            "cccc": lambda: weekday("long", True),
            "ccccc": lambda: weekday("narrow", True),
            "E": lambda: self.num(instant.weekday),
            "EEE": lambda: weekday("short", False),
            "EEEE": lambda: weekday("long", False),
            "EEEEE": lambda: weekday("narrow", False),
            "L": lambda: self.num(instant.month),
            "LL": lambda: self.num(instant.month, 2),
            "LLL": lambda: month("short", True),
            "LLLL": lambda: month("long", True),
            "LLLLL": lambda: month("narrow", True),
            "M": lambda: self.num(instant.month),
            "MM": lambda: self.num(instant.month, 2),
            "MMM": lambda: month("short", False),
            "MMMM": lambda: month("long", False),
            "MMMMM": lambda: month("narrow", False),
            "y": lambda: self.num(instant.year),
            "yy": lambda: self.num(_last_two_digits(instant.year), 2),
            "yyyy": lambda: self.num(instant.year, 4),
            "yyyyyy": lambda: self.num(instant.year, 6),
            "G": lambda: era("short"),
            "GG": lambda: era("long"),
            "GGGGG": lambda: era("narrow"),
            # недели
            "kk": lambda: self.num(_last_two_digits(instant.week_year), 2),
            "kkkk": lambda: self.num(instant.week_year, 4),
            "W": lambda: self.num(instant.week_number),
            "WW": lambda: self.num(instant.week_number, 2),
            "n": lambda: self.num(instant.local_week_number),
            "nn": lambda: self.num(instant.local_week_number, 2),
            "ii": lambda: self.num(_last_two_digits(instant.local_week_year), 2),
            "iiii": lambda: self.num(instant.local_week_year, 4),
            # день года, квартал, эпоха
            "o": lambda: self.num(instant.ordinal),
            "ooo": lambda: self.num(instant.ordinal, 3),
            "q": lambda: self.num(instant.quarter),
            "qq": lambda: self.num(instant.quarter, 2),
            "X": lambda: self.num(instant.ts // 1000),
            "x": lambda: self.num(instant.ts),
        }

        def render(token: str) -> str:
            renderer = renderers.get(token)
            if renderer is None:
                return maybe_macro(token)
            return renderer()

        return stringify_tokens(tokens, render)

    def format_with_system_default(self, instant: "Instant", options: FormatOptions) -> str:
        """
        Локализованная строка по опциям (макро-токены, to_locale_string).

        Шаблон подбирает локаль; рендеринг — Babel format_datetime над
        civil-полями. Имена зон и смещения подставляются литералами.
        """
        pattern = self.loc.pattern_for(options)
        if not 1 <= instant.year <= 9999:
            return self.format_instant_from_tokens(instant, ldml_to_tokens(pattern))

        moment = datetime(
            instant.year,
            instant.month,
            instant.day,
            instant.hour,
            instant.minute,
            instant.second,
            instant.millisecond * 1000,
        )
        rendered = format_datetime(
            moment, self._inline_zone_fields(pattern, instant), locale=self.loc.babel
        )
        return digits.transliterate(rendered, self.loc.numbering_system)

    def _inline_zone_fields(self, pattern: str, instant: "Instant") -> str:
        """Поля зоны/смещения LDML-шаблона → литералы с именем зоны Instant."""
        adjusted = []
        for kind, value in tokenize_pattern(pattern):
            if kind == "field" and value[0] in "zvVO":
                width = "long" if value[1] >= 4 else "short"
                name = instant.zone.offset_name(instant.ts, width, self.loc.locale)
                adjusted.append(("chars", name or ""))
            elif kind == "field" and value[0] in "ZxX":
                adjusted.append(("chars", instant.zone.format_offset(instant.ts, "short")))
            else:
                adjusted.append((kind, value))
        return untokenize_pattern(adjusted)

    # -------------------------------------------------------------------------
    # Duration
    # -------------------------------------------------------------------------

    def format_duration_from_string(self, duration: "Duration", fmt: str) -> str:
        """
        Рендеринг Duration по токенам.

        Duration сначала переводится в единицы, встречающиеся в формате;
        длина токена задаёт дополнение нулями.
        """
        tokens = parse_format(fmt)
        units = [
            _DURATION_TOKEN_UNITS[token.val[0]]
            for token in tokens
            if not token.literal and token.val[0] in _DURATION_TOKEN_UNITS
        ]
        collapsed = duration.shift_to(*units)

        def render(token: str) -> str:
            unit = _DURATION_TOKEN_UNITS.get(token[0])
            if unit is None:
                return token
            return self.num(collapsed.get(unit), len(token))

        return stringify_tokens(tokens, render)
