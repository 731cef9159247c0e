"""
Locale — языковой тег + система счисления + календарь вывода + недели

Locale — значение с привязанными кэшированными сервисами:
- Таблицы имён (месяцы, дни недели, эры, AM/PM): встроенные английские в
  режиме "en", иначе из Babel (CLDR) с кэшем по (длина, контекст)
- Форматтеры чисел (цифры системы счисления), относительного времени,
  списков и единиц
- Выбор LDML-шаблона по опциям (скелетоны CLDR)
- Недельные настройки (первый день, минимум дней, выходные)

Разрешение: явные аргументы → Settings → локаль хоста → en-US.
Экземпляры кэшируются в CacheRegistry по (тег, система, календарь, недели).
"""

from typing import Any, Callable, Final, Literal, Mapping, Optional, Sequence, Union

import structlog
from babel import Locale as BabelLocale
from babel import UnknownLocaleError, default_locale
from babel.core import get_global
from babel.dates import (
    format_timedelta,
    get_period_names,
    match_skeleton,
    tokenize_pattern,
    untokenize_pattern,
)
from babel.lists import format_list
from babel.units import format_unit

from civilclock.core.domain.records import ISO_WEEK_SETTINGS, WeekSettings
from civilclock.core.math.numerical_safeguards import format_number, normalize_number, pad_start
from civilclock.locale import digits, english
from civilclock.locale.presets import FormatOptions
from civilclock.settings import CacheRegistry, Settings

logger = structlog.get_logger(__name__)

FALLBACK_TAG: Final[str] = "en-US"

# Ширина имён: наша → CLDR
_TEXT_WIDTHS: Final[dict[str, str]] = {
    "narrow": "narrow",
    "short": "abbreviated",
    "long": "wide",
}

# Единицы относительного времени → единицы format_timedelta
_TIMEDELTA_UNITS: Final[dict[str, tuple[str, int]]] = {
    "years": ("year", 1),
    "quarters": ("month", 3),
    "months": ("month", 1),
    "weeks": ("week", 1),
    "days": ("day", 1),
    "hours": ("hour", 1),
    "minutes": ("minute", 1),
    "seconds": ("second", 1),
}

_TIMEDELTA_SECONDS: Final[dict[str, int]] = {
    "year": 3600 * 24 * 365,
    "month": 3600 * 24 * 30,
    "week": 3600 * 24 * 7,
    "day": 3600 * 24,
    "hour": 3600,
    "minute": 60,
    "second": 1,
}


# =============================================================================
# ТЕГИ И BABEL
# =============================================================================


def parse_locale_string(tag: str) -> tuple[str, Optional[str], Optional[str]]:
    """
    Разбор тега: (базовый тег, система счисления, календарь).

    Часть "-x-" отбрасывается; расширение "-u-" разбирается на ключи nu/ca.

    Examples:
        >>> parse_locale_string("th-TH-u-nu-thai-ca-buddhist")
        ('th-TH', 'thai', 'buddhist')
        >>> parse_locale_string("en-US-x-twain")
        ('en-US', None, None)
    """
    tag = tag.replace("_", "-")
    x_index = tag.find("-x-")
    if x_index != -1:
        tag = tag[:x_index]

    u_index = tag.find("-u-")
    if u_index == -1:
        return tag, None, None

    base = tag[:u_index]
    keywords: dict[str, list[str]] = {}
    current: Optional[str] = None
    for subtag in tag[u_index + 3 :].split("-"):
        if len(subtag) == 2:
            current = subtag.lower()
            keywords[current] = []
        elif current is not None:
            keywords[current].append(subtag.lower())

    numbering = "-".join(keywords["nu"]) if keywords.get("nu") else None
    calendar = "-".join(keywords["ca"]) if keywords.get("ca") else None
    return base, numbering, calendar


def intl_config_string(
    tag: str, numbering_system: Optional[str], output_calendar: Optional[str]
) -> str:
    """Полный тег с расширением -u- (ключ кэшей форматтеров)."""
    if not numbering_system and not output_calendar:
        return tag
    parts = [tag, "u"]
    if output_calendar:
        parts += ["ca", output_calendar]
    if numbering_system:
        parts += ["nu", numbering_system]
    return "-".join(parts)


def system_locale() -> str:
    """Локаль хоста (LANG/LC_ALL/...) в виде BCP-47 тега, иначе en-US."""
    identifier = default_locale("LC_TIME")
    if not identifier or identifier.startswith("en_US_POSIX"):
        return FALLBACK_TAG
    return identifier.replace("_", "-")


def babel_locale(tag: Optional[str], registry: Optional[CacheRegistry] = None) -> BabelLocale:
    """
    Babel Locale для тега (кэшируется).

    Неизвестный тег → en_US с предупреждением в лог.
    """
    registry = registry or Settings.registry
    base = parse_locale_string(tag or FALLBACK_TAG)[0]

    def build() -> BabelLocale:
        try:
            return BabelLocale.parse(base, sep="-")
        except (UnknownLocaleError, ValueError) as e:
            logger.warning("unknown_locale_tag", tag=base, error=str(e), fallback=FALLBACK_TAG)
            return BabelLocale.parse(FALLBACK_TAG, sep="-")

    return registry.get_or_create("babel_locales", base, build)


# =============================================================================
# ФОРМАТТЕРЫ
# =============================================================================


class NumberFormatter:
    """Рендеринг целых чисел с дополнением нулями в цифрах системы счисления."""

    def __init__(self, numbering_system: Optional[str], pad_to: int = 0, floor: bool = False):
        self.numbering_system = numbering_system
        self.pad_to = pad_to
        self.floor = floor

    def format(self, value: float) -> str:
        if self.floor:
            value = int(value // 1)
        if self.pad_to > 0:
            rendered = pad_start(value, self.pad_to)
        else:
            rendered = format_number(value)
        return digits.transliterate(rendered, self.numbering_system)


class RelativeTimeFormatter:
    """
    Относительное время ("in 3 days", "2 hours ago").

    Режим "en" — встроенная английская таблица (поддерживает numeric="auto");
    иначе — Babel format_timedelta.
    """

    def __init__(
        self,
        locale: "Locale",
        style: Literal["long", "short", "narrow"] = "long",
        numeric: Literal["always", "auto"] = "always",
    ):
        self.locale = locale
        self.style = style
        self.numeric = numeric

    def format(self, count: float, unit: str) -> str:
        if self.locale.is_english():
            return english.format_relative_time(unit, count, self.numeric, self.style != "long")

        timedelta_unit, factor = _TIMEDELTA_UNITS[unit]
        seconds = count * factor * _TIMEDELTA_SECONDS[timedelta_unit]
        rendered = format_timedelta(
            seconds,
            granularity=timedelta_unit,
            threshold=float("inf"),
            add_direction=True,
            format=self.style,
            locale=self.locale.babel,
        )
        return digits.transliterate(rendered, self.locale.numbering_system)


# =============================================================================
# LOCALE
# =============================================================================


class Locale:
    """Локаль с кэшированными таблицами имён и форматтерами."""

    def __init__(
        self,
        locale: str,
        numbering_system: Optional[str],
        output_calendar: Optional[str],
        week_settings: Optional[WeekSettings],
        specified_locale: Optional[str],
        registry: Optional[CacheRegistry] = None,
    ):
        parsed_locale, parsed_numbering, parsed_calendar = parse_locale_string(locale)
        self.locale = parsed_locale
        self.numbering_system = numbering_system or parsed_numbering or None
        self.output_calendar = output_calendar or parsed_calendar or None
        self.week_settings = week_settings
        self.intl = intl_config_string(self.locale, self.numbering_system, self.output_calendar)
        self.specified_locale = specified_locale
        self._registry = registry

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        output_calendar: Optional[str] = None,
        week_settings: Union[WeekSettings, Mapping[str, Any], None] = None,
        default_to_en: bool = False,
        registry: Optional[CacheRegistry] = None,
    ) -> "Locale":
        """
        Локаль с учётом значений Settings по умолчанию.

        Args:
            locale: Тег ("fr", "en-GB", "th-TH-u-nu-thai")
            numbering_system: Система счисления (latn, arab, ...)
            output_calendar: Календарь вывода (gregory, ...)
            week_settings: Недельные настройки (перекрывают данные локали)
            default_to_en: При отсутствии тега — en-US вместо локали хоста
            registry: Контекст кэшей (по умолчанию Settings.registry)
        """
        specified_locale = locale or Settings.default_locale
        locale_r = specified_locale or (FALLBACK_TAG if default_to_en else system_locale())
        numbering_r = numbering_system or Settings.default_numbering_system
        calendar_r = output_calendar or Settings.default_output_calendar
        week_settings_r = _validate_week_settings(week_settings) or Settings.default_week_settings
        return cls.from_opts(
            locale_r, numbering_r, calendar_r, week_settings_r, specified_locale, registry
        )

    @classmethod
    def from_opts(
        cls,
        locale: str,
        numbering_system: Optional[str] = None,
        output_calendar: Optional[str] = None,
        week_settings: Optional[WeekSettings] = None,
        specified_locale: Optional[str] = None,
        registry: Optional[CacheRegistry] = None,
    ) -> "Locale":
        """Локаль из готовых опций (кэшируется по опциям)."""
        registry = registry or Settings.registry
        key = (locale, numbering_system, output_calendar, week_settings, specified_locale)
        return registry.get_or_create(
            "locales",
            key,
            lambda: cls(
                locale, numbering_system, output_calendar, week_settings, specified_locale, registry
            ),
        )

    @classmethod
    def from_object(cls, opts: Optional[Mapping[str, Any]] = None) -> "Locale":
        opts = opts or {}
        return cls.create(
            opts.get("locale"),
            opts.get("numbering_system"),
            opts.get("output_calendar"),
            opts.get("week_settings"),
            opts.get("default_to_en", False),
        )

    def clone(self, **alts: Any) -> "Locale":
        """Копия с изменёнными опциями (без опций — self)."""
        if not alts:
            return self
        return Locale.create(
            alts.get("locale") or self.specified_locale,
            alts.get("numbering_system") or self.numbering_system,
            alts.get("output_calendar") or self.output_calendar,
            _validate_week_settings(alts.get("week_settings")) or self.week_settings,
            alts.get("default_to_en", False),
            self._registry,
        )

    def redefault_to_en(self, **alts: Any) -> "Locale":
        return self.clone(**alts, default_to_en=True)

    # -------------------------------------------------------------------------
    # Классификация
    # -------------------------------------------------------------------------

    @property
    def registry(self) -> CacheRegistry:
        return self._registry or Settings.registry

    @property
    def babel(self) -> BabelLocale:
        return babel_locale(self.locale, self.registry)

    def is_english(self) -> bool:
        """en / en-US (в любом написании)."""
        if self.locale.lower() in ("en", "en-us"):
            return True
        resolved = self.babel
        return resolved.language == "en" and resolved.territory == "US" and not resolved.script

    def listing_mode(self) -> Literal["en", "intl"]:
        """
        "en" — встроенные английские таблицы, "intl" — данные CLDR.

        "en" требует английскую локаль, латинские цифры и григорианский календарь.
        """
        has_no_weirdness = self.numbering_system in (None, "latn") and self.output_calendar in (
            None,
            "gregory",
        )
        return "en" if self.is_english() and has_no_weirdness else "intl"

    @property
    def fast_numbers(self) -> bool:
        return self.numbering_system in (None, "latn") or not digits.is_supported(
            self.numbering_system
        )

    # -------------------------------------------------------------------------
    # Таблицы имён
    # -------------------------------------------------------------------------

    def _names(self, kind: str, length: str, context: str, build: Callable[[], tuple[str, ...]]):
        return self.registry.get_or_create("locale_names", (self.intl, kind, length, context), build)

    def months(self, length: str, format_context: bool = False) -> tuple[str, ...]:
        """Имена месяцев (январь первым)."""
        if self.listing_mode() == "en" or length in ("numeric", "2-digit"):
            return english.months(length)
        context = "format" if format_context else "stand-alone"

        def build() -> tuple[str, ...]:
            table = self.babel.months[context][_TEXT_WIDTHS[length]]
            return tuple(table[m] for m in range(1, 13))

        return self._names("months", length, context, build)

    def weekdays(self, length: str, format_context: bool = False) -> tuple[str, ...]:
        """Имена дней недели (понедельник первым)."""
        if self.listing_mode() == "en" or length == "numeric":
            return english.weekdays(length)
        context = "format" if format_context else "stand-alone"

        def build() -> tuple[str, ...]:
            table = self.babel.days[context][_TEXT_WIDTHS[length]]
            return tuple(table[d] for d in range(7))

        return self._names("weekdays", length, context, build)

    def meridiems(self) -> tuple[str, ...]:
        """AM/PM."""
        if self.listing_mode() == "en":
            return english.MERIDIEMS

        def build() -> tuple[str, ...]:
            names = get_period_names(width="abbreviated", context="format", locale=self.babel)
            return (names["am"], names["pm"])

        return self._names("meridiems", "abbreviated", "format", build)

    def eras(self, length: str) -> tuple[str, ...]:
        """Эры (до н.э., н.э.)."""
        if self.listing_mode() == "en":
            return english.eras(length)

        def build() -> tuple[str, ...]:
            table = self.babel.eras[_TEXT_WIDTHS[length]]
            return (table[0], table[1])

        return self._names("eras", length, "format", build)

    # -------------------------------------------------------------------------
    # Форматтеры
    # -------------------------------------------------------------------------

    def number_formatter(
        self, pad_to: int = 0, floor: bool = False, force_simple: bool = False
    ) -> NumberFormatter:
        numbering = None if force_simple or self.fast_numbers else self.numbering_system
        return NumberFormatter(numbering, pad_to, floor)

    def rel_formatter(
        self,
        style: Literal["long", "short", "narrow"] = "long",
        numeric: Literal["always", "auto"] = "always",
    ) -> RelativeTimeFormatter:
        return RelativeTimeFormatter(self, style, numeric)

    def list_format(self, items: Sequence[str], style: str = "standard") -> str:
        """Список по правилам локали ("1 day, 5 hours")."""
        return format_list(list(items), style=style, locale=self.babel)

    def unit_format(
        self, value: float, unit: str, display: Literal["long", "short", "narrow"] = "long"
    ) -> str:
        """
        Значение с единицей Duration ("3 hours", "1 day").

        Args:
            value: Значение
            unit: Единица Duration во множественном числе ("hours")
            display: Ширина имени единицы
        """
        singular = unit[:-1] if unit.endswith("s") else unit
        rendered = format_unit(
            normalize_number(value), f"duration-{singular}", length=display, locale=self.babel
        )
        return digits.transliterate(rendered, self.numbering_system)

    # -------------------------------------------------------------------------
    # LDML-шаблоны
    # -------------------------------------------------------------------------

    def hour_char(self, hour_cycle: Optional[str] = None) -> str:
        """Символ часа LDML для цикла часов или предпочтения локали."""
        if hour_cycle is not None:
            return {"h11": "K", "h12": "h", "h23": "H", "h24": "k"}[hour_cycle]
        pattern = self.babel.time_formats["short"].pattern
        for char in pattern:
            if char in "hHkK":
                return char
        return "H"

    def pattern_for(self, options: FormatOptions) -> str:
        """
        LDML-шаблон локали для набора опций.

        Дата и время подбираются отдельно по скелетонам CLDR, ширина
        текстовых полей подгоняется под запрошенную, затем части
        соединяются шаблоном datetime_formats локали.
        """
        return self.registry.get_or_create(
            "patterns", (self.intl, options), lambda: self._build_pattern(options)
        )

    def _build_pattern(self, options: FormatOptions) -> str:
        date_skeleton = _date_skeleton(options)
        time_skeleton = _time_skeleton(options, self.hour_char(options.hour_cycle))

        date_pattern = self._match(date_skeleton, "date") if date_skeleton else ""
        time_pattern = self._match(time_skeleton, "time") if time_skeleton else ""

        if date_pattern and time_pattern:
            glue = self.babel.datetime_formats[_date_width(options)]
            glue = getattr(glue, "pattern", glue)
            return glue.replace("{1}", date_pattern).replace("{0}", time_pattern)
        return date_pattern or time_pattern

    def _match(self, skeleton: str, part: str) -> str:
        skeletons = self.babel.datetime_skeletons
        best = skeleton if skeleton in skeletons else match_skeleton(skeleton, skeletons)
        if best is None:
            best = match_skeleton(skeleton, skeletons, allow_different_fields=True)
        if best is None:
            fallback = self.babel.date_formats if part == "date" else self.babel.time_formats
            return fallback["medium"].pattern
        return _adjust_widths(skeletons[best].pattern, skeleton)

    # -------------------------------------------------------------------------
    # Недели
    # -------------------------------------------------------------------------

    def get_week_settings(self) -> WeekSettings:
        """Недельные настройки: явные → CLDR → ISO (с предупреждением)."""
        if self.week_settings is not None:
            return self.week_settings
        return self.registry.get_or_create("week_info", self.locale, self._lookup_week_settings)

    def _lookup_week_settings(self) -> WeekSettings:
        try:
            resolved = BabelLocale.parse(self.locale, sep="-")
            if resolved.territory is None:
                # недельные данные привязаны к территории: "de" -> "de_Latn_DE"
                likely = get_global("likely_subtags").get(resolved.language)
                if likely:
                    resolved = BabelLocale.parse(likely)
        except (UnknownLocaleError, ValueError) as e:
            logger.warning(
                "week_info_fallback", locale=self.locale, error=str(e), fallback="ISO"
            )
            return ISO_WEEK_SETTINGS
        weekend = []
        day = resolved.weekend_start
        while True:
            weekend.append(day + 1)
            if day == resolved.weekend_end:
                break
            day = (day + 1) % 7
        return WeekSettings(
            first_day=resolved.first_week_day + 1,
            minimal_days=resolved.min_week_days,
            weekend=tuple(weekend),
        )

    def get_start_of_week(self) -> int:
        return self.get_week_settings().first_day

    def get_min_days_in_first_week(self) -> int:
        return self.get_week_settings().minimal_days

    def get_weekend_days(self) -> tuple[int, ...]:
        return self.get_week_settings().weekend

    # -------------------------------------------------------------------------
    # Сравнение
    # -------------------------------------------------------------------------

    def equals(self, other: object) -> bool:
        return (
            isinstance(other, Locale)
            and self.locale == other.locale
            and self.numbering_system == other.numbering_system
            and self.output_calendar == other.output_calendar
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locale):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.locale, self.numbering_system, self.output_calendar))

    def __repr__(self) -> str:
        return f"Locale({self.intl!r})"


# =============================================================================
# HELPERS
# =============================================================================


def _validate_week_settings(
    week_settings: Union[WeekSettings, Mapping[str, Any], None],
) -> Optional[WeekSettings]:
    if week_settings is None or isinstance(week_settings, WeekSettings):
        return week_settings
    return WeekSettings.model_validate(dict(week_settings))


_NUMERIC_WIDTH: Final[dict[Optional[str], int]] = {"numeric": 1, "2-digit": 2}
_TEXT_WIDTH: Final[dict[Optional[str], int]] = {"short": 3, "long": 4, "narrow": 5}


def _date_skeleton(options: FormatOptions) -> str:
    parts = []
    if options.era:
        parts.append("G" * _TEXT_WIDTH[options.era])
    if options.year:
        parts.append("y" * _NUMERIC_WIDTH[options.year])
    if options.month:
        width = _NUMERIC_WIDTH.get(options.month) or _TEXT_WIDTH[options.month]
        parts.append("M" * width)
    if options.weekday:
        parts.append("E" * _TEXT_WIDTH[options.weekday])
    if options.day:
        parts.append("d" * _NUMERIC_WIDTH[options.day])
    return "".join(parts)


def _time_skeleton(options: FormatOptions, hour_char: str) -> str:
    parts = []
    if options.hour:
        parts.append(hour_char * _NUMERIC_WIDTH[options.hour])
    if options.minute:
        parts.append("m" * _NUMERIC_WIDTH[options.minute])
    if options.second:
        parts.append("s" * _NUMERIC_WIDTH[options.second])
    if options.time_zone_name:
        parts.append("z" if options.time_zone_name == "short" else "zzzz")
    return "".join(parts)


def _date_width(options: FormatOptions) -> str:
    if options.month == "long":
        return "full" if options.weekday == "long" else "long"
    if options.month in ("short", "narrow"):
        return "medium"
    return "short"


def _adjust_widths(pattern: str, skeleton: str) -> str:
    """
    Подгонка ширины полей найденного шаблона под запрошенный скелетон.

    Текстовые поля (месяц-имя, день недели, эра, зона) берут запрошенную
    ширину; числовые поля не сужаются. Поле "v" заменяется запрошенным "z".
    """
    requested: dict[str, int] = {}
    for kind, value in tokenize_pattern(skeleton):
        if kind == "field":
            char, width = value
            requested[char] = width

    adjusted = []
    for kind, value in tokenize_pattern(pattern):
        if kind != "field":
            adjusted.append((kind, value))
            continue
        char, width = value
        if char == "v" and "z" in requested:
            char, width = "z", requested["z"]
        elif char in ("M", "L") and "M" in requested:
            wanted = requested["M"]
            # Число ↔ имя: берём запрошенную форму
            width = wanted if wanted >= 3 or width >= 3 else max(width, wanted)
        elif char in ("E", "c", "G", "z") and char in requested:
            width = requested[char]
        elif char in requested:
            width = max(width, requested[char])
        adjusted.append((kind, (char, width)))
    return untokenize_pattern(adjusted)
