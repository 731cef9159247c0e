"""
Presets — наборы опций локального форматирования

FormatOptions описывает, какие поля показать и в какой ширине
(в духе Intl-опций: year/month/day/weekday/hour/minute/second/era/
time_zone_name/hour_cycle). Пресеты DATE_*/TIME_*/DATETIME_* и
макро-токены D/DD/.../FFFF ссылаются на них.
"""

from typing import Final, Literal, Optional

from pydantic import BaseModel, Field

Numeric = Literal["numeric", "2-digit"]
Text = Literal["narrow", "short", "long"]


# =============================================================================
# FORMAT OPTIONS
# =============================================================================


class FormatOptions(BaseModel):
    """Опции локального форматирования (неуказанное поле не выводится)."""

    era: Optional[Text] = Field(None, description="Эра")
    year: Optional[Numeric] = Field(None, description="Год")
    month: Optional[Literal["numeric", "2-digit", "narrow", "short", "long"]] = Field(
        None, description="Месяц (число или имя)"
    )
    day: Optional[Numeric] = Field(None, description="День месяца")
    weekday: Optional[Text] = Field(None, description="День недели")
    hour: Optional[Numeric] = Field(None, description="Час")
    minute: Optional[Numeric] = Field(None, description="Минута")
    second: Optional[Numeric] = Field(None, description="Секунда")
    time_zone_name: Optional[Literal["short", "long"]] = Field(
        None, description="Имя зоны/смещения"
    )
    hour_cycle: Optional[Literal["h11", "h12", "h23", "h24"]] = Field(
        None, description="Цикл часов (по умолчанию — предпочтение локали)"
    )

    model_config = {"frozen": True}

    @property
    def has_date(self) -> bool:
        return any(v is not None for v in (self.era, self.year, self.month, self.day, self.weekday))

    @property
    def has_time(self) -> bool:
        return any(v is not None for v in (self.hour, self.minute, self.second))


# =============================================================================
# ПРЕСЕТЫ
# =============================================================================

DATE_SHORT: Final = FormatOptions(year="numeric", month="numeric", day="numeric")
DATE_MED: Final = FormatOptions(year="numeric", month="short", day="numeric")
DATE_MED_WITH_WEEKDAY: Final = FormatOptions(
    year="numeric", month="short", day="numeric", weekday="short"
)
DATE_FULL: Final = FormatOptions(year="numeric", month="long", day="numeric")
DATE_HUGE: Final = FormatOptions(year="numeric", month="long", day="numeric", weekday="long")

TIME_SIMPLE: Final = FormatOptions(hour="numeric", minute="numeric")
TIME_WITH_SECONDS: Final = FormatOptions(hour="numeric", minute="numeric", second="numeric")
TIME_WITH_SHORT_OFFSET: Final = FormatOptions(
    hour="numeric", minute="numeric", second="numeric", time_zone_name="short"
)
TIME_WITH_LONG_OFFSET: Final = FormatOptions(
    hour="numeric", minute="numeric", second="numeric", time_zone_name="long"
)
TIME_24_SIMPLE: Final = FormatOptions(hour="numeric", minute="numeric", hour_cycle="h23")
TIME_24_WITH_SECONDS: Final = FormatOptions(
    hour="numeric", minute="numeric", second="numeric", hour_cycle="h23"
)
TIME_24_WITH_SHORT_OFFSET: Final = FormatOptions(
    hour="numeric", minute="numeric", second="numeric", hour_cycle="h23", time_zone_name="short"
)
TIME_24_WITH_LONG_OFFSET: Final = FormatOptions(
    hour="numeric", minute="numeric", second="numeric", hour_cycle="h23", time_zone_name="long"
)

DATETIME_SHORT: Final = FormatOptions(
    year="numeric", month="numeric", day="numeric", hour="numeric", minute="numeric"
)
DATETIME_SHORT_WITH_SECONDS: Final = FormatOptions(
    year="numeric",
    month="numeric",
    day="numeric",
    hour="numeric",
    minute="numeric",
    second="numeric",
)
DATETIME_MED: Final = FormatOptions(
    year="numeric", month="short", day="numeric", hour="numeric", minute="numeric"
)
DATETIME_MED_WITH_SECONDS: Final = FormatOptions(
    year="numeric",
    month="short",
    day="numeric",
    hour="numeric",
    minute="numeric",
    second="numeric",
)
DATETIME_MED_WITH_WEEKDAY: Final = FormatOptions(
    year="numeric",
    month="short",
    day="numeric",
    weekday="short",
    hour="numeric",
    minute="numeric",
)
DATETIME_FULL: Final = FormatOptions(
    year="numeric",
    month="long",
    day="numeric",
    hour="numeric",
    minute="numeric",
    time_zone_name="short",
)
DATETIME_FULL_WITH_SECONDS: Final = FormatOptions(
    year="numeric",
    month="long",
    day="numeric",
    hour="numeric",
    minute="numeric",
    second="numeric",
    time_zone_name="short",
)
DATETIME_HUGE: Final = FormatOptions(
    year="numeric",
    month="long",
    day="numeric",
    weekday="long",
    hour="numeric",
    minute="numeric",
    time_zone_name="long",
)
DATETIME_HUGE_WITH_SECONDS: Final = FormatOptions(
    year="numeric",
    month="long",
    day="numeric",
    weekday="long",
    hour="numeric",
    minute="numeric",
    second="numeric",
    time_zone_name="long",
)

# Макро-токен формата → пресет
MACRO_TOKENS: Final[dict[str, FormatOptions]] = {
    "D": DATE_SHORT,
    "DD": DATE_MED,
    "DDD": DATE_FULL,
    "DDDD": DATE_HUGE,
    "t": TIME_SIMPLE,
    "tt": TIME_WITH_SECONDS,
    "ttt": TIME_WITH_SHORT_OFFSET,
    "tttt": TIME_WITH_LONG_OFFSET,
    "T": TIME_24_SIMPLE,
    "TT": TIME_24_WITH_SECONDS,
    "TTT": TIME_24_WITH_SHORT_OFFSET,
    "TTTT": TIME_24_WITH_LONG_OFFSET,
    "f": DATETIME_SHORT,
    "ff": DATETIME_MED,
    "fff": DATETIME_FULL,
    "ffff": DATETIME_HUGE,
    "F": DATETIME_SHORT_WITH_SECONDS,
    "FF": DATETIME_MED_WITH_SECONDS,
    "FFF": DATETIME_FULL_WITH_SECONDS,
    "FFFF": DATETIME_HUGE_WITH_SECONDS,
}
