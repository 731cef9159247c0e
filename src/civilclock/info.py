"""
Info — справочные запросы о локалях и зонах

Имена месяцев/дней недели/эр, недельные данные локали, наличие DST в зоне.
"""

from typing import Any, Optional

from civilclock.instant import Instant
from civilclock.locale.locale import Locale
from civilclock.settings import Settings
from civilclock.zones import IANAZone, Zone, normalize_zone


class Info:
    """Статические запросы к локалям и зонам."""

    @staticmethod
    def has_dst(zone: Any = None) -> bool:
        """
        Есть ли в зоне летнее время в текущем году.

        Сравниваются смещения в декабре и июне.
        """
        target = normalize_zone(zone, Settings.default_zone)
        if target.is_universal:
            return False
        proto = Instant.now().set_zone(target).set(month=12)
        return proto.offset != proto.set(month=6).offset

    @staticmethod
    def is_valid_iana_zone(name: str) -> bool:
        return IANAZone.is_valid_zone(name)

    @staticmethod
    def normalize_zone(value: Any) -> Zone:
        """Zone из строки, числа минут, tzinfo или Zone (None → зона по умолчанию)."""
        return normalize_zone(value, Settings.default_zone)

    # -------------------------------------------------------------------------
    # Недельные данные
    # -------------------------------------------------------------------------

    @staticmethod
    def get_start_of_week(locale: Optional[str] = None, loc: Optional[Locale] = None) -> int:
        """Первый день недели локали (1 = понедельник ... 7 = воскресенье)."""
        return (loc or Locale.create(locale)).get_start_of_week()

    @staticmethod
    def get_minimum_days_in_first_week(
        locale: Optional[str] = None, loc: Optional[Locale] = None
    ) -> int:
        return (loc or Locale.create(locale)).get_min_days_in_first_week()

    @staticmethod
    def get_weekend_weekdays(locale: Optional[str] = None, loc: Optional[Locale] = None) -> list[int]:
        return list((loc or Locale.create(locale)).get_weekend_days())

    # -------------------------------------------------------------------------
    # Имена
    # -------------------------------------------------------------------------

    @staticmethod
    def months(
        length: str = "long",
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        output_calendar: str = "gregory",
        loc: Optional[Locale] = None,
    ) -> list[str]:
        """
        Имена месяцев (standalone-форма).

        Args:
            length: numeric | 2-digit | narrow | short | long
        """
        return list(
            (loc or Locale.create(locale, numbering_system, output_calendar)).months(length)
        )

    @staticmethod
    def months_format(
        length: str = "long",
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        output_calendar: str = "gregory",
        loc: Optional[Locale] = None,
    ) -> list[str]:
        """Имена месяцев в форме для даты ("de janvier" и т.п.)."""
        return list(
            (loc or Locale.create(locale, numbering_system, output_calendar)).months(length, True)
        )

    @staticmethod
    def weekdays(
        length: str = "long",
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        loc: Optional[Locale] = None,
    ) -> list[str]:
        """Имена дней недели, с понедельника."""
        return list((loc or Locale.create(locale, numbering_system)).weekdays(length))

    @staticmethod
    def weekdays_format(
        length: str = "long",
        locale: Optional[str] = None,
        numbering_system: Optional[str] = None,
        loc: Optional[Locale] = None,
    ) -> list[str]:
        return list((loc or Locale.create(locale, numbering_system)).weekdays(length, True))

    @staticmethod
    def meridiems(locale: Optional[str] = None) -> list[str]:
        return list(Locale.create(locale).meridiems())

    @staticmethod
    def eras(length: str = "short", locale: Optional[str] = None) -> list[str]:
        """Имена эр (до н.э., н.э.)."""
        return list(Locale.create(locale, None, "gregory").eras(length))

    @staticmethod
    def features() -> dict[str, bool]:
        """Доступные возможности окружения."""
        return {"relative": True, "locale_week": True}
