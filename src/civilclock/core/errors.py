"""
Errors — иерархия исключений civilclock

Основной путь обработки ошибок — invalid-маркер на значениях (Instant,
Duration, Interval). Исключения используются:
1. Для программных ошибок (конфликт полей, неизвестная единица, плохой аргумент)
2. Для invalid-значений, когда включён Settings.throw_on_invalid
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from civilclock.core.domain.records import Invalid


class CivilClockError(Exception):
    """Базовое исключение пакета."""


class InvalidDateTimeError(CivilClockError):
    """Создан невалидный Instant при включённом throw_on_invalid."""

    def __init__(self, reason: "Invalid"):
        super().__init__(f"Invalid DateTime: {reason.to_message()}")
        self.reason = reason


class InvalidIntervalError(CivilClockError):
    """Создан невалидный Interval при включённом throw_on_invalid."""

    def __init__(self, reason: "Invalid"):
        super().__init__(f"Invalid Interval: {reason.to_message()}")
        self.reason = reason


class InvalidDurationError(CivilClockError):
    """Создан невалидный Duration при включённом throw_on_invalid."""

    def __init__(self, reason: "Invalid"):
        super().__init__(f"Invalid Duration: {reason.to_message()}")
        self.reason = reason


class ConflictingSpecificationError(CivilClockError):
    """
    Взаимоисключающие семейства полей.

    Примеры: week_year + month, ordinal + day, meridiem + 24-часовой формат.
    """


class InvalidUnitError(CivilClockError):
    """Неизвестная единица времени."""

    def __init__(self, unit: object):
        super().__init__(f"Invalid unit {unit}")
        self.unit = unit


class InvalidArgumentError(CivilClockError):
    """Аргумент неподходящего типа или значения."""


class ZoneIsAbstractError(CivilClockError):
    """Метод Zone не реализован подклассом."""

    def __init__(self) -> None:
        super().__init__("Zone is an abstract class")
