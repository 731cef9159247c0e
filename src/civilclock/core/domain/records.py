"""
Records — неизменяемые записи календарного движка

Immutable Pydantic модели:
- CivilFields: civil-поля момента в конкретной зоне
- WeekData: год недели / номер недели / день недели
- WeekSettings: недельные настройки локали (первый день, минимум дней, выходные)
- Invalid: маркер невалидности (reason + explanation)
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# CIVIL FIELDS
# =============================================================================


class CivilFields(BaseModel):
    """
    Civil-поля момента, наблюдаемые в зоне.

    Поля не проверяются на календарные границы: валидацию выполняют
    has_invalid_* функции calendar_math, а здесь допускаются промежуточные
    значения с переполнением.
    """

    year: int = Field(..., description="Год (пролептический григорианский)")
    month: int = Field(..., description="Месяц 1..12")
    day: int = Field(..., description="День месяца 1..31")
    hour: int = Field(0, description="Час 0..23")
    minute: int = Field(0, description="Минута 0..59")
    second: int = Field(0, description="Секунда 0..59")
    millisecond: int = Field(0, description="Миллисекунда 0..999")

    model_config = {"frozen": True}  # Immutable


class WeekData(BaseModel):
    """Данные недели (ISO или локальной)."""

    week_year: int = Field(..., description="Год недели")
    week_number: int = Field(..., ge=1, le=53, description="Номер недели 1..53")
    weekday: int = Field(..., ge=1, le=7, description="День недели 1..7")

    model_config = {"frozen": True}


# =============================================================================
# WEEK SETTINGS
# =============================================================================


class WeekSettings(BaseModel):
    """
    Недельные настройки локали.

    first_day: первый день недели (1 = понедельник ... 7 = воскресенье)
    minimal_days: минимум дней года в первой неделе
    weekend: ISO-номера выходных дней
    """

    first_day: int = Field(1, ge=1, le=7, description="Первый день недели (ISO)")
    minimal_days: int = Field(4, ge=1, le=7, description="Минимум дней в первой неделе")
    weekend: tuple[int, ...] = Field((6, 7), description="Выходные дни (ISO)")

    model_config = {"frozen": True}

    @field_validator("weekend")
    @classmethod
    def validate_weekend(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        """Каждый выходной — ISO-день 1..7."""
        for day in v:
            if not 1 <= day <= 7:
                raise ValueError(f"weekend day {day} outside 1..7")
        return v


ISO_WEEK_SETTINGS = WeekSettings(first_day=1, minimal_days=4, weekend=(6, 7))


# =============================================================================
# INVALID MARKER
# =============================================================================


class Invalid(BaseModel):
    """
    Маркер невалидности значения.

    Прилипает ко всем производным значениям: операции над невалидным
    Instant/Duration/Interval возвращают невалидный результат с тем же reason.
    """

    reason: str = Field(..., description="Короткий код причины")
    explanation: Optional[str] = Field(None, description="Развёрнутое пояснение")

    model_config = {"frozen": True}

    def to_message(self) -> str:
        """Человекочитаемое сообщение: reason или 'reason: explanation'."""
        if self.explanation:
            return f"{self.reason}: {self.explanation}"
        return self.reason
