"""
Process Settings — глобальная конфигурация движка

Три слоя:
1. EngineSettings: конфигурация из окружения (CIVILCLOCK_*) и .env, читается один раз
2. Settings: процессное изменяемое состояние (часы, зона/локаль по умолчанию,
   отсечка двухзначного года, throw_on_invalid, недельные настройки)
3. CacheRegistry: явный контекст кэшей (зоны, локали, форматтеры) с reset()

Часы (Settings.now) глобальны для процесса, не per-thread.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Mapping, Optional, Union

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from civilclock.core.domain.records import WeekSettings

logger = structlog.get_logger(__name__)


# =============================================================================
# ENGINE SETTINGS (окружение)
# =============================================================================


class EngineSettings(BaseSettings):
    """Конфигурация движка из переменных окружения CIVILCLOCK_*."""

    model_config = SettingsConfigDict(
        env_prefix="civilclock_", env_file=".env", extra="ignore"
    )

    default_zone: Optional[str] = Field(
        None, description="Зона по умолчанию ('utc', 'system', IANA-имя, 'UTC+3')"
    )
    default_locale: Optional[str] = Field(None, description="Тег локали по умолчанию")
    default_numbering_system: Optional[str] = Field(
        None, description="Система счисления по умолчанию (latn, arab, ...)"
    )
    default_output_calendar: Optional[str] = Field(
        None, description="Календарь вывода по умолчанию"
    )
    two_digit_cutoff_year: int = Field(
        60, ge=0, description="Год > cutoff → 1900-е, иначе 2000-е"
    )
    throw_on_invalid: bool = Field(
        False, description="Бросать исключение вместо создания невалидного значения"
    )

    # Logging settings.
    log_level: str = Field("INFO", description="Log level used for logging statements.")


# =============================================================================
# CACHE REGISTRY
# =============================================================================


class CacheRegistry:
    """
    Явный контекст процессных кэшей.

    Кэши именованы ("zones", "locales", "week_info", ...) и растут без вытеснения
    до вызова reset(). Доступ сериализован через RLock.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._caches: Dict[str, Dict[Hashable, Any]] = {}

    def get_or_create(self, cache_name: str, key: Hashable, factory: Callable[[], Any]) -> Any:
        """
        Значение из кэша или результат factory() (сохраняется в кэш).

        Args:
            cache_name: Имя кэша
            key: Ключ внутри кэша
            factory: Конструктор значения при промахе

        Returns:
            Закэшированное значение
        """
        with self._lock:
            cache = self._caches.setdefault(cache_name, {})
            if key in cache:
                return cache[key]
            logger.debug("cache_miss", cache=cache_name, key=str(key))
            value = factory()
            cache[key] = value
            return value

    def peek(self, cache_name: str, key: Hashable) -> Any:
        """Значение из кэша или None, без создания."""
        with self._lock:
            return self._caches.get(cache_name, {}).get(key)

    def size(self, cache_name: str) -> int:
        with self._lock:
            return len(self._caches.get(cache_name, {}))

    def reset(self, cache_name: Optional[str] = None) -> None:
        """Очистка одного кэша или всех кэшей."""
        with self._lock:
            if cache_name is None:
                self._caches.clear()
            else:
                self._caches.pop(cache_name, None)


# =============================================================================
# PROCESS SETTINGS
# =============================================================================


def _system_clock() -> int:
    return time.time_ns() // 1_000_000


class ProcessSettings:
    """
    Процессное изменяемое состояние движка.

    Единственный экземпляр — модульный Settings. Изменения действуют на все
    последующие конструкторы; уже созданные значения не меняются.
    """

    def __init__(self, engine: EngineSettings, registry: Optional[CacheRegistry] = None):
        self._engine = engine
        self.registry = registry or CacheRegistry()
        self.restore_defaults()

    @property
    def engine(self) -> EngineSettings:
        return self._engine

    def restore_defaults(self) -> None:
        """Возврат к конфигурации из EngineSettings (часы — системные)."""
        self._now: Callable[[], int] = _system_clock
        self._default_zone: Any = self._engine.default_zone
        self.default_locale: Optional[str] = self._engine.default_locale
        self.default_numbering_system: Optional[str] = self._engine.default_numbering_system
        self.default_output_calendar: Optional[str] = self._engine.default_output_calendar
        self._default_week_settings: Optional[WeekSettings] = None
        self._two_digit_cutoff_year = self._engine.two_digit_cutoff_year % 100
        self.throw_on_invalid: bool = self._engine.throw_on_invalid

    # -------------------------------------------------------------------------
    # Часы
    # -------------------------------------------------------------------------

    @property
    def now(self) -> Callable[[], int]:
        """Функция текущего времени (epoch ms)."""
        return self._now

    @now.setter
    def now(self, clock: Callable[[], int]) -> None:
        self._now = clock

    # -------------------------------------------------------------------------
    # Зона
    # -------------------------------------------------------------------------

    @property
    def default_zone(self):
        """Зона по умолчанию (нормализованная; системная, если не задана)."""
        from civilclock.zones import SystemZone, normalize_zone

        return normalize_zone(self._default_zone, SystemZone.instance())

    @default_zone.setter
    def default_zone(self, zone: Any) -> None:
        self._default_zone = zone

    @property
    def default_zone_name(self) -> Optional[str]:
        return self.default_zone.name

    # -------------------------------------------------------------------------
    # Недели и годы
    # -------------------------------------------------------------------------

    @property
    def default_week_settings(self) -> Optional[WeekSettings]:
        """Недельные настройки по умолчанию (None → из локали)."""
        return self._default_week_settings

    @default_week_settings.setter
    def default_week_settings(
        self, week_settings: Union[WeekSettings, Mapping[str, Any], None]
    ) -> None:
        if week_settings is None or isinstance(week_settings, WeekSettings):
            self._default_week_settings = week_settings
        else:
            self._default_week_settings = WeekSettings.model_validate(dict(week_settings))

    @property
    def two_digit_cutoff_year(self) -> int:
        """Отсечка двухзначного года (хранится по модулю 100)."""
        return self._two_digit_cutoff_year

    @two_digit_cutoff_year.setter
    def two_digit_cutoff_year(self, cutoff: int) -> None:
        self._two_digit_cutoff_year = cutoff % 100

    # -------------------------------------------------------------------------
    # Кэши
    # -------------------------------------------------------------------------

    def reset_caches(self) -> None:
        """Очистка всех процессных кэшей (зоны, локали, форматтеры)."""
        self.registry.reset()
        logger.debug("caches_reset")


Settings = ProcessSettings(EngineSettings())


# =============================================================================
# LOGGING
# =============================================================================


def configure_logging(level: Optional[str] = None) -> None:
    """
    Конфигурация structlog с фильтрацией по уровню.

    Args:
        level: Имя уровня ("DEBUG", "INFO", ...); по умолчанию log_level
            из EngineSettings
    """
    level_name = (level or Settings.engine.log_level).upper()
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        )
    )
