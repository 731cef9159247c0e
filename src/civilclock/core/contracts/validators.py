"""
JSON Schema Contract Validators

Валидация mapping-входов (civil-поля Instant, единицы Duration) согласно
формальным JSON Schema контрактам. Использует библиотеку jsonschema.

Схемы (каталог schema/ рядом с модулем):
- instant_object.json: канонические civil-поля Instant.from_object / Instant.set
- duration_object.json: канонические единицы Duration.from_object / Duration.set

Нарушения контракта переводятся в исключения пакета:
- лишнее свойство → InvalidUnitError
- нечисловое значение → InvalidArgumentError
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

from civilclock.core.errors import InvalidArgumentError, InvalidUnitError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы поставляются вместе с пакетом в contracts/schema/.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'instant_object')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Первое нарушение переводится в исключение пакета.

        Raises:
            InvalidUnitError: Свойство не описано в схеме
            InvalidArgumentError: Значение не соответствует типу
        """
        for error in self.iter_errors(data):
            raise _translate(error, data)

    def is_valid(self, data: Mapping[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(dict(data))

    def iter_errors(self, data: Mapping[str, Any]) -> Iterator[ValidationError]:
        """Итератор по всем ошибкам валидации (в порядке путей)."""
        return iter(sorted(self.validator.iter_errors(dict(data)), key=lambda e: list(e.path)))


def _translate(error: ValidationError, data: Mapping[str, Any]) -> Exception:
    if error.validator == "additionalProperties":
        allowed = error.schema.get("properties", {})
        extra = [key for key in data if key not in allowed]
        return InvalidUnitError(extra[0] if extra else error.message)
    if error.path:
        key = error.path[-1]
        value = data.get(key)
        return InvalidArgumentError(
            f"Invalid value for {key}: {value!r} (of type {type(value).__name__})"
        )
    return InvalidArgumentError(error.message)


class InstantObjectValidator(ContractValidator):
    """Валидатор civil-полей Instant."""

    def __init__(self):
        super().__init__("instant_object")


class DurationObjectValidator(ContractValidator):
    """Валидатор единиц Duration."""

    def __init__(self):
        super().__init__("duration_object")


_INSTANT_VALIDATOR = InstantObjectValidator()
_DURATION_VALIDATOR = DurationObjectValidator()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_instant_object(data: Mapping[str, Any]) -> None:
    """
    Валидация нормализованных civil-полей.

    Raises:
        InvalidUnitError, InvalidArgumentError
    """
    _INSTANT_VALIDATOR.validate(data)


def validate_duration_object(data: Mapping[str, Any]) -> None:
    """
    Валидация нормализованных единиц Duration.

    Raises:
        InvalidUnitError, InvalidArgumentError
    """
    _DURATION_VALIDATOR.validate(data)
