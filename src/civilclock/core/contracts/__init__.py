"""
JSON Schema contracts для mapping-входов civilclock.
"""

from civilclock.core.contracts.validators import (
    ContractValidator,
    DurationObjectValidator,
    InstantObjectValidator,
    SchemaLoader,
    validate_duration_object,
    validate_instant_object,
)

__all__ = [
    "SchemaLoader",
    "ContractValidator",
    "InstantObjectValidator",
    "DurationObjectValidator",
    "validate_instant_object",
    "validate_duration_object",
]
