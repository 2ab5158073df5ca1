"""
Contract Validation Module

Модуль для валидации JSON контрактов событий staking ledger.
"""

from .validators import (
    ContractValidator,
    CurrencyAddedValidator,
    FeesCollectedValidator,
    RateChangedValidator,
    SchemaLoader,
    StakedValidator,
    WithdrawnValidator,
    validate_event,
    validate_event_payload,
    validator_for,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CurrencyAddedValidator",
    "RateChangedValidator",
    "StakedValidator",
    "WithdrawnValidator",
    "FeesCollectedValidator",
    # Functions
    "validate_event",
    "validate_event_payload",
    "validator_for",
]
