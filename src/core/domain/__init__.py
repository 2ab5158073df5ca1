"""
Domain models and value objects.

Contains fundamental domain entities: Currency, ExchangeRate, StakePosition,
and the ledger events.
"""

from src.core.domain.currency import (
    FEE_TIER_NOMINAL_BPS,
    ISO_CODE_PATTERN,
    Currency,
    FeeTier,
    normalize_code,
)
from src.core.domain.events import (
    AnyLedgerEvent,
    CurrencyAdded,
    EventType,
    FeesCollected,
    LedgerEvent,
    RateChanged,
    Staked,
    Withdrawn,
)
from src.core.domain.exchange_rate import ExchangeRate
from src.core.domain.stake_position import PositionState, StakePosition

__all__ = [
    # Currency model
    "Currency",
    "FeeTier",
    "FEE_TIER_NOMINAL_BPS",
    "ISO_CODE_PATTERN",
    "normalize_code",
    # Exchange rate model
    "ExchangeRate",
    # Stake position model
    "StakePosition",
    "PositionState",
    # Events
    "EventType",
    "LedgerEvent",
    "AnyLedgerEvent",
    "CurrencyAdded",
    "RateChanged",
    "Staked",
    "Withdrawn",
    "FeesCollected",
]
