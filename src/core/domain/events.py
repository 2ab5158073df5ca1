"""
Ledger Events — События для внешних наблюдателей

Immutable Pydantic модели событий, которые Oracle, Registry и Ledger
передают в EventSink. Формат доставки — забота внешнего sink-а;
payload (model_dump(mode="json")) соответствует JSON Schema контрактам
из contracts/schema/.

События:
- CurrencyAdded   (contracts/schema/currency_added.json)
- RateChanged     (contracts/schema/rate_changed.json)
- Staked          (contracts/schema/staked.json)
- Withdrawn       (contracts/schema/withdrawn.json)
- FeesCollected   (contracts/schema/fees_collected.json)
"""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field

from .currency import FeeTier


class EventType(str, Enum):
    """Тип события."""

    CURRENCY_ADDED = "currency_added"
    RATE_CHANGED = "rate_changed"
    STAKED = "staked"
    WITHDRAWN = "withdrawn"
    FEES_COLLECTED = "fees_collected"


# =============================================================================
# BASE
# =============================================================================


class LedgerEvent(BaseModel):
    """Общие поля всех событий."""

    seq: int = Field(..., ge=0, description="Монотонный номер события у эмиттера")
    ts_utc_ms: int = Field(..., ge=0, description="Время события (UTC, миллисекунды)")

    model_config = {"frozen": True}

    @property
    def schema_name(self) -> str:
        """Имя JSON Schema контракта для payload."""
        return self.event_type.value  # type: ignore[attr-defined]

    def payload(self) -> dict:
        return self.model_dump(mode="json")


# =============================================================================
# EVENTS
# =============================================================================


class CurrencyAdded(LedgerEvent):
    event_type: Literal[EventType.CURRENCY_ADDED] = EventType.CURRENCY_ADDED
    currency_id: int = Field(..., ge=0)
    token_id: str
    iso_code: str
    fee_bps: int = Field(..., ge=0, le=10_000)
    fee_tier: FeeTier
    admin: str


class RateChanged(LedgerEvent):
    event_type: Literal[EventType.RATE_CHANGED] = EventType.RATE_CHANGED
    from_code: str
    to_code: str
    rate: int = Field(..., gt=0)
    previous_rate: int | None = Field(None, description="Предыдущий курс (None при первой записи)")
    admin: str


class Staked(LedgerEvent):
    event_type: Literal[EventType.STAKED] = EventType.STAKED
    owner: str
    iso_code: str
    amount: int = Field(..., gt=0)
    principal_after: int = Field(..., ge=0)
    custody_after: int = Field(..., ge=0)


class Withdrawn(LedgerEvent):
    event_type: Literal[EventType.WITHDRAWN] = EventType.WITHDRAWN
    owner: str
    iso_code: str
    amount: int = Field(..., gt=0)
    fee: int = Field(..., ge=0)
    net: int = Field(..., ge=0)
    principal_after: int = Field(..., ge=0)
    custody_after: int = Field(..., ge=0)


class FeesCollected(LedgerEvent):
    event_type: Literal[EventType.FEES_COLLECTED] = EventType.FEES_COLLECTED
    iso_code: str
    amount: int = Field(..., gt=0)
    recipient: str
    admin: str
    custody_after: int = Field(..., ge=0)


AnyLedgerEvent = Union[CurrencyAdded, RateChanged, Staked, Withdrawn, FeesCollected]
