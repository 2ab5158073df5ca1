"""
StakePosition — Модель стейк-позиции

Позиция владельца в одной валюте. Принадлежит исключительно Ledger.

Жизненный цикл:
    ABSENT → ACTIVE (первый stake)
    ACTIVE → ACTIVE (stake/withdraw, principal > 0)
    ACTIVE → ABSENT (withdraw до нуля, запись удаляется)
"""

from enum import Enum

from pydantic import BaseModel, Field


class PositionState(str, Enum):
    """Состояние позиции."""

    ABSENT = "ABSENT"
    ACTIVE = "ACTIVE"


class StakePosition(BaseModel):
    """
    Модель стейк-позиции.

    Immutable модель (frozen=True). Каждое изменение principal создаёт
    новый экземпляр через with_principal().
    """

    owner: str = Field(..., min_length=1, description="Идентификатор аккаунта владельца")
    iso_code: str = Field(..., min_length=1, description="Код валюты позиции")
    principal: int = Field(..., ge=0, description="Сумма в минимальных единицах валюты")
    opened_ts_utc_ms: int = Field(..., ge=0, description="Время первого депозита (UTC, миллисекунды)")
    updated_ts_utc_ms: int = Field(..., ge=0, description="Время последнего изменения (UTC, миллисекунды)")

    model_config = {"frozen": True}

    @property
    def state(self) -> PositionState:
        return PositionState.ACTIVE if self.principal > 0 else PositionState.ABSENT

    @property
    def key(self) -> tuple[str, str]:
        return (self.owner, self.iso_code)

    def with_principal(self, principal: int, ts_utc_ms: int) -> "StakePosition":
        """Новый экземпляр с изменённым principal (opened_ts сохраняется)."""
        return self.model_copy(update={"principal": principal, "updated_ts_utc_ms": ts_utc_ms})
