"""
Currency — Модель зарегистрированной валюты

Immutable Pydantic модель валюты, принятой ledger-ом к стейкингу.
Хранит только ссылку на внешний контракт актива (token_id).

fee_bps — единственная применяемая комиссия.
fee_tier — информационная категория для отображения; её номинальная
ставка (FeeTier.nominal_bps) никогда не используется при расчётах.
"""

from enum import Enum
from typing import Final

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class FeeTier(str, Enum):
    """Категория комиссии (только метаданные для UI)."""

    TIER1 = "Tier1"
    TIER2 = "Tier2"

    @property
    def ordinal(self) -> int:
        """Порядковый номер tier (0 для Tier1), как в on-chain enum."""
        return list(FeeTier).index(self)

    @property
    def nominal_bps(self) -> int:
        """Номинальная ставка tier в bps (для отображения)."""
        return FEE_TIER_NOMINAL_BPS[self]

    @classmethod
    def coerce(cls, value: "FeeTier | int | str") -> "FeeTier":
        """
        Приведение к FeeTier из enum, порядкового номера или имени.

        Raises:
            ValueError: если значение не соответствует ни одному tier
        """
        if isinstance(value, FeeTier):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            tiers = list(cls)
            if 0 <= value < len(tiers):
                return tiers[value]
            raise ValueError(f"Unknown fee tier ordinal: {value}")
        if isinstance(value, str):
            for tier in cls:
                if value in (tier.value, tier.name):
                    return tier
        raise ValueError(f"Unknown fee tier: {value!r}")


# Номинальные ставки tier-ов: Tier1 = 0.25%, Tier2 = 0.5%
FEE_TIER_NOMINAL_BPS: Final[dict[FeeTier, int]] = {
    FeeTier.TIER1: 25,
    FeeTier.TIER2: 50,
}


# =============================================================================
# CURRENCY MODEL
# =============================================================================

ISO_CODE_PATTERN: Final[str] = r"^[A-Z][A-Z0-9]{2,7}$"


def normalize_code(code: str) -> str:
    """Нормализация кода валюты: strip + upper. Не-строка → пустая строка."""
    if not isinstance(code, str):
        return ""
    return code.strip().upper()


class Currency(BaseModel):
    """
    Модель зарегистрированной валюты.

    Immutable модель (frozen=True): валюта создаётся один раз через
    add_currency и больше не меняется.
    """

    currency_id: int = Field(..., ge=0, description="Стабильный идентификатор (порядок регистрации)")
    token_id: str = Field(..., min_length=1, description="Ссылка на внешний контракт актива")
    iso_code: str = Field(..., pattern=ISO_CODE_PATTERN, description="Код валюты (например, 'USD')")
    fee_bps: int = Field(..., ge=0, le=10_000, description="Комиссия в basis points")
    fee_tier: FeeTier = Field(..., description="Категория комиссии (метаданные)")
    registered_ts_utc_ms: int = Field(..., ge=0, description="Время регистрации (UTC, миллисекунды)")

    model_config = {"frozen": True}

    @property
    def tier_matches_fee(self) -> bool:
        """Совпадает ли номинальная ставка tier с применяемой fee_bps."""
        return self.fee_tier.nominal_bps == self.fee_bps
