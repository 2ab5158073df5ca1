"""
LedgerConfig — Конфигурация ядра staking ledger

Общие параметры fixed-point арифметики и валидации, разделяемые
Oracle, Registry и Ledger. Каждый компонент принимает config опционально
и по умолчанию использует LedgerConfig().
"""

from dataclasses import dataclass
from typing import Final


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Масштаб fixed-point курса: 4 знака после запятой
RATE_SCALE: Final[int] = 10_000

# Знаменатель basis points (10000 bps = 100%)
BPS_DENOMINATOR: Final[int] = 10_000

# Верхняя граница fee_bps
MAX_FEE_BPS: Final[int] = 10_000

# Машинное слово EVM (uint256)
UINT256_MAX: Final[int] = 2**256 - 1


@dataclass(frozen=True)
class LedgerConfig:
    """Конфигурация ledger.

    Attributes:
        rate_scale: масштаб fixed-point курса (default 10_000)
        bps_denominator: знаменатель basis points (default 10_000)
        max_fee_bps: максимальная комиссия в bps (default 10_000)
        amount_max: верхняя граница любой суммы/промежуточного результата
        validate_events: проверять payload событий по JSON Schema контрактам
    """

    rate_scale: int = RATE_SCALE
    bps_denominator: int = BPS_DENOMINATOR
    max_fee_bps: int = MAX_FEE_BPS
    amount_max: int = UINT256_MAX
    validate_events: bool = True

    def __post_init__(self):
        if self.rate_scale <= 0:
            raise ValueError(f"rate_scale must be positive, got {self.rate_scale}")
        if self.bps_denominator <= 0:
            raise ValueError(
                f"bps_denominator must be positive, got {self.bps_denominator}"
            )
        fee_cap = min(self.bps_denominator, MAX_FEE_BPS)
        if not 0 <= self.max_fee_bps <= fee_cap:
            raise ValueError(f"max_fee_bps must be in [0, {fee_cap}], got {self.max_fee_bps}")
        if self.amount_max <= 0:
            raise ValueError(f"amount_max must be positive, got {self.amount_max}")
