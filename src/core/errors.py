"""
Errors — Типизированные ошибки staking ledger

Единая таксономия ошибок для Oracle, Registry и Ledger.
Все ошибки сообщаются синхронно через исключения, никогда не подавляются
и не повторяются внутри ядра (retry — политика внешнего вызывающего).

Каждый класс несёт стабильный `code` для логирования и внешних интеграций.
"""


class StakingError(Exception):
    """Базовая ошибка ядра staking ledger."""

    code: str = "StakingError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


# =============================================================================
# ДОСТУП
# =============================================================================


class Unauthorized(StakingError):
    """Вызывающий не обладает правами администратора."""

    code = "Unauthorized"


# =============================================================================
# REGISTRY
# =============================================================================


class DuplicateCode(StakingError):
    code = "DuplicateCode"


class DuplicateToken(StakingError):
    code = "DuplicateToken"


class InvalidFee(StakingError):
    """fee_bps вне диапазона [0, 10000] или не целое."""

    code = "InvalidFee"


class CurrencyNotFound(StakingError):
    code = "CurrencyNotFound"


# =============================================================================
# ORACLE
# =============================================================================


class RateNotFound(StakingError):
    """Для упорядоченной пары (from, to) курс не задан."""

    code = "RateNotFound"


class InvalidRate(StakingError):
    code = "InvalidRate"


# =============================================================================
# LEDGER
# =============================================================================


class InvalidAmount(StakingError):
    code = "InvalidAmount"


class InsufficientBalance(StakingError):
    code = "InsufficientBalance"


class TransferFailed(StakingError):
    """
    Внешний перевод актива не выполнен.

    Исходное исключение backend-а доступно через __cause__.
    """

    code = "TransferFailed"


class ArithmeticOverflow(StakingError):
    """Результат целочисленной операции выходит за пределы amount_max."""

    code = "ArithmeticOverflow"
