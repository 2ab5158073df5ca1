"""
Fixed-Point — Checked Integer Arithmetic

Модуль обеспечивает целочисленную арифметику для сумм, комиссий и курсов:
- Checked add/sub/mul с границей amount_max (uint256 по умолчанию)
- Комиссия в basis points с округлением вниз (в пользу протокола)
- Применение fixed-point курса (multiply-then-descale с усечением)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Никакого float: все суммы и курсы — int
2. Переполнение никогда не "заворачивается" → ArithmeticOverflow
3. Отрицательный результат вычитания → ArithmeticOverflow (underflow)
4. Все операции детерминированы и воспроизводимы

ФОРМУЛЫ:
    fee = amount * fee_bps // bps_denominator
    net = amount - fee
    converted = amount * rate // rate_scale
"""

from typing import NamedTuple

from src.core.config import BPS_DENOMINATOR, RATE_SCALE, UINT256_MAX
from src.core.errors import ArithmeticOverflow


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_strict_int(value: object) -> bool:
    """
    Проверка, что значение — int, но не bool.

    bool — подкласс int в Python, но True не является суммой.
    """
    return isinstance(value, int) and not isinstance(value, bool)


def ensure_in_bounds(value: int, amount_max: int = UINT256_MAX) -> int:
    """
    Проверка, что value ∈ [0, amount_max].

    Raises:
        ArithmeticOverflow: если value вне диапазона
    """
    if value < 0:
        raise ArithmeticOverflow(f"Arithmetic underflow: {value} < 0")
    if value > amount_max:
        raise ArithmeticOverflow(f"Arithmetic overflow: {value} > {amount_max}")
    return value


# =============================================================================
# CHECKED ОПЕРАЦИИ
# =============================================================================


def checked_add(a: int, b: int, amount_max: int = UINT256_MAX) -> int:
    """
    Сложение с проверкой переполнения.

    Examples:
        >>> checked_add(1, 2)
        3
        >>> checked_add(2**256 - 1, 1)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ArithmeticOverflow: ...
    """
    return ensure_in_bounds(a + b, amount_max)


def checked_sub(a: int, b: int, amount_max: int = UINT256_MAX) -> int:
    """Вычитание с проверкой underflow (результат не может быть < 0)."""
    return ensure_in_bounds(a - b, amount_max)


def checked_mul(a: int, b: int, amount_max: int = UINT256_MAX) -> int:
    """
    Умножение с проверкой переполнения.

    Промежуточное произведение тоже обязано помещаться в amount_max,
    как в EVM, где a * b вычисляется до деления.
    """
    return ensure_in_bounds(a * b, amount_max)


# =============================================================================
# КОМИССИИ
# =============================================================================


class FeeSplit(NamedTuple):
    """Разбиение суммы на комиссию и чистую выплату."""

    fee: int
    net: int


def bps_fee(
    amount: int,
    fee_bps: int,
    bps_denominator: int = BPS_DENOMINATOR,
    amount_max: int = UINT256_MAX,
) -> int:
    """
    Комиссия в basis points с округлением вниз.

    fee = amount * fee_bps // bps_denominator

    Examples:
        >>> bps_fee(1000, 10)
        1
        >>> bps_fee(500, 10)
        0
        >>> bps_fee(999, 10)
        0
    """
    return checked_mul(amount, fee_bps, amount_max) // bps_denominator


def split_fee(
    amount: int,
    fee_bps: int,
    bps_denominator: int = BPS_DENOMINATOR,
    amount_max: int = UINT256_MAX,
) -> FeeSplit:
    """
    Разбиение суммы: (fee, net), fee + net == amount.

    Examples:
        >>> split_fee(1000, 10)
        FeeSplit(fee=1, net=999)
    """
    fee = bps_fee(amount, fee_bps, bps_denominator, amount_max)
    return FeeSplit(fee=fee, net=checked_sub(amount, fee, amount_max))


# =============================================================================
# КУРСЫ
# =============================================================================


def apply_rate(
    amount: int,
    rate: int,
    rate_scale: int = RATE_SCALE,
    amount_max: int = UINT256_MAX,
) -> int:
    """
    Конверсия суммы по fixed-point курсу.

    rate — количество единиц целевой валюты за одну единицу исходной,
    умноженное на rate_scale. Результат усекается вниз.

    Examples:
        >>> apply_rate(10_000, 4859)
        4859
        >>> apply_rate(1, 4859)
        0
        >>> apply_rate(100, 2)
        0
        >>> apply_rate(50_000, 2)
        10
    """
    return checked_mul(amount, rate, amount_max) // rate_scale
