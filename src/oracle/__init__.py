"""Oracle — направленные курсы конверсии валют."""

from .exchange_rate_oracle import ExchangeRateOracle

__all__ = [
    "ExchangeRateOracle",
]
