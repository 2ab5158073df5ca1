"""Registry — реестр валют, принятых к стейкингу."""

from .currency_registry import CurrencyRegistry

__all__ = [
    "CurrencyRegistry",
]
