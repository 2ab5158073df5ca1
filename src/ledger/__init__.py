"""Ledger — учёт стейк-позиций и внешние переводы активов."""

from .staking_ledger import StakingLedger, WithdrawalQuote
from .transfers import (
    DEFAULT_CUSTODY_ACCOUNT,
    AssetTransferBackend,
    InMemoryAssetTransferBackend,
    TransferError,
)

__all__ = [
    "StakingLedger",
    "WithdrawalQuote",
    "AssetTransferBackend",
    "InMemoryAssetTransferBackend",
    "TransferError",
    "DEFAULT_CUSTODY_ACCOUNT",
]
