"""Asset Transfer Backend — внешние переводы токенов в custody ledger-а и обратно.

Контракт:
- transfer_in(token_id, sender, amount): sender → custody
- transfer_out(token_id, recipient, amount): custody → recipient
- Успех — возврат без исключения; неудача — исключение.
- Операция синхронна и завершается за ограниченное время.

InMemoryAssetTransferBackend — реализация на словарях балансов, с запретом
овердрафта и инъекцией отказов для тестов.
"""

import logging
import threading
from collections import defaultdict
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_CUSTODY_ACCOUNT = "ledger-custody"


class TransferError(Exception):
    """Отказ внешнего перевода (недостаточно средств, инъекция отказа и т.п.)."""


@runtime_checkable
class AssetTransferBackend(Protocol):
    def transfer_in(self, token_id: str, sender: str, amount: int) -> None: ...

    def transfer_out(self, token_id: str, recipient: str, amount: int) -> None: ...


class InMemoryAssetTransferBackend:
    """Балансы token_id → account → amount в памяти."""

    def __init__(self, custody_account: str = DEFAULT_CUSTODY_ACCOUNT):
        self.custody_account = custody_account
        self._balances: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self._pending_failures: list[str] = []
        self._lock = threading.Lock()

    def mint(self, token_id: str, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount: {amount}")
        with self._lock:
            self._balances[token_id][account] += amount

    def balance_of(self, token_id: str, account: str) -> int:
        with self._lock:
            return self._balances[token_id].get(account, 0)

    def custody_balance(self, token_id: str) -> int:
        return self.balance_of(token_id, self.custody_account)

    def fail_next(self, reason: str = "injected failure") -> None:
        """Следующий перевод (любой) завершится TransferError."""
        with self._lock:
            self._pending_failures.append(reason)

    def transfer_in(self, token_id: str, sender: str, amount: int) -> None:
        self._move(token_id, sender, self.custody_account, amount)

    def transfer_out(self, token_id: str, recipient: str, amount: int) -> None:
        self._move(token_id, self.custody_account, recipient, amount)

    def _move(self, token_id: str, source: str, target: str, amount: int) -> None:
        with self._lock:
            if self._pending_failures:
                raise TransferError(self._pending_failures.pop(0))
            if amount <= 0:
                raise TransferError(f"Transfer amount must be positive, got {amount}")
            accounts = self._balances[token_id]
            available = accounts.get(source, 0)
            if available < amount:
                raise TransferError(
                    f"Insufficient {token_id} balance for {source}: {available} < {amount}"
                )
            accounts[source] = available - amount
            accounts[target] += amount
        logger.debug("Transfer %s %d %s -> %s", token_id, amount, source, target)
