"""Staking Ledger — учёт стейк-позиций по владельцам и валютам.

Ledger владеет позициями, custody-балансами и накопленными комиссиями.
Registry (политика комиссий) и Oracle (курсы) доступны только на чтение.

Операции:
- stake: transfer_in → principal += amount, custody += amount
- withdraw: fee = amount * fee_bps // bps_denominator (вниз, в пользу протокола),
  net = amount - fee; principal -= amount, transfer_out(net),
  fee остаётся в custody как доход протокола
- convert_value: котировка по курсу Oracle, состояние не меняется
- collect_fees (admin): вывод накопленных комиссий из custody

Атомарность: каждая мутирующая операция целиком выполняется под одним
lock-ом; внешний перевод выполняется до фиксации состояния, и при его
неудаче ничего не меняется.

Conservation (для каждой валюты):
    custody_balance == Σ principal + fee_revenue
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from src.access.guard import Authorizer, admin_only
from src.core.config import LedgerConfig
from src.core.domain.currency import Currency, normalize_code
from src.core.domain.events import FeesCollected, Staked, Withdrawn
from src.core.domain.stake_position import StakePosition
from src.core.errors import InsufficientBalance, InvalidAmount, StakingError, TransferFailed
from src.core.math.fixed_point import apply_rate, checked_add, checked_sub, is_strict_int, split_fee
from src.events.emitter import EventEmitter
from src.events.sink import EventSink
from src.oracle.exchange_rate_oracle import ExchangeRateOracle
from src.registry.currency_registry import CurrencyRegistry

from .transfers import AssetTransferBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WithdrawalQuote:
    """Предварительный расчёт вывода."""

    iso_code: str
    amount: int
    fee_bps: int
    fee: int
    net: int


class StakingLedger:
    """Multi-currency staking ledger."""

    def __init__(
        self,
        oracle: ExchangeRateOracle,
        registry: CurrencyRegistry,
        transfers: AssetTransferBackend,
        authorizer: Authorizer | None = None,
        event_sink: EventSink | None = None,
        config: LedgerConfig | None = None,
        clock: Callable[[], int] | None = None,
    ):
        """
        Args:
            oracle: развернутый Oracle (обязателен, создаётся до ledger-а)
            registry: реестр валют
            transfers: backend внешних переводов
            authorizer: backend авторизации для collect_fees
                (по умолчанию — authorizer реестра)
            event_sink: получатель событий Staked/Withdrawn/FeesCollected
            config: конфигурация (по умолчанию — config реестра)
            clock: источник времени UTC в миллисекундах

        Raises:
            TypeError: oracle/registry/transfers отсутствуют или неверного типа
        """
        if not isinstance(oracle, ExchangeRateOracle):
            raise TypeError("StakingLedger requires a deployed ExchangeRateOracle")
        if not isinstance(registry, CurrencyRegistry):
            raise TypeError("StakingLedger requires a CurrencyRegistry")
        if not isinstance(transfers, AssetTransferBackend):
            raise TypeError("StakingLedger requires an AssetTransferBackend")

        self._oracle = oracle
        self._registry = registry
        self._transfers = transfers
        self._authorizer = authorizer or registry.authorizer
        self.config = config or registry.config
        self._events = EventEmitter(event_sink, self.config, clock)

        self._lock = threading.RLock()
        self._positions: dict[tuple[str, str], StakePosition] = {}
        self._custody: dict[str, int] = {}
        self._fees: dict[str, int] = {}

    @property
    def oracle(self) -> ExchangeRateOracle:
        return self._oracle

    @property
    def registry(self) -> CurrencyRegistry:
        return self._registry

    # -------------------------------------------------------------------------
    # STAKE / WITHDRAW
    # -------------------------------------------------------------------------

    def stake(self, owner: str, iso_code: str, amount: int) -> StakePosition:
        """Зачисление amount на позицию owner в валюте iso_code.

        Returns:
            Обновлённая позиция

        Raises:
            CurrencyNotFound: валюта не зарегистрирована
            InvalidAmount: amount не положительное целое
            ArithmeticOverflow: principal или custody превышают amount_max
            TransferFailed: внешний перевод owner → custody не выполнен
        """
        currency = self._registry.get_currency(iso_code)
        self._check_owner(owner)
        self._check_amount(amount)
        code = currency.iso_code

        with self._lock:
            key = (owner, code)
            current = self._positions.get(key)
            principal = checked_add(current.principal if current else 0, amount, self.config.amount_max)
            custody = checked_add(self._custody.get(code, 0), amount, self.config.amount_max)

            now = self._events.now()
            if current is None:
                position = StakePosition(
                    owner=owner,
                    iso_code=code,
                    principal=principal,
                    opened_ts_utc_ms=now,
                    updated_ts_utc_ms=now,
                )
            else:
                position = current.with_principal(principal, now)

            event = self._events.build(
                Staked,
                ts_utc_ms=now,
                owner=owner,
                iso_code=code,
                amount=amount,
                principal_after=principal,
                custody_after=custody,
            )

            self._transfer("transfer_in", currency, owner, amount)

            self._positions[key] = position
            self._custody[code] = custody
            self._events.publish(event)

        logger.info("Staked owner=%s %s amount=%d principal=%d", owner, code, amount, principal)
        return position

    def withdraw(self, owner: str, iso_code: str, amount: int) -> int:
        """Вывод amount из позиции owner; комиссия остаётся в custody.

        Returns:
            net — сумма, переведённая владельцу (amount - fee)

        Raises:
            CurrencyNotFound: валюта не зарегистрирована
            InvalidAmount: amount не положительное целое
            InsufficientBalance: amount больше principal позиции
            ArithmeticOverflow: переполнение при расчёте комиссии
            TransferFailed: внешний перевод custody → owner не выполнен
        """
        currency = self._registry.get_currency(iso_code)
        self._check_owner(owner)
        self._check_amount(amount)
        code = currency.iso_code

        with self._lock:
            key = (owner, code)
            current = self._positions.get(key)
            principal = current.principal if current else 0
            if amount > principal:
                logger.warning(
                    "Withdraw rejected owner=%s %s amount=%d principal=%d",
                    owner, code, amount, principal,
                )
                raise InsufficientBalance(
                    f"{owner} has {principal} {code} staked, cannot withdraw {amount}"
                )

            fee, net = self._split(currency, amount)
            remaining = checked_sub(principal, amount, self.config.amount_max)
            custody = checked_sub(self._custody.get(code, 0), net, self.config.amount_max)
            fees = checked_add(self._fees.get(code, 0), fee, self.config.amount_max)

            now = self._events.now()
            event = self._events.build(
                Withdrawn,
                ts_utc_ms=now,
                owner=owner,
                iso_code=code,
                amount=amount,
                fee=fee,
                net=net,
                principal_after=remaining,
                custody_after=custody,
            )

            # net == 0 только при fee_bps == bps_denominator
            if net > 0:
                self._transfer("transfer_out", currency, owner, net)

            if remaining == 0:
                del self._positions[key]
            else:
                self._positions[key] = current.with_principal(remaining, now)
            self._custody[code] = custody
            self._fees[code] = fees
            self._events.publish(event)

        logger.info(
            "Withdrawn owner=%s %s amount=%d fee=%d net=%d principal=%d",
            owner, code, amount, fee, net, remaining,
        )
        return net

    def quote_withdrawal(self, owner: str, iso_code: str, amount: int) -> WithdrawalQuote:
        """Расчёт fee/net для withdraw без изменения состояния (те же проверки)."""
        currency = self._registry.get_currency(iso_code)
        self._check_amount(amount)
        principal = self.balance_of(owner, currency.iso_code)
        if amount > principal:
            raise InsufficientBalance(
                f"{owner} has {principal} {currency.iso_code} staked, cannot withdraw {amount}"
            )
        fee, net = self._split(currency, amount)
        return WithdrawalQuote(
            iso_code=currency.iso_code,
            amount=amount,
            fee_bps=currency.fee_bps,
            fee=fee,
            net=net,
        )

    # -------------------------------------------------------------------------
    # QUOTES
    # -------------------------------------------------------------------------

    def convert_value(self, amount: int, from_code: str, to_code: str) -> int:
        """Котировка amount из from_code в to_code по курсу Oracle.

        converted = amount * rate // rate_scale (усечение вниз).
        Только котировка: позиции не конвертируются.

        Raises:
            InvalidAmount: amount не неотрицательное целое
            RateNotFound: курс from_code→to_code не задан
            ArithmeticOverflow: amount * rate превышает amount_max
        """
        if not is_strict_int(amount) or amount < 0:
            raise InvalidAmount(f"Amount must be a non-negative integer, got {amount!r}")
        rate = self._oracle.get_rate(from_code, to_code)
        return apply_rate(amount, rate, self._oracle.rate_scale, self.config.amount_max)

    def staked_value_in(self, owner: str, iso_code: str, target_code: str) -> int:
        """Principal позиции, выраженный в target_code по курсу Oracle."""
        return self.convert_value(self.balance_of(owner, iso_code), iso_code, target_code)

    # -------------------------------------------------------------------------
    # FEES
    # -------------------------------------------------------------------------

    @admin_only
    def collect_fees(self, caller: str, iso_code: str, recipient: str) -> int:
        """Вывод накопленных комиссий валюты на recipient.

        Returns:
            Выведенная сумма (0 — без перевода и без события)

        Raises:
            Unauthorized: caller не администратор
            CurrencyNotFound: валюта не зарегистрирована
            TransferFailed: внешний перевод не выполнен
        """
        currency = self._registry.get_currency(iso_code)
        self._check_owner(recipient)
        code = currency.iso_code

        with self._lock:
            collected = self._fees.get(code, 0)
            if collected == 0:
                return 0
            custody = checked_sub(self._custody.get(code, 0), collected, self.config.amount_max)
            event = self._events.build(
                FeesCollected,
                iso_code=code,
                amount=collected,
                recipient=recipient,
                admin=caller,
                custody_after=custody,
            )

            self._transfer("transfer_out", currency, recipient, collected)

            self._fees[code] = 0
            self._custody[code] = custody
            self._events.publish(event)

        logger.info("Fees collected %s amount=%d recipient=%s by %s", code, collected, recipient, caller)
        return collected

    # -------------------------------------------------------------------------
    # READ
    # -------------------------------------------------------------------------

    def position(self, owner: str, iso_code: str) -> StakePosition | None:
        """Активная позиция или None (ABSENT)."""
        return self._positions.get((owner, normalize_code(iso_code)))

    def balance_of(self, owner: str, iso_code: str) -> int:
        position = self.position(owner, iso_code)
        return position.principal if position else 0

    def positions_of(self, owner: str) -> list[StakePosition]:
        with self._lock:
            return [p for (o, _), p in self._positions.items() if o == owner]

    def custody_balance(self, iso_code: str) -> int:
        return self._custody.get(normalize_code(iso_code), 0)

    def fee_revenue(self, iso_code: str) -> int:
        """Накопленные и ещё не выведенные комиссии."""
        return self._fees.get(normalize_code(iso_code), 0)

    def total_staked(self, iso_code: str) -> int:
        code = normalize_code(iso_code)
        with self._lock:
            return sum(p.principal for (_, c), p in self._positions.items() if c == code)

    def conservation_holds(self, iso_code: str) -> bool:
        """custody_balance == Σ principal + fee_revenue."""
        with self._lock:
            return self.custody_balance(iso_code) == self.total_staked(iso_code) + self.fee_revenue(iso_code)

    # -------------------------------------------------------------------------
    # INTERNAL
    # -------------------------------------------------------------------------

    def _split(self, currency: Currency, amount: int) -> tuple[int, int]:
        return split_fee(amount, currency.fee_bps, self.config.bps_denominator, self.config.amount_max)

    def _transfer(self, direction: str, currency: Currency, account: str, amount: int) -> None:
        """Внешний перевод; любой отказ backend-а → TransferFailed."""
        operation = getattr(self._transfers, direction)
        try:
            result = operation(currency.token_id, account, amount)
        except StakingError:
            raise
        except Exception as exc:
            logger.warning(
                "%s failed token=%s account=%s amount=%d: %s",
                direction, currency.token_id, account, amount, exc,
            )
            raise TransferFailed(f"{direction} of {amount} {currency.iso_code} for {account} failed: {exc}") from exc
        if result is False:
            logger.warning("%s rejected token=%s account=%s amount=%d", direction, currency.token_id, account, amount)
            raise TransferFailed(f"{direction} of {amount} {currency.iso_code} for {account} was rejected")

    @staticmethod
    def _check_amount(amount: int) -> None:
        if not is_strict_int(amount) or amount <= 0:
            raise InvalidAmount(f"Amount must be a positive integer, got {amount!r}")

    @staticmethod
    def _check_owner(owner: str) -> None:
        if not isinstance(owner, str) or not owner:
            raise ValueError(f"Account identifier must be a non-empty string, got {owner!r}")
