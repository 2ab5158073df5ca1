"""Currency Registry — append-only реестр валют, принятых к стейкингу.

Правила:
- add_currency — только администратор.
- iso_code и token_id уникальны; fee_bps ∈ [0, max_fee_bps].
- Валюты неизменяемы и не удаляются: удаление валюты с открытыми
  позициями нарушило бы conservation-инвариант ledger-а.
- fee_bps — применяемая комиссия; fee_tier — только метаданные.

Конкурентность: single writer (RLock) + copy-on-write снапшот для чтения.
"""

import logging
import re
import threading
from typing import Callable

from src.access.guard import Authorizer, admin_only
from src.core.config import LedgerConfig
from src.core.domain.currency import ISO_CODE_PATTERN, Currency, FeeTier, normalize_code
from src.core.domain.events import CurrencyAdded
from src.core.errors import CurrencyNotFound, DuplicateCode, DuplicateToken, InvalidFee
from src.core.math.fixed_point import is_strict_int
from src.events.emitter import EventEmitter
from src.events.sink import EventSink

logger = logging.getLogger(__name__)

_ISO_CODE_RE = re.compile(ISO_CODE_PATTERN)


class CurrencyRegistry:
    """Реестр валют."""

    def __init__(
        self,
        authorizer: Authorizer,
        event_sink: EventSink | None = None,
        config: LedgerConfig | None = None,
        clock: Callable[[], int] | None = None,
    ):
        if not isinstance(authorizer, Authorizer):
            raise TypeError("CurrencyRegistry requires an Authorizer")
        self._authorizer = authorizer
        self.config = config or LedgerConfig()
        self._events = EventEmitter(event_sink, self.config, clock)

        self._lock = threading.RLock()
        # Снапшоты: заменяются целиком при каждой записи
        self._by_code: dict[str, Currency] = {}
        self._by_token: dict[str, Currency] = {}
        self._ordered: tuple[Currency, ...] = ()

    # -------------------------------------------------------------------------
    # WRITE
    # -------------------------------------------------------------------------

    @admin_only
    def add_currency(
        self,
        caller: str,
        token_id: str,
        iso_code: str,
        fee_bps: int,
        fee_tier: FeeTier | int | str,
    ) -> int:
        """Регистрация валюты.

        Args:
            caller: вызывающий (должен быть администратором)
            token_id: ссылка на внешний контракт актива
            iso_code: код валюты, 3-8 символов A-Z/0-9 (регистр нормализуется)
            fee_bps: комиссия в basis points
            fee_tier: FeeTier, его порядковый номер (0 = Tier1) или имя

        Returns:
            currency_id — стабильный идентификатор (порядок регистрации)

        Raises:
            Unauthorized: caller не администратор
            InvalidFee: fee_bps не целое или вне [0, max_fee_bps]
            DuplicateCode: iso_code уже зарегистрирован
            DuplicateToken: token_id уже зарегистрирован
            ValueError: некорректный формат iso_code, token_id или fee_tier
        """
        if not is_strict_int(fee_bps) or not 0 <= fee_bps <= self.config.max_fee_bps:
            raise InvalidFee(f"fee_bps must be an integer in [0, {self.config.max_fee_bps}], got {fee_bps!r}")

        code = normalize_code(iso_code)
        if not _ISO_CODE_RE.match(code):
            raise ValueError(f"Invalid ISO code: {iso_code!r}")
        if not isinstance(token_id, str) or not token_id:
            raise ValueError(f"token_id must be a non-empty string, got {token_id!r}")
        tier = FeeTier.coerce(fee_tier)

        with self._lock:
            if code in self._by_code:
                logger.warning("Duplicate currency code %s rejected", code)
                raise DuplicateCode(f"Currency {code} is already registered")
            if token_id in self._by_token:
                logger.warning("Duplicate token %s rejected (code %s)", token_id, code)
                raise DuplicateToken(
                    f"Token {token_id} is already registered as {self._by_token[token_id].iso_code}"
                )

            currency = Currency(
                currency_id=len(self._ordered),
                token_id=token_id,
                iso_code=code,
                fee_bps=fee_bps,
                fee_tier=tier,
                registered_ts_utc_ms=self._events.now(),
            )
            event = self._events.build(
                CurrencyAdded,
                ts_utc_ms=currency.registered_ts_utc_ms,
                currency_id=currency.currency_id,
                token_id=token_id,
                iso_code=code,
                fee_bps=fee_bps,
                fee_tier=tier,
                admin=caller,
            )

            self._by_code = {**self._by_code, code: currency}
            self._by_token = {**self._by_token, token_id: currency}
            self._ordered = self._ordered + (currency,)

            self._events.publish(event)

        if not currency.tier_matches_fee:
            logger.debug(
                "Currency %s: fee_bps=%d differs from %s nominal %d bps (tier is informational)",
                code,
                fee_bps,
                tier.value,
                tier.nominal_bps,
            )
        logger.info(
            "Currency added id=%d code=%s token=%s fee_bps=%d tier=%s",
            currency.currency_id,
            code,
            token_id,
            fee_bps,
            tier.value,
        )
        return currency.currency_id

    # -------------------------------------------------------------------------
    # READ
    # -------------------------------------------------------------------------

    @property
    def authorizer(self) -> Authorizer:
        return self._authorizer

    def get_currency(self, iso_code: str) -> Currency:
        """
        Raises:
            CurrencyNotFound: iso_code не зарегистрирован
        """
        currency = self._by_code.get(normalize_code(iso_code))
        if currency is None:
            raise CurrencyNotFound(f"Currency {iso_code!r} is not registered")
        return currency

    def get_currency_by_token(self, token_id: str) -> Currency:
        currency = self._by_token.get(token_id)
        if currency is None:
            raise CurrencyNotFound(f"Token {token_id!r} is not registered")
        return currency

    def is_registered(self, iso_code: str) -> bool:
        return normalize_code(iso_code) in self._by_code

    def list_currencies(self) -> list[Currency]:
        """Снапшот валют в порядке регистрации (новый список при каждом вызове)."""
        return list(self._ordered)

    @property
    def version(self) -> int:
        """Счётчик успешных записей (совпадает с количеством валют)."""
        return len(self._ordered)
