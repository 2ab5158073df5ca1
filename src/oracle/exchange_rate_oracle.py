"""Exchange Rate Oracle — хранилище направленных fixed-point курсов.

Конвенция курса (см. src.core.domain.exchange_rate):
    rate = (единиц to_code за одну единицу from_code) × rate_scale
    USD→EGP = 4859 → 1 USD = 0.4859 EGP

Правила:
- Запись (set_rate) — только администратор, last write wins, без истории.
- Чтение (get_rate) — только точная упорядоченная пара. Никаких
  fallback-ов на 1:1 (даже для A→A) или на обратный курс.
- Коды валют нормализуются в верхний регистр и не обязаны быть
  зарегистрированы в Registry.

Конкурентность: single writer (RLock) + copy-on-write снапшот для чтения.
"""

import logging
import threading
from typing import Callable

from src.access.guard import Authorizer, admin_only
from src.core.config import LedgerConfig
from src.core.domain.events import RateChanged
from src.core.domain.currency import normalize_code
from src.core.domain.exchange_rate import ExchangeRate
from src.core.errors import InvalidRate, RateNotFound
from src.core.math.fixed_point import is_strict_int
from src.events.emitter import EventEmitter
from src.events.sink import EventSink

logger = logging.getLogger(__name__)


class ExchangeRateOracle:
    """Oracle направленных курсов."""

    def __init__(
        self,
        authorizer: Authorizer,
        event_sink: EventSink | None = None,
        config: LedgerConfig | None = None,
        clock: Callable[[], int] | None = None,
    ):
        """
        Args:
            authorizer: backend авторизации (is_admin)
            event_sink: получатель событий RateChanged
            config: конфигурация (rate_scale, amount_max)
            clock: источник времени UTC в миллисекундах
        """
        if not isinstance(authorizer, Authorizer):
            raise TypeError("ExchangeRateOracle requires an Authorizer")
        self._authorizer = authorizer
        self.config = config or LedgerConfig()
        self._events = EventEmitter(event_sink, self.config, clock)

        self._lock = threading.RLock()
        # Снапшот: заменяется целиком при каждой записи
        self._rates: dict[tuple[str, str], ExchangeRate] = {}
        self._version = 0

    # -------------------------------------------------------------------------
    # WRITE
    # -------------------------------------------------------------------------

    @admin_only
    def set_rate(self, caller: str, from_code: str, to_code: str, rate: int) -> ExchangeRate:
        """Вставка/перезапись курса from_code→to_code.

        Raises:
            Unauthorized: caller не администратор
            InvalidRate: rate <= 0, не целое, больше amount_max, или пустой код
        """
        src_code = normalize_code(from_code)
        dst_code = normalize_code(to_code)
        if not src_code or not dst_code:
            raise InvalidRate(f"Currency codes must be non-empty strings: {from_code!r}, {to_code!r}")
        if not is_strict_int(rate) or rate <= 0:
            raise InvalidRate(f"Rate must be a positive integer, got {rate!r}")
        if rate > self.config.amount_max:
            raise InvalidRate(f"Rate {rate} exceeds amount_max {self.config.amount_max}")

        with self._lock:
            pair = (src_code, dst_code)
            previous = self._rates.get(pair)
            record = ExchangeRate(
                from_code=src_code,
                to_code=dst_code,
                rate=rate,
                updated_ts_utc_ms=self._events.now(),
            )
            event = self._events.build(
                RateChanged,
                ts_utc_ms=record.updated_ts_utc_ms,
                from_code=src_code,
                to_code=dst_code,
                rate=rate,
                previous_rate=previous.rate if previous else None,
                admin=caller,
            )

            rates = dict(self._rates)
            rates[pair] = record
            self._rates = rates
            self._version += 1

            self._events.publish(event)

        logger.info(
            "Rate set %s->%s = %d (%s), previous=%s",
            src_code,
            dst_code,
            rate,
            record.as_decimal_str(self.config.rate_scale),
            previous.rate if previous else None,
        )
        return record

    # -------------------------------------------------------------------------
    # READ
    # -------------------------------------------------------------------------

    def get_exchange_rate(self, from_code: str, to_code: str) -> ExchangeRate:
        """
        Raises:
            RateNotFound: для упорядоченной пары курс не задан
        """
        pair = (normalize_code(from_code), normalize_code(to_code))
        record = self._rates.get(pair)
        if record is None:
            raise RateNotFound(f"No exchange rate for {pair[0]}->{pair[1]}")
        return record

    def get_rate(self, from_code: str, to_code: str) -> int:
        """Курс from_code→to_code (× rate_scale).

        Raises:
            RateNotFound: для упорядоченной пары курс не задан
        """
        return self.get_exchange_rate(from_code, to_code).rate

    def has_rate(self, from_code: str, to_code: str) -> bool:
        return (normalize_code(from_code), normalize_code(to_code)) in self._rates

    def list_rates(self) -> list[ExchangeRate]:
        """Снапшот всех курсов в порядке первой вставки пары."""
        return list(self._rates.values())

    @property
    def version(self) -> int:
        """Счётчик успешных записей."""
        return self._version

    @property
    def authorizer(self) -> Authorizer:
        return self._authorizer

    @property
    def rate_scale(self) -> int:
        return self.config.rate_scale
