"""EventEmitter — нумерация, валидация и отправка событий одного компонента."""

import itertools
import logging
import threading
import time
from typing import Callable, Type, TypeVar

from src.core.config import LedgerConfig
from src.core.contracts import validate_event
from src.core.domain.events import LedgerEvent

from .sink import EventSink, NullEventSink

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=LedgerEvent)


def utc_now_ms() -> int:
    """Текущее время UTC в миллисекундах."""
    return int(time.time() * 1000)


class EventEmitter:
    """Присваивает seq (монотонно, начиная с 0) и ts_utc_ms, затем emit в sink.

    При config.validate_events payload проверяется по JSON Schema контракту
    до отправки.
    """

    def __init__(
        self,
        sink: EventSink | None = None,
        config: LedgerConfig | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self.sink = sink or NullEventSink()
        self.config = config or LedgerConfig()
        self.clock = clock or utc_now_ms
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def now(self) -> int:
        return self.clock()

    def build(self, event_cls: Type[E], ts_utc_ms: int | None = None, **fields) -> E:
        """Создание события с очередным seq; payload проверяется до публикации."""
        with self._lock:
            seq = next(self._seq)
        event = event_cls(
            seq=seq,
            ts_utc_ms=self.now() if ts_utc_ms is None else ts_utc_ms,
            **fields,
        )
        if self.config.validate_events:
            validate_event(event)
        return event

    def publish(self, event: LedgerEvent) -> None:
        """Доставка уже зафиксированного события.

        Состояние к этому моменту изменено, поэтому отказ sink-а не
        пробрасывается вызывающему, а пишется в лог.
        """
        try:
            self.sink.emit(event)
        except Exception:
            logger.exception("Event sink failed to deliver %s seq=%d", event.schema_name, event.seq)

    def emit(self, event_cls: Type[E], ts_utc_ms: int | None = None, **fields) -> E:
        event = self.build(event_cls, ts_utc_ms, **fields)
        self.publish(event)
        return event
