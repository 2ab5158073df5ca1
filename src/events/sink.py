"""Event Sinks — доставка событий ledger внешним наблюдателям.

EventSink — протокол с единственным методом emit(event).
Формат доставки определяет конкретный sink:
- LoggingEventSink: структурированная запись в logging
- RecordingEventSink: список в памяти (тесты, инспекция)
- CompositeEventSink: fan-out в несколько sink-ов
- NullEventSink: отбрасывает события
"""

import logging
import threading
from typing import Iterable, Protocol, runtime_checkable

from src.core.contracts import validate_event
from src.core.domain.events import EventType, LedgerEvent


@runtime_checkable
class EventSink(Protocol):
    def emit(self, event: LedgerEvent) -> None: ...


class NullEventSink:
    def emit(self, event: LedgerEvent) -> None:
        return None


class LoggingEventSink:
    """Пишет каждое событие одной строкой INFO с payload в extra["event"]."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO):
        self._logger = logger or logging.getLogger("src.events")
        self._level = level

    def emit(self, event: LedgerEvent) -> None:
        payload = event.payload()
        self._logger.log(
            self._level,
            "event=%s seq=%d %s",
            payload["event_type"],
            event.seq,
            " ".join(f"{k}={v}" for k, v in payload.items() if k not in ("event_type", "seq")),
            extra={"event": payload},
        )


class RecordingEventSink:
    """Хранит события в памяти в порядке emit.

    Если validate=True, каждый payload проверяется по JSON Schema контракту
    до записи (ValidationError пробрасывается вызывающему).
    """

    def __init__(self, validate: bool = False):
        self._validate = validate
        self._events: list[LedgerEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: LedgerEvent) -> None:
        if self._validate:
            validate_event(event)
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[LedgerEvent]:
        with self._lock:
            return list(self._events)

    def of_type(self, event_type: EventType) -> list[LedgerEvent]:
        return [e for e in self.events if e.event_type == event_type]  # type: ignore[attr-defined]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


class CompositeEventSink:
    def __init__(self, sinks: Iterable[EventSink]):
        self._sinks = tuple(sinks)

    def emit(self, event: LedgerEvent) -> None:
        for sink in self._sinks:
            sink.emit(event)
