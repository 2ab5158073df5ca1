"""Events — sinks и emitter для событий Oracle, Registry и Ledger."""

from .emitter import EventEmitter, utc_now_ms
from .sink import (
    CompositeEventSink,
    EventSink,
    LoggingEventSink,
    NullEventSink,
    RecordingEventSink,
)

__all__ = [
    "EventEmitter",
    "utc_now_ms",
    "EventSink",
    "NullEventSink",
    "LoggingEventSink",
    "RecordingEventSink",
    "CompositeEventSink",
]
