"""Structured event logging for gridcalc.

Provides an event schema, a filesystem NDJSON sink, and safe emit
helpers that never raise uncaught exceptions.
"""

from gridcalc.logging.events import (
    EventLevel,
    EventType,
    GridcalcEvent,
    configure_from,
    emit,
    emit_error,
    emit_info,
    emit_warning,
    error_code_for,
    get_sink,
    make_eval_event,
    set_log_dir,
    truncate_context,
)
from gridcalc.logging.sink import EventSink

__all__ = [
    "EventLevel",
    "EventSink",
    "EventType",
    "GridcalcEvent",
    "configure_from",
    "emit",
    "emit_error",
    "emit_info",
    "emit_warning",
    "error_code_for",
    "get_sink",
    "make_eval_event",
    "set_log_dir",
    "truncate_context",
]
