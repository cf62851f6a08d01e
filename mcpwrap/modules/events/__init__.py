"""
Events Module - Black Box Interface

Purpose: Structured, leveled emission of session and call lifecycle events
Interface: EventRecorder.emit(), events(), counts()
Hidden: History storage, log formatting

Replaceable with any event sink (pub/sub, OpenTelemetry, log shipper).
"""

from .recorder import (
    CALL_ATTEMPT,
    CALL_FAILURE,
    CALL_SUCCESS,
    SESSION_ACQUIRE_ATTEMPT,
    SESSION_ACQUIRE_FAILURE,
    SESSION_ACQUIRE_SUCCESS,
    SESSION_FALLBACK,
    SESSION_INVALIDATED,
    EventRecorder,
)

__all__ = [
    "EventRecorder",
    "SESSION_ACQUIRE_ATTEMPT",
    "SESSION_ACQUIRE_SUCCESS",
    "SESSION_ACQUIRE_FAILURE",
    "SESSION_FALLBACK",
    "SESSION_INVALIDATED",
    "CALL_ATTEMPT",
    "CALL_SUCCESS",
    "CALL_FAILURE",
]
