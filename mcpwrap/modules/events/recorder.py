import logging
from collections import Counter, deque
from datetime import UTC, datetime
from typing import Any, Deque, Dict, List, Optional

logger = logging.getLogger(__name__)

SESSION_ACQUIRE_ATTEMPT = "session.acquire.attempt"
SESSION_ACQUIRE_SUCCESS = "session.acquire.success"
SESSION_ACQUIRE_FAILURE = "session.acquire.failure"
SESSION_FALLBACK = "session.fallback"
SESSION_INVALIDATED = "session.invalidated"
CALL_ATTEMPT = "rpc.call.attempt"
CALL_SUCCESS = "rpc.call.success"
CALL_FAILURE = "rpc.call.failure"


class EventRecorder:
    def __init__(self, history_size: int = 1000):
        """
        Initialize event recorder.

        Args:
            history_size: Number of most recent events kept in memory
        """
        self._history: Deque[Dict[str, Any]] = deque(maxlen=history_size)
        self._counts: Counter = Counter()

    def emit(self, event_type: str, level: int = logging.INFO, **data: Any) -> Dict[str, Any]:
        """
        Record an event and log it.

        The event fields travel in the log record's ``extra`` so handlers can
        render them structurally.

        Args:
            event_type: Dotted event name (e.g. ``session.acquire.success``)
            level: Logging level for the emitted record
            **data: Event payload

        Returns:
            The recorded event
        """
        event = {
            "type": event_type,
            "timestamp": datetime.now(UTC).isoformat(),
            "level": logging.getLevelName(level),
            "data": data,
        }
        self._history.append(event)
        self._counts[event_type] += 1

        logger.log(level, event_type, extra={"event": event_type, "event_data": data})
        return event

    def events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get recorded events, optionally only those of one type."""
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e["type"] == event_type]

    def counts(self) -> Dict[str, int]:
        """Get the number of events emitted per type since creation or last clear."""
        return dict(self._counts)

    def clear(self) -> None:
        self._history.clear()
        self._counts.clear()
