"""
Event-stream framing helpers.

The upstream may answer a POST either with a bare JSON document or with a
``text/event-stream`` body such as::

    event: message
    data: {"jsonrpc": "2.0", "id": 1, "result": {...}}

Only the framing needed to recognise such a body and, optionally, pull the
JSON payload out of its ``data:`` lines is handled here. Comments, ``id:``
and ``retry:`` fields are ignored.
"""

import json
import logging
from typing import Any, List, Union

logger = logging.getLogger(__name__)

EVENT_STREAM_MARKER = "event: message"


def is_event_stream(body: Any) -> bool:
    """True if body is text carrying the ``event: message`` marker."""
    return isinstance(body, str) and EVENT_STREAM_MARKER in body


def _split_events(text: str) -> List[str]:
    """Group ``data:`` lines into one payload per event (blank line terminates)."""
    payloads = []
    data_lines: List[str] = []
    for line in text.splitlines():
        if not line.strip():
            if data_lines:
                payloads.append("\n".join(data_lines))
                data_lines = []
            continue
        if line.startswith("data:"):
            value = line[len("data:"):]
            data_lines.append(value[1:] if value.startswith(" ") else value)
    if data_lines:
        payloads.append("\n".join(data_lines))
    return payloads


def decode_event_stream(text: str) -> Union[Any, str]:
    """
    De-frame an event-stream body.

    Args:
        text: Raw response body

    Returns:
        The JSON value of the last event whose data parses as JSON, or the
        raw text unchanged when no event does.
    """
    decoded = None
    found = False
    for payload in _split_events(text):
        try:
            decoded = json.loads(payload)
            found = True
        except ValueError:
            logger.debug(f"Skipping non-JSON event payload: {payload[:100]}")

    return decoded if found else text
