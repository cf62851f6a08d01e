"""
JSON-RPC request envelopes.

These models define the structure of every request sent to the
upstream tool server.
"""

import threading
import time
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

JSONRPC_VERSION = "2.0"


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: int = Field(..., description="Request identifier, unique for the process lifetime")
    method: str = Field(..., description="RPC method name, forwarded verbatim")
    params: Dict[str, Any] = Field(default_factory=dict)


class ToolCall(BaseModel):
    """A logical tool invocation requested over HTTP."""

    name: str = Field(..., min_length=1, description="Upstream tool name")
    arguments: Dict[str, Any] = Field(default_factory=dict)

    def to_params(self) -> Dict[str, Any]:
        """Params for a ``tools/call`` request."""
        return {"name": self.name, "arguments": self.arguments}


class RequestIdGenerator:
    """
    Millisecond-timestamp request ids.

    Two requests issued within the same millisecond would collide on a plain
    timestamp, so each id is bumped past the previous one.
    """

    def __init__(self, clock=None):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            candidate = self._clock()
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate

    @property
    def last_id(self) -> Optional[int]:
        return self._last or None
