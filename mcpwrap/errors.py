"""
mcpwrap exceptions.

Every failure the bridge surfaces to the HTTP layer derives from
``BridgeError`` so a single handler can report it.
"""

from typing import Any, Optional


class BridgeError(RuntimeError):
    """Base class for wrapper errors."""


class SessionInitError(BridgeError):
    """Raised when no usable upstream session identifier could be obtained."""


class RpcCallError(BridgeError):
    """Raised when an upstream JSON-RPC call fails at transport or protocol level."""

    def __init__(
        self,
        message: str,
        *,
        method: Optional[str] = None,
        status: Optional[int] = None,
        body: Optional[Any] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.message = message
        self.method = method
        self.status = status
        self.body = body
        self.cause = cause
        status_hint = f" (status={status})" if status is not None else ""
        super().__init__(f"{message}{status_hint}")
