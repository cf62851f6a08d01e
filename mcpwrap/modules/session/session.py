import logging
import re
import time
import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from mcpwrap.errors import SessionInitError
from mcpwrap.modules.events import (
    SESSION_ACQUIRE_ATTEMPT,
    SESSION_ACQUIRE_FAILURE,
    SESSION_ACQUIRE_SUCCESS,
    SESSION_FALLBACK,
    SESSION_INVALIDATED,
    EventRecorder,
)
from mcpwrap.modules.rpc import RequestIdGenerator, is_event_stream

logger = logging.getLogger(__name__)

# Checked in order
SESSION_HEADER_NAMES = ("mcp-session-id", "x-session-id")

# Matches sessionId=abc, sessionId: abc and "sessionId":"abc"; ids with
# characters outside [a-f0-9-] do not match at all
_SESSION_ID_PATTERN = re.compile(r'sessionId"?\s*[=:]\s*"?([a-f0-9-]+)(?![\w-])', re.IGNORECASE)

ACCEPT_HEADER = "application/json, text/event-stream"


class SessionState(str, Enum):
    """Session states observable by the bridge."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


def extract_session_id(text: Optional[str]) -> Optional[str]:
    """
    Pull a session id out of a free-text or event-stream body.

    Only ids made of hex digits and dashes are recognised; anything else is
    left for the fallback.

    Args:
        text: Response body

    Returns:
        The first matching session id, or None
    """
    if not text:
        return None
    match = _SESSION_ID_PATTERN.search(text)
    return match.group(1) if match else None


def generate_fallback_session_id() -> str:
    """Synthesize ``session_<epoch millis>_<random token>``."""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:13]}"


class SessionModule:
    def __init__(
        self,
        client: httpx.AsyncClient,
        rpc_url: str,
        *,
        protocol_version: str = "2024-11-05",
        client_name: str = "n8n-wrapper",
        client_version: str = "1.0.0",
        init_timeout: float = 5.0,
        allow_fallback: bool = True,
        ids: Optional[RequestIdGenerator] = None,
        events: Optional[EventRecorder] = None,
    ):
        """
        Initialize session module.

        Args:
            client: Async HTTP client used for the handshake
            rpc_url: Upstream JSON-RPC endpoint
            protocol_version: MCP protocol version offered in ``initialize``
            client_name: Client identity reported to the upstream
            client_version: Client version reported to the upstream
            init_timeout: Handshake timeout in seconds
            allow_fallback: Synthesize a local id when the upstream offers none
            ids: Request id source shared with the bridge
            events: Event recorder for lifecycle events
        """
        self.client = client
        self.rpc_url = rpc_url
        self.protocol_version = protocol_version
        self.client_name = client_name
        self.client_version = client_version
        self.init_timeout = init_timeout
        self.allow_fallback = allow_fallback
        self.ids = ids or RequestIdGenerator()
        self.events = events or EventRecorder()

        self._session_id: Optional[str] = None
        self._initialized = False
        self._acquired_at: Optional[datetime] = None
        self._source: Optional[str] = None

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def acquired_at(self) -> Optional[datetime]:
        return self._acquired_at

    @property
    def source(self) -> Optional[str]:
        """Where the cached id came from: header, body or fallback."""
        return self._source

    @property
    def state(self) -> SessionState:
        if self._initialized and self._session_id:
            return SessionState.READY
        return SessionState.UNINITIALIZED

    async def ensure_session(self) -> str:
        """
        Return a usable session id, acquiring one if none is cached.

        Returns:
            Session id

        Raises:
            SessionInitError: If the handshake yields no id and fallback is disabled

        Logic:
        1. Return the cached id when READY (no network activity)
        2. Send ``initialize`` and read the id from response headers
        3. Otherwise scan the response body for a ``sessionId`` token
        4. Otherwise synthesize a local fallback id
        """
        if self.state is SessionState.READY:
            return self._session_id

        session_id, source = await self._handshake()

        if not session_id:
            if not self.allow_fallback:
                raise SessionInitError("Failed to initialize MCP client: no session id available")
            session_id, source = generate_fallback_session_id(), "fallback"
            self.events.emit(SESSION_FALLBACK, level=logging.WARNING, session_id=session_id)

        # Concurrent acquisitions may race here; the last one wins
        self._session_id = session_id
        self._source = source
        self._initialized = True
        self._acquired_at = datetime.now(UTC)

        self.events.emit(SESSION_ACQUIRE_SUCCESS, session_id=session_id, source=source)
        return session_id

    def invalidate(self, reason: Optional[str] = None) -> None:
        """Forget the cached session so the next call performs a fresh handshake."""
        previous = self._session_id
        self._session_id = None
        self._initialized = False
        self._acquired_at = None
        self._source = None
        self.events.emit(
            SESSION_INVALIDATED, level=logging.WARNING, session_id=previous, reason=reason
        )

    def _initialize_request(self) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": self.ids.next_id(),
            "method": "initialize",
            "params": {
                "protocolVersion": self.protocol_version,
                "capabilities": {"tools": {}},
                "clientInfo": {"name": self.client_name, "version": self.client_version},
            },
        }

    async def _handshake(self) -> tuple[Optional[str], Optional[str]]:
        """
        Send ``initialize`` and look for a session id in the response.

        Handshake failures are logged and reported as "no id"; they never
        propagate.

        Returns:
            Tuple of (session_id or None, source or None)
        """
        self.events.emit(SESSION_ACQUIRE_ATTEMPT, url=self.rpc_url)

        try:
            response = await self.client.post(
                self.rpc_url,
                json=self._initialize_request(),
                headers={"Accept": ACCEPT_HEADER},
                timeout=self.init_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.events.emit(
                SESSION_ACQUIRE_FAILURE,
                level=logging.ERROR,
                status=e.response.status_code,
                body=e.response.text[:300],
                message=str(e),
            )
            return None, None
        except httpx.HTTPError as e:
            self.events.emit(
                SESSION_ACQUIRE_FAILURE,
                level=logging.ERROR,
                status=None,
                message=str(e) or e.__class__.__name__,
            )
            return None, None

        for header in SESSION_HEADER_NAMES:
            session_id = response.headers.get(header)
            if session_id:
                return session_id, "header"

        body = response.text
        if is_event_stream(body):
            logger.debug(f"Received event-stream handshake response: {body[:300]}")

        session_id = extract_session_id(body)
        if session_id:
            logger.info("Extracted session id from handshake response body")
            return session_id, "body"

        return None, None
