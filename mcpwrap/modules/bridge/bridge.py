import json
import logging
from typing import Any, Dict, Optional

import httpx

from mcpwrap.errors import RpcCallError, SessionInitError
from mcpwrap.modules.events import CALL_ATTEMPT, CALL_FAILURE, CALL_SUCCESS, EventRecorder
from mcpwrap.modules.rpc import (
    JsonRpcRequest,
    RequestIdGenerator,
    ToolCall,
    decode_event_stream,
    is_event_stream,
)
from mcpwrap.modules.session import SessionModule
from mcpwrap.modules.session.session import ACCEPT_HEADER

logger = logging.getLogger(__name__)

SESSION_HEADER = "mcp-session-id"


class RpcBridge:
    def __init__(
        self,
        session: SessionModule,
        client: httpx.AsyncClient,
        rpc_url: str,
        *,
        ids: Optional[RequestIdGenerator] = None,
        decode_event_stream: bool = False,
        events: Optional[EventRecorder] = None,
    ):
        """
        Initialize RPC bridge.

        Args:
            session: Session module owning the upstream session id
            client: Async HTTP client for upstream calls
            rpc_url: Upstream JSON-RPC endpoint
            ids: Request id source (shared with the session module by default)
            decode_event_stream: De-frame event-stream bodies instead of passing them through
            events: Event recorder (shared with the session module by default)
        """
        self.session = session
        self.client = client
        self.rpc_url = rpc_url
        self.ids = ids or session.ids
        self.decode_event_stream = decode_event_stream
        self.events = events or session.events

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Send one JSON-RPC request upstream.

        Args:
            method: RPC method name, forwarded without validation
            params: RPC params

        Returns:
            Parsed JSON payload, raw event-stream text, or None for an empty body

        Raises:
            RpcCallError: If no session could be obtained or the call failed

        Logic:
        1. Ensure a session exists
        2. Build the envelope with a fresh id
        3. POST with the session header
        4. On any transport failure, invalidate the session and raise
        """
        try:
            session_id = await self.session.ensure_session()
        except SessionInitError as e:
            raise RpcCallError(str(e), method=method, cause=e) from e

        envelope = JsonRpcRequest(id=self.ids.next_id(), method=method, params=params or {})
        self.events.emit(CALL_ATTEMPT, method=method, id=envelope.id, session_id=session_id)

        try:
            response = await self.client.post(
                self.rpc_url,
                json=envelope.model_dump(),
                headers={"Accept": ACCEPT_HEADER, SESSION_HEADER: session_id},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = self._interpret_body(e.response.text)
            self._record_failure(method, envelope.id, status, str(e))
            raise RpcCallError(
                f"MCP call '{method}' failed: HTTP {status}",
                method=method,
                status=status,
                body=body,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            message = str(e) or e.__class__.__name__
            self._record_failure(method, envelope.id, None, message)
            raise RpcCallError(
                f"MCP call '{method}' failed: {message}", method=method, cause=e
            ) from e

        result = self._interpret_body(response.text)
        self.events.emit(
            CALL_SUCCESS,
            method=method,
            id=envelope.id,
            status=response.status_code,
            data_type=type(result).__name__,
        )
        return result

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        """Invoke an upstream tool through ``tools/call``."""
        tool_call = ToolCall(name=name, arguments=arguments or {})
        return await self.call("tools/call", tool_call.to_params())

    async def list_tools(self) -> Any:
        return await self.call("tools/list")

    def _record_failure(self, method: str, request_id: int, status: Optional[int], message: str):
        self.events.emit(
            CALL_FAILURE,
            level=logging.ERROR,
            method=method,
            id=request_id,
            status=status,
            message=message,
        )
        self.session.invalidate(reason=f"{method} failed")

    def _interpret_body(self, text: str) -> Any:
        """Normalize an upstream body: JSON value, event-stream text, or raw text."""
        if not text.strip():
            return None

        if is_event_stream(text):
            logger.debug(f"Received event-stream response: {text[:200]}")
            if self.decode_event_stream:
                return decode_event_stream(text)
            return text

        try:
            return json.loads(text)
        except ValueError:
            return text
