"""
Shared pytest fixtures for mcpwrap tests.

This module provides common fixtures including:
- UpstreamMocker: Mock MCP tool server behind an httpx.MockTransport
- Session module / bridge instances wired to the mock upstream
- FastAPI test client utilities
"""

import json
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mcpwrap.modules.bridge import RpcBridge
from mcpwrap.modules.events import EventRecorder
from mcpwrap.modules.session import SessionModule

UPSTREAM_URL = "http://upstream.test/mcp"


# =============================================================================
# Upstream Mocking Infrastructure
# =============================================================================

@dataclass
class UpstreamResponse:
    """Represents a mocked upstream HTTP response."""
    status_code: int = 200
    json_body: Any = None
    text: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def to_httpx(self, request: httpx.Request) -> httpx.Response:
        """Convert to an httpx.Response bound to the request."""
        if self.text is not None:
            return httpx.Response(
                self.status_code, text=self.text, headers=self.headers, request=request
            )
        return httpx.Response(
            self.status_code, json=self.json_body, headers=self.headers, request=request
        )


@dataclass
class UpstreamCall:
    """Record of a JSON-RPC request received by the mock upstream."""
    method: str
    payload: Dict[str, Any]
    headers: httpx.Headers

    @property
    def params(self) -> Dict[str, Any]:
        return self.payload.get("params", {})


Responder = Union[UpstreamResponse, Exception, Callable[[httpx.Request], UpstreamResponse]]


class UpstreamMocker:
    """
    Mock MCP tool server keyed by JSON-RPC method.

    Usage:
        def test_tools(upstream, bridge):
            upstream.register("tools/list", UpstreamResponse(json_body={"result": {}}))

            result = await bridge.call("tools/list")

            assert upstream.was_called_with("tools/list")

    A registered response may be a list, consumed one entry per call with
    the last entry repeating. An Exception entry is raised as a transport
    error (use httpx.ConnectError and friends).
    """

    def __init__(self):
        self._responses: Dict[str, List[Responder]] = {}
        self._call_history: List[UpstreamCall] = []
        self._default_response = UpstreamResponse(
            json_body={"jsonrpc": "2.0", "id": 0, "result": {}}
        )
        self.register(
            "initialize",
            UpstreamResponse(
                json_body={"jsonrpc": "2.0", "id": 1, "result": {"protocolVersion": "2024-11-05"}},
                headers={"mcp-session-id": "abc-123"},
            ),
        )

    def register(self, method: str, *responses: Responder) -> "UpstreamMocker":
        """Register one or more responses for a method, returned in order."""
        self._responses[method] = list(responses)
        return self

    def set_default_response(self, response: UpstreamResponse) -> "UpstreamMocker":
        self._default_response = response
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        """MockTransport handler."""
        payload = json.loads(request.content)
        method = payload.get("method", "")
        self._call_history.append(UpstreamCall(method=method, payload=payload, headers=request.headers))

        queue = self._responses.get(method)
        if not queue:
            responder: Responder = self._default_response
        elif len(queue) > 1:
            responder = queue.pop(0)
        else:
            responder = queue[0]

        if isinstance(responder, Exception):
            raise responder
        if callable(responder) and not isinstance(responder, UpstreamResponse):
            responder = responder(request)
        return responder.to_httpx(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))

    @property
    def calls(self) -> List[UpstreamCall]:
        return self._call_history

    def calls_for(self, method: str) -> List[UpstreamCall]:
        return [c for c in self._call_history if c.method == method]

    def was_called_with(self, method: str) -> bool:
        return any(c.method == method for c in self._call_history)

    @property
    def last_call(self) -> UpstreamCall:
        return self._call_history[-1]

    def reset(self):
        """Clear call history (but keep registered responses)."""
        self._call_history = []


@pytest.fixture
def upstream():
    return UpstreamMocker()


@pytest.fixture
def events():
    return EventRecorder()


@pytest_asyncio.fixture
async def upstream_client(upstream):
    """Async HTTP client bound to the mock upstream, closed after the test."""
    client = upstream.client()
    yield client
    await client.aclose()


@pytest.fixture
def session_module(upstream_client, events):
    """Create a SessionModule talking to the mock upstream."""
    return SessionModule(upstream_client, UPSTREAM_URL, init_timeout=2.0, events=events)


@pytest.fixture
def bridge(upstream, session_module):
    """Create an RpcBridge sharing the session module's client."""
    return RpcBridge(session_module, session_module.client, UPSTREAM_URL)


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring a real upstream"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
