"""
RPC Module - Black Box Interface

Purpose: JSON-RPC 2.0 envelopes and upstream wire-format handling
Interface: JsonRpcRequest, RequestIdGenerator, is_event_stream(), decode_event_stream()
Hidden: Id allocation, event-stream de-framing

Knows nothing about sessions or HTTP routing.
"""

from .envelope import JSONRPC_VERSION, JsonRpcRequest, RequestIdGenerator, ToolCall
from .framing import EVENT_STREAM_MARKER, decode_event_stream, is_event_stream

__all__ = [
    "JSONRPC_VERSION",
    "JsonRpcRequest",
    "RequestIdGenerator",
    "ToolCall",
    "EVENT_STREAM_MARKER",
    "is_event_stream",
    "decode_event_stream",
]
