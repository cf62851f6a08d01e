"""
Session Module - Black Box Interface

Purpose: Manage the upstream MCP session lifecycle
Interface: ensure_session(), invalidate(), session_id, state
Hidden: Handshake, session id discovery, fallback generation

Replaceable with any session strategy that yields an identifier.
"""

from .session import (
    SESSION_HEADER_NAMES,
    SessionModule,
    SessionState,
    extract_session_id,
    generate_fallback_session_id,
)

__all__ = [
    "SESSION_HEADER_NAMES",
    "SessionModule",
    "SessionState",
    "extract_session_id",
    "generate_fallback_session_id",
]
