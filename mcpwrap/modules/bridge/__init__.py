"""
Bridge Module - Black Box Interface

Purpose: Turn one logical call into one session-scoped upstream JSON-RPC request
Interface: call(), call_tool(), list_tools()
Hidden: Envelope construction, header negotiation, response interpretation

Relies on the session module for a usable session id before every call.
"""

from .bridge import RpcBridge

__all__ = ["RpcBridge"]
