"""
API Module - Black Box Interface

Purpose: HTTP routing and module orchestration
Interface: REST API endpoints
Hidden: Route-to-tool mapping, request body handling

The API module only orchestrates - it contains no protocol logic.
All upstream interaction is delegated to the bridge module.
"""

from .models import ErrorResponse, HealthResponse
from .routes import create_tool_router, get_bridge

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "create_tool_router",
    "get_bridge",
]
