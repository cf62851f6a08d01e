"""
mcpwrap HTTP response models.
"""

from typing import Optional

from pydantic import BaseModel, Field

from mcpwrap.modules.session import SessionState


class HealthResponse(BaseModel):
    """Local liveness response."""

    status: str = Field("healthy", description="Always 'healthy' while the process serves requests")
    timestamp: str = Field(..., description="Current server time (ISO 8601, UTC)")
    session: Optional[SessionState] = Field(
        None, description="Upstream session state, if the bridge is initialized"
    )


class ErrorResponse(BaseModel):
    """Uniform error body returned for any bridge failure."""

    error: str
