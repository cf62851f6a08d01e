#!/usr/bin/env python3
"""
mcpwrap - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the API server

All protocol logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from mcpwrap import __version__
from mcpwrap.config.provider import ConfigProvider, EnvConfigProvider
from mcpwrap.errors import BridgeError, RpcCallError
from mcpwrap.logging_config import get_logging_config
from mcpwrap.modules.api import HealthResponse, create_tool_router
from mcpwrap.modules.bridge import RpcBridge
from mcpwrap.modules.config import get_config
from mcpwrap.modules.events import EventRecorder
from mcpwrap.modules.session import SessionModule, SessionState

# Get configuration
config = get_config()

log_config.dictConfig(get_logging_config(config.get("log_level")))
logger = logging.getLogger(__name__)


def build_bridge(config_provider: ConfigProvider, client: httpx.AsyncClient) -> RpcBridge:
    """Wire the session module and bridge for the configured upstream."""
    upstream = config_provider.get_upstream_config()
    events = EventRecorder()

    session_module = SessionModule(
        client,
        upstream.rpc_url,
        protocol_version=upstream.protocol_version,
        client_name=upstream.client_name,
        client_version=upstream.client_version,
        init_timeout=upstream.init_timeout,
        allow_fallback=upstream.allow_fallback_session,
        events=events,
    )
    return RpcBridge(
        session_module,
        client,
        upstream.rpc_url,
        decode_event_stream=upstream.decode_event_stream,
        events=events,
    )


def create_app(
    bridge: Optional[RpcBridge] = None,
    config_provider: Optional[ConfigProvider] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        bridge: Pre-built bridge (tests inject one backed by a mock transport)
        config_provider: Configuration provider; defaults to the environment

    Returns:
        Configured application
    """
    provider = config_provider or EnvConfigProvider(base_url=config.get("mcp_server_url"))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle - initialize and cleanup resources.
        """
        client = None

        logger.info("Starting HTTP-to-MCP wrapper...")

        if getattr(app.state, "bridge", None) is None:
            upstream = provider.get_upstream_config()
            client = httpx.AsyncClient(timeout=upstream.call_timeout)
            app.state.bridge = build_bridge(provider, client)
            logger.info(f"MCP Server: {upstream.rpc_url}")

        logger.info("Ready to handle requests")

        yield

        # Shutdown
        logger.info("Shutting down HTTP-to-MCP wrapper...")
        if client:
            await client.aclose()
            app.state.bridge = None
        logger.info("Shutdown complete")

    app = FastAPI(
        title="mcpwrap",
        description="HTTP-to-MCP wrapper for workflow automation clients",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.bridge = bridge

    app.include_router(create_tool_router(provider.get_search_limits()))

    # Health/Monitoring Endpoints

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """
        Liveness check. Never contacts the upstream.

        Returns:
            200: Service is running
        """
        current = getattr(request.app.state, "bridge", None)
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(UTC).isoformat(),
            session=current.session.state if current else None,
        )

    @app.get("/metrics")
    async def metrics(request: Request):
        """
        Prometheus-compatible metrics endpoint.

        Returns basic metrics about the upstream session and calls.
        """
        current = getattr(request.app.state, "bridge", None)
        if not current:
            return Response(content="", status_code=503)

        ready = 1 if current.session.state is SessionState.READY else 0
        lines = [
            "# HELP mcpwrap_session_ready Whether an upstream session is cached",
            "# TYPE mcpwrap_session_ready gauge",
            f"mcpwrap_session_ready {ready}",
            "# HELP mcpwrap_events_total Lifecycle events emitted, by type",
            "# TYPE mcpwrap_events_total counter",
        ]
        for event_type, count in sorted(current.events.counts().items()):
            lines.append(f'mcpwrap_events_total{{type="{event_type}"}} {count}')

        return Response(content="\n".join(lines) + "\n", media_type="text/plain")

    # Error handlers

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        """Report any bridge failure as a flat 500."""
        if isinstance(exc, RpcCallError):
            logger.error(
                f"Error in {request.url.path}: {exc} (method={exc.method}, body={str(exc.body)[:200]})"
            )
        else:
            logger.error(f"Error in {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc) or exc.__class__.__name__})

    @app.middleware("http")
    async def unexpected_error_middleware(request: Request, call_next):
        """Keep the {error} body contract for failures no handler covers."""
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"Unexpected error in {request.url.path}: {e}")
            return JSONResponse(status_code=500, content={"error": str(e) or e.__class__.__name__})

    return app


app = create_app()


if __name__ == "__main__":
    # Use dict config for logging, not file path
    uvicorn.run(
        "mcpwrap.main:app",
        host=config.get("host"),
        port=config.get("port"),
        log_level=config.get("log_level").lower(),
        reload=config.get("debug"),
        log_config=get_logging_config(config.get("log_level")),
    )
