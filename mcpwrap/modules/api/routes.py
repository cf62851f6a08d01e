"""
REST routes for the upstream MCP tools.

Every route maps onto exactly one upstream RPC call. Failures propagate as
BridgeError and are rendered by the application's exception handler.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from mcpwrap.config.provider import SearchLimits
from mcpwrap.modules.api.models import ErrorResponse
from mcpwrap.modules.bridge import RpcBridge
from mcpwrap.modules.tasks import filter_search_result, optimize_search_params

logger = logging.getLogger(__name__)


def get_bridge(request: Request) -> RpcBridge:
    """Resolve the bridge attached to the running application."""
    bridge = getattr(request.app.state, "bridge", None)
    if bridge is None:
        raise HTTPException(503, "Service not initialized")
    return bridge


def create_tool_router(search_limits: Optional[SearchLimits] = None) -> APIRouter:
    """
    Create the tool router.

    Args:
        search_limits: Limits applied by the task search route

    Returns:
        FastAPI router with tool endpoints
    """
    limits = search_limits or SearchLimits()
    router = APIRouter(tags=["tools"], responses={500: {"model": ErrorResponse}})

    @router.get("/tools")
    async def list_tools(bridge: RpcBridge = Depends(get_bridge)):
        """List tools offered by the upstream server."""
        return await bridge.list_tools()

    @router.get("/workspace/hierarchy")
    async def get_workspace_hierarchy(bridge: RpcBridge = Depends(get_bridge)):
        return await bridge.call_tool("get_workspace_hierarchy", {})

    @router.post("/task")
    async def create_task(
        body: Optional[Dict[str, Any]] = Body(None),
        bridge: RpcBridge = Depends(get_bridge),
    ):
        return await bridge.call_tool("create_task", body or {})

    @router.get("/task/{task_id}")
    async def get_task(task_id: str, bridge: RpcBridge = Depends(get_bridge)):
        return await bridge.call_tool("get_task", {"taskId": task_id})

    @router.put("/task/{task_id}")
    async def update_task(
        task_id: str,
        body: Optional[Dict[str, Any]] = Body(None),
        bridge: RpcBridge = Depends(get_bridge),
    ):
        """Update a task; keys in the body override the path's taskId."""
        return await bridge.call_tool("update_task", {"taskId": task_id, **(body or {})})

    @router.post("/tasks/search")
    async def search_tasks(
        body: Optional[Dict[str, Any]] = Body(None),
        bridge: RpcBridge = Depends(get_bridge),
    ):
        """
        Search workspace tasks in lightweight mode.

        The request is forced into summary mode over recent tasks and the
        response is trimmed to a bounded number of slim task records.
        """
        arguments = optimize_search_params(body or {}, limits)
        logger.info(f"Calling get_workspace_tasks with optimized params ({len(str(arguments))} chars)")

        result = await bridge.call_tool("get_workspace_tasks", arguments)
        return filter_search_result(result, limits)

    @router.get("/documents")
    async def list_documents(request: Request, bridge: RpcBridge = Depends(get_bridge)):
        """List documents; query parameters are forwarded as tool arguments."""
        return await bridge.call_tool("list_documents", dict(request.query_params))

    @router.post("/document")
    async def create_document(
        body: Optional[Dict[str, Any]] = Body(None),
        bridge: RpcBridge = Depends(get_bridge),
    ):
        return await bridge.call_tool("create_document", body or {})

    @router.get("/document/{doc_id}/pages")
    async def list_document_pages(doc_id: str, bridge: RpcBridge = Depends(get_bridge)):
        return await bridge.call_tool("list_document_pages", {"documentId": doc_id})

    @router.post("/call/{tool_name}")
    async def call_tool(
        tool_name: str,
        body: Optional[Dict[str, Any]] = Body(None),
        bridge: RpcBridge = Depends(get_bridge),
    ):
        """Generic passthrough: any tool name is forwarded unchecked."""
        return await bridge.call_tool(tool_name, body or {})

    return router
