"""
mcpwrap - HTTP-to-MCP Wrapper

Exposes a plain REST surface for HTTP-only clients (workflow automation
tools such as n8n) and translates each call into a JSON-RPC request against
a remote MCP tool server.

Architecture:
- Each module is self-contained with clear interfaces
- The upstream transport is injected, never hard-wired
- All communication through defined interfaces

Modules:
- config: Environment-driven configuration
- session: Upstream MCP session acquisition and invalidation
- rpc: JSON-RPC envelopes and event-stream framing
- bridge: Session-aware JSON-RPC dispatch
- events: Structured event emission
- tasks: Task search optimization
- api: REST API models and routes
"""

__version__ = "1.0.0"
