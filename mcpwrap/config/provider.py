"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class UpstreamConfig:
    """Upstream MCP tool server configuration."""
    base_url: str
    endpoint_path: str
    protocol_version: str
    client_name: str
    client_version: str
    init_timeout: float
    call_timeout: Optional[float]
    allow_fallback_session: bool
    decode_event_stream: bool

    @property
    def rpc_url(self) -> str:
        """Full URL of the JSON-RPC endpoint."""
        path = self.endpoint_path if self.endpoint_path.startswith("/") else f"/{self.endpoint_path}"
        return f"{self.base_url.rstrip('/')}{path}"


@dataclass
class SearchLimits:
    """Limits applied to task search requests and responses."""
    max_list_ids: int = 5
    max_tasks: int = 50
    recent_window_days: int = 7

    @property
    def recent_window_ms(self) -> int:
        return self.recent_window_days * 24 * 60 * 60 * 1000


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_upstream_config(self) -> UpstreamConfig:
        """Get upstream configuration."""
        ...

    def get_search_limits(self) -> SearchLimits:
        """Get task search limits."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, base_url: Optional[str] = None):
        self._base_url = base_url

    def get_upstream_config(self) -> UpstreamConfig:
        """Get upstream configuration from environment variables."""
        base_url = self._base_url or os.getenv("MCP_SERVER_URL", "http://localhost:8000")

        # 0 disables the per-call timeout and leaves it to the transport
        call_timeout = float(os.getenv("MCP_CALL_TIMEOUT", "30"))

        return UpstreamConfig(
            base_url=base_url,
            endpoint_path=os.getenv("MCP_ENDPOINT_PATH", "/mcp"),
            protocol_version=os.getenv("MCP_PROTOCOL_VERSION", "2024-11-05"),
            client_name=os.getenv("MCP_CLIENT_NAME", "n8n-wrapper"),
            client_version=os.getenv("MCP_CLIENT_VERSION", "1.0.0"),
            init_timeout=float(os.getenv("MCP_INIT_TIMEOUT", "5")),
            call_timeout=call_timeout if call_timeout > 0 else None,
            allow_fallback_session=_env_bool("MCP_SESSION_FALLBACK", "true"),
            decode_event_stream=_env_bool("MCP_DECODE_EVENT_STREAM", "false"),
        )

    def get_search_limits(self) -> SearchLimits:
        """Get task search limits from environment variables."""
        return SearchLimits(
            max_list_ids=int(os.getenv("SEARCH_MAX_LIST_IDS", "5")),
            max_tasks=int(os.getenv("SEARCH_MAX_TASKS", "50")),
            recent_window_days=int(os.getenv("SEARCH_RECENT_DAYS", "7")),
        )
