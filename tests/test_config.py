import pytest

from mcpwrap.config.provider import EnvConfigProvider
from mcpwrap.modules.config import ConfigModule


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "MCP_SERVER_URL",
        "PORT",
        "API_PORT",
        "API_HOST",
        "LOG_LEVEL",
        "DEBUG",
        "MCP_ENDPOINT_PATH",
        "MCP_CALL_TIMEOUT",
        "MCP_SESSION_FALLBACK",
        "MCP_DECODE_EVENT_STREAM",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = ConfigModule()

    assert config.get("mcp_server_url") == "http://localhost:8000"
    assert config.get("port") == 3000
    assert config.get("host") == "0.0.0.0"
    assert config.get("debug") is False


def test_port_prefers_platform_variable(clean_env):
    clean_env.setenv("PORT", "9000")
    clean_env.setenv("API_PORT", "8080")

    assert ConfigModule().get("port") == 9000


def test_server_url_trailing_slash_stripped(clean_env):
    clean_env.setenv("MCP_SERVER_URL", "https://tools.example.test/")

    assert ConfigModule().get("mcp_server_url") == "https://tools.example.test"


def test_invalid_server_url_rejected(clean_env):
    clean_env.setenv("MCP_SERVER_URL", "ftp://nope")

    with pytest.raises(ValueError, match="MCP_SERVER_URL"):
        ConfigModule()


def test_missing_required_key_rejected(clean_env):
    clean_env.setenv("LOG_LEVEL", "")

    with pytest.raises(ValueError, match="log_level"):
        ConfigModule()


def test_schema_lists_required_keys():
    schema = ConfigModule.get_config_schema()

    assert "mcp_server_url" in schema["required"]
    assert "debug" in schema["optional"]


def test_upstream_config(clean_env):
    clean_env.setenv("MCP_CALL_TIMEOUT", "0")
    clean_env.setenv("MCP_SESSION_FALLBACK", "false")

    upstream = EnvConfigProvider(base_url="https://tools.example.test/").get_upstream_config()

    assert upstream.rpc_url == "https://tools.example.test/mcp"
    assert upstream.call_timeout is None
    assert upstream.init_timeout == 5.0
    assert upstream.allow_fallback_session is False
    assert upstream.decode_event_stream is False
    assert upstream.protocol_version == "2024-11-05"


def test_endpoint_path_without_leading_slash(clean_env):
    clean_env.setenv("MCP_ENDPOINT_PATH", "rpc")

    upstream = EnvConfigProvider(base_url="http://h").get_upstream_config()

    assert upstream.rpc_url == "http://h/rpc"


def test_search_limits_defaults(clean_env):
    limits = EnvConfigProvider().get_search_limits()

    assert (limits.max_list_ids, limits.max_tasks, limits.recent_window_days) == (5, 50, 7)
    assert limits.recent_window_ms == 7 * 24 * 60 * 60 * 1000
