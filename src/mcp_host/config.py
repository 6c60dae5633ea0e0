"""Configuration module for mcp-host using pydantic-settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant. Use the available tools when needed."


class McpHostSettings(BaseSettings):
    """Main configuration settings for mcp-host.

    All settings can be overridden via environment variables with the MCP_HOST_
    prefix. For example, MCP_HOST_COMPLETION_MODEL will override the
    completion_model setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Completion service
    completion_backend: Literal["openai", "ollama"] = "openai"
    completion_base_url: str = "https://api.openai.com/v1"
    completion_api_key: str | None = None
    completion_model: str = "gpt-4o-mini"
    completion_timeout: float = 60.0

    # Ollama (completion_backend="ollama")
    ollama_host: str = "http://localhost:11434"

    # Tool provider
    tool_provider: Literal["mcp", "local"] = "mcp"
    mcp_server_url: str | None = None
    mcp_api_key: str | None = None
    mcp_timeout: float = 30.0
    mcp_retry_attempts: int = Field(default=3, ge=1)
    mcp_retry_delay_ms: int = Field(default=1000, ge=0)

    # Orchestration
    max_tool_rounds: int = Field(default=10, ge=1)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="MCP_HOST_")
