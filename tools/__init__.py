from .config import ConfigError, ServerConfig, configure_logging
from .connection import NearConnection
from .registry import (
    PROMPTS,
    TOOLS,
    UnknownToolError,
    call_tool,
    get_prompt,
    get_tool,
    list_prompts,
    list_tools,
)
from .service import ToolResult, ToolService

__all__ = [
    "ConfigError",
    "NearConnection",
    "PROMPTS",
    "ServerConfig",
    "TOOLS",
    "ToolResult",
    "ToolService",
    "UnknownToolError",
    "call_tool",
    "configure_logging",
    "get_prompt",
    "get_tool",
    "list_prompts",
    "list_tools",
]
