"""
coinagent — CoinGecko market-data tools served as agent capabilities.

Usage:
    import asyncio
    from coinagent import Settings, start_agent

    settings = Settings.from_env()
    result = asyncio.run(start_agent(settings))

    # Or build the pieces yourself
    registry = ToolRegistry()
    capabilities = build_capabilities(tools, registry)
    agent = create_agent(settings)
    agent.add_capabilities(capabilities)
"""

from .models import Capability, StartupResult, StartupStatus, ToolLike
from .errors import (
    AgentStartError,
    CapabilityRegistrationError,
    CoinAgentError,
    ConfigurationError,
    ToolDiscoveryError,
    ToolNameCollisionError,
    ToolNotFoundError,
)
from .config import Settings
from .registry import ToolRegistry, sanitize_tool_name
from .toolkit import discover_tools, filter_tools, load_toolkit_tools, truncate_description
from .bridge import build_capabilities, capability_to_langchain_tool, to_capability
from .agent import Agent
from .bootstrap import create_agent, main, start_agent

__version__ = "0.1.0"

__all__ = [
    # Core
    "Agent",
    "ToolRegistry",
    "Settings",
    # Pipeline
    "sanitize_tool_name",
    "discover_tools",
    "filter_tools",
    "load_toolkit_tools",
    "truncate_description",
    "to_capability",
    "build_capabilities",
    "capability_to_langchain_tool",
    "create_agent",
    "start_agent",
    "main",
    # Models
    "Capability",
    "StartupResult",
    "StartupStatus",
    "ToolLike",
    # Errors
    "CoinAgentError",
    "ConfigurationError",
    "ToolDiscoveryError",
    "ToolNotFoundError",
    "ToolNameCollisionError",
    "CapabilityRegistrationError",
    "AgentStartError",
]
