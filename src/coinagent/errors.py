"""
Exception hierarchy for coinagent.

Startup errors (configuration, discovery, registration, server start)
end up in the StartupResult or the process exit code. Tool-level errors
(lookup misses, execution failures) are turned into text by the
capability run handler and never reach the agent runtime.
"""

from __future__ import annotations


class CoinAgentError(Exception):
    """Base class for all coinagent errors."""


class ConfigurationError(CoinAgentError):
    """A required setting is missing or malformed."""


class ToolDiscoveryError(CoinAgentError):
    """The toolkit could not be queried for its tools."""


class ToolNotFoundError(CoinAgentError, KeyError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Tool not found: {name}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return f"Tool not found: {self.name}"


class ToolNameCollisionError(CoinAgentError):
    """Two distinct tools sanitize to the same capability name."""


class CapabilityRegistrationError(CoinAgentError):
    """The agent rejected a batch of capabilities."""


class AgentStartError(CoinAgentError):
    """The agent's server loop failed to start or crashed."""
