"""
Data models for coinagent.

Enums, dataclasses, and type definitions used across the system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable


# ── Enums ────────────────────────────────────────────────────

class StartupStatus(str, Enum):
    READY = "ready"  # capabilities registered, serving not requested
    STOPPED = "stopped"  # served, then shut down cleanly
    REGISTRATION_FAILED = "registration_failed"
    START_FAILED = "start_failed"


# ── Toolkit contract ─────────────────────────────────────────

@runtime_checkable
class ToolLike(Protocol):
    """
    What coinagent needs from a toolkit tool.

    GOAT's ToolBase satisfies this: `parameters` is a pydantic model
    class, and `execute` may be sync or return an awaitable.
    """
    name: str
    description: str
    parameters: Any

    def execute(self, params: dict[str, Any]) -> Any: ...


RunHandler = Callable[[dict[str, Any]], Awaitable[str]]


# ── Core data models ─────────────────────────────────────────

@dataclass(frozen=True)
class Capability:
    """A tool adapted for the agent runtime."""
    name: str
    description: str
    schema: Any  # pydantic model class or JSON-schema dict
    run: RunHandler = field(compare=False, repr=False)


@dataclass
class StartupResult:
    """What the bootstrap reports once startup is over."""
    status: StartupStatus
    capabilities: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (StartupStatus.READY, StartupStatus.STOPPED)
