"""
Tool Registry.

Maps sanitized capability names to the toolkit tools they dispatch to.
Populated once at startup, read-only afterwards.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

from .errors import ToolNameCollisionError, ToolNotFoundError
from .models import ToolLike

logger = logging.getLogger(__name__)

NAMESPACE_SEPARATOR = "."


def sanitize_tool_name(name: str) -> str:
    """`coingecko.get_trending_coins` -> `coingecko_get_trending_coins`"""
    return name.replace(NAMESPACE_SEPARATOR, "_")


class ToolRegistry:
    """
    Lookup table from sanitized name to the original tool object.

    Each capability's run handler holds a reference to the registry
    and resolves its tool by name at call time, so the registry is the
    single source of truth for dispatch.

    Collisions (two raw names that sanitize to the same key) keep the
    last tool registered and log a warning. With strict=True they raise
    ToolNameCollisionError instead.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._tools: dict[str, Any] = {}

    def register(self, tool: ToolLike) -> str:
        name = sanitize_tool_name(tool.name)
        existing = self._tools.get(name)
        if existing is not None and existing is not tool:
            message = (
                f"Tool name collision: '{tool.name}' and '{existing.name}' "
                f"both map to '{name}'"
            )
            if self.strict:
                raise ToolNameCollisionError(message)
            logger.warning(f"{message}; keeping '{tool.name}'")

        self._tools[name] = tool
        logger.debug(f"Registered tool: {name}")
        return name

    def register_all(self, tools: Iterable[ToolLike]) -> list[str]:
        return [self.register(tool) for tool in tools]

    def lookup(self, name: str) -> Any:
        """Return the tool registered under `name` or raise ToolNotFoundError."""
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def get(self, name: str) -> Any | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools.keys())

    def items(self) -> list[tuple[str, Any]]:
        return list(self._tools.items())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def count(self) -> int:
        return len(self._tools)
