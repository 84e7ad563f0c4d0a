"""
Bridge between toolkit tools and agent capabilities.

Converts GOAT tools into Capability objects whose run handlers dispatch
through the ToolRegistry, and capabilities into LangChain
StructuredTools for the agent's LLM loop.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Mapping
from typing import Any, Iterable

from langchain_core.tools import StructuredTool
from pydantic import BaseModel

from .models import Capability, ToolLike
from .registry import ToolRegistry, sanitize_tool_name
from .toolkit import truncate_description

logger = logging.getLogger(__name__)


def format_result(result: Any) -> str:
    """Strings pass through; structured values become pretty-printed JSON."""
    if isinstance(result, str):
        return result
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    if result is None or isinstance(result, (Mapping, list, tuple)):
        return json.dumps(result, indent=2, default=str)
    return str(result)


def to_capability(tool: ToolLike, registry: ToolRegistry) -> Capability:
    """
    Wrap a toolkit tool as a capability.

    The run handler resolves the tool through `registry` on every call
    and reports any failure as text, so one broken tool never takes the
    agent down.
    """
    name = sanitize_tool_name(tool.name)

    async def run(args: dict[str, Any]) -> str:
        try:
            original = registry.lookup(name)
            response = original.execute(args)
            if inspect.isawaitable(response):
                response = await response
            return format_result(response)
        except Exception as e:
            logger.error(f"Error in {name}: {e}")
            return f"Error running {name}: {str(e) or 'Unknown error'}"

    return Capability(
        name=name,
        description=truncate_description(getattr(tool, "description", None)),
        schema=getattr(tool, "parameters", None),
        run=run,
    )


def build_capabilities(tools: Iterable[ToolLike], registry: ToolRegistry) -> list[Capability]:
    """
    Register every tool, then adapt one capability per registry entry.

    Tools whose names collide after sanitizing produce a single
    capability bound to whichever tool the registry kept.
    """
    registry.register_all(tools)
    capabilities = [to_capability(tool, registry) for _, tool in registry.items()]
    logger.info(f"Adapted {len(capabilities)} capabilities")
    return capabilities


def capability_to_langchain_tool(capability: Capability) -> StructuredTool:
    """Expose a capability to a LangChain agent as an async StructuredTool."""

    async def _call(**kwargs: Any) -> str:
        return await capability.run(kwargs)

    schema = capability.schema
    if schema is None:
        schema = {"type": "object", "properties": {}}

    return StructuredTool.from_function(
        coroutine=_call,
        name=capability.name,
        description=capability.description or capability.name,
        args_schema=schema,
        infer_schema=False,
    )
