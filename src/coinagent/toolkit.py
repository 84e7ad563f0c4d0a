"""
Toolkit discovery — loads the CoinGecko tools from the GOAT SDK.

Usage:
    tools = await discover_tools(lambda: load_toolkit_tools(settings))
    tools = filter_tools(tools)
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Iterable, Sequence

from .config import Settings
from .errors import ToolDiscoveryError

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 1000
TRUNCATION_MARKER = "... (truncated)"

# Chain-identification tools come with every wallet and mean nothing
# to a market-data agent.
DEFAULT_EXCLUDE_PATTERNS = ("get_chain",)

ToolLoader = Callable[[], Any]


def load_toolkit_tools(settings: Settings) -> list[Any]:
    """
    Query the GOAT SDK for the CoinGecko plugin's tools.

    The wallet is a read-only web3 client pointed at the configured RPC
    endpoint: it has no account and never signs anything, it only
    satisfies get_tools().
    """
    from goat import get_tools
    from goat_plugins.coingecko import CoinGeckoPluginOptions, coingecko
    from goat_wallets.web3 import Web3EVMWalletClient
    from web3 import Web3

    try:
        wallet = Web3EVMWalletClient(Web3(Web3.HTTPProvider(settings.rpc_provider_url)))
        return list(get_tools(
            wallet,
            [coingecko(CoinGeckoPluginOptions(api_key=settings.coingecko_api_key))],
        ))
    except Exception as e:
        raise ToolDiscoveryError(f"Failed to load toolkit tools: {e}") from e


def truncate_description(
    description: str | None,
    limit: int = MAX_DESCRIPTION_LENGTH,
) -> str:
    if not description:
        return ""
    if len(description) <= limit:
        return description
    return description[:limit] + TRUNCATION_MARKER


async def discover_tools(loader: ToolLoader) -> list[Any]:
    """
    Run the loader and log what it found.

    The loader may be sync or async. Its failures propagate; anything
    other than a ToolDiscoveryError is wrapped in one.
    """
    try:
        result = loader()
        if inspect.isawaitable(result):
            result = await result
        tools = list(result)
    except ToolDiscoveryError:
        raise
    except Exception as e:
        raise ToolDiscoveryError(f"Tool discovery failed: {e}") from e

    logger.info("=== Available Tools ===")
    for index, tool in enumerate(tools):
        logger.info(f"[{index}] Tool Name: {tool.name}")
        description = getattr(tool, "description", None) or ""
        if len(description) > MAX_DESCRIPTION_LENGTH:
            logger.warning(
                f"Long description on {tool.name} ({len(description)} chars), "
                f"truncating to {MAX_DESCRIPTION_LENGTH}"
            )
    return tools


def filter_tools(
    tools: Iterable[Any],
    exclude: Sequence[str] = DEFAULT_EXCLUDE_PATTERNS,
) -> list[Any]:
    """Drop tools whose raw name contains any of the exclusion substrings."""
    kept = [t for t in tools if not any(pattern in t.name for pattern in exclude)]
    logger.info(f"Filtered tools: {len(kept)}")
    return kept
