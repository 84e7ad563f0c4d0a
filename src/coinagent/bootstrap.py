"""
Bootstrap — discovery -> filter -> registry -> capabilities -> agent -> serve.

Usage:
    settings = Settings.from_env()
    result = asyncio.run(start_agent(settings))
    if not result.ok:
        ...

Or from the command line:
    coinagent --dry-run
    coinagent --config coinagent.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from .agent import Agent
from .bridge import build_capabilities
from .config import Settings, parse_log_level
from .errors import AgentStartError, CapabilityRegistrationError, CoinAgentError, ConfigurationError
from .models import Capability, StartupResult, StartupStatus
from .prompts import SYSTEM_PROMPT
from .registry import ToolRegistry
from .toolkit import ToolLoader, discover_tools, filter_tools, load_toolkit_tools

logger = logging.getLogger(__name__)


def create_agent(settings: Settings) -> Agent:
    return Agent(
        system_prompt=SYSTEM_PROMPT,
        api_key=settings.openserv_api_key,
        model=settings.model,
        llm_api_key=settings.openai_api_key,
        host=settings.host,
        port=settings.port,
    )


async def prepare_capabilities(
    settings: Settings,
    loader: ToolLoader | None = None,
) -> tuple[ToolRegistry, list[Capability]]:
    """
    Discover, filter and adapt the toolkit's tools.

    Discovery failures propagate to the caller.
    """
    if loader is None:
        loader = lambda: load_toolkit_tools(settings)  # noqa: E731

    tools = await discover_tools(loader)
    tools = filter_tools(tools, settings.exclude_patterns)

    registry = ToolRegistry(strict=settings.strict_names)
    capabilities = build_capabilities(tools, registry)
    return registry, capabilities


async def start_agent(
    settings: Settings,
    loader: ToolLoader | None = None,
    agent: Agent | None = None,
    serve: bool = True,
) -> StartupResult:
    """
    Bring the agent up and report how far it got.

    Registration and server failures are logged and returned as a
    failed StartupResult; discovery and configuration errors raise.
    """
    _, capabilities = await prepare_capabilities(settings, loader)
    names = [c.name for c in capabilities]

    agent = agent or create_agent(settings)
    logger.info(f"Adding {len(capabilities)} capabilities to agent")
    try:
        agent.add_capabilities(capabilities)
    except CapabilityRegistrationError as e:
        logger.error(f"Error adding capabilities: {e}")
        return StartupResult(StartupStatus.REGISTRATION_FAILED, names, str(e))
    logger.info("Capabilities added successfully")

    if not serve:
        return StartupResult(StartupStatus.READY, names)

    try:
        await agent.start()
    except AgentStartError as e:
        logger.error(f"Failed to start agent: {e}")
        return StartupResult(StartupStatus.START_FAILED, names, str(e))

    logger.info("Agent server stopped")
    return StartupResult(StartupStatus.STOPPED, names)


# ── CLI ──────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coinagent",
        description="Serve CoinGecko market-data tools as agent capabilities",
    )
    parser.add_argument("--config", help="YAML file with non-secret overrides")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Discover and register capabilities, then exit without serving",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the capability names that would be registered",
    )
    parser.add_argument("--log-level", help="Override COINAGENT_LOG_LEVEL")
    return parser


def main(argv: Sequence[str] | None = None, loader: ToolLoader | None = None) -> int:
    """Run the agent. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env_and_yaml(args.config)
        log_level = parse_log_level(args.log_level or settings.log_level)
    except ConfigurationError as e:
        logging.basicConfig(level=logging.ERROR, format="%(levelname)s: %(message)s")
        logger.error(f"Configuration error: {e}")
        return 2

    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    logger.debug(f"Settings: {settings.redacted()}")

    serve = not (args.dry_run or args.list)
    try:
        result = asyncio.run(start_agent(settings, loader=loader, serve=serve))
    except CoinAgentError as e:
        logger.error(f"Error in main: {e}")
        return 1

    if args.list:
        for name in result.capabilities:
            print(name)

    if not result.ok:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
