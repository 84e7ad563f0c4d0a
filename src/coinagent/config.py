"""
Settings — environment-derived configuration for the agent.

Secrets always come from the environment (a local .env file is loaded
first). Non-secret options can also be overlaid from a YAML file:

    model: openai:gpt-4o-mini
    host: 127.0.0.1
    port: 7378
    exclude_patterns:
      - get_chain
    strict_names: true
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

import yaml
from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENSERV_API_KEY",
    "RPC_PROVIDER_URL",
    "COINGECKO_API_KEY",
)

DEFAULT_MODEL = "openai:gpt-4o-mini"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 7378

# Keys a YAML overlay may set. Credentials only come from the environment.
_OVERLAY_KEYS = {"model", "host", "port", "exclude_patterns", "strict_names", "log_level"}


def _parse_bool(value: str | bool | None) -> bool:
    if isinstance(value, bool):
        return value
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def parse_log_level(value: str | None) -> str:
    """Normalize a logging level name, rejecting ones logging does not know."""
    level = str(value or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Invalid log level: {value!r}")
    return level


@dataclass
class Settings:
    """
    Runtime configuration.

    Fields:
        openai_api_key: LLM provider credential
        openserv_api_key: Agent platform credential (also guards the HTTP API)
        rpc_provider_url: EVM RPC endpoint for the toolkit's wallet client
        coingecko_api_key: CoinGecko plugin credential
        model: LLM model string passed to init_chat_model
        host / port: Where the agent server listens
        exclude_patterns: Tool-name substrings to drop after discovery
        strict_names: Fail on sanitized-name collisions instead of warning
        log_level: Root logging level for the CLI
    """
    openai_api_key: str
    openserv_api_key: str
    rpc_provider_url: str
    coingecko_api_key: str

    model: str = DEFAULT_MODEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    exclude_patterns: tuple[str, ...] = field(default=("get_chain",))
    strict_names: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, dotenv: bool = True) -> Settings:
        """
        Build settings from environment variables.

        Raises ConfigurationError naming the first required variable
        that is missing, before anything touches the network.
        """
        if env is None:
            if dotenv:
                load_dotenv(find_dotenv(usecwd=True))
            env = os.environ

        for key in REQUIRED_ENV_VARS:
            if not env.get(key):
                raise ConfigurationError(f"{key} is not set")

        return cls.from_dict({
            "openai_api_key": env["OPENAI_API_KEY"],
            "openserv_api_key": env["OPENSERV_API_KEY"],
            "rpc_provider_url": env["RPC_PROVIDER_URL"],
            "coingecko_api_key": env["COINGECKO_API_KEY"],
            "model": env.get("COINAGENT_MODEL") or DEFAULT_MODEL,
            "host": env.get("COINAGENT_HOST") or DEFAULT_HOST,
            "port": env.get("PORT") or DEFAULT_PORT,
            "strict_names": env.get("COINAGENT_STRICT_NAMES"),
            "log_level": env.get("COINAGENT_LOG_LEVEL") or "INFO",
        })

    @classmethod
    def from_dict(cls, data: dict) -> Settings:
        """Create Settings from a plain dict."""
        missing = [
            k for k in ("openai_api_key", "openserv_api_key", "rpc_provider_url", "coingecko_api_key")
            if not data.get(k)
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

        try:
            port = int(data.get("port") or DEFAULT_PORT)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid port: {data.get('port')!r}") from None

        return cls(
            openai_api_key=data["openai_api_key"],
            openserv_api_key=data["openserv_api_key"],
            rpc_provider_url=data["rpc_provider_url"],
            coingecko_api_key=data["coingecko_api_key"],
            model=data.get("model") or DEFAULT_MODEL,
            host=data.get("host") or DEFAULT_HOST,
            port=port,
            exclude_patterns=tuple(data.get("exclude_patterns") or ("get_chain",)),
            strict_names=_parse_bool(data.get("strict_names")),
            log_level=parse_log_level(data.get("log_level")),
        )

    def with_yaml(self, path: str | Path) -> Settings:
        """Return a copy with non-secret options overlaid from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must be a YAML mapping, got {type(data).__name__}")

        unknown = set(data) - _OVERLAY_KEYS
        if unknown:
            raise ConfigurationError(f"Unsupported config keys: {', '.join(sorted(unknown))}")

        merged = {
            "openai_api_key": self.openai_api_key,
            "openserv_api_key": self.openserv_api_key,
            "rpc_provider_url": self.rpc_provider_url,
            "coingecko_api_key": self.coingecko_api_key,
            "model": self.model,
            "host": self.host,
            "port": self.port,
            "exclude_patterns": self.exclude_patterns,
            "strict_names": self.strict_names,
            "log_level": self.log_level,
            **data,
        }
        logger.info(f"Loaded config overlay from {path}")
        return Settings.from_dict(merged)

    @classmethod
    def from_env_and_yaml(cls, path: str | Path | None = None) -> Settings:
        settings = cls.from_env()
        return settings.with_yaml(path) if path else settings

    def redacted(self) -> Settings:
        """Copy safe to log."""
        return replace(
            self,
            openai_api_key="***",
            openserv_api_key="***",
            coingecko_api_key="***",
        )
