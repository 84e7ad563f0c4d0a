"""Shared fakes for the coinagent tests."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel

from coinagent.config import Settings


class TrendingParams(BaseModel):
    limit: int = 10


class FakeTool:
    """Stands in for a GOAT ToolBase."""

    def __init__(self, name: str, description: str = "", parameters: Any = None, result: Any = "ok"):
        self.name = name
        self.description = description
        self.parameters = parameters if parameters is not None else TrendingParams
        self.result = result
        self.calls: list[dict] = []

    def execute(self, params: dict) -> Any:
        self.calls.append(params)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class AsyncFakeTool(FakeTool):
    async def execute(self, params: dict) -> Any:
        return super().execute(params)


@pytest.fixture
def settings() -> Settings:
    return Settings.from_dict({
        "openai_api_key": "sk-test",
        "openserv_api_key": "os-test",
        "rpc_provider_url": "http://localhost:8545",
        "coingecko_api_key": "cg-test",
    })
