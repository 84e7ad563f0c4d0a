"""
Tests for the Agent host: batch registration, argument validation
and the HTTP API. The LLM loop is not exercised here.
"""

import asyncio
import socket

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage
from pydantic import ValidationError

from coinagent.agent import Agent, describe_schema, validate_arguments
from coinagent.errors import AgentStartError, CapabilityRegistrationError, ConfigurationError
from coinagent.models import Capability

from conftest import TrendingParams


def _make_capability(name="coingecko_get_trending_coins", schema=TrendingParams, reply=None):
    received = []

    async def run(args):
        received.append(args)
        return reply if reply is not None else f"ran {name} with {args}"

    cap = Capability(name=name, description=f"{name} description", schema=schema, run=run)
    return cap, received


def _make_agent(**kwargs):
    return Agent(system_prompt="You are a test.", api_key="os-test", **kwargs)


AUTH = {"Authorization": "Bearer os-test"}


class TestRegistration:
    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            Agent(system_prompt="x", api_key="")

    def test_add_batch(self):
        agent = _make_agent()
        a, _ = _make_capability("a")
        b, _ = _make_capability("b")
        agent.add_capabilities([a, b])
        assert [c.name for c in agent.capabilities] == ["a", "b"]
        assert agent.get_capability("b") is b

    def test_empty_batch_rejected(self):
        with pytest.raises(CapabilityRegistrationError):
            _make_agent().add_capabilities([])

    def test_duplicate_in_batch_rejects_everything(self):
        agent = _make_agent()
        a, _ = _make_capability("a")
        dup, _ = _make_capability("a")
        with pytest.raises(CapabilityRegistrationError, match="Duplicate"):
            agent.add_capabilities([a, dup])
        assert agent.capabilities == []

    def test_duplicate_of_existing_rejected(self):
        agent = _make_agent()
        a, _ = _make_capability("a")
        agent.add_capability(a)
        again, _ = _make_capability("a")
        with pytest.raises(CapabilityRegistrationError):
            agent.add_capability(again)

    def test_start_without_capabilities_fails(self):
        with pytest.raises(AgentStartError):
            asyncio.run(_make_agent().start())


class TestArguments:
    def test_pydantic_defaults_filled(self):
        assert validate_arguments(TrendingParams, {}) == {"limit": 10}

    def test_pydantic_rejects_bad_input(self):
        with pytest.raises(ValidationError):
            validate_arguments(TrendingParams, {"limit": "many"})

    def test_dict_schema_passthrough(self):
        assert validate_arguments({"type": "object"}, {"x": 1}) == {"x": 1}

    def test_describe_schema(self):
        assert describe_schema(TrendingParams)["properties"]["limit"]["default"] == 10
        assert describe_schema(None) == {"type": "object", "properties": {}}

    def test_run_capability_validates(self):
        agent = _make_agent()
        cap, received = _make_capability()
        agent.add_capability(cap)
        asyncio.run(agent.run_capability(cap.name, {"limit": 2}))
        assert received == [{"limit": 2}]

    def test_run_unknown_capability(self):
        with pytest.raises(KeyError):
            asyncio.run(_make_agent().run_capability("missing", {}))


class TestHttpApi:
    @pytest.fixture
    def client(self):
        agent = _make_agent()
        cap, _ = _make_capability(reply="trending: btc")
        agent.add_capability(cap)
        return TestClient(agent.create_app())

    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "capabilities": 1}

    def test_auth_required(self, client):
        assert client.get("/capabilities").status_code == 401
        bad = client.get("/capabilities", headers={"Authorization": "Bearer wrong"})
        assert bad.status_code == 401

    def test_list_capabilities(self, client):
        response = client.get("/capabilities", headers=AUTH)
        assert response.status_code == 200
        [entry] = response.json()
        assert entry["name"] == "coingecko_get_trending_coins"
        assert "limit" in entry["schema"]["properties"]

    def test_run(self, client):
        response = client.post(
            "/capabilities/coingecko_get_trending_coins/run",
            json={"arguments": {"limit": 3}},
            headers=AUTH,
        )
        assert response.status_code == 200
        assert response.json() == {"name": "coingecko_get_trending_coins", "result": "trending: btc"}

    def test_run_unknown(self, client):
        response = client.post("/capabilities/nope/run", json={}, headers=AUTH)
        assert response.status_code == 404

    def test_run_invalid_arguments(self, client):
        response = client.post(
            "/capabilities/coingecko_get_trending_coins/run",
            json={"arguments": {"limit": "lots"}},
            headers=AUTH,
        )
        assert response.status_code == 422


class StubRunnable:
    """Replaces the LangGraph agent; echoes a fixed final message."""

    def __init__(self, reply: str):
        self.reply = reply
        self.inputs = []

    async def ainvoke(self, payload):
        self.inputs.append(payload)
        return {"messages": payload["messages"] + [AIMessage(content=self.reply)]}


class TestRespond:
    @pytest.fixture
    def agent(self):
        agent = _make_agent()
        cap, _ = _make_capability()
        agent.add_capability(cap)
        agent._runnable = StubRunnable("hi")
        return agent

    def test_respond_returns_final_message(self, agent):
        assert asyncio.run(agent.respond("what is trending?")) == "hi"
        [payload] = agent._runnable.inputs
        assert payload["messages"][0].content == "what is trending?"

    def test_respond_endpoint(self, agent):
        client = TestClient(agent.create_app())
        response = client.post("/respond", json={"message": "what is trending?"}, headers=AUTH)
        assert response.status_code == 200
        assert response.json() == {"response": "hi"}

    def test_respond_endpoint_requires_auth(self, agent):
        client = TestClient(agent.create_app())
        assert client.post("/respond", json={"message": "hello"}).status_code == 401


class TestStart:
    def test_port_in_use_raises_start_error(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as held:
            held.bind(("127.0.0.1", 0))
            held.listen(1)
            port = held.getsockname()[1]

            agent = _make_agent(host="127.0.0.1", port=port)
            cap, _ = _make_capability()
            agent.add_capability(cap)

            with pytest.raises(AgentStartError):
                asyncio.run(agent.start())
