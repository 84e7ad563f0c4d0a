"""
Agent — hosts capabilities behind an HTTP API and an LLM tool loop.

Usage:
    agent = Agent(system_prompt=SYSTEM_PROMPT, api_key=settings.openserv_api_key)
    agent.add_capabilities(capabilities)
    await agent.start()   # serves until shutdown

Endpoints (all but /health need `Authorization: Bearer <api_key>`):
    GET  /health
    GET  /capabilities
    POST /capabilities/{name}/run   {"arguments": {...}}
    POST /respond                   {"message": "..."}
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException
from langchain_core.messages import HumanMessage
from pydantic import BaseModel, Field, ValidationError

from .bridge import capability_to_langchain_tool
from .errors import AgentStartError, CapabilityRegistrationError, ConfigurationError
from .models import Capability

logger = logging.getLogger(__name__)


class RunRequest(BaseModel):
    arguments: dict[str, Any] = Field(default_factory=dict)


class RespondRequest(BaseModel):
    message: str


def validate_arguments(schema: Any, args: dict[str, Any]) -> dict[str, Any]:
    """
    Check args against a pydantic schema and return the normalized dict.

    JSON-schema dicts (and missing schemas) are passed through as-is.
    Raises pydantic.ValidationError on bad input.
    """
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema.model_validate(args).model_dump()
    return dict(args)


def describe_schema(schema: Any) -> dict:
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return schema.model_json_schema()
    if isinstance(schema, dict):
        return schema
    return {"type": "object", "properties": {}}


class Agent:
    """
    The runtime capabilities are registered with.

    Capabilities are added in one batch after startup discovery and are
    not changed afterwards. The LLM loop (LangGraph ReAct agent) is
    built lazily on the first /respond call.
    """

    def __init__(
        self,
        system_prompt: str,
        api_key: str,
        model: str = "openai:gpt-4o-mini",
        llm_api_key: str | None = None,
        host: str = "0.0.0.0",
        port: int = 7378,
    ):
        if not api_key:
            raise ConfigurationError("Agent api_key is required")
        self.system_prompt = system_prompt
        self.api_key = api_key
        self.model = model
        self.llm_api_key = llm_api_key
        self.host = host
        self.port = port
        self._capabilities: dict[str, Capability] = {}
        self._runnable: Any = None

    # ── Registration ────────────────────────────────────────

    def add_capabilities(self, capabilities: Sequence[Capability]) -> None:
        """Register a batch of capabilities. All or nothing."""
        if not capabilities:
            raise CapabilityRegistrationError("At least one capability is required")

        seen: set[str] = set()
        for cap in capabilities:
            if not cap.name:
                raise CapabilityRegistrationError("Capability name must not be empty")
            if cap.name in seen or cap.name in self._capabilities:
                raise CapabilityRegistrationError(f"Duplicate capability: {cap.name}")
            seen.add(cap.name)

        for cap in capabilities:
            self._capabilities[cap.name] = cap
        self._runnable = None
        logger.info(f"Added {len(capabilities)} capabilities: {sorted(seen)}")

    def add_capability(self, capability: Capability) -> None:
        self.add_capabilities([capability])

    @property
    def capabilities(self) -> list[Capability]:
        return list(self._capabilities.values())

    def get_capability(self, name: str) -> Capability | None:
        return self._capabilities.get(name)

    # ── Invocation ──────────────────────────────────────────

    async def run_capability(self, name: str, args: dict[str, Any] | None = None) -> str:
        """
        Validate args and invoke a capability.

        Raises KeyError for unknown capabilities and ValidationError for
        bad arguments; tool failures come back as text from run().
        """
        capability = self._capabilities.get(name)
        if capability is None:
            raise KeyError(name)
        arguments = validate_arguments(capability.schema, args or {})
        return await capability.run(arguments)

    def to_langchain_tools(self) -> list:
        return [capability_to_langchain_tool(c) for c in self._capabilities.values()]

    def build_runnable(self) -> Any:
        """Build a LangGraph ReAct agent over the registered capabilities."""
        from langgraph.prebuilt import create_react_agent
        from langchain.chat_models import init_chat_model

        kwargs = {"api_key": self.llm_api_key} if self.llm_api_key else {}
        llm = init_chat_model(self.model, **kwargs)
        return create_react_agent(llm, self.to_langchain_tools(), prompt=self.system_prompt)

    async def respond(self, message: str) -> str:
        """Run one conversational turn and return the final answer."""
        if self._runnable is None:
            self._runnable = self.build_runnable()
        result = await self._runnable.ainvoke({"messages": [HumanMessage(content=message)]})
        messages = result.get("messages", [])
        return messages[-1].content if messages else ""

    # ── HTTP server ─────────────────────────────────────────

    def create_app(self) -> FastAPI:
        app = FastAPI(title="coinagent")

        async def require_api_key(authorization: Optional[str] = Header(None)) -> None:
            if not authorization:
                raise HTTPException(status_code=401, detail="Missing authorization header")
            scheme, _, token = authorization.partition(" ")
            if scheme.lower() != "bearer" or token != self.api_key:
                raise HTTPException(status_code=401, detail="Invalid API key")

        @app.get("/health")
        async def health() -> dict:
            return {"status": "ok", "capabilities": len(self._capabilities)}

        @app.get("/capabilities", dependencies=[Depends(require_api_key)])
        async def list_capabilities() -> list[dict]:
            return [
                {
                    "name": c.name,
                    "description": c.description,
                    "schema": describe_schema(c.schema),
                }
                for c in self._capabilities.values()
            ]

        @app.post("/capabilities/{name}/run", dependencies=[Depends(require_api_key)])
        async def run_capability(name: str, request: RunRequest) -> dict:
            try:
                result = await self.run_capability(name, request.arguments)
            except KeyError:
                raise HTTPException(status_code=404, detail=f"Unknown capability: {name}")
            except ValidationError as e:
                raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
            return {"name": name, "result": result}

        @app.post("/respond", dependencies=[Depends(require_api_key)])
        async def respond(request: RespondRequest) -> dict:
            return {"response": await self.respond(request.message)}

        return app

    async def start(self) -> None:
        """Serve the HTTP API until shutdown. Raises AgentStartError on failure."""
        if not self._capabilities:
            raise AgentStartError("No capabilities registered")

        config = uvicorn.Config(self.create_app(), host=self.host, port=self.port, log_level="info")
        server = uvicorn.Server(config)
        logger.info(f"Starting agent server on {self.host}:{self.port}")
        try:
            await server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it cannot bind
            raise AgentStartError(f"Server exited during startup (code {e.code})") from e
        except OSError as e:
            raise AgentStartError(f"Server failed: {e}") from e

        if not server.started:
            raise AgentStartError("Server did not start")
