"""
factory - Composition root for the Learn docs copilot.

ALL dependency wiring happens here. No other module constructs its own
dependencies. The CLI adapter calls this factory to get a connected tool
catalog, an agent, and the session helpers.

Usage:
    from factory import ServiceFactory
    from infrastructure.config import Settings

    config = Settings.from_env().validate()
    async with ServiceFactory(config) as factory:
        memory = factory.create_memory_store()
        agent = factory.create_agent(memory)
        response = await agent.run("What is Entra ID?", agent.new_thread())
"""

from __future__ import annotations

import logging
from typing import Optional

from agent.executor import AgentExecutor
from agent.memory import MemoryStore
from agent.prompt import build_system_prompt
from agent.tools.registry import ToolCatalog
from application.transcript import TranscriptWriter
from domain.exceptions import ConfigurationError, ToolCatalogError
from domain.models import ToolDescriptor
from infrastructure.config import Settings
from infrastructure.llm.llm_builder import build_llm
from infrastructure.mcp.learn_client import LearnMcpConnection

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root — wires all dependencies together.

    Enter the factory (or call initialize()) once at startup; the MCP
    connection stays open until the factory is closed.
    """

    def __init__(self, config: Settings):
        self._config = config
        self._connection = LearnMcpConnection(config.mcp_url)
        self._catalog: Optional[ToolCatalog] = None

    async def __aenter__(self) -> ServiceFactory:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def initialize(self) -> list[ToolDescriptor]:
        """One-time startup: connect to the MCP server and fetch its tools.

        Raises:
            ToolCatalogError: If the server cannot be reached or listed.
        """
        logger.info("Initializing ServiceFactory...")
        session = await self._connection.__aenter__()
        try:
            self._catalog = ToolCatalog(session)
            tools = await self._catalog.list_tools()
        except Exception:
            await self.aclose()
            raise
        logger.info("ServiceFactory ready (%d tools)", len(tools))
        return tools

    async def aclose(self) -> None:
        self._catalog = None
        await self._connection.__aexit__(None, None, None)

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def tool_catalog(self) -> ToolCatalog:
        if self._catalog is None:
            raise ToolCatalogError("ServiceFactory not initialized. Call initialize() first.")
        return self._catalog

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_memory_store(self) -> Optional[MemoryStore]:
        """Return a MemoryStore with the default profile, or None when disabled."""
        if not self._config.memory_enabled:
            logger.info("Memory disabled")
            return None
        memory = MemoryStore()
        memory.load_default_profile()
        return memory

    def create_agent(self, memory: Optional[MemoryStore] = None) -> AgentExecutor:
        """Create the docs agent with all MCP tools and the memory block.

        Raises:
            ConfigurationError: If the LLM provider settings are incomplete.
        """
        self._config.validate()
        try:
            llm = build_llm(
                provider=self._config.llm_provider,
                model=self._config.active_llm_model,
                azure_endpoint=self._config.azure_openai_endpoint,
                azure_api_version=self._config.azure_openai_api_version,
                azure_api_key=self._config.azure_openai_api_key,
                openai_api_key=self._config.openai_api_key,
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        memory_context = memory.render_context() if memory is not None else ""
        return AgentExecutor(
            llm=llm,
            tools=self.tool_catalog.to_langchain_tools(),
            instructions=build_system_prompt(memory_context),
            name=self._config.agent_name,
        )

    def create_transcript_writer(self) -> TranscriptWriter:
        return TranscriptWriter(self._config.transcript_dir)
