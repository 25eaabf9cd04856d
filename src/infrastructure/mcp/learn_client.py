"""
infrastructure.mcp.learn_client - Connection to the Microsoft Learn MCP server.

Opens a streamable HTTP transport and an MCP ClientSession and keeps both
open until the context exits, so tools stay callable for the whole chat.
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from typing import Optional

from mcp import ClientSession
from mcp.client.streamable_http import streamablehttp_client

from domain.exceptions import ToolCatalogError

logger = logging.getLogger(__name__)

LEARN_MCP_URL = "https://learn.microsoft.com/api/mcp"


class LearnMcpConnection:
    """Async context manager yielding an initialised ClientSession.

    Usage:
        async with LearnMcpConnection(url) as session:
            tools = await session.list_tools()
    """

    def __init__(self, url: str = LEARN_MCP_URL):
        self._url = url
        self._stack: Optional[AsyncExitStack] = None

    async def __aenter__(self) -> ClientSession:
        stack = AsyncExitStack()
        try:
            read_stream, write_stream, _ = await stack.enter_async_context(
                streamablehttp_client(self._url)
            )
            session = await stack.enter_async_context(
                ClientSession(read_stream, write_stream)
            )
            await session.initialize()
        except Exception as e:
            await stack.aclose()
            logger.exception("Failed to connect to MCP server at %s", self._url)
            raise ToolCatalogError(f"Could not connect to {self._url}: {e}") from e

        logger.info("Connected to MCP server at %s", self._url)
        self._stack = stack
        return session

    async def __aexit__(self, *exc_info) -> None:
        if self._stack is not None:
            stack, self._stack = self._stack, None
            await stack.aclose()
            logger.info("Closed MCP connection to %s", self._url)
