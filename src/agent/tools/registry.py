"""
agent.tools.registry - MCP tool discovery and LangChain adaptation.

Wraps an initialised MCP ClientSession: fetches the tool list once,
exposes it as ToolDescriptor values, and converts each tool into a
LangChain StructuredTool that forwards calls back over the session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from langchain_core.tools import StructuredTool, ToolException
from mcp.types import CallToolResult, TextContent

from domain.exceptions import ToolCatalogError, ToolInvocationError
from domain.models import ToolDescriptor

if TYPE_CHECKING:
    from mcp import ClientSession

logger = logging.getLogger(__name__)


class ToolCatalog:
    """Tools exposed by one MCP server."""

    def __init__(self, session: ClientSession):
        self._session = session
        self._tools: dict[str, ToolDescriptor] = {}

    async def list_tools(self) -> list[ToolDescriptor]:
        """Fetch the server's tools. Later calls return the cached list."""
        if self._tools:
            return self.descriptors()
        try:
            result = await self._session.list_tools()
        except Exception as e:
            raise ToolCatalogError(f"Could not list MCP tools: {e}") from e

        for tool in result.tools:
            self._tools[tool.name] = ToolDescriptor(
                name=tool.name,
                description=tool.description or "",
                input_schema=dict(tool.inputSchema or {}),
            )
            logger.debug("Discovered tool: %s", tool.name)
        logger.info("Discovered %d MCP tool(s)", len(self._tools))
        return self.descriptors()

    def descriptors(self) -> list[ToolDescriptor]:
        """Return the fetched descriptors in server order."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools.keys())

    async def invoke(self, name: str, **kwargs: Any) -> str:
        """Call a tool on the server and return its text output."""
        if name not in self._tools:
            raise KeyError(f"Tool '{name}' not registered")
        logger.info("Calling MCP tool %s", name)
        result = await self._session.call_tool(name, arguments=kwargs)
        text = result_to_text(result)
        if result.isError:
            raise ToolInvocationError(text or f"Tool '{name}' failed")
        return text

    def to_langchain_tools(self) -> list[StructuredTool]:
        """Convert all fetched tools to LangChain StructuredTools.

        The JSON schema from the server is passed through unchanged as
        args_schema.
        """
        lc_tools = []
        for descriptor in self._tools.values():

            def _make_coroutine(tool_name: str):
                async def coroutine(**kwargs: Any) -> str:
                    # Tool errors go back to the model instead of ending the run.
                    try:
                        return await self.invoke(tool_name, **kwargs)
                    except ToolInvocationError as e:
                        raise ToolException(str(e)) from e
                return coroutine

            lc_tools.append(StructuredTool(
                name=descriptor.name,
                description=descriptor.description,
                args_schema=descriptor.input_schema or {"type": "object", "properties": {}},
                coroutine=_make_coroutine(descriptor.name),
                handle_tool_error=True,
            ))
        return lc_tools


def result_to_text(result: CallToolResult) -> str:
    """Join the text parts of an MCP tool result."""
    parts = [item.text for item in result.content if isinstance(item, TextContent)]
    return "\n".join(parts)
