"""
agent.executor - Agent execution engine.

The single class that runs the LLM + tool selection loop.
No component construction, no console output, no session state.

Conversation context lives in a LangGraph checkpointer keyed by thread id;
a ThreadHandle is just that key. Discarding a handle discards the context.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence
from uuid import uuid4

from langchain.agents import create_agent
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.tools import BaseTool
from langgraph.checkpoint.memory import InMemorySaver

from domain.exceptions import AgentError
from domain.models import AgentResponse, ThreadHandle

logger = logging.getLogger(__name__)


class AgentExecutor:
    """Runs the LLM + tool selection loop.

    Constructed by factory.py with all dependencies injected.
    """

    def __init__(
        self,
        llm: BaseChatModel,
        tools: Sequence[BaseTool],
        instructions: str,
        name: str = "DocsAgent",
    ):
        self._name = name
        self._tools = list(tools)
        self._checkpointer = InMemorySaver()
        self._graph = create_agent(
            model=llm,
            tools=self._tools,
            system_prompt=instructions,
            checkpointer=self._checkpointer,
            name=name,
        )

    def new_thread(self) -> ThreadHandle:
        """Start a fresh conversation with no prior context."""
        thread = ThreadHandle(thread_id=uuid4().hex)
        logger.debug("Created thread %s", thread.thread_id)
        return thread

    async def run(self, text: str, thread: ThreadHandle) -> AgentResponse:
        """Send one user message on the given thread and return the reply.

        Raises whatever the model or a tool raises; the caller decides how
        to recover.
        """
        logger.info("Agent %s processing (thread=%s): %s", self._name, thread.thread_id, text[:80])
        result = await self._graph.ainvoke(
            {"messages": [{"role": "user", "content": text}]},
            config={"configurable": {"thread_id": thread.thread_id}},
        )
        reply = final_reply_text(result.get("messages", []))
        logger.debug("Agent response: %s", reply[:100])
        return AgentResponse(text=reply)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def message_text(message: BaseMessage) -> str:
    """Flatten a message's content into plain text.

    Content is either a string or a list of content blocks; only text
    blocks are kept.
    """
    content: Any = message.content
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def final_reply_text(messages: Sequence[BaseMessage]) -> str:
    """Return the text of the last AI message in a run's output."""
    for message in reversed(messages):
        if isinstance(message, AIMessage):
            return message_text(message)
    raise AgentError("Agent returned no reply")
