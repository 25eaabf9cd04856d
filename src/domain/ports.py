"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the session loop needs without specifying HOW. The
agent package and the CLI adapter provide concrete implementations;
tests provide fakes.

Using typing.Protocol (structural typing) instead of ABC — any class that
implements the methods satisfies the port without explicit inheritance.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from enum import Enum
from typing import Protocol, Sequence, runtime_checkable

from domain.models import AgentResponse, ThreadHandle, ToolDescriptor, Turn


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Agent Ports
# ---------------------------------------------------------------------------

@runtime_checkable
class ConversationalAgent(Protocol):
    """Hosted chat model with tools, addressed through thread handles."""

    def new_thread(self) -> ThreadHandle: ...

    async def run(self, text: str, thread: ThreadHandle) -> AgentResponse: ...


# ---------------------------------------------------------------------------
# Presentation Port
# ---------------------------------------------------------------------------

@runtime_checkable
class Presenter(Protocol):
    """Console output used by the session loop."""

    def notify(self, level: NoticeLevel, text: str) -> None: ...

    def banner(self) -> None: ...

    def clear(self) -> None: ...

    def thinking(self) -> AbstractContextManager[object]: ...

    def agent_reply(self, text: str, elapsed_ms: int, message_count: int) -> None: ...

    def history(self, turns: Sequence[Turn]) -> None: ...

    def help(self, entries: Sequence[tuple[str, str]]) -> None: ...

    def memory(self, block: str) -> None: ...

    def profile(self, rows: Sequence[tuple[str, str | None]]) -> None: ...

    def tools(self, descriptors: Sequence[ToolDescriptor]) -> None: ...
