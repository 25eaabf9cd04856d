"""
Shared fakes and fixtures for the copilot tests.

The fakes stand in for the agent and the console so the session loop can
be exercised without a model, an MCP server, or a terminal.
"""
import asyncio
import os
import sys
from contextlib import nullcontext
from typing import Optional

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from agent.memory import MemoryStore
from application.session import ChatSession
from application.transcript import TranscriptWriter
from domain.models import AgentResponse, ThreadHandle
from domain.ports import NoticeLevel


class FakeAgent:
    """Echoes the input; fails on the turns listed in fail_on (1-based).

    Turns listed in cancel_on raise CancelledError, as an interrupted call does.
    """

    def __init__(
        self,
        fail_on: Optional[set[int]] = None,
        cancel_on: Optional[set[int]] = None,
    ):
        self.fail_on = fail_on or set()
        self.cancel_on = cancel_on or set()
        self.calls: list[tuple[str, ThreadHandle]] = []
        self.threads_created = 0

    def new_thread(self) -> ThreadHandle:
        self.threads_created += 1
        return ThreadHandle(thread_id=f"thread-{self.threads_created}")

    async def run(self, text: str, thread: ThreadHandle) -> AgentResponse:
        self.calls.append((text, thread))
        if len(self.calls) in self.cancel_on:
            raise asyncio.CancelledError()
        if len(self.calls) in self.fail_on:
            raise RuntimeError("service unavailable")
        return AgentResponse(text=f"echo: {text}")


class RecordingPresenter:
    """Presenter that records every call instead of printing."""

    def __init__(self):
        self.notices: list[tuple[NoticeLevel, str]] = []
        self.replies: list[tuple[str, int, int]] = []
        self.histories: list[list] = []
        self.help_entries: list = []
        self.memory_blocks: list[str] = []
        self.profiles: list = []
        self.tool_lists: list = []
        self.banners = 0
        self.clears = 0

    def notify(self, level, text):
        self.notices.append((level, text))

    def banner(self):
        self.banners += 1

    def clear(self):
        self.clears += 1

    def thinking(self):
        return nullcontext()

    def agent_reply(self, text, elapsed_ms, message_count):
        self.replies.append((text, elapsed_ms, message_count))

    def history(self, turns):
        self.histories.append(list(turns))

    def help(self, entries):
        self.help_entries.append(list(entries))

    def memory(self, block):
        self.memory_blocks.append(block)

    def profile(self, rows):
        self.profiles.append(list(rows))

    def tools(self, descriptors):
        self.tool_lists.append(list(descriptors))


@pytest.fixture
def agent() -> FakeAgent:
    return FakeAgent()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def memory() -> MemoryStore:
    store = MemoryStore()
    store.load_default_profile()
    return store


@pytest.fixture
def session(agent, presenter, memory, tmp_path) -> ChatSession:
    return ChatSession(
        agent=agent,
        presenter=presenter,
        writer=TranscriptWriter(tmp_path),
        memory=memory,
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable Settings.from_env reads, and skip .env loading."""
    for key in (
        "LLM_PROVIDER", "AZURE_OPENAI_ENDPOINT", "AZURE_OPENAI_DEPLOYMENT_NAME",
        "AZURE_OPENAI_API_VERSION", "AZURE_OPENAI_API_KEY", "OPENAI_API_KEY",
        "LLM_MODEL_OPENAI", "LEARN_MCP_URL", "AGENT_NAME", "MEMORY_ENABLED",
        "TRANSCRIPT_DIR", "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: False)
    return monkeypatch
