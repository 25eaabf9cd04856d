"""
application.session - Interactive chat session state machine.

Reads one line at a time, classifies it as a slash command or a chat turn,
keeps the transcript, and reports results through a Presenter. Every error
raised by a collaborator is caught here and shown to the user; only the
caller's startup code may terminate the process.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Optional

from agent.memory import MemoryStore
from application.commands import (
    HELP_ENTRIES,
    Command,
    CommandKind,
    is_command,
    parse_command,
)
from application.context import SessionContext
from application.transcript import TranscriptWriter
from domain.models import Role
from domain.ports import ConversationalAgent, NoticeLevel, Presenter

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 200
ELLIPSIS = "..."
FAREWELL = "Goodbye! Thanks for chatting."


class SessionState(Enum):
    AWAITING_INPUT = "awaiting_input"
    DISPATCHING = "dispatching"
    CHAT_TURN = "chat_turn"
    COMMAND = "command"
    EXITED = "exited"


def preview(text: str, limit: int = PREVIEW_LIMIT) -> str:
    """Truncate text for display only."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


class ChatSession:
    """One interactive conversation with the agent.

    Constructed by the CLI adapter with all dependencies injected.
    `memory` is None when the memory feature is switched off.
    """

    def __init__(
        self,
        agent: ConversationalAgent,
        presenter: Presenter,
        writer: TranscriptWriter,
        memory: Optional[MemoryStore] = None,
        ctx: Optional[SessionContext] = None,
    ):
        self._agent = agent
        self._presenter = presenter
        self._writer = writer
        self._memory = memory
        self.ctx = ctx or SessionContext(thread=agent.new_thread())
        self.state = SessionState.AWAITING_INPUT

    @property
    def active(self) -> bool:
        return self.state is not SessionState.EXITED

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    async def run(self, read_line: Callable[[], Optional[str]]) -> None:
        """Loop until /exit. read_line returning None counts as /exit."""
        while self.active:
            line = read_line()
            if line is None:
                self.dispatch(Command(CommandKind.EXIT, raw="/exit"))
                break
            await self.handle_line(line)

    async def handle_line(self, line: str) -> SessionState:
        """Process one input line to completion."""
        text = line.strip()
        if not text:
            return self.state

        self.state = SessionState.DISPATCHING
        if is_command(text):
            self.state = SessionState.COMMAND
            self.dispatch(parse_command(text))
        else:
            self.state = SessionState.CHAT_TURN
            await self.chat_turn(text)

        if self.state is not SessionState.EXITED:
            self.state = SessionState.AWAITING_INPUT
        return self.state

    async def chat_turn(self, text: str) -> bool:
        """Send one message to the agent. Returns True on success.

        The user turn is recorded before the call and removed again if the
        call fails, so the transcript only ever holds complete pairs.
        """
        self.ctx.append(Role.USER, text)
        started = time.perf_counter()
        try:
            with self._presenter.thinking():
                response = await self._agent.run(text, self.ctx.thread)
        except asyncio.CancelledError:
            # Interrupted mid-call: drop the unanswered turn, keep cancelling.
            self.ctx.rollback_last()
            raise
        except Exception as e:
            self.ctx.rollback_last()
            logger.exception("Chat turn failed (thread=%s)", self.ctx.thread.thread_id)
            self._presenter.notify(NoticeLevel.ERROR, f"Error: {e}")
            return False

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        self.ctx.append(Role.AGENT, response.text)
        self.ctx.turn_count += 1
        self._presenter.agent_reply(response.text, elapsed_ms, len(self.ctx.transcript))
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def dispatch(self, command: Command) -> None:
        kind = command.kind
        if kind is CommandKind.EXIT:
            self._presenter.notify(NoticeLevel.INFO, FAREWELL)
            self.state = SessionState.EXITED
        elif kind is CommandKind.RESET:
            self.reset()
        elif kind is CommandKind.SHOW_HISTORY:
            self.show_history()
        elif kind is CommandKind.SHOW_HELP:
            self._presenter.help(HELP_ENTRIES)
        elif kind is CommandKind.SAVE:
            self.save()
        elif kind is CommandKind.SHOW_MEMORY:
            if self._require_memory():
                self._presenter.memory(self._memory.render_context())
        elif kind is CommandKind.SHOW_PROFILE:
            if self._require_memory():
                self._presenter.profile(self._memory.profile())
        else:
            self._presenter.notify(
                NoticeLevel.ERROR,
                f"Unknown command: {command.raw} (type /help to see available commands)",
            )

    def reset(self) -> None:
        """Drop the transcript and all model-side context."""
        try:
            thread = self._agent.new_thread()
        except Exception as e:
            logger.exception("Could not create a new thread")
            self._presenter.notify(NoticeLevel.ERROR, f"Could not start a new conversation: {e}")
            return
        self.ctx.reset(thread)
        self._presenter.clear()
        self._presenter.banner()
        self._presenter.notify(NoticeLevel.SUCCESS, "Started new conversation with a fresh thread")

    def show_history(self) -> None:
        if not self.ctx.transcript:
            self._presenter.notify(NoticeLevel.INFO, "No conversation history yet. Start chatting!")
            return
        self._presenter.history(self.ctx.transcript)

    def save(self) -> None:
        if not self.ctx.transcript:
            self._presenter.notify(NoticeLevel.INFO, "No conversation to save yet.")
            return
        try:
            path = self._writer.save(self.ctx.transcript)
        except OSError as e:
            logger.warning("Failed to save conversation: %s", e)
            self._presenter.notify(NoticeLevel.ERROR, f"Failed to save conversation: {e}")
            return
        self._presenter.notify(NoticeLevel.SUCCESS, f"Conversation saved to: {path}")

    def _require_memory(self) -> bool:
        if self._memory is None:
            self._presenter.notify(NoticeLevel.WARNING, "Memory is disabled for this session.")
            return False
        return True
