"""
application.context - Per-session conversation state.

Every ChatSession owns one SessionContext, so two sessions in the same
process never share a transcript, a counter, or a thread.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from domain.models import Role, ThreadHandle, Turn


@dataclass
class SessionContext:
    """Mutable state of one chat session.

    Attributes:
        thread:      Agent thread carrying the model-side conversation.
        transcript:  Ordered turns shown by /history and written by /save.
        turn_count:  Completed chat turns since start or the last reset.
    """
    thread: ThreadHandle
    transcript: list[Turn] = field(default_factory=list)
    turn_count: int = 0

    def append(self, role: Role, text: str) -> None:
        self.transcript.append(Turn(role=role, text=text))

    def rollback_last(self) -> Turn:
        """Remove and return the most recent turn."""
        return self.transcript.pop()

    def reset(self, thread: ThreadHandle) -> None:
        """Discard the whole conversation and switch to a new thread."""
        self.thread = thread
        self.transcript = []
        self.turn_count = 0
