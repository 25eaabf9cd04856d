"""
domain.models - Value objects for the chat session.

Immutable data containers with no dependencies on infrastructure
(no LangChain, no MCP SDK, no console).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------

class Role(str, Enum):
    """Who produced a turn."""
    USER = "user"
    AGENT = "agent"


@dataclass(frozen=True)
class Turn:
    """One role-tagged message in the transcript."""
    role: Role
    text: str


# ---------------------------------------------------------------------------
# Agent collaborator values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolDescriptor:
    """A callable tool exposed by the MCP server.

    Treated as opaque by the session loop; only the CLI reads the fields
    for display.
    """
    name: str
    description: str = ""
    input_schema: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ThreadHandle:
    """Continuation token for the agent's accumulated conversation."""
    thread_id: str


@dataclass(frozen=True)
class AgentResponse:
    """What the agent returned for one run."""
    text: str
