"""
application.commands - Slash-command parsing.

Turns one raw input line into a Command value. Behaviour lives in
application.session; this module never touches the console.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

COMMAND_PREFIX = "/"


class CommandKind(Enum):
    EXIT = "exit"
    RESET = "reset"
    SHOW_HISTORY = "history"
    SHOW_HELP = "help"
    SAVE = "save"
    SHOW_MEMORY = "memory"
    SHOW_PROFILE = "profile"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    """A parsed slash command. `raw` keeps the input for error messages."""
    kind: CommandKind
    raw: str = ""


_COMMANDS: dict[str, CommandKind] = {
    "exit": CommandKind.EXIT,
    "clear": CommandKind.RESET,
    "new": CommandKind.RESET,
    "history": CommandKind.SHOW_HISTORY,
    "help": CommandKind.SHOW_HELP,
    "save": CommandKind.SAVE,
    "memory": CommandKind.SHOW_MEMORY,
    "profile": CommandKind.SHOW_PROFILE,
}

HELP_ENTRIES: tuple[tuple[str, str], ...] = (
    ("/help", "Show this help message"),
    ("/clear", "Clear conversation and start fresh"),
    ("/new", "Same as /clear"),
    ("/history", "Show conversation history"),
    ("/memory", "Show all stored memories"),
    ("/profile", "Show user profile information"),
    ("/save", "Save conversation to file"),
    ("/exit", "Exit the application"),
)


def is_command(line: str) -> bool:
    return line.strip().startswith(COMMAND_PREFIX)


def parse_command(line: str) -> Command:
    """Parse '/name' (case-insensitive) into a Command.

    Anything that is not an exact known name, including trailing
    arguments, parses as UNKNOWN.
    """
    raw = line.strip()
    name = raw[len(COMMAND_PREFIX):] if raw.startswith(COMMAND_PREFIX) else raw
    kind = _COMMANDS.get(name.lower(), CommandKind.UNKNOWN)
    return Command(kind=kind, raw=raw)
