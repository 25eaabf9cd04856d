"""
agent.memory - In-process user profile memory.

A flat key/value store rendered as a prose block and appended to the
agent's instructions once at startup. Not persisted, and not mutated by
the agent at runtime.
"""

from __future__ import annotations

import logging
from typing import Iterator

logger = logging.getLogger(__name__)

CONTEXT_HEADER = "### User Context & Memories:"

DEFAULT_PROFILE: dict[str, str] = {
    "user_name": "Pablo Piovano",
    "nickname": "Pablito Piova",
    "title": "Microsoft MVP",
    "interests": "Café, Cocinar Asados Argentinos, Viajar",
    "location": "Sunchales, Santa Fe",
    "country": "Argentina",
    "friends": "Amigo de Bruno y Quique",
}

# (label, key) pairs shown by /profile, in display order.
PROFILE_FIELDS: tuple[tuple[str, str], ...] = (
    ("Name", "user_name"),
    ("Nickname", "nickname"),
    ("Title", "title"),
    ("Interests", "interests"),
    ("City", "location"),
    ("Country", "country"),
)


class MemoryStore:
    """Per-process user memory.

    NOT global — the factory creates one instance and hands it to the
    session and the prompt builder.
    """

    def __init__(self) -> None:
        self._memories: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._memories)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._memories.items())

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite a memory."""
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError("memory key and value must both be strings")
        self._memories[key] = value

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is unknown."""
        return self._memories.get(key)

    def render_context(self) -> str:
        """Render all memories as a bulleted block for the system prompt.

        Returns an empty string when nothing is stored; callers omit the
        section in that case.
        """
        if not self._memories:
            return ""
        lines = [CONTEXT_HEADER]
        lines.extend(f"- {key}: {value}" for key, value in self._memories.items())
        return "\n".join(lines) + "\n"

    def profile(self) -> list[tuple[str, str | None]]:
        """Return the well-known profile fields as (label, value) rows."""
        return [(label, self.get(key)) for label, key in PROFILE_FIELDS]

    def load_default_profile(self) -> None:
        """Populate the fixed default user profile, overwriting those keys."""
        for key, value in DEFAULT_PROFILE.items():
            self.set(key, value)
        logger.info("Loaded default profile (%d memories)", len(DEFAULT_PROFILE))
