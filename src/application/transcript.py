"""
application.transcript - Plain-text conversation export.

Writes conversation_<yyyyMMdd_HHmmss>.txt on explicit request only.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from domain.models import Role, Turn

logger = logging.getLogger(__name__)

RULE_WIDTH = 70
FILENAME_PREFIX = "conversation_"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
LOG_TITLE = "Agent Framework Copilot - Conversation Log"


class TranscriptWriter:
    """Serializes a transcript into a timestamped text file."""

    def __init__(self, directory: Path = Path(".")):
        self._directory = Path(directory)

    def filename_for(self, now: datetime) -> str:
        return f"{FILENAME_PREFIX}{now.strftime(TIMESTAMP_FORMAT)}.txt"

    def render(self, turns: Sequence[Turn], now: datetime) -> str:
        """Build the file body: header block then one block per turn."""
        lines = [
            "=" * RULE_WIDTH,
            LOG_TITLE,
            f"Date: {now:%Y-%m-%d %H:%M:%S}",
            f"Messages: {len(turns)}",
            "=" * RULE_WIDTH,
            "",
        ]
        for turn in turns:
            label = "USER" if turn.role is Role.USER else "AGENT"
            lines.extend([f"[{label}]", turn.text, "", "-" * RULE_WIDTH, ""])
        return "\n".join(lines) + "\n"

    def save(self, turns: Sequence[Turn], now: Optional[datetime] = None) -> Path:
        """Write the transcript and return the file path.

        Raises:
            ValueError: If there are no turns to write.
            OSError:    If the file cannot be written.
        """
        if not turns:
            raise ValueError("No conversation to save")
        now = now or datetime.now()
        path = self._directory / self.filename_for(now)
        path.write_text(self.render(turns, now), encoding="utf-8")
        logger.info("Saved %d turn(s) to %s", len(turns), path)
        return path
