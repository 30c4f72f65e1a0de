"""Slash-command text parsing."""

import logging
from typing import Optional

from integrations.models import StandupCommand

logger = logging.getLogger(__name__)

_LABELS = {
    "yesterday:": "yesterday",
    "today:": "today",
    "blockers:": "blockers",
}


def _split_items(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_standup_command(text: Optional[str]) -> StandupCommand:
    """Parse ``yesterday: a, b | today: c | blockers: d`` into a StandupCommand.

    Segments are separated by ``|`` and may come in any order. Labels match
    case-insensitively. Items are comma-separated and trimmed; blank items
    are dropped. Segments without a known label are ignored. When a label
    repeats, the last occurrence wins.

    Args:
        text: The slash-command text, possibly empty.

    Returns:
        The parsed command. Absent segments are None.
    """
    fields: dict[str, list[str]] = {}
    for segment in (text or "").split("|"):
        segment = segment.strip()
        lowered = segment.lower()
        for label, field in _LABELS.items():
            if lowered.startswith(label):
                fields[field] = _split_items(segment[len(label):])
                break
        else:
            if segment:
                logger.debug(f"parse_standup_command: ignored_segment={segment[:40]}")
    return StandupCommand(**fields)
