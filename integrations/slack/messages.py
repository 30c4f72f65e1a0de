"""Slack mrkdwn rendering of standups."""

from typing import Sequence


def _section(title: str, items: Sequence[str]) -> str:
    bullets = "\n".join(f"• {item}" for item in items)
    return f"*{title}:*\n{bullets}\n"


def format_standup_message(
    user_name: str,
    yesterday: Sequence[str],
    today: Sequence[str],
    blockers: Sequence[str],
) -> str:
    """Render a standup as a Slack message.

    A bold header naming the author is followed by the Yesterday, Today and
    Blockers sections in that order. Empty sections are left out.

    Args:
        user_name: Display name of the author.
        yesterday: Items worked on the previous day.
        today: Items planned for the day.
        blockers: Current blockers.

    Returns:
        Slack mrkdwn text.
    """
    sections = [
        _section(title, items)
        for title, items in (
            ("✅ Yesterday", yesterday),
            ("📋 Today", today),
            ("🚧 Blockers", blockers),
        )
        if items
    ]
    return f"*Daily Standup from {user_name}*\n\n" + "\n".join(sections)
