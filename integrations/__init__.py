"""External platform integrations for StandupSync."""

from integrations.models import (
    SlackChannel,
    SlackConnectionInfo,
    SlackMember,
    SlashCommandPayload,
    SlashResponse,
    StandupCommand,
)
from integrations.slack.adapter import SlackAdapter

__all__ = [
    "SlackAdapter",
    "SlackChannel",
    "SlackConnectionInfo",
    "SlackMember",
    "SlashCommandPayload",
    "SlashResponse",
    "StandupCommand",
]
