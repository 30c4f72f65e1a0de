"""Slack integration: Web API adapter, message formatting, slash commands."""

from integrations.slack.adapter import SlackAdapter, SlackIntegrationError
from integrations.slack.commands import parse_standup_command
from integrations.slack.messages import format_standup_message
from integrations.slack.webhook import sign_slack_request, validate_slack_signature

__all__ = [
    "SlackAdapter",
    "SlackIntegrationError",
    "format_standup_message",
    "parse_standup_command",
    "sign_slack_request",
    "validate_slack_signature",
]
