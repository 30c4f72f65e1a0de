"""Slack Web API adapter."""

import logging
from typing import Optional

from slack_sdk.web.async_client import AsyncWebClient
from slack_sdk.errors import SlackApiError

from integrations.models import SlackChannel, SlackConnectionInfo, SlackMember

logger = logging.getLogger(__name__)

CHANNEL_TYPES = "public_channel,private_channel"
PAGE_LIMIT = 200


class SlackIntegrationError(Exception):
    """Raised when a Slack Web API call fails."""


class SlackAdapter:
    """Thin wrapper over ``slack_sdk``'s AsyncWebClient for one bot token.

    Calls raise SlackIntegrationError on failure; deciding whether a
    failure matters is left to the caller.

    Args:
        token: Slack bot token (xoxb-...).
        client: Preconfigured AsyncWebClient, mainly for tests.
    """

    def __init__(self, token: str, client: Optional[AsyncWebClient] = None) -> None:
        if not token:
            raise ValueError("Slack adapter requires a bot token")
        self.client = client or AsyncWebClient(token=token)

    async def test_connection(self) -> SlackConnectionInfo:
        """Check the token with ``auth.test``.

        Returns:
            Connection info; ``ok`` is False when Slack rejects the token.
        """
        try:
            response = await self.client.auth_test()
        except SlackApiError as e:
            error = e.response.get("error", str(e)) if e.response is not None else str(e)
            logger.warning(f"slack_auth_test_failed: error={error}")
            return SlackConnectionInfo(ok=False, error=error)

        logger.info(f"slack_auth_test_ok: team={response.get('team')}")
        return SlackConnectionInfo(
            ok=bool(response.get("ok")),
            team=response.get("team"),
            team_id=response.get("team_id"),
            bot_user_id=response.get("user_id"),
        )

    async def list_channels(self) -> list[SlackChannel]:
        """Public and private channels visible to the bot, archived ones excluded."""
        try:
            response = await self.client.conversations_list(
                types=CHANNEL_TYPES, exclude_archived=True, limit=PAGE_LIMIT
            )
        except SlackApiError as e:
            logger.warning(f"slack_list_channels_failed: error={str(e)}")
            raise SlackIntegrationError("Failed to fetch Slack channels") from e

        return [
            SlackChannel(
                id=channel["id"],
                name=channel.get("name", ""),
                is_private=bool(channel.get("is_private")),
                is_member=bool(channel.get("is_member")),
            )
            for channel in response.get("channels", [])
            if not channel.get("is_archived")
        ]

    async def list_members(self) -> list[SlackMember]:
        """Human workspace members, without bots or deactivated accounts."""
        try:
            response = await self.client.users_list(limit=PAGE_LIMIT)
        except SlackApiError as e:
            logger.warning(f"slack_list_members_failed: error={str(e)}")
            raise SlackIntegrationError("Failed to fetch Slack members") from e

        members: list[SlackMember] = []
        for member in response.get("members", []):
            if member.get("is_bot") or member.get("deleted") or member.get("id") == "USLACKBOT":
                continue
            profile = member.get("profile") or {}
            members.append(
                SlackMember(
                    id=member["id"],
                    name=member.get("name", ""),
                    real_name=member.get("real_name") or profile.get("real_name"),
                    email=profile.get("email"),
                )
            )
        return members

    async def post_message(self, channel_id: str, text: str) -> str:
        """Post mrkdwn text to a channel.

        Returns:
            The message timestamp, which identifies it for later edits.
        """
        try:
            response = await self.client.chat_postMessage(
                channel=channel_id, text=text, mrkdwn=True
            )
        except SlackApiError as e:
            raise SlackIntegrationError(f"chat.postMessage failed: {str(e)}") from e
        logger.info(f"slack_message_posted: channel={channel_id}, ts={response.get('ts')}")
        return response["ts"]

    async def update_message(self, channel_id: str, ts: str, text: str) -> str:
        """Replace the text of a previously posted message."""
        try:
            response = await self.client.chat_update(channel=channel_id, ts=ts, text=text)
        except SlackApiError as e:
            raise SlackIntegrationError(f"chat.update failed: {str(e)}") from e
        logger.info(f"slack_message_updated: channel={channel_id}, ts={ts}")
        return response.get("ts", ts)
