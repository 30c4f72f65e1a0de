"""Team-aware Slack operations on top of the Web API adapter."""

import logging
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from integrations.models import SlackChannel, SlackConnectionInfo, SlackMember
from integrations.slack.adapter import SlackAdapter
from integrations.slack.messages import format_standup_message
from standupsync.db.models.standup import StandupORM
from standupsync.db.models.team_settings import TeamSettingsORM
from standupsync.db.repositories.team_settings_repo import TeamSettingsRepository
from standupsync.errors import InvalidRequestError, NotFoundError

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[str], SlackAdapter]


class SlackService:
    """Reads the team's Slack settings and drives the adapter.

    Posting and editing standup messages is best-effort: failures are logged
    and reported as ``None``/``False`` rather than raised.

    Args:
        session: Async database session.
        adapter_factory: Builds an adapter from a bot token.
    """

    def __init__(self, session: AsyncSession, adapter_factory: AdapterFactory = SlackAdapter) -> None:
        self._session = session
        self._settings = TeamSettingsRepository(session)
        self._adapter_factory = adapter_factory

    async def get_settings(self, team_id: UUID) -> Optional[TeamSettingsORM]:
        return await self._settings.get_for_team(team_id)

    async def post_standup(
        self, team_id: UUID, user_name: str, standup: StandupORM
    ) -> Optional[str]:
        """Post a standup to the team channel.

        Returns:
            The Slack message timestamp, or None if Slack is not connected
            or the post failed.
        """
        settings = await self._settings.get_for_team(team_id)
        if settings is None or not settings.can_post:
            logger.debug(f"slack_post_skipped: team_id={team_id}, reason=not_connected")
            return None

        text = format_standup_message(
            user_name, standup.yesterday_work, standup.today_plan, standup.blockers
        )
        try:
            adapter = self._adapter_factory(settings.slack_access_token)
            return await adapter.post_message(settings.slack_channel_id, text)
        except Exception as e:
            logger.warning(
                f"slack_post_failed: team_id={team_id}, standup_id={standup.id}, error={str(e)}"
            )
            return None

    async def update_standup(self, team_id: UUID, user_name: str, standup: StandupORM) -> bool:
        """Edit the previously posted message for a standup.

        Returns:
            True if the message was edited.
        """
        if not standup.slack_message_ts:
            return False
        settings = await self._settings.get_for_team(team_id)
        if settings is None or not settings.can_post:
            return False

        text = format_standup_message(
            user_name, standup.yesterday_work, standup.today_plan, standup.blockers
        )
        try:
            adapter = self._adapter_factory(settings.slack_access_token)
            await adapter.update_message(settings.slack_channel_id, standup.slack_message_ts, text)
            return True
        except Exception as e:
            logger.warning(
                f"slack_update_failed: team_id={team_id}, standup_id={standup.id}, error={str(e)}"
            )
            return False

    async def configure(
        self,
        team_id: UUID,
        access_token: str,
        channel_id: Optional[str],
        channel_name: Optional[str],
    ) -> TeamSettingsORM:
        """Verify a bot token and store it with the chosen channel.

        Raises:
            InvalidRequestError: If the token is missing or Slack rejects it.
        """
        if not access_token:
            raise InvalidRequestError("Access token is required")

        info = await self._adapter_factory(access_token).test_connection()
        if not info.ok:
            logger.warning(f"slack_configure_failed: team_id={team_id}, error={info.error}")
            raise InvalidRequestError("Invalid Slack access token")

        settings = await self._settings.get_or_create(team_id)
        settings.slack_access_token = access_token
        settings.slack_channel_id = channel_id
        settings.slack_channel_name = channel_name
        settings.slack_team_id = info.team_id
        settings.slack_team_name = info.team
        settings.slack_bot_user_id = info.bot_user_id
        settings.is_slack_connected = True
        settings.touch()
        await self._session.commit()
        await self._session.refresh(settings)

        logger.info(f"slack_configured: team_id={team_id}, channel_id={channel_id}")
        return settings

    async def disconnect(self, team_id: UUID) -> TeamSettingsORM:
        """Forget the stored token and channel.

        Raises:
            NotFoundError: If the team has no Slack settings.
        """
        settings = await self._settings.get_for_team(team_id)
        if settings is None:
            raise NotFoundError("Slack settings not found")

        settings.slack_access_token = None
        settings.slack_channel_id = None
        settings.slack_channel_name = None
        settings.is_slack_connected = False
        settings.touch()
        await self._session.commit()

        logger.info(f"slack_disconnected: team_id={team_id}")
        return settings

    async def _stored_adapter(self, team_id: UUID) -> Optional[SlackAdapter]:
        settings = await self._settings.get_for_team(team_id)
        if settings is None or not settings.slack_access_token:
            return None
        return self._adapter_factory(settings.slack_access_token)

    async def test_connection(self, team_id: UUID) -> SlackConnectionInfo:
        adapter = await self._stored_adapter(team_id)
        if adapter is None:
            return SlackConnectionInfo(ok=False, error="not_connected")
        return await adapter.test_connection()

    async def list_channels(
        self, team_id: UUID, access_token: Optional[str] = None
    ) -> list[SlackChannel]:
        """Channels for an explicit token, or for the team's stored token.

        Without a stored token the list is empty.

        Raises:
            SlackIntegrationError: If Slack rejects the call.
        """
        if access_token:
            adapter: Optional[SlackAdapter] = self._adapter_factory(access_token)
        else:
            adapter = await self._stored_adapter(team_id)
        if adapter is None:
            return []
        return await adapter.list_channels()

    async def list_members(self, team_id: UUID) -> list[SlackMember]:
        adapter = await self._stored_adapter(team_id)
        if adapter is None:
            return []
        return await adapter.list_members()

