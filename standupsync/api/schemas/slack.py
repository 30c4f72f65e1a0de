"""Slack configuration schemas. Tokens are accepted, never returned."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from integrations.models import SlackChannel, SlackMember
from standupsync.api.schemas.common import CamelModel


class TeamSettingsResponse(CamelModel):
    """Team Slack settings without the bot token."""

    id: UUID
    team_id: UUID
    slack_channel_id: Optional[str] = None
    slack_channel_name: Optional[str] = None
    slack_team_id: Optional[str] = None
    slack_team_name: Optional[str] = None
    slack_bot_user_id: Optional[str] = None
    is_slack_connected: bool
    created_at: datetime
    updated_at: datetime


class SettingsEnvelope(CamelModel):
    settings: Optional[TeamSettingsResponse] = None


class ConfigureRequest(CamelModel):
    access_token: Optional[str] = None
    channel_id: Optional[str] = None
    channel_name: Optional[str] = None


class ConfigureResponse(CamelModel):
    settings: TeamSettingsResponse
    message: str


class ChannelsRequest(CamelModel):
    access_token: Optional[str] = None


class ChannelsResponse(CamelModel):
    channels: list[SlackChannel]


class MembersResponse(CamelModel):
    members: list[SlackMember]


class ConnectionTestResponse(CamelModel):
    connected: bool
    team: Optional[str] = None
    error: Optional[str] = None
