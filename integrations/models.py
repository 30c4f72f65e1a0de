"""Pydantic models for Slack integration data."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class SlashCommandPayload(BaseModel):
    """Form fields Slack sends with a slash command invocation."""

    command: str = Field(default="", description="The command that was typed, e.g. /standup")
    text: str = Field(default="", description="Everything typed after the command")
    user_id: str = Field(..., description="Slack user ID of the invoker")
    user_name: Optional[str] = Field(None, description="Slack handle of the invoker")
    user_email: Optional[str] = Field(None, description="Email, when the app is allowed to see it")
    team_id: Optional[str] = Field(None, description="Slack workspace ID")
    channel_id: Optional[str] = Field(None, description="Channel the command was typed in")
    response_url: Optional[str] = Field(None, description="URL for delayed responses")


class StandupCommand(BaseModel):
    """Parsed standup slash-command text.

    ``None`` means the segment was absent from the command; an empty list
    means it was present with nothing after the label.
    """

    yesterday: Optional[list[str]] = None
    today: Optional[list[str]] = None
    blockers: Optional[list[str]] = None

    @property
    def is_empty(self) -> bool:
        return self.yesterday is None and self.today is None and self.blockers is None


class SlashResponse(BaseModel):
    """Synchronous reply to a slash command."""

    response_type: Literal["ephemeral", "in_channel"] = "ephemeral"
    text: str


class SlackChannel(BaseModel):
    id: str
    name: str
    is_private: bool = False
    is_member: bool = False


class SlackMember(BaseModel):
    id: str
    name: str
    real_name: Optional[str] = None
    email: Optional[str] = None


class SlackConnectionInfo(BaseModel):
    """Result of an ``auth.test`` call."""

    ok: bool
    team: Optional[str] = None
    team_id: Optional[str] = None
    bot_user_id: Optional[str] = None
    error: Optional[str] = None
