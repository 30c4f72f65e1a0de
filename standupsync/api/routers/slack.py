"""Slack endpoints: slash commands and admin-only integration settings."""

import logging
from typing import Optional
from urllib.parse import parse_qs

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from integrations.models import SlashCommandPayload, SlashResponse
from integrations.slack.adapter import SlackIntegrationError
from integrations.slack.commands import parse_standup_command
from integrations.slack.webhook import validate_slack_signature
from standupsync.api.dependencies import (
    get_settings,
    get_slack_service,
    get_standup_service,
    get_user_service,
)
from standupsync.api.schemas.common import MessageResponse
from standupsync.api.schemas.slack import (
    ChannelsRequest,
    ChannelsResponse,
    ConfigureRequest,
    ConfigureResponse,
    ConnectionTestResponse,
    MembersResponse,
    SettingsEnvelope,
    TeamSettingsResponse,
)
from standupsync.auth.dependencies import require_admin
from standupsync.db.models.user import UserORM
from standupsync.services.slack_service import SlackService
from standupsync.services.standup_service import StandupService
from standupsync.services.user_service import UserService
from standupsync.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/slack", tags=["slack"])

SUBMITTED_TEXT = "✅ Your standup has been submitted successfully!"
UPDATED_TEXT = "✅ Your standup has been updated successfully!"
NOTE_ADDED_TEXT = "✅ Added to tomorrow's plan: {note}"
USER_NOT_FOUND_TEXT = "❌ User not found in StandupSync. Please register at the web app first."
USER_INACTIVE_TEXT = "❌ Your StandupSync account is deactivated. Please contact your team admin."
STANDUP_USAGE_TEXT = (
    "❌ Nothing to submit. Usage: "
    "`yesterday: item, item | today: item, item | blockers: item`"
)
NOTE_USAGE_TEXT = "❌ Please add a note after the command, e.g. `review the release checklist`"
SUBMIT_FAILED_TEXT = "❌ Failed to submit standup. Please try again or use the web app."
NOTE_FAILED_TEXT = "❌ Failed to save your note. Please try again or use the web app."


def _reply(text: str) -> SlashResponse:
    return SlashResponse(response_type="ephemeral", text=text)


async def read_slash_command(request: Request, settings: Settings) -> SlashCommandPayload:
    """
    Verify and decode a form-encoded slash command.

    The signature is checked against the raw body whenever a signing secret
    is configured.

    Raises:
        HTTPException: 401 if the signature is missing, stale, or wrong
        ValidationError: If required Slack fields are absent
    """
    body = await request.body()

    if settings.slack_signing_secret:
        if not validate_slack_signature(
            signing_secret=settings.slack_signing_secret,
            timestamp=request.headers.get("X-Slack-Request-Timestamp", ""),
            body=body,
            signature=request.headers.get("X-Slack-Signature", ""),
        ):
            logger.warning(f"slack_signature_invalid: path={request.url.path}")
            raise HTTPException(status_code=401, detail="Invalid Slack signature")
    else:
        logger.warning("slack_signature_skipped: reason=signing_secret_not_configured")

    fields = parse_qs(body.decode("utf-8"), keep_blank_values=True)
    return SlashCommandPayload(**{key: values[0] for key, values in fields.items()})


async def resolve_slack_user(
    users: UserService, payload: SlashCommandPayload
) -> Optional[UserORM]:
    """Find the account behind a Slack user, falling back to email.

    A successful email match links the Slack id to the account so later
    commands resolve directly.
    """
    user = await users.get_by_slack_id(payload.user_id)
    if user is None and payload.user_email:
        user = await users.get_by_email(payload.user_email)
        if user is not None:
            await users.link_slack_identity(user, payload.user_id)
            logger.info(f"slack_identity_linked: user_id={user.id}, slack_user_id={payload.user_id}")
    return user


# ----------------------------------------------------------------------
# Slash commands (always 200, ephemeral text)
# ----------------------------------------------------------------------


@router.post("/command", response_model=SlashResponse)
async def standup_command(
    request: Request,
    settings: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
    standups: StandupService = Depends(get_standup_service),
) -> SlashResponse:
    """Submit or update today's standup from `/standup yesterday: ... | today: ... | blockers: ...`."""
    try:
        payload = await read_slash_command(request, settings)
    except ValidationError as e:
        logger.warning(f"slack_command_invalid_payload: error={str(e)}")
        return _reply(SUBMIT_FAILED_TEXT)

    try:
        user = await resolve_slack_user(users, payload)
        if user is None:
            logger.info(f"slack_command_unknown_user: slack_user_id={payload.user_id}")
            return _reply(USER_NOT_FOUND_TEXT)
        if not user.is_active:
            return _reply(USER_INACTIVE_TEXT)

        command = parse_standup_command(payload.text)
        if command.is_empty:
            return _reply(STANDUP_USAGE_TEXT)

        _, created = await standups.submit_from_command(user, command)
    except Exception as e:
        logger.exception(f"slack_command_failed: slack_user_id={payload.user_id}, error={str(e)}")
        return _reply(SUBMIT_FAILED_TEXT)

    return _reply(SUBMITTED_TEXT if created else UPDATED_TEXT)


@router.post("/update", response_model=SlashResponse)
async def quick_update_command(
    request: Request,
    settings: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service),
    standups: StandupService = Depends(get_standup_service),
) -> SlashResponse:
    """Append a free-text note to tomorrow's plan."""
    try:
        payload = await read_slash_command(request, settings)
    except ValidationError as e:
        logger.warning(f"slack_update_invalid_payload: error={str(e)}")
        return _reply(NOTE_FAILED_TEXT)

    note = payload.text.strip()
    try:
        user = await resolve_slack_user(users, payload)
        if user is None:
            return _reply(USER_NOT_FOUND_TEXT)
        if not user.is_active:
            return _reply(USER_INACTIVE_TEXT)
        if not note:
            return _reply(NOTE_USAGE_TEXT)

        await standups.append_note(user, note)
    except Exception as e:
        logger.exception(f"slack_update_failed: slack_user_id={payload.user_id}, error={str(e)}")
        return _reply(NOTE_FAILED_TEXT)

    return _reply(NOTE_ADDED_TEXT.format(note=note))


# ----------------------------------------------------------------------
# Admin configuration
# ----------------------------------------------------------------------


@router.get("/settings", response_model=SettingsEnvelope)
async def get_slack_settings(
    current_user: UserORM = Depends(require_admin),
    slack: SlackService = Depends(get_slack_service),
) -> SettingsEnvelope:
    """Current Slack settings for the team, or null. The token is never included."""
    settings = await slack.get_settings(current_user.team_id)
    if settings is None:
        return SettingsEnvelope(settings=None)
    return SettingsEnvelope(settings=TeamSettingsResponse.model_validate(settings))


@router.post("/configure", response_model=ConfigureResponse)
async def configure_slack(
    request: ConfigureRequest,
    current_user: UserORM = Depends(require_admin),
    slack: SlackService = Depends(get_slack_service),
) -> ConfigureResponse:
    """
    Verify a bot token and store it with the target channel.

    Raises:
        InvalidRequestError: 400 if the token is missing or rejected by Slack
    """
    settings = await slack.configure(
        current_user.team_id,
        access_token=request.access_token or "",
        channel_id=request.channel_id,
        channel_name=request.channel_name,
    )
    return ConfigureResponse(
        settings=TeamSettingsResponse.model_validate(settings),
        message="Slack integration configured successfully",
    )


@router.get("/channels", response_model=ChannelsResponse)
async def list_stored_channels(
    current_user: UserORM = Depends(require_admin),
    slack: SlackService = Depends(get_slack_service),
) -> ChannelsResponse:
    """Channels reachable with the team's stored token; empty when not connected."""
    try:
        channels = await slack.list_channels(current_user.team_id)
    except SlackIntegrationError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return ChannelsResponse(channels=channels)


@router.post("/channels", response_model=ChannelsResponse)
async def list_channels_for_token(
    request: ChannelsRequest,
    current_user: UserORM = Depends(require_admin),
    slack: SlackService = Depends(get_slack_service),
) -> ChannelsResponse:
    """Channels reachable with a token that has not been saved yet."""
    if not request.access_token:
        raise HTTPException(status_code=400, detail="Access token is required")
    try:
        channels = await slack.list_channels(current_user.team_id, request.access_token)
    except SlackIntegrationError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return ChannelsResponse(channels=channels)


@router.get("/members", response_model=MembersResponse)
async def list_slack_members(
    current_user: UserORM = Depends(require_admin),
    slack: SlackService = Depends(get_slack_service),
) -> MembersResponse:
    """Workspace members, used to link Slack ids to accounts."""
    try:
        members = await slack.list_members(current_user.team_id)
    except SlackIntegrationError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return MembersResponse(members=members)


@router.get("/test", response_model=ConnectionTestResponse)
async def test_slack_connection(
    current_user: UserORM = Depends(require_admin),
    slack: SlackService = Depends(get_slack_service),
) -> ConnectionTestResponse:
    """Check the stored token against Slack."""
    info = await slack.test_connection(current_user.team_id)
    return ConnectionTestResponse(connected=info.ok, team=info.team, error=info.error)


@router.post("/disconnect", response_model=MessageResponse)
async def disconnect_slack(
    current_user: UserORM = Depends(require_admin),
    slack: SlackService = Depends(get_slack_service),
) -> MessageResponse:
    """
    Remove the stored token and channel.

    Raises:
        NotFoundError: 404 if the team never configured Slack
    """
    await slack.disconnect(current_user.team_id)
    return MessageResponse(message="Slack disconnected successfully")
