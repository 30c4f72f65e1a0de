"""Team membership, account administration and password authentication."""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from standupsync.auth.jwt import hash_token
from standupsync.auth.password import generate_temporary_password, hash_password, verify_password
from standupsync.auth.permissions import ensure_can_manage, ensure_same_team
from standupsync.days import utc_now
from standupsync.db.models.user import TeamORM, UserORM, UserRole
from standupsync.db.repositories.user_repo import TeamRepository, UserRepository
from standupsync.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    PermissionDeniedError,
)
from standupsync.services.email_service import EmailService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email or password is incorrect"


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class UserService:
    """User and team operations.

    Authorization rules live in :mod:`standupsync.auth.permissions`; the
    methods taking an ``actor`` apply them before mutating anything.

    Args:
        session: Async database session; each mutating call commits.
        email: Email service for invitations, optional.
    """

    def __init__(self, session: AsyncSession, email: Optional[EmailService] = None) -> None:
        self._session = session
        self._users = UserRepository(session)
        self._teams = TeamRepository(session)
        self._email = email

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_all(self) -> list[UserORM]:
        return await self._users.list_everyone()

    async def list_team(self, team_id: UUID) -> list[UserORM]:
        return await self._users.list_by_team(team_id)

    async def get(self, user_id: UUID) -> UserORM:
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_by_id_or_none(self, user_id: UUID) -> Optional[UserORM]:
        return await self._users.get_by_id(user_id)

    async def get_in_team(self, actor: UserORM, user_id: UUID) -> UserORM:
        """Fetch a user the actor is allowed to see.

        Raises:
            NotFoundError: If the user does not exist.
            PermissionDeniedError: If the user is in another team.
        """
        user = await self.get(user_id)
        ensure_same_team(actor, user)
        return user

    async def get_by_email(self, email: str) -> Optional[UserORM]:
        return await self._users.get_by_email(normalize_email(email))

    async def get_by_slack_id(self, slack_user_id: str) -> Optional[UserORM]:
        return await self._users.get_by_slack_id(slack_user_id)

    async def get_team(self, team_id: UUID) -> Optional[TeamORM]:
        return await self._teams.get_by_id(team_id)

    # ------------------------------------------------------------------
    # Creation and authentication
    # ------------------------------------------------------------------

    async def create(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
        team_id: Optional[UUID] = None,
        invited_by: Optional[UUID] = None,
    ) -> UserORM:
        """Create an account.

        The very first account, and any account created without a team,
        becomes an admin anchoring a brand new team. Everyone else joins
        ``team_id`` with the given role, "user" by default.

        Raises:
            InvalidRequestError: If email or password is missing or the
                password is too weak.
            ConflictError: If the email is already registered.
        """
        email = normalize_email(email)
        if not email:
            raise InvalidRequestError("Email is required")
        if not password:
            raise InvalidRequestError("Password is required")
        if await self._users.get_by_email(email) is not None:
            raise ConflictError("User with this email already exists")

        # hash_password raises ValueError for weak passwords
        try:
            password_hash = hash_password(password)
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e

        display_name = (name or "").strip() or email.split("@")[0]
        user_id = uuid4()
        starts_team = team_id is None or await self._users.count() == 0

        if starts_team:
            team = TeamORM(name=f"{display_name}'s Team", owner_id=user_id)
            self._session.add(team)
            await self._session.flush()
            team_id = team.id
            user_role = UserRole.ADMIN
        else:
            user_role = UserRole(role) if role else UserRole.USER

        user = UserORM(
            id=user_id,
            email=email,
            password_hash=password_hash,
            name=display_name,
            role=user_role,
            team_id=team_id,
            is_active=True,
            is_invited=invited_by is not None,
            invited_by=invited_by,
            invited_at=utc_now() if invited_by is not None else None,
        )
        self._session.add(user)
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError("User with this email already exists") from e
        await self._session.refresh(user)

        logger.info(
            f"user_created: user_id={user.id}, team_id={user.team_id}, role={user.role.value}, "
            f"new_team={starts_team}"
        )
        return user

    async def authenticate(self, email: str, password: str) -> UserORM:
        """Check credentials and record the login time.

        Raises:
            InvalidRequestError: If either field is missing or they don't match.
            PermissionDeniedError: If the account is deactivated.
        """
        if not email or not password:
            raise InvalidRequestError("Email and password are required")

        user = await self._users.get_by_email(normalize_email(email))
        # Same message for unknown email and wrong password
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"login_error: reason=invalid_credentials, email={normalize_email(email)}")
            raise InvalidRequestError(INVALID_CREDENTIALS)

        if not user.is_active:
            logger.warning(f"login_error: reason=user_inactive, user_id={user.id}")
            raise PermissionDeniedError("User account is inactive")

        user.last_login_at = utc_now()
        await self._session.commit()
        return user

    async def set_refresh_token(self, user: UserORM, refresh_token: Optional[str]) -> None:
        """Store the hash of the user's current refresh token, or clear it."""
        user.refresh_token_hash = hash_token(refresh_token) if refresh_token else None
        await self._session.commit()

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    async def invite(
        self,
        actor: UserORM,
        email: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
    ) -> tuple[UserORM, str]:
        """Create a teammate with a temporary password and email them.

        Returns:
            The new user and the temporary password.
        """
        temporary_password = generate_temporary_password()
        user = await self.create(
            email=email,
            password=temporary_password,
            name=name,
            role=role or UserRole.USER.value,
            team_id=actor.team_id,
            invited_by=actor.id,
        )

        if self._email is not None:
            try:
                await self._email.send_invitation(
                    to_email=user.email,
                    to_name=user.name,
                    inviter_name=actor.name,
                    temporary_password=temporary_password,
                )
            except Exception as e:
                logger.warning(f"invitation_email_failed: user_id={user.id}, error={str(e)}")

        logger.info(f"user_invited: user_id={user.id}, invited_by={actor.id}")
        return user, temporary_password

    async def _managed_target(self, actor: UserORM, user_id: UUID, action: str) -> UserORM:
        target = await self.get(user_id)
        team = await self._teams.get_by_id(target.team_id)
        ensure_can_manage(actor, target, action, team)
        return target

    async def update_role(self, actor: UserORM, user_id: UUID, role: str) -> UserORM:
        try:
            new_role = UserRole(role)
        except ValueError as e:
            raise InvalidRequestError(f"Invalid role: {role}") from e

        target = await self._managed_target(actor, user_id, "role")
        target.role = new_role
        target.touch()
        await self._session.commit()
        await self._session.refresh(target)
        logger.info(f"user_role_updated: user_id={target.id}, role={new_role.value}, by={actor.id}")
        return target

    async def set_active(self, actor: UserORM, user_id: UUID, is_active: bool) -> UserORM:
        target = await self._managed_target(actor, user_id, "status")
        target.is_active = is_active
        if not is_active:
            target.refresh_token_hash = None
        target.touch()
        await self._session.commit()
        await self._session.refresh(target)
        logger.info(f"user_status_updated: user_id={target.id}, active={is_active}, by={actor.id}")
        return target

    async def set_slack_user_id(
        self, actor: UserORM, user_id: UUID, slack_user_id: Optional[str]
    ) -> UserORM:
        """Link or unlink a Slack account.

        Allowed for the user themselves or an admin of the same team.
        """
        target = await self.get(user_id)
        ensure_same_team(actor, target)
        if actor.id != target.id and actor.role != UserRole.ADMIN:
            raise PermissionDeniedError("Insufficient permissions")

        target.slack_user_id = (slack_user_id or "").strip() or None
        target.touch()
        await self._session.commit()
        await self._session.refresh(target)
        logger.info(f"user_slack_linked: user_id={target.id}, slack_user_id={target.slack_user_id}")
        return target

    async def link_slack_identity(self, user: UserORM, slack_user_id: str) -> None:
        """Record the Slack id after a successful email-based match."""
        user.slack_user_id = slack_user_id
        user.touch()
        await self._session.commit()

    async def delete(self, actor: UserORM, user_id: UUID) -> None:
        """Delete a teammate and all of their standups."""
        target = await self._managed_target(actor, user_id, "delete")
        await self._users.delete_with_standups(target)
        await self._session.commit()
        logger.info(f"user_deleted: user_id={user_id}, by={actor.id}")
