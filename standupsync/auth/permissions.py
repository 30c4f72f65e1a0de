"""Team-scoped permission checks for user administration and standup ownership.

These are pure checks over already-loaded records. Each raises a domain
error instead of returning a flag so that routers and services can call
them inline.
"""

import logging
from typing import Iterable, Optional

from standupsync.db.models.standup import StandupORM
from standupsync.db.models.user import TeamORM, UserORM, UserRole
from standupsync.errors import PermissionDeniedError

logger = logging.getLogger(__name__)


def has_role(user: UserORM, roles: Iterable[str]) -> bool:
    """Whether the user's role is one of ``roles``."""
    allowed = {UserRole(r).value for r in roles}
    return UserRole(user.role).value in allowed


def ensure_same_team(actor: UserORM, target: UserORM) -> None:
    """Reject any cross-team access.

    Raises:
        PermissionDeniedError: If the two users belong to different teams.
    """
    if actor.team_id != target.team_id:
        logger.warning(
            f"permission_denied: reason=cross_team, actor_id={actor.id}, target_id={target.id}"
        )
        raise PermissionDeniedError("Access denied")


_SELF_MESSAGES = {
    "role": "Cannot change your own role",
    "status": "Cannot change your own status",
    "delete": "Cannot delete yourself",
}

_OWNER_MESSAGES = {
    "role": "Cannot change the role of the team owner",
    "status": "Cannot change the status of the team owner",
    "delete": "Cannot delete the team owner",
}


def ensure_can_manage(
    actor: UserORM, target: UserORM, action: str, team: Optional[TeamORM] = None
) -> None:
    """Check that an admin may change ``target``'s role or status, or delete them.

    Args:
        actor: The admin performing the action.
        target: The user being changed.
        action: One of "role", "status", "delete".
        team: The shared team, used to protect its owner.

    Raises:
        PermissionDeniedError: On cross-team access, self-targeting, or an
            attempt to demote, deactivate or delete the team owner.
    """
    ensure_same_team(actor, target)

    if actor.id == target.id:
        logger.warning(f"permission_denied: reason=self_{action}, user_id={actor.id}")
        raise PermissionDeniedError(_SELF_MESSAGES[action])

    if team is not None and team.owner_id == target.id:
        logger.warning(f"permission_denied: reason=owner_{action}, target_id={target.id}")
        raise PermissionDeniedError(_OWNER_MESSAGES[action])


def ensure_standup_owner(actor: UserORM, standup: StandupORM) -> None:
    """Only the author of a standup may modify it, whatever their role.

    Raises:
        PermissionDeniedError: If the standup is in another team or belongs
            to someone else.
    """
    if standup.team_id != actor.team_id:
        raise PermissionDeniedError("Access denied")
    if standup.user_id != actor.id:
        logger.warning(
            f"permission_denied: reason=not_owner, user_id={actor.id}, standup_id={standup.id}"
        )
        raise PermissionDeniedError("You can only modify your own standups")
