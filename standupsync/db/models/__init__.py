"""ORM models for database tables."""

from standupsync.db.models.standup import StandupORM
from standupsync.db.models.team_settings import TeamSettingsORM
from standupsync.db.models.user import TeamORM, UserORM, UserRole

__all__ = [
    "StandupORM",
    "TeamORM",
    "TeamSettingsORM",
    "UserORM",
    "UserRole",
]
