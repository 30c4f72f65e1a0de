"""Repository layer for database access."""

from standupsync.db.repositories.base import BaseRepository
from standupsync.db.repositories.standup_repo import StandupRepository
from standupsync.db.repositories.team_settings_repo import TeamSettingsRepository
from standupsync.db.repositories.user_repo import TeamRepository, UserRepository

__all__ = [
    "BaseRepository",
    "StandupRepository",
    "TeamRepository",
    "TeamSettingsRepository",
    "UserRepository",
]
