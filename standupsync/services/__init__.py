"""Domain services used by the API routers."""

from standupsync.services.email_service import EmailService
from standupsync.services.slack_service import SlackService
from standupsync.services.standup_service import StandupService
from standupsync.services.user_service import UserService

__all__ = ["EmailService", "SlackService", "StandupService", "UserService"]
