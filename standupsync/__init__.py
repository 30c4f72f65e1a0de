"""StandupSync: team standup tracking with Slack integration."""

__version__ = "0.1.0"
