"""FastAPI application for StandupSync."""
