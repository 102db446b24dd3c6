"""API routers."""

from tutor.routers import exercises, health, progress

__all__ = ["exercises", "health", "progress"]
