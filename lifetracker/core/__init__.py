"""Core app configuration and storage."""

from lifetracker.core.config import get_settings, settings
from lifetracker.core.storage import get_storage

__all__ = ["get_settings", "settings", "get_storage"]
