"""Core app configuration and database."""

from atlas.core.config import get_settings, settings
from atlas.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
