"""Core app configuration, database, credentials and tokens."""

from app.core.config import Settings, get_settings
from app.core.database import get_db

__all__ = ["Settings", "get_settings", "get_db"]
