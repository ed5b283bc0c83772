"""Core app configuration, database, and credential primitives."""

from starauth.core.config import get_settings, settings
from starauth.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
