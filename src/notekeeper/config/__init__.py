"""Configuration and database session management."""
from .settings import Settings, settings
from .database import Base, Database, get_db

__all__ = ["Settings", "settings", "Base", "Database", "get_db"]
