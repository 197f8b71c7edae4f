"""
Core module - Configuration, database, and external service clients.
"""

from admission_intake.core.config import get_settings, settings
from admission_intake.core.database import Base, close_db, get_db, init_db

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
]
