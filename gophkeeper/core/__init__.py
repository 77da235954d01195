# GophKeeper Core Module
from .config import Settings, get_settings
from .database import Base, check_db_connection, create_engine, create_session_maker, get_db
from .logging import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "Base",
    "create_engine",
    "create_session_maker",
    "get_db",
    "check_db_connection",
]
