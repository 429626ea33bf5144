"""
Database package: engine, session factory and ORM models.
"""

from .database import Base, SessionLocal, engine, build_engine, get_db
from .models import create_all_tables, drop_all_tables

__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "build_engine",
    "get_db",
    "create_all_tables",
    "drop_all_tables",
]
