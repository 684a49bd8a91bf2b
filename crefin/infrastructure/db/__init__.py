"""
Database infrastructure for the Crefin backend.
"""

from .database import engine, SessionLocal, get_db, Base, create_all_tables

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "create_all_tables",
]
