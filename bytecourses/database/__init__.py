"""Database package."""

from .connection import SessionLocal, create_tables, engine, get_db

__all__ = ["engine", "SessionLocal", "get_db", "create_tables"]
