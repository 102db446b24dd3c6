"""Database package: engine, session dependency and ORM models."""

from tutor.db.base import Base, async_session_maker, engine, get_db, init_db

__all__ = ["Base", "async_session_maker", "engine", "get_db", "init_db"]
