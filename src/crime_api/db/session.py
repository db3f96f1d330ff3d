"""
session.py
-----------
Creates the database engine and session factory for SQLAlchemy.

The URL comes from DATABASE_URL (see config.py). SQLite is the default store;
any other SQLAlchemy URL (for example postgresql+psycopg2://...) works too.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Base class for ORM models to inherit from (Code, Neighborhood, Incident)
Base = declarative_base()


def create_db_engine(database_url):
    """
    Create a SQLAlchemy engine for the given URL.

    In-memory SQLite gets a single shared connection so every session sees the
    same database. File-based SQLite gets its parent directory created.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url, connect_args={"check_same_thread": False})

    logger.info("Connecting: %s", url.render_as_string(hide_password=True))
    return create_engine(url, pool_pre_ping=True)


def create_session_factory(engine):
    """Return a session factory; each request opens and closes its own session."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
