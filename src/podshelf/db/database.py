"""
Database engine and session management for podshelf.

This module provides:
- A ``Database`` object built once from configuration
- Session-per-operation pattern via the ``session()`` context manager
- SQLite connection settings (foreign keys, busy timeout)
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from podshelf.core.config import DatabaseConfig
from podshelf.db.models import Base

logger = logging.getLogger(__name__)


def _sqlite_pragmas(timeout: float):
    """Build a connect listener applying SQLite settings."""

    def apply(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={int(timeout * 1000)}")
        cursor.close()

    return apply


def create_db_engine(url: str, timeout: float = 30.0) -> Engine:
    """Create an engine, preparing the SQLite file location when needed."""
    parsed = make_url(url)
    connect_args = {}

    if parsed.get_backend_name() == "sqlite":
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        connect_args = {"check_same_thread": False, "timeout": timeout}

    engine = create_engine(url, connect_args=connect_args)

    if parsed.get_backend_name() == "sqlite":
        event.listen(engine, "connect", _sqlite_pragmas(timeout))

    logger.debug("Database engine created for %s", parsed.render_as_string(hide_password=True))
    return engine


class Database:
    """Owns the engine and session factory for one database."""

    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self.url = url
        self.engine = create_db_engine(url, timeout)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "Database":
        return cls(config.url, config.timeout)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions (session-per-operation pattern).

        Rolls back on any error and always closes the session. Committing is
        left to the caller.

        Usage:
            with database.session() as session:
                session.add(entry)
                session.commit()
        """
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error("Database error: %s", e)
            session.rollback()
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init(self) -> None:
        """Create all tables defined in the models."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created")

    def dispose(self) -> None:
        self.engine.dispose()
