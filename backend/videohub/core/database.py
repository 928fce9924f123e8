"""
Database lifecycle and unit of work.

A single ``Database`` object owns the engine and session factory. It is opened
at application startup, handed to the API layer through ``app.state`` and
disposed at shutdown. Services receive a ``Session`` explicitly.
"""
import contextlib
import logging
from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from videohub.core.config import settings
from videohub.core.errors import DependencyError, VideohubError
from videohub.models.video import Base
from videohub.models.playlist import Playlist  # noqa: F401  Import to ensure table is created
from videohub.models.engagement import Comment  # noqa: F401  Import to ensure table is created

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, url: Optional[str] = None, **engine_kwargs):
        self.url = url or settings.db_url
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self, create_tables: bool = True) -> "Database":
        """Create the engine and, optionally, any missing tables."""
        if self._engine is not None:
            return self
        kwargs = dict(self.engine_kwargs)
        if self.url.startswith("sqlite"):
            kwargs.setdefault("connect_args", {"check_same_thread": False})
        else:
            kwargs.setdefault("pool_timeout", settings.db_pool_timeout)
            kwargs.setdefault("pool_pre_ping", True)
            if self.url.startswith("postgresql"):
                kwargs.setdefault(
                    "connect_args",
                    {"options": f"-c statement_timeout={settings.db_statement_timeout_ms}"},
                )
        self._engine = create_engine(self.url, **kwargs)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self._engine
        )
        if create_tables:
            Base.metadata.create_all(bind=self._engine)
        logger.info(f"Database opened: {self.url.split('@')[-1]}")
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database connections disposed")
        self._engine = None
        self._session_factory = None

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def sessions(self) -> Generator[Session, None, None]:
        """Yield a session and always close it; used as a FastAPI dependency."""
        db = self.session()
        try:
            yield db
        finally:
            db.close()


@contextlib.contextmanager
def transaction(db: Session) -> Generator[Session, None, None]:
    """
    Commit on success, roll back on any exception.

    IntegrityError is re-raised unchanged so callers can translate uniqueness
    violations into domain errors; other database failures become
    DependencyError.
    """
    try:
        yield db
        db.commit()
    except (IntegrityError, VideohubError):
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error: {e}")
        raise DependencyError(
            "Database operation failed",
            errors=[{"dependency": "database", "detail": str(e.__class__.__name__)}],
        ) from e
    except Exception:
        db.rollback()
        raise
