"""Database session management utilities."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from hotdog_backend.database.base import BaseSchema
from hotdog_backend.settings import BackendSettings, get_settings


class DatabaseService:
    """Wraps SQLAlchemy engine and session factory."""

    def __init__(
        self,
        url: str | None = None,
        *,
        settings: BackendSettings | None = None,
    ) -> None:
        database_url = url or (settings or get_settings()).database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            # Saves are written from worker threads.
            connect_args["check_same_thread"] = False
        self._engine = create_engine(
            database_url, future=True, connect_args=connect_args
        )
        self._session_factory = sessionmaker(
            bind=self._engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            class_=Session,
        )

    @property
    def engine(self) -> Engine:
        """Expose the SQLAlchemy engine."""

        return self._engine

    def create_schema(self) -> None:
        """Create every table known to :class:`BaseSchema` if missing."""

        BaseSchema.metadata.create_all(self._engine)

    def dispose(self) -> None:
        """Close pooled connections."""

        self._engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a transactional session scope."""

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
