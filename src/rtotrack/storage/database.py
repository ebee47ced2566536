"""Engine and session management."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from rtotrack.storage.tables import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the SQLAlchemy engine and hands out sessions.

    Every core operation opens its own short-lived session; nothing holds
    a session between calls.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        """Create the engine.

        Args:
            url: SQLAlchemy URL, e.g. ``sqlite:///records.db``. In-memory
                SQLite shares one connection so all sessions see the same data.
            echo: Log emitted SQL
        """
        self.url = url
        kwargs: dict = {}
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}

        self.engine = create_engine(url, echo=echo, **kwargs)
        self._sessions = sessionmaker(self.engine, expire_on_commit=False)
        logger.debug("Engine created for %s", parsed.render_as_string(hide_password=True))

    def create_all(self) -> None:
        """Create missing tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session for reads; the caller commits if it writes."""
        with self._sessions() as session:
            yield session

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Session inside a transaction: commit on success, roll back on error."""
        with self._sessions.begin() as session:
            yield session

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()
