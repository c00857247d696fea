"""Database connection, transactions and time helpers."""

import logging
from typing import Generator, Optional, Any
from datetime import datetime
from contextlib import contextmanager

from pytz import UTC
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session
from sqlalchemy.pool import StaticPool

from .. import config, exceptions
from .models import Base

logger = logging.getLogger(__name__)


def now() -> int:
    """Get the current epoch/unix time."""
    return epoch(datetime.now(tz=UTC))


def epoch(t: datetime) -> int:
    """Convert a :class:`.datetime` to UNIX time."""
    delta = t - datetime.fromtimestamp(0, tz=UTC)
    return int(round((delta).total_seconds()))


def from_epoch(t: int) -> datetime:
    """Get a :class:`datetime` from an UNIX timestamp."""
    return datetime.fromtimestamp(t, tz=UTC)


def _enable_sqlite_foreign_keys(dbapi_conn: Any, _: Any) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class Database:
    """
    Handle on the account store.

    Owns the SQLAlchemy engine and hands out one session per
    :meth:`transaction`. Holds no account state of its own, so a single
    instance can be shared by every request-handling thread.
    """

    def __init__(self, uri: Optional[str] = None,
                 engine: Optional[Engine] = None, echo: bool = False) -> None:
        if engine is None:
            engine = self._create_engine(uri or config.DATABASE_URI, echo)
        self.engine = engine
        self._sessionmaker = sessionmaker(bind=engine, expire_on_commit=False)

    @staticmethod
    def _create_engine(uri: str, echo: bool) -> Engine:
        kwargs: dict = {'echo': echo}
        if uri.startswith('sqlite'):
            kwargs['connect_args'] = {'check_same_thread': False}
            # An in-memory database only exists on its one connection.
            if uri in ('sqlite://', 'sqlite:///:memory:'):
                kwargs['poolclass'] = StaticPool
        engine = create_engine(uri, **kwargs)
        if uri.startswith('sqlite'):
            event.listen(engine, 'connect', _enable_sqlite_foreign_keys)
        return engine

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        Context manager for a database transaction.

        Commits when the block exits cleanly. On any error the transaction is
        rolled back; unique-key violations are raised as
        :class:`.AccountConflict` and other database failures as
        :class:`.StoreError`.
        """
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            logger.debug('Integrity violation, rolling back: %s', e.orig)
            session.rollback()
            raise exceptions.AccountConflict('Unique key violation') from e
        except SQLAlchemyError as e:
            logger.error('Commit failed, rolling back: %s', str(e))
            session.rollback()
            raise exceptions.StoreError('Database error') from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create all tables in the database."""
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all tables in the database."""
        Base.metadata.drop_all(self.engine)

    def is_available(self) -> bool:
        """Check our connection to the database."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text('SELECT 1'))
        except SQLAlchemyError as e:
            logger.error('Encountered an error talking to database: %s', e)
            return False
        return True

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
