"""Testing helpers."""

import shutil
import tempfile
from contextlib import contextmanager
from typing import Generator

from ..directory import AccountDirectory
from ..domain import SessionContext
from ..store import Database


@contextmanager
def temporary_db(database_url: str = 'sqlite:///:memory:',
                 create: bool = True, drop: bool = True) \
        -> Generator[Database, None, None]:
    """Provide an sqlite database for testing purposes."""
    db = Database(database_url)
    if create:
        db.create_all()
    try:
        yield db
    finally:
        if drop:
            db.drop_all()
        db.dispose()


class SetUpAccountsMixin(object):
    """Mixin for creating two confirmed test accounts."""

    def setUp(self):
        """Set up the database."""
        self.db_path = tempfile.mkdtemp()
        self.db_uri = f'sqlite:///{self.db_path}/test.db'
        self.db = Database(self.db_uri)
        self.db.create_all()
        self.directory = AccountDirectory(self.db)

        assert self.directory.create_account('userOne', 'user@1.net', 'pass1')
        assert self.directory.create_account('userTwo', 'user@2.net', 'pass2')
        self.user_one = self.directory.lookup_by_username('userOne')
        self.user_two = self.directory.lookup_by_username('userTwo')
        assert self.user_one.confirm(self.user_one.pending_confirmation_token)
        assert self.user_two.confirm(self.user_two.pending_confirmation_token)

        # Both accounts share one caller-side session, like a browser.
        self.context = SessionContext()

    def tearDown(self):
        self.db.dispose()
        shutil.rmtree(self.db_path)
