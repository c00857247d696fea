"""Tests for :mod:`authengine.store`."""

from unittest import TestCase

from .. import domain, exceptions, store, vault
from .util import temporary_db


def _insert(db, username, email, confirmation='pending'):
    return store.insert_account(db, username=username, email=email,
                                password_hash=vault.hash_secret('pw'),
                                confirmation=confirmation)


class TestInsertAccount(TestCase):
    """Tests for :func:`.store.insert_account`."""

    def test_insert(self):
        """The stored record comes back with an id and join date."""
        with temporary_db() as db:
            record = _insert(db, 'alice', 'a@x.com')
            self.assertIsInstance(record, domain.AccountRecord)
            self.assertEqual(record.account_id, 1)
            self.assertEqual(record.username, 'alice')
            self.assertFalse(record.confirmed)
            self.assertGreater(record.joined_date, 0)

    def test_unique_keys(self):
        """The store itself rejects a duplicate username or email."""
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            with self.assertRaises(exceptions.AccountConflict):
                _insert(db, 'alice', 'b@x.com')
            with self.assertRaises(exceptions.AccountConflict):
                _insert(db, 'bob', 'a@x.com')
            self.assertEqual(_insert(db, 'bob', 'b@x.com').account_id, 2)


class TestFindAccount(TestCase):
    """Tests for :func:`.store.find_account`."""

    def test_any_key_matches(self):
        with temporary_db() as db:
            record = _insert(db, 'alice', 'a@x.com')
            self.assertEqual(store.find_account(db, account_id=1), record)
            self.assertEqual(store.find_account(db, username='alice'), record)
            self.assertEqual(store.find_account(db, email='a@x.com'), record)
            self.assertEqual(
                store.find_account(db, account_id=-1, username='alice',
                                   email=''),
                record
            )

    def test_no_match(self):
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            self.assertIsNone(store.find_account(db, username='bob'))

    def test_ambiguous_match(self):
        """Keys that match two different accounts find nothing."""
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            _insert(db, 'bob', 'b@x.com')
            self.assertIsNone(
                store.find_account(db, username='alice', email='b@x.com')
            )
            self.assertTrue(
                store.account_exists(db, username='alice', email='b@x.com')
            )

    def test_no_keys(self):
        with temporary_db() as db:
            with self.assertRaises(ValueError):
                store.find_account(db)


class TestUpdateAccount(TestCase):
    """Tests for :func:`.store.update_account`."""

    def test_update(self):
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            store.update_account(db, 1, username='alicia', email='c@x.com')
            record = store.find_account(db, account_id=1)
            self.assertEqual(record.username, 'alicia')
            self.assertEqual(record.email, 'c@x.com')

    def test_conflict(self):
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            _insert(db, 'bob', 'b@x.com')
            with self.assertRaises(exceptions.AccountConflict):
                store.update_account(db, 2, username='alice')
            self.assertEqual(store.find_account(db, account_id=2).username,
                             'bob')

    def test_missing(self):
        with temporary_db() as db:
            with self.assertRaises(exceptions.NoSuchAccount):
                store.update_account(db, 42, username='nobody')


class TestConfirmAccount(TestCase):
    """Tests for :func:`.store.confirm_account`."""

    def test_consumed_once(self):
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com', confirmation='tok')
            self.assertFalse(store.confirm_account(db, 1, 'wrong'))
            self.assertTrue(store.confirm_account(db, 1, 'tok'))
            self.assertFalse(store.confirm_account(db, 1, 'tok'))
            self.assertFalse(store.confirm_account(db, 1, domain.CONFIRMED))
            self.assertTrue(store.find_account(db, account_id=1).confirmed)


class TestSessionRows(TestCase):
    """Tests for the session row functions."""

    def test_partial_upsert(self):
        """Writing one hash leaves the other alone."""
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            self.assertIsNone(store.load_session(db, 1))

            store.upsert_session(db, 1, api_hash='api')
            store.upsert_session(db, 1, login_hash='login', login_issued=5)
            row = store.load_session(db, 1)
            self.assertEqual(row.login_hash, 'login')
            self.assertEqual(row.api_hash, 'api')
            self.assertEqual(row.login_issued, 5)

            store.upsert_session(db, 1, api_hash='api2')
            row = store.load_session(db, 1)
            self.assertEqual(row.login_hash, 'login')
            self.assertEqual(row.api_hash, 'api2')

    def test_unknown_field(self):
        with temporary_db() as db:
            with self.assertRaises(ValueError):
                store.upsert_session(db, 1, password='x')

    def test_upsert_without_account(self):
        with temporary_db() as db:
            with self.assertRaises(exceptions.NoSuchAccount):
                store.upsert_session(db, 42, login_hash='login')

    def test_delete_session(self):
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            self.assertFalse(store.delete_session(db, 1))
            store.upsert_session(db, 1, login_hash='login')
            self.assertTrue(store.delete_session(db, 1))
            self.assertIsNone(store.load_session(db, 1))

    def test_delete_account_cascades(self):
        with temporary_db() as db:
            _insert(db, 'alice', 'a@x.com')
            store.upsert_session(db, 1, login_hash='login')
            store.delete_account(db, 1)
            self.assertIsNone(store.find_account(db, account_id=1))
            self.assertIsNone(store.load_session(db, 1))
            with self.assertRaises(exceptions.NoSuchAccount):
                store.delete_account(db, 1)


class TestStoreFailure(TestCase):
    """Database faults are raised, not reported as misses."""

    def test_missing_tables(self):
        with temporary_db(drop=False) as db:
            db.drop_all()
            with self.assertRaises(exceptions.StoreError):
                store.find_account(db, username='alice')
            with self.assertRaises(exceptions.StoreError):
                store.load_session(db, 1)

    def test_is_available(self):
        with temporary_db() as db:
            self.assertTrue(db.is_available())
