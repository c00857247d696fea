"""Create, find and delete accounts."""

import logging
import time
from typing import Optional

from . import config, exceptions, store, vault
from .account import Account, is_valid_field
from .domain import ById, ByUsername, ByEmail, Selector

logger = logging.getLogger(__name__)


class AccountDirectory:
    """
    Entry point to the account store.

    Every lookup reads the store afresh and returns a new :class:`.Account`
    handle; nothing is cached here.
    """

    def __init__(self, db: store.Database) -> None:
        self.db = db

    @classmethod
    def from_config(cls, uri: Optional[str] = None) -> 'AccountDirectory':
        """Build a directory on the database named in :mod:`.config`."""
        return cls(store.Database(uri or config.DATABASE_URI,
                                  echo=config.DATABASE_ECHO))

    def create_account(self, username: str, email: str, password: str) \
            -> bool:
        """
        Create a new, unconfirmed account.

        Fails without writing anything if another account already has the
        username or the email address. The check is repeated atomically by
        the store's unique keys, so two concurrent requests for the same
        name cannot both succeed.

        Returns
        -------
        bool
            Whether the account was created.

        """
        if not is_valid_field(username) or not is_valid_field(email):
            logger.debug('Rejected account with invalid username or email')
            return False
        if store.account_exists(self.db, username=username, email=email):
            logger.debug('Username or email already in use')
            return False
        try:
            record = store.insert_account(
                self.db,
                username=username,
                email=email,
                password_hash=vault.hash_secret(password),
                confirmation=self._new_confirmation_token()
            )
        except exceptions.AccountConflict:
            logger.debug('Username or email taken by a concurrent request')
            return False
        logger.info('Created account %s', record.account_id)
        return True

    def _new_confirmation_token(self) -> str:
        # The time suffix separates tokens even if the random part repeats.
        return vault.random_token(config.CONFIRMATION_BYTES) \
            + format(time.time_ns(), 'x')

    def lookup_account(self, account_id: Optional[int] = None,
                       username: Optional[str] = None,
                       email: Optional[str] = None) -> Optional[Account]:
        """
        Get the account matching any of the given keys.

        Keys left as ``None`` are ignored. If the keys match different
        accounts the result is ambiguous and ``None`` is returned, the same
        as when nothing matches.

        Raises
        ------
        ValueError
            No key was given.
        :class:`.StoreError`
            The store could not be queried.

        """
        record = store.find_account(self.db, account_id=account_id,
                                    username=username, email=email)
        if record is None:
            return None
        return Account(self.db, record)

    def lookup(self, selector: Selector) -> Optional[Account]:
        """Get the account picked out by a single-key selector."""
        if isinstance(selector, ById):
            return self.lookup_account(account_id=selector.account_id)
        if isinstance(selector, ByUsername):
            return self.lookup_account(username=selector.username)
        if isinstance(selector, ByEmail):
            return self.lookup_account(email=selector.email)
        raise TypeError(f'Not an account selector: {selector!r}')

    def lookup_by_id(self, account_id: int) -> Optional[Account]:
        return self.lookup(ById(account_id))

    def lookup_by_username(self, username: str) -> Optional[Account]:
        return self.lookup(ByUsername(username))

    def lookup_by_email(self, email: str) -> Optional[Account]:
        return self.lookup(ByEmail(email))

    def delete_account(self, account: Account, password: str) -> bool:
        """
        Delete an account and its sessions, given its password.

        The handle passed in must not be used afterwards.
        """
        return account.delete(password)
