"""The account aggregate: one stored account plus its session state."""

import logging
import secrets
import threading
from datetime import datetime
from typing import Any, Optional, Union

from . import config, domain, exceptions, store, vault
from .domain import SessionContext
from .sessions import SessionManager

logger = logging.getLogger(__name__)

Presented = Union[SessionContext, str, None]
"""What a caller can show to prove a login: its session context or a token."""


def is_valid_field(value: str) -> bool:
    """Usernames and emails must be non-empty and fit their columns."""
    return bool(value) and len(value) <= config.MAX_FIELD_LENGTH


class Account:
    """
    A user account.

    Wraps the stored :class:`.domain.AccountRecord` and the account's
    :class:`.SessionManager`. Every successful mutation writes the store and
    then updates the cached record, so the handle always reflects its own
    writes without a re-fetch. Mutations on one handle are serialized by a
    per-instance lock; writes from different handles to the same account are
    last-write-wins at the store.

    A handle must not be used after its account has been deleted.
    """

    def __init__(self, db: store.Database, record: domain.AccountRecord) \
            -> None:
        self.db = db
        self._record = record
        self._lock = threading.RLock()
        self.sessions = SessionManager(db, record.account_id)

    def __repr__(self) -> str:
        return f'<Account {self.id} {self.username!r}>'

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._record == other._record

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def id(self) -> int:
        return self._record.account_id

    @property
    def username(self) -> str:
        return self._record.username

    @property
    def email(self) -> str:
        return self._record.email

    @property
    def password_hash(self) -> str:
        return self._record.password_hash

    @property
    def confirmed(self) -> bool:
        return self._record.confirmed

    @property
    def pending_confirmation_token(self) -> Optional[str]:
        """The token that will confirm this account, or None if confirmed."""
        if self.confirmed:
            return None
        return self._record.confirmation

    @property
    def joined(self) -> datetime:
        return store.util.from_epoch(self._record.joined_date)

    def does_password_match(self, password: str) -> bool:
        """Check a password against the current password hash."""
        return vault.verify_secret(password, self.password_hash)

    def confirm(self, token: str) -> bool:
        """
        Confirm the account with the token it was created with.

        Confirmation happens once. Afterwards, and for any other token, this
        returns ``False`` and changes nothing.
        """
        if not token:
            return False
        with self._lock:
            pending = self.pending_confirmation_token
            if pending is None or not secrets.compare_digest(
                    token.encode('utf-8'), pending.encode('utf-8')):
                return False
            if not store.confirm_account(self.db, self.id, token):
                logger.debug('Account %s no longer pending in the store',
                             self.id)
                return False
            self._record = self._record._replace(
                confirmation=domain.CONFIRMED
            )
        logger.info('Confirmed account %s', self.id)
        return True

    def login(self, password: str, context: SessionContext) -> bool:
        """
        Log in with a password.

        The account must be confirmed. If ``context`` already holds a valid
        login for this account, nothing is issued and the existing session is
        kept. Otherwise a new login token is issued and written, together
        with the account id, into ``context``, replacing whatever login it
        held before.
        """
        with self._lock:
            if not self.confirmed:
                logger.debug('Refused login for unconfirmed account %s',
                             self.id)
                return False
            if self.is_logged_in(context):
                return True
            if not self.does_password_match(password):
                logger.debug('Wrong password for account %s', self.id)
                return False
            token = self.sessions.issue_login_token()
        context.account_id = self.id
        context.login_token = token
        logger.info('Account %s logged in', self.id)
        return True

    def is_logged_in(self, presented: Presented) -> bool:
        """
        Check whether the caller is logged in as this account.

        Accepts either the caller's :class:`.SessionContext` or a bare login
        token. A context that belongs to another account is never valid.
        """
        if isinstance(presented, SessionContext):
            if presented.is_empty or presented.account_id != self.id:
                return False
            presented = presented.login_token
        return self.sessions.is_valid_login_token(presented)

    def logout(self, context: SessionContext) -> None:
        """
        Log out by discarding the caller's copy of the login token.

        The stored token hash is left in place: a copy of the token kept
        elsewhere stays valid until the next login, password reset or
        account deletion.
        """
        context.clear()
        logger.debug('Cleared session context for account %s', self.id)

    def change_password(self, old_password: str, new_password: str) -> bool:
        """Set a new password, given the current one."""
        with self._lock:
            if not self.does_password_match(old_password):
                return False
            new_hash = vault.hash_secret(new_password)
            try:
                store.update_account(self.db, self.id, password_hash=new_hash)
            except exceptions.NoSuchAccount:
                logger.debug('Account %s is gone', self.id)
                return False
            self._record = self._record._replace(password_hash=new_hash)
        logger.info('Changed password for account %s', self.id)
        return True

    def reset_password(self) -> str:
        """
        Replace the password with a random one and end all sessions.

        The session row is deleted, so the login token and the API key both
        stop working.

        Returns
        -------
        str
            The new plaintext password.

        """
        with self._lock:
            new_password = vault.random_token(config.RESET_PASSWORD_BYTES)
            new_hash = vault.hash_secret(new_password)
            store.update_account(self.db, self.id, password_hash=new_hash)
            self._record = self._record._replace(password_hash=new_hash)
            self.sessions.wipe()
        logger.info('Reset password for account %s', self.id)
        return new_password

    def change_username(self, username: str, presented: Presented) -> bool:
        """Rename the account. The caller must be logged in as it."""
        return self._change_unique_field('username', username, presented)

    def change_email(self, email: str, presented: Presented) -> bool:
        """Change the email address. The caller must be logged in."""
        return self._change_unique_field('email', email, presented)

    def _change_unique_field(self, field: str, value: str,
                             presented: Presented) -> bool:
        with self._lock:
            if not self.is_logged_in(presented):
                return False
            if not is_valid_field(value):
                return False
            if getattr(self._record, field) == value:
                return True
            if store.account_exists(self.db, **{field: value}):
                return False
            try:
                store.update_account(self.db, self.id, **{field: value})
            except exceptions.AccountConflict:
                logger.debug('Lost race for %s on account %s', field, self.id)
                return False
            self._record = self._record._replace(**{field: value})
        logger.info('Changed %s for account %s', field, self.id)
        return True

    def generate_new_api_key(self) -> Optional[str]:
        """
        Issue a new API key, replacing the previous one.

        Returns
        -------
        str or None
            The plaintext key, or None if the account is not confirmed.

        """
        with self._lock:
            if not self.confirmed:
                return None
            api_key = vault.random_token(config.API_KEY_BYTES)
            self.sessions.issue_api_token(api_key)
        logger.info('Generated API key for account %s', self.id)
        return api_key

    def verify_api_key(self, api_key: str) -> bool:
        """Check an API key presented by a client."""
        return self.sessions.is_valid_api_token(api_key)

    def delete(self, password: str) -> bool:
        """
        Delete the account and its sessions, given its password.

        The handle must not be used afterwards.
        """
        with self._lock:
            if not self.does_password_match(password):
                return False
            try:
                store.delete_account(self.db, self.id)
            except exceptions.NoSuchAccount:
                logger.debug('Account %s was already deleted', self.id)
                return False
        logger.info('Deleted account %s', self.id)
        return True
