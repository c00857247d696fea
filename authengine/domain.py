"""Defines the account and session concepts used throughout the engine."""

from typing import NamedTuple, Optional, Union
from dataclasses import dataclass

CONFIRMED = 'confirmed'
"""Value of ``confirmation`` once an account has been confirmed."""


class AccountRecord(NamedTuple):
    """One row of the account store."""

    account_id: int
    """Store-assigned identifier."""

    username: str
    email: str

    password_hash: str
    """bcrypt hash of the account password."""

    confirmation: str
    """Either :const:`CONFIRMED` or the pending confirmation token."""

    joined_date: int = 0
    """Epoch time at which the account was created."""

    @property
    def confirmed(self) -> bool:
        """The account has completed confirmation."""
        return self.confirmation == CONFIRMED


class SessionRecord(NamedTuple):
    """Per-account token hashes. Either hash may be missing."""

    account_id: int
    login_hash: Optional[str] = None
    api_hash: Optional[str] = None
    login_issued: Optional[int] = None
    api_issued: Optional[int] = None


class ById(NamedTuple):
    """Select an account by its store identifier."""

    account_id: int


class ByUsername(NamedTuple):
    """Select an account by username."""

    username: str


class ByEmail(NamedTuple):
    """Select an account by email address."""

    email: str


Selector = Union[ById, ByUsername, ByEmail]


@dataclass
class SessionContext:
    """
    Caller-held login state, e.g. the contents of a session cookie.

    The engine writes the account id and the plaintext login token here on a
    successful login and reads them back to decide whether a request is
    logged in. It never keeps a copy of its own.
    """

    account_id: Optional[int] = None
    login_token: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.account_id is None or self.login_token is None

    def clear(self) -> None:
        """Forget the login token and account id."""
        self.account_id = None
        self.login_token = None
