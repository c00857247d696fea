"""
Persistence for account and session records.

These functions are the only code that touches the database. Each one runs in
its own transaction (see :meth:`.Database.transaction`) and exchanges plain
:mod:`.domain` records with its callers, never live ORM objects.
"""

import logging
from typing import Optional, Any

from sqlalchemy import or_

from .. import domain, exceptions
from . import util
from .models import DBAccount, DBSession
from .util import Database, now

logger = logging.getLogger(__name__)

_ACCOUNT_FIELDS = {
    'username': 'username',
    'email': 'email',
    'password_hash': 'pw_hash',
    'confirmation': 'confirmation',
}

_SESSION_FIELDS = ('login_hash', 'api_hash', 'login_issued', 'api_issued')


def _match(account_id: Optional[int], username: Optional[str],
           email: Optional[str]) -> list:
    clauses = []
    if account_id is not None:
        clauses.append(DBAccount.id == account_id)
    if username is not None:
        clauses.append(DBAccount.username == username)
    if email is not None:
        clauses.append(DBAccount.email == email)
    if not clauses:
        raise ValueError('At least one of id, username or email is required')
    return clauses


def insert_account(db: Database, username: str, email: str,
                   password_hash: str, confirmation: str) \
        -> domain.AccountRecord:
    """
    Insert a new account row.

    Parameters
    ----------
    db : :class:`.Database`
    username : str
    email : str
    password_hash : str
    confirmation : str
        Pending confirmation token.

    Returns
    -------
    :class:`.domain.AccountRecord`
        The stored record, including its new ``account_id``.

    Raises
    ------
    :class:`.AccountConflict`
        The username or email is already taken.

    """
    with db.transaction() as session:
        db_account = DBAccount(
            username=username,
            email=email,
            pw_hash=password_hash,
            confirmation=confirmation,
            joined_date=util.now()
        )
        session.add(db_account)
        session.flush()     # Assigns the id, or fails on a unique key.
        record = db_account.to_domain()
    return record


def find_account(db: Database, account_id: Optional[int] = None,
                 username: Optional[str] = None,
                 email: Optional[str] = None) \
        -> Optional[domain.AccountRecord]:
    """
    Find the one account matching any of the given keys.

    Keys passed as ``None`` do not constrain the match. The lookup is
    disjunctive (``id OR username OR email``); if it matches more than one
    row the result is ambiguous and nothing is returned.

    Raises
    ------
    ValueError
        No key was given at all.

    """
    clauses = _match(account_id, username, email)
    with db.transaction() as session:
        rows = session.query(DBAccount) \
            .filter(or_(*clauses)) \
            .limit(2) \
            .all()
        records = [row.to_domain() for row in rows]
    if len(records) > 1:
        logger.debug('Lookup matched more than one account')
        return None
    return records[0] if records else None


def account_exists(db: Database, account_id: Optional[int] = None,
                   username: Optional[str] = None,
                   email: Optional[str] = None) -> bool:
    """Determine whether any account matches any of the given keys."""
    clauses = _match(account_id, username, email)
    with db.transaction() as session:
        row = session.query(DBAccount.id).filter(or_(*clauses)).first()
    return row is not None


def update_account(db: Database, account_id: int, **changes: Any) -> None:
    """
    Overwrite fields of an account row.

    Accepted fields are ``username``, ``email``, ``password_hash`` and
    ``confirmation``.

    Raises
    ------
    :class:`.NoSuchAccount`
    :class:`.AccountConflict`
        The new username or email belongs to another account.

    """
    values = {_ACCOUNT_FIELDS[field]: value
              for field, value in changes.items()}
    with db.transaction() as session:
        updated = session.query(DBAccount) \
            .filter(DBAccount.id == account_id) \
            .update(values, synchronize_session=False)
    if not updated:
        raise exceptions.NoSuchAccount(f'No account with id {account_id}')


def confirm_account(db: Database, account_id: int, token: str) -> bool:
    """
    Mark an account confirmed if it is still pending ``token``.

    The check and the write are one conditional ``UPDATE``, so a token can
    only ever be consumed once, whichever process presents it.
    """
    with db.transaction() as session:
        updated = session.query(DBAccount) \
            .filter(DBAccount.id == account_id) \
            .filter(DBAccount.confirmation == token) \
            .filter(DBAccount.confirmation != domain.CONFIRMED) \
            .update({'confirmation': domain.CONFIRMED},
                    synchronize_session=False)
    return bool(updated)


def delete_account(db: Database, account_id: int) -> None:
    """
    Delete an account row together with its session row.

    Raises
    ------
    :class:`.NoSuchAccount`

    """
    with db.transaction() as session:
        session.query(DBSession) \
            .filter(DBSession.user_id == account_id) \
            .delete(synchronize_session=False)
        deleted = session.query(DBAccount) \
            .filter(DBAccount.id == account_id) \
            .delete(synchronize_session=False)
    if not deleted:
        raise exceptions.NoSuchAccount(f'No account with id {account_id}')


def load_session(db: Database, account_id: int) \
        -> Optional[domain.SessionRecord]:
    """Get the session row for an account, if there is one."""
    with db.transaction() as session:
        db_session = session.get(DBSession, account_id)
        if db_session is None:
            return None
        return db_session.to_domain()


def upsert_session(db: Database, account_id: int, **fields: Any) -> None:
    """
    Write some columns of an account's session row, creating it if needed.

    Columns that are not passed keep their stored values.

    Raises
    ------
    :class:`.NoSuchAccount`
        The account row does not exist.

    """
    for field in fields:
        if field not in _SESSION_FIELDS:
            raise ValueError(f'Unknown session field: {field}')
    try:
        with db.transaction() as session:
            db_session = session.get(DBSession, account_id)
            if db_session is None:
                db_session = DBSession(user_id=account_id)
                session.add(db_session)
            for field, value in fields.items():
                setattr(db_session, field, value)
    except exceptions.AccountConflict:
        # Either a concurrent writer created the row first, or the account
        # is gone. Updating in place resolves the first case.
        with db.transaction() as session:
            updated = session.query(DBSession) \
                .filter(DBSession.user_id == account_id) \
                .update(fields, synchronize_session=False)
        if not updated:
            raise exceptions.NoSuchAccount(f'No account with id {account_id}')


def delete_session(db: Database, account_id: int) -> bool:
    """Delete the session row for an account. Returns whether one existed."""
    with db.transaction() as session:
        deleted = session.query(DBSession) \
            .filter(DBSession.user_id == account_id) \
            .delete(synchronize_session=False)
    return bool(deleted)


__all__ = ['Database', 'now', 'insert_account', 'find_account',
           'account_exists', 'update_account', 'confirm_account',
           'delete_account', 'load_session', 'upsert_session',
           'delete_session']
