"""Login session tokens and API keys for a single account."""

import logging
from typing import Optional

from . import config, domain, store, vault

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Issues and checks the login token and API key of one account.

    Only bcrypt hashes of the tokens are stored, one session row per
    account. A newly issued login token replaces the previous one, and the
    same goes for API keys; issuing one kind never touches the other.
    """

    def __init__(self, db: store.Database, account_id: int) -> None:
        self.db = db
        self.account_id = account_id

    def token_hashes(self) -> Optional[domain.SessionRecord]:
        """Get the stored session row, or ``None`` if there is none."""
        return store.load_session(self.db, self.account_id)

    def issue_login_token(self) -> str:
        """
        Generate and store a new login token.

        Returns
        -------
        str
            The plaintext token. This is the only time it is available; the
            caller is responsible for keeping it (e.g. in a cookie).

        """
        token = vault.random_token(config.TOKEN_BYTES)
        store.upsert_session(self.db, self.account_id,
                             login_hash=vault.hash_secret(token),
                             login_issued=store.now())
        logger.debug('Issued login token for account %s', self.account_id)
        return token

    def issue_api_token(self, api_key: str) -> None:
        """Store the hash of ``api_key``, replacing any previous API key."""
        store.upsert_session(self.db, self.account_id,
                             api_hash=vault.hash_secret(api_key),
                             api_issued=store.now())
        logger.debug('Stored API key for account %s', self.account_id)

    def is_valid_login_token(self, token: Optional[str]) -> bool:
        """Check a presented login token. False if none was ever issued."""
        if not token:
            return False
        hashes = self.token_hashes()
        if hashes is None:
            return False
        return vault.verify_secret(token, hashes.login_hash)

    def is_valid_api_token(self, api_key: Optional[str]) -> bool:
        """Check a presented API key. False if none was ever issued."""
        if not api_key:
            return False
        hashes = self.token_hashes()
        if hashes is None:
            return False
        return vault.verify_secret(api_key, hashes.api_hash)

    def wipe(self) -> None:
        """Delete the session row, revoking both login token and API key."""
        if store.delete_session(self.db, self.account_id):
            logger.debug('Wiped session for account %s', self.account_id)
