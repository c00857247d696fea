"""
Hashing, verification and generation of secrets.

Secrets are hashed with bcrypt. bcrypt only reads the first 72 bytes of its
input, and the engine's tokens are longer than that, so every secret is first
reduced to a base64-encoded SHA-256 digest.
"""

import hashlib
import secrets
from base64 import b64encode
from typing import Optional, Union

import bcrypt

from . import config


def _prehash(secret: str) -> bytes:
    return b64encode(hashlib.sha256(secret.encode('utf-8')).digest())


def hash_secret(secret: str, rounds: Optional[int] = None) -> str:
    """Generate a salted bcrypt hash. Every call uses a fresh salt."""
    salt = bcrypt.gensalt(rounds=rounds or config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prehash(secret), salt).decode('ascii')


def verify_secret(secret: str, hashed: Union[str, bytes, None]) -> bool:
    """
    Check a secret against a hash from :func:`hash_secret`.

    Returns ``False`` for a missing or malformed hash instead of raising.
    """
    if not hashed:
        return False
    if isinstance(hashed, str):
        try:
            hashed = hashed.encode('ascii')
        except UnicodeEncodeError:
            return False
    try:
        return bcrypt.checkpw(_prehash(secret), hashed)
    except ValueError:
        return False


def random_token(nbytes: int) -> str:
    """Get ``nbytes`` of secure random data, as ``2 * nbytes`` hex digits."""
    return secrets.token_hex(nbytes)
