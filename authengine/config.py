"""Engine configuration, read from the environment."""
import os

#################### Store ####################
DATABASE_URI = os.environ.get('AUTH_DATABASE_URI', 'sqlite:///authengine.db')
"""SQLAlchemy URI for the account store.

Any backend with unique-key support works; the unique constraints on
``username`` and ``email`` are the final guard against concurrent creation.
"""

DATABASE_ECHO = bool(int(os.environ.get('AUTH_DATABASE_ECHO', '0')))
"""Log every SQL statement emitted by the engine."""

#################### Credentials ####################
BCRYPT_ROUNDS = int(os.environ.get('AUTH_BCRYPT_ROUNDS', '12'))
"""Cost factor for bcrypt. Each increment doubles hashing time."""

TOKEN_BYTES = int(os.environ.get('AUTH_TOKEN_BYTES', '64'))
"""Random bytes in a login session token."""

API_KEY_BYTES = int(os.environ.get('AUTH_API_KEY_BYTES', '64'))
"""Random bytes in an API key."""

RESET_PASSWORD_BYTES = int(os.environ.get('AUTH_RESET_PASSWORD_BYTES', '20'))
"""Random bytes in a password generated by a reset."""

CONFIRMATION_BYTES = int(os.environ.get('AUTH_CONFIRMATION_BYTES', '32'))
"""Random bytes in the secret part of a confirmation token."""

#################### Accounts ####################
MAX_FIELD_LENGTH = int(os.environ.get('AUTH_MAX_FIELD_LENGTH', '128'))
"""Maximum length of usernames and email addresses."""

#################### Logging ####################
LOG_LEVEL = os.environ.get('AUTH_LOG_LEVEL', 'INFO')
LOG_JSON = bool(int(os.environ.get('AUTH_LOG_JSON', '1')))
"""Emit structured JSON log records instead of plain text."""
