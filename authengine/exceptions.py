"""Exceptions."""


class AuthEngineError(RuntimeError):
    """Base class for errors raised by the engine."""


class AccountConflict(AuthEngineError):
    """A write would violate the uniqueness of id, username or email."""


class NoSuchAccount(AuthEngineError):
    """Account does not exist."""


class StoreError(IOError):
    """The store could not be reached or failed to complete a request.

    Distinct from a rejected credential: callers must not treat this as
    "invalid password" or "not found".
    """
