"""
Account authentication and session engine.

Manages account records, password verification, account confirmation, login
session tokens and API keys on top of a relational store. The
:class:`.AccountDirectory` is the entry point: it creates and looks up
:class:`.Account` handles, which expose the account lifecycle.
"""

from .account import Account
from .directory import AccountDirectory
from .domain import ById, ByUsername, ByEmail, SessionContext
from .store.util import Database

__all__ = ['Account', 'AccountDirectory', 'ById', 'ByUsername', 'ByEmail',
           'SessionContext', 'Database']
