"""In-memory account and session stores."""

from .accounts import AccountStore, ConnectedAccount
from .sessions import CookiePolicy, SessionContext, SessionStore, SessionUser

__all__ = [
    "AccountStore",
    "ConnectedAccount",
    "CookiePolicy",
    "SessionContext",
    "SessionStore",
    "SessionUser",
]
