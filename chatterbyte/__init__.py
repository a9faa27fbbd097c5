"""Chatterbyte backend: connect Google accounts and serve their newest Gmail messages.

Public API re-exported here for convenience::

    from chatterbyte import create_app, Settings
"""

from .app import create_app
from .config import Settings
from .errors import ProviderError, SessionStoreError
from .logging import setup_logging

__all__ = [
    "ProviderError",
    "SessionStoreError",
    "Settings",
    "create_app",
    "setup_logging",
]
