"""Exceptions raised at the boundaries with Google and the session backend."""

from __future__ import annotations


class ProviderError(Exception):
    """An upstream call to Google (token exchange, userinfo, Gmail) failed."""


class SessionStoreError(Exception):
    """The session backend could not complete an operation."""
