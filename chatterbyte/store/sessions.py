"""Server-side session store for the single-user (``session``) mode."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog
from fastapi import Response

from chatterbyte.schemas.auth import TokenSet

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionUser:
    email: str
    tokens: TokenSet


@dataclass
class _Entry:
    user: SessionUser
    expires_at: datetime


class SessionStore:
    """In-memory map of session id → :class:`SessionUser` with sliding expiry.

    Every successful :meth:`get` pushes the expiry out by ``max_age``.
    Each :meth:`get` and :meth:`put` first sweeps out every expired entry,
    so abandoned sessions do not outlive ``max_age``.
    """

    def __init__(
        self,
        max_age: timedelta = timedelta(hours=24),
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._max_age = max_age
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    @property
    def max_age(self) -> timedelta:
        return self._max_age

    def get(self, session_id: str) -> SessionUser | None:
        now = self._clock()
        self._purge_expired(now)
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        entry.expires_at = now + self._max_age
        return entry.user

    def put(self, session_id: str, user: SessionUser) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._entries[session_id] = _Entry(user=user, expires_at=now + self._max_age)

    def destroy(self, session_id: str) -> None:
        """Drop the session.  Unknown ids are ignored.

        Store backends signal failure with :class:`SessionStoreError`; the
        in-memory map has no such failure mode.
        """
        self._entries.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _purge_expired(self, now: datetime) -> None:
        expired = [sid for sid, entry in self._entries.items() if entry.expires_at <= now]
        for sid in expired:
            del self._entries[sid]
        if expired:
            logger.debug("sessions_expired", count=len(expired))


@dataclass(frozen=True)
class CookiePolicy:
    name: str
    max_age_seconds: int
    secure: bool

    @property
    def samesite(self) -> str:
        # Cross-site frontends need SameSite=None, which browsers only accept with Secure
        return "none" if self.secure else "lax"


class SessionContext:
    """Per-request handle on the caller's session.

    Handlers receive one via dependency injection instead of reaching
    into framework session state.
    """

    def __init__(
        self,
        store: SessionStore,
        session_id: str | None,
        cookie: CookiePolicy,
    ) -> None:
        self._store = store
        self._session_id = session_id
        self._cookie = cookie

    @property
    def session_id(self) -> str | None:
        return self._session_id

    def current(self) -> SessionUser | None:
        if self._session_id is None:
            return None
        return self._store.get(self._session_id)

    def login(self, email: str, tokens: TokenSet) -> None:
        """Bind *email* to this session, replacing whoever was logged in."""
        # Unknown or expired ids from the client are never adopted
        if self._session_id is None or self._store.get(self._session_id) is None:
            self._session_id = secrets.token_urlsafe(32)
        self._store.put(self._session_id, SessionUser(email=email, tokens=tokens))
        logger.info("session_login", email=email)

    def logout(self) -> None:
        if self._session_id is not None:
            self._store.destroy(self._session_id)
        logger.info("session_logout")
        self._session_id = None

    def write_cookie(self, response: Response) -> None:
        if self._session_id is None:
            return
        response.set_cookie(
            key=self._cookie.name,
            value=self._session_id,
            max_age=self._cookie.max_age_seconds,
            httponly=True,
            secure=self._cookie.secure,
            samesite=self._cookie.samesite,
        )

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(
            key=self._cookie.name,
            httponly=True,
            secure=self._cookie.secure,
            samesite=self._cookie.samesite,
        )
