"""FastAPI dependency-injection helpers for stores and Google clients."""

from __future__ import annotations

from collections.abc import Callable

from fastapi import Request

from chatterbyte.auth.google import GoogleOAuth
from chatterbyte.config import Settings
from chatterbyte.gmail.fetcher import MailboxClient
from chatterbyte.schemas.auth import TokenSet
from chatterbyte.store.accounts import AccountStore
from chatterbyte.store.sessions import CookiePolicy, SessionContext, SessionStore

MailboxFactory = Callable[[TokenSet], MailboxClient]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_oauth(request: Request) -> GoogleOAuth:
    return request.app.state.oauth


def get_mailbox_factory(request: Request) -> Callable[[TokenSet], MailboxClient]:
    return request.app.state.mailbox_factory


def get_account_store(request: Request) -> AccountStore:
    return request.app.state.accounts


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_session(request: Request) -> SessionContext:
    """Bind the caller's session cookie (if any) to the app's session store."""
    settings: Settings = request.app.state.settings
    cookie = CookiePolicy(
        name=settings.session_cookie_name,
        max_age_seconds=settings.session_max_age_seconds,
        secure=settings.is_production,
    )
    return SessionContext(
        store=get_session_store(request),
        session_id=request.cookies.get(settings.session_cookie_name),
        cookie=cookie,
    )


def is_local_request(request: Request) -> bool:
    host = request.headers.get("host", "")
    return "localhost" in host or "127.0.0.1" in host


def callback_url(request: Request, settings: Settings) -> str:
    if is_local_request(request):
        return settings.local_callback_url
    return settings.deployed_callback_url


def frontend_url(request: Request, settings: Settings) -> str:
    if is_local_request(request):
        return settings.local_frontend_url
    return settings.deployed_frontend_url
