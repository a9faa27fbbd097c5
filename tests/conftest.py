"""Shared test fixtures for the chatterbyte backend."""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from chatterbyte.app import create_app
from chatterbyte.auth.google import GoogleOAuth
from chatterbyte.config import Settings
from chatterbyte.deps import get_mailbox_factory, get_oauth
from chatterbyte.schemas.auth import TokenSet


def _test_settings(**overrides) -> Settings:
    """Create Settings with test defaults."""
    defaults = {
        "google_client_id": "test-client-id",
        "google_client_secret": "test-client-secret",
        "log_json": False,
    }
    defaults.update(overrides)
    return Settings(**defaults)


@pytest.fixture
def settings():
    return _test_settings()


@pytest.fixture
def session_settings():
    return _test_settings(mode="session")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def session_app(session_settings):
    return create_app(session_settings)


@pytest.fixture
async def client(app):
    """Async HTTP test client. Lifespan is not started; use dependency_overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def session_client(session_app):
    async with AsyncClient(
        transport=ASGITransport(app=session_app),
        base_url="http://test",
    ) as ac:
        yield ac


# ------------------------------------------------------------------
# Gmail payload builders
# ------------------------------------------------------------------


def b64url(text: str) -> str:
    """Encode the way Gmail does: URL-safe alphabet, no padding."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_headers(
    *,
    subject: str | None = "Hello",
    from_addr: str = "Alice <alice@example.com>",
    date: str = "Mon, 02 Jun 2025 09:30:00 +0000",
) -> list[dict[str, str]]:
    headers = [
        {"name": "From", "value": from_addr},
        {"name": "Date", "value": date},
    ]
    if subject is not None:
        headers.insert(0, {"name": "Subject", "value": subject})
    return headers


def make_detail(
    message_id: str = "m1",
    *,
    body: str | None = None,
    parts: list[tuple[str, str]] | None = None,
    snippet: str = "Hello there",
    **header_kwargs,
) -> dict:
    """Build a ``users.messages.get`` response.

    *parts* is a list of ``(mime_type, text)`` pairs for a one-level
    multipart payload; *body* is a single top-level body.
    """
    payload: dict = {"mimeType": "text/plain", "headers": make_headers(**header_kwargs)}
    if parts is not None:
        payload["mimeType"] = "multipart/alternative"
        payload["parts"] = [
            {"mimeType": mime, "body": {"data": b64url(text), "size": len(text)}}
            for mime, text in parts
        ]
        payload["body"] = {"size": 0}
    elif body is not None:
        payload["body"] = {"data": b64url(body), "size": len(body)}
    return {"id": message_id, "threadId": f"t-{message_id}", "snippet": snippet, "payload": payload}


def make_tokens(access_token: str = "ya29.access", refresh_token: str | None = "1//refresh") -> TokenSet:
    return TokenSet(access_token=access_token, refresh_token=refresh_token, scope="email profile")


def make_mailbox(details: list[dict]) -> AsyncMock:
    """A mock MailboxClient serving *details* in list order."""
    by_id = {d["id"]: d for d in details}
    mailbox = AsyncMock()
    mailbox.list_message_ids = AsyncMock(return_value=[d["id"] for d in details])
    mailbox.get_message = AsyncMock(side_effect=lambda mid: by_id[mid])
    return mailbox


def make_oauth_mock(email: str = "alice@example.com", tokens: TokenSet | None = None) -> MagicMock:
    oauth = MagicMock(spec=GoogleOAuth)
    oauth.authorization_url.return_value = "https://accounts.google.com/o/oauth2/v2/auth?x=1"
    oauth.exchange_code = AsyncMock(return_value=tokens or make_tokens())
    oauth.fetch_email = AsyncMock(return_value=email)
    return oauth


def override_oauth(app, oauth):
    app.dependency_overrides[get_oauth] = lambda: oauth


def override_mailboxes(app, mailboxes: dict[str, AsyncMock]):
    """Route each TokenSet to a mock mailbox by its access token."""
    connect = MagicMock(side_effect=lambda tokens: mailboxes[tokens.access_token])
    app.dependency_overrides[get_mailbox_factory] = lambda: connect
    return connect
