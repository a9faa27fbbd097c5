"""Tests for the single-user (``session`` mode) HTTP surface."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from tests.conftest import (
    _test_settings,
    make_detail,
    make_mailbox,
    make_oauth_mock,
    make_tokens,
    override_mailboxes,
    override_oauth,
)

from chatterbyte.app import create_app
from chatterbyte.errors import ProviderError, SessionStoreError
from chatterbyte.store.sessions import SessionStore

COOKIE = "chatterbyte_sid"


async def _login(session_app, session_client: AsyncClient, email="alice@example.com", token="ta") -> str:
    override_oauth(session_app, make_oauth_mock(email, make_tokens(token)))
    resp = await session_client.get("/api/auth/google/callback?code=abc")
    assert resp.status_code == 302
    return resp.cookies[COOKIE]


@pytest.mark.asyncio
async def test_health_reports_mode(session_client: AsyncClient):
    resp = await session_client.get("/health")
    assert resp.json()["mode"] == "session"


@pytest.mark.asyncio
async def test_emails_without_login(session_client: AsyncClient):
    resp = await session_client.get("/api/emails")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Not logged in"}


@pytest.mark.asyncio
async def test_emails_with_unknown_cookie(session_client: AsyncClient):
    resp = await session_client.get("/api/emails", headers={"Cookie": f"{COOKIE}=forged"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_callback_missing_code(session_client: AsyncClient):
    resp = await session_client.get("/api/auth/google/callback")
    assert resp.status_code == 400
    assert resp.text == "Missing authorization code."


@pytest.mark.asyncio
async def test_callback_sets_session_cookie(session_app, session_client: AsyncClient):
    override_oauth(session_app, make_oauth_mock("alice@example.com", make_tokens("ta")))

    resp = await session_client.get("/api/auth/google/callback?code=abc")

    assert resp.status_code == 302
    assert resp.headers["location"] == "https://chatterbytefrontend.vercel.app/inbox"
    set_cookie = resp.headers["set-cookie"].lower()
    assert set_cookie.startswith(f"{COOKIE}=")
    assert "httponly" in set_cookie
    assert "max-age=86400" in set_cookie
    assert "samesite=lax" in set_cookie
    sid = resp.cookies[COOKIE]
    assert session_app.state.sessions.get(sid).email == "alice@example.com"


@pytest.mark.asyncio
async def test_callback_production_cookie_is_cross_site():
    app = create_app(_test_settings(mode="session", environment="production"))
    override_oauth(app, make_oauth_mock())

    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://api.test") as ac:
        resp = await ac.get("/api/auth/google/callback?code=abc")

    set_cookie = resp.headers["set-cookie"].lower()
    assert "secure" in set_cookie
    assert "samesite=none" in set_cookie


@pytest.mark.asyncio
async def test_callback_failure(session_app, session_client: AsyncClient):
    oauth = make_oauth_mock()
    oauth.fetch_email.side_effect = ProviderError("userinfo 401")
    override_oauth(session_app, oauth)

    resp = await session_client.get("/api/auth/google/callback?code=abc")

    assert resp.status_code == 500
    assert resp.text == "Authentication failed."
    assert "set-cookie" not in resp.headers
    assert len(session_app.state.sessions) == 0


@pytest.mark.asyncio
async def test_emails_for_logged_in_user(session_app, session_client: AsyncClient):
    override_mailboxes(
        session_app,
        {"ta": make_mailbox([make_detail("1", body="one", subject="First"), make_detail("2", body="two")])},
    )
    await _login(session_app, session_client)

    resp = await session_client.get("/api/emails")

    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 1
    assert data[0]["email"] == "alice@example.com"
    assert [m["subject"] for m in data[0]["messages"]] == ["First", "Hello"]
    assert data[0]["messages"][0]["textPlain"] == "one"
    assert COOKIE in resp.headers.get("set-cookie", "")


@pytest.mark.asyncio
async def test_relogin_replaces_user(session_app, session_client: AsyncClient):
    override_mailboxes(session_app, {"ta": make_mailbox([]), "tb": make_mailbox([])})
    first_sid = await _login(session_app, session_client, "alice@example.com", "ta")
    second_sid = await _login(session_app, session_client, "bob@example.com", "tb")

    assert first_sid == second_sid
    resp = await session_client.get("/api/emails")
    assert resp.json()[0]["email"] == "bob@example.com"


@pytest.mark.asyncio
async def test_emails_fetch_failure(session_app, session_client: AsyncClient):
    broken = make_mailbox([make_detail("1", body="x")])
    broken.get_message.side_effect = ProviderError("boom")
    override_mailboxes(session_app, {"ta": broken})
    await _login(session_app, session_client)

    resp = await session_client.get("/api/emails")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch emails"}


@pytest.mark.asyncio
async def test_logout(session_app, session_client: AsyncClient):
    await _login(session_app, session_client)

    resp = await session_client.post("/api/logout")

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert len(session_app.state.sessions) == 0
    assert 'max-age=0' in resp.headers["set-cookie"].lower()

    resp = await session_client.get("/api/emails")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_logout_without_session(session_client: AsyncClient):
    resp = await session_client.post("/api/logout")
    assert resp.status_code == 200
    assert resp.json() == {"success": True}


class _FailingSessionStore(SessionStore):
    def destroy(self, session_id: str) -> None:
        raise SessionStoreError("backend unavailable")


@pytest.mark.asyncio
async def test_logout_store_failure(session_app, session_client: AsyncClient):
    session_app.state.sessions = _FailingSessionStore()
    await _login(session_app, session_client)

    resp = await session_client.post("/api/logout")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Logout failed"}


@pytest.mark.asyncio
async def test_delete_not_mounted(session_client: AsyncClient):
    resp = await session_client.delete("/api/emails/x@y.com")
    assert resp.status_code == 404
