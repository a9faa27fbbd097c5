"""Async Gmail client wrapping googleapiclient with asyncio.to_thread."""

from __future__ import annotations

import asyncio
from datetime import timezone
from typing import Any

import google_auth_httplib2
import httplib2
import structlog
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError

from chatterbyte.auth.google import GOOGLE_TOKEN_URL, SCOPES
from chatterbyte.config import Settings
from chatterbyte.errors import ProviderError
from chatterbyte.schemas.auth import TokenSet

logger = structlog.get_logger()

_TRANSPORT_ERRORS = (GoogleApiError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


class GmailClient:
    """Async-friendly Gmail client for a single mailbox.

    All blocking ``googleapiclient`` calls are wrapped with
    ``asyncio.to_thread()``.  httplib2 connections are not thread-safe,
    so every request executes on its own ``AuthorizedHttp``.  The
    discovery-built ``service`` is shared; it only assembles requests.
    """

    def __init__(self, service: Any, credentials: Credentials, *, user_id: str = "me") -> None:
        self._service = service
        self._credentials = credentials
        self._user_id = user_id

    async def list_message_ids(self, limit: int) -> list[str]:
        """Ids of the ``limit`` most recent messages, newest first."""
        response = await asyncio.to_thread(self._list_sync, limit)
        return [m["id"] for m in response.get("messages", [])]

    async def get_message(self, message_id: str) -> dict[str, Any]:
        """Full message detail (``format=full``)."""
        return await asyncio.to_thread(self._get_sync, message_id)

    # ------------------------------------------------------------------
    # Synchronous helpers (run in thread)
    # ------------------------------------------------------------------

    def _list_sync(self, limit: int) -> dict[str, Any]:
        request = self._service.users().messages().list(userId=self._user_id, maxResults=limit)
        return self._execute(request)

    def _get_sync(self, message_id: str) -> dict[str, Any]:
        request = self._service.users().messages().get(userId=self._user_id, id=message_id)
        return self._execute(request)

    def _execute(self, request) -> dict[str, Any]:
        http = google_auth_httplib2.AuthorizedHttp(self._credentials, http=httplib2.Http())
        try:
            return request.execute(http=http)
        except _TRANSPORT_ERRORS as exc:
            raise ProviderError(f"Gmail request failed: {exc}") from exc


class GmailClientFactory:
    """Builds a :class:`GmailClient` from a stored :class:`TokenSet`.

    The credentials carry the client id/secret and token URI, so
    google-auth refreshes an expired access token on its own.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        # Parsed once here, outside any request handler; credentials are
        # supplied per request by GmailClient
        self._service = build("gmail", "v1", http=httplib2.Http(), cache_discovery=False)

    def credentials(self, tokens: TokenSet) -> Credentials:
        expiry = None
        if tokens.expiry is not None:
            # google-auth compares against naive UTC timestamps
            expiry = tokens.expiry.astimezone(timezone.utc).replace(tzinfo=None)
        return Credentials(
            token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_uri=GOOGLE_TOKEN_URL,
            client_id=self._settings.google_client_id,
            client_secret=self._settings.google_client_secret.get_secret_value(),
            scopes=tokens.scope.split() if tokens.scope else SCOPES,
            expiry=expiry,
        )

    def __call__(self, tokens: TokenSet) -> GmailClient:
        return GmailClient(self._service, self.credentials(tokens))
