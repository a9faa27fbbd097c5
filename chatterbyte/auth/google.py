"""Google OAuth2 authorization-code flow over httpx."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

import httpx
import structlog

from chatterbyte.config import Settings
from chatterbyte.errors import ProviderError
from chatterbyte.schemas.auth import TokenSet

logger = structlog.get_logger()

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
]


class GoogleOAuth:
    """Builds consent URLs, exchanges codes for tokens and resolves the account email.

    Created once per application and stored on ``app.state``.
    """

    def __init__(self, settings: Settings, http: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        # No timeout: a hung Google call hangs only the request that made it
        self._http = http or httpx.AsyncClient(timeout=None)

    def authorization_url(self, redirect_uri: str) -> str:
        query = urlencode(
            {
                "client_id": self._settings.google_client_id,
                "redirect_uri": redirect_uri,
                "response_type": "code",
                "scope": " ".join(SCOPES),
                "access_type": "offline",
                "prompt": "consent",
            }
        )
        return f"{GOOGLE_AUTH_URL}?{query}"

    async def exchange_code(self, code: str, redirect_uri: str) -> TokenSet:
        """Trade an authorization code for a :class:`TokenSet`.

        Raises :class:`ProviderError` on transport errors or non-2xx responses.
        """
        issued_at = datetime.now(timezone.utc)
        try:
            response = await self._http.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self._settings.google_client_id,
                    "client_secret": self._settings.google_client_secret.get_secret_value(),
                    "redirect_uri": redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            response.raise_for_status()
            body = response.json()
            expires_in = body.pop("expires_in", None)
            if expires_in is not None:
                body["expiry"] = issued_at + timedelta(seconds=int(expires_in))
            # pydantic's ValidationError is a ValueError
            return TokenSet.model_validate(body)
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(f"Token exchange failed: {exc}") from exc

    async def fetch_email(self, tokens: TokenSet) -> str:
        """Return the email address the tokens were issued for."""
        try:
            response = await self._http.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {tokens.access_token}"},
            )
            response.raise_for_status()
            email = response.json().get("email")
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderError(f"Userinfo request failed: {exc}") from exc

        if not email:
            raise ProviderError("Userinfo response carried no email")
        return email

    async def aclose(self) -> None:
        await self._http.aclose()
