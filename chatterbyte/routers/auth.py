"""Google sign-in: consent redirect and the shared part of the callback."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from chatterbyte.auth.google import GoogleOAuth
from chatterbyte.config import Settings
from chatterbyte.deps import callback_url, get_oauth, get_settings
from chatterbyte.schemas.auth import TokenSet

logger = structlog.get_logger()
router = APIRouter(prefix="/api/auth", tags=["auth"])

CALLBACK_PATH = "/api/auth/google/callback"


def missing_code_response() -> PlainTextResponse:
    return PlainTextResponse("Missing authorization code.", status_code=status.HTTP_400_BAD_REQUEST)


def auth_failed_response() -> PlainTextResponse:
    return PlainTextResponse("Authentication failed.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def complete_handshake(
    code: str,
    request: Request,
    oauth: GoogleOAuth,
    settings: Settings,
) -> tuple[str, TokenSet]:
    """Exchange *code* and resolve the account email.

    The redirect URI must match the one used for the consent redirect,
    so it is derived from the request host the same way.
    """
    tokens = await oauth.exchange_code(code, callback_url(request, settings))
    email = await oauth.fetch_email(tokens)
    return email, tokens


@router.get("/google")
async def google_login(
    request: Request,
    oauth: Annotated[GoogleOAuth, Depends(get_oauth)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Redirect the browser to Google's consent screen."""
    url = oauth.authorization_url(callback_url(request, settings))
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)
