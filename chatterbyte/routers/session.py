"""Single-user mode: the signed-in Google account is tracked in a server-side session."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from chatterbyte.auth.google import GoogleOAuth
from chatterbyte.config import Settings
from chatterbyte.deps import (
    MailboxFactory,
    frontend_url,
    get_mailbox_factory,
    get_oauth,
    get_session,
    get_settings,
)
from chatterbyte.errors import ProviderError, SessionStoreError
from chatterbyte.gmail.fetcher import fetch_recent
from chatterbyte.routers.auth import (
    CALLBACK_PATH,
    auth_failed_response,
    complete_handshake,
    missing_code_response,
)
from chatterbyte.schemas.message import AccountInbox, SuccessResponse
from chatterbyte.store.sessions import SessionContext

logger = structlog.get_logger()
router = APIRouter(tags=["session"])


@router.get(CALLBACK_PATH)
async def google_callback(
    request: Request,
    oauth: Annotated[GoogleOAuth, Depends(get_oauth)],
    settings: Annotated[Settings, Depends(get_settings)],
    session: Annotated[SessionContext, Depends(get_session)],
    code: str | None = Query(default=None),
):
    """Finish sign-in and bind the account to the caller's session."""
    if not code:
        return missing_code_response()

    try:
        email, tokens = await complete_handshake(code, request, oauth, settings)
    except ProviderError:
        logger.exception("oauth_callback_failed")
        return auth_failed_response()

    session.login(email, tokens)
    response = RedirectResponse(frontend_url(request, settings), status_code=status.HTTP_302_FOUND)
    session.write_cookie(response)
    return response


@router.get("/api/emails", response_model=list[AccountInbox])
async def list_emails(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
    session: Annotated[SessionContext, Depends(get_session)],
    connect: Annotated[MailboxFactory, Depends(get_mailbox_factory)],
):
    """Latest messages for the signed-in account."""
    user = session.current()
    if user is None:
        return JSONResponse({"error": "Not logged in"}, status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        messages = await fetch_recent(connect(user.tokens), settings.inbox_page_size)
    except ProviderError:
        logger.exception("emails_fetch_failed", email=user.email)
        return JSONResponse(
            {"error": "Failed to fetch emails"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # Sliding expiry: keep the browser cookie in step with the store
    session.write_cookie(response)
    return [AccountInbox(email=user.email, messages=messages)]


@router.post("/api/logout", response_model=SuccessResponse)
async def logout(session: Annotated[SessionContext, Depends(get_session)]):
    """Destroy the session and clear its cookie."""
    try:
        session.logout()
    except SessionStoreError:
        logger.exception("session_logout_failed")
        return JSONResponse({"error": "Logout failed"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = JSONResponse(SuccessResponse().model_dump())
    session.clear_cookie(response)
    return response
