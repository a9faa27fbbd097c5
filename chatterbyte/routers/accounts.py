"""Multi-account mode: every connected Google account lives in the app's AccountStore."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from chatterbyte.auth.google import GoogleOAuth
from chatterbyte.config import Settings
from chatterbyte.deps import (
    MailboxFactory,
    frontend_url,
    get_account_store,
    get_mailbox_factory,
    get_oauth,
    get_settings,
)
from chatterbyte.errors import ProviderError
from chatterbyte.gmail.fetcher import fetch_recent
from chatterbyte.routers.auth import (
    CALLBACK_PATH,
    auth_failed_response,
    complete_handshake,
    missing_code_response,
)
from chatterbyte.schemas.message import AccountInbox, SuccessResponse
from chatterbyte.store.accounts import AccountStore

logger = structlog.get_logger()
router = APIRouter(tags=["accounts"])


@router.get(CALLBACK_PATH)
async def google_callback(
    request: Request,
    oauth: Annotated[GoogleOAuth, Depends(get_oauth)],
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[AccountStore, Depends(get_account_store)],
    connect: Annotated[MailboxFactory, Depends(get_mailbox_factory)],
    code: str | None = Query(default=None),
):
    """Finish sign-in, fetch the inbox once and remember the account."""
    if not code:
        return missing_code_response()

    try:
        email, tokens = await complete_handshake(code, request, oauth, settings)
        messages = await fetch_recent(connect(tokens), settings.inbox_page_size)
    except ProviderError:
        logger.exception("oauth_callback_failed")
        return auth_failed_response()

    store.upsert_if_absent(email, tokens, messages)
    return RedirectResponse(frontend_url(request, settings), status_code=status.HTTP_302_FOUND)


@router.get("/api/emails", response_model=list[AccountInbox])
async def list_emails(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[AccountStore, Depends(get_account_store)],
    connect: Annotated[MailboxFactory, Depends(get_mailbox_factory)],
):
    """Latest messages for every connected account, fetched fresh on each call."""
    try:
        return await store.refresh_and_list_all(connect, settings.inbox_page_size)
    except ProviderError:
        logger.exception("emails_fetch_failed")
        return JSONResponse(
            {"error": "Failed to fetch emails"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@router.delete("/api/emails/{email}", response_model=SuccessResponse)
async def remove_account(
    email: str,
    store: Annotated[AccountStore, Depends(get_account_store)],
):
    """Disconnect an account.  Unknown emails succeed too."""
    store.remove_by_email(email)
    return SuccessResponse()
