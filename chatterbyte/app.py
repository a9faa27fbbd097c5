"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import timedelta

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from chatterbyte.auth.google import GoogleOAuth
from chatterbyte.config import Settings
from chatterbyte.gmail.client import GmailClientFactory
from chatterbyte.store.accounts import AccountStore
from chatterbyte.store.sessions import SessionStore

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: log the serving mode. Shutdown: close the OAuth HTTP client."""
    settings: Settings = app.state.settings
    logger.info("chatterbyte_started", mode=settings.mode, environment=settings.environment)
    yield
    await app.state.oauth.aclose()
    logger.info("shutdown_complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    ``settings.mode`` selects which routers are mounted: ``accounts``
    (many connected accounts, no session) or ``session`` (one user per
    browser session).  Stores are created here and reached through
    dependencies, so each app instance owns its own state.
    """
    if settings is None:
        settings = Settings()  # type: ignore[call-arg]

    app = FastAPI(
        title="Chatterbyte Backend",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.oauth = GoogleOAuth(settings)
    app.state.mailbox_factory = GmailClientFactory(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from chatterbyte.routers.auth import router as auth_router

    app.include_router(auth_router)

    if settings.mode == "session":
        from chatterbyte.routers.session import router as session_router

        app.state.sessions = SessionStore(max_age=timedelta(seconds=settings.session_max_age_seconds))
        app.include_router(session_router)
    else:
        from chatterbyte.routers.accounts import router as accounts_router

        app.state.accounts = AccountStore()
        app.include_router(accounts_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "API is running"

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "chatterbyte", "mode": settings.mode}

    return app
