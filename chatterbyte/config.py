"""Backend configuration loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Top-level settings for the chatterbyte backend.

    All env vars are prefixed with ``CHATTERBYTE_``.
    Example: ``CHATTERBYTE_GOOGLE_CLIENT_ID=1234.apps.googleusercontent.com``
    """

    model_config = SettingsConfigDict(env_prefix="CHATTERBYTE_")

    # --- Google OAuth -------------------------------------------------------
    google_client_id: str = Field(
        description="OAuth2 client ID issued by Google Cloud",
    )
    google_client_secret: SecretStr = Field(
        description="OAuth2 client secret issued by Google Cloud",
    )

    # --- Mode ---------------------------------------------------------------
    mode: Literal["accounts", "session"] = Field(
        default="accounts",
        description="'accounts' keeps many connected accounts in memory; "
        "'session' tracks one logged-in user per browser session",
    )
    environment: Literal["development", "production"] = Field(
        default="development",
        description="Cookies are marked secure / SameSite=None only in production",
    )

    # --- Redirect targets ---------------------------------------------------
    local_callback_url: str = Field(
        default="http://localhost:5000/api/auth/google/callback",
        description="OAuth callback used when the request host is local",
    )
    deployed_callback_url: str = Field(
        default="https://chatterbytefrontend.vercel.app/api/auth/google/callback",
        description="OAuth callback used for every other request host",
    )
    local_frontend_url: str = Field(
        default="http://localhost:5173/inbox",
        description="Frontend inbox page for local requests",
    )
    deployed_frontend_url: str = Field(
        default="https://chatterbytefrontend.vercel.app/inbox",
        description="Frontend inbox page for deployed requests",
    )
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:5173",
            "http://localhost:3000",
            "https://chatterbytefrontend.vercel.app",
        ],
        description="Origins allowed to call the API with credentials",
    )

    # --- Inbox --------------------------------------------------------------
    inbox_page_size: int = Field(
        default=5,
        description="Number of most recent messages fetched per account",
    )

    # --- Session ------------------------------------------------------------
    session_cookie_name: str = Field(
        default="chatterbyte_sid",
        description="Name of the cookie carrying the session id",
    )
    session_max_age_seconds: int = Field(
        default=86400,
        description="Sliding session lifetime and cookie max-age in seconds",
    )

    # --- Server -------------------------------------------------------------
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=5000, description="Bind port")
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(
        default=True,
        description="Use JSON log output (True for prod, False for dev)",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
