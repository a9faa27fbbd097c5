"""OAuth token schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TokenSet(BaseModel):
    """Token bundle returned by Google's token endpoint.

    Only the fields needed to rebuild credentials are named; anything
    else Google sends (``id_token`` etc.) is kept as extra data.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: str | None = None
    scope: str | None = None
    token_type: str = "Bearer"
    expiry: datetime | None = None
