"""Response schemas for inbox endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MessageRecord(BaseModel):
    """Normalized view of one Gmail message, as served to the frontend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    subject: str
    from_: str = Field(alias="from")
    date: str
    snippet: str
    text_plain: str
    text_html: str


class AccountInbox(BaseModel):
    """One element of ``GET /api/emails``."""

    email: str
    messages: list[MessageRecord]


class SuccessResponse(BaseModel):
    success: bool = True
