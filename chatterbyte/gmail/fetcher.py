"""Inbox fetcher: lists the newest message ids and fetches their details concurrently."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import structlog

from chatterbyte.schemas.message import MessageRecord

from .extractor import MessageExtractor

logger = structlog.get_logger()
_extractor = MessageExtractor()

DEFAULT_LIMIT = 5


class MailboxClient(Protocol):
    """An authenticated handle on one mailbox."""

    async def list_message_ids(self, limit: int) -> list[str]: ...

    async def get_message(self, message_id: str) -> dict[str, Any]: ...


async def fetch_recent(client: MailboxClient, limit: int = DEFAULT_LIMIT) -> list[MessageRecord]:
    """Return the ``limit`` most recent messages in provider list order.

    Detail fetches run concurrently and are joined by position, so the
    output order never depends on completion order.  The first failed
    fetch propagates; there are no partial results.
    """
    message_ids = await client.list_message_ids(limit)
    if not message_ids:
        return []

    details = await asyncio.gather(*(client.get_message(mid) for mid in message_ids))

    records = [_extractor.extract(detail) for detail in details]
    logger.debug("inbox_fetched", count=len(records))
    return records
