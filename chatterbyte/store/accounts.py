"""In-memory ordered store of connected Google accounts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from chatterbyte.gmail.fetcher import DEFAULT_LIMIT, MailboxClient, fetch_recent
from chatterbyte.schemas.auth import TokenSet
from chatterbyte.schemas.message import AccountInbox, MessageRecord

logger = structlog.get_logger()


@dataclass
class ConnectedAccount:
    """A connected mailbox: its tokens and the messages fetched at connect time."""

    email: str
    tokens: TokenSet
    messages: list[MessageRecord] = field(default_factory=list)


class AccountStore:
    """Ordered collection of :class:`ConnectedAccount` keyed by email.

    State lives only for the process lifetime.  There is no locking:
    concurrent mutations from overlapping requests may interleave.
    """

    def __init__(self) -> None:
        self._accounts: list[ConnectedAccount] = []

    def upsert_if_absent(
        self,
        email: str,
        tokens: TokenSet,
        messages: list[MessageRecord],
    ) -> bool:
        """Append a new account unless *email* is already connected.

        Returns ``True`` if the account was added.  An existing account
        keeps its original tokens.
        """
        if any(acc.email == email for acc in self._accounts):
            logger.info("account_already_connected", email=email)
            return False

        self._accounts.append(ConnectedAccount(email=email, tokens=tokens, messages=list(messages)))
        logger.info("account_connected", email=email, total=len(self._accounts))
        return True

    def list_all(self) -> list[ConnectedAccount]:
        return list(self._accounts)

    def remove_by_email(self, email: str) -> None:
        """Remove *email* if present; removing an unknown email is a no-op."""
        before = len(self._accounts)
        self._accounts = [acc for acc in self._accounts if acc.email != email]
        if len(self._accounts) != before:
            logger.info("account_removed", email=email)

    async def refresh_and_list_all(
        self,
        connect: Callable[[TokenSet], MailboxClient],
        limit: int = DEFAULT_LIMIT,
    ) -> list[AccountInbox]:
        """Re-fetch every account's inbox with a fresh client.

        Results are returned, not written back: each account's
        ``messages`` stays as it was at connect time.
        """
        inboxes: list[AccountInbox] = []
        for account in self.list_all():
            client = connect(account.tokens)
            messages = await fetch_recent(client, limit)
            inboxes.append(AccountInbox(email=account.email, messages=messages))
        return inboxes
