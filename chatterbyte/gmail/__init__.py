"""Gmail access: message extraction, inbox fetching, API client."""

from .client import GmailClient, GmailClientFactory
from .extractor import MessageExtractor
from .fetcher import MailboxClient, fetch_recent

__all__ = [
    "GmailClient",
    "GmailClientFactory",
    "MailboxClient",
    "MessageExtractor",
    "fetch_recent",
]
