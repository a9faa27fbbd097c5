"""structlog wiring for the chatterbyte backend.

Every event carries ``service`` and ``mode``, and OAuth material never
reaches the output: token bundles, client secrets and authorization
codes are replaced by :data:`REDACTED` before rendering.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog

SERVICE_NAME = "chatterbyte"
REDACTED = "[redacted]"

SENSITIVE_KEYS = frozenset(
    {"access_token", "refresh_token", "id_token", "tokens", "client_secret", "code"}
)

# Libraries that log each outbound request line, token endpoint included
_CHATTY_LOGGERS = ("httpx", "httpcore", "googleapiclient.discovery")


def redact_oauth_secrets(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Mask sensitive keys at the top level and one mapping deep."""
    for key, value in list(event_dict.items()):
        if key in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, Mapping):
            event_dict[key] = {
                k: REDACTED if k in SENSITIVE_KEYS else v for k, v in value.items()
            }
    return event_dict


class _ServiceContext:
    """Adds ``service`` and ``mode`` unless the event already set them."""

    def __init__(self, mode: str | None) -> None:
        self._mode = mode

    def __call__(
        self, logger: Any, method_name: str, event_dict: structlog.types.EventDict
    ) -> structlog.types.EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        if self._mode is not None:
            event_dict.setdefault("mode", self._mode)
        return event_dict


def setup_logging(*, json: bool = True, level: str = "INFO", mode: str | None = None) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    ``json`` picks JSON lines (deployed) over the console renderer
    (local development).  ``mode`` is the serving mode stamped on every
    event; it is omitted when not given.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _ServiceContext(mode),
        redact_oauth_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
