"""Gmail message extractor: walks the payload of a ``users.messages.get``
response and returns a :class:`MessageRecord`.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

import structlog

from chatterbyte.schemas.message import MessageRecord

logger = structlog.get_logger()

NO_SUBJECT = "(No Subject)"


class MessageExtractor:
    """Stateless extractor: Gmail message detail dict → MessageRecord.

    Only the first level of ``payload.parts`` is inspected; nested
    multipart containers are not walked.
    """

    def extract(self, detail: dict[str, Any]) -> MessageRecord:
        payload = detail.get("payload") or {}
        headers = payload.get("headers") or []

        text_plain, text_html = self._extract_bodies(payload, detail.get("id"))

        return MessageRecord(
            subject=self._header(headers, "Subject") or NO_SUBJECT,
            from_=self._header(headers, "From"),
            date=self._header(headers, "Date"),
            snippet=detail.get("snippet") or "",
            text_plain=text_plain,
            text_html=text_html,
        )

    def _header(self, headers: list[dict[str, str]], name: str) -> str:
        """Exact, case-sensitive lookup; first match wins."""
        for header in headers:
            if header.get("name") == name:
                return header.get("value") or ""
        return ""

    def _extract_bodies(self, payload: dict[str, Any], message_id: str | None) -> tuple[str, str]:
        """Return (plain_text, html_text) from a single-level payload."""
        text_plain = ""
        text_html = ""

        parts = payload.get("parts") or []
        if parts:
            # Later parts of the same type overwrite earlier ones
            for part in parts:
                data = (part.get("body") or {}).get("data")
                if not data:
                    continue
                mime_type = part.get("mimeType")
                if mime_type == "text/plain":
                    text_plain = self._decode(data, message_id)
                elif mime_type == "text/html":
                    text_html = self._decode(data, message_id)
            return text_plain, text_html

        data = (payload.get("body") or {}).get("data")
        if data:
            text_plain = self._decode(data, message_id)
        return text_plain, text_html

    def _decode(self, data: str, message_id: str | None) -> str:
        """Decode base64url or standard base64 (padding optional) to text."""
        normalized = data.replace("-", "+").replace("_", "/")
        normalized += "=" * (-len(normalized) % 4)
        try:
            raw = base64.b64decode(normalized, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("body_decode_failed", message_id=message_id)
            return ""
        return raw.decode("utf-8", errors="replace")
