"""Helpers for turning full Gmail API messages into email records."""

from __future__ import annotations

import base64
from typing import Any

from subscription_detector.models import EmailRecord


def _header_map(message: dict[str, Any]) -> dict[str, str]:
    payload = message.get("payload") or {}
    result: dict[str, str] = {}
    for h in payload.get("headers") or []:
        name = h.get("name")
        value = h.get("value")
        if isinstance(name, str) and isinstance(value, str):
            # Gmail can include duplicates; keep the first.
            result.setdefault(name.lower(), value)
    return result


def _decode_b64(data: str) -> str:
    # Gmail strips base64 padding.
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8", errors="replace")


def _collect_parts(part: dict[str, Any], mime_prefix: str) -> list[str]:
    mime = (part.get("mimeType") or "").lower()
    data = (part.get("body") or {}).get("data")
    if data and mime.startswith(mime_prefix):
        return [_decode_b64(data)]

    texts: list[str] = []
    for child in part.get("parts") or []:
        texts.extend(_collect_parts(child, mime_prefix))
    return texts


def extract_body(message: dict[str, Any]) -> str:
    """Best-effort body text: text/plain parts, else text/html parts."""
    payload = message.get("payload") or {}
    for mime_prefix in ("text/plain", "text/html"):
        texts = _collect_parts(payload, mime_prefix)
        if texts:
            return "\n\n".join(texts).strip()
    return ""


def message_to_email_record(message: dict[str, Any]) -> EmailRecord:
    """Convert a Gmail API message (format=full) to EmailRecord.

    Args:
        message: Gmail API message dict.

    Returns:
        EmailRecord carrying the From/Subject/Date headers, the decoded body
        and Gmail's snippet.
    """

    hm = _header_map(message)
    return EmailRecord(
        body=extract_body(message),
        snippet=message.get("snippet") or "",
        sender=hm.get("from") or "",
        subject=hm.get("subject") or "",
        date=hm.get("date") or "",
    )
