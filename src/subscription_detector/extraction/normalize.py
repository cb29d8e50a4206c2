"""Text cleanup applied to email fields before extraction."""

from __future__ import annotations

import re

from subscription_detector.models import EmailRecord

RE_INVISIBLE = re.compile("[\u200b-\u200d\u2060\ufeff\u00ad]")
RE_WHITESPACE = re.compile(r"\s+")
RE_TAG = re.compile(r"<[^>]*>")
RE_ENTITY = re.compile(r"&[^;]+;")


def clean_text(text: str | None) -> str:
    """Remove invisible characters and collapse whitespace."""
    if not text:
        return ""
    text = RE_INVISIBLE.sub("", text)
    return RE_WHITESPACE.sub(" ", text).strip()


def clean_html(text: str | None) -> str:
    """Strip tags and entities, then apply `clean_text`."""
    if not text:
        return ""
    text = RE_TAG.sub(" ", text)
    text = RE_ENTITY.sub(" ", text)
    return clean_text(text)


def normalize_email(email: EmailRecord) -> EmailRecord:
    """Return a copy of `email` with every text field cleaned.

    The body may contain markup, so it goes through `clean_html`; the header-like
    fields only need invisible-character and whitespace cleanup. The date is
    left untouched.
    """

    return email.model_copy(
        update={
            "body": clean_html(email.body),
            "snippet": clean_text(email.snippet),
            "sender": clean_text(email.sender),
            "subject": clean_text(email.subject),
        }
    )
