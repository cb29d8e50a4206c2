"""Service name extraction from the subject line and sender address."""

from __future__ import annotations

import re

RE_SUBJECT_NAME = re.compile(r"(?:from|for|to) ([\w\s&]+?)(?:\s*-|\s*\(|$)", re.IGNORECASE)
RE_ROLE_WORDS = re.compile(r"\b(?:no[-_]?reply|support|info|service|billing)\b", re.IGNORECASE)
RE_ANGLE = re.compile(r"[<>]")
RE_SEPARATORS = re.compile(r"[._-]")


def extract_service_name(subject: str, sender: str) -> str | None:
    """Guess the service name behind an email.

    Tries, in order: a "from/for/to <name>" phrase in the subject, the sender's
    local part with generic role words removed, and the first label of the
    sender's domain.

    Args:
        subject: Cleaned subject line.
        sender: Cleaned From header, e.g. "billing@spotify.com".

    Returns:
        The name with its original casing, or None if nothing usable was found.
    """

    local, _, domain = sender.partition("@")

    m = RE_SUBJECT_NAME.search(subject)
    name = m.group(1).strip() if m else ""

    if not name and local:
        name = RE_ANGLE.sub("", local)
        name = RE_ROLE_WORDS.sub("", name)
        name = RE_SEPARATORS.sub(" ", name).strip()

    if not name and domain:
        name = RE_SEPARATORS.sub(" ", domain.split(".")[0]).strip()

    return name or None
