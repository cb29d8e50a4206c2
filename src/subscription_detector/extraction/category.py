"""Keyword-based category classification.

Categories overlap (for example "backup" is both software and storage), so the
patterns are evaluated in a fixed order and the first match wins. There is no
scoring.
"""

from __future__ import annotations

import re

from subscription_detector.extraction.normalize import clean_html
from subscription_detector.models import SubscriptionCategory

CATEGORY_PATTERNS: list[tuple[SubscriptionCategory, re.Pattern[str]]] = [
    (
        SubscriptionCategory.STREAMING,
        re.compile(
            r"\b(?:stream|video|music|audio|movie|show|episode|playlist|netflix|hulu|disney|spotify)\b",
            re.I,
        ),
    ),
    (
        SubscriptionCategory.UTILITIES,
        re.compile(
            r"\b(?:utility|electric|water|gas|internet|cable|phone|broadband|bill|xfinity|comcast)\b",
            re.I,
        ),
    ),
    (
        SubscriptionCategory.SOFTWARE,
        re.compile(r"\b(?:software|app|application|platform|tool|service|cloud|storage|backup)\b", re.I),
    ),
    (
        SubscriptionCategory.RENT,
        re.compile(r"\b(?:rent|lease|apartment|housing|property|tenant|landlord|manor|estate)\b", re.I),
    ),
    (
        SubscriptionCategory.INSURANCE,
        re.compile(r"\b(?:insurance|coverage|policy|premium|protection|claim)\b", re.I),
    ),
    (
        SubscriptionCategory.FOOD_DELIVERY,
        re.compile(
            r"\b(?:food|delivery|meal|restaurant|order|grocery|doordash|uber|grubhub)\b",
            re.I,
        ),
    ),
    (
        SubscriptionCategory.STORAGE,
        re.compile(r"\b(?:storage|space|drive|backup|cloud|icloud)\b", re.I),
    ),
    (
        SubscriptionCategory.ENTERTAINMENT,
        re.compile(r"\b(?:game|gaming|entertainment|subscription|content)\b", re.I),
    ),
]


def detect_category(subject: str, body: str, sender: str) -> SubscriptionCategory:
    """Classify an email into a subscription category.

    Args:
        subject: Email subject.
        body: Email body; markup is stripped before matching.
        sender: From header, matched separately from the content.

    Returns:
        The first matching category, or OTHER.
    """

    content = f"{subject.lower()} {clean_html(body).lower()}"
    sender = sender.lower()

    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(content) or pattern.search(sender):
            return category
    return SubscriptionCategory.OTHER
