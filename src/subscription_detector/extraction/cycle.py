"""Billing cycle detection."""

from __future__ import annotations

import re

from subscription_detector.models import SubscriptionCycle

# Checked in order; the first match wins.
CYCLE_PATTERNS: list[tuple[SubscriptionCycle, re.Pattern[str]]] = [
    (SubscriptionCycle.YEARLY, re.compile(r"\b(?:annual|yearly|year|12.?month|365.?day)\b", re.I)),
    (SubscriptionCycle.MONTHLY, re.compile(r"\b(?:monthly|month|30.?day)\b", re.I)),
    (SubscriptionCycle.WEEKLY, re.compile(r"\b(?:weekly|week|7.?day)\b", re.I)),
    (
        SubscriptionCycle.BI_WEEKLY,
        re.compile(r"\b(?:bi.?weekly|every.?two.?weeks|every.?other.?week)\b", re.I),
    ),
    (SubscriptionCycle.QUARTERLY, re.compile(r"\b(?:quarterly|quarter|3.?month|90.?day)\b", re.I)),
    (SubscriptionCycle.BI_MONTHLY, re.compile(r"\b(?:bi.?monthly|every.?two.?months)\b", re.I)),
    (SubscriptionCycle.BI_YEARLY, re.compile(r"\b(?:bi.?yearly|semi.?annual|twice.?a.?year)\b", re.I)),
]


def detect_billing_cycle(text: str) -> SubscriptionCycle:
    """Return the first cycle whose pattern matches `text`, else UNKNOWN."""
    for cycle, pattern in CYCLE_PATTERNS:
        if pattern.search(text):
            return cycle
    return SubscriptionCycle.UNKNOWN
