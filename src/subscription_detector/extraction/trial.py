"""Free-trial detection."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta

RE_TRIAL = re.compile(r"\b(?:trial|free.?period|try.?for.?free)\b", re.I)
RE_DURATION = re.compile(r"\b(\d+)[\s-]*(day|week|month)s?\b", re.I)

_UNIT_DAYS = {
    "day": 1,
    "week": 7,
    "month": 30,
}


@dataclass(frozen=True)
class TrialInfo:
    """Trial details found in an email."""

    is_trial: bool
    duration_days: int | None = None
    end_date: date | None = None


def extract_trial_info(text: str, start_date: date) -> TrialInfo:
    """Detect trial language and, when present, the trial length.

    Args:
        text: Lowercased subject, snippet and body.
        start_date: Date the trial is counted from.

    Returns:
        TrialInfo. Duration and end date are only set when a positive
        "<number> <day|week|month>" duration is found.
    """

    if not RE_TRIAL.search(text):
        return TrialInfo(is_trial=False)

    m = RE_DURATION.search(text)
    if not m:
        return TrialInfo(is_trial=True)

    count, unit = m.groups()
    total_days = int(count) * _UNIT_DAYS.get(unit.lower(), 1)
    if total_days <= 0:
        return TrialInfo(is_trial=True)

    return TrialInfo(
        is_trial=True,
        duration_days=total_days,
        end_date=start_date + timedelta(days=total_days),
    )
