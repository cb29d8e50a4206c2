"""Email date parsing."""

from __future__ import annotations

from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime

from dateutil import parser as date_parser

from subscription_detector.exceptions import MalformedDateError


def _parse_datetime(value: str) -> datetime | None:
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError, OverflowError):
        pass

    iso = value.strip()
    if iso.endswith(("Z", "z")):
        iso = iso[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass

    # Loose formats such as "2024/03/01" or "March 1, 2024"
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError):
        return None


def parse_email_date(value: str) -> date:
    """Convert an email date string into a calendar date.

    RFC 2822 headers ("Fri, 01 Mar 2024 10:00:00 +0000") and ISO-8601 strings
    ("2024-03-01", "2024-03-01T10:00:00Z") are tried first; anything else goes
    through dateutil. Timezone-aware values are converted to UTC before the
    date is taken; naive values are read as UTC.

    Raises:
        MalformedDateError: If the value cannot be parsed.
    """

    parsed = _parse_datetime(value or "")
    if parsed is None:
        raise MalformedDateError(f"Unparseable email date: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def parse_date_or_none(value: object) -> date | None:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return parse_email_date(value)
    except MalformedDateError:
        return None
