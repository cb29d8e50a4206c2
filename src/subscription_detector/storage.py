"""JSON file input and output for the detector."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

import structlog
from pydantic import ValidationError

from subscription_detector.exceptions import InputFormatError
from subscription_detector.models import EmailRecord, SubscriptionRecord

logger = structlog.get_logger()


def load_emails(path: Path) -> list[EmailRecord]:
    """Read a JSON array of email objects.

    Args:
        path: UTF-8 JSON file, e.g. `[{"from": ..., "subject": ..., "date": ...}]`.

    Returns:
        Parsed email records in file order.

    Raises:
        InputFormatError: If the file is not a JSON array of email objects.
    """

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InputFormatError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise InputFormatError(f"{path} must contain a JSON array of emails")

    try:
        emails = [EmailRecord.model_validate(item) for item in data]
    except ValidationError as exc:
        raise InputFormatError(f"{path} contains an invalid email record: {exc}") from exc

    logger.info("emails_loaded", path=str(path), email_count=len(emails))
    return emails


def save_subscriptions(path: Path, subscriptions: Iterable[SubscriptionRecord]) -> None:
    """Write subscriptions as a pretty-printed UTF-8 JSON array."""
    payload = [s.to_output() for s in subscriptions]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("subscriptions_saved", path=str(path), subscription_count=len(payload))
