"""Build one subscription record from one email.

The record is assembled in explicit phases, each a structural merge onto the
previous record:

1. a base guess from the rule-based extractors,
2. a full-field override with whatever the external classifier returned,
3. a rule-based backfill of the gaps that are still open,
4. validation and normalization of the result.
"""

from __future__ import annotations

from typing import Any

from subscription_detector.extraction import (
    clean_html,
    detect_billing_cycle,
    detect_category,
    extract_amount,
    extract_service_name,
    extract_trial_info,
    parse_email_date,
    validate_amount,
)
from subscription_detector.models import (
    EmailRecord,
    SubscriptionCategory,
    SubscriptionPatch,
    SubscriptionRecord,
)

UNKNOWN_NAME = "unknown"


def _combined_text(email: EmailRecord) -> str:
    return f"{email.subject.lower()} {email.snippet.lower()} {clean_html(email.body).lower()}"


def build_base_subscription(email: EmailRecord) -> SubscriptionRecord:
    """Rule-based first guess for a normalized email."""
    return SubscriptionRecord(
        name=extract_service_name(email.subject, email.sender) or UNKNOWN_NAME,
        cycle=detect_billing_cycle(clean_html(email.body)),
        start_date=parse_email_date(email.date),
        category=detect_category(email.subject, email.body, email.sender),
    )


def rule_backfill(record: SubscriptionRecord, email: EmailRecord) -> dict[str, Any]:
    """Fields the rule-based extractors contribute to the gaps of `record`."""

    text = _combined_text(email)
    update: dict[str, Any] = {}

    if not record.amount:
        update["amount"] = extract_amount(text)

    if record.is_trial is not True:
        trial = extract_trial_info(text, parse_email_date(email.date))
        if trial.is_trial:
            update["is_trial"] = True
            update["trial_duration_in_days"] = trial.duration_days
            update["trial_end_date"] = trial.end_date

    if record.category == SubscriptionCategory.OTHER:
        update["category"] = detect_category(email.subject, email.body, email.sender)

    return update


def validate_subscription(record: SubscriptionRecord, email: EmailRecord) -> SubscriptionRecord:
    """Normalize the name, clamp the amount and pin the start date to the email."""

    update: dict[str, Any] = {
        "name": record.name.lower().strip() or UNKNOWN_NAME,
        "amount": validate_amount(record.amount),
        "start_date": parse_email_date(email.date),
    }

    duration = record.trial_duration_in_days
    if record.is_trial is not True or not isinstance(duration, int) or duration <= 0:
        update["trial_duration_in_days"] = None
    if record.is_trial is not True:
        update["trial_end_date"] = None

    return record.model_copy(update=update)


def build_subscription(
    email: EmailRecord,
    patch: SubscriptionPatch | None = None,
) -> SubscriptionRecord:
    """Build the subscription record for a single normalized email.

    Args:
        email: Email already passed through `normalize_email`.
        patch: Optional classifier result; every field it sets wins over the
            rule-based base guess.

    Returns:
        The validated SubscriptionRecord.

    Raises:
        MalformedDateError: If the email date cannot be parsed.
    """

    record = build_base_subscription(email)

    if patch is not None and not patch.is_empty():
        record = record.model_copy(update=patch.overrides())

    record = record.model_copy(update=rule_backfill(record, email))

    return validate_subscription(record, email)
