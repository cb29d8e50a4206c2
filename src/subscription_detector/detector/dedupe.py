"""Collapse per-email records that denote the same subscription."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from subscription_detector.models import SubscriptionCategory, SubscriptionRecord

BACKFILL_FIELDS = ("amount", "is_trial", "trial_duration_in_days", "trial_end_date")


def _backfill(current: Any, previous: Any) -> Any:
    # Truthy values win; an explicit False is not replaced by None.
    if current:
        return current
    return current if previous is None else previous


def merge_records(latest: SubscriptionRecord, current: SubscriptionRecord) -> SubscriptionRecord:
    """Fold `current` into `latest`.

    The record with the strictly later start date becomes the new latest, with
    its unset amount and trial fields backfilled from the previous latest.
    Ties keep `latest`, i.e. the record seen first.
    """

    if current.start_date <= latest.start_date:
        return latest

    update = {
        field: _backfill(getattr(current, field), getattr(latest, field))
        for field in BACKFILL_FIELDS
    }
    return current.model_copy(update=update)


def deduplicate(records: Iterable[SubscriptionRecord]) -> list[SubscriptionRecord]:
    """Merge records sharing an identity key into one record per subscription.

    Args:
        records: Per-email records in processing order.

    Returns:
        One record per (name, category), ordered by first appearance.
    """

    merged: dict[tuple[str, SubscriptionCategory], SubscriptionRecord] = {}
    for record in records:
        key = record.identity_key
        if key in merged:
            merged[key] = merge_records(merged[key], record)
        else:
            merged[key] = record
    return list(merged.values())
