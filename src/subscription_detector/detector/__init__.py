"""Subscription building, deduplication and the batch orchestrator."""

from .builder import build_subscription
from .dedupe import deduplicate, merge_records
from .pipeline import SubscriptionDetector

__all__ = ["SubscriptionDetector", "build_subscription", "deduplicate", "merge_records"]
