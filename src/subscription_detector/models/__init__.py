"""Data models for Subscription Detector.

This module contains Pydantic models for data validation and serialization.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from subscription_detector.models.email_record import EmailRecord


class SubscriptionCycle(str, Enum):
    """Billing cycle enumeration."""

    MONTHLY = "monthly"
    YEARLY = "yearly"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    QUARTERLY = "quarterly"
    BI_MONTHLY = "bi-monthly"
    BI_YEARLY = "bi-yearly"
    UNKNOWN = "unknown"


class SubscriptionCategory(str, Enum):
    """Subscription category enumeration."""

    STREAMING = "streaming"
    UTILITIES = "utilities"
    SOFTWARE = "software"
    RENT = "rent"
    INSURANCE = "insurance"
    FOOD_DELIVERY = "food_delivery"
    STORAGE = "storage"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"


class SubscriptionRecord(BaseModel):
    """A subscription inferred from one or more emails."""

    name: str = Field(description="Lowercase service name, 'unknown' if not found")
    amount: Optional[float] = Field(
        default=None,
        description="Price in (0, 10000], rounded to cents",
    )
    cycle: SubscriptionCycle = Field(default=SubscriptionCycle.UNKNOWN, description="Billing cycle")
    start_date: date = Field(description="Date of the source email")
    is_trial: Optional[bool] = Field(default=None, description="Whether this is a trial")
    trial_duration_in_days: Optional[int] = Field(
        default=None,
        gt=0,
        description="Trial length in days, only set for trials",
    )
    trial_end_date: Optional[date] = Field(
        default=None,
        description="Trial end date, only set for trials",
    )
    category: SubscriptionCategory = Field(
        default=SubscriptionCategory.OTHER,
        description="Subscription category",
    )

    @property
    def identity_key(self) -> tuple[str, SubscriptionCategory]:
        """Key under which records denote the same subscription."""
        return (self.name, self.category)

    def to_output(self) -> dict[str, Any]:
        """Serialize for the output file, omitting unset fields."""
        return self.model_dump(mode="json", exclude_none=True)


class SubscriptionPatch(BaseModel):
    """Partial subscription returned by the external classifier.

    Every field is optional; only the fields that are set override the
    rule-based guess.
    """

    name: Optional[str] = None
    amount: Optional[float] = None
    cycle: Optional[SubscriptionCycle] = None
    start_date: Optional[date] = None
    is_trial: Optional[bool] = None
    trial_duration_in_days: Optional[int] = None
    trial_end_date: Optional[date] = None
    category: Optional[SubscriptionCategory] = None

    def overrides(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.overrides()


class ProcessingResult(BaseModel):
    """Result of processing a single email."""

    email_index: int = Field(description="Position of the email in the input batch")
    sender: str = Field(default="", description="Sender of the processed email")
    subscription: Optional[SubscriptionRecord] = Field(
        default=None,
        description="Subscription built from the email, None if skipped",
    )
    processed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Processing timestamp",
    )
    processing_time_ms: float = Field(default=0.0, description="Processing time in milliseconds")
    success: bool = Field(default=True, description="Whether processing succeeded")
    error: Optional[str] = Field(default=None, description="Error message if failed")


class DetectionReport(BaseModel):
    """Outcome of a detection batch."""

    subscriptions: list[SubscriptionRecord] = Field(
        default_factory=list,
        description="Deduplicated subscriptions",
    )
    results: list[ProcessingResult] = Field(
        default_factory=list,
        description="Per-email processing results in input order",
    )

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def processed(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if not r.success)


__all__ = [
    "DetectionReport",
    "EmailRecord",
    "ProcessingResult",
    "SubscriptionCategory",
    "SubscriptionCycle",
    "SubscriptionPatch",
    "SubscriptionRecord",
]
