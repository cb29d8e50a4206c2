"""External subscription classifier.

The detector only depends on the `SubscriptionClassifier` protocol; the
OpenAI-backed implementation is one way to satisfy it.
"""

from typing import Optional, Protocol

from subscription_detector.models import EmailRecord, SubscriptionPatch

from .client import OpenAIClassifier
from .response import parse_classifier_response


class SubscriptionClassifier(Protocol):
    """Anything that can turn one email into a partial subscription."""

    async def classify(self, email: EmailRecord) -> Optional[SubscriptionPatch]: ...


__all__ = ["OpenAIClassifier", "SubscriptionClassifier", "parse_classifier_response"]
