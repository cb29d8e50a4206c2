"""Subscription Detector - infer recurring payments from email records.

This package turns a batch of emails into a deduplicated list of subscriptions
using rule-based extractors, optionally refined by an LLM classifier.
"""

__version__ = "0.1.0"

from subscription_detector.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
