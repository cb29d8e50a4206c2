"""Prompt contract for extracting subscription details from emails."""

from __future__ import annotations

from subscription_detector.models import EmailRecord, SubscriptionCategory, SubscriptionCycle

PROMPT_VERSION = "subscription-extract-v1"

SYSTEM_PROMPT = (
    "You are a subscription detection expert. Analyze emails to extract subscription "
    "information with high precision. Focus on:\n"
    "- Recurring payments/subscriptions\n"
    "- Trial periods\n"
    "- Service subscriptions\n"
    "- Utility bills\n"
    "- Rent payments\n"
    "- Insurance payments\n\n"
    "Be conservative - only return subscription data when highly confident."
)

_CYCLES = "|".join(c.value for c in SubscriptionCycle)
_CATEGORIES = "|".join(c.value for c in SubscriptionCategory)


def build_subscription_prompt(email: EmailRecord) -> str:
    """Build a user prompt that requests strict JSON output.

    Only the headers and the snippet are sent; the full body stays local.

    Args:
        email: Normalized email.

    Returns:
        Prompt string.
    """

    return (
        "Analyze this email for subscription or recurring payment information:\n\n"
        f"From: {email.sender}\n"
        f"Subject: {email.subject}\n"
        f"Date: {email.date}\n"
        f"Content: {email.snippet}\n\n"
        "If this contains subscription-related information, return ONLY a valid JSON "
        "object with these exact fields. No markdown. No commentary.\n"
        "{\n"
        '    "name": "service name",\n'
        '    "amount": number or null,\n'
        f'    "cycle": "{_CYCLES}",\n'
        '    "start_date": "YYYY-MM-DD",\n'
        '    "is_trial": boolean or null,\n'
        '    "trial_duration_in_days": number or null,\n'
        '    "trial_end_date": "YYYY-MM-DD" or null,\n'
        f'    "category": "{_CATEGORIES}"\n'
        "}\n\n"
        "If this is not a subscription-related email, respond with: null"
    )
