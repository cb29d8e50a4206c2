"""Pytest configuration and shared fixtures."""

import base64

import pytest


@pytest.fixture
def mock_settings():
    """Provide rule-only settings for testing."""
    from subscription_detector.config import Settings

    return Settings(
        _env_file=None,
        openai_api_key=None,
        openai_model="test-model",
        use_ai=False,
        max_retries=2,
        retry_delay=0.0,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def netflix_email():
    """A plain monthly streaming receipt."""
    from subscription_detector.models import EmailRecord

    return EmailRecord(
        body="<p>Thanks for watching!</p><p>Your monthly plan costs $15.99.</p>",
        snippet="Your monthly plan costs $15.99",
        sender="no-reply@netflix.com",
        subject="Your Netflix subscription",
        date="2024-03-01",
    )


@pytest.fixture
def trial_email():
    """A trial sign-up with an explicit duration."""
    from subscription_detector.models import EmailRecord

    return EmailRecord(
        body="Your 14 day free trial of Acme starts today.",
        snippet="Your free trial starts today",
        sender="hello@acme.io",
        subject="Welcome to Acme",
        date="2024-01-01",
    )


def _b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


@pytest.fixture
def sample_gmail_message() -> dict:
    """Provide a Gmail API message in format=full."""
    return {
        "id": "msg123456",
        "threadId": "thread789",
        "snippet": "Your Spotify Premium receipt",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": [
                {"name": "Subject", "value": "Your receipt"},
                {"name": "From", "value": "billing@spotify.com"},
                {"name": "Date", "value": "Fri, 01 Mar 2024 10:00:00 +0000"},
            ],
            "parts": [
                {
                    "mimeType": "text/plain",
                    "body": {"data": _b64("Spotify Premium monthly: $10.99")},
                },
                {
                    "mimeType": "text/html",
                    "body": {"data": _b64("<p>Spotify Premium monthly: $10.99</p>")},
                },
            ],
        },
    }
