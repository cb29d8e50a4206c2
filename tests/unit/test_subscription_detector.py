"""Unit tests for the subscription detection batch."""

from datetime import date

import pytest

from subscription_detector.classifier import OpenAIClassifier
from subscription_detector.detector import SubscriptionDetector
from subscription_detector.exceptions import ClassifierError
from subscription_detector.models import (
    EmailRecord,
    SubscriptionCategory,
    SubscriptionCycle,
    SubscriptionPatch,
)


class FakeClassifier:
    """Classifier returning canned results and recording what it saw."""

    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.seen: list[EmailRecord] = []

    async def classify(self, email: EmailRecord):
        self.seen.append(email)
        if self.error is not None:
            raise self.error
        return self.result


class TestSubscriptionDetector:
    """Test suite for SubscriptionDetector class."""

    def test_rule_only_without_api_key(self, mock_settings) -> None:
        detector = SubscriptionDetector(settings=mock_settings)

        assert detector.classifier is None

    def test_openai_classifier_engaged_with_api_key(self, mock_settings) -> None:
        settings = mock_settings.model_copy(update={"openai_api_key": "sk-test", "use_ai": True})

        detector = SubscriptionDetector(settings=settings)

        assert isinstance(detector.classifier, OpenAIClassifier)

    @pytest.mark.asyncio
    async def test_single_email_end_to_end(self, mock_settings, netflix_email) -> None:
        detector = SubscriptionDetector(settings=mock_settings)

        report = await detector.process_emails([netflix_email])

        assert report.total == 1
        assert report.skipped == 0
        [subscription] = report.subscriptions
        assert subscription.to_output() == {
            "name": "netflix",
            "amount": 15.99,
            "cycle": "monthly",
            "start_date": "2024-03-01",
            "category": "streaming",
        }

    @pytest.mark.asyncio
    async def test_bad_email_is_skipped(self, mock_settings, netflix_email) -> None:
        broken = EmailRecord(sender="billing@spotify.com", subject="Receipt", date="not a date")
        detector = SubscriptionDetector(settings=mock_settings)

        report = await detector.process_emails([broken, netflix_email])

        assert report.total == 2
        assert report.processed == 1
        assert report.skipped == 1
        assert report.results[0].success is False
        assert "MalformedDateError" in report.results[0].error
        assert [s.name for s in report.subscriptions] == ["netflix"]

    @pytest.mark.asyncio
    async def test_slash_dated_email_is_processed(self, mock_settings) -> None:
        email = EmailRecord(
            body="Your monthly plan costs $15.99.",
            sender="no-reply@netflix.com",
            subject="Your Netflix subscription",
            date="2024/03/01",
        )
        detector = SubscriptionDetector(settings=mock_settings)

        report = await detector.process_emails([email])

        assert report.skipped == 0
        assert report.subscriptions[0].start_date == date(2024, 3, 1)

    @pytest.mark.asyncio
    async def test_duplicates_are_merged(self, mock_settings) -> None:
        emails = [
            EmailRecord(
                body="Your 30 day free trial has started.",
                sender="no-reply@netflix.com",
                subject="Your Netflix subscription",
                date="2024-01-01",
            ),
            EmailRecord(
                body="Your monthly plan costs $15.99.",
                sender="no-reply@netflix.com",
                subject="Your Netflix subscription",
                date="2024-02-01",
            ),
        ]
        detector = SubscriptionDetector(settings=mock_settings)

        report = await detector.process_emails(emails)

        [subscription] = report.subscriptions
        assert subscription.start_date == date(2024, 2, 1)
        assert subscription.amount == 15.99
        assert subscription.is_trial is True
        assert subscription.trial_duration_in_days == 30
        assert subscription.trial_end_date == date(2024, 1, 31)

    @pytest.mark.asyncio
    async def test_classifier_result_overrides_rules(self, mock_settings, netflix_email) -> None:
        classifier = FakeClassifier(
            SubscriptionPatch(name="Netflix Standard", cycle=SubscriptionCycle.YEARLY)
        )
        detector = SubscriptionDetector(classifier=classifier, settings=mock_settings)

        report = await detector.process_emails([netflix_email])

        [subscription] = report.subscriptions
        assert subscription.name == "netflix standard"
        assert subscription.cycle == SubscriptionCycle.YEARLY
        assert subscription.amount == 15.99
        assert subscription.category == SubscriptionCategory.STREAMING
        # The classifier sees the normalized email.
        assert classifier.seen[0].body == "Thanks for watching! Your monthly plan costs $15.99."

    @pytest.mark.asyncio
    async def test_classifier_no_match_falls_back_to_rules(self, mock_settings, netflix_email) -> None:
        detector = SubscriptionDetector(classifier=FakeClassifier(None), settings=mock_settings)

        report = await detector.process_emails([netflix_email])

        assert report.subscriptions[0].name == "netflix"

    @pytest.mark.asyncio
    async def test_classifier_failure_skips_email(self, mock_settings, netflix_email, trial_email) -> None:
        classifier = FakeClassifier(error=ClassifierError("rate limited"))
        detector = SubscriptionDetector(classifier=classifier, settings=mock_settings)

        report = await detector.process_emails([netflix_email, trial_email])

        assert report.skipped == 2
        assert report.subscriptions == []
        assert len(classifier.seen) == 2

    @pytest.mark.asyncio
    async def test_classifier_failure_aborts_when_fail_fast(self, mock_settings, netflix_email) -> None:
        settings = mock_settings.model_copy(update={"classifier_fail_fast": True})
        classifier = FakeClassifier(error=ClassifierError("rate limited"))
        detector = SubscriptionDetector(classifier=classifier, settings=settings)

        with pytest.raises(ClassifierError):
            await detector.process_emails([netflix_email])

    @pytest.mark.asyncio
    async def test_empty_batch(self, mock_settings) -> None:
        detector = SubscriptionDetector(settings=mock_settings)

        report = await detector.process_emails([])

        assert report.total == 0
        assert report.subscriptions == []
