"""Subscription detection batch.

This module provides the detector that orchestrates per-email extraction,
the optional classifier, and the final deduplication pass.
"""

from __future__ import annotations

import time
from collections.abc import Sequence

import structlog

from subscription_detector.classifier import SubscriptionClassifier
from subscription_detector.config import Settings
from subscription_detector.detector.builder import build_subscription
from subscription_detector.detector.dedupe import deduplicate
from subscription_detector.exceptions import ClassifierError
from subscription_detector.extraction import normalize_email
from subscription_detector.models import DetectionReport, EmailRecord, ProcessingResult

logger = structlog.get_logger()


class SubscriptionDetector:
    """Turns a batch of emails into deduplicated subscriptions.

    Emails are processed strictly one after another, including the wait on the
    classifier. A failure while processing one email skips that email and is
    recorded in its ProcessingResult; the batch carries on.
    """

    def __init__(
        self,
        classifier: SubscriptionClassifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the detector.

        Args:
            classifier: External classifier. If None, an OpenAI classifier is
                created when the settings enable it; otherwise only the
                rule-based extractors run.
            settings: Application settings. If None, uses default settings.
        """
        from subscription_detector.config import get_settings

        self.settings = settings or get_settings()

        if classifier is None and self.settings.ai_enabled:
            from subscription_detector.classifier import OpenAIClassifier

            classifier = OpenAIClassifier(self.settings)
        self.classifier = classifier

        logger.info("subscription_detector_initialized", classifier_enabled=classifier is not None)

    async def process_emails(self, emails: Sequence[EmailRecord]) -> DetectionReport:
        """Process a batch of emails.

        Args:
            emails: Emails to analyze, in any order.

        Returns:
            DetectionReport with the deduplicated subscriptions and one
            ProcessingResult per input email.

        Raises:
            ClassifierError: If the classifier fails and `classifier_fail_fast` is set.
        """

        total = len(emails)
        logger.info("processing_emails_started", total=total)

        results: list[ProcessingResult] = []
        processed = 0
        for index, email in enumerate(emails):
            result = await self.process_email(email, index)
            results.append(result)
            processed += 1
            logger.info(
                "email_processed",
                processed=processed,
                total=total,
                percent=round(processed / total * 100),
                success=result.success,
            )

        subscriptions = deduplicate(r.subscription for r in results if r.subscription is not None)
        report = DetectionReport(subscriptions=subscriptions, results=results)

        logger.info(
            "processing_emails_completed",
            total=report.total,
            skipped=report.skipped,
            subscriptions=len(subscriptions),
        )
        return report

    async def process_email(self, email: EmailRecord, index: int = 0) -> ProcessingResult:
        """Build the subscription record for a single email.

        Args:
            email: Raw email.
            index: Position of the email in its batch.

        Returns:
            A successful ProcessingResult carrying the record, or a failed one
            carrying the error message.
        """

        started = time.perf_counter()
        try:
            parsed = normalize_email(email)
            patch = await self.classifier.classify(parsed) if self.classifier is not None else None
            subscription = build_subscription(parsed, patch)
        except ClassifierError as exc:
            if self.settings.classifier_fail_fast:
                raise
            return self._failed(email, index, started, exc)
        except Exception as exc:  # noqa: BLE001
            return self._failed(email, index, started, exc)

        return ProcessingResult(
            email_index=index,
            sender=email.sender,
            subscription=subscription,
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )

    @staticmethod
    def _failed(
        email: EmailRecord,
        index: int,
        started: float,
        exc: Exception,
    ) -> ProcessingResult:
        logger.exception("email_processing_failed", email_index=index, sender=email.sender, error=str(exc))
        return ProcessingResult(
            email_index=index,
            sender=email.sender,
            success=False,
            error=f"{type(exc).__name__}: {exc}",
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )
