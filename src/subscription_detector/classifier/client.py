"""OpenAI-backed subscription classifier.

This module provides the optional external classifier whose output overrides
the rule-based guess field by field.
"""

from __future__ import annotations

from typing import Any, Optional

import structlog

from subscription_detector.classifier.prompt import PROMPT_VERSION, SYSTEM_PROMPT, build_subscription_prompt
from subscription_detector.classifier.response import parse_classifier_response
from subscription_detector.config import Settings
from subscription_detector.exceptions import ClassifierError, ConfigurationError
from subscription_detector.models import EmailRecord, SubscriptionPatch
from subscription_detector.utils import retry_on_failure

logger = structlog.get_logger()


class OpenAIClassifier:
    """LLM classifier using the OpenAI chat completions API.

    Transient API failures are retried with exponential backoff. Every failure
    that survives the retries is raised as ClassifierError. A response that
    cannot be interpreted is not an error; it is treated as "not a subscription".
    """

    def __init__(self, settings: Optional[Settings] = None, client: Any | None = None) -> None:
        """Initialize the classifier.

        Args:
            settings: Application settings. If None, uses default settings.
            client: Pre-built AsyncOpenAI-compatible client. If None, one is
                created from the settings.

        Raises:
            ConfigurationError: If no client is given and no API key is configured.
        """
        from subscription_detector.config import get_settings

        self.settings = settings or get_settings()
        self.model = self.settings.openai_model

        # Imported lazily so the rule-based path never needs the SDK.
        import openai

        if client is None:
            if not self.settings.openai_api_key:
                raise ConfigurationError(
                    "OpenAI API key is not configured. Set SUBSCRIPTION_DETECTOR_OPENAI_API_KEY."
                )
            client = openai.AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
                timeout=self.settings.openai_timeout,
            )
        self.client = client

        self._complete = retry_on_failure(
            max_retries=self.settings.max_retries,
            delay=self.settings.retry_delay,
            # Connection and timeout errors, 429s and 5xx responses
            exceptions=(openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError),
        )(self._complete_once)

        logger.info(
            "classifier_initialized",
            model=self.model,
            prompt_version=PROMPT_VERSION,
            max_retries=self.settings.max_retries,
        )

    async def classify(self, email: EmailRecord) -> SubscriptionPatch | None:
        """Extract subscription fields from one email.

        Args:
            email: Normalized email.

        Returns:
            The fields the model found, or None if the email is not a subscription.

        Raises:
            ClassifierError: If the API call keeps failing after all retries.
        """

        prompt = build_subscription_prompt(email)
        logger.debug("classifying_email", model=self.model, prompt_length=len(prompt))

        try:
            content = await self._complete(prompt)
        except Exception as exc:  # noqa: BLE001
            logger.error("classifier_call_failed", model=self.model, error=str(exc))
            raise ClassifierError(str(exc)) from exc

        patch = parse_classifier_response(content)
        logger.debug("email_classified", matched=patch is not None)
        return patch

    async def _complete_once(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.1,
        )
        return (response.choices[0].message.content or "").strip()
