"""Gmail API client used as an alternative email source.

Notes:
    The Google API client is synchronous. Calls are wrapped with
    `asyncio.to_thread` so the detector stays async-friendly.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog

from subscription_detector.config import Settings
from subscription_detector.exceptions import AuthenticationError, ConfigurationError, GmailAPIError
from subscription_detector.gmail.parsing import message_to_email_record
from subscription_detector.models import EmailRecord

logger = structlog.get_logger()

_PAGE_SIZE = 500


class GmailClient:
    """Reads candidate subscription emails from a Gmail mailbox."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
        """
        from subscription_detector.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = None
        logger.info("gmail_client_initialized")

    async def authenticate(self) -> None:
        """Authenticate with Gmail API using OAuth2.

        Raises:
            ConfigurationError: If the credentials file is missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        credentials_path = Path(self.settings.gmail_credentials_path)
        token_path = Path(self.settings.gmail_token_path)
        scope = self.settings.gmail_scope

        if not credentials_path.exists():
            raise ConfigurationError(f"Gmail credentials file not found: {credentials_path}")

        logger.info("gmail_authentication_started", credentials_path=str(credentials_path), scope=scope)

        try:
            self._service = await asyncio.to_thread(self._build_service, credentials_path, token_path, scope)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def fetch_emails(self, query: str | None = None, limit: int | None = None) -> list[EmailRecord]:
        """Fetch full messages matching `query` and map them to EmailRecords.

        Args:
            query: Gmail search query. Defaults to the configured `gmail_query`.
            limit: Maximum number of messages to fetch (default: all).

        Returns:
            Email records in the order Gmail lists them.

        Raises:
            AuthenticationError: If `authenticate()` has not been called.
            GmailAPIError: If an API request fails.
        """

        self._ensure_authenticated()
        query = query or self.settings.gmail_query

        try:
            ids = await asyncio.to_thread(self._list_message_ids, query, limit)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_list_messages_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

        logger.info("gmail_messages_listed", message_count=len(ids), query=query, limit=limit)

        emails: list[EmailRecord] = []
        for message_id in ids:
            try:
                raw = await asyncio.to_thread(self._get_message, message_id)
            except Exception as exc:  # noqa: BLE001
                logger.exception("gmail_get_message_failed", message_id=message_id, error=str(exc))
                raise GmailAPIError(str(exc)) from exc
            emails.append(message_to_email_record(raw))

        return emails

    def _ensure_authenticated(self) -> None:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )

    def _build_service(self, credentials_path: Path, token_path: Path, scope: str) -> Any:
        # Imported lazily so file-based runs never load the Google stack.
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow
        from googleapiclient.discovery import build

        creds: Credentials | None = None
        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes=[scope])

        if creds is not None and creds.expired and creds.refresh_token:
            creds.refresh(Request())

        if creds is None or not creds.valid:
            flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=[scope])
            creds = flow.run_local_server(port=0)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json(), encoding="utf-8")

        return build("gmail", "v1", credentials=creds, cache_discovery=False)

    def _list_message_ids(self, query: str, limit: int | None) -> list[str]:
        assert self._service is not None
        ids: list[str] = []
        page_token: str | None = None

        while limit is None or len(ids) < limit:
            per_page = _PAGE_SIZE if limit is None else min(_PAGE_SIZE, limit - len(ids))
            response = (
                self._service.users()
                .messages()
                .list(userId="me", maxResults=per_page, q=query, pageToken=page_token)
                .execute()
            )
            ids.extend(m["id"] for m in response.get("messages") or [] if m.get("id"))
            page_token = response.get("nextPageToken")
            if page_token is None:
                break

        return ids if limit is None else ids[:limit]

    def _get_message(self, message_id: str) -> dict[str, Any]:
        assert self._service is not None
        return self._service.users().messages().get(userId="me", id=message_id, format="full").execute()
