"""Gmail as an email source."""

from .client import GmailClient
from .parsing import message_to_email_record

__all__ = ["GmailClient", "message_to_email_record"]
