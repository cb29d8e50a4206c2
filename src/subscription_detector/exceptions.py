"""Custom exceptions for Subscription Detector."""


class SubscriptionDetectorError(Exception):
    """Base exception for all Subscription Detector errors."""


class ClassifierError(SubscriptionDetectorError):
    """Exception raised when the external LLM classifier call fails."""


class MalformedDateError(SubscriptionDetectorError):
    """Exception raised when an email date cannot be parsed."""


class InputFormatError(SubscriptionDetectorError):
    """Exception raised when the email input file has an unexpected shape."""


class GmailAPIError(SubscriptionDetectorError):
    """Exception raised for Gmail API related errors."""


class ConfigurationError(SubscriptionDetectorError):
    """Exception raised for configuration related errors."""


class AuthenticationError(SubscriptionDetectorError):
    """Exception raised for authentication failures."""
