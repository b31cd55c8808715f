"""
Error types for the Dispute Draft service
"""
from typing import Optional


class DisputeServiceError(Exception):
    """Base class for all service errors"""


class ConfigurationError(DisputeServiceError):
    """A required setting is missing or invalid"""

    def __init__(self, setting: str, message: Optional[str] = None):
        self.setting = setting
        super().__init__(message or f"Missing required setting: {setting}")


class WebhookVerificationError(DisputeServiceError):
    """The webhook payload could not be authenticated"""


class ProviderError(DisputeServiceError):
    """
    A call to Stripe failed.

    Attributes:
        phase: Which step failed ("retrieve", "submit" or "oauth")
        resource_id: Dispute or account the call was about
        original_exception: The Stripe exception that caused this error
    """

    def __init__(self, phase: str, message: str, resource_id: Optional[str] = None,
                 original_exception: Optional[Exception] = None):
        self.phase = phase
        self.resource_id = resource_id
        self.original_exception = original_exception
        super().__init__(message)


class DisputeNotFoundError(DisputeServiceError):
    """No dispute with this id has been received"""

    def __init__(self, dispute_id: str):
        self.dispute_id = dispute_id
        super().__init__(f"Unknown dispute: {dispute_id}")
