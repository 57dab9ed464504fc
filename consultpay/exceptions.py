"""
Payment core exception hierarchy.

Every error raised by the order, verification and recording layers is a
PaymentCoreError. The request layer maps `status_code` onto the HTTP
response and callers check `retryable` instead of matching messages.
"""
from typing import Any, Dict, Optional


class PaymentCoreError(Exception):
    """Base exception for all payment core errors."""

    error_code = "payment:error"
    status_code = 500
    retryable = False

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PaymentCoreError):
    """
    A required field is missing or invalid.

    Examples:
    - Blank full name or email on save
    - Amount that is zero, negative or not a finite number
    - Verification token supplied without the order it belongs to
    """

    error_code = "payment:validation"
    status_code = 400


class AuthenticityError(PaymentCoreError):
    """
    A gateway signature or verification token did not match.

    The message is always generic and never says which operand differed.
    """

    error_code = "payment:authenticity"
    status_code = 400

    def __init__(self, message: str = "Payment verification failed"):
        super().__init__(message)


class ConfigurationError(PaymentCoreError):
    """
    A secret, payee identifier or gateway credential is not configured.

    Surfaced as service-unavailable, never as a client error.
    """

    error_code = "payment:configuration"
    status_code = 503


class StoreUnavailableError(PaymentCoreError):
    """Payment store is not ready or a write failed. Safe to retry."""

    error_code = "payment:store_unavailable"
    status_code = 503
    retryable = True


class UpstreamError(PaymentCoreError):
    """Payment gateway call failed. The upstream message is not exposed."""

    error_code = "payment:upstream"
    status_code = 502
    retryable = True
