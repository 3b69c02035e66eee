"""
Error taxonomy for the marketplace API.

Every error raised by a service carries the HTTP status it maps to and a short
machine-readable code. Routes do not translate these themselves; the exception
handler registered in ``golocal_spaces.main`` renders them as::

    {"success": false, "error": "<code>", "message": "<human readable>"}
"""

from __future__ import annotations

from fastapi import status


class MarketplaceError(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    """Missing or malformed input. Detected before any side effect."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class BookingConflictError(ValidationError):
    """Requested dates overlap a confirmed booking on the same space."""

    status_code = status.HTTP_409_CONFLICT
    code = "booking_conflict"


class PermissionDeniedError(MarketplaceError):
    """The acting user is not allowed to mutate the entity."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"


class NotFoundError(MarketplaceError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class PaymentProviderError(MarketplaceError):
    """The payment processor is unavailable, unconfigured, or rejected the call."""

    code = "payment_provider_error"


class SignatureError(MarketplaceError):
    """Webhook authenticity check failed."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_signature"


class PersistenceError(MarketplaceError):
    """The data store failed while writing."""

    code = "persistence_error"


class SideEffectError(MarketplaceError):
    """One or more follow-up writes failed after the core transition was applied."""

    code = "side_effect_error"

    def __init__(self, message: str, failed: list[str]) -> None:
        super().__init__(message)
        self.failed = failed


class StorageError(MarketplaceError):
    """Object storage rejected an upload or delete."""

    code = "storage_error"
