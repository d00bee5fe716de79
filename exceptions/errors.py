"""
Custom exception classes for the application.

Every error the API can answer with derives from AppError.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PRODUCT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503 unless overridden)."""

    def __init__(
        self,
        service: str,
        message: str,
        code: Optional[str] = None,
        status_code: int = 503,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code or f"{service.upper()}_ERROR",
            message=message,
            status_code=status_code,
            details={"service": service, **(details or {})}
        )


class AuthenticationError(AppError):
    """Missing or wrong admin secret (401)."""

    def __init__(self, message: str = "Incorrect admin password"):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401
        )


# ===================
# FEED ERRORS
# ===================

class RetrievalError(ExternalServiceError):
    """Every retrieval strategy failed."""

    def __init__(self, failures: Optional[list[dict]] = None):
        super().__init__(
            service="google_sheets",
            code="FEED_UNREACHABLE",
            message=(
                "Could not connect to the inventory sheet. Check the internet connection "
                "and make sure the sheet is shared as 'Anyone with the link can view'."
            ),
            details={"failures": failures or []}
        )


class EnvelopeFormatError(ExternalServiceError):
    """The sheet answered, but not with the expected GViz envelope."""

    def __init__(self, reason: str):
        super().__init__(
            service="google_sheets",
            code="FEED_FORMAT_ERROR",
            status_code=502,
            message="Unexpected response from Google. Check the sheet sharing permissions.",
            details={"reason": reason}
        )


class EmptyResultError(ValidationError):
    """Feed decoded fine but produced no products."""

    def __init__(self, rows_seen: int = 0):
        super().__init__(
            code="FEED_EMPTY",
            message=(
                "Connected to the inventory tab, but no product rows were found. "
                "Check that there is data below the header row."
            ),
            details={"rows_seen": rows_seen}
        )


# ===================
# INVENTORY ERRORS
# ===================

class ProductNotFoundError(NotFoundError):
    """Product not found in the current snapshot."""

    def __init__(self, product_id: str):
        super().__init__(
            resource="Product",
            identifier=product_id,
            code="PRODUCT_NOT_FOUND"
        )


class ReadOnlyInventoryError(AppError):
    """Write operation that must be done in the spreadsheet instead (405)."""

    def __init__(self, action: str, guidance: str):
        super().__init__(
            code="READ_ONLY_INVENTORY",
            message=f"Action not allowed: {guidance}",
            status_code=405,
            details={"action": action}
        )
