"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
    AuthenticationError,

    # Feed
    RetrievalError,
    EnvelopeFormatError,
    EmptyResultError,

    # Inventory
    ProductNotFoundError,
    ReadOnlyInventoryError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "AuthenticationError",

    # Feed
    "RetrievalError",
    "EnvelopeFormatError",
    "EmptyResultError",

    # Inventory
    "ProductNotFoundError",
    "ReadOnlyInventoryError",
]
