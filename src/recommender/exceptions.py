"""Custom exceptions for CartRec.

Defines specific exception types for better error handling and reporting.
Each exception carries the HTTP status code the API responds with.
"""

from typing import Any, Dict, Optional


class CartRecException(Exception):
    """Base exception for CartRec errors."""

    error_label = "Internal error"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class RetrievalError(CartRecException):
    """Raised when the cart or the catalog cannot be read."""

    error_label = "Retrieval failed"

    def __init__(
        self,
        source: str,
        error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        message = f"Failed to retrieve {source}"
        if error is not None:
            message = f"{message}: {error}"
        error_details: Dict[str, Any] = {"source": source}
        if error is not None:
            error_details["error"] = str(error)
            error_details["error_type"] = type(error).__name__
        error_details.update(details or {})
        super().__init__(
            message=message,
            status_code=503,
            details=error_details,
        )


class InvalidArgumentError(CartRecException):
    """Raised when a caller passes an argument the engine cannot accept."""

    error_label = "Invalid argument"

    def __init__(self, argument: str, value: Any, reason: str):
        message = f"Invalid value for '{argument}': {value!r} ({reason})"
        super().__init__(
            message=message,
            status_code=400,
            details={"argument": argument, "value": repr(value), "reason": reason},
        )


class ComputationError(CartRecException):
    """Raised when scoring fails on otherwise valid inputs."""

    error_label = "Computation failed"

    def __init__(self, error: Exception, details: Optional[Dict[str, Any]] = None):
        message = f"Failed to compute recommendations: {str(error)}"
        error_details: Dict[str, Any] = {
            "error": str(error),
            "error_type": type(error).__name__,
        }
        error_details.update(details or {})
        super().__init__(
            message=message,
            status_code=500,
            details=error_details,
        )
