"""
Domain exceptions.

Services raise these instead of returning error tuples; the server maps each
one to its HTTP status with a ``{"error": message}`` body.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class EmpoweredCampsError(Exception):
    """Base exception for all platform errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API response body."""
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(EmpoweredCampsError):
    """Invalid input or a business rule rejected the request."""

    status_code = 400
    code = "BAD_REQUEST"


class UnauthorizedError(EmpoweredCampsError):
    """Missing or invalid credentials."""

    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ForbiddenError(EmpoweredCampsError):
    """Authenticated caller lacks the required role or tenant access."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(EmpoweredCampsError):
    """A referenced record does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class PaymentProviderError(EmpoweredCampsError):
    """Stripe rejected a call or is unreachable."""

    status_code = 500
    code = "PAYMENT_PROVIDER_ERROR"
