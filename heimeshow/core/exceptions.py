"""
Custom application exceptions
"""

from typing import Optional, Dict, Any
from urllib.parse import quote


class HeimeShowException(Exception):
    """Base exception for HeimeShow application"""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(HeimeShowException):
    """Authentication related errors"""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=401,
            details=details
        )


class NotFoundError(HeimeShowException):
    """Resource not found errors"""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} {identifier!r} not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "identifier": identifier} if identifier else {}
        )


class OutOfRangeError(HeimeShowException):
    """Index outside of an allowed range"""

    def __init__(self, name: str, value: Any, lower: int, upper: int):
        super().__init__(
            message=f"{name} must be in [{lower}, {upper}), got {value!r}",
            code="OUT_OF_RANGE",
            status_code=400,
            details={"field": name, "value": value, "lower": lower, "upper": upper}
        )


class ExternalServiceError(HeimeShowException):
    """External service error"""

    def __init__(self, service: str, message: str = None, upstream_status: Optional[int] = None):
        details = {"service": service}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(
            message=message or f"External service {service} is unavailable",
            code="EXTERNAL_SERVICE_ERROR",
            status_code=503,
            details=details
        )


class SignInRequired(Exception):
    """
    Raised when a booking mutation is attempted without a session.

    Not an application error: callers translate it into a redirect to the
    sign-in page, carrying the location to return to afterwards.
    """

    def __init__(self, return_to: str = ""):
        self.return_to = return_to
        self.redirect = f"auth.html?redirect={quote(return_to, safe='')}"
        super().__init__("Sign in to HeimeShow to book tickets.")
