"""Exception hierarchy for the DevBlog API.

Every error a client can see derives from `DevBlogError`, which carries the
HTTP status code and any extra body fields. The middleware and the FastAPI
exception handlers render them through the same builder, so the wire format
is always the flat `{"error": message, **details}` object.
"""

from enum import StrEnum
from typing import Any

from starlette import status


class ErrorType(StrEnum):
    """Error type codes, used for logging and metrics labels."""

    INVALID_REQUEST = "invalid_request_error"
    AUTHENTICATION = "authentication_error"
    NOT_FOUND = "not_found_error"
    RATE_LIMIT = "rate_limit_error"
    SERVICE_UNAVAILABLE = "service_unavailable_error"
    INTERNAL_SERVER = "internal_server_error"
    CONFIGURATION = "configuration_error"


# ============================================================================
# Base Exception
# ============================================================================


class DevBlogError(Exception):
    """Base exception for all DevBlog API errors."""

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType = ErrorType.INTERNAL_SERVER,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers or {}

    def to_dict(self) -> dict[str, Any]:
        """Render the client-facing JSON body."""
        return {"error": self.message, **self.details}


# ============================================================================
# API Errors (Client-facing)
# ============================================================================


class ValidationError(DevBlogError):
    """Request validation error (400)."""

    def __init__(
        self,
        message: str = "Invalid request parameters",
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            error_type=ErrorType.INVALID_REQUEST,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class AuthenticationError(DevBlogError):
    """Authentication error (401)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(
            message,
            error_type=ErrorType.AUTHENTICATION,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class MissingAPIKeyError(AuthenticationError):
    """No bearer credential, or a malformed Authorization header."""

    def __init__(self) -> None:
        super().__init__("Invalid or missing API key")


class InvalidAPIKeyError(AuthenticationError):
    """The bearer credential does not match any active key."""

    def __init__(self) -> None:
        super().__init__("Invalid API key")


class RateLimitExceededError(DevBlogError):
    """The key has used up its quota (429)."""

    def __init__(self, retry_after: int) -> None:
        super().__init__(
            "Rate limit exceeded",
            error_type=ErrorType.RATE_LIMIT,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details={"retry_after": retry_after},
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


class NotFoundError(DevBlogError):
    """Not found error (404)."""

    def __init__(self, message: str = "Endpoint not found") -> None:
        super().__init__(
            message,
            error_type=ErrorType.NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class PostNotFoundError(NotFoundError):
    """No published post for the requested author and slug."""

    def __init__(self, username: str, slug: str) -> None:
        super().__init__("Post not found")
        self.username = username
        self.slug = slug


class UserNotFoundError(NotFoundError):
    """No profile with the requested username."""

    def __init__(self, username: str) -> None:
        super().__init__("User not found")
        self.username = username


class ProfileNotFoundError(NotFoundError):
    """Management-side lookup of a profile that does not exist."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Profile not found: {username}")
        self.username = username


class APIKeyNotFoundError(NotFoundError):
    """Management-side lookup of a key id that does not exist."""

    def __init__(self, key_id: str) -> None:
        super().__init__(f"API key not found: {key_id}")
        self.key_id = key_id


# ============================================================================
# Data Store Errors
# ============================================================================


class DataStoreError(DevBlogError):
    """The data store raised while serving a request (500)."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(
            message,
            error_type=ErrorType.INTERNAL_SERVER,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class DataStoreTimeoutError(DevBlogError):
    """A data store call exceeded its time budget (503)."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(
            message,
            error_type=ErrorType.SERVICE_UNAVAILABLE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(DevBlogError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_type=ErrorType.CONFIGURATION)


__all__ = [
    "APIKeyNotFoundError",
    "AuthenticationError",
    "ConfigurationError",
    "DataStoreError",
    "DataStoreTimeoutError",
    "DevBlogError",
    "ErrorType",
    "InvalidAPIKeyError",
    "MissingAPIKeyError",
    "NotFoundError",
    "PostNotFoundError",
    "ProfileNotFoundError",
    "RateLimitExceededError",
    "UserNotFoundError",
    "ValidationError",
]
