"""
Custom exception classes for the sprint report refresh.

Provides structured error handling with helpful messages for configuration
problems, Azure DevOps API failures and report update issues.
"""

from typing import Optional, Any


class ReportRefreshError(Exception):
    """
    Base exception for every failure raised during a refresh run.

    Attributes:
        status_code: HTTP status code when the error came from an API response
        message: Human-readable error message
        original_error: The original exception that was caught
        details: Additional error details
    """

    def __init__(
        self,
        message: str = "Sprint report refresh failed",
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
        details: Optional[Any] = None
    ):
        self.status_code = status_code
        self.message = message
        self.original_error = original_error
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the error."""
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message

    def to_dict(self) -> dict:
        """Convert error to dictionary for JSON serialization."""
        return {
            'error': self.__class__.__name__,
            'status_code': self.status_code,
            'message': self.message,
            'details': str(self.details) if self.details else None
        }


class ConfigurationError(ReportRefreshError):
    """
    Raised when the process configuration is unusable.

    This is checked before any network call is made, e.g.:
    - AZURE_DEVOPS_PAT is not set
    - AZURE_DEVOPS_TIMEOUT is not a positive number
    """

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message=message, details=details)


class ValidationError(ConfigurationError):
    """Raised when an input such as an iteration path or WIQL query is malformed."""


class RequestFailure(ReportRefreshError):
    """
    Raised when Azure DevOps answers with a non-2xx status.

    Attributes:
        body: Raw response body, kept for diagnostics
    """

    def __init__(
        self,
        status_code: int,
        body: str = "",
        message: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        if message is None:
            message = f"API request failed: {status_code} - {body}"

        super().__init__(
            message=message,
            status_code=status_code,
            original_error=original_error,
            details={'body': body}
        )
        self.body = body


class AuthenticationError(RequestFailure):
    """
    Raised when authentication fails (HTTP 401).

    This can occur when:
    - The Personal Access Token has expired
    - The token was revoked
    - The token belongs to a different organization
    """

    def __init__(self, body: str = "", original_error: Optional[Exception] = None):
        super().__init__(
            status_code=401,
            body=body,
            message=(
                "Authentication failed. Your Personal Access Token may have expired "
                "or been revoked. Create a new token and update AZURE_DEVOPS_PAT."
            ),
            original_error=original_error
        )


class PermissionDeniedError(RequestFailure):
    """
    Raised when the token lacks permission (HTTP 403).

    The token needs at least the "Work Items (Read)" scope for the project.
    """

    def __init__(self, body: str = "", original_error: Optional[Exception] = None):
        super().__init__(
            status_code=403,
            body=body,
            message=(
                "Permission denied. Check that the token has the 'Work Items (Read)' "
                "scope and access to the project and team."
            ),
            original_error=original_error
        )


class TransportFailure(ReportRefreshError):
    """
    Raised for connection-level failures.

    This can occur when:
    - DNS resolution or the TCP/TLS connection fails
    - The connection drops before the response is complete
    - An optional request timeout expires
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message=message, original_error=original_error)


class ParseFailure(ReportRefreshError):
    """Raised when a 2xx response body is not valid JSON."""

    def __init__(
        self,
        body: str = "",
        original_error: Optional[Exception] = None
    ):
        preview = body[:200]
        super().__init__(
            message=f"Could not parse API response as JSON: {preview!r}",
            original_error=original_error,
            details={'body': body}
        )
        self.body = body


class SprintNotFound(ReportRefreshError):
    """Raised when no iteration matches the requested sprint."""

    def __init__(self, specifier: str, available: Optional[list] = None):
        super().__init__(
            message=f"Could not find target sprint: {specifier}",
            details={'specifier': specifier, 'available': available or []}
        )
        self.specifier = specifier


class ReportBlockNotFound(ReportRefreshError):
    """
    Raised when the report has no block for the sprint.

    Not fatal: the writer logs it and still refreshes the timestamp.
    """

    def __init__(self, sprint_name: str):
        super().__init__(
            message=f'Sprint "{sprint_name}" not found in HTML, may need manual update',
            details={'sprint_name': sprint_name}
        )
        self.sprint_name = sprint_name


def map_status_code_to_error(
    status_code: int,
    body: str = "",
    original_error: Optional[Exception] = None
) -> RequestFailure:
    """
    Map a non-2xx HTTP status code to the matching RequestFailure.

    Args:
        status_code: HTTP status code from the Azure DevOps API
        body: Raw response body
        original_error: The original exception, if any

    Returns:
        RequestFailure or one of its subclasses
    """
    if status_code == 401:
        return AuthenticationError(body=body, original_error=original_error)
    elif status_code == 403:
        return PermissionDeniedError(body=body, original_error=original_error)
    return RequestFailure(status_code=status_code, body=body, original_error=original_error)
