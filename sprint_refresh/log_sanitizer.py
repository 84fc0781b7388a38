"""
Log sanitization utilities to prevent credential leakage.

Error messages can echo request headers or raw response bodies; everything
that reaches the log goes through these helpers first.
"""

import re
from typing import Iterable, Optional


# Patterns that might indicate sensitive data
SENSITIVE_PATTERNS = [
    (re.compile(r'((?:basic|bearer)\s+)([a-zA-Z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(authorization["\']?\s*[:=]\s*["\']?)([^"\'\s]+)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(azure_devops_pat["\']?\s*[:=]\s*["\']?)([^"\'\s]+)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([^"\'\s]+)', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(password["\']?\s*[:=]\s*["\']?)([^"\'\s]+)', re.IGNORECASE), r'\1***REDACTED***'),
]


def sanitize_log_message(message: str, secrets: Optional[Iterable[str]] = None) -> str:
    """
    Sanitize a log message by redacting sensitive information.

    Args:
        message: The log message to sanitize
        secrets: Literal values (such as the configured PAT) to redact wherever they appear

    Returns:
        Sanitized log message with sensitive data redacted
    """
    if not message:
        return message

    sanitized = message
    for secret in secrets or ():
        if secret:
            sanitized = sanitized.replace(secret, '***REDACTED***')

    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    return sanitized


def safe_log_error(
    error: Exception,
    context: str = "",
    secrets: Optional[Iterable[str]] = None
) -> str:
    """
    Create a safe error message for logging.

    Args:
        error: The exception
        context: Additional context (e.g., "Sprint refresh failed")
        secrets: Literal values to redact

    Returns:
        Safe error message for logging
    """
    sanitized_error = sanitize_log_message(str(error), secrets)
    error_type = type(error).__name__

    if context:
        return f"{context}: {error_type}: {sanitized_error}"
    return f"{error_type}: {sanitized_error}"
