"""
Wiki API Error Model

This module provides the error handling framework for the wiki API client.
Every error raised by the library derives from WikiApiError, so callers can
catch the whole family with a single except clause.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import Enum, IntEnum


class ErrorCode(IntEnum):
    """Client-side error codes."""

    UNKNOWN = 1

    # Configuration errors (100-199)
    CONFIGURATION = 100
    MISSING_CAPABILITY_TOKEN = 101
    INVALID_PARAMETER = 102

    # Authentication errors (200-299)
    AUTH_FAILED = 200
    INVALID_CREDENTIALS = 201
    DIALECT_UNSUPPORTED = 202
    AUTH_TRANSPORT_FAILURE = 203
    AUTH_RETRY_EXHAUSTED = 204

    # Transport errors (300-399)
    TRANSPORT_ERROR = 300
    UNAUTHORIZED = 301
    NETWORK_ERROR = 302
    SERVER_ERROR = 303

    # Decoding errors (400-499)
    DECODE_ERROR = 400
    INVALID_JSON = 401
    MALFORMED_CONTINUATION = 402


class AuthFailure(Enum):
    """Why an authentication attempt failed."""

    INVALID_CREDENTIALS = "invalid_credentials"
    DIALECT_UNSUPPORTED = "dialect_unsupported"
    TRANSPORT_FAILURE = "transport_failure"
    RETRY_EXHAUSTED = "retry_exhausted"


_AUTH_FAILURE_CODES = {
    AuthFailure.INVALID_CREDENTIALS: ErrorCode.INVALID_CREDENTIALS,
    AuthFailure.DIALECT_UNSUPPORTED: ErrorCode.DIALECT_UNSUPPORTED,
    AuthFailure.TRANSPORT_FAILURE: ErrorCode.AUTH_TRANSPORT_FAILURE,
    AuthFailure.RETRY_EXHAUSTED: ErrorCode.AUTH_RETRY_EXHAUSTED,
}

# Server error codes that mean the session login or token is no longer valid
UNAUTHORIZED_SERVER_CODES = frozenset({
    "assertuserfailed",
    "assertbotfailed",
    "assertnameduserfailed",
    "badtoken",
    "notloggedin",
})


class WikiApiError(Exception):
    """
    Base class for all wiki API client errors.

    Provides structured error information: a code, free-form details and the
    underlying exception, if any.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a wiki API error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ConfigurationError(WikiApiError):
    """Invalid builder, session or client setup. Never requires I/O to detect."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.CONFIGURATION,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class MissingCapabilityTokenError(ConfigurationError):
    """A mutating request was stamped by a session that holds no capability token."""

    def __init__(self, message: str = "Mutating request requires a capability token; log in first",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.MISSING_CAPABILITY_TOKEN, details)


class AuthError(WikiApiError):
    """
    Credential or dialect failure during authentication.

    Attributes:
        reason: The AuthFailure kind
    """

    def __init__(self, message: str, reason: AuthFailure = AuthFailure.INVALID_CREDENTIALS,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, _AUTH_FAILURE_CODES[reason], details, cause)
        self.reason = reason


class TransportError(WikiApiError):
    """Network or server-level failure reported by a transport."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.TRANSPORT_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class UnauthorizedError(TransportError):
    """The server rejected the request because the login or token expired."""

    def __init__(self, message: str = "Unauthorized",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.UNAUTHORIZED, details, cause)


class NetworkError(TransportError):
    """Connection failures and timeouts."""

    def __init__(self, message: str,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)


class ServerError(TransportError):
    """
    The server answered with an error status or an error payload.

    Attributes:
        status: HTTP status code of the response
        server_code: Error code reported in the response body, if any
    """

    def __init__(self, message: str, status: int, server_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.SERVER_ERROR, details, cause)
        self.status = status
        self.server_code = server_code


class DecodeError(WikiApiError):
    """Malformed or unexpected response shape."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DECODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


def error_from_response(response: Dict[str, Any], status: int = 200) -> Optional[TransportError]:
    """
    Create an appropriate error from a decoded API response.

    The server reports failures as ``{"error": {"code": ..., "info": ...}}``.
    Codes meaning an expired login or token map to UnauthorizedError, all
    others to ServerError.

    Args:
        response: Decoded JSON response body
        status: HTTP status of the response

    Returns:
        Appropriate error instance or None if no error
    """
    if not isinstance(response, dict) or "error" not in response:
        return None

    error_data = response["error"]
    if not isinstance(error_data, dict):
        return ServerError(str(error_data), status)

    server_code = str(error_data.get("code", "unknown"))
    message = error_data.get("info") or error_data.get("*") or "Unknown error"
    details = {"server_code": server_code}

    if server_code in UNAUTHORIZED_SERVER_CODES:
        return UnauthorizedError(message, details)
    return ServerError(message, status, server_code, details)


__all__ = [
    "ErrorCode",
    "AuthFailure",
    "UNAUTHORIZED_SERVER_CODES",
    "WikiApiError",
    "ConfigurationError",
    "MissingCapabilityTokenError",
    "AuthError",
    "TransportError",
    "UnauthorizedError",
    "NetworkError",
    "ServerError",
    "DecodeError",
    "error_from_response",
]
