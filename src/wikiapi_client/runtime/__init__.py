"""Runtime helpers for the wiki API client"""

from .errors import (
    ErrorCode,
    AuthFailure,
    WikiApiError,
    ConfigurationError,
    MissingCapabilityTokenError,
    AuthError,
    TransportError,
    UnauthorizedError,
    NetworkError,
    ServerError,
    DecodeError,
    error_from_response,
)
from .codec import encode_param_value, format_timestamp, join_values, load_json

__all__ = [
    "ErrorCode",
    "AuthFailure",
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
    "encode_param_value",
    "format_timestamp",
    "join_values",
    "load_json",
]
