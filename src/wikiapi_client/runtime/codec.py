"""
Parameter encoding and response body loading.

Every request parameter travels as a string. This module turns the Python
values accepted by RequestDescriptor into their canonical wire form so that
two descriptors holding equal values always serialize identically.
"""

from __future__ import annotations
import json
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Union

from .errors import ConfigurationError, DecodeError, ErrorCode


MULTI_VALUE_SEPARATOR = "|"
# Alternative separator used when a value itself contains "|"
UNIT_SEPARATOR = "\x1f"

ParamValue = Union[str, int, bool, datetime, date, Enum, Iterable[Any]]


def format_timestamp(value: Union[datetime, date]) -> str:
    """
    Format a timestamp in the server's ISO 8601 form (``2024-01-01T00:00:00Z``).

    Naive datetimes are taken to be UTC. Plain dates mean midnight UTC.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def encode_scalar(value: Any) -> str:
    """
    Encode a single parameter value.

    Args:
        value: String, integer, boolean, date/datetime or Enum member

    Returns:
        Wire representation

    Raises:
        ConfigurationError: If the value type is not supported
    """
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        # presence flags; the descriptor drops false ones before encoding
        return "1"
    if isinstance(value, (datetime, date)):
        return format_timestamp(value)
    if isinstance(value, (str, int)):
        return str(value)
    raise ConfigurationError(
        f"Unsupported parameter value type: {type(value).__name__}",
        ErrorCode.INVALID_PARAMETER,
    )


def join_values(values: Iterable[Any]) -> str:
    """
    Join a repeated-value parameter.

    Unordered collections (set, frozenset) are sorted after encoding so the
    result is stable. Ordered sequences keep their order.
    """
    encoded = [encode_scalar(v) for v in values]
    if isinstance(values, (set, frozenset)):
        encoded.sort()
    if any(MULTI_VALUE_SEPARATOR in item for item in encoded):
        return UNIT_SEPARATOR + UNIT_SEPARATOR.join(encoded)
    return MULTI_VALUE_SEPARATOR.join(encoded)


def encode_param_value(value: ParamValue) -> str:
    """Encode any supported parameter value, scalar or repeated."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return encode_scalar(value)
    return join_values(value)


def load_json(body: Union[bytes, str]) -> Dict[str, Any]:
    """
    Decode a JSON response body into a dictionary.

    Raises:
        DecodeError: If the body is not JSON or not a JSON object
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Response body is not valid UTF-8", ErrorCode.INVALID_JSON, cause=e)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON response: {e.msg}", ErrorCode.INVALID_JSON, cause=e)
    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(data).__name__}",
            ErrorCode.INVALID_JSON,
        )
    return data


__all__ = [
    "MULTI_VALUE_SEPARATOR",
    "UNIT_SEPARATOR",
    "ParamValue",
    "format_timestamp",
    "encode_scalar",
    "join_values",
    "encode_param_value",
    "load_json",
]
