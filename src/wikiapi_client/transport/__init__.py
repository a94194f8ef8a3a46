"""
Transport layer for the wiki API client.

Provides the transport contract, an HTTP implementation and a scripted
in-memory implementation.
"""

from .base import RawResponse, Transport, raise_for_error_payload
from .http import DEFAULT_USER_AGENT, HttpTransport
from .scripted import ScriptedTransport

__all__ = [
    "RawResponse",
    "Transport",
    "raise_for_error_payload",
    "DEFAULT_USER_AGENT",
    "HttpTransport",
    "ScriptedTransport",
]
