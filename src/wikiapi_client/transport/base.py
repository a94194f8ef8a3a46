"""
Transport contract.

A transport executes a prepared RequestDescriptor and returns the raw
response. It owns connections, cookies, TLS and timeouts. Failures are
reported by raising TransportError subclasses:

- UnauthorizedError: the login or token expired (HTTP 401, or a server
  error code in UNAUTHORIZED_SERVER_CODES). Only this kind triggers the
  query engine's one-shot re-authentication.
- NetworkError: connection failures and timeouts.
- ServerError: any other error status or error payload.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Protocol, runtime_checkable

from ..request import RequestDescriptor
from ..runtime.codec import load_json
from ..runtime.errors import DecodeError, error_from_response


@dataclass(frozen=True)
class RawResponse:
    """Undecoded response of one exchange."""
    body: bytes
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@runtime_checkable
class Transport(Protocol):
    """Executes request descriptors."""

    def execute(self, descriptor: RequestDescriptor) -> RawResponse:
        """
        Execute one request.

        Args:
            descriptor: Fully stamped request

        Returns:
            The raw response

        Raises:
            TransportError: On network, server or authorization failure
        """
        ...


def raise_for_error_payload(raw: RawResponse) -> None:
    """
    Raise the TransportError carried by an error payload, if any.

    The API answers most failures with HTTP 200 and an ``error`` object, so
    transports inspect the body before handing it to a decoder.
    """
    try:
        payload = load_json(raw.body)
    except DecodeError:
        # not JSON: left for the page decoder to reject
        return
    error = error_from_response(payload, raw.status)
    if error is not None:
        raise error


__all__ = ["RawResponse", "Transport", "raise_for_error_payload"]
