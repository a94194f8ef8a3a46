"""
HTTP transport backed by requests.

Read requests are sent as GET with a query string, everything dispatched as
POST sends its parameters as a form body. The requests.Session keeps the
login cookies between calls.
"""

from __future__ import annotations
import logging
from typing import Optional

import requests

from ..request import HttpMethod, RequestDescriptor
from ..runtime.errors import NetworkError, ServerError, UnauthorizedError
from .base import RawResponse, raise_for_error_payload


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "wikiapi-client/1.0.0 (python-requests)"


class HttpTransport:
    """
    Transport that talks to a wiki over HTTP(S).

    Example:
        ```python
        with HttpTransport("https://en.wikipedia.org/w") as transport:
            raw = transport.execute(RequestDescriptor.of({"action": "query"}))
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the transport.

        Args:
            base_url: Wiki base URL; descriptor paths are appended to it
            timeout: Request timeout in seconds
            verify_ssl: Verify TLS certificates
            user_agent: User-Agent header sent with every request
            session: Optional requests.Session for connection pooling
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._user_agent = user_agent
        self._session = session or requests.Session()
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def close(self) -> None:
        """Close the HTTP session if owned by this transport."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def url_for(self, descriptor: RequestDescriptor) -> str:
        return f"{self._base_url}{descriptor.path}"

    def execute(self, descriptor: RequestDescriptor) -> RawResponse:
        """
        Send the request and classify failures.

        Raises:
            NetworkError: Connection failure or timeout
            UnauthorizedError: HTTP 401 or an expired-login error payload
            ServerError: Any other error status or error payload
        """
        url = self.url_for(descriptor)
        headers = {"User-Agent": self._user_agent, "Accept": "application/json"}
        logger.debug("%s", descriptor.redacted())

        try:
            if descriptor.method is HttpMethod.POST:
                response = self._session.post(
                    url,
                    data=descriptor.to_dict(),
                    headers=headers,
                    timeout=self._timeout,
                    verify=self._verify_ssl,
                )
            else:
                response = self._session.get(
                    url,
                    params=descriptor.to_dict(),
                    headers=headers,
                    timeout=self._timeout,
                    verify=self._verify_ssl,
                )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise NetworkError(f"Network error: {e}", cause=e)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"HTTP request failed: {e}", cause=e)

        if response.status_code == 401:
            raise UnauthorizedError(f"HTTP 401: {response.reason}", {"status": 401})
        if not 200 <= response.status_code < 300:
            raise ServerError(
                f"HTTP {response.status_code}: {response.reason}",
                status=response.status_code,
            )

        raw = RawResponse(
            body=response.content,
            status=response.status_code,
            headers=dict(response.headers),
        )
        raise_for_error_payload(raw)
        return raw


__all__ = ["DEFAULT_USER_AGENT", "HttpTransport"]
