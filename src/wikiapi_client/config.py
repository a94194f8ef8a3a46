"""
Client configuration.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .request import DEFAULT_API_PATH
from .runtime.errors import ConfigurationError
from .transport.http import DEFAULT_USER_AGENT


# Well-known wikis, resolvable by name
WELL_KNOWN_ENDPOINTS = {
    "wikipedia": "https://en.wikipedia.org/w",
    "commons": "https://commons.wikimedia.org/w",
    "wikidata": "https://www.wikidata.org/w",
    "local": "http://127.0.0.1:8080/w",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ClientConfig:
    """
    Configuration for the wiki API client.

    Attributes:
        endpoint: Wiki base URL or a well-known name (see WELL_KNOWN_ENDPOINTS)
        api_path: Path of the API entry point below the base URL
        timeout: Request timeout in seconds
        verify_ssl: Verify TLS certificates
        user_agent: User-Agent header
        debug: Enable debug logging for the client
        max_lag: Stamp ``maxlag`` on every request so busy replicas refuse it
        assert_user: Stamp ``assert=user`` on requests of a logged-in session,
            so that an expired login is reported instead of silently served
            anonymously
    """

    endpoint: str
    api_path: str = DEFAULT_API_PATH
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    debug: bool = False
    max_lag: Optional[int] = None
    assert_user: bool = True

    def __post_init__(self) -> None:
        if not self.endpoint:
            raise ConfigurationError("Endpoint must not be empty")
        if not self.api_path.startswith("/"):
            raise ConfigurationError(f"API path must start with '/': {self.api_path!r}")
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive: {self.timeout}")
        if self.max_lag is not None and self.max_lag < 0:
            raise ConfigurationError(f"max_lag must not be negative: {self.max_lag}")

    @property
    def base_url(self) -> str:
        """Endpoint with well-known names resolved."""
        return WELL_KNOWN_ENDPOINTS.get(self.endpoint.lower(), self.endpoint).rstrip("/")

    @property
    def api_url(self) -> str:
        return f"{self.base_url}{self.api_path}"

    @classmethod
    def from_env(cls, prefix: str = "WIKIAPI_", environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
        """
        Build a configuration from environment variables.

        Reads ``<prefix>ENDPOINT`` (required), ``<prefix>API_PATH``,
        ``<prefix>TIMEOUT``, ``<prefix>VERIFY_SSL``, ``<prefix>DEBUG`` and
        ``<prefix>MAX_LAG``.

        Raises:
            ConfigurationError: If the endpoint is missing or a value is malformed
        """
        env = os.environ if environ is None else environ
        endpoint = env.get(f"{prefix}ENDPOINT")
        if not endpoint:
            raise ConfigurationError(f"{prefix}ENDPOINT is not set")

        config = cls(endpoint=endpoint)
        if f"{prefix}API_PATH" in env:
            config.api_path = env[f"{prefix}API_PATH"]
        if f"{prefix}TIMEOUT" in env:
            config.timeout = _parse_number(env, f"{prefix}TIMEOUT", float)
        if f"{prefix}MAX_LAG" in env:
            config.max_lag = _parse_number(env, f"{prefix}MAX_LAG", int)
        if f"{prefix}VERIFY_SSL" in env:
            config.verify_ssl = _parse_bool(env, f"{prefix}VERIFY_SSL")
        if f"{prefix}DEBUG" in env:
            config.debug = _parse_bool(env, f"{prefix}DEBUG")
        config.__post_init__()
        return config


def _parse_number(env: Mapping[str, str], key: str, kind: type):
    try:
        return kind(env[key])
    except ValueError as e:
        raise ConfigurationError(f"{key} is not a valid {kind.__name__}: {env[key]!r}", cause=e)


def _parse_bool(env: Mapping[str, str], key: str) -> bool:
    value = env[key].strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{key} is not a boolean: {env[key]!r}")


__all__ = ["WELL_KNOWN_ENDPOINTS", "ClientConfig"]
