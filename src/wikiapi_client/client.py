"""
Wiki API client facade.

WikiClient is the primary entry point: it owns the transport and the
session and hands out query builders bound to both.

Example:
    ```python
    from wikiapi_client import WikiClient, WatchListProperty

    with WikiClient("https://en.wikipedia.org/w") as wiki:
        wiki.login("ExampleBot", "bot-password")
        query = wiki.watchlist().with_properties(WatchListProperty.TITLE).build()
        for entry in query.take(20):
            print(entry.title)
    ```
"""

from __future__ import annotations
import logging
from typing import Optional, Union

from .config import WELL_KNOWN_ENDPOINTS, ClientConfig
from .credentials import PasswordCredentials
from .models import SiteInfo
from .query.allpages import AllPagesBuilder
from .query.revisions import RevisionBuilder
from .query.watchlist import WatchListBuilder
from .session import Session
from .transport.base import Transport
from .transport.http import HttpTransport


logger = logging.getLogger(__name__)

DEFAULT_LOCAL_PORT = 8080


class WikiClient:
    """
    Client for one wiki.

    The client starts anonymous. ``login`` and ``delegate`` change the
    session used by every builder created afterwards; queries built
    earlier keep the session they were built with.
    """

    def __init__(self, config: Union[ClientConfig, str], transport: Optional[Transport] = None):
        """
        Initialize the client.

        Args:
            config: Client configuration, or an endpoint URL or well-known
                wiki name
            transport: Transport to use; an HttpTransport for the configured
                endpoint if None
        """
        if isinstance(config, str):
            config = ClientConfig(endpoint=config)
        self.config = config

        if config.debug:
            logging.getLogger(__package__).setLevel(logging.DEBUG)

        self._owns_transport = transport is None
        self._transport = transport or HttpTransport(
            config.base_url,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
            user_agent=config.user_agent,
        )
        self._session = Session.from_config(self._transport, config)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def endpoint(self) -> str:
        return self.config.api_url

    def close(self) -> None:
        """
        Close the transport.

        Only closes a transport created by this client.
        """
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> WikiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"WikiClient({self.config.api_url}, {self._session!r})"

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self, username: str, password: str) -> WikiClient:
        """
        Log in with a user name and (bot) password.

        Raises:
            ConfigurationError: If either value is empty
            AuthError: If the server rejects the login
        """
        self._session.authenticate(PasswordCredentials(username, password))
        return self

    def delegate(self, owner: str, token: str) -> WikiClient:
        """Read the protected resources of ``owner`` with their token. No I/O."""
        self._session = self._session.delegate(owner, token)
        logger.debug("Delegated to owner %s", owner)
        return self

    def logout(self) -> None:
        """Forget the login and any delegation. The server is not contacted."""
        self._session.clear()

    def site_info(self) -> SiteInfo:
        return self._session.site_info()

    # =========================================================================
    # Queries
    # =========================================================================

    def watchlist(self) -> WatchListBuilder:
        return WatchListBuilder(self._session, self._transport)

    def revisions(self, title: str) -> RevisionBuilder:
        return RevisionBuilder(self._session, title, self._transport)

    def all_pages(self) -> AllPagesBuilder:
        return AllPagesBuilder(self._session, self._transport)


def wikipedia_client(lang: str = "en", **kwargs) -> WikiClient:
    """Create a client for a language edition of Wikipedia."""
    if lang == "en":
        return WikiClient(ClientConfig(endpoint=WELL_KNOWN_ENDPOINTS["wikipedia"], **kwargs))
    return WikiClient(ClientConfig(endpoint=f"https://{lang}.wikipedia.org/w", **kwargs))


def local_client(port: int = DEFAULT_LOCAL_PORT, **kwargs) -> WikiClient:
    """Create a client for a wiki running on this machine."""
    return WikiClient(ClientConfig(endpoint=f"http://127.0.0.1:{port}/w", **kwargs))


__all__ = ["WikiClient", "wikipedia_client", "local_client"]
