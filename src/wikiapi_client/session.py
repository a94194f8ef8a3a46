"""
Authenticated session state.

A Session holds everything a request needs from the login: the user
identity, the capability (CSRF) token required for mutating requests, the
API dialect of the wiki and an optional delegated owner. ``stamp`` attaches
that state to a RequestDescriptor without any I/O; ``authenticate`` is the
only operation that talks to the server.

Sessions may be shared by several queries. ``stamp`` only reads state, while
``authenticate`` replaces it under a lock, so re-authentication is a point of
mutual exclusion for every holder of the session.
"""

from __future__ import annotations
import copy
import logging
import threading
from typing import Any, Dict, Optional, Tuple

from .config import ClientConfig
from .credentials import Credentials, OwnerTokenCredentials, PasswordCredentials
from .dialect import ApiDialect, parse_dialect
from .models import SiteInfo, UserInfo
from .request import DEFAULT_API_PATH, HttpMethod, RequestDescriptor
from .runtime.codec import load_json
from .runtime.errors import (
    AuthError,
    AuthFailure,
    ConfigurationError,
    DecodeError,
    MissingCapabilityTokenError,
    TransportError,
)
from .transport.base import Transport


logger = logging.getLogger(__name__)

# Token the server hands out to sessions it does not recognize as logged in
ANONYMOUS_TOKEN = "+\\"


class Session:
    """
    Authentication state shared by the requests of one wiki user.

    Example:
        ```python
        session = Session.login(transport, PasswordCredentials("Bot", "secret"))
        stamped = session.stamp(RequestDescriptor.write({"action": "edit", "title": "Sandbox"}))
        ```
    """

    def __init__(
        self,
        transport: Transport,
        api_path: str = DEFAULT_API_PATH,
        max_lag: Optional[int] = None,
        assert_user: bool = True,
        dialect: Optional[ApiDialect] = None,
    ):
        """
        Create an anonymous session.

        Args:
            transport: Transport used by authenticate
            api_path: Path of the API entry point
            max_lag: Optional ``maxlag`` value stamped on every request
            assert_user: Stamp ``assert=user`` while logged in
            dialect: Known API dialect; detected on authenticate otherwise
        """
        self._transport = transport
        self._api_path = api_path
        self._max_lag = max_lag
        self._assert_user = assert_user
        self._dialect = dialect
        self._identity: Optional[UserInfo] = None
        self._capability_token: Optional[str] = None
        self._owner: Optional[Tuple[str, str]] = None
        self._credentials: Optional[Credentials] = None
        self._authentication_count = 0
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, transport: Transport, config: ClientConfig) -> Session:
        return cls(
            transport,
            api_path=config.api_path,
            max_lag=config.max_lag,
            assert_user=config.assert_user,
        )

    @classmethod
    def anonymous(cls, transport: Transport, **settings: Any) -> Session:
        return cls(transport, **settings)

    @classmethod
    def login(cls, transport: Transport, credentials: Credentials, **settings: Any) -> Session:
        """Create a session and authenticate it."""
        return cls(transport, **settings).authenticate(credentials)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def api_path(self) -> str:
        return self._api_path

    @property
    def identity(self) -> Optional[UserInfo]:
        return self._identity

    @property
    def username(self) -> Optional[str]:
        """Logged-in user name, or None for an anonymous session."""
        return self._identity.name if self._identity else None

    @property
    def is_logged_in(self) -> bool:
        return self._identity is not None and not self._identity.is_anonymous

    @property
    def capability_token(self) -> Optional[str]:
        return self._capability_token

    @property
    def dialect(self) -> Optional[ApiDialect]:
        return self._dialect

    @property
    def owner(self) -> Optional[str]:
        return self._owner[0] if self._owner else None

    @property
    def is_delegated(self) -> bool:
        return self._owner is not None

    @property
    def credentials(self) -> Optional[Credentials]:
        return self._credentials

    @property
    def authentication_count(self) -> int:
        """Number of successful authenticate calls on this session."""
        return self._authentication_count

    def __repr__(self) -> str:
        who = self.username or "anonymous"
        parts = [who]
        if self._owner:
            parts.append(f"owner={self._owner[0]}")
        if self._dialect:
            parts.append(str(self._dialect))
        return f"Session({', '.join(parts)})"

    # ------------------------------------------------------------------
    # Stamping
    # ------------------------------------------------------------------

    def stamp(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        """
        Attach session-scoped parameters to a descriptor.

        Adds the response format flags, ``maxlag`` when configured,
        ``assert=user`` while logged in, the delegated owner pair for queries
        that declare an owner prefix, and the capability token for mutating
        requests. Does not contact the server.

        Raises:
            MissingCapabilityTokenError: If the descriptor is mutating and the
                session holds no capability token
        """
        with self._lock:
            stamped = descriptor.with_param("format", "json")
            if self._dialect is None or self._dialect.supports_formatversion2:
                stamped = stamped.with_param("formatversion", 2)
            if self._max_lag is not None:
                stamped = stamped.with_param("maxlag", self._max_lag)
            if self._assert_user and self.is_logged_in and not stamped.has_param("assert"):
                stamped = stamped.with_param("assert", "user")

            prefix = descriptor.owner_prefix
            if self._owner and prefix and not stamped.has_param(f"{prefix}owner"):
                owner, token = self._owner
                stamped = stamped.with_params({f"{prefix}owner": owner, f"{prefix}token": token})

            if descriptor.mutating:
                if not self._capability_token or self._capability_token == ANONYMOUS_TOKEN:
                    raise MissingCapabilityTokenError(details={"request": descriptor.redacted()})
                stamped = stamped.with_param("token", self._capability_token)
            return stamped

    # ------------------------------------------------------------------
    # Delegation
    # ------------------------------------------------------------------

    def delegate(self, owner_user: Optional[str], owner_token: Optional[str]) -> Session:
        """
        Derive a session that reads the owner's protected resources.

        The derived session keeps this session's login, if any, and shares its
        transport. This session is left unchanged.

        Raises:
            ConfigurationError: Unless both owner_user and owner_token are given
        """
        if not owner_user or not owner_token:
            raise ConfigurationError("Owner and token must be supplied together")
        with self._lock:
            derived = copy.copy(self)
        derived._lock = threading.RLock()
        derived._owner = (owner_user, owner_token)
        return derived

    def clear(self) -> None:
        """Forget the login, token, owner and credentials. No I/O."""
        with self._lock:
            self._identity = None
            self._capability_token = None
            self._owner = None
            self._credentials = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, credentials: Optional[Credentials] = None) -> Session:
        """
        Exchange credentials for an identity and a capability token.

        Password credentials log in and fetch a CSRF token. Owner/token
        credentials only detect the dialect and delegate the session to that
        owner. The credentials are remembered for reauthenticate().

        Args:
            credentials: Credentials to use; the previously supplied ones if None

        Returns:
            This session

        Raises:
            ConfigurationError: If no credentials are given or remembered
            AuthError: TRANSPORT_FAILURE with the transport error as cause;
                DIALECT_UNSUPPORTED when the server release is too old or
                cannot be read; INVALID_CREDENTIALS when the login is refused
                or its answers cannot be decoded (the DecodeError is the cause).
                The session state is left unchanged on failure.
        """
        credentials = credentials or self._credentials
        if credentials is None:
            raise ConfigurationError("No credentials to authenticate with")

        with self._lock:
            try:
                try:
                    dialect = self._detect_dialect()
                except DecodeError as e:
                    raise AuthError(
                        f"Cannot determine the server release: {e.message}",
                        AuthFailure.DIALECT_UNSUPPORTED,
                        cause=e,
                    )
                if isinstance(credentials, PasswordCredentials):
                    identity, token = self._password_login(credentials)
                    owner = self._owner
                elif isinstance(credentials, OwnerTokenCredentials):
                    identity, token = None, None
                    owner = (credentials.owner, credentials.token)
                else:
                    raise ConfigurationError(f"Unsupported credentials: {type(credentials).__name__}")
            except TransportError as e:
                raise AuthError(
                    f"Authentication failed: {e.message}",
                    AuthFailure.TRANSPORT_FAILURE,
                    cause=e,
                )
            except DecodeError as e:
                raise AuthError(
                    f"Unexpected login response: {e.message}",
                    AuthFailure.INVALID_CREDENTIALS,
                    cause=e,
                )

            self._dialect = dialect
            self._identity = identity
            self._capability_token = token
            self._owner = owner
            self._credentials = credentials
            self._authentication_count += 1

        if identity is not None:
            logger.info("Logged in as %s (%s)", identity.name, dialect)
        else:
            logger.info("Delegated to owner %s (%s)", owner[0], dialect)
        return self

    def reauthenticate(self) -> Session:
        """Authenticate again with the remembered credentials."""
        if self._credentials is None:
            raise ConfigurationError("Session was never authenticated; nothing to refresh")
        return self.authenticate(self._credentials)

    def site_info(self) -> SiteInfo:
        """Fetch general site information."""
        data = self._exchange({"action": "query", "meta": "siteinfo", "siprop": "general"})
        general = _dig(data, "query", "general")
        try:
            return SiteInfo.model_validate(general)
        except ValueError as e:
            raise DecodeError(f"Malformed site information: {e}", cause=e)

    def _detect_dialect(self) -> ApiDialect:
        dialect = parse_dialect(self.site_info().generator)
        if not dialect.is_supported:
            logger.warning("Unsupported server release %s", dialect)
            raise AuthError(
                f"{dialect} is not supported",
                AuthFailure.DIALECT_UNSUPPORTED,
                {"dialect": dialect.label},
            )
        return dialect

    def _password_login(self, credentials: PasswordCredentials) -> Tuple[UserInfo, str]:
        login_token = self._fetch_token("login")
        data = self._exchange(
            {
                "action": "login",
                "lgname": credentials.username,
                "lgpassword": credentials.password,
                "lgtoken": login_token,
            },
            method=HttpMethod.POST,
        )
        result = _dig(data, "login")
        if result.get("result") != "Success":
            raise AuthError(
                f"Login as {credentials.username} failed: {result.get('reason') or result.get('result')}",
                AuthFailure.INVALID_CREDENTIALS,
                {"result": result.get("result")},
            )

        token = self._fetch_token("csrf")
        if token == ANONYMOUS_TOKEN:
            raise AuthError(
                "Server did not keep the login; check cookie handling",
                AuthFailure.INVALID_CREDENTIALS,
            )
        identity = self._fetch_userinfo()
        return identity, token

    def _fetch_token(self, kind: str) -> str:
        data = self._exchange({"action": "query", "meta": "tokens", "type": kind})
        tokens = _dig(data, "query", "tokens")
        token = tokens.get(f"{kind}token")
        if not isinstance(token, str):
            raise DecodeError(f"Response carries no {kind} token")
        return token

    def _fetch_userinfo(self) -> UserInfo:
        data = self._exchange({"action": "query", "meta": "userinfo"})
        try:
            return UserInfo.model_validate(_dig(data, "query", "userinfo"))
        except ValueError as e:
            raise DecodeError(f"Malformed user information: {e}", cause=e)

    def _exchange(self, params: Dict[str, Any], method: HttpMethod = HttpMethod.GET) -> Dict[str, Any]:
        # Authentication traffic carries only the format flags; it must not
        # assert a login that may have expired.
        descriptor = RequestDescriptor.of(params, method=method, path=self._api_path)
        descriptor = descriptor.with_params({"format": "json", "formatversion": 2})
        raw = self._transport.execute(descriptor)
        return load_json(raw.body)


def _dig(data: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    node: Any = data
    for key in keys:
        if not isinstance(node, dict) or not isinstance(node.get(key), dict):
            raise DecodeError(f"Response has no '{'.'.join(keys)}' object")
        node = node[key]
    return node


__all__ = ["ANONYMOUS_TOKEN", "Session"]
