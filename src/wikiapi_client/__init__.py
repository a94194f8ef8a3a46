"""
Wiki API client

Client for the HTTP API of MediaWiki-based wikis: request descriptors,
authenticated sessions, and lazily paginated queries that follow the
server's continuation tokens.
"""

from .client import WikiClient, local_client, wikipedia_client
from .config import WELL_KNOWN_ENDPOINTS, ClientConfig
from .credentials import Credentials, OwnerTokenCredentials, PasswordCredentials
from .dialect import ApiDialect, parse_dialect
from .models import ArticleRef, Revision, SiteInfo, UserInfo, WatchEntry
from .request import HttpMethod, RequestDescriptor
from .session import Session
from .runtime.errors import (
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
)
from .transport import HttpTransport, RawResponse, ScriptedTransport, Transport
from .query import (
    AllPagesBuilder,
    ContinuationToken,
    CursorState,
    Direction,
    EditType,
    PaginatedQuery,
    QueryCursor,
    ResultPage,
    RevisionBuilder,
    RevisionProperty,
    SortOrder,
    WatchListBuilder,
    WatchListProperty,
)

__version__ = "1.0.0"
__all__ = [
    # Client
    "WikiClient",
    "wikipedia_client",
    "local_client",
    "ClientConfig",
    "WELL_KNOWN_ENDPOINTS",

    # Requests and sessions
    "HttpMethod",
    "RequestDescriptor",
    "Session",
    "Credentials",
    "PasswordCredentials",
    "OwnerTokenCredentials",
    "ApiDialect",
    "parse_dialect",

    # Transports
    "Transport",
    "RawResponse",
    "HttpTransport",
    "ScriptedTransport",

    # Queries
    "PaginatedQuery",
    "QueryCursor",
    "CursorState",
    "ResultPage",
    "ContinuationToken",
    "Direction",
    "WatchListBuilder",
    "WatchListProperty",
    "EditType",
    "RevisionBuilder",
    "RevisionProperty",
    "AllPagesBuilder",
    "SortOrder",

    # Records
    "WatchEntry",
    "Revision",
    "ArticleRef",
    "SiteInfo",
    "UserInfo",

    # Errors
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
]
