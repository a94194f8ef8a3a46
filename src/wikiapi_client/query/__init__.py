"""
Paginated queries.

The engine (PaginatedQuery, QueryCursor) is independent of any particular
API module; the builders in this package configure it for the watchlist,
revision history and all-pages listings.
"""

from .page import ContinuationToken, ResultPage
from .decoder import PageDecoder, ListQueryDecoder, read_continuation
from .engine import CursorState, PaginatedQuery, QueryCursor
from .builder import Direction, QueryBuilder, TimeRangeOptions
from .watchlist import EditType, WatchListBuilder, WatchListOptions, WatchListProperty
from .revisions import RevisionBuilder, RevisionDecoder, RevisionOptions, RevisionProperty
from .allpages import AllPagesBuilder, AllPagesOptions, SortOrder

__all__ = [
    "ContinuationToken",
    "ResultPage",
    "PageDecoder",
    "ListQueryDecoder",
    "read_continuation",
    "CursorState",
    "PaginatedQuery",
    "QueryCursor",
    "Direction",
    "QueryBuilder",
    "TimeRangeOptions",
    "EditType",
    "WatchListBuilder",
    "WatchListOptions",
    "WatchListProperty",
    "RevisionBuilder",
    "RevisionDecoder",
    "RevisionOptions",
    "RevisionProperty",
    "AllPagesBuilder",
    "AllPagesOptions",
    "SortOrder",
]
