"""
Watchlist query.

Lists recent changes to the pages on a user's watchlist. The session must be
logged in, delegated to an owner, or the builder must be given the owner's
name and watchlist token.

Example:
    ```python
    query = (
        WatchListBuilder(session)
        .with_properties(WatchListProperty.TITLE, WatchListProperty.USER)
        .with_start(datetime(2024, 1, 1))
        .with_dir(Direction.NEWER)
        .build()
    )
    for entry in query:
        print(entry.timestamp, entry.title, entry.user)
    ```
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from pydantic import Field, model_validator

from ..models import WatchEntry
from ..request import RequestDescriptor
from ..runtime.errors import ConfigurationError
from .builder import Direction, QueryBuilder, TimeRangeOptions, Timestamp
from .decoder import ListQueryDecoder, PageDecoder


PREFIX = "wl"


class WatchListProperty(str, Enum):
    """Properties that can be requested for each watchlist entry."""
    USER = "user"
    TITLE = "title"
    COMMENT = "comment"
    PARSED_COMMENT = "parsedcomment"
    TIMESTAMP = "timestamp"
    NOTIFICATION_TIMESTAMP = "notificationtimestamp"
    IDS = "ids"
    SIZES = "sizes"
    PATROL = "patrol"
    FLAGS = "flags"


class EditType(str, Enum):
    """Kinds of changes."""
    EDIT = "edit"
    EXTERNAL = "external"
    NEW = "new"
    LOG = "log"


class WatchListOptions(TimeRangeOptions):
    """Frozen watchlist settings."""
    namespaces: Optional[Tuple[int, ...]] = Field(default=None, description="Namespaces; None means all")
    properties: FrozenSet[WatchListProperty] = Field(default=frozenset())
    only_user: Optional[str] = None
    exclude_user: Optional[str] = None
    owner: Optional[str] = None
    token: Optional[str] = None
    edit_types: FrozenSet[EditType] = Field(default=frozenset())
    show_bots: Optional[bool] = None
    show_anonymous: Optional[bool] = None
    show_minor: Optional[bool] = None

    @model_validator(mode="after")
    def check_owner_pair(self) -> WatchListOptions:
        if bool(self.owner) != bool(self.token):
            raise ValueError("owner and token must be given together")
        return self

    def show_flags(self) -> FrozenSet[str]:
        """``wlshow`` values: ``bot`` keeps only bot edits, ``!bot`` drops them."""
        flags = set()
        for name, value in (("bot", self.show_bots), ("anon", self.show_anonymous), ("minor", self.show_minor)):
            if value is True:
                flags.add(name)
            elif value is False:
                flags.add(f"!{name}")
        return frozenset(flags)

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "action": "query",
            "list": "watchlist",
            "continue": "",
            "wlnamespace": self.namespaces or "*",
            "wlprop": self.properties or None,
            "wltype": self.edit_types or None,
            "wlshow": self.show_flags() or None,
        }
        params.update(self.range_params(PREFIX))
        if self.only_user is not None:
            params["wluser"] = self.only_user
        elif self.exclude_user is not None:
            params["wlexcludeuser"] = self.exclude_user
        if self.owner is not None:
            params["wlowner"] = self.owner
            params["wltoken"] = self.token
        return params


class WatchListBuilder(QueryBuilder[WatchEntry, WatchListOptions]):
    """Accumulates watchlist settings; validated in build()."""

    options_model = WatchListOptions

    def with_limit(self, limit: int) -> WatchListBuilder:
        """Results per request. A value below 1 asks for the server maximum."""
        return self._set("limit", limit)

    def with_namespaces(self, *namespaces: int) -> WatchListBuilder:
        """Only list pages in these namespaces; none at all means every namespace."""
        return self._set("namespaces", tuple(sorted(set(namespaces))))

    def with_properties(self, *properties: WatchListProperty) -> WatchListBuilder:
        """Which properties to get. None given means the server default."""
        return self._set("properties", frozenset(properties))

    def show_bots(self, show: bool) -> WatchListBuilder:
        return self._set("show_bots", show)

    def show_anonymous(self, show: bool) -> WatchListBuilder:
        return self._set("show_anonymous", show)

    def show_minor(self, show: bool) -> WatchListBuilder:
        return self._set("show_minor", show)

    def only_types(self, *types: EditType) -> WatchListBuilder:
        return self._set("edit_types", frozenset(types))

    def only_user(self, user: str) -> WatchListBuilder:
        """Only list changes by this user. Takes precedence over exclude_user."""
        return self._set("only_user", user)

    def exclude_user(self, user: str) -> WatchListBuilder:
        return self._set("exclude_user", user)

    def owner(self, owner_user: Optional[str], token: Optional[str]) -> WatchListBuilder:
        """Read the watchlist of ``owner_user`` using their watchlist token."""
        self._set("owner", owner_user)
        return self._set("token", token)

    def with_start(self, start: Timestamp) -> WatchListBuilder:
        return self._set("start", start)

    def with_end(self, end: Timestamp) -> WatchListBuilder:
        return self._set("end", end)

    def with_dir(self, direction: Direction) -> WatchListBuilder:
        return self._set("direction", direction)

    def validate(self, options: WatchListOptions) -> None:
        session = self.session
        if not session.is_logged_in and not session.is_delegated and options.owner is None:
            raise ConfigurationError("Please log in first or set owner and token")

    def render(self, options: WatchListOptions) -> RequestDescriptor:
        return self._descriptor(options.to_params(), owner_prefix=PREFIX)

    def decoder(self) -> PageDecoder[WatchEntry]:
        return ListQueryDecoder(WatchEntry, ("query", "watchlist"))


__all__ = [
    "WatchListProperty",
    "EditType",
    "WatchListOptions",
    "WatchListBuilder",
]
