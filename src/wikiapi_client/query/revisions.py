"""
Revision history query.

Lists the revisions of a single article, newest first unless the direction
is ``newer``.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import Field, field_validator

from ..models import Revision
from ..request import RequestDescriptor
from ..runtime.errors import DecodeError
from ..session import Session
from ..transport.base import Transport
from .builder import Direction, QueryBuilder, TimeRangeOptions, Timestamp
from .decoder import ListQueryDecoder, PageDecoder


PREFIX = "rv"


class RevisionProperty(str, Enum):
    """Properties that can be requested for each revision."""
    IDS = "ids"
    FLAGS = "flags"
    TIMESTAMP = "timestamp"
    USER = "user"
    COMMENT = "comment"
    SIZE = "size"
    CONTENT = "content"


class RevisionOptions(TimeRangeOptions):
    """Frozen revision query settings."""
    title: str = Field(..., description="Article whose history is listed")
    properties: FrozenSet[RevisionProperty] = Field(default=frozenset())
    user: Optional[str] = None
    exclude_user: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "action": "query",
            "prop": "revisions",
            "titles": self.title,
            "continue": "",
            "rvprop": self.properties or None,
        }
        params.update(self.range_params(PREFIX))
        if self.user is not None:
            params["rvuser"] = self.user
        elif self.exclude_user is not None:
            params["rvexcludeuser"] = self.exclude_user
        if RevisionProperty.CONTENT in self.properties:
            params["rvslots"] = "main"
        return params


class RevisionDecoder(ListQueryDecoder[Revision]):
    """Reads ``query.pages[0].revisions``; a missing page decodes as empty."""

    def __init__(self):
        super().__init__(Revision, ("query", "pages"))

    def select(self, data: Dict[str, Any]) -> List[Any]:
        pages = super().select(data)
        if not pages:
            return []
        page = pages[0]
        if not isinstance(page, dict):
            raise DecodeError("'query.pages' entry is not an object")
        if page.get("missing") or page.get("invalid"):
            return []
        revisions = page.get("revisions", [])
        if not isinstance(revisions, list):
            raise DecodeError("'revisions' is not a list")
        return revisions


class RevisionBuilder(QueryBuilder[Revision, RevisionOptions]):
    """Accumulates revision query settings; validated in build()."""

    options_model = RevisionOptions

    def __init__(self, session: Session, title: str, transport: Optional[Transport] = None):
        super().__init__(session, transport)
        self._set("title", title)

    def with_limit(self, limit: int) -> RevisionBuilder:
        return self._set("limit", limit)

    def with_properties(self, *properties: RevisionProperty) -> RevisionBuilder:
        return self._set("properties", frozenset(properties))

    def with_start(self, start: Timestamp) -> RevisionBuilder:
        return self._set("start", start)

    def with_end(self, end: Timestamp) -> RevisionBuilder:
        return self._set("end", end)

    def with_dir(self, direction: Direction) -> RevisionBuilder:
        return self._set("direction", direction)

    def only_user(self, user: str) -> RevisionBuilder:
        """Only revisions by this user. Takes precedence over exclude_user."""
        return self._set("user", user)

    def exclude_user(self, user: str) -> RevisionBuilder:
        return self._set("exclude_user", user)

    def render(self, options: RevisionOptions) -> RequestDescriptor:
        return self._descriptor(options.to_params())

    def decoder(self) -> PageDecoder[Revision]:
        return RevisionDecoder()


__all__ = [
    "RevisionProperty",
    "RevisionOptions",
    "RevisionDecoder",
    "RevisionBuilder",
]
