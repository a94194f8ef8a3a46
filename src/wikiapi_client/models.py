"""
Typed records returned by the wiki API.

Records are pydantic models validated from the JSON objects of a query
response. Unknown fields are ignored, so newer server releases that add
fields keep decoding.
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class _Record(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}


def _blank_to_none(value: Any) -> Any:
    if value == "" or value is False:
        return None
    return value


class WatchEntry(_Record):
    """One change to a page on a watchlist."""
    type: Optional[str] = None
    namespace: int = Field(default=0, alias="ns")
    title: Optional[str] = None
    page_id: Optional[int] = Field(default=None, alias="pageid")
    rev_id: Optional[int] = Field(default=None, alias="revid")
    old_rev_id: Optional[int] = Field(default=None, alias="old_revid")
    user: Optional[str] = None
    anon: bool = False
    bot: bool = False
    new: bool = False
    minor: bool = False
    patrolled: bool = False
    timestamp: Optional[datetime] = None
    notification_timestamp: Optional[datetime] = Field(default=None, alias="notificationtimestamp")
    comment: Optional[str] = None
    parsed_comment: Optional[str] = Field(default=None, alias="parsedcomment")
    old_length: Optional[int] = Field(default=None, alias="oldlen")
    new_length: Optional[int] = Field(default=None, alias="newlen")

    @field_validator("timestamp", "notification_timestamp", mode="before")
    @classmethod
    def blank_timestamp_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def size_change(self) -> Optional[int]:
        if self.old_length is None or self.new_length is None:
            return None
        return self.new_length - self.old_length


class Revision(_Record):
    """One revision of an article."""
    rev_id: Optional[int] = Field(default=None, alias="revid")
    parent_id: Optional[int] = Field(default=None, alias="parentid")
    user: Optional[str] = None
    timestamp: Optional[datetime] = None
    comment: Optional[str] = None
    size: Optional[int] = None
    minor: bool = False
    content: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def lift_content(cls, data: Any) -> Any:
        # Content lives in slots.main.content on current servers, and in
        # "content" or "*" on older ones.
        if not isinstance(data, dict) or "content" in data:
            return data
        data = dict(data)
        slots = data.get("slots")
        main = slots.get("main", {}) if isinstance(slots, dict) else {}
        if "content" in main:
            data["content"] = main["content"]
        elif "*" in main:
            data["content"] = main["*"]
        elif "*" in data:
            data["content"] = data["*"]
        return data


class ArticleRef(_Record):
    """Reference to an article, as returned by listing queries."""
    page_id: Optional[int] = Field(default=None, alias="pageid")
    namespace: int = Field(default=0, alias="ns")
    title: str


class SiteInfo(_Record):
    """General site information."""
    site_name: Optional[str] = Field(default=None, alias="sitename")
    main_page: Optional[str] = Field(default=None, alias="mainpage")
    base: Optional[str] = None
    generator: str
    case: Optional[str] = None
    lang: Optional[str] = None


class UserInfo(_Record):
    """Identity of the current session user."""
    user_id: int = Field(default=0, alias="id")
    name: str
    anon: bool = False

    @property
    def is_anonymous(self) -> bool:
        return self.anon or self.user_id == 0


def record_fields(record: BaseModel) -> Dict[str, Any]:
    """Return the populated fields of a record, keyed by wire name."""
    return record.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "WatchEntry",
    "Revision",
    "ArticleRef",
    "SiteInfo",
    "UserInfo",
    "record_fields",
]
