"""All-pages listing query."""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..models import ArticleRef
from ..request import RequestDescriptor
from .builder import QueryBuilder
from .decoder import ListQueryDecoder, PageDecoder


PREFIX = "ap"


class SortOrder(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class AllPagesOptions(BaseModel):
    """Frozen all-pages settings."""
    prefix: Optional[str] = Field(default=None, description="Only titles starting with this")
    namespace: int = Field(default=0, description="Namespace to list")
    from_title: Optional[str] = Field(default=None, description="Title to start listing at")
    limit: int = Field(default=-1, description="Results per page; < 1 means server maximum")
    direction: Optional[SortOrder] = None

    model_config = {"frozen": True}

    def to_params(self) -> Dict[str, Any]:
        return {
            "action": "query",
            "list": "allpages",
            "continue": "",
            "apprefix": self.prefix,
            "apnamespace": self.namespace,
            "apfrom": self.from_title,
            "aplimit": "max" if self.limit < 1 else self.limit,
            "apdir": self.direction,
        }


class AllPagesBuilder(QueryBuilder[ArticleRef, AllPagesOptions]):
    """Accumulates all-pages settings; validated in build()."""

    options_model = AllPagesOptions

    def with_prefix(self, prefix: str) -> AllPagesBuilder:
        return self._set("prefix", prefix)

    def in_namespace(self, namespace: int) -> AllPagesBuilder:
        return self._set("namespace", namespace)

    def starting_at(self, title: str) -> AllPagesBuilder:
        return self._set("from_title", title)

    def with_limit(self, limit: int) -> AllPagesBuilder:
        return self._set("limit", limit)

    def with_dir(self, direction: SortOrder) -> AllPagesBuilder:
        return self._set("direction", direction)

    def render(self, options: AllPagesOptions) -> RequestDescriptor:
        return self._descriptor(options.to_params())

    def decoder(self) -> PageDecoder[ArticleRef]:
        return ListQueryDecoder(ArticleRef, ("query", "allpages"))


__all__ = ["SortOrder", "AllPagesOptions", "AllPagesBuilder"]
