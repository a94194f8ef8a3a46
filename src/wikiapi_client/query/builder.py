"""
Query builders.

A builder accumulates filter settings in mutable state and validates them
all at once in ``build()``, which freezes them into a pydantic options
model, renders the request template and binds it to a session, a transport
and a decoder. Builders never perform I/O.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..request import RequestDescriptor
from ..runtime.errors import ConfigurationError
from ..session import Session
from ..transport.base import Transport
from .decoder import PageDecoder
from .engine import PaginatedQuery


T = TypeVar("T")
O = TypeVar("O", bound=BaseModel)

Timestamp = Union[datetime, date]


class Direction(str, Enum):
    """Listing direction for time-ordered queries."""
    OLDER = "older"
    NEWER = "newer"


def _as_utc(value: Timestamp) -> datetime:
    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TimeRangeOptions(BaseModel):
    """
    Options shared by time-ordered queries.

    ``limit`` is the page-size hint; values below 1 request the server
    maximum. The end of the range must not precede its start.
    """
    limit: int = Field(default=-1, description="Results per page; < 1 means server maximum")
    start: Optional[Timestamp] = Field(default=None, description="Timestamp to start listing from")
    end: Optional[Timestamp] = Field(default=None, description="Timestamp to stop listing at")
    direction: Optional[Direction] = Field(default=None, description="Listing direction")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_range(self) -> TimeRangeOptions:
        if self.start is not None and self.end is not None and _as_utc(self.end) < _as_utc(self.start):
            raise ValueError("end of range must not precede its start")
        return self

    def range_params(self, prefix: str) -> Dict[str, Any]:
        """Render limit, start, end and direction with a module prefix."""
        return {
            f"{prefix}limit": "max" if self.limit < 1 else self.limit,
            f"{prefix}start": self.start,
            f"{prefix}end": self.end,
            f"{prefix}dir": self.direction,
        }


class QueryBuilder(ABC, Generic[T, O]):
    """
    Base class for query builders.

    Subclasses declare ``options_model`` and implement ``render`` and
    ``decoder``. Setter methods store raw values in ``self._values`` and
    return the builder for chaining.
    """

    options_model: Type[O]

    def __init__(self, session: Session, transport: Optional[Transport] = None):
        self._session = session
        self._transport = transport or session.transport
        self._values: Dict[str, Any] = {}

    @property
    def session(self) -> Session:
        return self._session

    def _descriptor(self, params: Dict[str, Any], owner_prefix: Optional[str] = None) -> RequestDescriptor:
        """Read descriptor for the session's API entry point."""
        return RequestDescriptor.of(params, path=self._session.api_path, owner_prefix=owner_prefix)

    def _set(self, name: str, value: Any) -> QueryBuilder[T, O]:
        self._values[name] = value
        return self

    def options(self) -> O:
        """
        Freeze the accumulated settings into a validated options model.

        Raises:
            ConfigurationError: If the settings are invalid
        """
        try:
            return self.options_model(**self._values)
        except ValidationError as e:
            messages = "; ".join(_describe(err) for err in e.errors(include_url=False))
            raise ConfigurationError(
                f"Invalid {self.options_model.__name__}: {messages}",
                details={"fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]},
                cause=e,
            )

    def validate(self, options: O) -> None:
        """Checks that involve the session. Runs inside build()."""

    @abstractmethod
    def render(self, options: O) -> RequestDescriptor:
        """Render the request template for the first page."""

    @abstractmethod
    def decoder(self) -> PageDecoder[T]:
        """Decoder for one page of results."""

    def build(self) -> PaginatedQuery[T]:
        """
        Validate the settings and produce the query.

        Raises:
            ConfigurationError: If the settings are invalid
        """
        options = self.options()
        self.validate(options)
        return PaginatedQuery(self.render(options), self._session, self._transport, self.decoder())


def _describe(error: Dict[str, Any]) -> str:
    location = ".".join(str(p) for p in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


__all__ = [
    "Direction",
    "Timestamp",
    "TimeRangeOptions",
    "QueryBuilder",
]
