"""
Paginated query engine.

Turns a sequence of HTTP round trips, each returning one page of results
plus an opaque continuation, into a single lazy sequence of typed elements.

A PaginatedQuery is an immutable configuration: a request template, the
session that stamps it, the transport that executes it and the decoder that
parses the responses. Iterating it creates a QueryCursor, which walks the
three states below:

- FRESH: nothing fetched yet.
- HAS_PAGE: a page is in memory; the index points at the next element.
- EXHAUSTED: the last page had no continuation and is fully yielded.

Pages are fetched only when the consumer advances past the end of the
current page, strictly in continuation order and never ahead of need. Every
new iteration starts again from FRESH; server results may differ between
passes.

An UnauthorizedError from the transport triggers exactly one
re-authentication of the session and one retry of the same request. Every
other failure ends the iteration and is raised again on further advances.

Cursors are not thread-safe: advancing one cursor concurrently needs
external serialization.
"""

from __future__ import annotations
import itertools
import logging
from enum import Enum
from typing import Generic, Iterator, List, Optional, TypeVar

from ..request import RequestDescriptor
from ..runtime.errors import AuthError, AuthFailure, UnauthorizedError
from ..session import Session
from ..transport.base import RawResponse, Transport
from .decoder import PageDecoder
from .page import ContinuationToken, ResultPage


logger = logging.getLogger(__name__)

T = TypeVar("T")


class CursorState(Enum):
    """Position of a cursor in the pagination state machine."""
    FRESH = "fresh"
    HAS_PAGE = "has_page"
    EXHAUSTED = "exhausted"


class PaginatedQuery(Generic[T]):
    """
    Lazy, restartable sequence of query results.

    Example:
        ```python
        query = PaginatedQuery(template, session, transport, decoder)
        for entry in query:
            print(entry.title)

        first_ten = query.take(10)   # a fresh pass from the first page
        ```
    """

    def __init__(
        self,
        template: RequestDescriptor,
        session: Session,
        transport: Transport,
        decoder: PageDecoder[T],
        name: Optional[str] = None,
    ):
        """
        Configure a query.

        Args:
            template: Request for the first page, without continuation
            session: Session stamping every request
            transport: Transport executing the requests
            decoder: Decoder for one response page
            name: Label used in log messages
        """
        self._template = template
        self._session = session
        self._transport = transport
        self._decoder = decoder
        self._name = name or template.get("list") or template.get("prop") or "query"

    @property
    def template(self) -> RequestDescriptor:
        return self._template

    @property
    def session(self) -> Session:
        return self._session

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def decoder(self) -> PageDecoder[T]:
        return self._decoder

    @property
    def name(self) -> str:
        return self._name

    def __iter__(self) -> QueryCursor[T]:
        return QueryCursor(self)

    def __copy__(self) -> PaginatedQuery[T]:
        return self.copy()

    def __repr__(self) -> str:
        return f"PaginatedQuery({self._name}, {self._template!r})"

    def copy(self) -> PaginatedQuery[T]:
        """Same configuration; iterating the copy starts from the first page."""
        return PaginatedQuery(self._template, self._session, self._transport, self._decoder, self._name)

    def with_session(self, session: Session) -> PaginatedQuery[T]:
        return PaginatedQuery(self._template, session, self._transport, self._decoder, self._name)

    def cursor(self) -> QueryCursor[T]:
        return QueryCursor(self)

    def pages(self) -> Iterator[ResultPage[T]]:
        """Iterate whole pages instead of single elements."""
        cursor = QueryCursor(self)
        while True:
            page = cursor.next_page()
            if page is None:
                return
            yield page

    def take(self, count: int) -> List[T]:
        """Collect at most ``count`` elements from a fresh pass."""
        return list(itertools.islice(QueryCursor(self), count))

    def first(self) -> Optional[T]:
        return next(iter(QueryCursor(self)), None)

    def to_list(self) -> List[T]:
        return list(QueryCursor(self))


class QueryCursor(Iterator[T]):
    """
    Forward-only position in one pass over a PaginatedQuery.

    Attributes:
        page_fetches: Number of pages fetched so far (retries not counted)
    """

    def __init__(self, query: PaginatedQuery[T]):
        self._query = query
        self._state = CursorState.FRESH
        self._page: Optional[ResultPage[T]] = None
        self._index = 0
        self._error: Optional[BaseException] = None
        self.page_fetches = 0

    @property
    def state(self) -> CursorState:
        return self._state

    @property
    def failed(self) -> bool:
        return self._error is not None

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def __iter__(self) -> QueryCursor[T]:
        return self

    def __next__(self) -> T:
        self._raise_if_failed()
        while True:
            if self._state is CursorState.EXHAUSTED:
                raise StopIteration
            if self._state is CursorState.FRESH:
                self._load(None)
                continue

            page = self._page
            if self._index < len(page.elements):
                element = page.elements[self._index]
                self._index += 1
                return element
            if page.continuation is None:
                self._finish()
                raise StopIteration
            self._load(page.continuation)

    def next_page(self) -> Optional[ResultPage[T]]:
        """
        Skip the rest of the current page and return the next one.

        Returns:
            The next page, or None once the query is exhausted
        """
        self._raise_if_failed()
        if self._state is CursorState.EXHAUSTED:
            return None
        if self._state is CursorState.FRESH:
            self._load(None)
        elif self._page.continuation is None:
            self._finish()
            return None
        else:
            self._load(self._page.continuation)
        page = self._page
        self._index = len(page.elements) if page is not None else 0
        return page

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _raise_if_failed(self) -> None:
        if self._error is not None:
            raise self._error

    def _finish(self) -> None:
        self._state = CursorState.EXHAUSTED
        self._page = None
        self._index = 0

    def _load(self, continuation: Optional[ContinuationToken]) -> None:
        descriptor = self._query.template
        if continuation is not None:
            descriptor = continuation.apply(descriptor)
        try:
            raw = self._dispatch(descriptor)
            page = self._query.decoder.decode(raw)
        except Exception as e:
            self._error = e
            self._page = None
            raise

        self.page_fetches += 1
        logger.debug(
            "%s page %d: %d element(s), more: %s",
            self._query.name, self.page_fetches, len(page.elements), page.has_more,
        )
        if not page.elements and page.continuation is None:
            self._finish()
            return
        self._page = page
        self._index = 0
        self._state = CursorState.HAS_PAGE

    def _dispatch(self, descriptor: RequestDescriptor) -> RawResponse:
        session = self._query.session
        transport = self._query.transport
        stamped = session.stamp(descriptor)
        logger.debug("%s: %s", self._query.name, stamped.redacted())
        try:
            return transport.execute(stamped)
        except UnauthorizedError as first:
            if session.credentials is None:
                raise AuthError(
                    "Request unauthorized and the session has no credentials to refresh",
                    AuthFailure.INVALID_CREDENTIALS,
                    cause=first,
                )
            logger.info("%s: unauthorized, re-authenticating %s", self._query.name, session)
            session.reauthenticate()

        # The token may have changed, so stamp again
        stamped = session.stamp(descriptor)
        logger.warning("%s: retrying after re-authentication", self._query.name)
        try:
            return transport.execute(stamped)
        except UnauthorizedError as second:
            raise AuthError(
                "Request still unauthorized after re-authentication",
                AuthFailure.RETRY_EXHAUSTED,
                cause=second,
            )


__all__ = ["CursorState", "PaginatedQuery", "QueryCursor"]
