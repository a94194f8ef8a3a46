"""
Page decoders.

A decoder turns one raw response body into a ResultPage of typed elements.
Decoders are deterministic and side-effect free; the same body always
decodes to the same page.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Generic, List, Optional, Protocol, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..runtime.codec import load_json
from ..runtime.errors import DecodeError
from ..transport.base import RawResponse
from .page import ContinuationToken, ResultPage


logger = logging.getLogger(__name__)

T_co = TypeVar("T_co", covariant=True)
M = TypeVar("M", bound=BaseModel)


class PageDecoder(Protocol[T_co]):
    """Parses a raw response into a page of elements."""

    def decode(self, raw: RawResponse) -> ResultPage[T_co]:
        """
        Decode one response.

        Raises:
            DecodeError: If the body is malformed or has an unexpected shape
        """
        ...


def read_continuation(data: Dict[str, Any]) -> Optional[ContinuationToken]:
    """
    Extract the continuation of a decoded response, if any.

    Current servers return a top-level ``continue`` object whose entries are
    all sent back. Servers older than 1.21 use ``query-continue`` keyed by
    module; those entries are merged.
    """
    if "continue" in data:
        cont = data["continue"]
        if not isinstance(cont, dict):
            raise DecodeError("'continue' is not an object")
        return ContinuationToken.from_mapping(cont)
    if "query-continue" in data:
        legacy = data["query-continue"]
        if not isinstance(legacy, dict) or not all(isinstance(v, dict) for v in legacy.values()):
            raise DecodeError("'query-continue' is not an object of objects")
        merged: Dict[str, Any] = {}
        for module_params in legacy.values():
            merged.update(module_params)
        return ContinuationToken.from_mapping(merged)
    return None


class ListQueryDecoder(Generic[M]):
    """
    Decoder for list-shaped query results.

    Reads the JSON array found under ``path`` (for example
    ``("query", "watchlist")``) and validates each entry into ``model``.

    Args:
        model: pydantic model for one element
        path: Keys leading to the element array
        missing_ok: Treat an absent array as an empty page. The server omits
            the array when a query matches nothing.
    """

    def __init__(self, model: Type[M], path: Sequence[str], missing_ok: bool = True):
        self.model = model
        self.path = tuple(path)
        self.missing_ok = missing_ok

    def decode(self, raw: RawResponse) -> ResultPage[M]:
        data = load_json(raw.body)
        items = self.select(data)
        elements = [self._validate(item, index) for index, item in enumerate(items)]
        continuation = read_continuation(data)
        logger.debug(
            "Decoded %d %s element(s), continuation: %s",
            len(elements), self.model.__name__, continuation is not None,
        )
        return ResultPage(tuple(elements), continuation)

    def select(self, data: Dict[str, Any]) -> List[Any]:
        """Locate the element array in a decoded response."""
        node: Any = data
        for key in self.path:
            if not isinstance(node, dict) or key not in node:
                if self.missing_ok:
                    return []
                raise DecodeError(f"Response has no '{'.'.join(self.path)}'")
            node = node[key]
        if isinstance(node, dict):
            # formatversion=1 keys some lists by id
            node = list(node.values())
        if not isinstance(node, list):
            raise DecodeError(f"'{'.'.join(self.path)}' is not a list")
        return node

    def _validate(self, item: Any, index: int) -> M:
        try:
            return self.model.model_validate(item)
        except ValidationError as e:
            raise DecodeError(
                f"Malformed {self.model.__name__} at index {index}",
                details={"errors": e.errors(include_url=False)},
                cause=e,
            )


__all__ = ["PageDecoder", "read_continuation", "ListQueryDecoder"]
