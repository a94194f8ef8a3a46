"""
Result pages and continuation tokens.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence, Tuple, TypeVar

from ..request import RequestDescriptor
from ..runtime.errors import DecodeError, ErrorCode


T = TypeVar("T")


@dataclass(frozen=True)
class ContinuationToken:
    """
    Opaque server-issued marker of where the next page resumes.

    The server hands continuation back as a set of parameters (for example
    ``wlcontinue`` plus the generic ``continue``); they are applied verbatim
    to the next request.
    """

    params: Tuple[Tuple[str, str], ...]

    def __post_init__(self) -> None:
        if not self.params:
            raise DecodeError("Continuation carries no parameters", ErrorCode.MALFORMED_CONTINUATION)
        for name, value in self.params:
            if not name or not isinstance(value, str):
                raise DecodeError(
                    f"Malformed continuation parameter {name!r}",
                    ErrorCode.MALFORMED_CONTINUATION,
                )

    @classmethod
    def single(cls, name: str, value: str) -> ContinuationToken:
        return cls(((name, value),))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ContinuationToken:
        """
        Build a token from a continuation object of a response.

        Scalar values are converted to strings; nested values are rejected.

        Raises:
            DecodeError: If the object is empty or holds non-scalar values
        """
        params = []
        for name, value in data.items():
            if isinstance(value, bool) or not isinstance(value, (str, int)):
                raise DecodeError(
                    f"Malformed continuation value for {name!r}",
                    ErrorCode.MALFORMED_CONTINUATION,
                )
            params.append((str(name), str(value)))
        return cls(tuple(sorted(params)))

    def apply(self, descriptor: RequestDescriptor) -> RequestDescriptor:
        """Return the descriptor carrying this continuation."""
        return descriptor.with_params(dict(self.params))


@dataclass(frozen=True)
class ResultPage(Generic[T]):
    """
    One decoded page: its elements in server order and the continuation,
    if more pages follow.
    """

    elements: Sequence[T]
    continuation: Optional[ContinuationToken] = None

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def has_more(self) -> bool:
        return self.continuation is not None

    @property
    def is_last(self) -> bool:
        return self.continuation is None


__all__ = ["ContinuationToken", "ResultPage"]
