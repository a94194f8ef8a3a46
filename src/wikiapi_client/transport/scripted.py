"""
In-memory transport with scripted responses.

Useful for tests, examples and offline development: responses are queued in
advance and every executed descriptor is recorded for later inspection.
"""

from __future__ import annotations
import json
from collections import deque
from typing import Any, Deque, Dict, List, Mapping, Union

from ..request import RequestDescriptor
from .base import RawResponse, raise_for_error_payload


ScriptedEntry = Union[RawResponse, Dict[str, Any], bytes, str, BaseException]


def _to_raw(entry: ScriptedEntry) -> RawResponse:
    if isinstance(entry, RawResponse):
        return entry
    if isinstance(entry, dict):
        return RawResponse(json.dumps(entry).encode("utf-8"))
    if isinstance(entry, str):
        return RawResponse(entry.encode("utf-8"))
    return RawResponse(entry)


class _Route:
    def __init__(self, match: Mapping[str, str], entries: List[ScriptedEntry], repeat: bool):
        self.match = dict(match)
        self.entries: Deque[ScriptedEntry] = deque(entries)
        self.repeat = repeat

    def matches(self, descriptor: RequestDescriptor) -> bool:
        return bool(self.entries) and all(
            descriptor.get(name) == value for name, value in self.match.items()
        )

    def take(self) -> ScriptedEntry:
        if self.repeat and len(self.entries) == 1:
            return self.entries[0]
        return self.entries.popleft()


class ScriptedTransport:
    """
    Transport returning queued responses in order.

    Entries may be RawResponse objects, dicts (sent as JSON), bytes or str
    bodies, or exception instances which are raised instead of answering.
    JSON error payloads are classified the same way HttpTransport does.

    Example:
        ```python
        transport = ScriptedTransport()
        transport.enqueue({"query": {"watchlist": []}})
        transport.route({"meta": "tokens"}, {"query": {"tokens": {"csrftoken": "abc"}}})
        ```
    """

    def __init__(self, *responses: ScriptedEntry):
        self._queue: Deque[ScriptedEntry] = deque(responses)
        self._routes: List[_Route] = []
        self.requests: List[RequestDescriptor] = []

    def enqueue(self, *responses: ScriptedEntry) -> ScriptedTransport:
        """Append responses to the default queue."""
        self._queue.extend(responses)
        return self

    def route(self, match: Mapping[str, str], *responses: ScriptedEntry,
              repeat: bool = False) -> ScriptedTransport:
        """
        Answer descriptors whose parameters include ``match`` from a dedicated queue.

        Args:
            match: Parameter names and encoded values that must all be present
            responses: Responses for matching requests, in order
            repeat: Keep answering with the last response once the others are used
        """
        self._routes.append(_Route(match, list(responses), repeat))
        return self

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def calls_matching(self, **params: str) -> List[RequestDescriptor]:
        return [
            d for d in self.requests
            if all(d.get(name) == value for name, value in params.items())
        ]

    @property
    def pending(self) -> int:
        return len(self._queue) + sum(len(r.entries) for r in self._routes if not r.repeat)

    def execute(self, descriptor: RequestDescriptor) -> RawResponse:
        self.requests.append(descriptor)
        entry = self._next_entry(descriptor)
        if isinstance(entry, BaseException):
            raise entry
        raw = _to_raw(entry)
        raise_for_error_payload(raw)
        return raw

    def _next_entry(self, descriptor: RequestDescriptor) -> ScriptedEntry:
        for route in self._routes:
            if route.matches(descriptor):
                return route.take()
        if not self._queue:
            raise LookupError(f"No scripted response left for {descriptor!r}")
        return self._queue.popleft()


__all__ = ["ScriptedEntry", "ScriptedTransport"]
