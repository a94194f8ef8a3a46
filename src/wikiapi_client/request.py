"""
Request descriptors for the wiki API.

A RequestDescriptor is an immutable description of one HTTP exchange. Adding
a parameter never mutates a descriptor; it produces a derived copy. Parameters
are kept sorted by name so that equal descriptors serialize identically, which
makes requests reproducible in logs and tests.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple
from urllib.parse import urlencode

from .runtime.codec import encode_param_value
from .runtime.errors import ConfigurationError, ErrorCode


DEFAULT_API_PATH = "/api.php"

# Parameters whose values must never show up in logs or reprs
SECRET_PARAMS = frozenset({
    "lgpassword",
    "lgtoken",
    "token",
    "wltoken",
})

REDACTED = "***"


class HttpMethod(str, Enum):
    """HTTP method used to dispatch a descriptor."""
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True, repr=False)
class RequestDescriptor:
    """
    One HTTP exchange with the wiki API.

    Attributes:
        method: HTTP method
        path: Path of the API entry point relative to the wiki base URL
        params: Encoded parameters as (name, value) pairs sorted by name
        mutating: Whether the request changes server state and therefore
            needs the session's capability token
        owner_prefix: Parameter prefix of a query that can be read on behalf
            of a delegated owner (e.g. ``"wl"`` for ``wlowner``/``wltoken``)
    """

    method: HttpMethod = HttpMethod.GET
    path: str = DEFAULT_API_PATH
    params: Tuple[Tuple[str, str], ...] = ()
    mutating: bool = False
    owner_prefix: Optional[str] = None

    def __post_init__(self) -> None:
        names = [name for name, _ in self.params]
        if len(set(names)) != len(names):
            raise ConfigurationError(
                "Parameter names must be unique within a request",
                ErrorCode.INVALID_PARAMETER,
                {"params": names},
            )
        if any(not name for name in names):
            raise ConfigurationError("Parameter name must not be empty", ErrorCode.INVALID_PARAMETER)
        if list(self.params) != sorted(self.params):
            object.__setattr__(self, "params", tuple(sorted(self.params)))

    @classmethod
    def of(
        cls,
        params: Optional[Mapping[str, Any]] = None,
        *,
        method: HttpMethod = HttpMethod.GET,
        path: str = DEFAULT_API_PATH,
        mutating: bool = False,
        owner_prefix: Optional[str] = None,
    ) -> RequestDescriptor:
        """
        Build a descriptor from a mapping of raw parameter values.

        Args:
            params: Parameter names to values (strings, ints, dates, enums
                or collections of those)
            method: HTTP method
            path: API entry point path
            mutating: Whether a capability token is required
            owner_prefix: Prefix for delegated-owner parameters

        Returns:
            New descriptor
        """
        descriptor = cls(method=method, path=path, mutating=mutating, owner_prefix=owner_prefix)
        return descriptor.with_params(params or {})

    @classmethod
    def write(cls, params: Optional[Mapping[str, Any]] = None, path: str = DEFAULT_API_PATH) -> RequestDescriptor:
        """Build a mutating POST descriptor."""
        return cls.of(params, method=HttpMethod.POST, path=path, mutating=True)

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def with_param(self, name: str, value: Any) -> RequestDescriptor:
        """
        Return a copy with the parameter added or overwritten.

        ``None`` and ``False`` mean "absent": the parameter is removed, since
        the API treats any present boolean flag as true.

        Raises:
            ConfigurationError: If name is empty
        """
        if not name:
            raise ConfigurationError("Parameter name must not be empty", ErrorCode.INVALID_PARAMETER)
        if value is None or value is False:
            return self.without_param(name)
        encoded = encode_param_value(value)
        params = tuple(p for p in self.params if p[0] != name) + ((name, encoded),)
        return replace(self, params=tuple(sorted(params)))

    def with_params(self, params: Mapping[str, Any]) -> RequestDescriptor:
        """Return a copy with every parameter of the mapping applied."""
        descriptor = self
        for name, value in params.items():
            descriptor = descriptor.with_param(name, value)
        return descriptor

    def without_param(self, name: str) -> RequestDescriptor:
        """Return a copy without the named parameter."""
        if not self.has_param(name):
            return self
        return replace(self, params=tuple(p for p in self.params if p[0] != name))

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def has_param(self, name: str) -> bool:
        return any(p[0] == name for p in self.params)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for key, value in self.params:
            if key == name:
                return value
        return default

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.params)

    def to_dict(self) -> Dict[str, str]:
        """Parameters as a plain dictionary (for the transport)."""
        return dict(self.params)

    def query_string(self, redact: bool = False) -> str:
        pairs = [
            (name, REDACTED if redact and name in SECRET_PARAMS else value)
            for name, value in self.params
        ]
        return urlencode(pairs)

    def serialize(self) -> str:
        """
        Canonical encoding: method, path and parameters in name order.

        Descriptors with equal parameters, method and path serialize
        identically. The mutating flag and owner prefix are not part of the
        encoding, so descriptors that differ only there serialize alike but
        compare unequal.
        """
        return f"{self.method.value} {self.path}?{self.query_string()}"

    def redacted(self) -> str:
        """Like serialize() but with secret parameter values masked."""
        return f"{self.method.value} {self.path}?{self.query_string(redact=True)}"

    def __repr__(self) -> str:
        flag = " mutating" if self.mutating else ""
        return f"RequestDescriptor({self.redacted()}{flag})"


__all__ = [
    "DEFAULT_API_PATH",
    "SECRET_PARAMS",
    "HttpMethod",
    "RequestDescriptor",
]
