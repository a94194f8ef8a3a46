"""
API dialects.

Wikis run different server releases, and each release has its own parameter
and response conventions. An ApiDialect records the release a session talks
to, parsed from the ``generator`` field of the site information.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Optional

from .runtime.errors import DecodeError


_GENERATOR_PATTERN = re.compile(r"^\s*MediaWiki\s+(\d+)\.(\d+)(?:\.(\d+))?(\S*)\s*$")


@dataclass(frozen=True, order=True)
class ApiDialect:
    """
    Server release in effect for a session.

    Attributes:
        major: Major release number
        minor: Minor release number
        patch: Patch level (0 when unknown)
        suffix: Pre-release or deployment suffix such as ``-wmf.5``
    """

    major: int
    minor: int
    patch: int = 0
    suffix: str = field(default="", compare=False)

    @classmethod
    def parse(cls, generator: str) -> ApiDialect:
        """
        Parse a generator string such as ``"MediaWiki 1.39.3"``.

        Raises:
            DecodeError: If the string does not name a server release
        """
        match = _GENERATOR_PATTERN.match(generator or "")
        if match is None:
            raise DecodeError(f"Unrecognized generator: {generator!r}")
        major, minor, patch, suffix = match.groups()
        return cls(int(major), int(minor), int(patch or 0), suffix or "")

    @classmethod
    def of(cls, version: str) -> ApiDialect:
        """Parse a bare version such as ``"1.35"`` or ``"1.35.2"``."""
        return cls.parse(f"MediaWiki {version}")

    @property
    def label(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}{self.suffix}"

    @property
    def is_supported(self) -> bool:
        return self >= MINIMUM_SUPPORTED

    @property
    def supports_formatversion2(self) -> bool:
        """Whether responses can use the modern JSON layout (``formatversion=2``)."""
        return self >= FORMATVERSION2_SINCE

    def __str__(self) -> str:
        return f"MediaWiki {self.label}"


FORMATVERSION2_SINCE = ApiDialect(1, 25)
# First release that hands out login tokens through meta=tokens
MINIMUM_SUPPORTED = ApiDialect(1, 27)


def parse_dialect(generator: Optional[str]) -> ApiDialect:
    """Parse a generator string, rejecting a missing one."""
    if not generator:
        raise DecodeError("Site information carries no generator")
    return ApiDialect.parse(generator)


__all__ = [
    "ApiDialect",
    "FORMATVERSION2_SINCE",
    "MINIMUM_SUPPORTED",
    "parse_dialect",
]
