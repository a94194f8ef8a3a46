"""
Credential forms accepted by Session.authenticate.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

from .runtime.errors import ConfigurationError


@dataclass(frozen=True)
class PasswordCredentials:
    """Username and password (or bot password) login."""
    username: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.username or not self.password:
            raise ConfigurationError("Username and password must both be given")


@dataclass(frozen=True)
class OwnerTokenCredentials:
    """
    Pre-existing owner and token pair.

    Grants read access to the owner's protected resources, such as a
    watchlist, without a full login.
    """
    owner: str
    token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.owner or not self.token:
            raise ConfigurationError("Owner and token must be supplied together")


Credentials = Union[PasswordCredentials, OwnerTokenCredentials]


__all__ = ["PasswordCredentials", "OwnerTokenCredentials", "Credentials"]
