"""Identity interfaces (ports) for bearer-token verification."""

from __future__ import annotations

from typing import Protocol


class UserDirectory(Protocol):
    """Port: resolves a user's authority flag."""

    def is_authority(self, user_id: str) -> bool: ...


class IdentityProvider(Protocol):
    """Port: turns a bearer credential into a stable user id.

    ``verify`` raises AuthenticationError; ``is_authority`` raises
    NotFoundError for unknown users.
    """

    def verify(self, credential: str | None) -> str: ...

    def is_authority(self, user_id: str) -> bool: ...
