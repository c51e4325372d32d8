"""User directory implementations."""

from __future__ import annotations

from pathlib import Path

from cidade_alerta.core.errors import NotFoundError
from cidade_alerta.storage.file_storage import read_jsonl

USERS_FILE = "users.jsonl"


class MemoryUserDirectory:
    """UserDirectory backed by a dict of user id to authority flag."""

    def __init__(self, users: dict[str, bool] | None = None) -> None:
        self._users = dict(users or {})

    def add(self, user_id: str, is_authority: bool = False) -> None:
        self._users[user_id] = is_authority

    def is_authority(self, user_id: str) -> bool:
        try:
            return self._users[user_id]
        except KeyError:
            raise NotFoundError(f"user {user_id} not found") from None


class JsonlUserDirectory:
    """UserDirectory backed by base_dir/users.jsonl.

    Each line: ``{"id": "...", "name": "...", "isAuthority": true}``.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self._path = Path(base_dir) / USERS_FILE

    def is_authority(self, user_id: str) -> bool:
        for doc in read_jsonl(self._path):
            if str(doc.get("id")) == user_id:
                return bool(doc.get("isAuthority", False))
        raise NotFoundError(f"user {user_id} not found")
