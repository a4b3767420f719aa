"""
Persisted Client State

A small JSON-file key-value store standing in for the browser's local
storage: it survives restarts and is scoped to one profile file.
Writes are read-modify-write under a file lock so two processes sharing
a profile do not clobber each other. The file is replaced whole, and
reads take the same lock.

Author: Khalil Bannouri
Version: 4.0.0
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from filelock import FileLock

from cafe.core.config import get_settings
from cafe.models import UserIdentity

logger = logging.getLogger(__name__)


class LocalStore:
    """Typed get/set/clear over a JSON object on disk."""

    def __init__(self, path: Optional[Union[str, Path]] = None, lock_timeout: float = 10):
        self.path = Path(path or get_settings().client_store_path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = FileLock(f"{self.path}.lock", timeout=lock_timeout)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning(f"Ignoring unreadable store file: {self.path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, Any]) -> None:
        # Readers in other processes only ever see a whole file
        self.path.parent.mkdir(parents=True, exist_ok=True)
        staging = self.path.with_name(f"{self.path.name}.tmp")
        staging.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(staging, self.path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with self._lock:
            return self._load()

    def _set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else default

    def set_str(self, key: str, value: str) -> None:
        self._set(key, str(value))

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._read().get(key)
        return value if isinstance(value, bool) else default

    def set_bool(self, key: str, value: bool) -> None:
        self._set(key, bool(value))

    def delete(self, *keys: str) -> None:
        with self._lock:
            data = self._load()
            for key in keys:
                data.pop(key, None)
            self._save(data)

    def clear(self) -> None:
        with self._lock:
            if self.path.exists():
                self.path.unlink()


class IdentityStore:
    """Remembers who is using this profile."""

    USER_ID_KEY = "cafe-user-id"
    NICKNAME_KEY = "cafe-nickname"
    ANIMAL_KEY = "cafe-animal"
    ADMIN_KEY = "cafe-is-admin"

    def __init__(self, store: LocalStore):
        self.store = store

    def load(self) -> Optional[UserIdentity]:
        """Return the saved identity, or None unless all three parts are present."""
        user_id = self.store.get_str(self.USER_ID_KEY)
        nickname = self.store.get_str(self.NICKNAME_KEY)
        animal = self.store.get_str(self.ANIMAL_KEY)
        if not (user_id and nickname and animal):
            return None
        return UserIdentity(user_id=user_id, nickname=nickname, animal=animal)

    def save(self, identity: UserIdentity, is_admin: bool = False) -> None:
        self.store.set_str(self.USER_ID_KEY, identity.user_id)
        self.store.set_str(self.NICKNAME_KEY, identity.nickname)
        self.store.set_str(self.ANIMAL_KEY, identity.animal)
        self.store.set_bool(self.ADMIN_KEY, is_admin)
        logger.info(f"Identity saved: {identity.user_id}")

    @property
    def is_admin(self) -> bool:
        return self.store.get_bool(self.ADMIN_KEY)

    def clear(self) -> None:
        self.store.delete(self.USER_ID_KEY, self.NICKNAME_KEY, self.ANIMAL_KEY, self.ADMIN_KEY)
