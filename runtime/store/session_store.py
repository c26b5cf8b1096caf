"""Session storage for the dialogue runtime.

Sessions live in the shared CacheService with a sliding TTL, and are
optionally mirrored as JSON files under a data directory.

The design is intentionally simple:
- The cache is the primary source of truth during a run.
- If a data_dir is configured, sessions are also written to
  `data_dir/sessions/<user_id>.json` so that they survive a restart.
- A session whose `expires_at` has passed is treated as absent, whether it
  comes from the cache or from disk.
- Callers get copies; mutating a returned Session never changes the store
  until it is written back with `put_session`.

File I/O runs in a worker thread (`asyncio.to_thread`) so a slow disk never
blocks other users' turns.
"""

import asyncio
import json
import logging
import re
import weakref
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

from exceptions.exceptions import PersistenceError
from ..models.session_models import Session
from .cache_service import CacheService


logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9_.+-]")


# ---------------------------------------------------------------------------
# File helpers shared by the file-backed stores
# ---------------------------------------------------------------------------


def safe_filename(key: str) -> str:
    """Map a user identity (e.g. a phone number) to a safe file stem."""
    return _UNSAFE_FILENAME_RE.sub("_", key) or "_"


def read_json(path: Path) -> Optional[Dict[str, Any]]:
    if not path.is_file():
        return None
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Invalid file format at {path}: expected object")
    return data


def write_json(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    tmp.replace(path)


# ---------------------------------------------------------------------------
# SessionStore
# ---------------------------------------------------------------------------


class SessionStore:
    """Cache-backed + optional file-backed session store.

    Parameters
    ----------
    cache:
        Shared CacheService; also provides the clock used for expiry.
    ttl:
        Sliding session lifetime. Every `put_session` pushes `expires_at`
        to now + ttl.
    data_dir:
        Base directory for session JSON files. If None, sessions are kept
        in memory only.
    """

    def __init__(
        self,
        cache: CacheService,
        ttl: timedelta = timedelta(hours=24),
        data_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.cache = cache
        self.ttl = ttl
        self._data_dir: Optional[Path] = Path(data_dir) if data_dir else None
        # Entries disappear once no turn holds the lock any more.
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    @staticmethod
    def _key(user_id: str) -> str:
        return f"session:{user_id}"

    def _path(self, user_id: str) -> Path:
        assert self._data_dir is not None
        return self._data_dir / "sessions" / f"{safe_filename(user_id)}.json"

    def lock_for(self, user_id: str) -> asyncio.Lock:
        """Return the mutex that serializes turns of `user_id`."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    async def get_session(self, user_id: str) -> Optional[Session]:
        """Return a copy of the live session, or None if absent/expired.

        Lookup order:
        1. The cache.
        2. If not cached and a data_dir is configured, the JSON file.

        Raises
        ------
        PersistenceError
            If the backing storage cannot be read.
        """
        key = self._key(user_id)
        try:
            session = self.cache.get(key)
            if session is None and self._data_dir is not None:
                session = await asyncio.to_thread(self._load, user_id)
                now = self.cache.now()
                if session is not None and not session.is_expired(now):
                    remaining = session.expires_at - now if session.expires_at else self.ttl
                    self.cache.set(key, session, remaining)
        except Exception as exc:
            raise PersistenceError("read", key, exc) from exc

        if session is None or session.is_expired(self.cache.now()):
            return None
        return session.model_copy(deep=True)

    async def put_session(self, session: Session) -> Session:
        """Write `session` (full overwrite) and slide its expiry.

        Returns the stored copy with refreshed `updated_at` / `expires_at`.

        Raises
        ------
        PersistenceError
            If the backing storage cannot be written.
        """
        key = self._key(session.user_id)
        now = self.cache.now()
        stored = session.model_copy(
            deep=True, update={"updated_at": now, "expires_at": now + self.ttl}
        )
        try:
            self.cache.set(key, stored, self.ttl)
            if self._data_dir is not None:
                await asyncio.to_thread(
                    write_json, self._path(session.user_id), stored.model_dump(mode="json")
                )
        except Exception as exc:
            raise PersistenceError("write", key, exc) from exc
        return stored.model_copy(deep=True)

    async def delete_session(self, user_id: str) -> bool:
        """Remove the session from the cache and disk. True if one existed."""
        key = self._key(user_id)
        try:
            existed = self.cache.invalidate(key)
            if self._data_dir is not None:
                path = self._path(user_id)
                if path.is_file():
                    await asyncio.to_thread(path.unlink)
                    existed = True
        except Exception as exc:
            raise PersistenceError("delete", key, exc) from exc
        return existed

    def _load(self, user_id: str) -> Optional[Session]:
        data = read_json(self._path(user_id))
        if data is None:
            return None
        return Session.model_validate(data)
