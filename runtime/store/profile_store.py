"""ProfileStore: per-user preferences that outlive a session.

A profile records the user's language, script preference and accessibility
mode. Sessions expire after a day of inactivity; profiles do not, so a
returning user is taken straight to the main menu in their language.

Expected layout when file-backed:

    <data_dir>/profiles/<user_id>.json

This store provides a simple API:

    get_profile(user_id) -> UserProfile | None
    save_profile(profile) -> UserProfile
    delete_profile(user_id) -> bool
"""

import asyncio
from pathlib import Path
from typing import Dict, Optional, Union

from exceptions.exceptions import PersistenceError
from ..models.session_models import UserProfile, utcnow
from .session_store import read_json, safe_filename, write_json


class ProfileStore:
    """In-memory + optional file-backed access to user profiles.

    Parameters
    ----------
    data_dir:
        Root directory that contains the `profiles/` directory. If None,
        profiles are kept in memory only.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None) -> None:
        self._data_dir: Optional[Path] = Path(data_dir) if data_dir else None
        # In-memory cache: user_id -> UserProfile
        self._cache: Dict[str, UserProfile] = {}

    def _profile_path(self, user_id: str) -> Path:
        """Return the expected JSON path for the given user_id."""
        assert self._data_dir is not None
        return self._data_dir / "profiles" / f"{safe_filename(user_id)}.json"

    def _load(self, user_id: str) -> Optional[UserProfile]:
        """Load a profile from disk.

        Raises
        ------
        ValueError
            If the JSON structure does not describe this user.
        """
        data = read_json(self._profile_path(user_id))
        if data is None:
            return None

        json_user_id = data.get("user_id")
        if json_user_id is not None and json_user_id != user_id:
            raise ValueError(
                f"User ID mismatch in profile file: requested user_id={user_id}, "
                f"file user_id={json_user_id}"
            )
        return UserProfile.model_validate(data)

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Return a copy of the profile for `user_id`, or None.

        Raises
        ------
        PersistenceError
            If the profile file exists but cannot be read.
        """
        profile = self._cache.get(user_id)
        if profile is None and self._data_dir is not None:
            try:
                profile = await asyncio.to_thread(self._load, user_id)
            except Exception as exc:
                raise PersistenceError("read", f"profile:{user_id}", exc) from exc
            if profile is not None:
                self._cache[user_id] = profile
        return profile.model_copy(deep=True) if profile is not None else None

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        """Write `profile` and return the stored copy.

        Raises
        ------
        PersistenceError
            If the profile cannot be written.
        """
        stored = profile.model_copy(deep=True, update={"updated_at": utcnow()})
        self._cache[profile.user_id] = stored
        if self._data_dir is not None:
            try:
                await asyncio.to_thread(
                    write_json,
                    self._profile_path(profile.user_id),
                    stored.model_dump(mode="json"),
                )
            except Exception as exc:
                raise PersistenceError("write", f"profile:{profile.user_id}", exc) from exc
        return stored.model_copy(deep=True)

    async def delete_profile(self, user_id: str) -> bool:
        existed = self._cache.pop(user_id, None) is not None
        if self._data_dir is not None:
            path = self._profile_path(user_id)
            if path.is_file():
                try:
                    await asyncio.to_thread(path.unlink)
                except OSError as exc:
                    raise PersistenceError("delete", f"profile:{user_id}", exc) from exc
                existed = True
        return existed
