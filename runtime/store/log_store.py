"""
ContextLog: append-only turn log for the dialogue runtime.

Every user and assistant turn is appended here. The log itself is
unbounded; the controller only ever reads the most recent turns back as the
context window for the oracle.

When a data_dir is configured each user's turns are also written as JSON
lines to:

    <data_dir>/turns/<user_id>.jsonl
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from exceptions.exceptions import PersistenceError
from ..models.session_models import Turn
from .session_store import safe_filename


logger = logging.getLogger(__name__)


class ContextLog:
    """In-memory + optional JSONL-backed turn log.

    Appends for different users never touch the same file, so concurrent
    turns across users are safe.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None) -> None:
        self._data_dir: Optional[Path] = Path(data_dir) if data_dir else None
        # user_id -> turns, oldest first
        self._turns: Dict[str, List[Turn]] = {}

    def _path(self, user_id: str) -> Path:
        assert self._data_dir is not None
        return self._data_dir / "turns" / f"{safe_filename(user_id)}.jsonl"

    async def append_turn(self, turn: Turn) -> None:
        """Append `turn` to the user's log.

        Raises
        ------
        PersistenceError
            If the JSONL file cannot be written. The in-memory log is
            updated regardless.
        """
        turns = await self._loaded(turn.user_id)
        turns.append(turn)
        if self._data_dir is None:
            return
        try:
            await asyncio.to_thread(self._append_line, turn)
        except Exception as exc:
            raise PersistenceError("append", f"turns:{turn.user_id}", exc) from exc

    async def get_recent_turns(self, user_id: str, n: int) -> List[Turn]:
        """Return the last `n` turns of `user_id`, oldest first."""
        if n <= 0:
            return []
        turns = await self._loaded(user_id)
        return [turn.model_copy() for turn in turns[-n:]]

    async def _loaded(self, user_id: str) -> List[Turn]:
        turns = self._turns.get(user_id)
        if turns is None:
            turns = []
            if self._data_dir is not None:
                try:
                    turns = await asyncio.to_thread(self._read_lines, user_id)
                except Exception as exc:
                    raise PersistenceError("read", f"turns:{user_id}", exc) from exc
            self._turns[user_id] = turns
        return turns

    def _append_line(self, turn: Turn) -> None:
        path = self._path(turn.user_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(turn.model_dump(mode="json"), ensure_ascii=False))
            f.write("\n")

    def _read_lines(self, user_id: str) -> List[Turn]:
        path = self._path(user_id)
        if not path.is_file():
            return []
        turns: List[Turn] = []
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    turns.append(Turn.model_validate_json(line))
                except ValueError:
                    logger.warning("Skipping malformed turn at %s:%d", path, line_no)
        return turns
