"""State store: the one GameState, its lock, and its snapshot file."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from .exceptions import StateIntegrityError
from .locks import ReadWriteLock
from .models import GameState
from .snapshot import dump_state, load_state

logger = logging.getLogger(__name__)


class StateStore:
    """Owns the GameState and persists it after every mutation.

    All access goes through ``read()`` or ``write()``. Leaving a ``write()``
    block normally saves the whole state before the lock is released; leaving
    it with an exception saves nothing.
    """

    def __init__(self, path: Path, state: Optional[GameState] = None):
        self.path = Path(path)
        self._state = state if state is not None else GameState()
        self._lock = ReadWriteLock()

    @classmethod
    def load(cls, path: Path) -> "StateStore":
        """Open the store, reading the snapshot if one exists.

        Raises StateIntegrityError if the snapshot cannot be parsed.
        """
        path = Path(path)
        if not path.exists():
            logger.info("No saved state at %s, starting empty", path)
            return cls(path)
        try:
            document = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StateIntegrityError(f"Saved state at {path} is not valid UTF-8: {e}") from e
        state = load_state(document)
        logger.info(
            "Loaded state from %s: %d cottages assigned, %d players, vote %s",
            path,
            len(state.players),
            state.number_of_players,
            "active" if state.current_vote else "inactive",
        )
        return cls(path, state)

    @property
    def busy(self) -> bool:
        """Whether any task currently holds the lock."""
        return self._lock.writing or self._lock.readers > 0

    @asynccontextmanager
    async def read(self) -> AsyncIterator[GameState]:
        """Shared access. Do not mutate the yielded state."""
        async with self._lock.read():
            yield self._state

    @asynccontextmanager
    async def write(self) -> AsyncIterator[GameState]:
        """Exclusive access; the state is saved when the block exits cleanly."""
        async with self._lock.write():
            yield self._state
            self.save()

    def save(self) -> None:
        """Overwrite the snapshot with the current state."""
        document = dump_state(self._state)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(document, encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug("State saved to %s", self.path)
