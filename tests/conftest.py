"""Pytest configuration and fixtures."""

import pytest
from townsquare.config import Settings
from townsquare.models import GameState, MessageRef, SeatingDirectory
from townsquare.store import StateStore


class FakeMessenger:
    """Records posted and edited messages instead of sending them.

    ``on_post`` runs while a post is in flight. When ``store`` is set, every
    post and edit records whether the store's lock was held at the time.
    """

    def __init__(self, fail_edits: bool = False):
        self.posts = []
        self.edits = []
        self.fail_edits = fail_edits
        self.on_post = None
        self.store = None
        self.lock_seen = []

    def _record_lock(self):
        if self.store is not None:
            self.lock_seen.append(self.store.busy)

    async def post(self, channel, text, buttons):
        self._record_lock()
        if self.on_post is not None:
            await self.on_post()
        message = MessageRef(message_id=f"m{len(self.posts) + 1}", channel_id=channel)
        self.posts.append((channel, text, buttons))
        return message

    async def edit(self, message, text):
        self._record_lock()
        if self.fail_edits:
            raise ConnectionError("chat server unreachable")
        self.edits.append((message, text))

    @property
    def last_text(self) -> str:
        if self.edits:
            return self.edits[-1][1]
        return self.posts[-1][1]


@pytest.fixture
def seating():
    """Five players in cottages 1..5."""
    directory = SeatingDirectory()
    for seat in range(1, 6):
        directory.assign(seat, f"P{seat}", f"C{seat}")
    return directory


@pytest.fixture
def table_state(seating):
    """A five-player table with no vote running."""
    return GameState(players=seating, number_of_players=5)


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def store(table_state, state_path):
    return StateStore(state_path, table_state)


@pytest.fixture
def messenger(store):
    """A messenger that notes whether the store was locked during each call."""
    fake = FakeMessenger()
    fake.store = store
    return fake


@pytest.fixture
def settings(state_path):
    return Settings(state_path=state_path, storytellers=frozenset({"ST"}))
