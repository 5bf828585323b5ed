"""Snapshot schema for persisting the game state.

The snapshot is a single JSON document holding the whole GameState. There
is no versioning: a document that does not match these models is rejected.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt, ValidationError

from .exceptions import StateIntegrityError
from .models import (
    BallotStatus,
    DeadStatus,
    GameState,
    MessageRef,
    SeatingDirectory,
    VoteSession,
)


class VoteSnapshot(BaseModel):
    """Schema for the live vote."""

    model_config = ConfigDict(extra="forbid")

    nominator: str
    nominee: str
    accusation: str
    defense: str
    clock_hand: PositiveInt
    vote_state: dict[str, BallotStatus]
    dead_state: dict[str, DeadStatus] = Field(default_factory=dict)
    description: str
    message_id: str
    channel_id: str

    @classmethod
    def from_session(cls, vote: VoteSession) -> "VoteSnapshot":
        return cls(
            nominator=vote.nominator,
            nominee=vote.nominee,
            accusation=vote.accusation,
            defense=vote.defense,
            clock_hand=vote.clock_hand,
            vote_state=dict(vote.vote_state),
            dead_state=dict(vote.dead_state),
            description=vote.description,
            message_id=vote.message.message_id,
            channel_id=vote.message.channel_id,
        )

    def to_session(self) -> VoteSession:
        return VoteSession(
            nominator=self.nominator,
            nominee=self.nominee,
            description=self.description,
            clock_hand=self.clock_hand,
            message=MessageRef(message_id=self.message_id, channel_id=self.channel_id),
            accusation=self.accusation,
            defense=self.defense,
            vote_state=dict(self.vote_state),
            dead_state=dict(self.dead_state),
        )


class StateSnapshot(BaseModel):
    """Schema for the whole persisted state."""

    model_config = ConfigDict(extra="forbid")

    players: dict[PositiveInt, tuple[str, str]] = Field(default_factory=dict)
    number_of_players: NonNegativeInt = 0
    current_vote: Optional[VoteSnapshot] = None

    @classmethod
    def from_state(cls, state: GameState) -> "StateSnapshot":
        return cls(
            players=dict(state.players.seats),
            number_of_players=state.number_of_players,
            current_vote=(
                VoteSnapshot.from_session(state.current_vote)
                if state.current_vote is not None
                else None
            ),
        )

    def to_state(self) -> GameState:
        return GameState(
            players=SeatingDirectory(seats=dict(self.players)),
            number_of_players=self.number_of_players,
            current_vote=self.current_vote.to_session() if self.current_vote else None,
        )


def dump_state(state: GameState) -> str:
    """Serialize the full state to a JSON document."""
    return StateSnapshot.from_state(state).model_dump_json(indent=2)


def load_state(document: str) -> GameState:
    """Parse a JSON document back into a GameState.

    Raises
    ------
        StateIntegrityError: the document is not valid JSON or does not
            match the current state shape

    """
    try:
        snapshot = StateSnapshot.model_validate_json(document)
    except ValidationError as e:
        raise StateIntegrityError(f"Saved state does not match the current shape: {e}") from e
    return snapshot.to_state()
