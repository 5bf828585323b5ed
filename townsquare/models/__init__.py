"""Data models for seating, vote sessions and persisted state."""

from .seating import ChannelId, PlayerId, SeatingDirectory, next_seat
from .state import GameState
from .voting import BallotStatus, DeadStatus, MessageId, MessageRef, VoteSession

__all__ = [
    "PlayerId",
    "ChannelId",
    "MessageId",
    "SeatingDirectory",
    "next_seat",
    "BallotStatus",
    "DeadStatus",
    "MessageRef",
    "VoteSession",
    "GameState",
]
