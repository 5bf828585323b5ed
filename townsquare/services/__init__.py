"""Service layer for game logic and state management."""

from .seating_service import SeatingService
from .vote_service import BallotOutcome, VoteService

__all__ = [
    "SeatingService",
    "VoteService",
    "BallotOutcome",
]
