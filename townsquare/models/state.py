"""The complete persisted game state."""

from dataclasses import dataclass, field
from typing import Optional

from .seating import SeatingDirectory
from .voting import VoteSession


@dataclass
class GameState:
    """Everything the bot remembers between restarts."""

    players: SeatingDirectory = field(default_factory=SeatingDirectory)
    number_of_players: int = 0
    current_vote: Optional[VoteSession] = None
