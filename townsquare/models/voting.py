"""Vote session models and per-player ballot tracking."""

from dataclasses import dataclass, field
from enum import Enum

from .seating import ChannelId, PlayerId

MessageId = str


class BallotStatus(str, Enum):
    """Where a player stands in the current vote.

    YES and NO are terminal: once recorded they never change.
    """

    UNSET = "None"
    HAND_RAISED = "HandRaised"
    HAND_LOWERED = "HandLowered"
    YES = "Yes"
    NO = "No"

    def is_terminal(self) -> bool:
        """Check if this is a final, publicly cast ballot."""
        if self is BallotStatus.YES or self is BallotStatus.NO:
            return True
        if (
            self is BallotStatus.UNSET
            or self is BallotStatus.HAND_RAISED
            or self is BallotStatus.HAND_LOWERED
        ):
            return False
        raise ValueError(f"Unhandled ballot status: {self!r}")


class DeadStatus(str, Enum):
    """Life status of a player, shown next to their name on the vote."""

    ALIVE = "Alive"
    DEAD_VOTE_AVAILABLE = "DeadVoteAvailable"
    DEAD_VOTE_USED = "DeadVoteUsed"


@dataclass(frozen=True)
class MessageRef:
    """Where the public vote message lives, so it can be edited later."""

    message_id: MessageId
    channel_id: ChannelId


@dataclass
class VoteSession:
    """The single live nomination and its ballots."""

    nominator: PlayerId
    nominee: PlayerId
    description: str
    clock_hand: int
    message: MessageRef
    accusation: str = ""
    defense: str = ""
    vote_state: dict[PlayerId, BallotStatus] = field(default_factory=dict)
    dead_state: dict[PlayerId, DeadStatus] = field(default_factory=dict)

    def ballot_of(self, player: PlayerId) -> BallotStatus:
        """Get a player's ballot status, UNSET if they have not acted."""
        return self.vote_state.get(player, BallotStatus.UNSET)

    def dead_status_of(self, player: PlayerId) -> DeadStatus:
        """Get a player's life status, ALIVE unless recorded otherwise."""
        return self.dead_state.get(player, DeadStatus.ALIVE)

    def set_hand(self, player: PlayerId, raised: bool) -> bool:
        """Raise or lower a player's hand.

        Returns False without changing anything if the player has already
        cast a YES/NO ballot.
        """
        if self.ballot_of(player).is_terminal():
            return False
        self.vote_state[player] = BallotStatus.HAND_RAISED if raised else BallotStatus.HAND_LOWERED
        return True

    def record_ballot(self, player: PlayerId, yes: bool) -> bool:
        """Record a public YES/NO for a player, regardless of hand position.

        Returns False if a terminal ballot was already recorded.
        """
        if self.ballot_of(player).is_terminal():
            return False
        self.vote_state[player] = BallotStatus.YES if yes else BallotStatus.NO
        return True

    def __repr__(self) -> str:
        return (
            f"VoteSession({self.nominator} → {self.nominee}, "
            f"clock hand at {self.clock_hand}, {len(self.vote_state)} ballots)"
        )
