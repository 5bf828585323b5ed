"""Vote service for nominations, hands and clock-hand ballots."""

import logging
from dataclasses import dataclass

from townsquare.exceptions import (
    NoActiveVote,
    NomineeNotSeated,
    NotSeatedError,
    PlayerCountNotSet,
)
from townsquare.models import (
    BallotStatus,
    DeadStatus,
    GameState,
    MessageRef,
    PlayerId,
    VoteSession,
    next_seat,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BallotOutcome:
    """What happened when the clock hand reached a cottage."""

    seat: int
    player: PlayerId
    status: BallotStatus  # Status after the attempt
    recorded: bool  # False if the player had already voted
    clock_hand: int  # Where the clock hand moved to


class VoteService:
    """Runs the single live nomination on a GameState."""

    def __init__(self, state: GameState):
        self.state = state

    def opening_clock_hand(self, nominee: PlayerId) -> int:
        """Work out where the clock hand starts for a nomination.

        Voting begins with the cottage after the nominee, so the nominee is
        never the first to be called.

        Raises
        ------
            NomineeNotSeated: the nominee has no cottage
            PlayerCountNotSet: the table size is still 0

        """
        seat = self.state.players.seat_of(nominee)
        if seat is None:
            raise NomineeNotSeated(nominee)
        if self.state.number_of_players == 0:
            raise PlayerCountNotSet()
        return next_seat(seat, self.state.number_of_players)

    def start_vote(
        self,
        nominator: PlayerId,
        nominee: PlayerId,
        description: str,
        message: MessageRef,
    ) -> VoteSession:
        """Open a new vote, discarding any vote already in progress."""
        clock_hand = self.opening_clock_hand(nominee)

        if self.state.current_vote is not None:
            logger.info(
                "Replacing vote on %s with new nomination of %s",
                self.state.current_vote.nominee,
                nominee,
            )

        session = VoteSession(
            nominator=nominator,
            nominee=nominee,
            description=description,
            clock_hand=clock_hand,
            message=message,
        )
        self.state.current_vote = session
        logger.info("%s nominated %s, clock hand starts at cottage %d", nominator, nominee, clock_hand)
        return session

    def active_vote(self) -> VoteSession:
        """Get the live vote, or refuse if there is none."""
        if self.state.current_vote is None:
            raise NoActiveVote()
        return self.state.current_vote

    def set_accusation(self, text: str) -> None:
        self.active_vote().accusation = text

    def set_defense(self, text: str) -> None:
        self.active_vote().defense = text

    def set_hand(self, player: PlayerId, raised: bool) -> bool:
        """Raise or lower a player's hand. Returns False once they have voted."""
        changed = self.active_vote().set_hand(player, raised)
        if not changed:
            logger.debug("Ignoring hand change from %s, ballot already cast", player)
        return changed

    def set_dead_state(self, player: PlayerId, status: DeadStatus) -> None:
        """Record whether a player is dead, for display on the vote."""
        vote = self.active_vote()
        if status is DeadStatus.ALIVE:
            vote.dead_state.pop(player, None)
        else:
            vote.dead_state[player] = status

    def cast_ballot(self, yes: bool) -> BallotOutcome:
        """Record a YES/NO for whoever sits under the clock hand, then advance it.

        The ballot goes to the clock-hand occupant no matter who issued it,
        and ignores their hand position. A player who already voted keeps
        their ballot; the clock hand still moves on.

        Raises
        ------
            NoActiveVote: there is no live vote
            PlayerCountNotSet: the table size is 0
            NotSeatedError: the clock-hand cottage is empty

        """
        vote = self.active_vote()
        if self.state.number_of_players == 0:
            raise PlayerCountNotSet()

        seat = vote.clock_hand
        player = self.state.players.occupant(seat)
        if player is None:
            raise NotSeatedError(seat)

        recorded = vote.record_ballot(player, yes)
        vote.clock_hand = next_seat(seat, self.state.number_of_players)

        if not recorded:
            logger.info("%s already voted %s, ballot not changed", player, vote.ballot_of(player).value)

        return BallotOutcome(
            seat=seat,
            player=player,
            status=vote.ballot_of(player),
            recorded=recorded,
            clock_hand=vote.clock_hand,
        )
