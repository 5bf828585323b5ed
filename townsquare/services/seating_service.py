"""Seating service for cottage assignments and table size."""

import logging

from townsquare.exceptions import InvalidSeat
from townsquare.models import ChannelId, GameState, PlayerId

logger = logging.getLogger(__name__)


class SeatingService:
    """Manages who sits where and how many seats the table has."""

    def __init__(self, state: GameState):
        self.state = state

    def set_player_count(self, number_of_players: int) -> None:
        """Set the table size used for clock-hand rotation.

        Seats already assigned above the new count are kept as-is.
        """
        if number_of_players < 0:
            raise ValueError(f"Number of players cannot be negative, got {number_of_players}")
        beyond = [seat for seat, _ in self.state.players if seat > number_of_players]
        if beyond:
            logger.warning(
                "Player count set to %d but cottages %s are still assigned",
                number_of_players,
                sorted(beyond),
            )
        self.state.number_of_players = number_of_players

    def assign_seat(self, seat: int, player: PlayerId, channel: ChannelId) -> None:
        """Seat a player in a cottage, replacing any previous occupant."""
        if seat < 1:
            raise InvalidSeat(seat)
        previous = self.state.players.lookup(seat)
        self.state.players.assign(seat, player, channel)
        if previous and previous[0] != player:
            logger.info("Cottage %d reassigned from %s to %s", seat, previous[0], player)
        if self.state.players.seat_of(player) != seat:
            logger.warning("Player %s now holds more than one cottage", player)
