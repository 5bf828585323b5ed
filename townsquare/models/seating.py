"""Seating directory: which player sits in which cottage."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional

PlayerId = str
ChannelId = str


def next_seat(seat: int, number_of_players: int) -> int:
    """Return the seat clockwise from ``seat``, wrapping from N back to 1.

    Raises ZeroDivisionError when ``number_of_players`` is 0.
    """
    return seat % number_of_players + 1


@dataclass
class SeatingDirectory:
    """Mapping of seat number -> (player, private channel).

    A player may appear in more than one seat; nothing here prevents it.
    """

    seats: dict[int, tuple[PlayerId, ChannelId]] = field(default_factory=dict)

    def assign(self, seat: int, player: PlayerId, channel: ChannelId) -> None:
        """Put a player in a seat, replacing whoever sat there before."""
        if seat < 1:
            raise ValueError(f"Seat numbers start at 1, got {seat}")
        self.seats[seat] = (player, channel)

    def lookup(self, seat: int) -> Optional[tuple[PlayerId, ChannelId]]:
        """Get the (player, channel) occupying a seat, if any."""
        return self.seats.get(seat)

    def occupant(self, seat: int) -> Optional[PlayerId]:
        """Get just the player occupying a seat, if any."""
        entry = self.seats.get(seat)
        return entry[0] if entry else None

    def seat_of(self, player: PlayerId) -> Optional[int]:
        """Find the first seat held by a player.

        If the player holds several seats, which one comes back depends on
        iteration order.
        """
        for seat, (occupant, _) in self.seats.items():
            if occupant == player:
                return seat
        return None

    def __iter__(self) -> Iterator[tuple[int, tuple[PlayerId, ChannelId]]]:
        return iter(self.seats.items())

    def __len__(self) -> int:
        return len(self.seats)

    def __repr__(self) -> str:
        return f"SeatingDirectory({len(self.seats)} seats assigned)"
