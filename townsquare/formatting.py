"""Formatting utilities for the public vote message and seating chart.

Everything here is a pure function of the state passed in, so the vote
message is always re-rendered in full rather than patched.
"""

from .models import BallotStatus, DeadStatus, PlayerId, SeatingDirectory, VoteSession

NOT_ON_TABLE = "[Starting Player Not On Table]"
EMPTY_COTTAGE = "[Empty Cottage]"
CLOCK_HAND_MARKER = "⬅️"


def mention(player: PlayerId) -> str:
    """Format a player mention."""
    return f"<@{player}>"


def channel_link(channel: str) -> str:
    """Format a channel link."""
    return f"<#{channel}>"


def quote(text: str) -> str:
    """Format text as a quote block, one '> ' per line."""
    return "\n".join(f"> {line}" for line in text.splitlines() or [""])


def ballot_glyph(status: BallotStatus) -> str:
    """Get the symbol shown for a ballot status."""
    if status is BallotStatus.UNSET:
        return " "
    elif status is BallotStatus.HAND_RAISED:
        return "🙋"
    elif status is BallotStatus.HAND_LOWERED:
        return "🙅‍♂️"
    elif status is BallotStatus.YES:
        return "✅"
    elif status is BallotStatus.NO:
        return "❌"
    raise ValueError(f"Unhandled ballot status: {status!r}")


def dead_suffix(status: DeadStatus) -> str:
    """Get the suffix shown after a player's name for their life status."""
    if status is DeadStatus.ALIVE:
        return ""
    elif status is DeadStatus.DEAD_VOTE_AVAILABLE:
        return " (Dead)"
    elif status is DeadStatus.DEAD_VOTE_USED:
        return " (Dead Vote Used)"
    raise ValueError(f"Unhandled dead status: {status!r}")


def format_seating(players: SeatingDirectory, number_of_players: int) -> str:
    """List cottages 1..N with their occupants."""
    lines = []
    for seat in range(1, number_of_players + 1):
        entry = players.lookup(seat)
        if entry is None:
            lines.append(f"{seat}: unassigned")
        else:
            player, channel = entry
            lines.append(f"{seat}: {mention(player)} {channel_link(channel)}")
    return "\n".join(lines)


def format_standing(players: SeatingDirectory, vote: VoteSession, number_of_players: int) -> str:
    """List every cottage in voting order, starting after the nominee.

    The nominee's own cottage closes the cycle. Trailing whitespace is
    trimmed from each line, so a line ends at the last visible symbol.
    """
    start = players.seat_of(vote.nominee)
    if start is None:
        return NOT_ON_TABLE

    lines = []
    clock_hand_player = None

    for position in range(1, number_of_players + 1):
        seat = (start + position - 1) % number_of_players + 1
        player = players.occupant(seat)
        if player is None:
            lines.append(EMPTY_COTTAGE)
            continue

        on_clock_hand = seat == vote.clock_hand
        if on_clock_hand:
            clock_hand_player = player

        line = (
            f"{position}: {mention(player)}{dead_suffix(vote.dead_status_of(player))} "
            f"{ballot_glyph(vote.ballot_of(player))} "
            f"{CLOCK_HAND_MARKER if on_clock_hand else ''}"
        )
        lines.append(line.rstrip())

    if clock_hand_player is not None:
        lines.append(f"Clockhand on {mention(clock_hand_player)}")

    return "\n".join(lines)


def format_vote(players: SeatingDirectory, vote: VoteSession, number_of_players: int) -> str:
    """Render the full public vote message."""
    return "\n".join(
        [
            f"{mention(vote.nominator)} nominates {mention(vote.nominee)}",
            "",
            "**Accusation:**",
            quote(vote.accusation),
            "**Defense:**",
            quote(vote.defense),
            "",
            format_standing(players, vote, number_of_players),
            vote.description,
        ]
    )
