"""Console driver: run one table command against the saved state."""

import argparse
import asyncio
import logging
import sys
from uuid import uuid4

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .commands import CommandResult, TableCommands
from .config import Settings
from .exceptions import MessageEditFailed, StateIntegrityError
from .models import ChannelId, DeadStatus, MessageRef
from .store import StateStore

console = Console()
logger = logging.getLogger(__name__)

DEAD_STATUS_CHOICES = {
    "alive": DeadStatus.ALIVE,
    "dead": DeadStatus.DEAD_VOTE_AVAILABLE,
    "used": DeadStatus.DEAD_VOTE_USED,
}


class ConsoleMessenger:
    """Prints the public vote message instead of sending it to a chat server."""

    async def post(self, channel: ChannelId, text: str, buttons: list[tuple[str, str, str]]) -> MessageRef:
        message = MessageRef(message_id=uuid4().hex, channel_id=channel)
        button_row = "  ".join(f"[{emoji} {label}]" for _, label, emoji in buttons)
        console.print(Panel(f"{text}\n\n{button_row}", title=f"#{channel} (new message)"))
        return message

    async def edit(self, message: MessageRef, text: str) -> None:
        console.print(Panel(text, title=f"#{message.channel_id} (edited {message.message_id[:8]})"))


def display_result(result: CommandResult) -> None:
    """Show the reply the invoking user would see."""
    if not result.ok:
        console.print(f"[bold red]✗ {result.message}[/bold red]")
    elif not result.changed:
        console.print(f"[yellow]{result.message}[/yellow]")
    else:
        console.print(f"[green]{result.message}[/green]")


async def display_seats(store: StateStore) -> None:
    """Show the seating chart as a table."""
    async with store.read() as state:
        table = Table(title=f"Cottages ({state.number_of_players} players)")
        table.add_column("Cottage", style="cyan")
        table.add_column("Player", style="magenta")
        table.add_column("Channel", style="yellow")
        for seat in range(1, state.number_of_players + 1):
            entry = state.players.lookup(seat)
            if entry is None:
                table.add_row(str(seat), "unassigned", "")
            else:
                table.add_row(str(seat), entry[0], entry[1])
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="townsquare",
        description="Run nomination and clock-hand votes for a social deduction game",
    )
    parser.add_argument("--as", dest="invoker", default="storyteller", help="Who is running the command")
    parser.add_argument("--state", help="Path to the state snapshot (overrides TOWNSQUARE_STATE_PATH)")
    parser.add_argument("--env-file", help="Path to a .env file")

    sub = parser.add_subparsers(dest="command", required=True)

    players = sub.add_parser("players", help="Set the number of players")
    players.add_argument("count", type=int)

    assign = sub.add_parser("assign", help="Assign a player to a cottage")
    assign.add_argument("seat", type=int)
    assign.add_argument("player")
    assign.add_argument("channel")

    sub.add_parser("seats", help="Show the seating chart")

    nominate = sub.add_parser("nominate", help="Start a vote")
    nominate.add_argument("nominator")
    nominate.add_argument("nominee")
    nominate.add_argument("description", help='eg. "It will take 5 to tie, 6 to execute"')
    nominate.add_argument("--channel", default="town-square")

    accuse = sub.add_parser("accuse", help="Set the accusation")
    accuse.add_argument("text")

    defend = sub.add_parser("defend", help="Set the defense")
    defend.add_argument("text")

    hand = sub.add_parser("hand", help="Raise or lower a player's hand")
    hand.add_argument("player")
    hand.add_argument("position", choices=["up", "down"])

    vote = sub.add_parser("vote", help="Record the clock-hand player's vote")
    vote.add_argument("ballot", choices=["yes", "no"])

    dead = sub.add_parser("dead", help="Mark a player's life status")
    dead.add_argument("player")
    dead.add_argument("status", choices=list(DEAD_STATUS_CHOICES))

    sub.add_parser("show", help="Show the current vote")

    return parser


async def run_command(args: argparse.Namespace, commands: TableCommands) -> CommandResult:
    """Dispatch a parsed command to the matching handler."""
    invoker = args.invoker
    if args.command == "players":
        return await commands.set_player_count(invoker, args.count)
    elif args.command == "assign":
        return await commands.assign_seat(invoker, args.seat, args.player, args.channel)
    elif args.command == "seats":
        result = await commands.show_seats()
        if result.ok:
            await display_seats(commands.store)
        return result
    elif args.command == "nominate":
        return await commands.start_vote(invoker, args.nominator, args.nominee, args.description, args.channel)
    elif args.command == "accuse":
        return await commands.set_accusation(invoker, args.text)
    elif args.command == "defend":
        return await commands.set_defense(invoker, args.text)
    elif args.command == "hand":
        return await commands.set_hand_state(args.player, raised=args.position == "up")
    elif args.command == "vote":
        return await commands.cast_ballot(invoker, yes=args.ballot == "yes")
    elif args.command == "dead":
        return await commands.set_dead_state(invoker, args.player, DEAD_STATUS_CHOICES[args.status])
    elif args.command == "show":
        return await commands.show_vote()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env(args.env_file)

    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    state_path = args.state or settings.state_path
    try:
        store = StateStore.load(state_path)
    except StateIntegrityError as e:
        logger.critical("Cannot start: %s", e)
        return 2

    commands = TableCommands(store, ConsoleMessenger(), settings)
    try:
        result = asyncio.run(run_command(args, commands))
    except MessageEditFailed as e:
        console.print(f"[bold red]{e}[/bold red]")
        return 1

    if args.command != "seats":
        display_result(result)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
