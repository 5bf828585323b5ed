"""Command handlers: the storyteller commands and the hand buttons.

Each handler takes the lock only long enough to mutate the state and copy
what it needs to render, then releases it before talking to the chat
platform. A message edit that fails after the state has changed raises
MessageEditFailed; the state is not rolled back.
"""

import copy
import logging
from dataclasses import dataclass
from functools import wraps

from .config import Settings
from .exceptions import (
    MessageEditFailed,
    NotSeatedError,
    NotStoryteller,
    UnknownButton,
    UserRefusal,
)
from .formatting import format_seating, format_vote, mention
from .models import (
    ChannelId,
    DeadStatus,
    GameState,
    MessageRef,
    PlayerId,
    SeatingDirectory,
    VoteSession,
)
from .protocols import MessengerProtocol
from .services import SeatingService, VoteService
from .store import StateStore

logger = logging.getLogger(__name__)

HAND_UP_BUTTON = "hand_up_button"
HAND_DOWN_BUTTON = "hand_down_button"

NOMINATION_BUTTONS = [
    (HAND_UP_BUTTON, "Hand Up", "🙋"),
    (HAND_DOWN_BUTTON, "Hand Down", "🙅"),
]


@dataclass(frozen=True)
class CommandResult:
    """What to tell the user who ran a command."""

    ok: bool
    message: str
    changed: bool = True  # False when nothing was recorded

    @classmethod
    def refused(cls, message: str) -> "CommandResult":
        return cls(ok=False, message=message, changed=False)


@dataclass(frozen=True)
class VoteView:
    """A detached copy of everything needed to render the vote message."""

    players: SeatingDirectory
    vote: VoteSession
    number_of_players: int

    @classmethod
    def capture(cls, state: GameState) -> "VoteView":
        return cls(
            players=copy.deepcopy(state.players),
            vote=copy.deepcopy(state.current_vote),
            number_of_players=state.number_of_players,
        )

    def render(self) -> str:
        return format_vote(self.players, self.vote, self.number_of_players)


def reports_refusals(func):
    """Turn refusals raised by a handler into a refused CommandResult.

    Anything that is not a refusal propagates unchanged.
    """

    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except (UserRefusal, NotSeatedError) as e:
            logger.warning("%s refused: %s", func.__name__, e)
            return CommandResult.refused(str(e))

    return wrapper


class TableCommands:
    """Entry points for every command and button on the table."""

    def __init__(self, store: StateStore, messenger: MessengerProtocol, settings: Settings):
        self.store = store
        self.messenger = messenger
        self.settings = settings

    def _require_storyteller(self, invoker: PlayerId) -> None:
        if not self.settings.is_storyteller(invoker):
            raise NotStoryteller(invoker)

    async def _edit(self, message: MessageRef, text: str) -> None:
        try:
            await self.messenger.edit(message, text)
        except Exception as e:
            logger.error("Failed to update vote message %s: %s", message, e, exc_info=True)
            raise MessageEditFailed(f"Vote state changed but the message could not be updated: {e}") from e

    async def _refresh(self, view: VoteView | None) -> None:
        """Re-render the vote message from a detached view."""
        if view is None:
            return
        await self._edit(view.vote.message, view.render())

    @staticmethod
    def _view_if_voting(state: GameState) -> VoteView | None:
        return VoteView.capture(state) if state.current_vote is not None else None

    # ============ Storyteller commands ============

    @reports_refusals
    async def set_player_count(self, invoker: PlayerId, number_of_players: int) -> CommandResult:
        self._require_storyteller(invoker)
        if number_of_players < 0:
            raise UserRefusal("Number of players cannot be negative")

        async with self.store.write() as state:
            SeatingService(state).set_player_count(number_of_players)
            view = self._view_if_voting(state)

        await self._refresh(view)
        return CommandResult(ok=True, message=f"Number of players set to {number_of_players}")

    @reports_refusals
    async def assign_seat(
        self,
        invoker: PlayerId,
        seat: int,
        player: PlayerId,
        channel: ChannelId,
    ) -> CommandResult:
        self._require_storyteller(invoker)

        async with self.store.write() as state:
            SeatingService(state).assign_seat(seat, player, channel)
            players = copy.deepcopy(state.players)
            number_of_players = state.number_of_players
            view = self._view_if_voting(state)

        await self._refresh(view)
        return CommandResult(ok=True, message=format_seating(players, number_of_players))

    @reports_refusals
    async def start_vote(
        self,
        invoker: PlayerId,
        nominator: PlayerId,
        nominee: PlayerId,
        description: str,
        channel: ChannelId,
    ) -> CommandResult:
        """Open a nomination and post the vote message with the hand buttons."""
        self._require_storyteller(invoker)

        async with self.store.read() as state:
            clock_hand = VoteService(state).opening_clock_hand(nominee)
            draft = VoteView(
                players=copy.deepcopy(state.players),
                vote=VoteSession(
                    nominator=nominator,
                    nominee=nominee,
                    description=description,
                    clock_hand=clock_hand,
                    message=MessageRef(message_id="", channel_id=channel),
                ),
                number_of_players=state.number_of_players,
            )

        posted_text = draft.render()
        message = await self.messenger.post(channel, posted_text, NOMINATION_BUTTONS)

        try:
            async with self.store.write() as state:
                VoteService(state).start_vote(nominator, nominee, description, message)
                view = VoteView.capture(state)
        except UserRefusal as e:
            # The table changed while posting; no session owns this message
            logger.warning("Withdrawing nomination message %s: %s", message, e)
            await self._edit(message, f"~~{mention(nominator)} nominates {mention(nominee)}~~\nNomination withdrawn: {e}")
            raise

        # Seating may have changed while the message was being posted
        if view.render() != posted_text:
            await self._refresh(view)

        return CommandResult(ok=True, message=f"{mention(nominator)} has nominated {mention(nominee)}")

    @reports_refusals
    async def set_accusation(self, invoker: PlayerId, accusation: str) -> CommandResult:
        self._require_storyteller(invoker)

        async with self.store.write() as state:
            VoteService(state).set_accusation(accusation)
            view = VoteView.capture(state)

        await self._refresh(view)
        return CommandResult(ok=True, message="Accusation Set")

    @reports_refusals
    async def set_defense(self, invoker: PlayerId, defense: str) -> CommandResult:
        self._require_storyteller(invoker)

        async with self.store.write() as state:
            VoteService(state).set_defense(defense)
            view = VoteView.capture(state)

        await self._refresh(view)
        return CommandResult(ok=True, message="Defense Set")

    @reports_refusals
    async def cast_ballot(self, invoker: PlayerId, yes: bool) -> CommandResult:
        """Record the clock-hand player's YES/NO and move the clock hand on."""
        self._require_storyteller(invoker)

        async with self.store.write() as state:
            outcome = VoteService(state).cast_ballot(yes)
            view = VoteView.capture(state)

        await self._refresh(view)
        if not outcome.recorded:
            return CommandResult(
                ok=True,
                message=f"{mention(outcome.player)} already voted {outcome.status.value}",
                changed=False,
            )
        return CommandResult(ok=True, message=f"{mention(outcome.player)} votes {outcome.status.value}")

    @reports_refusals
    async def set_dead_state(self, invoker: PlayerId, player: PlayerId, status: DeadStatus) -> CommandResult:
        self._require_storyteller(invoker)

        async with self.store.write() as state:
            VoteService(state).set_dead_state(player, status)
            view = VoteView.capture(state)

        await self._refresh(view)
        return CommandResult(ok=True, message=f"{mention(player)} marked {status.value}")

    # ============ Anyone ============

    @reports_refusals
    async def set_hand_state(self, player: PlayerId, raised: bool) -> CommandResult:
        """Raise or lower the invoking player's hand."""
        async with self.store.write() as state:
            changed = VoteService(state).set_hand(player, raised)
            view = VoteView.capture(state)

        if not changed:
            return CommandResult(ok=True, message="You have already voted", changed=False)

        await self._refresh(view)
        return CommandResult(ok=True, message="Hand raised" if raised else "Hand lowered")

    async def handle_button(self, custom_id: str, player: PlayerId) -> CommandResult:
        """Route a button press on the vote message to the pressing player."""
        if custom_id == HAND_UP_BUTTON:
            return await self.set_hand_state(player, raised=True)
        if custom_id == HAND_DOWN_BUTTON:
            return await self.set_hand_state(player, raised=False)
        logger.warning("Unknown button %s pressed by %s", custom_id, player)
        return CommandResult.refused(str(UnknownButton(custom_id)))

    @reports_refusals
    async def show_seats(self) -> CommandResult:
        async with self.store.read() as state:
            text = format_seating(state.players, state.number_of_players)
        return CommandResult(ok=True, message=text or "No cottages", changed=False)

    @reports_refusals
    async def show_vote(self) -> CommandResult:
        async with self.store.read() as state:
            VoteService(state).active_vote()
            view = VoteView.capture(state)
        return CommandResult(ok=True, message=view.render(), changed=False)
