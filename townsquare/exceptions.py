"""Exception types for the voting engine.

Refusals are reported back to whoever ran the command and never change
state. Everything else is a real failure.
"""


class TownSquareError(Exception):
    """Base class for all voting engine errors."""


# ============ Refusals (reported, no mutation) ============


class UserRefusal(TownSquareError):
    """A command was turned down; the message is safe to show the user."""


class NoActiveVote(UserRefusal):
    def __init__(self):
        super().__init__("There is no currently active vote")


class NomineeNotSeated(UserRefusal):
    def __init__(self, nominee):
        self.nominee = nominee
        super().__init__("Nominee is not assigned to a cottage!")


class NotStoryteller(UserRefusal):
    def __init__(self, invoker):
        self.invoker = invoker
        super().__init__("You must be a storyteller to use this command")


class PlayerCountNotSet(UserRefusal):
    def __init__(self):
        super().__init__("Number of players is not set")


class InvalidSeat(UserRefusal):
    def __init__(self, seat):
        self.seat = seat
        super().__init__(f"Cottage {seat} is not a valid cottage number")


class UnknownButton(UserRefusal):
    def __init__(self, custom_id):
        self.custom_id = custom_id
        super().__init__(f"Unknown button: {custom_id}")


# ============ Vote engine ============


class NotSeatedError(TownSquareError):
    """The clock hand points at an empty cottage, so nobody can be made to vote."""

    def __init__(self, seat):
        self.seat = seat
        super().__init__(f"Nobody is seated in cottage {seat}")


# ============ Persistence / external I/O ============


class StateIntegrityError(TownSquareError):
    """The saved snapshot does not match the current state shape."""


class MessageEditFailed(TownSquareError):
    """State changed, but the public vote message could not be updated."""
