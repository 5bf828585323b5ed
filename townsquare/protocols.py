"""Protocol definitions for type checking."""

from typing import Protocol

from .models import ChannelId, MessageRef


class MessengerProtocol(Protocol):
    """Protocol for whatever posts and edits the public vote message."""

    async def post(self, channel: ChannelId, text: str, buttons: list[tuple[str, str, str]]) -> MessageRef:
        """Post a new message.

        Args:
        ----
            channel: Where to post
            text: Message content
            buttons: (custom_id, label, emoji) for each button to attach

        Returns:
        -------
            Reference to the posted message, for later edits

        """
        ...

    async def edit(self, message: MessageRef, text: str) -> None:
        """Replace the content of a previously posted message.

        Args:
        ----
            message: The message to edit
            text: New content

        """
        ...
