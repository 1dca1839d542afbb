"""
Outgoing message composition.

A Response is built fresh for every reply. Fields are accumulated with an
existing-wins merge: once a key is set, later sources never overwrite it.
The intended call order is ``to() -> [as_()] -> with_()``.
"""

import logging
from typing import Any, Optional, Union

from .alias import Alias
from .errors import MessageSendError
from .models import is_bot

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE_FIELDS = ("text", "ts", "user")


def merge_missing(accumulated: dict, source: dict) -> dict:
    """Return a copy of accumulated with only the keys from source it lacks."""
    merged = dict(accumulated)
    for key, value in source.items():
        if key not in merged:
            merged[key] = value
    return merged


class Response:
    """A reply to a single incoming Slack message."""

    def __init__(self, bot):
        if not is_bot(bot):
            raise TypeError("Expected an instance of Bot")
        self.bot = bot
        self.incoming_message: Optional[dict] = None
        self.alias: Optional[Alias] = None
        self.message: dict[str, Any] = {}

    @classmethod
    def create(cls, bot) -> "Response":
        return cls(bot)

    def to(self, incoming_message: dict) -> "Response":
        """
        Set the message being replied to.

        Args:
            incoming_message: Slack message event with text, ts and user strings

        Raises:
            TypeError: If the message is not a dict or a required field is missing
        """
        if not isinstance(incoming_message, dict):
            raise TypeError("Expected a dict")
        for field_name in REQUIRED_MESSAGE_FIELDS:
            if not isinstance(incoming_message.get(field_name), str):
                raise TypeError(f"Expected a {field_name} property on Slack message")

        self.incoming_message = incoming_message
        return self

    def as_(self, alias: Union[str, Alias]) -> "Response":
        """
        Reply under an alias, given either the alias or its registered name.

        Raises:
            TypeError: If the name is not registered or the value is not an Alias
        """
        if isinstance(alias, str):
            if alias not in self.bot.alias:
                raise TypeError(f"{alias} is not the name of a registered alias")
            alias = self.bot.alias[alias]
        if not isinstance(alias, Alias):
            raise TypeError("Expected a string or an instance of Alias")

        self.message = merge_missing(self.message, alias.compose_message())
        self.alias = alias
        return self

    def with_(self, outgoing_message: Union[str, dict]) -> Any:
        """
        Add the message content and send the reply.

        Args:
            outgoing_message: Message text, or a dict of Slack message fields

        Returns:
            The transport's result for the sent message

        Raises:
            TypeError: If the content is not a string or dict, or to() was not called
            MessageSendError: If Slack rejects the message
        """
        if isinstance(outgoing_message, str):
            outgoing_message = {"text": outgoing_message}
        if not isinstance(outgoing_message, dict):
            raise TypeError("Expected a dict")
        if self.incoming_message is None:
            raise TypeError("Response has no incoming message, call to() first")

        self.message = merge_missing(self.message, outgoing_message)

        try:
            return self.bot.transport.send(self.incoming_message, self.message)
        except Exception as e:
            raise MessageSendError(
                f"Bot could not send message to Slack: {e}", cause=e
            ) from e

    def to_record(self) -> dict:
        return dict(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message.get('text')!r})"
