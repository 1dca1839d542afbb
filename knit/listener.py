"""
Listeners bind trigger patterns to handlers.

Two variants exist:
- AmbientListener fires on any message which matches its trigger
- CommandListener fires only when the bot is mentioned directly or sent a DM

A handler is either a plain callable, which is called with the incoming
message, or a Responder, whose reply is sent from the bot's worker pool.
"""

import re
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from .log import bind_logger
from .models import HelpInfo, TriggerType, is_bot
from .responder import Responder

logger = logging.getLogger(__name__)

Trigger = Union[str, re.Pattern, list, tuple]


class HandlerKind(Enum):
    CALLBACK = "callback"
    RESPONDER = "responder"


@dataclass(frozen=True)
class Handler:
    """A listener handler tagged with how it should be invoked."""
    kind: HandlerKind
    target: Union[Callable[[dict], Any], Responder]

    @classmethod
    def wrap(cls, handler: Any, owner: str) -> "Handler":
        if isinstance(handler, Responder):
            return cls(HandlerKind.RESPONDER, handler)
        if callable(handler):
            return cls(HandlerKind.CALLBACK, handler)
        raise TypeError(f"{owner} handler must be a function or Responder instance")


def _is_trigger_part(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value)
    return isinstance(value, re.Pattern)


def validate_trigger(trigger: Any, owner: str) -> Trigger:
    """Check a trigger is a string, compiled pattern, or a list of those."""
    if _is_trigger_part(trigger):
        return trigger
    if isinstance(trigger, (list, tuple)) and trigger and all(
        _is_trigger_part(part) for part in trigger
    ):
        return list(trigger)
    raise TypeError(f"{owner} trigger must be a string, list, or regular expression")


class Listener(ABC):
    """Base class for listeners. Use AmbientListener or CommandListener."""

    def __init__(
        self,
        name: str = None,
        trigger: Trigger = None,
        handler: Union[Callable[[dict], Any], Responder] = None,
        help_info: Union[HelpInfo, dict, None] = None,
    ):
        owner = type(self).__name__
        if not name or not isinstance(name, str):
            raise TypeError(f"{owner} name must be set")
        self.name = name
        self.trigger = validate_trigger(trigger, owner)
        self.handler = Handler.wrap(handler, owner)
        self.help_info = HelpInfo.from_value(help_info) if help_info is not None else None
        self.bot = None
        self.log = bind_logger(logger, f"{owner} ({name}):")

    @property
    @abstractmethod
    def trigger_types(self) -> frozenset[TriggerType]:
        """The addressing modes this listener responds to."""

    @classmethod
    def create(cls, **options) -> "Listener":
        return cls(**options)

    def register_to(self, bot) -> "Listener":
        """
        Register the listener to a bot and subscribe its trigger.

        A Responder handler is registered to the same bot along the way.

        Raises:
            TypeError: If bot is not a bot
        """
        if not is_bot(bot):
            raise TypeError("Expected an instance of Bot")

        self.bot = bot
        bot.listeners.append(self)

        if self.handler.kind is HandlerKind.RESPONDER:
            self.handler.target.register_to(bot)

        self.log = bind_logger(bot.log, f"{type(self).__name__} ({self.name}):")
        self.log.info("Registered to bot")

        bot.transport.subscribe(self.trigger, self.trigger_types, self.handle_message)
        return self

    def handle_message(self, message: dict) -> Optional[Union[Future, Any]]:
        """
        Hand a matched message to the handler.

        Responders run on the bot's executor and are not waited on; the
        returned Future resolves to the send result. Callbacks are called
        directly and their errors propagate.
        """
        if self.handler.kind is HandlerKind.RESPONDER:
            return self.bot.executor.submit(self.handler.target.respond, message)
        return self.handler.target(message)

    def to_record(self) -> dict:
        return {"name": self.name}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class AmbientListener(Listener):
    """Listens for a trigger in any message the bot can see."""

    @property
    def trigger_types(self) -> frozenset[TriggerType]:
        return frozenset({TriggerType.AMBIENT})


class CommandListener(Listener):
    """Listens for a trigger in messages which mention or DM the bot."""

    @property
    def trigger_types(self) -> frozenset[TriggerType]:
        return frozenset({TriggerType.DIRECT_MENTION, TriggerType.DIRECT_MESSAGE})
