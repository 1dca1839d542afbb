"""
Shared enums, value types and the bot capability check.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AvatarKind(Enum):
    """How an alias avatar is presented in Slack."""
    EMOJI = "emoji"
    URL = "url"


class TriggerType(Enum):
    """Addressing modes a listener can subscribe to."""
    AMBIENT = "ambient"
    DIRECT_MENTION = "direct_mention"
    DIRECT_MESSAGE = "direct_message"


@dataclass(frozen=True)
class HelpInfo:
    """Help metadata attached to a listener, rendered by the help responder."""
    emoji: str
    description: str
    examples: list[str] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: Any) -> "HelpInfo":
        """Accept either a HelpInfo or a mapping of its fields."""
        if isinstance(value, HelpInfo):
            return value
        if not isinstance(value, dict):
            raise TypeError("Listener help must be a HelpInfo or a dict")
        emoji = value.get("emoji")
        description = value.get("description")
        examples = value.get("examples", [])
        if not isinstance(emoji, str) or not isinstance(description, str):
            raise TypeError("Listener help must have an emoji and description string")
        if not isinstance(examples, (list, tuple)) or not all(
            isinstance(example, str) for example in examples
        ):
            raise TypeError("Listener help examples must be a list of strings")
        return cls(emoji=emoji.strip(":"), description=description, examples=list(examples))


def is_bot(candidate: Any) -> bool:
    """
    Check that an object offers everything an extension needs from a bot.

    Extensions register against anything shaped like a bot: an alias map,
    a listener list, a logger, a transport and a reply_to() factory.
    """
    return (
        isinstance(getattr(candidate, "alias", None), dict)
        and isinstance(getattr(candidate, "listeners", None), list)
        and getattr(candidate, "log", None) is not None
        and getattr(candidate, "transport", None) is not None
        and callable(getattr(candidate, "reply_to", None))
    )
