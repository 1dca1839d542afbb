"""
Bot aliases.

An alias lets the bot post as a different Slack identity by overriding the
username and icon of outgoing messages:

    bot.use(Alias(name="DiceBot", avatar="game_die"))
    bot.reply_to(message).as_("DiceBot").with_("4")
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Any

from .log import bind_logger
from .models import AvatarKind, is_bot

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = ":grey_question:"

URL_AVATAR = re.compile(r"https?://.+", re.IGNORECASE)
EMOJI_AVATAR = re.compile(r":?([^:]+):?")


def classify_avatar(avatar: Any) -> tuple[str, AvatarKind]:
    """
    Work out whether an avatar is an image URL or an emoji name.

    Emoji names are normalized to the ``:name:`` form Slack expects.

    Raises:
        TypeError: When the avatar is neither
    """
    if isinstance(avatar, str):
        if URL_AVATAR.fullmatch(avatar):
            return avatar, AvatarKind.URL
        match = EMOJI_AVATAR.fullmatch(avatar)
        if match:
            return f":{match.group(1)}:", AvatarKind.EMOJI
    raise TypeError("Alias avatar must be a URL or emoji name")


@dataclass(frozen=True)
class Alias:
    """An alternate name and avatar the bot can reply as."""
    name: str
    avatar: str = DEFAULT_AVATAR
    avatar_kind: AvatarKind = field(init=False)

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise TypeError("Alias name must be set")
        avatar, kind = classify_avatar(self.avatar)
        object.__setattr__(self, "avatar", avatar)
        object.__setattr__(self, "avatar_kind", kind)

    @classmethod
    def create(cls, **options) -> "Alias":
        return cls(**options)

    def compose_message(self) -> dict:
        """The identity fields this alias contributes to an outgoing message."""
        return {
            "username": self.name,
            f"icon_{self.avatar_kind.value}": self.avatar,
        }

    def register_to(self, bot) -> "Alias":
        """
        Register the alias to a bot, replacing any alias with the same name.

        Raises:
            TypeError: If bot is not a bot
        """
        if not is_bot(bot):
            raise TypeError("Expected an instance of Bot")

        bot.alias[self.name] = self
        bind_logger(bot.log, f"{type(self).__name__} ({self.name}):").info(
            "Registered to bot"
        )
        return self

    def to_record(self) -> dict:
        return {"name": self.name, "avatar": self.avatar}
