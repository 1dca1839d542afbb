"""
knit: a small framework for Slack bots.

Register aliases, listeners and responders against a Bot, then connect.
"""

from .alias import Alias
from .bot import Bot
from .config import BotConfig
from .directory import DirectoryCache
from .errors import BotConnectionError, DirectoryError, KnitError, MessageSendError
from .listener import AmbientListener, CommandListener, Handler, HandlerKind, Listener
from .models import AvatarKind, HelpInfo, TriggerType
from .responder import (
    HelpResponder,
    ImageResponder,
    MessageResponder,
    RandomImageResponder,
    RandomMessageResponder,
    Responder,
)
from .response import Response
from .transport import SlackTransport

__all__ = [
    'Alias',
    'AmbientListener',
    'AvatarKind',
    'Bot',
    'BotConfig',
    'BotConnectionError',
    'CommandListener',
    'DirectoryCache',
    'DirectoryError',
    'Handler',
    'HandlerKind',
    'HelpInfo',
    'HelpResponder',
    'ImageResponder',
    'KnitError',
    'Listener',
    'MessageResponder',
    'MessageSendError',
    'RandomImageResponder',
    'RandomMessageResponder',
    'Responder',
    'Response',
    'SlackTransport',
    'TriggerType',
]
