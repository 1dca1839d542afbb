"""
The bot host.

Wires the transport, directory cache and registries together and exposes
the extension entry point:

    bot = Bot(name="ExampleBot", slack_token=..., app_token=...)
    bot.use(CommandListener(
        name="meaning of life",
        trigger=re.compile(r"what('?s| is) the meaning of life", re.I),
        handler=MessageResponder(message="42"),
    ))
    bot.connect()
"""

import logging
import importlib
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from .alias import Alias
from .directory import DirectoryCache
from .errors import BotConnectionError
from .listener import Listener
from .log import LoggerLike, bind_logger
from .responder import Responder
from .response import Response
from .transport import SlackTransport

logger = logging.getLogger(__name__)

SLACK_LOGGERS = ("slack_bolt", "slack_sdk")


class Bot:
    """A Slack bot with its aliases, listeners and directory cache."""

    def __init__(
        self,
        name: str = None,
        slack_token: str = None,
        app_token: Optional[str] = None,
        log: Optional[LoggerLike] = None,
        transport: Any = None,
        max_workers: int = 8,
        include_slack_logs: bool = False,
    ):
        if not name:
            raise TypeError("Bot name must be set")
        if not slack_token:
            raise TypeError("Bot slack_token must be set")

        self.name = name
        self.slack_token = slack_token
        self.log = bind_logger(log or logger, f"{name}:")
        self.alias: dict[str, Alias] = {}
        self.listeners: list[Listener] = []
        self.executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=f"{name}-responder"
        )

        if not include_slack_logs:
            for logger_name in SLACK_LOGGERS:
                logging.getLogger(logger_name).setLevel(logging.WARNING)

        self.transport = (
            transport if transport is not None
            else SlackTransport(slack_token, app_token)
        )

        self.data: DirectoryCache = DirectoryCache.create()
        self.data.register_to(self)

        self.log.info("initialization complete")

    def use(self, extension: Any) -> Any:
        """
        Extend the bot.

        Args:
            extension: An Alias, Listener or Responder to register; a callable
                which is called with the bot; or the dotted path of a module
                whose ``register`` callable is used

        Returns:
            The result of registering or calling the extension

        Raises:
            TypeError: If the extension type is not supported
        """
        if isinstance(extension, str):
            return self.use(self._load_extension(extension))
        if isinstance(extension, (Alias, Listener, Responder)):
            return extension.register_to(self)
        if callable(extension):
            return extension(self)
        raise TypeError(
            f'Bot extension cannot be of type "{type(extension).__name__}"'
        )

    def _load_extension(self, module_path: str) -> Any:
        module = importlib.import_module(module_path)
        register = getattr(module, "register", None)
        if not callable(register):
            raise TypeError(f"Extension module '{module_path}' has no register() function")
        self.log.info(f"Loaded extension module {module_path}")
        return register

    def reply_to(self, incoming_message: dict) -> Response:
        """Start a Response to an incoming message."""
        return Response.create(self).to(incoming_message)

    def connect(self) -> None:
        """
        Connect to Slack.

        Raises:
            BotConnectionError: If the connection could not be made
        """
        try:
            self.transport.connect()
        except Exception as e:
            raise BotConnectionError(
                f"Bot could not connect to Slack: {e}", cause=e
            ) from e
        self.log.info("connected to Slack")

    def disconnect(self) -> None:
        """Close the Slack connection and wait for in-flight replies."""
        self.transport.disconnect()
        self.executor.shutdown(wait=True)
        self.log.info("disconnected from Slack")

    def to_record(self) -> dict:
        return {"name": self.name}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
