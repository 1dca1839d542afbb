"""
Responders: reusable reply strategies.

A responder can be registered to a bot on its own or used as the handler of
a listener. Responding never raises; failures are logged and swallowed so
one broken responder cannot affect any other listener.
"""

import random
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, Union

from .alias import Alias
from .log import bind_logger
from .models import is_bot

logger = logging.getLogger(__name__)

NO_HELP_TEXT = "There are no listeners with help information"

Sampler = Callable[[Sequence[Any]], Any]


def _check_optional_string(owner: str, option: str, value: Any) -> None:
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{owner} {option} must be a string")


def image_attachment(image: str, label: Optional[str] = None, color: Optional[str] = None) -> dict:
    """
    Build a Slack attachment which displays an image.

    The label becomes the attachment text and prefixes the fallback; color and
    text are left out entirely when not set.
    """
    attachment = {"image_url": image, "fallback": image}
    if color:
        attachment["color"] = color
    if label:
        attachment["text"] = label
        attachment["fallback"] = f"{label} {image}"
    return attachment


class Responder(ABC):
    """Base class for reply strategies."""

    def __init__(self, alias: Union[str, Alias, None] = None, **options):
        if alias is not None and not isinstance(alias, (str, Alias)):
            raise TypeError(f"{type(self).__name__} alias must be a string or Alias")
        self.alias = alias
        self.options = dict(options, alias=alias)
        self.bot = None
        self.log = bind_logger(logger, f"{type(self).__name__}:")

    @classmethod
    def create(cls, **options) -> "Responder":
        return cls(**options)

    def register_to(self, bot) -> "Responder":
        """
        Bind the responder to a bot. Registering again simply re-binds.

        Raises:
            TypeError: If bot is not a bot
        """
        if not is_bot(bot):
            raise TypeError("Expected an instance of Bot")
        self.bot = bot
        self.log = bind_logger(bot.log, f"{type(self).__name__}:")
        return self

    @abstractmethod
    def compose(self) -> Union[str, dict]:
        """Return the content to send for one reply."""

    def respond(self, message: dict) -> Any:
        """
        Reply to an incoming message.

        Returns:
            The transport's send result, or None if anything failed
        """
        try:
            if self.bot is None:
                raise RuntimeError("Responder is not registered to a bot")
            response = self.bot.reply_to(message)
            if self.alias:
                response.as_(self.alias)
            return response.with_(self.compose())
        except Exception as e:
            self.log.error(f"Error: {e}")
            return None

    def to_record(self) -> dict:
        record = dict(self.options)
        if isinstance(self.alias, Alias):
            record["alias"] = self.alias.name
        return record

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MessageResponder(Responder):
    """Reply with a fixed message."""

    def __init__(self, message: Union[str, dict] = None, **options):
        if not isinstance(message, (str, dict)):
            raise TypeError(f"{type(self).__name__} message must be a string or dict")
        super().__init__(message=message, **options)
        self.message = message

    def compose(self) -> Union[str, dict]:
        return self.message


class RandomMessageResponder(Responder):
    """Reply with a message picked at random on every response."""

    def __init__(
        self,
        messages: Sequence[Union[str, dict]] = None,
        sample: Optional[Sampler] = None,
        **options
    ):
        owner = type(self).__name__
        if not isinstance(messages, (list, tuple)):
            raise TypeError(f"{owner} messages must be a list")
        if not messages:
            raise TypeError(f"{owner} messages must not be empty")
        for message in messages:
            if not isinstance(message, (str, dict)):
                raise TypeError(f"{owner} messages must be a list of strings or dicts")
        super().__init__(messages=list(messages), **options)
        self.messages = list(messages)
        self.sample = sample or random.choice

    def compose(self) -> Union[str, dict]:
        return self.sample(self.messages)


class ImageResponder(Responder):
    """Reply with a single image attachment."""

    def __init__(
        self,
        image: str = None,
        label: Optional[str] = None,
        color: Optional[str] = None,
        **options
    ):
        owner = type(self).__name__
        if not isinstance(image, str):
            raise TypeError(f"{owner} image must be a string")
        _check_optional_string(owner, "label", label)
        _check_optional_string(owner, "color", color)
        super().__init__(image=image, label=label, color=color, **options)
        self.image = image
        self.label = label
        self.color = color

    def compose(self) -> dict:
        return {"attachments": [image_attachment(self.image, self.label, self.color)]}


class RandomImageResponder(Responder):
    """
    Reply with an image picked at random on every response.

    Each image is either a URL string or a dict with an ``image`` URL and
    optional ``label`` and ``color``. Per-image values take precedence over
    the responder-wide ``label`` and ``color``.
    """

    def __init__(
        self,
        images: Sequence[Union[str, dict]] = None,
        label: Optional[str] = None,
        color: Optional[str] = None,
        sample: Optional[Sampler] = None,
        **options
    ):
        owner = type(self).__name__
        _check_optional_string(owner, "label", label)
        _check_optional_string(owner, "color", color)
        if not isinstance(images, (list, tuple)):
            raise TypeError(f"{owner} images must be a list")
        if not images:
            raise TypeError(f"{owner} images must not be empty")
        for image in images:
            if isinstance(image, str):
                continue
            if not isinstance(image, dict):
                raise TypeError(f"{owner} images must be a list of strings or dicts")
            if not isinstance(image.get("image"), str):
                raise TypeError(f"{owner} each image dict image must be a string")
            _check_optional_string(owner, "each image dict label", image.get("label"))
            _check_optional_string(owner, "each image dict color", image.get("color"))

        super().__init__(images=list(images), label=label, color=color, **options)
        self.images = list(images)
        self.label = label
        self.color = color
        self.sample = sample or random.choice

    def compose(self) -> dict:
        image = self.sample(self.images)
        if isinstance(image, str):
            image = {"image": image}
        attachment = image_attachment(
            image["image"],
            label=image.get("label") or self.label,
            color=image.get("color") or self.color,
        )
        return {"attachments": [attachment]}


class HelpResponder(Responder):
    """Reply with help text for every registered listener that has some."""

    def compose(self) -> dict:
        return {"text": self.generate_help_output() or NO_HELP_TEXT}

    def generate_help_output(self) -> str:
        blocks = []
        for listener in self.bot.listeners:
            help_info = getattr(listener, "help_info", None)
            if not help_info:
                continue
            text = f":{help_info.emoji}: *{listener.name}:* {help_info.description}"
            for example in help_info.examples:
                text += f"\n:grey_question: Example: `{example}`"
            blocks.append(text)
        return "\n\n".join(blocks)
