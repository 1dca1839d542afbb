"""
Slack transport built on slack_bolt.

Handles:
- Receiving message events over Socket Mode
- Matching every subscribed trigger against each message
- Posting replies and paging through directory listings via the Web API
"""

import re
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from .models import TriggerType

logger = logging.getLogger(__name__)

LIST_METHODS = {
    "channels": "conversations_list",
    "users": "users_list",
}


def compile_trigger(trigger: Any) -> list[re.Pattern]:
    """Turn a trigger into patterns. Strings match literally, ignoring case."""
    parts = trigger if isinstance(trigger, (list, tuple)) else [trigger]
    patterns = []
    for part in parts:
        if isinstance(part, re.Pattern):
            patterns.append(part)
        else:
            patterns.append(re.compile(re.escape(part), re.IGNORECASE))
    return patterns


@dataclass
class Subscription:
    """A trigger registered against a set of addressing modes."""
    patterns: list[re.Pattern]
    trigger_types: frozenset
    on_match: Callable[[dict], Any]

    def match(self, text: str) -> Optional[re.Match]:
        for pattern in self.patterns:
            found = pattern.search(text)
            if found:
                return found
        return None


def addressing(event: dict, bot_user_id: Optional[str]) -> tuple[set, str]:
    """
    Work out how a message addresses the bot.

    Returns:
        Tuple of (trigger types that apply, text with any leading mention removed)
    """
    text = event.get("text") or ""
    modes = {TriggerType.AMBIENT}

    if event.get("channel_type") == "im":
        modes.add(TriggerType.DIRECT_MESSAGE)

    if bot_user_id:
        mention = f"<@{bot_user_id}>"
        if text.startswith(mention):
            modes.add(TriggerType.DIRECT_MENTION)
            text = text[len(mention):].lstrip().lstrip(":").lstrip()

    return modes, text


class SlackTransport:
    """Connection to Slack used by the bot and its extensions."""

    def __init__(
        self,
        slack_token: Optional[str] = None,
        app_token: Optional[str] = None,
        app: Optional[App] = None,
    ):
        self.app = app if app is not None else App(
            token=slack_token, token_verification_enabled=False
        )
        self.app_token = app_token
        self.subscriptions: list[Subscription] = []
        self.handler: Optional[SocketModeHandler] = None

        def handle_message_event(event, context):
            self.dispatch(event, context.bot_user_id)

        self.app.event("message")(handle_message_event)

    def subscribe(
        self,
        trigger: Any,
        trigger_types: Iterable[TriggerType],
        on_match: Callable[[dict], Any],
    ) -> Subscription:
        """Call on_match for every message matching trigger in one of trigger_types."""
        subscription = Subscription(
            patterns=compile_trigger(trigger),
            trigger_types=frozenset(trigger_types),
            on_match=on_match,
        )
        self.subscriptions.append(subscription)
        return subscription

    def dispatch(self, event: dict, bot_user_id: Optional[str] = None) -> int:
        """
        Run every subscription that matches a message event.

        Each match fires independently; a failing callback is logged and
        does not stop the others.

        Returns:
            Number of subscriptions that matched
        """
        # Ignore bot messages (including our own) and edits, joins, etc.
        if event.get("bot_id") or event.get("subtype"):
            return 0
        if not isinstance(event.get("text"), str):
            return 0

        modes, addressed_text = addressing(event, bot_user_id)
        matched = 0

        for subscription in self.subscriptions:
            if not subscription.trigger_types & modes:
                continue

            text = event["text"]
            if TriggerType.DIRECT_MENTION in modes & subscription.trigger_types:
                text = addressed_text

            found = subscription.match(text)
            if not found:
                continue

            matched += 1
            try:
                subscription.on_match(dict(event, text=text, match=found))
            except Exception:
                logger.exception(f"Error handling message {event.get('ts')}")

        return matched

    def send(self, incoming: dict, payload: dict) -> dict:
        """Post a message into the channel (and thread) of an incoming message."""
        kwargs = dict(payload)
        kwargs["channel"] = incoming["channel"]
        if incoming.get("thread_ts"):
            kwargs.setdefault("thread_ts", incoming["thread_ts"])

        response = self.app.client.chat_postMessage(**kwargs)
        return response.data

    def list(self, resource: str, limit: int = 200, cursor: Optional[str] = None) -> dict:
        """Fetch one page of a directory listing."""
        method = getattr(self.app.client, LIST_METHODS[resource])
        response = method(limit=limit, cursor=cursor)
        return response.data

    def connect(self) -> None:
        """Open the Socket Mode connection without blocking."""
        if not self.app_token:
            raise ValueError("An app-level token is required for Socket Mode")
        # Token is first checked here rather than when the App is built
        self.app.client.auth_test()
        self.handler = SocketModeHandler(self.app, self.app_token)
        self.handler.connect()

    def disconnect(self) -> None:
        if self.handler is not None:
            self.handler.close()
            self.handler = None
