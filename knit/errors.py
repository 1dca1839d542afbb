"""
Exceptions raised when talking to Slack fails.

Validation problems (bad options, wrong bot type) raise TypeError at the
point of construction or registration. Everything in this module wraps an
underlying transport failure, which is kept on ``cause``.
"""

from typing import Optional


class KnitError(Exception):
    """Base exception for failures reaching the Slack API."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class BotConnectionError(KnitError):
    """The real-time connection could not be opened."""


class MessageSendError(KnitError):
    """An outgoing message was rejected by the transport."""


class DirectoryError(KnitError):
    """A channel or user listing could not be fetched."""
