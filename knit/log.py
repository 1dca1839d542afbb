"""
Prefixed loggers handed to the bot and its extensions.
"""

import logging
from typing import Union

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class PrefixedLogger(logging.LoggerAdapter):
    """Logger adapter which prepends a fixed prefix to every message."""

    def __init__(self, logger: LoggerLike, prefix: str):
        super().__init__(logger, {})
        self.prefix = prefix

    def process(self, msg, kwargs):
        return f"{self.prefix} {msg}", kwargs


def bind_logger(log: LoggerLike, prefix: str) -> PrefixedLogger:
    """
    Bind a prefix to a logger.

    Binding an already-prefixed logger nests the prefixes, so an alias
    registered to a bot logs as ``"<bot>: Alias (<name>): <message>"``.
    """
    return PrefixedLogger(log, prefix)
