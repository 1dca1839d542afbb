"""
Command-line entry point.

Loads Slack tokens from the environment, registers the extension modules
named on the command line and keeps the bot connected until interrupted:

    knit --env-file .env examples.dicebot examples.hungerbot
"""

import sys
import logging
import argparse
import threading

from .bot import Bot
from .config import BotConfig
from .errors import BotConnectionError

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Run a knit Slack bot")
    parser.add_argument(
        "extensions",
        nargs="*",
        help="Dotted paths of modules with a register(bot) function"
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to a .env file with SLACK_BOT_TOKEN and SLACK_APP_TOKEN"
    )
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Bot name, overrides BOT_NAME"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Start the bot."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = parse_args(argv)

    try:
        config = BotConfig.from_env(args.env_file)
    except ValueError as e:
        logger.error(str(e))
        return 1
    if args.name:
        config.name = args.name

    bot = Bot(**config.to_options())
    for extension in args.extensions:
        bot.use(extension)

    logger.info(f"Starting {config.name} with {len(bot.listeners)} listeners...")
    try:
        bot.connect()
    except BotConnectionError as e:
        logger.error(str(e))
        return 1

    logger.info("Bot is running! Press Ctrl+C to stop.")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        bot.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())
