"""
Bot configuration, built from keyword options or the environment.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BOT_NAME = "KnitBot"
REQUIRED_ENV_VARS = ["SLACK_BOT_TOKEN", "SLACK_APP_TOKEN"]
TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class BotConfig:
    """Options used to construct a Bot."""
    name: str = DEFAULT_BOT_NAME
    slack_token: str = ""
    app_token: Optional[str] = None
    include_slack_logs: bool = False
    max_workers: int = 8

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "BotConfig":
        """
        Load configuration from a .env file and the process environment.

        Args:
            env_file: Path to a .env file; the nearest .env is used when omitted

        Returns:
            The loaded BotConfig

        Raises:
            ValueError: When a required variable is missing
        """
        load_dotenv(env_file)

        missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        config = cls(
            name=os.getenv("BOT_NAME") or DEFAULT_BOT_NAME,
            slack_token=os.environ["SLACK_BOT_TOKEN"],
            app_token=os.environ["SLACK_APP_TOKEN"],
            include_slack_logs=os.getenv("KNIT_INCLUDE_SLACK_LOGS", "").lower() in TRUTHY,
        )
        logger.debug(f"Loaded config for bot '{config.name}'")
        return config

    def to_options(self) -> dict:
        """Keyword options accepted by the Bot constructor."""
        return {
            "name": self.name,
            "slack_token": self.slack_token,
            "app_token": self.app_token,
            "include_slack_logs": self.include_slack_logs,
            "max_workers": self.max_workers,
        }
